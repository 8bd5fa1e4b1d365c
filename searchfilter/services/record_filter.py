"""Record filter: drops user directory entries whose user ID is not allow-listed."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pydantic import ValidationError

from searchfilter.domain.exceptions import (
    ConfigurationException,
    DecodeException,
    EncodeException,
)
from searchfilter.schemas.search import MatrixSearchResult, MatrixUser

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilterConfig:
    """Per-middleware filter options. Immutable; shared by all requests."""

    user_id_pattern: re.Pattern[str]
    preserve_last_modified: bool = False

    @classmethod
    def from_options(
        cls, user_id_regex: str, preserve_last_modified: bool = False
    ) -> FilterConfig:
        """Compile user_id_regex. Raises ConfigurationException if it is not a valid pattern."""
        try:
            pattern = re.compile(user_id_regex)
        except re.error as e:
            raise ConfigurationException(
                f"error compiling regex {user_id_regex!r}: {e}",
                option="user_id_regex",
            ) from e
        return cls(user_id_pattern=pattern, preserve_last_modified=preserve_last_modified)

    def allows(self, user_id: str) -> bool:
        """True if the whole user ID matches the pattern."""
        return self.user_id_pattern.fullmatch(user_id) is not None


def retain_allowed(users: list[MatrixUser], config: FilterConfig) -> list[MatrixUser]:
    """Compact users in place to those allowed by config, preserving order."""
    count = 0
    for user in users:
        if config.allows(user.user_id):
            users[count] = user
            count += 1
    del users[count:]
    return users


def decode_search_result(body: bytes) -> MatrixSearchResult:
    """Parse body as a search result. Raises DecodeException if it is not one."""
    try:
        return MatrixSearchResult.model_validate_json(body)
    except ValidationError as e:
        logger.debug("unable to decode JSON body: %s", e)
        raise DecodeException(f"Unable to decode search result: {e.error_count()} error(s)") from e


def encode_search_result(result: MatrixSearchResult) -> bytes:
    """Serialize result as compact JSON. Raises EncodeException on failure."""
    try:
        return result.model_dump_json(exclude_none=True).encode()
    except (ValueError, TypeError) as e:
        logger.debug("unable to encode JSON body: %s", e)
        raise EncodeException(f"Unable to encode search result: {e}") from e


def filter_response(body: bytes, config: FilterConfig) -> bytes:
    """Decode a search result, drop disallowed users and re-encode it.

    `limited` is passed through as-is even when users were dropped.

    Raises:
        DecodeException: body is not a valid search result.
        EncodeException: filtered result could not be serialized.
    """
    result = decode_search_result(body)
    total = len(result.results)
    retain_allowed(result.results, config)
    logger.debug("kept %d of %d search results", len(result.results), total)
    return encode_search_result(result)
