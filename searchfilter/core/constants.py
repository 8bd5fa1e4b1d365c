"""Core constants: the filtered route and the header names the filter rewrites."""

# The only route whose responses are filtered
SEARCH_METHOD = "POST"
SEARCH_PATH = "/_matrix/client/v3/user_directory/search"

# Request content type required before a response body is parsed
JSON_CONTENT_TYPE = "application/json"

# Response Content-Encoding values that mean "not compressed" ("" = header absent)
IDENTITY_ENCODINGS = ("", "identity")

HEADER_CONTENT_LENGTH = "content-length"
HEADER_CONTENT_ENCODING = "content-encoding"
HEADER_CONTENT_TYPE = "content-type"
HEADER_LAST_MODIFIED = "last-modified"

HEALTH_PATH = "/_searchfilter/health"
