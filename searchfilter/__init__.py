"""Matrix user-directory search filter: ASGI middleware and forwarding service."""
