"""HTTP middleware: user directory search filter.

Applied in main app. Import and use from searchfilter.main.
"""

from searchfilter.middleware.intercepted_response import InterceptedResponse
from searchfilter.middleware.search_filter import MatrixSearchFilterMiddleware

__all__ = [
    "InterceptedResponse",
    "MatrixSearchFilterMiddleware",
]
