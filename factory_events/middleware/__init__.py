"""HTTP middleware: request size limit and request ID.

Applied in main app; order matters (first added = outermost).
Import and use from factory_events.main.
"""

from factory_events.middleware.request_id import RequestIDMiddleware
from factory_events.middleware.request_size_limit import RequestSizeLimitMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
]
