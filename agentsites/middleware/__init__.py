"""HTTP middleware. Applied in agentsites.main; first added = outermost."""

from agentsites.middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
