"""Core: configuration, exception handlers, lifespan and rate limiting."""
