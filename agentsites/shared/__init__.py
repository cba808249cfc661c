"""Shared helpers: telemetry and cross-cutting utilities.

Used by domain, application, and infrastructure. No business logic.
"""

from agentsites.shared.utils import ensure_utc, generate_cuid, utc_now

__all__ = [
    "generate_cuid",
    "utc_now",
    "ensure_utc",
]
