"""Identifier generators (CUID2 primary keys)."""

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new collision-resistant CUID2 string.

    Used as the default primary key for every table, so rows inserted on a
    branch site during propagation never reuse the master row's identifier.
    """
    value = _cuid()
    if not isinstance(value, str):
        raise TypeError(f"cuid generator returned {type(value).__name__}, expected str")
    return value
