"""Domain layer: enums, exceptions, role hierarchy and propagation rules.

No I/O. Presentation maps exceptions to HTTP responses; services compose
these rules with repositories.
"""
