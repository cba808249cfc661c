"""Application layer: services, use cases, and DTOs."""
