"""Security: JWT verification for identity-provider tokens."""
