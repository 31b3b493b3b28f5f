"""Request-scoped FastAPI dependencies (identity, roles, entry access)."""
