"""Core infrastructure: configuration, database and middleware."""
