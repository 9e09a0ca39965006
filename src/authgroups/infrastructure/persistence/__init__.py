"""Persistence: schema, database manager and repositories."""
