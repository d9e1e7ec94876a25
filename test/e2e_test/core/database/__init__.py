"""End-to-end tests for the database layer.

Every test here runs against a real SQLite file created under pytest's
tmp_path, through aiosqlite:

- Collection operations and transactions
- Name-based table access through the registry
- Alembic migrations with the packaged environment
"""
