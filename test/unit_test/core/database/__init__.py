"""Unit tests for the database layer.

Covers the table registry, the collection handle (against a mocked session
factory) and the engine and Alembic helpers. Nothing here opens a real
database file.
"""
