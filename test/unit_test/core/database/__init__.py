"""Unit tests for the database layer in telloom/core/database.

- Entity defaults and persisted value types (SQLModel)
- The shared repository, against a mocked session and a real database
- Query helpers of the per-table repositories

All tests use in-memory SQLite or mocks, so no external database service
is required.
"""
