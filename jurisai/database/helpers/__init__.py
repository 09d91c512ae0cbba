"""
The `helpers` package provides utility functions and decorators
that support database operations and cross-cutting concerns.

Contents
--------
- transactionManagement
    - Context variable (`db_session_context`) for propagating the active session
    - `@transactional` decorator: reuses an active session or opens, commits
      and closes a new one, rolling back on errors
"""
