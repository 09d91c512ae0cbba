"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

The `daos` package provides the Data Access Layer for the application.
It encapsulates all interactions with SQLAlchemy ORM entities, providing
clean CRUD APIs for the service layer while hiding direct query details.

Conventions
-----------
- SQLAlchemy 2.0 typed mappings (Mapped[...] / mapped_column)
- Session lifecycle (open/commit/rollback) is handled by callers
- DAOs surface exceptions so upper layers decide error policy

Contents
--------
- UserDao
    Creates users with password hashing, fetches them by id or email, and
    updates status, password and profile fields.

- PermissionDao
    Seeds the permission catalogue and reads/replaces the permission links of a user.

- ConversationDao
    Creates conversations, lists them per user (newest first), and renames,
    touches or deletes them, always scoped to the owner.

- MessagesDao
    Appends messages with a per-conversation `sequence` and reads them in order.

- PromptTemplateDao
    CRUD for prompt templates and the published-by-name lookup used by the chat.

- LegalArticleDao
    Filtered and paginated article queries, the carousel, category tags and CRUD.

Notes
-----
- Entities live under `jurisai.database.entities.*` (portable UUID + UTC).
- Service layer (`database/core`) composes DAOs to implement business workflows.
"""
