"""
API Package — FastAPI Routers • Models • Session Utils • LLM Pipeline • Uploads & S3
====================================================================================

Mission
-------
This package defines the backend's HTTP interface and its support stack:
FastAPI routing, cookie-held JWT sessions, the permission gate, document
ingestion, profile-image storage on S3, and the LangChain chat pipeline of the
legal assistant.

Contents
--------
- user_routes
    Accounts and session: signup, login, auth-status, logout, profile and
    status updates, password verification/change, account deletion.

- chat_routes
    Conversations (list, create, read, delete) and messages. Sending a message
    stores it, calls the model and stores the reply; the first message of a
    conversation also produces its title.

- document_analysis_routes
    Upload a TXT/PDF/DOCX document and get an answer grounded on its text.

- article_routes
    Public listing of legal articles (carousel or paginated search), categories,
    and permission-gated writes.

- admin_routes
    Dashboard, user management, permission assignment, prompt templates and
    the articles overview; every route is behind a permission check.

- dependencies
    `get_auth_context` (cookie → JWT → user + permissions from storage) and
    `check_permission(...)` (any-of permission gate).

- models
    Pydantic request contracts (422 on malformed bodies).

- utils
    JWT helpers, session cookie helpers, `InvalidSessionError`, and the
    `internal_error` wrapper for unexpected failures.

- llm_pipeline
    `LLM_Pipeline`: title generation, prompt assembly, chat completion with a
    fallback reply, and document Q&A.

- prompt_utilities
    Upload persistence, text extraction (pypdf, python-docx) and prompt builders.

- aws_bucket_funcs
    S3 client and profile-image upload/delete helpers (module: aws_bucket_funcs/funcs.py).

Operational Notes
-----------------
- Security: auth via an HttpOnly session cookie (JWT). Never log secrets.
- Errors: expected failures are `HTTPException`s raised by the service layer;
  anything else is logged and returned as a 500 `{message, cause}`.
"""
