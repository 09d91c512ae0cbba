"""
The `database` package holds the persistence side of JurisAI: accounts and
their permissions, conversations and messages, prompt templates, and the
legal-article knowledge base.

Contents:
    - config:
        Typed settings (`Settings`) and the SQLAlchemy engine, shared
        `metadata` and `declarativeBase`.

    - entities:
        ORM models: `app_user`, `permission`, `user_permission`, `conversation`,
        `message`, `prompt_template`, `legal_article`, `legal_article_category`.

    - daos:
        One DAO class per aggregate; they take the caller's session and never commit.

    - core:
        `@transactional` service functions used by the routers (accounts,
        permissions, chat, articles, admin). They return plain dicts and raise
        `HTTPException` for expected failures.

    - helpers:
        The `@transactional` decorator and its context-variable session.
"""
