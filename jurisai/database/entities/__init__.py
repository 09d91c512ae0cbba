"""
Entities Package — SQLAlchemy 2.0 ORM Models (UUID + UTC)
==========================================================

The `entities` package defines the ORM models of the application, mapping
database tables to Python classes using SQLAlchemy 2.0-typed mappings.
These classes form the persistence backbone and are consumed by DAOs
(`daos` package).

Tech Stack & Conventions
------------------------
- Portable `Uuid` primary keys (native on PostgreSQL, CHAR(32) on SQLite)
- Timezone-aware timestamps (UTC)
- SQLAlchemy 2.0 style `Mapped[...]` + `mapped_column(...)`
- Plain foreign keys; relations are resolved by DAO queries

Contents
--------
- User (`app_user`): credentials, role, status, profile image
- Permission (`permission`) and UserPermission (`user_permission`)
- Conversation (`conversation`): owned by one user, titled
- Message (`message`): role-tagged, append-only, ordered by `sequence`
- PromptTemplate (`prompt_template`): admin-curated system prompts
- LegalArticle (`legal_article`) and ArticleCategory (`legal_article_category`)

Importing this package registers every table on the shared metadata.
"""

from jurisai.database.entities.user import User, Role, UserStatus, DEFAULT_PROFILE_IMAGE
from jurisai.database.entities.permission import Permission, PermissionName, UserPermission
from jurisai.database.entities.conversations import Conversation, DEFAULT_CONVERSATION_TITLE
from jurisai.database.entities.messages import Message, MessageRole
from jurisai.database.entities.prompt_template import PromptTemplate, PromptStatus, GENERAL_ASSISTANT_PROMPT_NAME
from jurisai.database.entities.legal_article import LegalArticle, ArticleCategory
