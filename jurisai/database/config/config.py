"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Centralized, strongly-typed application configuration using:
- Pydantic v2 `BaseSettings` for environment-driven values
- `pydantic-settings` v2 for `.env` loading and model config

Load Order & Behavior
---------------------
- Values are read from the environment; if not present, `.env` is used.
- Missing required fields raise a validation error at import time.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from jurisai.database.config.config import settings

# Example
secret = settings.SECRET_KEY
openai_model = settings.OPEN_AI_MODEL

Security
--------
- Never commit secrets or the `.env` file to source control.
- Prefer runtime environment variables in production (K8s/Secrets Manager/etc.).
"""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables
    or a `.env` file. Provides strongly typed access to environment values.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: Optional[str] = Field(None, description="Full SQLAlchemy URL. When set, the DB_* parts are ignored.")
    DB_DRIVER_NAME: str = Field("postgresql+psycopg2", description="Database driver (e.g., `postgresql+psycopg2`).")
    DB_USERNAME: Optional[str] = Field(None, description="Database username credential.")
    DB_PASSWORD: Optional[str] = Field(None, description="Database password credential.")
    DB_HOST: Optional[str] = Field(None, description="Hostname or IP address of the database server.")
    DB_PORT: Optional[int] = Field(None, description="Port of the database server.")
    DB_DATABASE_NAME: Optional[str] = Field(None, description="Name of the application’s database.")

    # Session
    SECRET_KEY: str = Field(..., description="Secret key for signing session tokens.")
    ALGORITHM: str = Field("HS256", description="JWT signing algorithm.")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(7 * 24 * 60, description="Session token lifetime in minutes (7 days).")
    COOKIE_NAME: str = Field("auth_token", description="Name of the http-only session cookie.")
    COOKIE_SECURE: bool = Field(False, description="Send the session cookie over HTTPS only.")

    # HTTP
    FRONTEND_URL: str = Field("http://localhost:5173", description="Allowed CORS origin of the frontend.")
    API_PREFIX: str = Field("/api/v1", description="Versioned prefix of the HTTP API.")

    # LLM
    API_KEY: str = Field(..., description="OpenAI API key.")
    OPEN_AI_MODEL: str = Field("gpt-4.1-mini-2025-04-14", description="OpenAI chat model name.")

    # Uploads & object storage
    UPLOAD_DIR: str = Field("uploads", description="Local directory for temporary uploads.")
    AWS_ACCESS_KEY: Optional[str] = Field(None, description="AWS access key ID.")
    AWS_SECRET_KEY: Optional[str] = Field(None, description="AWS secret access key.")
    REGION: str = Field("eu-west-3", description="AWS region name.")
    BUCKET_NAME: Optional[str] = Field(None, description="S3 bucket holding profile images.")
    PROFILE_IMAGE_FOLDER: str = Field("juris-ai-users", description="Key prefix for profile images.")

    # Runtime
    INIT_MODE: str = Field("runtime", description="If 'runtime', create tables and seed permissions at startup.")
    LOG_LEVEL: str = Field("INFO", description="Root logging level.")

# Singleton instance of Settings, ready to be imported across the app
settings = Settings()
"""Defines a Settings object that contains the contents of the .env file"""
