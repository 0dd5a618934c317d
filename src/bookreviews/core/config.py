"""
Configuration module for the Book Reviews API.

This module defines the Settings class, which loads environment variables
and provides application-wide configuration: the database URL, the address
the HTTP server listens on, logging level, CORS origins and paging defaults.

Usage:
    Import the `settings` object to access configuration throughout the project.
"""

import os
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from typing import List

load_dotenv()

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        DATABASE_URL (str): Database connection string.
        HOST (str): Interface the HTTP server binds to.
        PORT (int): Port the HTTP server listens on.
        ENVIRONMENT (str): Current environment (e.g., 'production', 'development').
        LOG_LEVEL (str): Root logging level used by the entry points.
        CORS_ORIGINS (str): Comma-separated list of allowed CORS origins.
        DEFAULT_PAGE_LIMIT (int): Page size used when a listing request gives none.
    """
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./bookreviews.db")
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "3000"))
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS: str = os.getenv("CORS_ORIGINS", "*")
    DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "10"))

    @property
    def list_cors_origins(self) -> List[str]:
        """
        Returns the list of CORS origins parsed from CORS_ORIGINS.

        Returns:
            List[str]: List of allowed origins.
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(',') if origin.strip()]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
