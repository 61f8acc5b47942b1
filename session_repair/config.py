#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration module for the interview session repair script.
Handles environment variables, validation, and default settings.
"""

import os
import logging
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Config:
    """Configuration for the session repair pass"""

    def __init__(self, load_env: bool = True, **overrides):
        """
        Initialize configuration by loading environment variables

        Args:
            load_env: Load a local .env file before reading the environment
            **overrides: Setting values that take precedence over the environment
        """
        if load_env:
            load_dotenv()
        self._overrides = overrides
        self._load_settings()
        self._validate_settings()

    def _get(self, name: str, env_var: str, default: Optional[str] = None) -> Optional[str]:
        if name in self._overrides:
            return self._overrides[name]
        return os.getenv(env_var, default)

    def _load_settings(self):
        """Load all settings from environment variables with defaults"""

        # --- SUPABASE SETTINGS ---
        self.SUPABASE_URL = self._get("SUPABASE_URL", "SUPABASE_URL")
        self.SUPABASE_SERVICE_ROLE_KEY = self._get("SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_SERVICE_ROLE_KEY")
        self.STORAGE_BUCKET = self._get("STORAGE_BUCKET", "SUPABASE_STORAGE_BUCKET", "interview-videos")

        # --- TABLE SETTINGS ---
        self.SESSIONS_TABLE = self._get("SESSIONS_TABLE", "SESSIONS_TABLE", "interview_sessions")
        self.CONVERSIONS_TABLE = self._get("CONVERSIONS_TABLE", "CONVERSIONS_TABLE", "conversions")

        # --- STORAGE LISTING SETTINGS ---
        self.CONVERTED_FOLDER = self._get("CONVERTED_FOLDER", "CONVERTED_FOLDER", "converted")
        self.LIST_LIMIT = int(self._get("LIST_LIMIT", "CONVERTED_LIST_LIMIT", "1000"))

        # --- HTTP SETTINGS ---
        # Unset means requests applies no timeout to the HEAD check
        head_timeout = self._get("HEAD_TIMEOUT", "HEAD_TIMEOUT_SECONDS")
        self.HEAD_TIMEOUT = float(head_timeout) if head_timeout not in (None, "") else None

        # --- LOGGING ---
        self.LOG_LEVEL = str(self._get("LOG_LEVEL", "LOG_LEVEL", "INFO")).upper()

    def _validate_settings(self):
        """Validate configuration settings and raise errors for critical issues"""

        if not self.SUPABASE_URL or not self.SUPABASE_SERVICE_ROLE_KEY:
            raise ConfigurationError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment or .env file"
            )

        if not self.STORAGE_BUCKET:
            raise ConfigurationError("SUPABASE_STORAGE_BUCKET must not be empty")

        if self.LIST_LIMIT < 1:
            raise ConfigurationError("CONVERTED_LIST_LIMIT must be at least 1")

        if self.HEAD_TIMEOUT is not None and self.HEAD_TIMEOUT <= 0:
            raise ConfigurationError("HEAD_TIMEOUT_SECONDS must be greater than 0")

        if self.LOG_LEVEL not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ConfigurationError(f"Unknown LOG_LEVEL: {self.LOG_LEVEL}")

    @property
    def converted_prefix(self) -> str:
        """Converted folder with a single trailing slash, e.g. 'converted/'"""
        return self.CONVERTED_FOLDER.rstrip("/") + "/"

    def print_config(self):
        """Log current configuration in a readable format"""
        masked_key = "***" + self.SUPABASE_SERVICE_ROLE_KEY[-4:] if len(self.SUPABASE_SERVICE_ROLE_KEY) > 4 else "***"
        logger.info("=" * 60)
        logger.info("=== SESSION REPAIR CONFIGURATION ===")
        logger.info(f"Supabase URL: {self.SUPABASE_URL}")
        logger.info(f"Service role key: {masked_key}")
        logger.info(f"Storage bucket: {self.STORAGE_BUCKET}")
        logger.info(f"Tables: sessions={self.SESSIONS_TABLE}, conversions={self.CONVERSIONS_TABLE}")
        logger.info(f"Converted folder: {self.converted_prefix} (limit {self.LIST_LIMIT})")
        logger.info(f"HEAD timeout: {self.HEAD_TIMEOUT if self.HEAD_TIMEOUT is not None else 'client default'}")
        logger.info("=" * 60)


def get_config(**overrides) -> Config:
    """Create and validate a configuration instance"""
    return Config(**overrides)
