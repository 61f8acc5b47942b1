#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Fix interview sessions stuck in "processing" status.

This script will:
1. Find all sessions with status "processing"
2. Check if corresponding converted MP4 files exist in Supabase Storage
3. Update session status to "uploaded" and video_url to the converted MP4 URL
4. Create/update conversion records accordingly

Usage:
    python fix_existing_sessions.py
    fix-existing-sessions

Exit codes:
    0 - run completed (including when nothing needed fixing)
    1 - fatal error (session query or storage listing failed, bad configuration,
        or an unexpected exception)
"""

import logging
import sys
from typing import Optional

from supabase import create_client

from .config import Config
from .exceptions import SessionRepairError
from .models import RepairSummary
from .registry import SessionRegistry
from .runner import SessionRepairRunner
from .storage import SupabaseStorageManager
from .verifier import UrlVerifier

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def fix_existing_sessions(
    config: Optional[Config] = None,
    registry: Optional[SessionRegistry] = None,
    storage: Optional[SupabaseStorageManager] = None,
    verifier: Optional[UrlVerifier] = None
) -> RepairSummary:
    """
    Run one repair pass.

    Collaborators that are not passed in are built from the configuration,
    sharing a single Supabase client.

    Raises:
        FatalRepairError: If the session query or the converted listing fails
        ConfigurationError: If required settings are missing
    """
    if config is None:
        config = Config()

    if registry is None or storage is None:
        client = create_client(config.SUPABASE_URL, config.SUPABASE_SERVICE_ROLE_KEY)
        if registry is None:
            registry = SessionRegistry(
                client,
                sessions_table=config.SESSIONS_TABLE,
                conversions_table=config.CONVERSIONS_TABLE,
            )
        if storage is None:
            storage = SupabaseStorageManager(bucket_name=config.STORAGE_BUCKET, client=client)

    owns_verifier = verifier is None
    if owns_verifier:
        verifier = UrlVerifier(timeout=config.HEAD_TIMEOUT)

    runner = SessionRepairRunner(
        registry=registry,
        storage=storage,
        verifier=verifier,
        converted_folder=config.CONVERTED_FOLDER,
        list_limit=config.LIST_LIMIT,
    )

    try:
        return runner.run()
    finally:
        if owns_verifier:
            verifier.close()


def main() -> int:
    """Entry point; returns the process exit code"""
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stdout)

    try:
        config = Config()
        logging.getLogger().setLevel(config.LOG_LEVEL)
        config.print_config()

        fix_existing_sessions(config)

    except SessionRepairError as e:
        logger.error(f"[-] Script failed: {e}")
        return 1
    except Exception as e:
        logger.exception(f"[-] Script error: {e}")
        return 1

    logger.info("[+] Script completed successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
