"""
Supabase Storage Manager for the interview video bucket.

This module provides an abstraction layer over Supabase Storage for the repair
pass: listing the converted folder and resolving public URLs for objects.
"""

import logging
from typing import Any, Dict, List, Optional

from supabase import create_client, Client

from ..models import StoredFile

logger = logging.getLogger(__name__)


class SupabaseStorageManager:
    """
    Manages read-only storage operations against one Supabase Storage bucket.

    Handles:
    - Listing files in a folder, newest first
    - Resolving public URLs for object paths
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        supabase_key: Optional[str] = None,
        bucket_name: str = 'interview-videos',
        client: Optional[Client] = None
    ):
        """
        Initialize Supabase Storage Manager.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase service role key
            bucket_name: Storage bucket name
            client: Existing Supabase client (skips client creation)
        """
        self.bucket_name = bucket_name

        if client is None:
            if not supabase_url or not supabase_key:
                raise ValueError(
                    "supabase_url and supabase_key are required when no client is passed"
                )
            client = create_client(supabase_url, supabase_key)

        self.client: Client = client

        logger.info(f"Initialized SupabaseStorageManager with bucket '{self.bucket_name}'")

    def _bucket(self):
        return self.client.storage.from_(self.bucket_name)

    def list_documents(
        self,
        prefix: str = '',
        limit: int = 1000,
        sort_column: str = 'created_at',
        sort_order: str = 'desc'
    ) -> List[Dict[str, Any]]:
        """
        List documents in a specific folder.

        Args:
            prefix: Folder prefix (e.g., 'converted')
            limit: Maximum number of results
            sort_column: Column to sort by
            sort_order: 'asc' or 'desc'

        Returns:
            list[dict]: List of file metadata dicts

        Raises:
            Exception: If listing fails
        """
        try:
            logger.info(f"Listing documents with prefix '{prefix}'")

            response = self._bucket().list(
                prefix,
                {
                    'limit': limit,
                    'sortBy': {'column': sort_column, 'order': sort_order},
                }
            )

            logger.info(f"Found {len(response)} documents")

            return response

        except Exception as e:
            logger.error(f"Failed to list documents with prefix '{prefix}': {e}")
            raise

    def list_files(self, prefix: str, limit: int = 1000) -> List[StoredFile]:
        """
        List a folder as StoredFile entries, newest first.

        Raises:
            Exception: If listing fails
        """
        return [StoredFile.from_listing(item) for item in self.list_documents(prefix, limit)]

    def get_public_url(self, storage_path: str) -> str:
        """
        Resolve the public URL for an object path.

        No request is made; the URL is derived from the project URL and bucket.

        Args:
            storage_path: Path in bucket (e.g., 'converted/alice@x.com/clip.mp4')

        Returns:
            str: Public URL
        """
        public_url = self._bucket().get_public_url(storage_path)

        # Older storage clients return {'publicURL': ...}
        if isinstance(public_url, dict):
            public_url = public_url.get('publicUrl') or public_url.get('publicURL')

        logger.debug(f"Public URL for {storage_path}: {public_url}")

        return public_url
