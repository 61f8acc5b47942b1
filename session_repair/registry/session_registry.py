# session_repair/registry/session_registry.py
# Table access for interview sessions and conversion tracking

import logging
from typing import List, Optional

from supabase import Client

from ..models import ConversionRecord, SessionRecord, SessionStatus, utc_now_iso

logger = logging.getLogger(__name__)


class SessionRegistry:
    """
    Reads and writes the interview sessions and conversions tables
    through the Supabase client.

    Every method logs a failure with context and re-raises the client error;
    the caller decides whether it is fatal.
    """

    def __init__(
        self,
        client: Client,
        sessions_table: str = "interview_sessions",
        conversions_table: str = "conversions"
    ):
        self.client = client
        self.sessions_table = sessions_table
        self.conversions_table = conversions_table
        logger.info(
            f"[+] Session Registry initialized "
            f"(sessions={sessions_table}, conversions={conversions_table})"
        )

    def get_sessions_by_status(self, status: SessionStatus) -> List[SessionRecord]:
        """
        Fetch all sessions with the given status

        Args:
            status: Session status to filter on

        Returns:
            List of session records
        """
        try:
            response = (
                self.client.table(self.sessions_table)
                .select("*")
                .eq("status", status.value)
                .execute()
            )
            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} sessions with status '{status.value}'")
            return [SessionRecord.from_row(row) for row in rows]

        except Exception as e:
            logger.error(f"Failed to fetch sessions with status '{status.value}': {e}")
            raise

    def count_sessions_by_status(self, status: SessionStatus) -> int:
        """
        Count sessions with the given status

        Returns:
            Number of matching rows at the time of the query
        """
        try:
            response = (
                self.client.table(self.sessions_table)
                .select("id", count="exact")
                .eq("status", status.value)
                .execute()
            )
            if response.count is not None:
                return response.count
            return len(response.data or [])

        except Exception as e:
            logger.error(f"Failed to count sessions with status '{status.value}': {e}")
            raise

    def mark_session_uploaded(
        self,
        session_id: str,
        video_url: str,
        updated_at: Optional[str] = None
    ) -> None:
        """
        Point a session at its converted video and set status to uploaded

        Args:
            session_id: Session identifier
            video_url: Public URL of the converted video
            updated_at: ISO timestamp (defaults to now, UTC)
        """
        try:
            (
                self.client.table(self.sessions_table)
                .update({
                    "video_url": video_url,
                    "status": SessionStatus.UPLOADED.value,
                    "updated_at": updated_at or utc_now_iso(),
                })
                .eq("id", session_id)
                .execute()
            )
            logger.debug(f"Session {session_id} marked as uploaded")

        except Exception as e:
            logger.error(f"Failed to update session {session_id}: {e}")
            raise

    def upsert_conversion(self, record: ConversionRecord) -> None:
        """
        Insert or replace the conversion record for a raw filename

        Args:
            record: Conversion record; 'filename' is the conflict key
        """
        try:
            (
                self.client.table(self.conversions_table)
                .upsert(record.to_row(), on_conflict="filename")
                .execute()
            )
            logger.debug(f"Conversion record upserted for {record.filename}")

        except Exception as e:
            logger.error(f"Failed to upsert conversion record for {record.filename}: {e}")
            raise
