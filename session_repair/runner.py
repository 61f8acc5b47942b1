#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Session Repair Runner

Finds interview sessions stuck in 'processing' whose converted MP4 already
exists in storage, then:
1. Points the session at the converted file and sets status to 'uploaded'
2. Creates or updates the conversion record for the raw upload

Sessions are handled one at a time. A session that cannot be repaired is left
in 'processing' for a later run; only a failed session query or a failed
converted folder listing stops the run.
"""

import logging
from typing import List, Optional, Sequence

from .exceptions import FatalRepairError
from .filename_parser import converted_storage_path, parse_raw_video_url
from .matcher import match_converted_file
from .models import (
    ConversionRecord,
    MatchConfidence,
    RepairResult,
    RepairSummary,
    SessionOutcome,
    SessionRecord,
    SessionStatus,
    StoredFile,
    utc_now_iso,
)
from .registry import SessionRegistry
from .storage import SupabaseStorageManager
from .verifier import UrlVerifier

logger = logging.getLogger(__name__)


class SessionRepairRunner:
    """Runs one repair pass over the processing sessions"""

    def __init__(
        self,
        registry: SessionRegistry,
        storage: SupabaseStorageManager,
        verifier: UrlVerifier,
        converted_folder: str = "converted",
        list_limit: int = 1000
    ):
        self.registry = registry
        self.storage = storage
        self.verifier = verifier
        self.converted_folder = converted_folder.rstrip("/")
        self.list_limit = list_limit

    # ------------------------------------------------------------------
    # Bulk steps (failures are fatal)
    # ------------------------------------------------------------------

    def load_candidates(self) -> List[SessionRecord]:
        logger.info("[*] Finding sessions with processing status...")
        try:
            sessions = self.registry.get_sessions_by_status(SessionStatus.PROCESSING)
        except Exception as e:
            raise FatalRepairError("fetch processing sessions", str(e), cause=e) from e

        logger.info(f"[*] Found {len(sessions)} sessions in processing status")
        return sessions

    def list_converted_files(self) -> List[StoredFile]:
        logger.info(f"[*] Listing files in {self.converted_folder} folder...")
        try:
            files = self.storage.list_files(self.converted_folder, limit=self.list_limit)
        except Exception as e:
            raise FatalRepairError("list converted files", str(e), cause=e) from e

        logger.info(f"[*] Found {len(files)} files in {self.converted_folder} folder")
        return files

    # ------------------------------------------------------------------
    # Per-session repair (failures are logged and skipped)
    # ------------------------------------------------------------------

    def repair_session(self, session: SessionRecord, converted_files: Sequence[StoredFile]) -> SessionOutcome:
        """
        Attempt to repair a single session.

        Returns:
            SessionOutcome describing what happened; never raises for the
            recoverable cases (missing URL, no match, HEAD failure, write failure)
        """
        logger.info(f"[*] Processing session {session.id} for user {session.user_email}...")

        if not session.video_url:
            return self._skip(session, RepairResult.SKIPPED_NO_VIDEO_URL, "session has no video_url")

        raw_key = parse_raw_video_url(session.video_url)
        if raw_key is None:
            return self._skip(session, RepairResult.SKIPPED_UNPARSABLE_URL,
                              "could not extract raw filename pattern")

        expected_basename = raw_key.converted_basename()
        logger.info(f"[*] Looking for converted file: {expected_basename}")

        match = match_converted_file(expected_basename, session, converted_files)
        if match is None:
            return self._skip(session, RepairResult.SKIPPED_NO_MATCH, "no converted file found")

        if match.confidence != MatchConfidence.STRICT:
            logger.info(f"[*] Found possible converted file(s): {match.candidates}")

        converted_path = converted_storage_path(self.converted_folder, session.user_email, match.basename)
        converted_url = self.storage.get_public_url(converted_path)
        logger.info(f"[*] Converted URL: {converted_url}")

        check = self.verifier.check(converted_url)
        if not check.accessible:
            return self._skip(session, RepairResult.SKIPPED_INACCESSIBLE, check.reason,
                              confidence=match.confidence, converted_url=converted_url)
        logger.info("[+] Converted file is accessible")

        now = utc_now_iso()

        logger.info("[*] Updating session...")
        try:
            self.registry.mark_session_uploaded(session.id, converted_url, updated_at=now)
        except Exception as e:
            logger.error(f"[-] Error updating session {session.id}: {e}")
            return SessionOutcome(
                session_id=session.id,
                result=RepairResult.SKIPPED_UPDATE_FAILED,
                reason=str(e),
                confidence=match.confidence,
                converted_url=converted_url,
            )

        logger.info("[*] Creating/updating conversion record...")
        record = ConversionRecord(
            filename=raw_key.storage_key,
            original_url=session.video_url,
            converted_url=converted_url,
            updated_at=now,
        )
        try:
            self.registry.upsert_conversion(record)
        except Exception as e:
            # Session update already committed; keep it
            logger.error(f"[-] Error creating conversion record for {record.filename}: {e}")
            return SessionOutcome(
                session_id=session.id,
                result=RepairResult.REPAIRED_WITHOUT_RECORD,
                reason=str(e),
                confidence=match.confidence,
                converted_url=converted_url,
            )

        logger.info(f"[+] Successfully fixed session {session.id}")
        return SessionOutcome(
            session_id=session.id,
            result=RepairResult.REPAIRED,
            confidence=match.confidence,
            converted_url=converted_url,
        )

    def _skip(self, session: SessionRecord, result: RepairResult, reason: str, **extra) -> SessionOutcome:
        logger.warning(f"[!] Session {session.id}: {reason}, skipping")
        return SessionOutcome(session_id=session.id, result=result, reason=reason, **extra)

    # ------------------------------------------------------------------
    # Full pass
    # ------------------------------------------------------------------

    def count_uploaded(self) -> Optional[int]:
        """Current number of uploaded sessions, None if the query fails"""
        try:
            return self.registry.count_sessions_by_status(SessionStatus.UPLOADED)
        except Exception as e:
            logger.error(f"[-] Could not count uploaded sessions: {e}")
            return None

    def run(self) -> RepairSummary:
        """
        Execute the repair pass.

        Returns:
            RepairSummary for this run

        Raises:
            FatalRepairError: If the session query or the converted listing fails
        """
        summary = RepairSummary()

        sessions = self.load_candidates()
        summary.candidates = len(sessions)

        if not sessions:
            logger.info("[+] No sessions need fixing")
            return summary

        converted_files = self.list_converted_files()
        summary.converted_files = len(converted_files)

        for session in sessions:
            summary.outcomes.append(self.repair_session(session, converted_files))

        logger.info("[+] Session fixing completed!")

        # Runs only after every session has been attempted
        summary.uploaded_total = self.count_uploaded()
        log_summary(summary)

        return summary


def log_summary(summary: RepairSummary):
    """Log the final totals of a run"""
    logger.info("=" * 60)
    logger.info("Repair Summary:")
    logger.info(f"  Processing sessions:   {summary.candidates}")
    logger.info(f"  Converted files:       {summary.converted_files}")
    logger.info(f"  [+] Repaired:          {summary.repaired}")
    if summary.count(RepairResult.REPAIRED_WITHOUT_RECORD):
        logger.info(f"      without record:    {summary.count(RepairResult.REPAIRED_WITHOUT_RECORD)}")
    logger.info(f"  [!] Skipped:           {summary.skipped}")
    if summary.ambiguous:
        logger.info(f"  [!] Ambiguous matches: {summary.ambiguous}")
    if summary.uploaded_total is None:
        logger.info("  Total sessions now in 'uploaded' status: unknown")
    else:
        logger.info(f"  Total sessions now in 'uploaded' status: {summary.uploaded_total}")
    logger.info("=" * 60)
