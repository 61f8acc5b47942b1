# session_repair/matcher.py
# Matches a session to a file in the converted folder listing

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .filename_parser import CONVERTED_EXTENSION
from .models import MatchConfidence, SessionRecord, StoredFile

logger = logging.getLogger(__name__)


@dataclass
class ConvertedMatch:
    """A converted file chosen for a session"""
    basename: str
    confidence: MatchConfidence
    candidates: List[str] = field(default_factory=list)

    @property
    def is_ambiguous(self) -> bool:
        return self.confidence == MatchConfidence.AMBIGUOUS


def find_strict_match(
    expected_basename: str,
    session: SessionRecord,
    converted_files: Sequence[StoredFile]
) -> Optional[ConvertedMatch]:
    """
    Exact basename or session id prefix match.

    The returned basename is always the expected one, even when the hit came
    from the id prefix, because the converted object is addressed by the
    name derived from the raw upload.
    """
    id_prefix = session.id_prefix
    for stored in converted_files:
        if stored.name == expected_basename or (id_prefix and id_prefix in stored.name):
            return ConvertedMatch(
                basename=expected_basename,
                confidence=MatchConfidence.STRICT,
                candidates=[stored.name],
            )
    return None


def find_loose_matches(session: SessionRecord, converted_files: Sequence[StoredFile]) -> List[str]:
    """Names of MP4 files containing the email local part or the session id prefix"""
    needles = [n for n in (session.email_local_part, session.id_prefix) if n]
    if not needles:
        return []

    return [
        stored.name
        for stored in converted_files
        if CONVERTED_EXTENSION in stored.name and any(n in stored.name for n in needles)
    ]


def match_converted_file(
    expected_basename: str,
    session: SessionRecord,
    converted_files: Sequence[StoredFile]
) -> Optional[ConvertedMatch]:
    """
    Find the converted file for a session, strict match first.

    Falls back to the loose search when nothing matches strictly. The first
    loose candidate in listing order wins; several candidates mark the match
    as ambiguous.

    Returns:
        ConvertedMatch, or None when neither strategy finds a file
    """
    strict = find_strict_match(expected_basename, session, converted_files)
    if strict:
        return strict

    candidates = find_loose_matches(session, converted_files)
    if not candidates:
        return None

    confidence = MatchConfidence.AMBIGUOUS if len(candidates) > 1 else MatchConfidence.LOOSE
    if confidence == MatchConfidence.AMBIGUOUS:
        logger.warning(
            f"[!] Ambiguous match for session {session.id}: {len(candidates)} candidates "
            f"{candidates}, using '{candidates[0]}'"
        )

    return ConvertedMatch(basename=candidates[0], confidence=confidence, candidates=candidates)
