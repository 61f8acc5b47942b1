# session_repair/models.py
# Record types for interview sessions, stored files and conversion tracking

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


# ============================================================================
# ENUMS
# ============================================================================

class SessionStatus(str, Enum):
    """Interview session status"""
    PROCESSING = "processing"
    UPLOADED = "uploaded"


class ConversionStatus(str, Enum):
    """Conversion tracking status"""
    COMPLETED = "completed"


class MatchConfidence(str, Enum):
    """How a converted file was matched to a session"""
    STRICT = "strict"         # Exact basename or session id prefix
    LOOSE = "loose"           # Single fallback candidate
    AMBIGUOUS = "ambiguous"   # Several fallback candidates, first one taken


class RepairResult(str, Enum):
    """Outcome of one session attempt"""
    REPAIRED = "repaired"
    REPAIRED_WITHOUT_RECORD = "repaired_without_record"
    SKIPPED_NO_VIDEO_URL = "skipped_no_video_url"
    SKIPPED_UNPARSABLE_URL = "skipped_unparsable_url"
    SKIPPED_NO_MATCH = "skipped_no_match"
    SKIPPED_INACCESSIBLE = "skipped_inaccessible"
    SKIPPED_UPDATE_FAILED = "skipped_update_failed"

    @property
    def is_repaired(self) -> bool:
        return self in (RepairResult.REPAIRED, RepairResult.REPAIRED_WITHOUT_RECORD)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string for timestamp columns"""
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# RECORDS
# ============================================================================

@dataclass
class SessionRecord:
    """Row of the interview sessions table"""
    id: str
    user_email: str
    status: str
    video_url: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SessionRecord":
        return cls(
            id=str(row["id"]),
            user_email=row.get("user_email") or "",
            status=row.get("status") or "",
            video_url=row.get("video_url"),
            updated_at=row.get("updated_at"),
        )

    @property
    def id_prefix(self) -> str:
        """First 8 characters of the session id, used for filename matching"""
        return self.id[:8]

    @property
    def email_local_part(self) -> str:
        """Text before '@' in the owner email"""
        return self.user_email.split("@")[0]


@dataclass
class StoredFile:
    """Entry returned by a storage folder listing"""
    name: str
    created_at: Optional[str] = None

    @classmethod
    def from_listing(cls, item: Dict[str, Any]) -> "StoredFile":
        return cls(name=item.get("name") or "", created_at=item.get("created_at"))


@dataclass
class ConversionRecord:
    """Row of the conversions tracking table, keyed by raw filename"""
    filename: str
    original_url: str
    converted_url: str
    status: ConversionStatus = ConversionStatus.COMPLETED
    updated_at: str = field(default_factory=utc_now_iso)

    def to_row(self) -> Dict[str, Any]:
        return {
            "filename": self.filename,
            "status": self.status.value,
            "original_url": self.original_url,
            "converted_url": self.converted_url,
            "updated_at": self.updated_at,
        }


@dataclass
class SessionOutcome:
    """Result of attempting to repair a single session"""
    session_id: str
    result: RepairResult
    reason: str = ""
    confidence: Optional[MatchConfidence] = None
    converted_url: Optional[str] = None


@dataclass
class RepairSummary:
    """Totals for one run of the repair pass"""
    candidates: int = 0
    converted_files: int = 0
    outcomes: List[SessionOutcome] = field(default_factory=list)
    uploaded_total: Optional[int] = None

    @property
    def repaired(self) -> int:
        return sum(1 for o in self.outcomes if o.result.is_repaired)

    @property
    def skipped(self) -> int:
        return len(self.outcomes) - self.repaired

    @property
    def ambiguous(self) -> int:
        return sum(1 for o in self.outcomes if o.confidence == MatchConfidence.AMBIGUOUS)

    def count(self, result: RepairResult) -> int:
        return sum(1 for o in self.outcomes if o.result == result)
