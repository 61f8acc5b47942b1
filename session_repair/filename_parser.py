"""
Raw video URL parsing.

Session video URLs point at the raw upload, e.g.

    https://<project>.supabase.co/storage/v1/object/public/interview-videos/raw/alice@x.com/abc123_1700000000_clip.webm

The segment literally equal to 'raw' is followed by the owner email and the
uploaded filename. The converted object lives at
'converted/{email}/{base}.mp4'.
"""

import posixpath
from dataclasses import dataclass
from typing import Optional

RAW_SEGMENT = "raw"
RAW_EXTENSION = ".webm"
CONVERTED_EXTENSION = ".mp4"


@dataclass(frozen=True)
class RawVideoKey:
    """Structured form of a raw upload's storage key"""
    email: str
    base: str
    extension: str

    @property
    def filename(self) -> str:
        return f"{self.base}{self.extension}"

    @property
    def storage_key(self) -> str:
        """Key used for the conversion record, e.g. 'raw/alice@x.com/clip.webm'"""
        return f"{RAW_SEGMENT}/{self.email}/{self.filename}"

    def converted_basename(self) -> str:
        """
        Expected converted filename for this upload.

        Only a '.webm' extension is swapped; any other extension is kept as is,
        so the strict match falls back to the session id prefix for it.
        """
        if self.extension == RAW_EXTENSION:
            return f"{self.base}{CONVERTED_EXTENSION}"
        return self.filename


def parse_raw_video_url(video_url: Optional[str]) -> Optional[RawVideoKey]:
    """
    Extract the raw storage key from a session video URL.

    Args:
        video_url: Public or storage URL of the raw upload

    Returns:
        RawVideoKey, or None when the URL has no 'raw' segment followed by
        non-empty email and filename segments
    """
    if not video_url:
        return None

    parts = video_url.split("/")
    try:
        raw_index = parts.index(RAW_SEGMENT)
    except ValueError:
        return None

    if raw_index >= len(parts) - 2:
        return None

    email = parts[raw_index + 1]
    filename = parts[raw_index + 2]
    if not email or not filename:
        return None

    base, extension = posixpath.splitext(filename)
    return RawVideoKey(email=email, base=base, extension=extension)


def converted_storage_path(converted_folder: str, email: str, basename: str) -> str:
    """Full object path of a converted file, e.g. 'converted/alice@x.com/clip.mp4'"""
    return f"{converted_folder.rstrip('/')}/{email}/{basename}"
