# session_repair/exceptions.py
# Error taxonomy for the repair pass

from typing import Optional


class SessionRepairError(Exception):
    """Base class for errors raised by the repair script"""


class ConfigurationError(SessionRepairError, ValueError):
    """Required settings are missing or invalid"""


class FatalRepairError(SessionRepairError):
    """
    A bulk operation failed and the whole run must stop.

    Raised when the processing-session query or the converted folder listing
    fails. No session is modified after this is raised.
    """

    def __init__(self, stage: str, message: str, cause: Optional[BaseException] = None):
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage}: {message}")
