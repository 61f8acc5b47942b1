"""
Repair pass for interview sessions stuck in 'processing' status.
"""

from .fix_sessions import fix_existing_sessions
from .runner import SessionRepairRunner

__all__ = ['fix_existing_sessions', 'SessionRepairRunner']
