"""
Database table access for sessions and conversion records.
"""

from .session_registry import SessionRegistry

__all__ = ['SessionRegistry']
