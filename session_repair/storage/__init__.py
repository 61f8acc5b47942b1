"""
Read-only Supabase Storage access for the interview video bucket.
"""

from .storage_manager import SupabaseStorageManager

__all__ = ['SupabaseStorageManager']
