"""Application layer exports"""

from .user_record_service import UserRecordService

__all__ = ["UserRecordService"]
