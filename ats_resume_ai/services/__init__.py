"""Service exports."""

from .candidate_store import (
    CandidateStore,
    CandidateStoreError,
    InMemoryCandidateStore,
    SupabaseCandidateStore,
    get_candidate_store,
)
from .error_messages import USER_MESSAGES, UserMessage, user_message_for
from .upload_session import CosmeticProgress, SessionStateError, UploadSession, UploadState

__all__ = [
    "CandidateStore",
    "CandidateStoreError",
    "InMemoryCandidateStore",
    "SupabaseCandidateStore",
    "get_candidate_store",
    "USER_MESSAGES",
    "UserMessage",
    "user_message_for",
    "CosmeticProgress",
    "SessionStateError",
    "UploadSession",
    "UploadState",
]
