"""Pydantic schemas for API requests and responses."""

from codelogs.schemas.auth import (
    LoginResponse,
    LoginStatus,
    PasswordReset,
    RecoverRequest,
    RecoverResponse,
    RegisterResponse,
    UserLogin,
    UserRegister,
    UserSearchResult,
    UserSummary,
)
from codelogs.schemas.common import Envelope, Pagination
from codelogs.schemas.engagement import CommentCreate, CommentResponse, VoteRequest, VoteResponse
from codelogs.schemas.post import FeedResponse, PostCreated, PostResponse
from codelogs.schemas.social import FollowRequest, ProfileResponse, StatsResponse

__all__ = [
    "Envelope",
    "Pagination",
    "UserRegister",
    "UserLogin",
    "RegisterResponse",
    "LoginResponse",
    "LoginStatus",
    "RecoverRequest",
    "RecoverResponse",
    "PasswordReset",
    "UserSearchResult",
    "UserSummary",
    "PostResponse",
    "PostCreated",
    "FeedResponse",
    "FollowRequest",
    "StatsResponse",
    "ProfileResponse",
    "CommentCreate",
    "CommentResponse",
    "VoteRequest",
    "VoteResponse",
]
