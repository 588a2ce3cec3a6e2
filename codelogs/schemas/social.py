"""Follow graph and profile schemas."""

from datetime import datetime

from pydantic import BaseModel

from codelogs.schemas.auth import UserSummary
from codelogs.schemas.common import Envelope


class FollowRequest(BaseModel):
    """Follow or unfollow target."""

    username: str | None = None


class FollowResponse(Envelope):
    following: str


class UnfollowResponse(Envelope):
    unfollowed: str


class UserStats(BaseModel):
    """Counts recomputed on every request."""

    posts: int = 0
    followers: int = 0
    following: int = 0


class StatsResponse(Envelope):
    username: str
    stats: UserStats


class FollowUser(UserSummary):
    """A follower or followee with their own counts."""

    stats: UserStats


class FollowersResponse(Envelope):
    username: str
    count: int
    followers: list[FollowUser]


class FollowingResponse(Envelope):
    username: str
    count: int
    following: list[FollowUser]


class ProfileStats(UserStats):
    likes: int = 0


class Profile(BaseModel):
    username: str
    email: str
    profile_picture: str | None
    created_at: datetime
    stats: ProfileStats
    is_following: bool


class ProfileResponse(Envelope):
    profile: Profile
