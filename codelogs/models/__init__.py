"""SQLAlchemy models."""

from codelogs.models.engagement import Comment, Vote
from codelogs.models.follow import Follow
from codelogs.models.post import Post
from codelogs.models.user import User, UserSession

__all__ = [
    "User",
    "UserSession",
    "Post",
    "Follow",
    "Comment",
    "Vote",
]
