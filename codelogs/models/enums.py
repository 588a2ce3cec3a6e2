"""Enums for model fields."""

from enum import Enum


class VoteAction(str, Enum):
    """Outcome of casting a vote on a post."""

    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"


class VoteDirection(str, Enum):
    """How a viewer has voted on a post."""

    LIKE = "like"
    DISLIKE = "dislike"

    @classmethod
    def from_flag(cls, is_like: bool) -> "VoteDirection":
        """Map a stored is_like flag to a direction."""
        return cls.LIKE if is_like else cls.DISLIKE
