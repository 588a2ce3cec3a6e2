"""Social graph service: follow edges, follower lists, stats and profiles."""

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from codelogs.models.engagement import Vote
from codelogs.models.follow import Follow
from codelogs.models.post import Post
from codelogs.models.user import User
from codelogs.services.auth import get_user_by_username

logger = logging.getLogger(__name__)


class SocialGraphService:
    """Service for follow relationships and the counts derived from them."""

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, username: str) -> User:
        """Get a user by username or raise 404."""
        user = get_user_by_username(self.db, username)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
        return user

    def follow(self, follower: User, username: str | None) -> Follow:
        """Create the edge follower -> username."""
        if not username:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Username is required."
            )
        if username == follower.username:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot follow yourself."
            )

        target = self.get_user(username)

        if self.is_following(follower.username, username):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"You are already following {username}.",
            )

        edge = Follow(
            follower=follower.username,
            follower_id=follower.id,
            following=target.username,
            following_id=target.id,
        )
        self.db.add(edge)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"You are already following {username}.",
            ) from None
        self.db.refresh(edge)

        logger.info(f"{follower.username} followed {username}")
        return edge

    def unfollow(self, follower: User, username: str | None) -> None:
        """Remove the edge follower -> username; 404 if it does not exist."""
        if not username:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Username is required."
            )

        deleted = (
            self.db.query(Follow)
            .filter(Follow.follower == follower.username, Follow.following == username)
            .delete()
        )
        self.db.commit()

        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"You are not following {username}.",
            )
        logger.info(f"{follower.username} unfollowed {username}")

    def is_following(self, follower: str | None, following: str) -> bool:
        """Whether ``follower`` follows ``following``. Anonymous viewers and self never do."""
        if not follower or follower == following:
            return False
        return (
            self.db.query(Follow.id)
            .filter(Follow.follower == follower, Follow.following == following)
            .first()
            is not None
        )

    def followers(self, username: str) -> list[dict]:
        """Users who follow ``username``, with their own stats."""
        self.get_user(username)
        users = (
            self.db.query(User)
            .join(Follow, Follow.follower_id == User.id)
            .filter(Follow.following == username)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
            .all()
        )
        return [self._with_stats(user) for user in users]

    def following(self, username: str) -> list[dict]:
        """Users ``username`` follows, with their own stats."""
        self.get_user(username)
        users = (
            self.db.query(User)
            .join(Follow, Follow.following_id == User.id)
            .filter(Follow.follower == username)
            .order_by(Follow.created_at.desc(), Follow.id.desc())
            .all()
        )
        return [self._with_stats(user) for user in users]

    def stats(self, username: str) -> dict:
        """Post, follower and following counts; 404 for unknown users."""
        self.get_user(username)
        return self._count(username)

    def profile(self, username: str, viewer: str | None = None) -> dict:
        """Public profile with stats and whether ``viewer`` follows it."""
        user = self.get_user(username)
        stats = self._count(username)
        stats["likes"] = (
            self.db.query(Vote.id)
            .join(Post, Post.id == Vote.post_id)
            .filter(Post.author == username, Vote.is_like.is_(True))
            .count()
        )
        return {
            "username": user.username,
            "email": user.email,
            "profile_picture": user.profile_picture,
            "created_at": user.created_at,
            "stats": stats,
            "is_following": self.is_following(viewer, username),
        }

    def _count(self, username: str) -> dict:
        return {
            "posts": self.db.query(Post.id).filter(Post.author == username).count(),
            "followers": self.db.query(Follow.id).filter(Follow.following == username).count(),
            "following": self.db.query(Follow.id).filter(Follow.follower == username).count(),
        }

    def _with_stats(self, user: User) -> dict:
        entry = {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "profile_picture": user.profile_picture,
        }
        # Stats are auxiliary here; a failure leaves zeros instead of failing the list
        try:
            entry["stats"] = self._count(entry["username"])
        except SQLAlchemyError as e:
            logger.warning(f"Could not load stats for {entry['username']}: {e}")
            self.db.rollback()
            entry["stats"] = {"posts": 0, "followers": 0, "following": 0}
        return entry
