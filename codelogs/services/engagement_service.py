"""Engagement service: comments and like/dislike votes on posts."""

import logging
from dataclasses import dataclass

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from codelogs.models.engagement import Comment, Vote
from codelogs.models.enums import VoteAction, VoteDirection
from codelogs.models.post import Post
from codelogs.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class VoteOutcome:
    action: VoteAction
    is_like: bool


class EngagementService:
    """Service for comments and votes."""

    def __init__(self, db: Session):
        self.db = db

    def _get_post(self, post_id: int) -> Post:
        post = self.db.query(Post).filter(Post.id == post_id).first()
        if not post:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found.")
        return post

    def add_comment(self, post_id: int, author: User, text: str | None) -> Comment:
        """Add a comment to an existing post. Text is stored trimmed."""
        text = (text or "").strip()
        if not text:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Comment text is required."
            )
        self._get_post(post_id)

        comment = Comment(post_id=post_id, author=author.username, user_id=author.id, text=text)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)

        logger.info(f"{author.username} commented on post {post_id}")
        return comment

    def delete_comment(self, comment_id: int, requester: User) -> None:
        """Delete a comment. Only its author may do so."""
        comment = self.db.query(Comment).filter(Comment.id == comment_id).first()
        if not comment:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Comment not found."
            )
        if comment.author != requester.username:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only delete your own comments.",
            )

        self.db.delete(comment)
        self.db.commit()
        logger.info(f"{requester.username} deleted comment {comment_id}")

    def list_comments(self, post_id: int) -> list[Comment]:
        """Comments on a post, newest first."""
        self._get_post(post_id)
        return (
            self.db.query(Comment)
            .filter(Comment.post_id == post_id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )

    def vote(self, post_id: int, voter: User, is_like: bool) -> VoteOutcome:
        """Cast a like or dislike.

        No vote -> created. Same direction again -> removed. Opposite
        direction -> updated in place.
        """
        self._get_post(post_id)

        existing = self._find_vote(post_id, voter.username)

        if existing:
            if existing.is_like == is_like:
                self.db.delete(existing)
                self.db.commit()
                logger.info(f"{voter.username} removed vote on post {post_id}")
                return VoteOutcome(action=VoteAction.REMOVED, is_like=is_like)

            existing.is_like = is_like
            self.db.commit()
            logger.info(f"{voter.username} changed vote on post {post_id} to {is_like}")
            return VoteOutcome(action=VoteAction.UPDATED, is_like=is_like)

        vote = Vote(post_id=post_id, username=voter.username, user_id=voter.id, is_like=is_like)
        self.db.add(vote)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A vote for this post is already being recorded.",
            ) from None

        logger.info(f"{voter.username} voted {is_like} on post {post_id}")
        return VoteOutcome(action=VoteAction.CREATED, is_like=is_like)

    def vote_counts(self, post_id: int, viewer: str | None = None) -> dict:
        """Like and dislike totals plus the viewer's own vote, if any."""
        self._get_post(post_id)
        votes = self.db.query(Vote.id).filter(Vote.post_id == post_id)

        user_vote = None
        if viewer:
            mine = self._find_vote(post_id, viewer)
            if mine is not None:
                user_vote = VoteDirection.from_flag(mine.is_like)

        return {
            "like_count": votes.filter(Vote.is_like.is_(True)).count(),
            "dislike_count": votes.filter(Vote.is_like.is_(False)).count(),
            "user_vote": user_vote,
        }

    def _find_vote(self, post_id: int, username: str) -> Vote | None:
        return (
            self.db.query(Vote)
            .filter(Vote.post_id == post_id, Vote.username == username)
            .first()
        )
