"""Comment and vote models."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from codelogs.database import Base
from codelogs.models.mixins import TimestampMixin


class Comment(Base, TimestampMixin):
    """Comment on a post."""

    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    author = Column(String(50), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    text = Column(Text, nullable=False)

    post = relationship("Post", back_populates="comments")


class Vote(Base, TimestampMixin):
    """Like (is_like=True) or dislike cast by one user on one post."""

    __tablename__ = "votes"
    __table_args__ = (UniqueConstraint("post_id", "username", name="uq_votes_post_user"),)

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id"), nullable=False, index=True)
    username = Column(String(50), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    is_like = Column(Boolean, nullable=False)

    post = relationship("Post", back_populates="votes")
