"""Post model."""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from codelogs.database import Base
from codelogs.models.mixins import TimestampMixin


class Post(Base, TimestampMixin):
    """A published code snippet with an optional file attachment."""

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    code = Column(Text, nullable=False)
    language = Column(String(50), nullable=False, index=True)
    author = Column(String(50), nullable=False, index=True)  # username
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Attachment metadata, all null when no file was uploaded
    file_url = Column(String(500), nullable=True)
    file_name = Column(String(255), nullable=True)
    file_size = Column(Integer, nullable=True)

    author_user = relationship("User", foreign_keys=[author_id])
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")
    votes = relationship("Vote", back_populates="post", cascade="all, delete-orphan")
