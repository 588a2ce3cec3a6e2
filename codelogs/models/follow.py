"""Follow edge model."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, UniqueConstraint

from codelogs.database import Base
from codelogs.models.mixins import TimestampMixin


class Follow(Base, TimestampMixin):
    """Directed edge: ``follower`` sees ``following``'s posts in their feed."""

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower", "following", name="uq_follows_pair"),
        CheckConstraint("follower <> following", name="ck_follows_not_self"),
    )

    id = Column(Integer, primary_key=True, index=True)
    follower = Column(String(50), nullable=False, index=True)
    follower_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    following = Column(String(50), nullable=False, index=True)
    following_id = Column(Integer, ForeignKey("users.id"), nullable=False)
