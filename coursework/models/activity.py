from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base
from ._common import utcnow, new_public_id


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("group_id", "title", name="uix_activity_group_title"),
    )

    group = relationship("Group", back_populates="activities")
    items = relationship(
        "ActivityItem",
        back_populates="activity",
        cascade="all, delete-orphan",
        order_by="ActivityItem.order_index"
    )
    submissions = relationship("ActivitySubmission", back_populates="activity", cascade="all, delete-orphan")


class ActivityItem(Base):
    """활동에 포함된 콘텐츠. 여기서는 문제 항목만 다룬다"""
    __tablename__ = "activity_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    order_index = Column(Integer, nullable=False, default=0)
    title = Column(String(255), nullable=False)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="RESTRICT"), nullable=True)

    __table_args__ = (
        UniqueConstraint("activity_id", "order_index", name="uix_activity_item_order"),
    )

    activity = relationship("Activity", back_populates="items")
    question = relationship("Question")
