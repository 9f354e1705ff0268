from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Text, BigInteger, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
from ..database import Base
from ._common import utcnow, new_public_id


class ActivitySubmissionStatus(str, enum.Enum):
    CREATED = "created"
    PENDING = "pending"
    APPROVED = "approved"
    REPROVED = "reproved"


class ActivitySubmission(Base):
    __tablename__ = "activity_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        SQLEnum(
            ActivitySubmissionStatus,
            name="activity_submission_status",
            values_callable=lambda e: [m.value for m in e]
        ),
        nullable=False,
        default=ActivitySubmissionStatus.CREATED
    )
    notes = Column(Text, nullable=True)
    feedback_notes = Column(Text, nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    reviewed_by_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # 한 학생은 활동당 하나의 제출물만 가진다
    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uix_activity_submission_activity_user"),
    )

    activity = relationship("Activity", back_populates="submissions", lazy="joined")
    user = relationship("User", back_populates="activity_submissions", foreign_keys=[user_id], lazy="joined")
    reviewer = relationship("User", foreign_keys=[reviewed_by_id], lazy="joined")
    attachments = relationship(
        "ActivitySubmissionAttachment",
        back_populates="submission",
        cascade="all, delete-orphan"
    )


class StoredFile(Base):
    __tablename__ = "files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    key = Column(String(1024), unique=True, nullable=False)
    filename = Column(String(255), nullable=False)
    content_type = Column(String(255), nullable=False)
    size_bytes = Column(BigInteger, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    uploaded_by_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)


class ActivitySubmissionAttachment(Base):
    __tablename__ = "activity_submission_attachments"

    activity_submission_id = Column(
        Integer,
        ForeignKey("activity_submissions.id", ondelete="CASCADE"),
        primary_key=True
    )
    file_id = Column(Integer, ForeignKey("files.id", ondelete="RESTRICT"), primary_key=True)

    submission = relationship("ActivitySubmission", back_populates="attachments")
    file = relationship("StoredFile", lazy="joined")
