from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Text
from sqlalchemy.orm import relationship
from ..database import Base
from ._common import utcnow, new_public_id


class QuestionSubmission(Base):
    __tablename__ = "question_submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    activity_submission_id = Column(
        Integer,
        ForeignKey("activity_submissions.id", ondelete="SET NULL"),
        nullable=True
    )
    question_option_id = Column(Integer, ForeignKey("question_options.id", ondelete="SET NULL"), nullable=True)
    answer_text = Column(Text, nullable=True)
    # None 이면 아직 채점되지 않은 답안
    score = Column(Integer, nullable=True)
    answer_feedback = Column(Text, nullable=True)
    passed = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    submitted_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    question = relationship("Question", lazy="joined")
    user = relationship("User", lazy="joined")
    option = relationship("QuestionOption", lazy="joined")
