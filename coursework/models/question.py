from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
from ..database import Base
from ._common import utcnow, new_public_id


class QuestionType(str, enum.Enum):
    OPEN_ENDED = "open_ended"
    CLOSED_ENDED = "closed_ended"


class Question(Base):
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    type = Column(
        SQLEnum(QuestionType, name="question_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False
    )
    statement = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    options = relationship(
        "QuestionOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionOption.original_order",
        lazy="selectin"
    )


class QuestionOption(Base):
    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    original_order = Column(Integer, nullable=False, default=0)
    text = Column(Text, nullable=True)
    is_correct = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)

    question = relationship("Question", back_populates="options")
