from sqlalchemy import Column, String, DateTime, Boolean, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from passlib.context import CryptContext
import enum
from ..database import Base
from ._common import utcnow, new_public_id

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    REGULAR = "regular"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(
        SQLEnum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.REGULAR
    )
    avatar_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    memberships = relationship("GroupMember", back_populates="user", foreign_keys="GroupMember.user_id")
    activity_submissions = relationship(
        "ActivitySubmission",
        back_populates="user",
        foreign_keys="ActivitySubmission.user_id"
    )

    def set_password(self, password: str):
        """비밀번호 해싱"""
        if not password:
            raise ValueError("암호는 필수입니다")
        self.password_hash = pwd_context.hash(password)

    def verify_password(self, password: str) -> bool:
        """비밀번호 검증"""
        if not password or not self.password_hash:
            return False
        return pwd_context.verify(password, self.password_hash)
