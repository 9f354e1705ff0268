from sqlalchemy import Column, String, DateTime, Boolean, Integer, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum
from ..database import Base
from ._common import utcnow, new_public_id


class MemberRole(str, enum.Enum):
    ADMIN = "admin"
    SUPERVISOR = "supervisor"
    MEMBER = "member"


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    public_id = Column(String(36), unique=True, nullable=False, default=new_public_id)
    name = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    members = relationship("GroupMember", back_populates="group", cascade="all, delete-orphan")
    activities = relationship("Activity", back_populates="group", cascade="all, delete-orphan")


class GroupMember(Base):
    __tablename__ = "group_members"

    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role = Column(
        SQLEnum(MemberRole, name="member_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=MemberRole.MEMBER
    )
    # 가입 승인자. 승인되지 않은 멤버는 권한이 없다
    accepted_by_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    joined_at = Column(DateTime(timezone=True), default=utcnow)

    group = relationship("Group", back_populates="members")
    user = relationship("User", back_populates="memberships", foreign_keys=[user_id])
