import logging
from typing import Optional
from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession
from coursework import models
from coursework.services.submission.ports import MembershipOracle

logger = logging.getLogger(__name__)


class MembershipRepository(MembershipOracle):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_activity(self, public_id: str) -> Optional[models.Activity]:
        """공개 ID로 활성 활동 조회"""
        result = await self.db.execute(
            select(models.Activity).where(
                models.Activity.public_id == public_id,
                models.Activity.is_active.is_(True)
            )
        )
        return result.scalar_one_or_none()

    async def get_activity_by_id(self, activity_id: int) -> Optional[models.Activity]:
        result = await self.db.execute(
            select(models.Activity).where(
                models.Activity.id == activity_id,
                models.Activity.is_active.is_(True)
            )
        )
        return result.scalar_one_or_none()

    async def get_user(self, public_id: str) -> Optional[models.User]:
        result = await self.db.execute(
            select(models.User).where(
                models.User.public_id == public_id,
                models.User.is_active.is_(True)
            )
        )
        return result.scalar_one_or_none()

    async def get_question(self, public_id: str) -> Optional[models.Question]:
        """선택지를 포함한 문제 조회"""
        result = await self.db.execute(
            select(models.Question).where(
                models.Question.public_id == public_id,
                models.Question.is_active.is_(True)
            )
        )
        return result.scalar_one_or_none()

    async def is_activity_item(self, activity_id: int, question_id: int) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    models.ActivityItem.activity_id == activity_id,
                    models.ActivityItem.question_id == question_id
                )
            )
        )
        return bool(result.scalar())

    async def get_member(self, group_id: int, user_id: int) -> Optional[models.GroupMember]:
        result = await self.db.execute(
            select(models.GroupMember).where(
                models.GroupMember.group_id == group_id,
                models.GroupMember.user_id == user_id
            )
        )
        return result.scalar_one_or_none()


async def _accepted_member(oracle: MembershipOracle, group_id: int, user_id: int):
    member = await oracle.get_member(group_id, user_id)
    if member is None or not member.is_active or member.accepted_by_id is None:
        return None
    return member


async def is_member(oracle: MembershipOracle, group_id: int, user_id: int) -> bool:
    """승인된 활성 멤버인지 확인"""
    return await _accepted_member(oracle, group_id, user_id) is not None


async def is_group_admin(oracle: MembershipOracle, group_id: int, user_id: int) -> bool:
    member = await _accepted_member(oracle, group_id, user_id)
    return member is not None and member.role == models.MemberRole.ADMIN


async def is_group_admin_or_supervisor(oracle: MembershipOracle, group_id: int, user_id: int) -> bool:
    member = await _accepted_member(oracle, group_id, user_id)
    return member is not None and member.role in (models.MemberRole.ADMIN, models.MemberRole.SUPERVISOR)
