"""
Authorization gate shared by every entity type
"""

from typing import Optional, Type, TypeVar
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storybook.core.errors import NotAuthorized, NotFound, Unauthenticated
from storybook.core.security import CallerContext

ModelT = TypeVar("ModelT")


def require_caller(caller: CallerContext) -> uuid.UUID:
    """Return the caller's user id or raise Unauthenticated"""
    if caller is None or caller.user_id is None:
        raise Unauthenticated()
    return caller.user_id


def is_owner(caller: CallerContext, owner_id: Optional[uuid.UUID]) -> bool:
    if caller is None or caller.user_id is None or owner_id is None:
        return False
    return str(caller.user_id) == str(owner_id)


def assert_owner(caller: CallerContext, owner_id: Optional[uuid.UUID], what: str = "record") -> None:
    require_caller(caller)
    if not is_owner(caller, owner_id):
        raise NotAuthorized(f"You are not allowed to modify this {what}")


async def get_or_404(db: AsyncSession, model: Type[ModelT], record_id, what: str = "record") -> ModelT:
    row = (await db.execute(select(model).where(model.id == record_id))).scalars().first()
    if row is None:
        raise NotFound(f"{what.capitalize()} not found")
    return row


async def load_owned(
    db: AsyncSession,
    caller: CallerContext,
    model: Type[ModelT],
    record_id,
    owner_field: str,
    what: str = "record",
) -> ModelT:
    """Resolve caller, load the record, then check ownership.

    Order matters: Unauthenticated before NotFound before NotAuthorized.
    """
    require_caller(caller)
    row = await get_or_404(db, model, record_id, what)
    assert_owner(caller, getattr(row, owner_field), what)
    return row
