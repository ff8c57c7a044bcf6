"""User service for registration, authentication and account administration."""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.config import settings
from taskmarket.core.errors import Forbidden, InvalidArgument
from taskmarket.core.events import event_bus
from taskmarket.core.security import generate_api_key, hash_api_key
from taskmarket.models.profile import CompanyProfile, WorkerProfile
from taskmarket.models.user import User, UserRole, UserStatus
from taskmarket.schemas.user import UserCreate, UserFilters
from taskmarket.services import repository
from taskmarket.services.access_policy import Actor, require_role

logger = logging.getLogger(__name__)


def _email_taken() -> InvalidArgument:
    return InvalidArgument(
        "Email already registered",
        entity="user",
        field="email",
        code="EMAIL_TAKEN",
    )


async def create_user(db: AsyncSession, user_data: UserCreate) -> Tuple[User, str]:
    """
    Register a new user with an API key, plus the matching empty profile.

    Args:
        db: Database session
        user_data: Name, email and role

    Returns:
        Tuple of (User, plaintext_api_key)

    Raises:
        Forbidden: If registering as admin while ALLOW_ADMIN_SIGNUP is off
        InvalidArgument: If the email is already registered
    """
    if user_data.role == UserRole.ADMIN.value and not settings.ALLOW_ADMIN_SIGNUP:
        raise Forbidden("Admin accounts cannot be self-registered", entity="user", field="role")

    email = user_data.email.strip().lower()
    existing = await db.execute(select(User.id).where(User.email == email))
    if existing.scalar_one_or_none():
        raise _email_taken()

    # Generate API key
    api_key = generate_api_key()

    user = User(
        name=user_data.name,
        email=email,
        role=user_data.role,
        status=UserStatus.ACTIVE.value,
        api_key_hash=hash_api_key(api_key),
    )
    db.add(user)
    await db.flush()

    if user.role == UserRole.WORKER.value:
        db.add(WorkerProfile(user_id=user.id))
    elif user.role == UserRole.COMPANY.value:
        db.add(CompanyProfile(user_id=user.id, company_name=user.name))

    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise _email_taken()
    await db.refresh(user)

    logger.info(f"Registered {user.role} {user.id}")
    await event_bus.publish("user_registered", {
        "user_id": user.id,
        "role": user.role,
    })

    return user, api_key


async def authenticate(db: AsyncSession, api_key: str) -> Optional[User]:
    """Resolve an API key to its user, or None if no user holds it."""
    result = await db.execute(
        select(User).where(User.api_key_hash == hash_api_key(api_key))
    )
    user = result.scalar_one_or_none()
    if user:
        user.last_seen_at = datetime.utcnow()
        await db.commit()
    return user


async def list_users(
    db: AsyncSession,
    actor: Actor,
    filters: UserFilters,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[User], int]:
    """Admin listing of users with role, status and name/email search filters."""
    require_role(actor, UserRole.ADMIN)

    conditions = []
    if filters.role:
        conditions.append(User.role == filters.role)
    if filters.status:
        conditions.append(User.status == filters.status)
    if filters.search:
        conditions.append(or_(
            User.name.ilike(f"%{filters.search}%"),
            User.email.ilike(f"%{filters.search}%"),
        ))

    total = await db.scalar(select(func.count()).select_from(User).where(*conditions))
    result = await db.execute(
        select(User)
        .where(*conditions)
        .order_by(User.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def set_user_status(db: AsyncSession, user_id: str, actor: Actor, status: str) -> User:
    """Block or reactivate a user."""
    require_role(actor, UserRole.ADMIN)
    if status not in (UserStatus.ACTIVE.value, UserStatus.BLOCKED.value):
        raise InvalidArgument(f"Invalid user status '{status}'", entity="user", field="status")
    if user_id == actor.id:
        raise Forbidden("Admins cannot change their own status", entity="user", field="status")

    user = await repository.require_user(db, user_id)
    user.status = status
    await db.commit()
    await db.refresh(user)

    logger.info(f"User {user.id} status set to {status} by {actor.id}")
    await event_bus.publish("user_status_changed", {"user_id": user.id, "status": user.status})
    return user


async def set_user_role(db: AsyncSession, user_id: str, actor: Actor, role: str) -> User:
    """Change a user's role, creating the profile the new role needs."""
    require_role(actor, UserRole.ADMIN)
    if role not in {r.value for r in UserRole}:
        raise InvalidArgument(f"Invalid role '{role}'", entity="user", field="role")

    user = await repository.require_user(db, user_id)
    user.role = role
    if role == UserRole.WORKER.value:
        await repository.get_or_create_worker_profile(db, user.id)
    elif role == UserRole.COMPANY.value:
        await repository.get_or_create_company_profile(db, user.id)

    await db.commit()
    await db.refresh(user)

    logger.info(f"User {user.id} role set to {role} by {actor.id}")
    return user
