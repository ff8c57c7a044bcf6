"""Profile service for worker and company profiles and company verification."""

from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.core.errors import InvalidArgument, NotFound
from taskmarket.models.profile import CompanyProfile, VerificationStatus, WorkerProfile
from taskmarket.models.user import UserRole
from taskmarket.schemas.profile import CompanyProfileUpdate, WorkerProfileUpdate
from taskmarket.services import repository
from taskmarket.services.access_policy import Actor, require_role
from taskmarket.services.activity_service import record_transition


async def get_worker_profile(db: AsyncSession, actor: Actor) -> WorkerProfile:
    require_role(actor, UserRole.WORKER)
    profile = await repository.get_or_create_worker_profile(db, actor.id)
    await db.commit()
    return profile


async def update_worker_profile(
    db: AsyncSession,
    actor: Actor,
    updates: WorkerProfileUpdate
) -> WorkerProfile:
    """
    Update the acting worker's profile. Workflow counters are not editable here.
    """
    require_role(actor, UserRole.WORKER)
    profile = await repository.get_or_create_worker_profile(db, actor.id)

    update_data = updates.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)
    return profile


async def get_company_profile(db: AsyncSession, actor: Actor) -> CompanyProfile:
    require_role(actor, UserRole.COMPANY)
    profile = await repository.get_or_create_company_profile(db, actor.id)
    await db.commit()
    return profile


async def update_company_profile(
    db: AsyncSession,
    actor: Actor,
    updates: CompanyProfileUpdate
) -> CompanyProfile:
    require_role(actor, UserRole.COMPANY)
    profile = await repository.get_or_create_company_profile(db, actor.id)

    update_data = updates.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is not None:
            setattr(profile, field, value)

    await db.commit()
    await db.refresh(profile)
    return profile


async def list_companies(
    db: AsyncSession,
    actor: Actor,
    verification_status: Optional[str] = None,
    limit: int = 50,
    offset: int = 0,
) -> Tuple[List[CompanyProfile], int]:
    """Admin listing of company profiles, newest first."""
    require_role(actor, UserRole.ADMIN)

    conditions = []
    if verification_status:
        conditions.append(CompanyProfile.verification_status == verification_status)

    total = await db.scalar(select(func.count()).select_from(CompanyProfile).where(*conditions))
    result = await db.execute(
        select(CompanyProfile)
        .where(*conditions)
        .order_by(CompanyProfile.created_at.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all()), total or 0


async def verify_company(
    db: AsyncSession,
    user_id: str,
    actor: Actor,
    verification_status: str
) -> CompanyProfile:
    """
    Set a company's verification status.

    Args:
        db: Database session
        user_id: Company user whose profile is updated
        actor: Acting admin
        verification_status: pending, approved or rejected

    Raises:
        Forbidden: If the actor is not an admin
        InvalidArgument: If the status is not a verification status
        NotFound: If the user has no company profile
    """
    require_role(actor, UserRole.ADMIN)
    if verification_status not in {s.value for s in VerificationStatus}:
        raise InvalidArgument(
            f"Invalid verification status '{verification_status}'",
            entity="company",
            field="verification_status",
        )

    profile = await repository.get_company_profile(db, user_id)
    if not profile:
        raise NotFound("company", user_id)

    previous = profile.verification_status
    profile.verification_status = verification_status
    await db.commit()
    await db.refresh(profile)

    await record_transition(db, "company_verification_changed", actor.id, None, {
        "company_id": user_id,
        "from": previous,
        "to": verification_status,
    })

    return profile
