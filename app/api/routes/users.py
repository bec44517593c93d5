"""User routes for profile management"""

from fastapi import APIRouter, Depends

from ...api.dependencies import get_current_user_id, get_unit_of_work
from ...application.dtos.user_dtos import ProfileResponse, UpdateProfileDto
from ...application.use_cases.get_user_profile import GetUserProfileUseCase
from ...application.use_cases.update_user_profile import UpdateUserProfileUseCase
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Get current user profile"""
    return await GetUserProfileUseCase(unit_of_work).execute(user_id)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    request: UpdateProfileDto,
    user_id: UserId = Depends(get_current_user_id),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
):
    """Update the display name"""
    return await UpdateUserProfileUseCase(unit_of_work).execute(user_id, request)
