"""Update user profile use case"""

from ...core.exceptions import NotFoundError, ValidationError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.value_objects.entity_ids import UserId
from ..dtos.user_dtos import ProfileResponse, UpdateProfileDto, UserProfileDto


class UpdateUserProfileUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    async def execute(self, user_id: UserId, request: UpdateProfileDto) -> ProfileResponse:
        name = (request.name or "").strip()
        if not name:
            raise ValidationError("Name is required")

        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")
            user.rename(name)
            await self.unit_of_work.users.update(user)

        return ProfileResponse(user=UserProfileDto.from_entity(user))
