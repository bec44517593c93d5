"""User repository implementation"""

from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...core.exceptions import ConflictError
from ...domain.repositories.user_repository import IUserRepository
from ...domain.entities.user import User
from ...domain.value_objects.entity_ids import UserId, SubscriptionId
from ..orm.user_model import UserModel


class UserRepositoryImpl(IUserRepository):
    """Repository implementation for User aggregate"""

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, user_id: UserId) -> Optional[User]:
        """Get user by ID"""
        model = self.session.get(UserModel, user_id.value)
        return self._map_to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        model = self.session.query(UserModel).filter(UserModel.email == email).first()
        return self._map_to_entity(model) if model else None

    async def get_by_customer_id(self, customer_id: str) -> Optional[User]:
        model = self.session.query(UserModel).filter(
            UserModel.stripe_customer_id == customer_id
        ).first()
        return self._map_to_entity(model) if model else None

    async def exists_by_email(self, email: str) -> bool:
        """Check if user exists by email"""
        return self.session.query(UserModel.id).filter(UserModel.email == email).first() is not None

    async def add(self, user: User) -> User:
        """Add a new user"""
        model = UserModel(id=user.id.value)
        self._update_model_from_entity(model, user)
        model.created_at = user.created_at
        self.session.add(model)
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            raise ConflictError("User with this email already exists")
        return user

    async def update(self, user: User) -> User:
        """Update an existing user"""
        model = self.session.get(UserModel, user.id.value)
        if model:
            self._update_model_from_entity(model, user)
            self.session.flush()
        return user

    def _update_model_from_entity(self, model: UserModel, user: User) -> None:
        """Update ORM model from domain entity"""
        model.email = user.email
        model.hashed_password = user.hashed_password
        model.name = user.name
        model.is_verified = user.is_verified
        model.stripe_customer_id = user.stripe_customer_id
        model.current_subscription_id = (
            user.current_subscription_id.value if user.current_subscription_id else None
        )
        model.updated_at = user.updated_at

    def _map_to_entity(self, model: UserModel) -> User:
        """Map ORM model to domain entity"""
        return User(
            id=UserId(model.id),
            email=model.email,
            hashed_password=model.hashed_password,
            name=model.name,
            is_verified=model.is_verified,
            stripe_customer_id=model.stripe_customer_id,
            current_subscription_id=(
                SubscriptionId(model.current_subscription_id) if model.current_subscription_id else None
            ),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
