from sqlalchemy.orm import Session

from flowershop.data.models.user import UserModel
from flowershop.repos.user_repo import UserRepo
from flowershop.domain.schemas import ProfileUpdate


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def get_user(self, user_id: str) -> UserModel:
        user = self.repo.get_user(user_id)
        if not user:
            raise ValueError("User not found")
        return user

    def update_profile(self, user_id: str, payload: ProfileUpdate) -> UserModel:
        user = self.get_user(user_id)
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(user, field, value)
        return self.repo.save(user)
