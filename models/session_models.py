from typing import Optional
from pydantic import BaseModel

from models.common_models import UserProfile


class Session(BaseModel):
    user: Optional[UserProfile] = None
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def role(self) -> Optional[str]:
        return self.user.role if self.user else None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
