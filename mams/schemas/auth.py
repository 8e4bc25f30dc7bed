from pydantic import BaseModel
from typing import Optional
from mams.models.user import UserRole


class Token(BaseModel):
    access_token: str
    token_type: str
    user_id: int
    role: UserRole
    base_id: Optional[int] = None


class LoginRequest(BaseModel):
    username: str
    password: str


class Identity(BaseModel):
    """Acting principal as carried in the access token."""
    id: int
    role: UserRole
    base_id: Optional[int] = None

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
