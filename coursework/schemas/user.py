from pydantic import BaseModel, EmailStr, constr
from typing import Optional


class LoginRequest(BaseModel):
    email: EmailStr
    password: constr(min_length=1, max_length=100)


class UserResponse(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: str
    avatar_url: Optional[str] = None

    @classmethod
    def from_model(cls, user) -> "UserResponse":
        return cls(
            id=user.public_id,
            name=user.name,
            email=user.email,
            role=getattr(user.role, "value", user.role),
            avatar_url=user.avatar_url
        )


class CurrentUserResponse(BaseModel):
    id: str
    role: str
