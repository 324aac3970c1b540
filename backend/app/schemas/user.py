from typing import Annotated
from pydantic import BaseModel, Field, field_validator
from app.schemas.common import NameStr

UsernameStr = Annotated[str, Field(min_length=1, max_length=120)]

class UserRegister(BaseModel):
    username: UsernameStr
    name: NameStr
    password: Annotated[str, Field(min_length=1, max_length=128)]

    @field_validator("password")
    @classmethod
    def password_policy(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters long")
        return v

class UserLogin(BaseModel):
    username: UsernameStr
    password: Annotated[str, Field(min_length=1, max_length=256)]

class UserRead(BaseModel):
    id: int
    username: str
    name: str
    model_config = {"from_attributes": True}

class AuthResponse(BaseModel):
    success: bool = True
    user: UserRead

class MeResponse(BaseModel):
    user: UserRead
