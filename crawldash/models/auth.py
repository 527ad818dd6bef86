from typing import Optional

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class CreateUserRequest(BaseModel):
    name: str
    email: str
    password: str


class User(BaseModel):
    id: int | str
    name: str = ""
    email: str = ""


class LoginResponse(BaseModel):
    # The backend answers {"token", "message"}; ``user`` is not always sent.
    token: str
    user: Optional[User] = None
    message: str = ""


class RegisterResponse(BaseModel):
    token: Optional[str] = None
    user: Optional[User] = None
    message: str = ""
