from pydantic import BaseModel, EmailStr
from typing import Literal, Optional, Union


class RegisteredBooker(BaseModel):
    kind: Literal["registered"] = "registered"
    user_id: int

    class Config:
        frozen = True


class AnonymousBooker(BaseModel):
    kind: Literal["anonymous"] = "anonymous"
    name: str
    email: EmailStr
    phone: Optional[str] = None

    class Config:
        frozen = True


# Exactly one identity mode per reservation
Booker = Union[RegisteredBooker, AnonymousBooker]
