from pydantic import EmailStr, Field

from fishing_booking.models.user import UserRole
from fishing_booking.schemas.base import CamelModel


class UserRegister(CamelModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)

    class Config:
        json_schema_extra = {
            "example": {
                "fullName": "Rami Haddad",
                "email": "rami@example.com",
                "password": "secret123",
            }
        }


class UserLogin(CamelModel):
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    id: int
    full_name: str
    email: str
    role: UserRole


class LoginResponse(CamelModel):
    token: str
    user: UserResponse
