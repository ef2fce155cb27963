from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from fishing_booking.crud import user as user_crud
from fishing_booking.database import get_db
from fishing_booking.models.user import User, UserRole
from fishing_booking.schemas.user import (
    LoginResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from fishing_booking.services.auth import (
    authenticate_user,
    get_current_user,
    issue_token,
)

router = APIRouter()


@router.post("/register-captain", response_model=UserResponse)
def register_captain(user: UserRegister, db: Session = Depends(get_db)):
    return user_crud.create_user(db, user, role=UserRole.CAPTAIN)


@router.post("/register-guest", response_model=UserResponse)
def register_guest(user: UserRegister, db: Session = Depends(get_db)):
    return user_crud.create_user(db, user, role=UserRole.GUEST)


@router.post("/login", response_model=LoginResponse)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return LoginResponse(token=issue_token(user), user=UserResponse.model_validate(user))


@router.post("/token")
def token(
    form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)
):
    """OAuth2 password flow, used by the interactive docs."""
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": issue_token(user), "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
def delete_me(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
):
    user_crud.delete_user(db, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
