from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import EmailStr
from sqlmodel import Field, Session, SQLModel

from ..core.jwt import create_access_token
from ..core.security import get_current_user_key
from ..database import get_session
from ..models.user import User
from ..services import users as users_service


router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


class SignupIn(SQLModel):
    email: EmailStr
    password: str = Field(min_length=6)
    name: Optional[str] = Field(default=None, max_length=255)


class LoginIn(SQLModel):
    email: EmailStr
    password: str


class TokenOut(SQLModel):
    access_token: str
    token_type: str = "bearer"
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class UserRead(SQLModel):
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None


def _token_for(request: Request, user: User) -> TokenOut:
    token = create_access_token({"sub": user.email}, request.app.state.settings)
    return TokenOut(access_token=token, email=user.email, name=user.name, avatar_url=user.avatar_url)


def _invalid_credentials():
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid email or password",
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post(
    "/signup",
    response_model=TokenOut,
    status_code=status.HTTP_201_CREATED,
)
def signup(payload: SignupIn, request: Request, session: Session = Depends(get_session)):
    user = users_service.create_user(session, payload.email, payload.password, payload.name)
    return _token_for(request, user)


@router.post(
    "/login",
    response_model=TokenOut,
    status_code=status.HTTP_200_OK,
)
def login(payload: LoginIn, request: Request, session: Session = Depends(get_session)):
    user = users_service.authenticate(session, payload.email, payload.password)
    if user is None:
        _invalid_credentials()
    return _token_for(request, user)


@router.post(
    "/token",
    response_model=TokenOut,
    status_code=status.HTTP_200_OK,
)
def token(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
):
    # OAuth2PasswordRequestForm usa 'username' como el campo de email
    user = users_service.authenticate(session, form_data.username, form_data.password)
    if user is None:
        _invalid_credentials()
    return _token_for(request, user)


@router.get(
    "/me",
    response_model=UserRead,
)
def me(
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    return users_service.get_user(session, user_key)
