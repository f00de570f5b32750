from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile, status
from sqlmodel import Field, Session, SQLModel

from ..core.security import get_current_user_key
from ..database import get_session
from ..services import users as users_service
from ..services.blobs import MAX_UPLOAD_BYTES


router = APIRouter(
    prefix="/profile",
    tags=["profile"],
)


class ProfileRead(SQLModel):
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None


class ProfileUpdate(SQLModel):
    name: Optional[str] = Field(default=None, max_length=255)


class AvatarOut(SQLModel):
    ok: bool = True
    avatar_url: str


@router.get("", response_model=ProfileRead)
def get_profile(
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    return users_service.get_user(session, user_key)


@router.put("", response_model=ProfileRead)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    return users_service.update_name(session, user_key, payload.name)


@router.post(
    "/avatar",
    response_model=AvatarOut,
    status_code=status.HTTP_201_CREATED,
)
def upload_avatar(
    request: Request,
    avatar: UploadFile = File(...),
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    """Store the image in the blob store and keep its reference on the user.

    - Tipos permitidos: jpeg, png, gif, webp.
    - Tamaño máximo: 5 MB.
    """
    data = avatar.file.read(MAX_UPLOAD_BYTES + 1)
    reference = request.app.state.blobs.put(data, avatar.content_type)
    users_service.set_avatar(session, user_key, reference)
    return AvatarOut(avatar_url=reference)
