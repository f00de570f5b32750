import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from ..core.security import hash_password, normalize_email, verify_password
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.user import User

logger = logging.getLogger(__name__)


def get_user(session: Session, user_key: str) -> User:
    user = session.exec(select(User).where(User.email == normalize_email(user_key))).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def create_user(session: Session, email: str, password: str, name: Optional[str] = None) -> User:
    user_key = normalize_email(email)
    if not user_key or not password:
        raise ValidationError("Missing email or password")

    user = User(email=user_key, hashed_password=hash_password(password), name=name or None)
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError("User already exists") from e
    session.refresh(user)
    logger.info("User %s signed up", user_key)
    return user


def authenticate(session: Session, email: str, password: str) -> Optional[User]:
    user = session.exec(select(User).where(User.email == normalize_email(email))).first()
    if user is None or not verify_password(password, user.hashed_password):
        return None
    return user


def update_name(session: Session, user_key: str, name: Optional[str]) -> User:
    user = get_user(session, user_key)
    user.name = (name or "").strip() or None
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def set_avatar(session: Session, user_key: str, reference: str) -> User:
    user = get_user(session, user_key)
    user.avatar_url = reference
    session.add(user)
    session.commit()
    session.refresh(user)
    return user
