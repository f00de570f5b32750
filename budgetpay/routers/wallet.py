from decimal import Decimal

from fastapi import APIRouter, Depends
from sqlmodel import Field, Session, SQLModel

from ..core.security import get_current_user_key
from ..database import get_session
from ..services import wallet as wallet_service


router = APIRouter(
    prefix="/wallet",
    tags=["wallet"],
)


class WalletIO(SQLModel):
    total_funds: Decimal = Field(max_digits=12, decimal_places=2)


@router.get("", response_model=WalletIO)
def get_wallet(
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    return WalletIO(total_funds=wallet_service.get_total_funds(session, user_key))


@router.put("", response_model=WalletIO)
def set_wallet(
    payload: WalletIO,
    session: Session = Depends(get_session),
    user_key: str = Depends(get_current_user_key),
):
    return WalletIO(total_funds=wallet_service.set_total_funds(session, user_key, payload.total_funds))
