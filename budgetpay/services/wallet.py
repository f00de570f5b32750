from decimal import Decimal

from sqlmodel import Session

from ..models.wallet import Wallet
from .upserts import build_upsert


def get_total_funds(session: Session, user_key: str) -> Decimal:
    wallet = session.get(Wallet, user_key)
    if wallet is None:
        return Decimal("0")
    return wallet.total_funds


def set_total_funds(session: Session, user_key: str, total_funds: Decimal) -> Decimal:
    """Last write wins; the previous value is replaced, never merged."""
    stmt = build_upsert(
        session,
        Wallet.__table__,
        {"user_email": user_key, "total_funds": total_funds},
        ["user_email"],
        lambda table, incoming: {"total_funds": incoming.total_funds},
    )
    session.exec(stmt)
    session.commit()
    return get_total_funds(session, user_key)
