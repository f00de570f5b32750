from decimal import Decimal

from sqlmodel import SQLModel, Field


class Wallet(SQLModel, table=True):
    __tablename__ = "wallets"

    user_email: str = Field(primary_key=True, max_length=255)
    total_funds: Decimal = Field(default=Decimal("0"), max_digits=12, decimal_places=2)
