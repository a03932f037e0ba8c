"""Mini README: Request models validated at the HTTP boundary.

Field names follow the JSON the card reader firmware and the till page
already send (``uid``, ``amount``, ``name``, ``initialBalance``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CardTapRequest(BaseModel):
    uid: str = Field(..., min_length=1, description="Card identifier read by the tap sensor.")


class PaymentRequest(BaseModel):
    uid: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0, description="Amount to debit, in whole currency units.")


class TopUpRequest(BaseModel):
    uid: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)


class RegisterRequest(BaseModel):
    uid: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, description="Card holder shown on the till.")
    initial_balance: int = Field(
        ...,
        alias="initialBalance",
        ge=0,
        description="Daily allotment the balance resets to every morning.",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={"example": {"uid": "CARD1", "name": "Alice", "initialBalance": 40000}},
    )


class ClearPendingRequest(BaseModel):
    uid: str | None = Field(None, description="Only clear when the slot refers to this card.")
