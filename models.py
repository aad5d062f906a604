from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum
from datetime import datetime
from decimal import Decimal
from uuid import UUID
import re


class NotificationKind(str, Enum):
    approaching_pay_in_limit = "approaching_pay_in_limit"
    funds_low = "funds_low"


class User(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(..., description="User identifier")
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Display name of the account owner"
    )
    email: str = Field(
        ...,
        min_length=3,
        max_length=320,
        description="Address used to route notifications"
    )

    @field_validator('email')
    @classmethod
    def validate_email(cls, v):
        if not re.match(r'^[^@\s]+@[^@\s]+$', v):
            raise ValueError('Email must look like local@domain')
        return v


class AccountSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    account_id: UUID = Field(..., description="Account identifier")
    balance: Decimal = Field(..., description="Spendable funds")
    paid_in: Decimal = Field(..., description="Cumulative amount paid in")
    withdrawn: Decimal = Field(..., description="Net withdrawn amount")


class Notification(BaseModel):
    kind: NotificationKind = Field(..., description="Which threshold was crossed")
    address: str = Field(..., description="Recipient address")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the signal was raised")
