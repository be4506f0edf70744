import enum
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from bookmyticket.models.base import StoredRecord, coerce_timestamp
from bookmyticket.utils.normalize import normalize_price, normalize_seats, normalize_show_date


class BookingStatus(str, enum.Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"
    completed = "completed"


class Booking(StoredRecord):
    movie_id: str = ""
    user_id: str = ""
    show_date: Optional[date] = Field(None, alias="date")
    time: str = ""
    seats: List[str] = Field(default_factory=list)
    total_price: Decimal = Decimal("0")
    # Kept as free text: documents written outside the app may carry other values
    status: str = ""
    created_at: Optional[datetime] = None

    @field_validator("movie_id", "user_id", "time", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else str(v)

    @field_validator("show_date", mode="before")
    @classmethod
    def parse_show_date(cls, v):
        return normalize_show_date(v)

    @field_validator("seats", mode="before")
    @classmethod
    def parse_seats(cls, v):
        return normalize_seats(v)

    @field_validator("total_price", mode="before")
    @classmethod
    def parse_price(cls, v):
        return normalize_price(v)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v):
        return v.strip().lower() if isinstance(v, str) else ""

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v):
        return coerce_timestamp(v)
