from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field, field_validator

from bookmyticket.models.base import StoredRecord, coerce_text, coerce_text_list, coerce_timestamp
from bookmyticket.utils.normalize import normalize_price


class Movie(StoredRecord):
    title: str = ""
    description: str = ""
    poster_url: str = ""
    background_url: Optional[str] = Field(None, alias="movieBg")
    genres: List[str] = Field(default_factory=list, alias="genre")
    rating: str = ""
    runtime: Optional[int] = None  # minutes
    release_year: Optional[int] = None
    ticket_price: Decimal = Decimal("0")
    showtimes: Optional[List[str]] = None
    created_at: Optional[datetime] = None

    @field_validator("title", "description", "poster_url", "rating", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else str(v)

    @field_validator("background_url", mode="before")
    @classmethod
    def parse_background(cls, v):
        return coerce_text(v)

    @field_validator("genres", mode="before")
    @classmethod
    def parse_genres(cls, v):
        return coerce_text_list(v) or []

    @field_validator("showtimes", mode="before")
    @classmethod
    def parse_showtimes(cls, v):
        return coerce_text_list(v)

    @field_validator("runtime", "release_year", mode="before")
    @classmethod
    def parse_optional_int(cls, v):
        if v in ("", None) or isinstance(v, bool):
            return None
        try:
            return int(v)
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("ticket_price", mode="before")
    @classmethod
    def parse_price(cls, v):
        return normalize_price(v)

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, v):
        return coerce_timestamp(v)
