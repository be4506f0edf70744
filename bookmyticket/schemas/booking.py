from datetime import date
from typing import List, Optional, Union

from pydantic import Field, field_validator

from bookmyticket.models.booking import Booking, BookingStatus
from bookmyticket.models.movie import Movie
from bookmyticket.models.user import User
from bookmyticket.schemas.common import ApiModel
from bookmyticket.utils.normalize import normalize_seats


# Booking - Create (POST /bookings)
class BookingCreate(ApiModel):
    movie_id: str = Field(..., min_length=1)
    show_date: date = Field(..., alias="date")
    time: str = Field(..., min_length=1)
    # Either a list of labels or "A1, A2"
    seats: Union[List[str], str]

    @field_validator("seats")
    @classmethod
    def at_least_one_seat(cls, v):
        seats = normalize_seats(v)
        if not seats:
            raise ValueError("At least one seat is required")
        return seats


# Booking - Status change (PATCH /admin/bookings/{id}/status)
class BookingStatusUpdate(ApiModel):
    status: BookingStatus


# Booking - Joined view (GET /bookings, GET /admin/bookings)
class BookingView(Booking):
    movie: Optional[Movie] = None
    user: Optional[User] = None
    formatted_date: str = ""
    seat_count: int = 0
    status_label: str = ""
