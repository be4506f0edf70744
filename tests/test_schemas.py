from datetime import date, datetime

import pytest
from pydantic import ValidationError

from bookmyticket.models.booking import Booking
from bookmyticket.models.movie import Movie
from bookmyticket.models.user import User
from bookmyticket.schemas.booking import BookingCreate
from bookmyticket.schemas.movie import MovieCreate, MovieUpdate
from bookmyticket.schemas.user import UserCreate


def test_user_create():
    user = UserCreate(email="test@example.com", name="Test User", password="password")
    assert user.email == "test@example.com"

    with pytest.raises(ValidationError):
        UserCreate(email="not-an-email", name="Test User", password="password")
    with pytest.raises(ValidationError):
        UserCreate(email="test@example.com", name="Test User", password="123")


def test_booking_create_accepts_both_seat_forms():
    from_list = BookingCreate.model_validate({"movieId": "m1", "date": "2025-03-10", "time": "6:00 PM", "seats": ["A1", "A2"]})
    from_text = BookingCreate.model_validate({"movieId": "m1", "date": "2025-03-10", "time": "6:00 PM", "seats": "A1,A2"})

    assert from_list.seats == from_text.seats == ["A1", "A2"]
    assert from_list.show_date == date(2025, 3, 10)


def test_booking_create_needs_a_seat():
    with pytest.raises(ValidationError):
        BookingCreate.model_validate({"movieId": "m1", "date": "2025-03-10", "time": "6:00 PM", "seats": " , "})


def test_movie_update_only_dumps_provided_fields():
    update = MovieUpdate.model_validate({"ticketPrice": 11, "genre": ["Drama", "Drama "]})
    assert update.model_dump(by_alias=True, exclude_unset=True) == {"ticketPrice": 11, "genre": ["Drama"]}

    with pytest.raises(ValidationError):
        MovieCreate.model_validate({"title": "", "ticketPrice": 5})


def test_stored_records_are_lenient():
    movie = Movie.model_validate({"id": "m", "title": None, "genre": "Drama", "runtime": "n/a", "ticketPrice": "12"})
    assert movie.title == ""
    assert movie.genres == ["Drama"]
    assert movie.runtime is None
    assert movie.showtimes is None

    booking = Booking.model_validate({"id": "b", "status": " Confirmed ", "createdAt": {"seconds": 0}})
    assert booking.status == "confirmed"
    assert booking.created_at.year == 1970

    assert User.model_validate({"id": "u", "admin": "yes"}).admin is False


def test_stored_timestamps_become_utc_aware():
    from datetime import timezone

    naive = Booking.model_validate({"id": "a", "createdAt": datetime(2025, 3, 1, 12, 0)})
    text = Booking.model_validate({"id": "b", "createdAt": "2025-03-01T12:00:00Z"})
    unreadable = Booking.model_validate({"id": "c", "createdAt": "last tuesday"})

    assert naive.created_at == text.created_at
    assert naive.created_at.tzinfo == timezone.utc
    assert unreadable.created_at is None


def test_malformed_movie_and_user_fields_fall_back():
    movie = Movie.model_validate(
        {"id": "m", "showtimes": "7:00 PM", "genre": ["Drama", 7, None], "movieBg": {"url": "x"}, "releaseYear": float("inf")}
    )
    assert movie.showtimes == ["7:00 PM"]
    assert movie.genres == ["Drama", "7"]
    assert movie.background_url is None
    assert movie.release_year is None

    assert Movie.model_validate({"id": "m", "showtimes": 5}).showtimes is None

    user = User.model_validate({"id": "u", "phone": 5551234, "bio": ["x"]})
    assert user.phone == "5551234"
    assert user.bio is None
