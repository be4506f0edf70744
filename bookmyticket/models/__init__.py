from bookmyticket.models.movie import Movie
from bookmyticket.models.booking import Booking, BookingStatus
from bookmyticket.models.user import User
