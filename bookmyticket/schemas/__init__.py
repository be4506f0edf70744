from bookmyticket.schemas.common import ApiModel, MessageResponse, DashboardStats
from bookmyticket.schemas.user import UserCreate, UserUpdate, Token, PasswordResetRequest, PasswordResetConfirm
from bookmyticket.schemas.movie import MovieCreate, MovieUpdate
from bookmyticket.schemas.booking import BookingCreate, BookingStatusUpdate, BookingView
