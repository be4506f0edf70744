from fastapi import APIRouter

# Auth
from bookmyticket.api.v1.public.auth import router as auth_router

# Public - catalog
from bookmyticket.api.v1.public.movies import router as public_movies_router

# Public - bookings
from bookmyticket.api.v1.public.bookings import router as bookings_router

# Public - user profile
from bookmyticket.api.v1.public.me import router as me_router

# Admin
from bookmyticket.api.v1.admin.dashboard import router as dashboard_router
from bookmyticket.api.v1.admin.movies import router as admin_movies_router
from bookmyticket.api.v1.admin.bookings import router as admin_bookings_router
from bookmyticket.api.v1.admin.users import router as admin_users_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public: catalog ---
api_router.include_router(public_movies_router)

# --- Public: bookings ---
api_router.include_router(bookings_router)

# --- Public: profile ---
api_router.include_router(me_router)

# --- Admin ---
api_router.include_router(dashboard_router)
api_router.include_router(admin_movies_router)
api_router.include_router(admin_bookings_router)
api_router.include_router(admin_users_router)
