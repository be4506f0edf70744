from decimal import Decimal
from typing import Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Request/response bodies use the same camelCase keys as the stored documents
class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


# Admin dashboard
class DashboardStats(ApiModel):
    user_count: int
    movie_count: int
    booking_count: int
    total_revenue: Decimal
    bookings_by_status: Dict[str, int] = {}
