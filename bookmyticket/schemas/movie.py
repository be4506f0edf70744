from decimal import Decimal
from typing import Annotated, List, Optional

from pydantic import AfterValidator, Field

from bookmyticket.schemas.common import ApiModel


def _clean_genres(v: List[str]) -> List[str]:
    seen = []
    for g in v:
        g = g.strip()
        if g and g not in seen:
            seen.append(g)
    return seen


GenreList = Annotated[List[str], AfterValidator(_clean_genres)]


# Movie - Create (POST /admin/movies)
class MovieCreate(ApiModel):
    title: str = Field(..., min_length=1)
    description: str = ""
    poster_url: str = ""
    background_url: Optional[str] = Field(None, alias="movieBg")
    genres: GenreList = Field(default_factory=list, alias="genre")
    rating: str = ""
    runtime: Optional[int] = Field(None, ge=1)
    release_year: Optional[int] = Field(None, ge=1888, le=2100)
    ticket_price: Decimal = Field(..., ge=0)
    showtimes: Optional[List[str]] = None


# Movie - Partial update (PATCH /admin/movies/{id}); only provided fields are merged
class MovieUpdate(ApiModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    poster_url: Optional[str] = None
    background_url: Optional[str] = Field(None, alias="movieBg")
    genres: Optional[GenreList] = Field(None, alias="genre")
    rating: Optional[str] = None
    runtime: Optional[int] = Field(None, ge=1)
    release_year: Optional[int] = Field(None, ge=1888, le=2100)
    ticket_price: Optional[Decimal] = Field(None, ge=0)
    showtimes: Optional[List[str]] = None
