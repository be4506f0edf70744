import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from bookmyticket.api.deps import get_current_admin_user
from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentNotFound, DocumentStore, StoreError
from bookmyticket.models.movie import Movie
from bookmyticket.schemas.common import MessageResponse
from bookmyticket.schemas.movie import MovieCreate, MovieUpdate
from bookmyticket.services import catalog
from bookmyticket.services.identity import Principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/movies", tags=["Admin - Movies"])


@router.get("/", response_model=List[Movie])
async def list_movies(
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    try:
        return await catalog.list_movies(store)
    except StoreError:
        logger.exception("Error fetching movies.")
        raise HTTPException(status_code=503, detail="Error fetching movies")


@router.post("/", response_model=Movie, status_code=status.HTTP_201_CREATED)
async def create_movie(
    data: MovieCreate,
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    try:
        return await catalog.create_movie(store, data.model_dump(by_alias=True, exclude_none=True))
    except StoreError:
        logger.exception("Error creating movie.")
        raise HTTPException(status_code=500, detail="Error creating movie")


@router.patch("/{movie_id}", response_model=Movie)
async def update_movie(
    movie_id: str,
    data: MovieUpdate,
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    """Last write wins; only the fields present in the body are changed."""
    try:
        movie = await catalog.update_movie(store, movie_id, data.model_dump(by_alias=True, exclude_unset=True))
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Movie not found")
    except StoreError:
        logger.exception("Error updating movie %s.", movie_id)
        raise HTTPException(status_code=500, detail="Error updating movie")
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie


@router.delete("/{movie_id}", response_model=MessageResponse)
async def delete_movie(
    movie_id: str,
    store: DocumentStore = Depends(get_store),
    current_user: Principal = Depends(get_current_admin_user),
):
    """Unconditional: bookings that reference the movie keep a dangling movie id."""
    try:
        await catalog.delete_movie(store, movie_id)
    except StoreError:
        logger.exception("Error deleting movie %s.", movie_id)
        raise HTTPException(status_code=500, detail="Error deleting movie")
    return MessageResponse(message="Movie deleted")
