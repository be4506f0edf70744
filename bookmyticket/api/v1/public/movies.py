import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from bookmyticket.db.session import get_store
from bookmyticket.db.store import DocumentStore, StoreError
from bookmyticket.models.movie import Movie
from bookmyticket.services import catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/movies", tags=["Movies"])


@router.get("/", response_model=List[Movie])
async def list_movies(store: DocumentStore = Depends(get_store)):
    try:
        return await catalog.list_movies(store)
    except StoreError:
        logger.exception("Error fetching movies.")
        raise HTTPException(status_code=503, detail="Error fetching movies")


@router.get("/featured", response_model=List[Movie])
async def list_featured_movies(store: DocumentStore = Depends(get_store)):
    """Most recently added movies."""
    try:
        return await catalog.list_featured_movies(store)
    except StoreError:
        logger.exception("Error fetching featured movies.")
        raise HTTPException(status_code=503, detail="Error fetching movies")


async def _load_movie(store: DocumentStore, movie_id: str) -> Movie:
    try:
        movie = await catalog.get_movie(store, movie_id)
    except StoreError:
        logger.exception("Error fetching movie %s.", movie_id)
        raise HTTPException(status_code=503, detail="Error fetching movie")
    if not movie:
        raise HTTPException(status_code=404, detail="Movie not found")
    return movie


@router.get("/{movie_id}", response_model=Movie)
async def get_movie(movie_id: str, store: DocumentStore = Depends(get_store)):
    return await _load_movie(store, movie_id)


@router.get("/{movie_id}/related", response_model=List[Movie])
async def list_related_movies(movie_id: str, store: DocumentStore = Depends(get_store)):
    """Up to four movies sharing a genre with this one. Failures degrade to an empty list."""
    movie = await _load_movie(store, movie_id)
    try:
        return await catalog.list_related_movies(store, movie.id, movie.genres)
    except StoreError:
        logger.exception("Error fetching related movies for %s.", movie_id)
        return []
