"""Read/write operations over the `movies` collection."""
import logging
from typing import Any, Dict, List, Optional, Sequence

from bookmyticket.core.config import settings
from bookmyticket.db.store import MOVIES, SERVER_TIMESTAMP, DocumentStore, Filter
from bookmyticket.models.base import storable
from bookmyticket.models.movie import Movie

logger = logging.getLogger(__name__)


async def list_movies(store: DocumentStore) -> List[Movie]:
    docs = await store.query(MOVIES)
    return Movie.parse_documents(docs)


async def list_featured_movies(store: DocumentStore, limit: Optional[int] = None) -> List[Movie]:
    """Newest movies first."""
    docs = await store.query(
        MOVIES,
        order_by="createdAt",
        descending=True,
        limit=limit or settings.FEATURED_MOVIES_LIMIT,
    )
    return Movie.parse_documents(docs)


async def get_movie(store: DocumentStore, movie_id: str) -> Optional[Movie]:
    doc = await store.get(MOVIES, movie_id)
    if doc is None:
        return None
    movies = Movie.parse_documents([doc])
    return movies[0] if movies else None


async def create_movie(store: DocumentStore, fields: Dict[str, Any]) -> Movie:
    """`fields` is keyed by stored names (camelCase)."""
    data = storable(fields)
    data["createdAt"] = SERVER_TIMESTAMP
    movie_id = await store.add(MOVIES, data)
    logger.info("Created movie %s (%s).", movie_id, fields.get("title"))
    movie = await get_movie(store, movie_id)
    return movie or Movie.model_validate({**fields, "id": movie_id})


async def update_movie(store: DocumentStore, movie_id: str, fields: Dict[str, Any]) -> Optional[Movie]:
    """Merge only the provided fields. Raises DocumentNotFound for an unknown id."""
    if fields:
        await store.update(MOVIES, movie_id, storable(fields))
    return await get_movie(store, movie_id)


async def delete_movie(store: DocumentStore, movie_id: str) -> None:
    # Bookings referencing the movie are left alone; their movie embed resolves to None
    await store.delete(MOVIES, movie_id)
    logger.info("Deleted movie %s.", movie_id)


async def list_related_movies(
    store: DocumentStore,
    movie_id: str,
    genres: Sequence[str],
    limit: Optional[int] = None,
) -> List[Movie]:
    """
    Movies sharing one of the first two genres, excluding `movie_id`.

    The store cannot combine array-contains-any with an inequality on the id,
    so the current movie is removed in memory after an overfetch.
    """
    limit = limit or settings.RELATED_MOVIES_LIMIT
    wanted = [g for g in genres if g][:2]
    if not wanted:
        return []
    docs = await store.query(
        MOVIES,
        filters=[Filter("genre", "array-contains-any", wanted)],
        limit=max(settings.RELATED_MOVIES_OVERFETCH, limit + 1),
    )
    related = [m for m in Movie.parse_documents(docs) if m.id != movie_id]
    return related[:limit]
