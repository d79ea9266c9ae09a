import asyncio
import itertools
import threading
from datetime import datetime, timezone

from loguru import logger

from app.core.exceptions import ConflictError, MediaServiceError, NotFoundError
from app.core.security import redact_secret
from app.models.media import Movie
from app.models.watchlist import (
    Watchlist,
    WatchlistCreateRequest,
    WatchlistItem,
    WatchlistItemAddRequest,
    WatchlistItemUpdateRequest,
    WatchlistStats,
)
from app.services.tmdb.service import TMDBService


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WatchlistStore:
    """
    Process-local watchlists, one per user id.

    Every read and write of the map happens under one lock; callers always get
    copies, never the stored objects. Movie details are fetched outside the
    lock and a failed lookup leaves the item without details.
    """

    def __init__(self, tmdb_service: TMDBService):
        self.tmdb_service = tmdb_service
        self._lock = threading.Lock()
        self._watchlists: dict[str, Watchlist] = {}
        self._next_item_id: dict[str, int] = {}
        self._watchlist_ids = itertools.count(1)

    def _require(self, user_id: str) -> Watchlist:
        watchlist = self._watchlists.get(user_id)
        if watchlist is None:
            raise NotFoundError("watchlist not found")
        return watchlist

    async def _details(self, movie_id: int) -> Movie | None:
        try:
            return await self.tmdb_service.get_movie_details(movie_id)
        except MediaServiceError as e:
            logger.warning(f"Could not load details for movie {movie_id}: {e}")
            return None

    def create_watchlist(self, user_id: str, request: WatchlistCreateRequest) -> Watchlist:
        with self._lock:
            if user_id in self._watchlists:
                raise ConflictError("user already has a watchlist")
            watchlist = Watchlist(
                id=next(self._watchlist_ids),
                user_id=user_id,
                name=request.name,
                description=request.description,
                is_public=request.is_public,
            )
            self._watchlists[user_id] = watchlist
            self._next_item_id[user_id] = 1
            logger.info(f"Created watchlist {watchlist.id} for user {redact_secret(user_id)}")
            return watchlist.model_copy(deep=True)

    async def get_watchlist(self, user_id: str) -> Watchlist:
        """Return the watchlist with fresh movie details on every item."""
        with self._lock:
            movie_ids = [item.movie_id for item in self._require(user_id).items]

        details = await asyncio.gather(*(self._details(movie_id) for movie_id in movie_ids))
        fetched = {movie.id: movie for movie in details if movie is not None}

        with self._lock:
            watchlist = self._require(user_id)
            for item in watchlist.items:
                if item.movie_id in fetched:
                    item.movie = fetched[item.movie_id]
            return watchlist.model_copy(deep=True)

    def get_items(self, user_id: str) -> list[WatchlistItem]:
        """Snapshot of the user's items, as stored."""
        with self._lock:
            return [item.model_copy(deep=True) for item in self._require(user_id).items]

    async def add_item(self, user_id: str, request: WatchlistItemAddRequest) -> WatchlistItem:
        with self._lock:
            watchlist = self._require(user_id)
            if any(item.movie_id == request.movie_id for item in watchlist.items):
                raise ConflictError("movie already in watchlist")

        movie = await self._details(request.movie_id)

        with self._lock:
            watchlist = self._require(user_id)
            # another request may have added the same movie while details were loading
            if any(item.movie_id == request.movie_id for item in watchlist.items):
                raise ConflictError("movie already in watchlist")

            item_id = self._next_item_id[user_id]
            self._next_item_id[user_id] = item_id + 1
            item = WatchlistItem(
                id=item_id,
                watchlist_id=watchlist.id,
                movie_id=request.movie_id,
                movie=movie,
                status=request.status,
                rating=request.rating,
                notes=request.notes,
            )
            watchlist.items.append(item)
            watchlist.updated_at = _utcnow()
            return item.model_copy(deep=True)

    def update_item(self, user_id: str, item_id: int, request: WatchlistItemUpdateRequest) -> WatchlistItem:
        with self._lock:
            watchlist = self._require(user_id)
            for item in watchlist.items:
                if item.id == item_id:
                    item.status = request.status
                    item.rating = request.rating
                    item.notes = request.notes
                    item.updated_at = watchlist.updated_at = _utcnow()
                    return item.model_copy(deep=True)
        raise NotFoundError("watchlist item not found")

    def remove_item(self, user_id: str, item_id: int) -> None:
        with self._lock:
            watchlist = self._require(user_id)
            for index, item in enumerate(watchlist.items):
                if item.id == item_id:
                    del watchlist.items[index]
                    watchlist.updated_at = _utcnow()
                    return
        raise NotFoundError("watchlist item not found")

    def get_stats(self, user_id: str) -> WatchlistStats:
        with self._lock:
            items = list(self._require(user_id).items)

        stats = WatchlistStats(total_items=len(items))
        ratings = [item.rating for item in items if item.rating > 0]
        total_minutes = 0
        for item in items:
            if item.status == "completed":
                stats.completed_items += 1
            elif item.status == "watching":
                stats.watching_items += 1
            elif item.status == "to_watch":
                stats.to_watch_items += 1
            elif item.status == "dropped":
                stats.dropped_items += 1
            if item.movie is not None and item.movie.runtime > 0:
                total_minutes += item.movie.runtime

        if ratings:
            stats.average_rating = sum(ratings) / len(ratings)
        stats.total_hours = total_minutes // 60
        return stats
