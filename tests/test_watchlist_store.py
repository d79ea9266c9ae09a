import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.models.watchlist import WatchlistCreateRequest, WatchlistItemAddRequest, WatchlistItemUpdateRequest
from app.services.watchlist_store import WatchlistStore
from tests.conftest import movie_payload


@pytest.fixture
def store(tmdb_service, tmdb_router) -> WatchlistStore:
    for movie_id in (1, 2, 3):
        tmdb_router.routes[f"/3/movie/{movie_id}"] = movie_payload(movie_id, [28], runtime=90)
    return WatchlistStore(tmdb_service)


def test_create_watchlist_once_per_user(store):
    watchlist = store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))
    assert watchlist.user_id == "alice"
    assert watchlist.items == []

    with pytest.raises(ConflictError):
        store.create_watchlist("alice", WatchlistCreateRequest(name="Again"))

    other = store.create_watchlist("bob", WatchlistCreateRequest(name="Bob's"))
    assert other.id != watchlist.id


def test_unknown_user_is_not_found(store):
    with pytest.raises(NotFoundError):
        store.get_items("nobody")
    with pytest.raises(NotFoundError):
        store.get_stats("nobody")


@pytest.mark.asyncio
async def test_add_item_fetches_details_and_rejects_duplicates(store):
    store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))

    item = await store.add_item("alice", WatchlistItemAddRequest(movie_id=1, rating=8))

    assert item.id == 1
    assert item.movie is not None
    assert item.movie.genre_ids == [28]
    with pytest.raises(ConflictError):
        await store.add_item("alice", WatchlistItemAddRequest(movie_id=1))


@pytest.mark.asyncio
async def test_add_item_keeps_going_when_details_fail(store):
    store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))

    item = await store.add_item("alice", WatchlistItemAddRequest(movie_id=404))

    assert item.movie is None
    assert item.movie_id == 404


@pytest.mark.asyncio
async def test_item_ids_are_never_reused(store):
    store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))
    first = await store.add_item("alice", WatchlistItemAddRequest(movie_id=1))
    second = await store.add_item("alice", WatchlistItemAddRequest(movie_id=2))

    store.remove_item("alice", first.id)
    third = await store.add_item("alice", WatchlistItemAddRequest(movie_id=3))

    assert third.id not in (first.id, second.id)
    assert [item.id for item in store.get_items("alice")] == [second.id, third.id]


@pytest.mark.asyncio
async def test_update_and_remove(store):
    store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))
    item = await store.add_item("alice", WatchlistItemAddRequest(movie_id=1))

    updated = store.update_item(
        "alice", item.id, WatchlistItemUpdateRequest(status="completed", rating=9, notes="great")
    )
    assert updated.status == "completed"
    assert updated.rating == 9
    assert updated.notes == "great"

    with pytest.raises(NotFoundError):
        store.update_item("alice", 99, WatchlistItemUpdateRequest())

    store.remove_item("alice", item.id)
    assert store.get_items("alice") == []
    with pytest.raises(NotFoundError):
        store.remove_item("alice", item.id)


@pytest.mark.asyncio
async def test_returned_items_are_snapshots(store):
    store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))
    await store.add_item("alice", WatchlistItemAddRequest(movie_id=1))

    items = store.get_items("alice")
    items[0].rating = 10

    assert store.get_items("alice")[0].rating == 0


@pytest.mark.asyncio
async def test_get_watchlist_refreshes_details(store, tmdb_router):
    store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))
    await store.add_item("alice", WatchlistItemAddRequest(movie_id=404))
    tmdb_router.routes["/3/movie/404"] = movie_payload(404, [18])

    watchlist = await store.get_watchlist("alice")

    assert watchlist.items[0].movie is not None
    assert watchlist.items[0].movie.genre_ids == [18]


@pytest.mark.asyncio
async def test_stats(store):
    store.create_watchlist("alice", WatchlistCreateRequest(name="Mine"))
    await store.add_item("alice", WatchlistItemAddRequest(movie_id=1, status="completed", rating=8))
    await store.add_item("alice", WatchlistItemAddRequest(movie_id=2, status="watching", rating=0))
    await store.add_item("alice", WatchlistItemAddRequest(movie_id=3, status="completed", rating=6))

    stats = store.get_stats("alice")

    assert stats.total_items == 3
    assert stats.completed_items == 2
    assert stats.watching_items == 1
    assert stats.to_watch_items == 0
    assert stats.average_rating == 7
    assert stats.total_hours == 4
