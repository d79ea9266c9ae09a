import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.app import create_app
from app.core.config import Settings
from app.services.container import build_services
from tests.conftest import Router, listing, movie_payload, tv_payload

USER = {"X-User-ID": "alice"}


@pytest.fixture
def client(settings, tmdb_router, omdb_router):
    tmdb_router.routes.update(
        {
            "/3/search/movie": listing([movie_payload(i, [28]) for i in range(1, 4)]),
            "/3/search/tv": listing([tv_payload(50, [18])]),
            "/3/movie/1": movie_payload(1, [28, 12], runtime=120),
            "/3/movie/2": movie_payload(2, [28], runtime=60),
            "/3/tv/50": tv_payload(50, [18]),
            "/3/trending/movie/day": listing([movie_payload(1, [28])], total_pages=4),
            "/3/trending/movie/week": listing(
                [movie_payload(1, [28, 12]), movie_payload(3, [28, 12]), movie_payload(4, [28])]
            ),
            "/3/trending/tv/week": listing([tv_payload(50, [18])]),
            "/3/discover/movie": listing([movie_payload(7, [27])], total_pages=3),
            "/3/genre/movie/list": {"genres": [{"id": 28, "name": "Action"}, {"id": 27, "name": "Horror"}]},
        }
    )
    omdb_router.routes["/"] = {"Response": "False", "Error": "Movie not found!"}

    services = build_services(
        settings, tmdb_transport=tmdb_router.transport(), omdb_transport=omdb_router.transport()
    )
    app = create_app(settings, services=services)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Request-ID" in response.headers


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


def test_search(client):
    response = client.get("/api/v1/movies/search", params={"q": "matrix", "per_page": 2, "page": 2})
    body = response.json()

    assert response.status_code == 200
    assert body["success"] is True
    assert body["query"] == "matrix"
    assert [m["id"] for m in body["results"]] == [3, 50]
    assert body["meta"] == {
        "page": 2,
        "per_page": 2,
        "total_pages": 2,
        "total_results": 4,
        "has_next": False,
        "has_prev": True,
    }


def test_search_requires_query(client):
    response = client.get("/api/v1/movies/search")
    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["code"] == 400


def test_movie_details_without_omdb_match(client):
    response = client.get("/api/v1/movies/1")
    assert response.status_code == 200
    assert response.json()["data"]["genre_ids"] == [28, 12]


def test_unknown_movie_is_404(client):
    response = client.get("/api/v1/movies/999")
    body = response.json()
    assert response.status_code == 404
    assert body["path"] == "/api/v1/movies/999"
    assert body["error"] == "Not Found"


def test_invalid_movie_id_is_400(client):
    assert client.get("/api/v1/movies/abc").status_code == 400


def test_similar_movies(client):
    response = client.get("/api/v1/movies/1/similar", params={"limit": 5})
    assert [m["id"] for m in response.json()["data"]] == [3, 4]


def test_genres_and_discover(client):
    genres = client.get("/api/v1/movies/genres").json()["data"]
    assert [g["name"] for g in genres] == ["Action", "Horror"]

    response = client.get("/api/v1/movies/genres/27", params={"page": 1})
    body = response.json()
    assert [m["id"] for m in body["data"]] == [7]
    assert body["meta"]["per_page"] == 20
    assert body["meta"]["has_next"] is True


def test_media_details(client):
    assert client.get("/api/v1/media/tv/50").json()["data"]["name"] == "Show 50"
    assert client.get("/api/v1/media/movie/1").json()["data"]["title"] == "Movie 1"
    assert client.get("/api/v1/media/book/1").status_code == 400


def test_trending(client):
    response = client.get("/api/v1/trending", params={"timeframe": "day"})
    body = response.json()
    assert body["timeframe"] == "day"
    assert [m["id"] for m in body["trending"]] == [1]
    assert body["meta"]["total_pages"] == 4

    assert client.get("/api/v1/trending", params={"timeframe": "year"}).status_code == 400


def test_trending_by_genre_stats_and_genres(client):
    assert client.get("/api/v1/trending/by-genre", params={"genre_id": 27}).json()["data"][0]["id"] == 7

    stats = client.get("/api/v1/trending/stats").json()["data"]
    assert stats["daily_trending_count"] == 1
    assert stats["weekly_trending_count"] == 3

    genres = client.get("/api/v1/trending/genres").json()["data"]
    assert genres[0] == {"genre": {"id": 28, "name": "Action"}, "count": 3, "popular": True}
    assert genres[1]["popular"] is False


def test_watchlist_flow(client):
    assert client.get("/api/v1/watchlist").status_code == 400
    assert client.get("/api/v1/watchlist", headers=USER).status_code == 404

    created = client.post("/api/v1/watchlist", json={"name": "Favourites"}, headers=USER)
    assert created.status_code == 201
    assert client.post("/api/v1/watchlist", json={"name": "Again"}, headers=USER).status_code == 409

    added = client.post("/api/v1/watchlist/items", json={"movie_id": 1, "rating": 8}, headers=USER)
    assert added.status_code == 201
    item_id = added.json()["data"]["id"]
    client.post("/api/v1/watchlist/items", json={"movie_id": 2, "rating": 9, "status": "completed"}, headers=USER)
    assert client.post("/api/v1/watchlist/items", json={"movie_id": 1}, headers=USER).status_code == 409

    updated = client.put(
        "/api/v1/watchlist/items",
        params={"item_id": item_id},
        json={"status": "watching", "rating": 7, "notes": "rewatch"},
        headers=USER,
    )
    assert updated.json()["data"]["status"] == "watching"

    watchlist = client.get("/api/v1/watchlist", headers=USER).json()["data"]
    assert [i["movie_id"] for i in watchlist["items"]] == [1, 2]

    stats = client.get("/api/v1/watchlist/stats", headers=USER).json()["data"]
    assert stats["total_items"] == 2
    assert stats["total_hours"] == 3
    assert stats["average_rating"] == 8

    recs = client.get("/api/v1/watchlist/recommendations", params={"limit": 2}, headers=USER).json()
    assert recs["user_id"] == "alice"
    assert len(recs["recommendations"]) == 2
    assert recs["meta"]["per_page"] == 2

    removed = client.delete("/api/v1/watchlist/items", params={"item_id": item_id}, headers=USER)
    assert removed.status_code == 200
    assert client.delete("/api/v1/watchlist/items", params={"item_id": item_id}, headers=USER).status_code == 404


def test_watchlist_validation(client):
    client.post("/api/v1/watchlist", json={"name": "Mine"}, headers=USER)
    assert client.post("/api/v1/watchlist", json={"name": ""}, headers={"X-User-ID": "bob"}).status_code == 400
    bad_rating = client.post("/api/v1/watchlist/items", json={"movie_id": 1, "rating": 11}, headers=USER)
    assert bad_rating.status_code == 400
    bad_status = client.post("/api/v1/watchlist/items", json={"movie_id": 1, "status": "lost"}, headers=USER)
    assert bad_status.status_code == 400


def test_cache_admin(client):
    client.get("/api/v1/movies/genres")
    assert client.get("/api/v1/cache/stats").json()["data"]["entries"] >= 1
    assert client.post("/api/v1/cache/sweep").json()["data"]["removed"] == 0
    assert client.delete("/api/v1/cache/missing").json()["data"]["deleted"] is False
    assert client.delete("/api/v1/cache/").status_code == 200
    assert client.get("/api/v1/cache/stats").json()["data"]["entries"] == 0


def test_provider_failure_maps_to_gateway_errors(settings):
    router = Router({"/3/genre/movie/list": httpx.Response(500), "/3/trending/movie/day": httpx.Response(429)})
    services = build_services(settings, tmdb_transport=router.transport(), omdb_transport=Router().transport())
    with TestClient(create_app(settings, services=services)) as client:
        assert client.get("/api/v1/movies/genres").status_code == 502
        assert client.get("/api/v1/trending").status_code == 503


def test_inbound_rate_limit():
    settings = Settings(_env_file=None, INBOUND_RATE_LIMIT_PER_MINUTE=2, CACHE_SWEEP_INTERVAL_SECONDS=0)
    with TestClient(create_app(settings)) as client:
        assert client.get("/health").status_code == 200
        assert client.get("/health").status_code == 200
        limited = client.get("/health")

    assert limited.status_code == 429
    assert limited.json()["code"] == 429
    assert "Retry-After" in limited.headers
