import pytest
import requests

from lead_discovery.discovery.errors import ProviderCallError
from lead_discovery.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self):
        self.calls = []
        self.responses = []
        self.error = None

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture(autouse=True)
def patch_session(monkeypatch):
    session = DummySession()
    monkeypatch.setattr(google_places, "_SESSION", session)
    monkeypatch.setattr(google_places.time, "sleep", lambda _: None)
    return session


def _result(place_id):
    return {"place_id": place_id, "name": f"Place {place_id}", "geometry": {"location": {"lat": 1.0, "lng": 2.0}}}


def test_nearby_search_success(patch_session):
    patch_session.responses.append(DummyResponse(payload={"status": "OK", "results": []}))

    payload = google_places.nearby_search(43.6, -79.4, 7500, "bakery", "key", timeout=4)

    assert payload["status"] == "OK"
    url, params, timeout = patch_session.calls[0]
    assert "nearbysearch" in url
    assert params == {"location": "43.6,-79.4", "radius": 5000, "keyword": "bakery", "key": "key"}
    assert timeout == 4


def test_nearby_search_page_token_only_sends_token(patch_session):
    patch_session.responses.append(DummyResponse(payload={"status": "OK", "results": []}))

    google_places.nearby_search(43.6, -79.4, 1000, "bakery", "key", pagetoken="tok")

    _, params, _ = patch_session.calls[0]
    assert params == {"pagetoken": "tok", "key": "key"}


def test_nearby_search_error_status(patch_session):
    patch_session.responses.append(DummyResponse(payload={"status": "OVER_QUERY_LIMIT", "error_message": "limit"}))

    with pytest.raises(google_places.GooglePlacesError) as excinfo:
        google_places.nearby_search(43.6, -79.4, 1000, "bakery", "key")
    assert isinstance(excinfo.value, ProviderCallError)


@pytest.mark.parametrize("error", [requests.Timeout("slow"), requests.ConnectionError("down")])
def test_nearby_search_wraps_transport_errors(patch_session, error):
    patch_session.error = error

    with pytest.raises(google_places.GooglePlacesError):
        google_places.nearby_search(43.6, -79.4, 1000, "bakery", "key")


def test_nearby_search_http_error(patch_session):
    patch_session.responses.append(DummyResponse(status_code=500))

    with pytest.raises(google_places.GooglePlacesError):
        google_places.nearby_search(43.6, -79.4, 1000, "bakery", "key")


def test_provider_follows_pages_up_to_limit(patch_session):
    patch_session.responses.extend(
        [
            DummyResponse(payload={"status": "OK", "results": [_result("1"), _result("2")], "next_page_token": "a"}),
            DummyResponse(payload={"status": "OK", "results": [_result("3")], "next_page_token": "b"}),
            DummyResponse(payload={"status": "OK", "results": [_result("4")]}),
        ]
    )
    provider = google_places.GooglePlacesProvider("key", max_pages=2, timeout=3)

    records = provider.search_nearby(43.6, -79.4, 1200, "bakery")

    assert [r["id"] for r in records] == ["1", "2", "3"]
    assert len(patch_session.calls) == 2
    assert patch_session.calls[1][1] == {"pagetoken": "a", "key": "key"}
    assert all(call[2] == 3 for call in patch_session.calls)


def test_provider_zero_results(patch_session):
    patch_session.responses.append(DummyResponse(payload={"status": "ZERO_RESULTS", "results": []}))

    assert google_places.GooglePlacesProvider("key").search_nearby(43.6, -79.4, 1200, "bakery") == []


def test_provider_requires_api_key():
    with pytest.raises(ValueError):
        google_places.GooglePlacesProvider("")
