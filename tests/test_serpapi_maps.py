"""Tests for the SerpAPI nearby search provider."""

import pytest

from lead_discovery.discovery.errors import ProviderCallError
from lead_discovery.vendors import serpapi_maps


class FakeSearch:
    instances = []
    response = {}

    def __init__(self, params):
        self.params = params
        self.timeout = None
        FakeSearch.instances.append(self)

    def get_dict(self):
        return FakeSearch.response


@pytest.fixture(autouse=True)
def patch_google_search(monkeypatch):
    FakeSearch.instances = []
    FakeSearch.response = {}
    monkeypatch.setattr(serpapi_maps, "GoogleSearch", FakeSearch)
    return FakeSearch


@pytest.mark.parametrize(
    "radius, zoom",
    [(5000, 13), (1388, 14), (500, 15), (50000, 13)],
)
def test_zoom_for_radius(radius, zoom):
    assert serpapi_maps.zoom_for_radius(radius) == zoom


def test_build_serpapi_params():
    params = serpapi_maps.build_serpapi_params(43.6, -79.4, 1388, " bakery ", "key")

    assert params == {
        "engine": "google_maps",
        "q": "bakery",
        "ll": "@43.6,-79.4,14z",
        "type": "search",
        "api_key": "key",
    }


def test_build_serpapi_params_requires_keyword():
    with pytest.raises(ValueError):
        serpapi_maps.build_serpapi_params(43.6, -79.4, 1000, " ", "key")


def test_search_nearby_normalises_local_results(patch_google_search):
    patch_google_search.response = {
        "local_results": [
            {"place_id": "a", "title": "Alpha Bakery", "address": "1 Main", "rating": 4.6, "reviews": 120},
            {"title": "No Id Bakery"},
            "garbage",
            {"place_id": "b", "title": "Beta Bakery"},
        ]
    }
    provider = serpapi_maps.SerpApiMapsProvider("key", timeout=7)

    records = provider.search_nearby(43.6, -79.4, 1388, "bakery")

    assert [r["id"] for r in records] == ["a", "b"]
    assert records[0]["relevance_score"] == 20
    search = patch_google_search.instances[0]
    assert search.timeout == 7
    assert search.params["ll"] == "@43.6,-79.4,14z"


def test_search_nearby_reads_nested_local_results(patch_google_search):
    patch_google_search.response = {"local_results": {"places": [{"place_id": "a", "title": "Alpha"}]}}

    records = serpapi_maps.SerpApiMapsProvider("key").search_nearby(43.6, -79.4, 1000, "cafe")

    assert [r["id"] for r in records] == ["a"]


def test_search_nearby_no_results_is_empty(patch_google_search):
    patch_google_search.response = {"error": "Google hasn't returned any results for this query."}

    assert serpapi_maps.SerpApiMapsProvider("key").search_nearby(43.6, -79.4, 1000, "cafe") == []


@pytest.mark.parametrize("response", [{}, {"error": "Invalid API key."}])
def test_search_nearby_raises_provider_error(patch_google_search, response):
    patch_google_search.response = response

    with pytest.raises(ProviderCallError):
        serpapi_maps.SerpApiMapsProvider("key").search_nearby(43.6, -79.4, 1000, "cafe")
