import httpx
import pytest

from delivery_zones.models.domain import Coordinate, InvalidCoordinateError
from delivery_zones.services.geocoding import client as client_module
from delivery_zones.services.geocoding import GeocodingError, GoogleGeocodingClient

BASE_URL = "https://maps.example.test/api"

DHA_DETAILS = {
    "status": "OK",
    "result": {
        "place_id": "place-dha-5",
        "name": "DHA Phase 5",
        "formatted_address": "DHA Phase 5, Lahore, Punjab, Pakistan",
        "geometry": {
            "location": {"lat": 31.4697, "lng": 74.4216},
            "bounds": {
                "southwest": {"lat": 31.46, "lng": 74.41},
                "northeast": {"lat": 31.48, "lng": 74.43},
            },
            "viewport": {
                "southwest": {"lat": 31.45, "lng": 74.40},
                "northeast": {"lat": 31.49, "lng": 74.44},
            },
        },
        "address_components": [
            {"long_name": "DHA Phase 5", "types": ["sublocality"]},
            {"long_name": "Lahore", "types": ["locality", "political"]},
        ],
    },
}


def _client(handler, **kwargs) -> GoogleGeocodingClient:
    return GoogleGeocodingClient(
        api_key="test-key",
        base_url=BASE_URL,
        region="pk",
        max_retries=kwargs.pop("max_retries", 2),
        backoff_seconds=0,
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


def test_search_scopes_query_to_city_and_country() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "predictions": [
                    {
                        "place_id": "place-dha-5",
                        "description": "DHA Phase 5, Lahore",
                        "structured_formatting": {"main_text": "DHA Phase 5", "secondary_text": "Lahore"},
                    },
                    {"description": "no place id"},
                ],
            },
        )

    suggestions = _client(handler).search("DHA", city="Lahore")

    assert [s.place_id for s in suggestions] == ["place-dha-5"]
    assert suggestions[0].main_text == "DHA Phase 5"
    request = seen[0]
    assert request.url.path == "/api/place/autocomplete/json"
    assert request.url.params["input"] == "DHA, Lahore"
    assert request.url.params["components"] == "country:pk"
    assert request.url.params["key"] == "test-key"


def test_short_queries_skip_the_network() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _client(handler).search(" D ") == []


def test_place_details_parses_geometry_and_city() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["place_id"] == "place-dha-5"
        return httpx.Response(200, json=DHA_DETAILS)

    details = _client(handler).place_details("place-dha-5")

    assert details is not None
    assert details.name == "DHA Phase 5"
    assert details.location == Coordinate(lat=31.4697, lng=74.4216)
    assert details.bounds is not None and details.bounds.northeast.lat == 31.48
    assert details.viewport is not None and details.viewport.southwest.lng == 74.40
    assert details.city == "Lahore"


def test_place_details_without_result_is_none() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "NOT_FOUND"})

    assert _client(handler).place_details("missing") is None


def test_reverse_geocode_returns_first_result() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["latlng"] == "31.5,74.35"
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {
                        "formatted_address": "Gulberg III, Lahore",
                        "address_components": [
                            {"long_name": "Lahore", "types": ["administrative_area_level_2"]}
                        ],
                    },
                    {"formatted_address": "Punjab, Pakistan"},
                ],
            },
        )

    result = _client(handler).reverse_geocode(Coordinate(lat=31.5, lng=74.35))

    assert result is not None
    assert result.address == "Gulberg III, Lahore"
    assert result.city == "Lahore"


def test_reverse_geocode_rejects_invalid_point() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(InvalidCoordinateError):
        _client(handler).reverse_geocode(Coordinate(lat=120.0, lng=74.35))


def test_api_error_status_raises_with_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "Key rejected"})

    with pytest.raises(GeocodingError) as excinfo:
        _client(handler).search("Gulberg")

    assert excinfo.value.status == "REQUEST_DENIED"
    assert "Key rejected" in str(excinfo.value)


def test_server_errors_are_retried() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(503)
        return httpx.Response(200, json={"status": "ZERO_RESULTS", "predictions": []})

    assert _client(handler).search("Gulberg") == []
    assert calls["count"] == 2


def test_client_errors_are_not_retried() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(403)

    with pytest.raises(GeocodingError):
        _client(handler).search("Gulberg")
    assert calls["count"] == 1


def test_network_errors_exhaust_retries() -> None:
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(GeocodingError):
        _client(handler, max_retries=1).search("Gulberg")
    assert calls["count"] == 2


def test_missing_api_key_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(client_module.settings, "google_maps_api_key", None)

    with pytest.raises(ValueError):
        GoogleGeocodingClient()
