from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from delivery_zones.api.serializers import AVAILABLE_MESSAGE, NOT_SERVICEABLE_MESSAGE
from delivery_zones.data.catalog_repository import load_catalog
from delivery_zones.main import create_app
from delivery_zones.models.domain import BoundingBox, Coordinate, Zone, ZoneCatalog
from delivery_zones.services.catalog_store import CatalogStore
from delivery_zones.services.geocoding import GeocodingError, PlaceDetails, PlaceSuggestion, ReverseGeocodeResult


class DummyGeocoder:
    def search(self, query, city=None):
        return [PlaceSuggestion(place_id="place-dha-5", description=f"{query}, {city}", main_text=query)]

    def place_details(self, place_id):
        if place_id == "missing":
            return None
        if place_id == "broken":
            raise GeocodingError("upstream unavailable", status="UNKNOWN_ERROR")
        return PlaceDetails(
            place_id=place_id,
            name="DHA Phase 5" if place_id == "place-dha-5" else "Bahria Town",
            formatted_address="Lahore, Pakistan",
            location=Coordinate(lat=31.4697, lng=74.4216),
            bounds=BoundingBox(
                southwest=Coordinate(lat=31.46, lng=74.41),
                northeast=Coordinate(lat=31.48, lng=74.43),
            ),
            city="Lahore",
        )

    def reverse_geocode(self, point):
        return ReverseGeocodeResult(address=f"{point.lat},{point.lng}", city="Lahore")


@pytest.fixture
def published_store(lahore_catalog: ZoneCatalog) -> CatalogStore:
    store = CatalogStore()
    store.publish(lahore_catalog)
    return store


@pytest.fixture
def api_client(published_store: CatalogStore) -> TestClient:
    app = create_app(
        catalog_store=published_store,
        geocoding_client=DummyGeocoder(),
        load_catalog_on_startup=False,
    )
    return TestClient(app)


def test_health_endpoints(api_client: TestClient) -> None:
    assert api_client.get("/api/health").json() == {"status": "ok"}

    catalog_health = api_client.get("/api/health/catalog").json()
    assert catalog_health["ready"] is True
    assert catalog_health["zones_count"] == 1
    assert catalog_health["areas_count"] == 2


def test_resolve_inside_area(api_client: TestClient) -> None:
    response = api_client.post("/api/zones/resolve", json={"lat": 31.47, "lng": 74.42})

    assert response.status_code == 200
    body = response.json()
    assert body["available"] is True
    assert body["message"] == AVAILABLE_MESSAGE
    assert body["match"] == {"zone": "Lahore", "area": "DHA Phase 5"}
    assert body["nearby"] == []


def test_resolve_outside_areas_suggests_nearby(api_client: TestClient) -> None:
    response = api_client.post("/api/zones/resolve", json={"lat": 31.52, "lng": 74.33})

    body = response.json()
    assert response.status_code == 200
    assert body["available"] is False
    assert body["message"] == NOT_SERVICEABLE_MESSAGE
    assert body["match"] is None
    assert [item["area"] for item in body["nearby"]][0] == "Model Town"


def test_resolve_rejects_invalid_point(api_client: TestClient) -> None:
    response = api_client.post("/api/zones/resolve", json={"lat": 95.0, "lng": 74.33})

    assert response.status_code == 422
    assert response.json()["detail"]["message"] == NOT_SERVICEABLE_MESSAGE


def test_zone_endpoints_wait_for_catalog() -> None:
    client = TestClient(create_app(catalog_store=CatalogStore(), load_catalog_on_startup=False))

    assert client.post("/api/zones/resolve", json={"lat": 31.47, "lng": 74.42}).status_code == 503
    assert client.get("/api/zones").status_code == 503
    assert client.get("/api/health/catalog").json()["ready"] is False


def test_list_zones(api_client: TestClient) -> None:
    body = api_client.get("/api/zones").json()

    assert body["zone_count"] == 1
    assert body["area_count"] == 2
    dha = body["zones"][0]["areas"][0]
    assert dha["place_id"] == "place-dha-5"
    assert dha["bounds"]["northeast"] == {"lat": 31.48, "lng": 74.43}


def test_estimate_radius(api_client: TestClient) -> None:
    payload = {
        "centroid": {"lat": 31.4697, "lng": 74.4216},
        "bounds": {"southwest": {"lat": 31.46, "lng": 74.41}, "northeast": {"lat": 31.48, "lng": 74.43}},
    }
    response = api_client.post("/api/zones/estimate-radius", json=payload)

    assert response.status_code == 200
    assert 1.0 < response.json()["radius_km"] < 2.0

    payload["bounds"]["southwest"], payload["bounds"]["northeast"] = (
        payload["bounds"]["northeast"],
        payload["bounds"]["southwest"],
    )
    assert api_client.post("/api/zones/estimate-radius", json=payload).status_code == 422


def test_geojson_export(api_client: TestClient) -> None:
    body = api_client.get("/api/zones/geojson").json()

    assert body["type"] == "FeatureCollection"
    assert [feature["properties"]["area"] for feature in body["features"]] == ["DHA Phase 5", "Model Town"]


def test_place_lookup_and_draft(api_client: TestClient) -> None:
    assert api_client.get("/api/geocode/search", params={"q": "Bahria", "city": "Lahore"}).json()[0][
        "place_id"
    ] == "place-dha-5"
    assert api_client.get("/api/geocode/places/missing").status_code == 404
    assert api_client.get("/api/geocode/places/broken").status_code == 502

    duplicate = api_client.get("/api/geocode/places/place-dha-5/draft", params={"zone": "lahore"})
    assert duplicate.status_code == 409

    draft = api_client.get("/api/geocode/places/place-bahria/draft", params={"zone": "Lahore"})
    assert draft.status_code == 200
    assert draft.json()["name"] == "Bahria Town"
    assert draft.json()["radius_km"] > 0


def test_reverse_geocode(api_client: TestClient) -> None:
    response = api_client.get("/api/geocode/reverse", params={"lat": 31.5, "lng": 74.35})

    assert response.status_code == 200
    assert response.json() == {"address": "31.5,74.35", "city": "Lahore"}
    assert api_client.get("/api/geocode/reverse", params={"lat": 95, "lng": 74.35}).status_code == 422


def test_reload_publishes_workbook(tmp_path: Path) -> None:
    from openpyxl import Workbook

    path = tmp_path / "areas.xlsx"
    wb = Workbook()
    wb.active.append(["City", "Society", "Latitude", "Longitude"])
    wb.active.append(["Karachi", "Clifton", 24.8138, 67.03])
    wb.save(path)

    store = CatalogStore(loader=lambda: load_catalog(source=path))
    client = TestClient(create_app(catalog_store=store, load_catalog_on_startup=False))

    response = client.post("/api/zones/reload")

    assert response.status_code == 200
    assert response.json()["zones"][0]["name"] == "Karachi"
    assert client.post("/api/zones/resolve", json={"lat": 24.8138, "lng": 67.03}).json()["available"] is True


def test_reload_failure_keeps_serving_previous_catalog(tmp_path: Path, lahore_catalog: ZoneCatalog) -> None:
    store = CatalogStore(loader=lambda: load_catalog(source=tmp_path / "absent.xlsx"))
    store.publish(lahore_catalog)
    client = TestClient(create_app(catalog_store=store, load_catalog_on_startup=False))

    assert client.post("/api/zones/reload").status_code == 500
    assert client.get("/api/zones").json()["zone_count"] == 1


def test_reload_reports_unreadable_workbook(tmp_path: Path, lahore_catalog: ZoneCatalog) -> None:
    corrupt = tmp_path / "areas.xlsx"
    corrupt.write_bytes(b"this is not a zip archive")
    store = CatalogStore(loader=lambda: load_catalog(source=corrupt))
    store.publish(lahore_catalog)
    client = TestClient(create_app(catalog_store=store, load_catalog_on_startup=False))

    response = client.post("/api/zones/reload")

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Failed to reload zones")
    assert client.get("/api/zones").json()["zone_count"] == 1


def test_reverse_geocode_validates_before_calling_client() -> None:
    calls: list = []

    class RecordingGeocoder(DummyGeocoder):
        def reverse_geocode(self, point):
            calls.append(point)
            return super().reverse_geocode(point)

    client = TestClient(
        create_app(
            catalog_store=CatalogStore(),
            geocoding_client=RecordingGeocoder(),
            load_catalog_on_startup=False,
        )
    )

    assert client.get("/api/geocode/reverse", params={"lat": 95, "lng": 74.35}).status_code == 422
    assert client.get("/api/geocode/reverse", params={"lat": 31.5, "lng": 200}).status_code == 422
    assert calls == []


def test_range_zone_is_listed_and_resolved() -> None:
    shop = Coordinate(lat=31.52, lng=74.36)
    store = CatalogStore()
    store.publish(
        ZoneCatalog.from_zones(
            [
                Zone(
                    name="Lahore",
                    delivery_type="range",
                    shop_location=shop,
                    shop_address="Main Boulevard Store",
                    delivery_radius_km=5.0,
                )
            ]
        )
    )
    client = TestClient(create_app(catalog_store=store, load_catalog_on_startup=False))

    zone = client.get("/api/zones").json()["zones"][0]
    assert zone["delivery_type"] == "range"
    assert zone["shop_location"] == {"lat": 31.52, "lng": 74.36}
    assert zone["delivery_radius_km"] == 5.0

    body = client.post("/api/zones/resolve", json={"lat": 31.53, "lng": 74.37}).json()
    assert body["available"] is True
    assert body["match"] == {"zone": "Lahore", "area": "Main Boulevard Store"}
