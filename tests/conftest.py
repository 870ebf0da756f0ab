import pytest

from delivery_zones.models.domain import Area, BoundingBox, Coordinate, Zone, ZoneCatalog


def make_area(
    name: str,
    lat: float,
    lng: float,
    *,
    radius_km: float | None = None,
    bounds: tuple[float, float, float, float] | None = None,
    place_id: str | None = None,
) -> Area:
    box = None
    if bounds is not None:
        sw_lat, sw_lng, ne_lat, ne_lng = bounds
        box = BoundingBox(
            southwest=Coordinate(lat=sw_lat, lng=sw_lng),
            northeast=Coordinate(lat=ne_lat, lng=ne_lng),
        )
    return Area(
        name=name,
        centroid=Coordinate(lat=lat, lng=lng),
        bounds=box,
        radius_km=radius_km,
        external_ref=place_id,
    )


@pytest.fixture
def dha_phase_5() -> Area:
    return make_area(
        "DHA Phase 5",
        31.4697,
        74.4216,
        bounds=(31.460, 74.410, 31.480, 74.430),
        place_id="place-dha-5",
    )


@pytest.fixture
def model_town() -> Area:
    return make_area("Model Town", 31.48, 74.33)


@pytest.fixture
def lahore_catalog(dha_phase_5: Area, model_town: Area) -> ZoneCatalog:
    return ZoneCatalog.from_zones([Zone(name="Lahore", areas=(dha_phase_5, model_town))])
