"""Conversions between domain objects and API schemas."""

from __future__ import annotations

from typing import Optional

from ..models.domain import Area, BoundingBox, Coordinate, ResolutionResult, ZoneCatalog
from ..schemas.zones import (
    AreaModel,
    BoundsModel,
    CoordinateModel,
    MatchModel,
    NearbyModel,
    ResolveResponse,
    ZoneModel,
)

AVAILABLE_MESSAGE = "Delivery available"
NOT_SERVICEABLE_MESSAGE = "Location not serviceable, please pick a point within a highlighted zone."


def coordinate_from_model(model: CoordinateModel) -> Coordinate:
    return Coordinate(lat=model.lat, lng=model.lng)


def bounds_from_model(model: BoundsModel) -> BoundingBox:
    return BoundingBox(
        southwest=coordinate_from_model(model.southwest),
        northeast=coordinate_from_model(model.northeast),
    )


def coordinate_to_model(point: Coordinate) -> CoordinateModel:
    return CoordinateModel(lat=point.lat, lng=point.lng)


def bounds_to_model(bounds: Optional[BoundingBox]) -> Optional[BoundsModel]:
    if bounds is None:
        return None
    return BoundsModel(
        southwest=coordinate_to_model(bounds.southwest),
        northeast=coordinate_to_model(bounds.northeast),
    )


def area_to_model(area: Area) -> AreaModel:
    return AreaModel(
        name=area.name,
        centroid=coordinate_to_model(area.centroid),
        bounds=bounds_to_model(area.bounds),
        radius_km=area.radius_km,
        place_id=area.external_ref,
        address=area.address,
    )


def catalog_to_models(catalog: ZoneCatalog) -> list[ZoneModel]:
    return [
        ZoneModel(
            name=zone.name,
            active=zone.active,
            display_order=zone.display_order,
            delivery_type=zone.delivery_type,
            shop_location=coordinate_to_model(zone.shop_location) if zone.shop_location else None,
            shop_address=zone.shop_address,
            delivery_radius_km=zone.delivery_radius_km,
            areas=[area_to_model(area) for area in zone.areas],
        )
        for zone in catalog.zones()
    ]


def resolution_to_response(result: ResolutionResult) -> ResolveResponse:
    payload = result.to_dict()
    return ResolveResponse(
        available=result.matched,
        message=AVAILABLE_MESSAGE if result.matched else NOT_SERVICEABLE_MESSAGE,
        match=MatchModel(**payload["match"]) if payload["match"] else None,
        nearby=[NearbyModel(**item) for item in payload["nearby"]],
    )
