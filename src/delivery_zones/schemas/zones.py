"""Pydantic request/response models for zone endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CoordinateModel(BaseModel):
    lat: float = Field(..., description="Latitude in decimal degrees.")
    lng: float = Field(..., description="Longitude in decimal degrees.")


class BoundsModel(BaseModel):
    southwest: CoordinateModel
    northeast: CoordinateModel


class AreaModel(BaseModel):
    name: str
    centroid: CoordinateModel
    bounds: Optional[BoundsModel] = None
    radius_km: Optional[float] = None
    place_id: Optional[str] = None
    address: Optional[str] = None


class ZoneModel(BaseModel):
    name: str
    active: bool
    display_order: int
    delivery_type: str = Field(
        default="city",
        description="'city' matches areas; 'range' matches the shop circle.",
    )
    shop_location: Optional[CoordinateModel] = None
    shop_address: Optional[str] = None
    delivery_radius_km: float = 0.0
    areas: list[AreaModel]


class CatalogResponse(BaseModel):
    zones: list[ZoneModel]
    zone_count: int
    area_count: int
    published_at: Optional[datetime] = None


class ResolveRequest(BaseModel):
    lat: float = Field(..., description="Latitude of the delivery location.")
    lng: float = Field(..., description="Longitude of the delivery location.")
    city: Optional[str] = Field(default=None, description="Restrict matching to one city.")
    default_area_radius_km: Optional[float] = Field(default=None, gt=0.0)
    nearby_threshold_km: Optional[float] = Field(default=None, ge=0.0)
    max_nearby_results: Optional[int] = Field(default=None, ge=0)


class MatchModel(BaseModel):
    zone: str
    area: str


class NearbyModel(BaseModel):
    area: str
    zone: str
    distance_km: float


class ResolveResponse(BaseModel):
    available: bool
    message: str
    match: Optional[MatchModel] = None
    nearby: list[NearbyModel] = Field(default_factory=list)


class RadiusEstimateRequest(BaseModel):
    centroid: CoordinateModel
    bounds: BoundsModel


class RadiusEstimateResponse(BaseModel):
    radius_km: float
