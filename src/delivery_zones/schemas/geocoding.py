"""Pydantic response models for geocoding endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from .zones import BoundsModel, CoordinateModel


class PlaceSuggestionModel(BaseModel):
    place_id: str
    description: str
    main_text: Optional[str] = None
    secondary_text: Optional[str] = None


class PlaceDetailsModel(BaseModel):
    place_id: str
    name: str
    formatted_address: str
    location: CoordinateModel
    bounds: Optional[BoundsModel] = None
    viewport: Optional[BoundsModel] = None
    city: Optional[str] = None


class AreaDraftModel(BaseModel):
    name: str
    place_id: str
    address: str
    centroid: CoordinateModel
    radius_km: float
    bounds: Optional[BoundsModel] = None
    viewport: Optional[BoundsModel] = None
    city: Optional[str] = None


class ReverseGeocodeResponse(BaseModel):
    address: str
    city: Optional[str] = None
