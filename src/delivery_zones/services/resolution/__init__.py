from .radius import estimate_radius_km
from .resolver import ResolveOptions, effective_radius_km, resolve

__all__ = ["resolve", "ResolveOptions", "effective_radius_km", "estimate_radius_km"]
