"""Search area shapes drawn by the caller for area discovery."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class LatLng(BaseModel):
    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class CircleArea(BaseModel):
    type: Literal["circle"] = "circle"
    center: LatLng
    radius: float | None = Field(None, gt=0, description="Radius in meters")


class RectangleArea(BaseModel):
    type: Literal["rectangle"] = "rectangle"
    north: float
    south: float
    east: float
    west: float

    @model_validator(mode="before")
    @classmethod
    def _flatten_bounds(cls, data):
        # Map drawing tools send {"type": "rectangle", "bounds": {...}}
        if isinstance(data, dict) and isinstance(data.get("bounds"), dict):
            return {"type": data.get("type", "rectangle"), **data["bounds"]}
        return data


class PolygonArea(BaseModel):
    type: Literal["polygon"] = "polygon"
    coordinates: list[LatLng] = Field(min_length=3)


class PolylineArea(BaseModel):
    type: Literal["polyline"] = "polyline"
    coordinates: list[LatLng] = Field(min_length=2)


class MultiPolygonArea(BaseModel):
    type: Literal["multipolygon"] = "multipolygon"
    polygons: list[list[LatLng]] = Field(min_length=1)

    @field_validator("polygons")
    @classmethod
    def _validate_rings(cls, polygons: list[list[LatLng]]) -> list[list[LatLng]]:
        for index, ring in enumerate(polygons):
            if len(ring) < 3:
                raise ValueError(f"polygon {index} needs at least 3 vertices, got {len(ring)}")
        return polygons

    def split(self) -> list[PolygonArea]:
        return [PolygonArea(coordinates=ring) for ring in self.polygons]


SearchArea = Annotated[
    CircleArea | RectangleArea | PolygonArea | PolylineArea | MultiPolygonArea,
    Field(discriminator="type"),
]
