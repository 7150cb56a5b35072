# module boutique.catalog.models
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

AVAILABLE = "available"
NOT_AVAILABLE = "not available"


def _normalize_availability(v: str) -> str:
    v = (v or "").strip().lower()
    if v not in (AVAILABLE, NOT_AVAILABLE):
        raise ValueError("availability doit valoir 'available' ou 'not available'")
    return v


class ProductIn(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: float = Field(gt=0)
    category: Optional[str] = None
    materials: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    availability: str = AVAILABLE

    @field_validator("availability")
    def availability_known(cls, v: str) -> str:
        return _normalize_availability(v)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, gt=0)
    category: Optional[str] = None
    materials: Optional[str] = None
    images: Optional[List[str]] = None
    availability: Optional[str] = None

    @field_validator("availability")
    def availability_known(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _normalize_availability(v)
