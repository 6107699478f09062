"""
Input models for tire search.

These models describe what callers hand to the core: the search query,
price list rows from the catalog, and rows returned by the external
catalog search service.
"""

import logging
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationInfo, field_validator

from tirehub.models.numbers import normalize_rim_diameter, parse_number


logger = logging.getLogger(__name__)

# Result limit bounds for tire searches
MIN_RESULT_LIMIT = 1
MAX_RESULT_LIMIT = 100
DEFAULT_RESULT_LIMIT = 10


class TireCategory(str, Enum):
    """Tire class inferred from the size notation."""
    CAR = "car"
    TRUCK = "truck"
    UNKNOWN = "unknown"


class MatchMode(str, Enum):
    """How strictly a query is compared against candidate specifications."""
    EXACT = "exact"
    TOLERANT = "tolerant"


def clamp_result_limit(value: Any) -> int:
    """Clamp a requested result limit into [MIN_RESULT_LIMIT, MAX_RESULT_LIMIT]."""
    number = parse_number(value)
    if number is None or number == 0:
        return DEFAULT_RESULT_LIMIT
    return min(max(int(number), MIN_RESULT_LIMIT), MAX_RESULT_LIMIT)


def _coerce_amount(value: Any, field_name: str, owner: str) -> float:
    """Normalise a price or stock value, logging when a default is used."""
    number = parse_number(value)
    if number is None:
        logger.warning(
            "%s: non-numeric %s %r normalised to 0", owner, field_name, value
        )
        return 0.0
    return number


class MatchQuery(BaseModel):
    """
    Target tire size for a search.

    A query with an aspect ratio is a car query; without one it is a
    truck query. Rim diameter accepts "R15" style values.
    """
    width: int = Field(..., gt=0, description="Tire width in mm")
    aspect_ratio: Optional[int] = Field(
        default=None,
        gt=0,
        description="Sidewall height as a percentage of width (car tires only)",
    )
    rim_diameter: Optional[int] = Field(
        default=None,
        gt=0,
        description="Rim diameter in inches; 'R15' and '15' are equivalent",
    )
    exact_mode: bool = Field(default=False, description="Require exact equality on all supplied fields")
    result_limit: int = Field(
        default=DEFAULT_RESULT_LIMIT,
        ge=MIN_RESULT_LIMIT,
        le=MAX_RESULT_LIMIT,
        description="Maximum number of results, clamped to [1, 100]",
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "width": 155,
                "aspect_ratio": 70,
                "rim_diameter": 13,
                "exact_mode": False,
                "result_limit": 10,
            }
        },
    }

    @field_validator("aspect_ratio", mode="before")
    @classmethod
    def blank_aspect_ratio_is_absent(cls, v: Any) -> Any:
        if v is None or v == "" or v == 0:
            return None
        return v

    @field_validator("rim_diameter", mode="before")
    @classmethod
    def normalize_rim(cls, v: Any) -> Optional[int]:
        if v is None or v == "" or v == 0:
            return None
        rim = normalize_rim_diameter(v)
        if rim is None:
            raise ValueError(f"rim_diameter must be numeric (optionally prefixed with R), got {v!r}")
        return rim

    @field_validator("result_limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        return clamp_result_limit(v)

    @property
    def category(self) -> TireCategory:
        """CAR when an aspect ratio is given, otherwise TRUCK."""
        if self.aspect_ratio is not None:
            return TireCategory.CAR
        return TireCategory.TRUCK

    @property
    def label(self) -> str:
        """Size label such as '155/70R13' or '1100R22'."""
        size = str(self.width)
        if self.aspect_ratio is not None:
            size += f"/{self.aspect_ratio}"
        if self.rim_diameter is not None:
            size += f"R{self.rim_diameter}"
        return size

    @property
    def search_text(self) -> str:
        """Free-text query for the external search service, e.g. '205 55 16'."""
        parts = [self.width, self.aspect_ratio, self.rim_diameter]
        return " ".join(str(p) for p in parts if p is not None)


class Product(BaseModel):
    """
    A row of the price list.

    Accepts both plain field names and the column headers of the
    spreadsheet export ('ID Producto', 'Producto', 'PRECIO FINAL', 'Exit.').
    """
    id: str = Field(
        ...,
        validation_alias=AliasChoices("id", "ID Producto"),
        description="Product identifier",
    )
    name: str = Field(
        default="",
        validation_alias=AliasChoices("name", "Producto"),
        description="Free-text product name",
    )
    price: float = Field(
        default=None,
        validate_default=True,
        validation_alias=AliasChoices("price", "PRECIO FINAL"),
        description="Final price; non-numeric values become 0",
    )
    stock: float = Field(
        default=None,
        validate_default=True,
        validation_alias=AliasChoices("stock", "Exit."),
        description="Units in stock; non-numeric values become 0",
    )

    model_config = {"frozen": True}

    @field_validator("id", "name", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("price", "stock", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any, info: ValidationInfo) -> float:
        return _coerce_amount(v, info.field_name, "price list row")


class ExternalListing(BaseModel):
    """
    A row returned by the external catalog search service.

    Field names follow the service ('clave', 'descripcion', 'precioNeto',
    'existencia'); plain names are accepted too.
    """
    key: str = Field(
        default="",
        validation_alias=AliasChoices("key", "clave"),
        description="Listing identifier in the external catalog",
    )
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "descripcion"),
        description="Free-text listing description",
    )
    price: float = Field(
        default=None,
        validate_default=True,
        validation_alias=AliasChoices("price", "precioNeto"),
        description="Net price; non-numeric values become 0",
    )
    stock: float = Field(
        default=None,
        validate_default=True,
        validation_alias=AliasChoices("stock", "existencia"),
        description="Units available; non-numeric values become 0",
    )

    model_config = {"frozen": True}

    @field_validator("key", "description", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str:
        if v is None:
            return ""
        return str(v).strip()

    @field_validator("price", "stock", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any, info: ValidationInfo) -> float:
        return _coerce_amount(v, info.field_name, "external listing")
