"""
Output models for tire parsing and search results.

TireSpecification is the structured form of a free-text product name.
MatchResult and TireSearchResult carry ranked search results back to
the API and CLI.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tirehub.models.inputs import MatchMode, MatchQuery, TireCategory
from tirehub.models.numbers import normalize_rim_diameter


class TireSpecification(BaseModel):
    """
    Structured tire size parsed from a product name.

    A specification with width=None is the "unparseable" result and
    carries no category. Car sizes carry an aspect ratio; truck sizes
    (e.g. '1100 R22') do not.
    """
    width: Optional[int] = Field(default=None, description="Tire width in mm")
    aspect_ratio: Optional[int] = Field(default=None, description="Aspect ratio (car tires only)")
    rim_diameter: Optional[int] = Field(default=None, description="Rim diameter in inches")
    category: Optional[TireCategory] = Field(
        default=None,
        description="'car' or 'truck'; None when the name could not be parsed",
    )
    original_text: str = Field(default="", description="Source text, kept for diagnostics")

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "width": 185,
                "aspect_ratio": 60,
                "rim_diameter": 15,
                "category": "car",
                "original_text": "185/60 R15 JK TYRE VECTRA 88 H",
            }
        },
    }

    @field_validator("rim_diameter", mode="before")
    @classmethod
    def normalize_rim(cls, v: Any) -> Optional[int]:
        # Junk diameters become None; the category checks below still apply
        return normalize_rim_diameter(v)

    @model_validator(mode="after")
    def check_category_fields(self) -> "TireSpecification":
        """Car and truck sizes need width and rim; only car sizes carry an aspect ratio."""
        if self.width is None:
            if self.category is not None:
                raise ValueError("a specification without width carries no category")
            return self
        if self.category in (TireCategory.CAR, TireCategory.TRUCK) and self.rim_diameter is None:
            raise ValueError(f"{self.category.value} specification requires rim_diameter")
        if self.category == TireCategory.TRUCK and self.aspect_ratio is not None:
            raise ValueError("truck specification must not have an aspect_ratio")
        return self

    @classmethod
    def unparseable(cls, text: str = "") -> "TireSpecification":
        """The result for a name that matches no size pattern."""
        return cls(original_text=text)

    @property
    def is_parseable(self) -> bool:
        return self.width is not None

    @property
    def label(self) -> str:
        """Size label such as '155/70R13' or '1100R22' ('' if unparseable)."""
        if self.width is None:
            return ""
        size = str(self.width)
        if self.aspect_ratio is not None:
            size += f"/{self.aspect_ratio}"
        if self.rim_diameter is not None:
            size += f"R{self.rim_diameter}"
        return size


class MatchResult(BaseModel):
    """A product that satisfied a query, with the specification it matched on."""
    product_id: str = Field(..., description="Product or listing identifier")
    product_name: str = Field(..., description="Product name or listing description")
    price: int = Field(..., description="Price rounded to whole units, used for ranking")
    stock: float = Field(default=0.0, description="Units in stock")
    specification: TireSpecification = Field(..., description="Specification used for matching")

    model_config = {"frozen": True}


class TireSearchResult(BaseModel):
    """
    Complete result of a tire search.

    total_found counts every match; results holds at most
    query.result_limit of them, cheapest first.
    """
    search_type: TireCategory = Field(..., description="'car' or 'truck'")
    search_spec: str = Field(..., description="Size label of the query, e.g. '155/70R13'")
    total_found: int = Field(default=0, ge=0, description="Matches before truncation")
    results: list[MatchResult] = Field(default_factory=list, description="Ranked matches")
    query: MatchQuery = Field(..., description="The resolved query")
    mode: Optional[MatchMode] = Field(
        default=None,
        description="Matching mode used; None for regex-filtered external searches",
    )


class ParseResult(BaseModel):
    """Result of parsing a single product name."""
    input: str
    parsed_specs: TireSpecification
    is_parseable: bool
    rule: Optional[str] = Field(default=None, description="Name of the pattern rule that matched")
