"""
Tests for Pydantic models and numeric coercion helpers.
"""

import logging

import pytest
from pydantic import ValidationError

from tirehub.models.inputs import (
    DEFAULT_RESULT_LIMIT,
    ExternalListing,
    MatchQuery,
    Product,
    TireCategory,
    clamp_result_limit,
)
from tirehub.models.numbers import normalize_rim_diameter, parse_number, round_price
from tirehub.models.outputs import TireSpecification


class TestNumbers:
    """Tests for the numeric helpers."""

    @pytest.mark.parametrize("value,expected", [
        (899.4, 899.4),
        (12, 12.0),
        ("1,250.00", 1250.0),
        ("$1049.5", 1049.5),
        ("  42 ", 42.0),
    ])
    def test_parse_number_accepts_loose_formats(self, value, expected):
        """Ints, floats and formatted strings parse to float."""
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [None, "", "N/D", True, float("nan"), "inf"])
    def test_parse_number_rejects_junk(self, value):
        """Anything that is not a finite number gives None."""
        assert parse_number(value) is None

    def test_round_price_halves_round_up(self):
        """Half units round up, like the storefront does."""
        assert round_price(899.5) == 900
        assert round_price(899.4) == 899
        assert round_price("1049.5") == 1050

    def test_round_price_invalid_is_zero(self):
        """Unparseable prices rank as 0."""
        assert round_price("N/D") == 0
        assert round_price(None) == 0

    @pytest.mark.parametrize("value,expected", [
        (15, 15),
        (15.0, 15),
        ("15", 15),
        ("R15", 15),
        ("r15", 15),
        (" R 22 ", 22),
    ])
    def test_normalize_rim_diameter(self, value, expected):
        """R prefix and surrounding whitespace are ignored."""
        assert normalize_rim_diameter(value) == expected

    @pytest.mark.parametrize("value", [None, "", "R", "15.5", 15.5, "abc", True, "²", "R١٥"])
    def test_normalize_rim_diameter_junk_is_none(self, value):
        assert normalize_rim_diameter(value) is None


class TestResultLimit:
    """Tests for result limit clamping."""

    @pytest.mark.parametrize("value,expected", [
        (None, DEFAULT_RESULT_LIMIT),
        (0, DEFAULT_RESULT_LIMIT),
        ("abc", DEFAULT_RESULT_LIMIT),
        (-5, 1),
        (1, 1),
        (25, 25),
        ("30", 30),
        (500, 100),
    ])
    def test_clamp(self, value, expected):
        assert clamp_result_limit(value) == expected


class TestMatchQuery:
    """Tests for MatchQuery validation."""

    def test_car_query(self):
        """A query with an aspect ratio is a car query."""
        query = MatchQuery(width=155, aspect_ratio=70, rim_diameter=13)

        assert query.category == TireCategory.CAR
        assert query.label == "155/70R13"
        assert query.search_text == "155 70 13"
        assert query.result_limit == DEFAULT_RESULT_LIMIT
        assert query.exact_mode is False

    def test_truck_query(self):
        """A query without an aspect ratio is a truck query."""
        query = MatchQuery(width=1100, rim_diameter="R22")

        assert query.category == TireCategory.TRUCK
        assert query.rim_diameter == 22
        assert query.label == "1100R22"
        assert query.search_text == "1100 22"

    def test_string_fields_are_coerced(self):
        """Numeric strings from HTTP clients are accepted."""
        query = MatchQuery(width="205", aspect_ratio="55", rim_diameter="R16")

        assert (query.width, query.aspect_ratio, query.rim_diameter) == (205, 55, 16)

    def test_blank_aspect_ratio_is_truck(self):
        """Empty or zero aspect ratio means 'not given'."""
        assert MatchQuery(width=1100, aspect_ratio="").aspect_ratio is None
        assert MatchQuery(width=1100, aspect_ratio=0).category == TireCategory.TRUCK

    def test_width_required(self):
        with pytest.raises(ValidationError):
            MatchQuery(aspect_ratio=70)

    @pytest.mark.parametrize("field", ["width", "aspect_ratio", "rim_diameter"])
    def test_non_numeric_rejected(self, field):
        """Junk in a query field is a caller error, not a silent mismatch."""
        values = {"width": 155, "aspect_ratio": 70, "rim_diameter": 13}
        values[field] = "abc"
        with pytest.raises(ValidationError):
            MatchQuery(**values)

    def test_negative_width_rejected(self):
        with pytest.raises(ValidationError):
            MatchQuery(width=-155)

    def test_result_limit_clamped(self):
        """Out-of-range limits are clamped instead of rejected."""
        assert MatchQuery(width=155, result_limit=1000).result_limit == 100
        assert MatchQuery(width=155, result_limit=-3).result_limit == 1
        assert MatchQuery(width=155, result_limit="x").result_limit == DEFAULT_RESULT_LIMIT

    def test_frozen(self):
        query = MatchQuery(width=155)
        with pytest.raises(ValidationError):
            query.width = 165


class TestProduct:
    """Tests for price list rows."""

    def test_spreadsheet_headers(self):
        """Column headers of the spreadsheet export map onto fields."""
        product = Product.model_validate({
            "ID Producto": "LL-18560-15A",
            "Producto": "185/60 R15 JK TYRE VECTRA 88 H",
            "PRECIO FINAL": "1,275.00",
            "Exit.": "6",
        })

        assert product.id == "LL-18560-15A"
        assert product.name == "185/60 R15 JK TYRE VECTRA 88 H"
        assert product.price == 1275.0
        assert product.stock == 6.0

    def test_plain_field_names(self):
        product = Product(id="A1", name="x", price=10, stock=2)
        assert product.price == 10.0

    def test_numeric_id_is_stringified(self):
        product = Product.model_validate({"ID Producto": 1234, "Producto": None})
        assert product.id == "1234"
        assert product.name == ""

    def test_junk_price_becomes_zero_and_logs(self, caplog):
        """Non-numeric prices default to 0 with a warning."""
        with caplog.at_level(logging.WARNING, logger="tirehub.models.inputs"):
            product = Product.model_validate({"ID Producto": "V-1", "Producto": "VALVULA", "PRECIO FINAL": "N/D"})

        assert product.price == 0.0
        assert product.stock == 0.0
        assert "price" in caplog.text


class TestExternalListing:
    """Tests for external search rows."""

    def test_service_field_names(self):
        listing = ExternalListing.model_validate({
            "clave": "EX-1",
            "descripcion": "205/55ZR16 BRIDGESTONE",
            "precioNeto": "2310.5",
            "existencia": 5,
        })

        assert listing.key == "EX-1"
        assert listing.description == "205/55ZR16 BRIDGESTONE"
        assert listing.price == 2310.5
        assert listing.stock == 5.0

    def test_missing_stock_is_zero(self):
        listing = ExternalListing.model_validate({"clave": "EX-9", "descripcion": "x", "precioNeto": 10})
        assert listing.stock == 0.0


class TestTireSpecification:
    """Tests for TireSpecification."""

    def test_unparseable(self):
        spec = TireSpecification.unparseable("OIL FILTER XYZ")

        assert spec.is_parseable is False
        assert spec.category is None
        assert spec.label == ""
        assert spec.original_text == "OIL FILTER XYZ"

    def test_rim_normalised(self):
        """Candidate rim diameters are normalised; junk becomes None."""
        assert TireSpecification(width=185, rim_diameter="R15").rim_diameter == 15
        assert TireSpecification(width=185, rim_diameter="??").rim_diameter is None
        assert TireSpecification(width=185, rim_diameter="²").rim_diameter is None

    def test_truck_with_aspect_ratio_rejected(self):
        """Truck sizes carry no aspect ratio."""
        with pytest.raises(ValidationError, match="must not have an aspect_ratio"):
            TireSpecification(width=1100, aspect_ratio=70, rim_diameter=22, category=TireCategory.TRUCK)

    @pytest.mark.parametrize("category", [TireCategory.CAR, TireCategory.TRUCK])
    def test_categorised_size_requires_rim(self, category):
        with pytest.raises(ValidationError, match="requires rim_diameter"):
            TireSpecification(width=155, aspect_ratio=None, category=category)

    def test_car_without_rim_rejected(self):
        with pytest.raises(ValidationError, match="requires rim_diameter"):
            TireSpecification(width=155, aspect_ratio=70, category=TireCategory.CAR)

    def test_junk_rim_on_car_rejected(self):
        """A junk diameter becomes None, which a car size cannot have."""
        with pytest.raises(ValidationError, match="requires rim_diameter"):
            TireSpecification(width=185, aspect_ratio=60, rim_diameter="??", category=TireCategory.CAR)

    @pytest.mark.parametrize("category", list(TireCategory))
    def test_missing_width_carries_no_category(self, category):
        with pytest.raises(ValidationError, match="carries no category"):
            TireSpecification(width=None, category=category)

    def test_valid_sizes_accepted(self):
        car = TireSpecification(width=155, aspect_ratio=70, rim_diameter=13, category=TireCategory.CAR)
        truck = TireSpecification(width=1100, rim_diameter=22, category=TireCategory.TRUCK)

        assert car.is_parseable and truck.is_parseable
        assert truck.aspect_ratio is None

    def test_label(self):
        spec = TireSpecification(width=1100, rim_diameter=22, category=TireCategory.TRUCK)
        assert spec.label == "1100R22"

    def test_json_round_trip(self):
        spec = TireSpecification(
            width=185, aspect_ratio=60, rim_diameter=15,
            category=TireCategory.CAR, original_text="185/60 R15",
        )
        restored = TireSpecification.model_validate_json(spec.model_dump_json())
        assert restored == spec
        assert restored.category == TireCategory.CAR
