"""
Pytest configuration and shared fixtures.
"""

import json

import pytest

from tirehub.models.inputs import ExternalListing, Product
from tirehub.tire_catalog.loader import PriceCatalog


PRICE_LIST_ROWS = [
    {"ID Producto": "LL-15570-13A", "Producto": "155 70 13 TORNEL CLASICA 75T", "Exit.": 12, "PRECIO FINAL": 899.4},
    {"ID Producto": "LL-15570-13B", "Producto": "155 70 R13 HANKOOK KINERGY ECO 75T", "Exit.": 4, "PRECIO FINAL": 1049.5},
    {"ID Producto": "LL-15565-13A", "Producto": "155/65R13 KUMHO ECOWING 73T", "Exit.": 7, "PRECIO FINAL": 820},
    {"ID Producto": "LL-17565-14A", "Producto": "175 65 R14 MICHELIN ENERGY XM2 82H", "Exit.": 8, "PRECIO FINAL": 1520},
    {"ID Producto": "LL-18560-15A", "Producto": "185/60 R15 JK TYRE VECTRA 88 H", "Exit.": 6, "PRECIO FINAL": 1275},
    {"ID Producto": "LL-18565-15A", "Producto": "185 65 15 GOODYEAR ASSURANCE 88T", "Exit.": 10, "PRECIO FINAL": 1399},
    {"ID Producto": "CT-1100-22A", "Producto": "1100 R22 T-2400 14/C", "Exit.": 2, "PRECIO FINAL": 6890},
    {"ID Producto": "CT-1100-20A", "Producto": "1100 R20 CONTINENTAL HDR 16/C", "Exit.": 1, "PRECIO FINAL": 6420},
    {"ID Producto": "AC-FIL-001", "Producto": "OIL FILTER XYZ", "Exit.": 40, "PRECIO FINAL": 89},
]


@pytest.fixture
def price_list_rows() -> list[dict]:
    """Raw price list rows as found in the spreadsheet export."""
    return [dict(row) for row in PRICE_LIST_ROWS]


@pytest.fixture
def sample_products(price_list_rows) -> list[Product]:
    """Validated price list rows."""
    return [Product.model_validate(row) for row in price_list_rows]


@pytest.fixture
def price_list_file(tmp_path, price_list_rows):
    """Price list written to a temporary JSON file."""
    path = tmp_path / "price_list.json"
    path.write_text(json.dumps(price_list_rows), encoding="utf-8")
    return path


@pytest.fixture
def catalog(price_list_file) -> PriceCatalog:
    """Loaded price catalog backed by the temporary file."""
    catalog = PriceCatalog(str(price_list_file))
    catalog.load()
    return catalog


@pytest.fixture
def external_rows() -> list[dict]:
    """Rows as returned by the external catalog search service."""
    return [
        {"clave": "EX-1", "descripcion": "205/55ZR16 BRIDGESTONE POTENZA 91W", "precioNeto": 2310.0, "existencia": 5},
        {"clave": "EX-2", "descripcion": "205 55 R16 HANKOOK VENTUS PRIME 91V", "precioNeto": 1890.6, "existencia": 2},
        {"clave": "EX-3", "descripcion": "LLANTA 205/55RF16 RUNFLAT 91V", "precioNeto": 3100.0, "existencia": 1},
        {"clave": "EX-4", "descripcion": "205/55R16 SIN EXISTENCIA", "precioNeto": 1500.0, "existencia": 0},
        {"clave": "EX-5", "descripcion": "215/55R16 OTRA MEDIDA", "precioNeto": 1700.0, "existencia": 9},
        {"clave": "EX-6", "descripcion": "205/60R16 OTRO PERFIL", "precioNeto": 1600.0, "existencia": 4},
    ]


@pytest.fixture
def external_listings(external_rows) -> list[ExternalListing]:
    """Validated external listings."""
    return [ExternalListing.model_validate(row) for row in external_rows]
