"""
Price list loader.

Loads the product price list from a JSON export and keeps it in memory
behind an explicit load()/get() contract. Reloading swaps in a new
immutable tuple, so readers never see a half-loaded list.
"""

import json
import logging
import importlib.resources as resources
import os
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from tirehub.models.inputs import Product
from tirehub.models.numbers import round_price


logger = logging.getLogger(__name__)

# Default price list filename
DEFAULT_PRICE_LIST_NAME = "price_list.json"
PRICE_LIST_ENV_VAR = "TIREHUB_PRICE_LIST"


def get_project_root() -> Path:
    """Get the project root directory."""
    # Try to find project root by looking for pyproject.toml
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").exists():
            return parent
    # Fallback to current working directory
    return Path.cwd()


PACKAGED_SOURCE = "packaged sample tirehub.data/price_list.json"


def _read_resource(filename: str) -> Optional[str]:
    """
    Read a packaged data file inside tirehub.data.

    Returns the file text or None if the resource is unavailable.
    """
    try:
        resource = resources.files("tirehub.data").joinpath(filename)
        if resource.is_file():
            return resource.read_text(encoding="utf-8")
    except (ModuleNotFoundError, FileNotFoundError):
        return None
    return None


def resolve_price_list_path(path: Optional[str] = None) -> Path:
    """
    Find the best available filesystem path for the price list.

    Order: explicit path, $TIREHUB_PRICE_LIST, then data/price_list.json in
    the project root or working directory. When none of the default
    locations exists the first one is returned; load_products then falls
    back to the packaged sample.
    """
    if path:
        return Path(path)

    env_path = os.environ.get(PRICE_LIST_ENV_VAR)
    if env_path:
        return Path(env_path)

    candidates = [
        get_project_root() / "data" / DEFAULT_PRICE_LIST_NAME,  # project / editable install
        Path.cwd() / "data" / DEFAULT_PRICE_LIST_NAME,          # current working dir
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    # Default to first candidate for error reporting
    return candidates[0]


def _read_price_list(path: Optional[str]) -> tuple[str, str]:
    """Return (JSON text, source description) for the price list."""
    file_path = resolve_price_list_path(path)

    if file_path.exists():
        with open(file_path, 'r', encoding='utf-8') as f:
            return f.read(), str(file_path)

    # Only the default lookup falls back to the packaged sample
    if not path and not os.environ.get(PRICE_LIST_ENV_VAR):
        text = _read_resource(DEFAULT_PRICE_LIST_NAME)
        if text is not None:
            return text, PACKAGED_SOURCE

    raise FileNotFoundError(f"Price list not found at {file_path}.")


def load_products(path: Optional[str] = None) -> list[Product]:
    """
    Load price list rows from a JSON file.

    Args:
        path: Path to JSON file. If None, uses default location.

    Returns:
        List of Product objects

    Raises:
        FileNotFoundError: If the price list file doesn't exist
        ValueError: If the file is not a JSON array of row objects
    """
    text, source = _read_price_list(path)
    data = json.loads(text)

    if not isinstance(data, list):
        raise ValueError(f"Price list at {source} must be a JSON array of rows")

    products = [Product.model_validate(item) for item in data]
    logger.info("Loaded %d price list rows from %s", len(products), source)
    return products


class PriceCatalog:
    """
    In-memory price list.

    Example:
        catalog = PriceCatalog("data/price_list.json")
        catalog.load()
        tires = catalog.search(query="175 65")
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._products: tuple[Product, ...] = ()

    @classmethod
    def from_products(cls, products: list[Product]) -> "PriceCatalog":
        """Build a catalog around rows that are already loaded."""
        catalog = cls()
        catalog._products = tuple(products)
        return catalog

    @property
    def is_loaded(self) -> bool:
        return len(self._products) > 0

    def load(self) -> int:
        """
        Load the price list, replacing the current rows.

        Returns:
            Number of rows loaded

        Raises:
            FileNotFoundError: If the price list file doesn't exist
            ValueError: If the file cannot be parsed
        """
        products = load_products(self.path)
        self._products = tuple(products)
        return len(products)

    def reload(self) -> bool:
        """Like load(), but reports failure instead of raising."""
        try:
            self.load()
        except (OSError, ValueError, ValidationError) as e:
            logger.error("Failed to load price list: %s", e)
            return False
        return True

    def get(self) -> tuple[Product, ...]:
        """Current rows."""
        return self._products

    def __len__(self) -> int:
        return len(self._products)

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """Case-insensitive exact lookup by product identifier."""
        wanted = str(product_id).strip().lower()
        for product in self._products:
            if product.id.lower() == wanted:
                return product
        return None

    def search(
        self,
        query: Optional[str] = None,
        product_id: Optional[str] = None,
        product_name: Optional[str] = None,
        price_min: Optional[float] = None,
        price_max: Optional[float] = None,
        limit: int = 50,
    ) -> list[Product]:
        """
        Filter the price list.

        Args:
            query: Substring of product id or name
            product_id: Substring of product id
            product_name: Substring of product name
            price_min: Minimum rounded price (inclusive)
            price_max: Maximum rounded price (inclusive)
            limit: Maximum number of rows to return

        Returns:
            Matching rows, cheapest first

        Raises:
            ValueError: If no search criterion is given
        """
        if not any([query, product_id, product_name]) and price_min is None and price_max is None:
            raise ValueError("At least one search parameter is required")

        results = list(self._products)

        if query:
            term = str(query).strip().lower()
            results = [p for p in results if term in p.id.lower() or term in p.name.lower()]

        if product_id:
            term = str(product_id).strip().lower()
            results = [p for p in results if term in p.id.lower()]

        if product_name:
            term = str(product_name).strip().lower()
            results = [p for p in results if term in p.name.lower()]

        if price_min is not None:
            results = [p for p in results if round_price(p.price) >= price_min]
        if price_max is not None:
            results = [p for p in results if round_price(p.price) <= price_max]

        results.sort(key=lambda p: round_price(p.price))
        return results[:max(int(limit), 1)]
