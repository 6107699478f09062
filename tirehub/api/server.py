"""
FastAPI server for the price list and tire search.

Provides REST API endpoints over the price list, tire size parsing,
tire search against the local price list, and tire search proxied to
the external catalog search service.
"""

import logging
from functools import lru_cache
from typing import Any, Optional, Union

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import AliasChoices, BaseModel, Field

from tirehub import __version__
from tirehub.config import Settings
from tirehub.logging_setup import configure_logging
from tirehub.models.inputs import DEFAULT_RESULT_LIMIT, MatchQuery, Product
from tirehub.models.outputs import ParseResult, TireSearchResult
from tirehub.remote.search_client import CatalogSearchClient, ExternalSearchError
from tirehub.tire_catalog.extractor import extract_with_rule
from tirehub.tire_catalog.loader import PriceCatalog
from tirehub.tire_catalog.matcher import search_catalog, search_external


logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Tire Price List API",
    description="""
    Price list lookup and tire size search.

    Product names are parsed into width / aspect ratio / rim diameter so
    tires can be searched by size, locally or through the external catalog.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Dependencies
# =============================================================================

@lru_cache
def get_settings() -> Settings:
    """Settings from the environment, read once."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings


@lru_cache
def get_catalog() -> PriceCatalog:
    """The shared price list, loaded on first use."""
    catalog = PriceCatalog(get_settings().price_list_path)
    catalog.reload()
    return catalog


def get_search_client(settings: Settings = Depends(get_settings)) -> Optional[CatalogSearchClient]:
    """External search client, or None when no endpoint is configured."""
    if not settings.external_search_enabled:
        return None
    return CatalogSearchClient(
        url=settings.external_search_url,
        company_id=settings.external_company_id,
        timeout=settings.external_timeout_s,
    )


# =============================================================================
# Request / response models
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    data_loaded: bool
    total_records: int


class ProductListResponse(BaseModel):
    """A list of price list rows."""
    total: int
    data: list[Product]


class ProductSearchRequest(BaseModel):
    """Request body for price list search."""
    query: Optional[str] = None
    product_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("product_id", "productId"))
    product_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("product_name", "productName"))
    price_min: Optional[float] = Field(default=None, validation_alias=AliasChoices("price_min", "priceMin"))
    price_max: Optional[float] = Field(default=None, validation_alias=AliasChoices("price_max", "priceMax"))
    limit: int = Field(default=50, ge=1)


class ReloadResponse(BaseModel):
    """Result of reloading the price list."""
    success: bool
    total: int


class TireParseRequest(BaseModel):
    """Request body for tire size parsing."""
    product_name: Optional[str] = None


class TireSearchRequest(BaseModel):
    """
    Request body for tire search.

    Accepts the field spellings used by existing clients
    (aspect_ratio / aspectRatio, rim_diameter / diameter).
    """
    width: Optional[Union[int, float, str]] = None
    aspect_ratio: Optional[Union[int, float, str]] = Field(
        default=None, validation_alias=AliasChoices("aspect_ratio", "aspectRatio")
    )
    rim_diameter: Optional[Union[int, float, str]] = Field(
        default=None, validation_alias=AliasChoices("rim_diameter", "diameter")
    )
    exact_match: bool = False
    limit: Optional[Any] = DEFAULT_RESULT_LIMIT

    model_config = {
        "json_schema_extra": {
            "example": {"width": 155, "aspect_ratio": 70, "rim_diameter": 13}
        }
    }

    def to_query(self) -> MatchQuery:
        """Resolve into a MatchQuery; raises ValueError on bad input."""
        if self.width is None or self.width == "":
            raise ValueError("Tire width (width) is a required parameter")
        return MatchQuery(
            width=self.width,
            aspect_ratio=self.aspect_ratio,
            rim_diameter=self.rim_diameter,
            exact_mode=self.exact_match,
            result_limit=self.limit,
        )


class BatchTireSearchRequest(BaseModel):
    """Several tire sizes searched in one request."""
    queries: list[TireSearchRequest] = Field(..., min_length=1)
    limit: Optional[Any] = None


class BatchTireSearchResponse(BaseModel):
    """One search result per requested size."""
    total_found: int
    searches: list[TireSearchResult]


def _query_or_400(request: TireSearchRequest) -> MatchQuery:
    try:
        return request.to_query()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# =============================================================================
# Routes
# =============================================================================

@app.get("/", tags=["System"])
async def root():
    """List the available endpoints."""
    return {
        "message": "Tire Price List API",
        "version": __version__,
        "endpoints": {
            "/health": "GET - Health check",
            "/api/price-list/products": "GET - All products",
            "/api/price-list/search": "POST - Search products",
            "/api/price-list/product/{product_id}": "GET - Product by ID",
            "/api/price-list/reload": "POST - Reload the price list",
            "/api/price-list/tire-parse": "POST - Parse a tire size from a product name",
            "/api/price-list/tire-search": "POST - Tire search in the price list",
            "/api/price-list/tire-search-external": "POST - Tire search in the external catalog",
            "/api/price-list/tire-search-external/batch": "POST - Several sizes in the external catalog",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["System"])
async def health_check(catalog: PriceCatalog = Depends(get_catalog)):
    """Check if the API is running and the price list is loaded."""
    return HealthResponse(
        status="healthy",
        version=__version__,
        data_loaded=catalog.is_loaded,
        total_records=len(catalog),
    )


@app.get("/api/price-list/products", response_model=ProductListResponse, tags=["Price List"])
async def list_products(catalog: PriceCatalog = Depends(get_catalog)):
    """Get every row of the price list."""
    products = list(catalog.get())
    return ProductListResponse(total=len(products), data=products)


@app.post("/api/price-list/search", response_model=ProductListResponse, tags=["Price List"])
async def search_products(
    request: ProductSearchRequest,
    catalog: PriceCatalog = Depends(get_catalog),
):
    """
    Search the price list by id, name or price range.

    Results are sorted by price, cheapest first.
    """
    try:
        products = catalog.search(
            query=request.query,
            product_id=request.product_id,
            product_name=request.product_name,
            price_min=request.price_min,
            price_max=request.price_max,
            limit=request.limit,
        )
        return ProductListResponse(total=len(products), data=products)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.get("/api/price-list/product/{product_id}", response_model=Product, tags=["Price List"])
async def get_product(product_id: str, catalog: PriceCatalog = Depends(get_catalog)):
    """Get a product by its identifier (case-insensitive)."""
    product = catalog.find_by_id(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product ID {product_id} not found")
    return product


@app.post("/api/price-list/reload", response_model=ReloadResponse, tags=["Price List"])
async def reload_products(catalog: PriceCatalog = Depends(get_catalog)):
    """Reload the price list from disk."""
    success = catalog.reload()
    return ReloadResponse(success=success, total=len(catalog))


@app.post("/api/price-list/tire-parse", response_model=ParseResult, tags=["Tires"])
async def tire_parse(request: TireParseRequest):
    """Parse a tire size out of a product name."""
    if not request.product_name:
        raise HTTPException(status_code=400, detail="product_name required")
    spec, rule = extract_with_rule(request.product_name)
    return ParseResult(
        input=request.product_name,
        parsed_specs=spec,
        is_parseable=spec.is_parseable,
        rule=rule,
    )


@app.post("/api/price-list/tire-search", response_model=TireSearchResult, tags=["Tires"])
async def tire_search(
    request: TireSearchRequest,
    catalog: PriceCatalog = Depends(get_catalog),
    settings: Settings = Depends(get_settings),
):
    """
    Search the price list for tires of a given size.

    Car search when aspect_ratio is given, truck search otherwise.
    Results are sorted by price, cheapest first.
    """
    query = _query_or_400(request)
    try:
        return search_catalog(query, catalog.get(), settings.matcher)
    except Exception as e:
        logger.exception("Tire search failed")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post("/api/price-list/tire-search-external", response_model=TireSearchResult, tags=["Tires"])
def tire_search_external(
    request: TireSearchRequest,
    client: Optional[CatalogSearchClient] = Depends(get_search_client),
):
    """
    Search the external catalog for tires of a given size.

    Listings are filtered by a size regex and by stock > 0.
    """
    query = _query_or_400(request)
    if client is None:
        raise HTTPException(status_code=503, detail="External search is not configured")
    try:
        listings = client.search(query.search_text)
        return search_external(query, listings)
    except ExternalSearchError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.exception("External tire search failed")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")


@app.post(
    "/api/price-list/tire-search-external/batch",
    response_model=BatchTireSearchResponse,
    tags=["Tires"],
)
def tire_search_external_batch(
    request: BatchTireSearchRequest,
    client: Optional[CatalogSearchClient] = Depends(get_search_client),
):
    """
    Search the external catalog for several sizes at once.

    A size whose search fails contributes an empty result.
    """
    queries = []
    for item in request.queries:
        if request.limit is not None:
            item = item.model_copy(update={"limit": request.limit})
        queries.append(_query_or_400(item))

    if client is None:
        raise HTTPException(status_code=503, detail="External search is not configured")

    try:
        listing_sets = client.search_many(q.search_text for q in queries)
        searches = [
            search_external(query, listings)
            for query, listings in zip(queries, listing_sets)
        ]
        return BatchTireSearchResponse(
            total_found=sum(s.total_found for s in searches),
            searches=searches,
        )
    except Exception as e:
        logger.exception("Batch external tire search failed")
        raise HTTPException(status_code=500, detail=f"Internal error: {str(e)}")
