"""
Tests for the external catalog search: relevance filtering and the HTTP client.

The client is exercised against a fake requests session; no network
access is needed.
"""

import pytest
import requests

from tirehub.models.inputs import MatchQuery, TireCategory
from tirehub.remote.search_client import CatalogSearchClient, ExternalSearchError
from tirehub.tire_catalog.matcher import (
    build_relevance_pattern,
    match_external,
    search_external,
)


class FakeResponse:
    """Just enough of requests.Response for the client."""

    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Records posts and replays a canned response (or raises)."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


# =============================================================================
# Relevance pattern
# =============================================================================

class TestRelevancePattern:
    """Tests for build_relevance_pattern."""

    @pytest.mark.parametrize("text", [
        "205/55ZR16 BRIDGESTONE",
        "205 55 R16 HANKOOK",
        "LLANTA 205/55RF16",
        "205/55R16",
        "205/5516",
        "205/55zr16",
    ])
    def test_car_renderings_match(self, text):
        pattern = build_relevance_pattern(MatchQuery(width=205, aspect_ratio=55, rim_diameter=16))
        assert pattern.search(text)

    @pytest.mark.parametrize("text", [
        "215/55R16",
        "205/60R16",
        "205/55R17",
        "205-55-16",
    ])
    def test_other_sizes_rejected(self, text):
        pattern = build_relevance_pattern(MatchQuery(width=205, aspect_ratio=55, rim_diameter=16))
        assert not pattern.search(text)

    def test_truck_pattern(self):
        pattern = build_relevance_pattern(MatchQuery(width=1100, rim_diameter=22))

        assert pattern.search("1100 R22 T-2400 14/C")
        assert pattern.search("1100R22")
        assert not pattern.search("1100 R20 CONTINENTAL")


class TestMatchExternal:
    """Tests for regex-filtered external listings."""

    def test_filters_and_ranks(self, external_listings):
        query = MatchQuery(width=205, aspect_ratio=55, rim_diameter=16)

        results = match_external(query, external_listings)

        assert [r.product_id for r in results] == ["EX-2", "EX-1", "EX-3"]
        assert [r.price for r in results] == [1891, 2310, 3100]

    def test_out_of_stock_excluded(self, external_listings):
        query = MatchQuery(width=205, aspect_ratio=55, rim_diameter=16)
        ids = [r.product_id for r in match_external(query, external_listings)]

        assert "EX-4" not in ids

    def test_specification_from_query(self, external_listings):
        query = MatchQuery(width=205, aspect_ratio=55, rim_diameter=16)

        result = match_external(query, external_listings)[0]

        assert result.specification.width == 205
        assert result.specification.aspect_ratio == 55
        assert result.specification.rim_diameter == 16
        assert result.specification.category == TireCategory.CAR
        assert result.specification.original_text == result.product_name

    def test_partial_query_is_uncategorised(self, external_listings):
        """Without a query rim the attached size cannot claim a category."""
        query = MatchQuery(width=205, aspect_ratio=55)

        results = match_external(query, external_listings)

        assert [r.product_id for r in results] == ["EX-2", "EX-1", "EX-3"]
        assert all(r.specification.category is None for r in results)
        assert all(r.specification.rim_diameter is None for r in results)

    def test_search_external_metadata(self, external_listings):
        query = MatchQuery(width=205, aspect_ratio=55, rim_diameter=16, result_limit=2)

        result = search_external(query, external_listings)

        assert result.total_found == 3
        assert len(result.results) == 2
        assert result.search_spec == "205/55R16"
        assert result.mode is None

    def test_empty(self):
        assert match_external(MatchQuery(width=205), []) == []


# =============================================================================
# HTTP client
# =============================================================================

class TestCatalogSearchClient:
    """Tests for CatalogSearchClient."""

    def test_search_posts_payload(self, external_rows):
        session = FakeSession(FakeResponse(payload=external_rows))
        client = CatalogSearchClient("http://search.local/api", company_id="7", timeout=3, session=session)

        listings = client.search("205 55 16")

        assert len(listings) == len(external_rows)
        assert listings[0].key == "EX-1"
        call = session.calls[0]
        assert call["url"] == "http://search.local/api"
        assert call["json"] == {"idEmpG": "7", "busqueda": "205 55 16"}
        assert call["timeout"] == 3
        assert call["headers"]["Content-Type"] == "application/json"

    def test_transport_error(self):
        session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
        client = CatalogSearchClient("http://search.local/api", session=session)

        with pytest.raises(ExternalSearchError, match="request failed"):
            client.search("205 55 16")

    def test_http_error_status(self):
        session = FakeSession(FakeResponse(status_code=500, text="boom"))
        client = CatalogSearchClient("http://search.local/api", session=session)

        with pytest.raises(ExternalSearchError, match="500"):
            client.search("205 55 16")

    def test_invalid_json(self):
        session = FakeSession(FakeResponse(payload=ValueError("no json")))
        client = CatalogSearchClient("http://search.local/api", session=session)

        with pytest.raises(ExternalSearchError, match="not valid JSON"):
            client.search("205 55 16")

    def test_non_list_body(self):
        session = FakeSession(FakeResponse(payload={"error": "bad company"}))
        client = CatalogSearchClient("http://search.local/api", session=session)

        with pytest.raises(ExternalSearchError, match="must be a list"):
            client.search("205 55 16")

    def test_malformed_rows_skipped(self):
        rows = [{"clave": "EX-1", "descripcion": "205/55R16", "precioNeto": 10, "existencia": 1}, "garbage"]
        session = FakeSession(FakeResponse(payload=rows))
        client = CatalogSearchClient("http://search.local/api", session=session)

        listings = client.search("205 55 16")

        assert [listing.key for listing in listings] == ["EX-1"]

    def test_search_many_isolates_failures(self, external_rows):
        responses = iter([
            FakeResponse(payload=external_rows),
            FakeResponse(status_code=502, text="gateway"),
        ])

        class SequenceSession(FakeSession):
            def post(self, url, json=None, headers=None, timeout=None):
                return next(responses)

        client = CatalogSearchClient("http://search.local/api", session=SequenceSession())

        results = client.search_many(["205 55 16", "1100 22"])

        assert len(results) == 2
        assert len(results[0]) == len(external_rows)
        assert results[1] == []
