"""
Client for the external catalog search service.

The service takes a company id and a free-text query and answers with a
JSON array of listings ('clave', 'descripcion', 'precioNeto',
'existencia'). No authentication is required.
"""

import logging
from typing import Iterable, Optional

import requests
from pydantic import ValidationError

from tirehub.models.inputs import ExternalListing


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 15.0


class ExternalSearchError(RuntimeError):
    """The external search service failed or returned an unusable response."""


class CatalogSearchClient:
    """Client for the external catalog search API"""

    def __init__(
        self,
        url: str,
        company_id: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_S,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the search client

        Args:
            url: Full URL of the product search endpoint
            company_id: Company identifier sent as 'idEmpG'
            timeout: Request timeout in seconds
            session: Optional requests session (a new one is created if None)
        """
        self.url = url
        self.company_id = company_id
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "Content-Type": "application/json"
        }

    def search(self, text: str) -> list[ExternalListing]:
        """
        Run a free-text search.

        Args:
            text: Search text, e.g. '205 55 16'

        Returns:
            Listings that could be validated; malformed rows are skipped

        Raises:
            ExternalSearchError: On transport errors, non-2xx responses,
                non-JSON bodies, or a body that is not a list
        """
        payload = {
            "idEmpG": self.company_id,
            "busqueda": text,
        }
        logger.info("External search: %r", text)

        try:
            response = self.session.post(
                self.url, json=payload, headers=self.headers, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise ExternalSearchError(f"External search request failed: {e}") from e

        if not response.ok:
            logger.error("External search returned %s: %s", response.status_code, response.text[:200])
            raise ExternalSearchError(
                f"External search error {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ExternalSearchError("External search response is not valid JSON") from e

        if not isinstance(data, list):
            raise ExternalSearchError(
                f"External search response must be a list, got {type(data).__name__}"
            )

        listings = []
        for row in data:
            try:
                listings.append(ExternalListing.model_validate(row))
            except ValidationError as e:
                logger.warning("Skipping malformed external listing %r: %s", row, e)
        return listings

    def search_many(self, texts: Iterable[str]) -> list[list[ExternalListing]]:
        """
        Run one search per text.

        A failing search is logged and contributes an empty list, so one
        bad size does not sink the others.
        """
        results = []
        for text in texts:
            try:
                results.append(self.search(text))
            except ExternalSearchError as e:
                logger.error("External search for %r failed: %s", text, e)
                results.append([])
        return results
