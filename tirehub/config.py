"""
Service configuration.

Settings come from environment variables, optionally loaded from a
.env file in the working directory:

    TIREHUB_PRICE_LIST          path to the price list JSON export
    TIREHUB_SEARCH_URL          external catalog search endpoint
    TIREHUB_SEARCH_COMPANY_ID   company id sent to the search endpoint
    TIREHUB_SEARCH_TIMEOUT      request timeout in seconds (default 15)
    TIREHUB_ASPECT_TOLERANCE    tolerant-mode aspect ratio tolerance (default 5)
    TIREHUB_AUTO_EXACT          auto exact mode for fully specified queries (default true)
    TIREHUB_LOG_LEVEL           logging level (default INFO)
"""

import os
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from tirehub.remote.search_client import DEFAULT_TIMEOUT_S
from tirehub.tire_catalog.matcher import ASPECT_RATIO_TOLERANCE, MatcherSettings


TRUE_VALUES = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Runtime settings for the API server and CLI."""
    price_list_path: Optional[str] = Field(default=None, description="Price list JSON path")
    external_search_url: Optional[str] = Field(default=None, description="External search endpoint URL")
    external_company_id: Optional[str] = Field(default=None, description="Company id for external search")
    external_timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, gt=0, description="External search timeout (s)")
    matcher: MatcherSettings = Field(default_factory=MatcherSettings)
    log_level: str = Field(default="INFO", description="Logging level name")

    @field_validator("log_level")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper()

    @property
    def external_search_enabled(self) -> bool:
        return bool(self.external_search_url)

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv: bool = True,
    ) -> "Settings":
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read instead of os.environ (for tests)
            dotenv: Load a .env file into os.environ first
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        matcher = MatcherSettings(
            aspect_ratio_tolerance=environ.get("TIREHUB_ASPECT_TOLERANCE", ASPECT_RATIO_TOLERANCE),
            auto_exact_when_fully_specified=(
                environ.get("TIREHUB_AUTO_EXACT", "true").strip().lower() in TRUE_VALUES
            ),
        )

        return cls(
            price_list_path=environ.get("TIREHUB_PRICE_LIST") or None,
            external_search_url=environ.get("TIREHUB_SEARCH_URL") or None,
            external_company_id=environ.get("TIREHUB_SEARCH_COMPANY_ID") or None,
            external_timeout_s=environ.get("TIREHUB_SEARCH_TIMEOUT", DEFAULT_TIMEOUT_S),
            matcher=matcher,
            log_level=environ.get("TIREHUB_LOG_LEVEL", "INFO"),
        )
