"""Request gates that sit in front of the core: region restriction and admin code."""

from __future__ import annotations

import hmac
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from studio_bingo.errors import AppError, ForbiddenError


@dataclass(frozen=True)
class GeoPolicy:
    """Allow callers whose edge geo headers match one country/region.

    Local development usually has no geo headers, so ``allow_all`` bypasses
    the check.
    """

    allow_all: bool = False
    country: str = "US"
    region_code: str = "IN"
    region_name: str = "indiana"

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "GeoPolicy":
        return cls(
            allow_all=bool(config.get("ALLOW_ALL_GEO", False)),
            country=str(config.get("GEO_ALLOWED_COUNTRY") or "US").upper(),
            region_code=str(config.get("GEO_ALLOWED_REGION") or "IN").upper(),
            region_name=str(config.get("GEO_ALLOWED_REGION_NAME") or "indiana").lower(),
        )

    def check(self, headers: Mapping[str, str]) -> None:
        if self.allow_all:
            return

        country = str(headers.get("CF-IPCountry") or "").upper()
        region_code = str(headers.get("CF-Region-Code") or "").upper()
        region = str(headers.get("CF-Region") or "")

        if country == self.country and (region_code == self.region_code or region.lower() == self.region_name):
            return

        raise ForbiddenError(
            message="This tool is not available in your region.",
            details={"country": country or None, "region": region or None, "region_code": region_code or None},
            code="geo_blocked",
        )


def check_studio_code(expected: str, provided: str) -> None:
    """Admin endpoints require the studio's shared code."""

    if not expected:
        raise AppError(
            code="studio_code_not_configured",
            message="STUDIO_CODE is not configured",
            status_code=500,
        )
    if not hmac.compare_digest(expected.encode("utf-8"), (provided or "").encode("utf-8")):
        raise ForbiddenError(message="Invalid studio code", code="bad_studio_code")
