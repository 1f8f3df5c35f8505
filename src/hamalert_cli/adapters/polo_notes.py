"""Fetch Ham2K PoLo callsign notes files."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from hamalert_cli.adapters.http_resilience import ResilientClient, http_get_resilient
from hamalert_cli.config import default_polo_notes_resilience
from hamalert_cli.domain.errors import HamAlertError
from hamalert_cli.domain.triggers import parse_polo_notes

if TYPE_CHECKING:
    from hamalert_cli.adapters.http_resilience import ClientFactory
    from hamalert_cli.config import ResilienceConfig

log = getLogger(__name__)


class PoloNotesError(HamAlertError):
    """Raised when a callsign notes file cannot be downloaded."""


@dataclass(slots=True)
class PoloNotesFetcher:
    resilience: ResilienceConfig = field(default_factory=default_polo_notes_resilience)
    client_factory: ClientFactory = ResilientClient

    def __call__(self, url: str) -> list[str]:
        return asyncio.run(self._fetch_async(url))

    async def _fetch_async(self, url: str) -> list[str]:
        try:
            response = await http_get_resilient(
                self.resilience,
                url,
                client_factory=self.client_factory,
                follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            raise PoloNotesError(f"Failed to fetch PoLo notes from {url}: {exc}") from exc
        if not response.is_success:
            raise PoloNotesError(
                f"Failed to fetch PoLo notes from {url}: HTTP {response.status_code}"
            )
        callsigns = parse_polo_notes(response.text)
        log.info("Found %s callsign(s) at %s", len(callsigns), url)
        return callsigns
