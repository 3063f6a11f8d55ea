"""
Client for the external league-import endpoint.
"""
from typing import Any, Dict

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import LeagueImportError
from app.core.logging import logger
from app.schemas.league import LeagueImportRequest, LeagueImportResult


class LeagueImportClient:
    """
    Posts ``{provider, leagueId, swid, s2}`` and expects
    ``{"league": {"name": ...}, "teams": [{"id", "name", "owner"}, ...]}``.
    """

    def __init__(self, base_url: str = None, timeout: float = None, transport: httpx.AsyncBaseTransport = None):
        self.base_url = base_url or settings.LEAGUE_IMPORT_URL
        self.client = httpx.AsyncClient(
            timeout=timeout or settings.LEAGUE_IMPORT_TIMEOUT,
            transport=transport,
        )

    async def fetch_league(self, request: LeagueImportRequest) -> LeagueImportResult:
        """
        Fetch the ordered team list of a league.

        Raises:
            LeagueImportError: endpoint not configured, HTTP failure, or a malformed body
        """
        if not self.base_url:
            raise LeagueImportError("League import endpoint is not configured (set LEAGUE_IMPORT_URL)")

        payload: Dict[str, Any] = {
            "provider": request.provider.value,
            "leagueId": request.league_id.strip(),
        }
        if request.swid:
            payload["swid"] = request.swid
        if request.s2:
            payload["s2"] = request.s2

        logger.info(f"Importing {request.provider.value} league {payload['leagueId']}")

        try:
            response = await self.client.post(self.base_url, json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise LeagueImportError(f"League import returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise LeagueImportError(f"League import request failed: {str(e)}") from e
        except ValueError as e:
            raise LeagueImportError("League import returned invalid JSON") from e

        if not isinstance(body, dict):
            raise LeagueImportError("League import returned an unexpected body")

        try:
            result = LeagueImportResult(
                league_name=(body.get("league") or {}).get("name") or "",
                teams=body.get("teams") or [],
            )
        except (ValidationError, AttributeError) as e:
            raise LeagueImportError(f"League import returned malformed teams: {str(e)}") from e

        logger.info(f"Imported {len(result.teams)} teams from {result.league_name or 'league'}")
        return result

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
