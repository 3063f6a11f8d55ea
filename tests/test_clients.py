import asyncio
import json
from urllib.parse import parse_qs, unquote, urlsplit

import httpx
import pytest

from app.core.exceptions import GenerationError, LeagueImportError
from app.schemas.league import LeagueImportRequest
from app.utils.image_generation_client import ImageGenerationClient
from app.utils.league_client import LeagueImportClient

from conftest import image_transport


def run(coro):
    return asyncio.run(coro)


def test_generation_locator_encodes_prompt_and_seed():
    client = ImageGenerationClient(base_url="https://gen.test/prompt/", transport=image_transport())
    url = client.build_locator("wolf head, #00338D & red", 42, 512, 512)
    parts = urlsplit(url)
    assert parts.path.startswith("/prompt/")
    assert unquote(parts.path[len("/prompt/"):]) == "wolf head, #00338D & red"
    assert parse_qs(parts.query) == {"seed": ["42"], "width": ["512"], "height": ["512"], "nologo": ["true"]}


def test_generate_returns_locator_after_successful_render():
    transport = image_transport()
    client = ImageGenerationClient(base_url="https://gen.test/prompt", transport=transport)
    url = run(client.generate("bear", 7))
    assert url == str(transport.seen[0].url)
    assert "seed=7" in url


def test_generate_http_error_keeps_status():
    client = ImageGenerationClient(base_url="https://gen.test/prompt", transport=image_transport(status_code=503))
    with pytest.raises(GenerationError) as exc:
        run(client.generate("bear", 7))
    assert exc.value.status_code == 503


def test_generate_rejects_non_image_body():
    transport = image_transport(content=b"<html></html>", content_type="text/html")
    client = ImageGenerationClient(base_url="https://gen.test/prompt", transport=transport)
    with pytest.raises(GenerationError):
        run(client.generate("bear", 7))


def league_transport(status_code=200, body=None, raw=None):
    seen = []

    def handler(request):
        seen.append(json.loads(request.content))
        if raw is not None:
            return httpx.Response(status_code, content=raw)
        return httpx.Response(status_code, json=body)

    transport = httpx.MockTransport(handler)
    transport.seen = seen
    return transport


def test_league_import_parses_teams():
    body = {"league": {"name": "Office League"}, "teams": [{"id": 1, "name": "Blue Wolves", "owner": "sam"}, {"id": "2"}]}
    transport = league_transport(body=body)
    client = LeagueImportClient(base_url="https://league.test/import", transport=transport)
    result = run(client.fetch_league(LeagueImportRequest(provider="espn", league_id=" 123 ", swid="{abc}", s2="xyz")))

    assert transport.seen[0] == {"provider": "espn", "leagueId": "123", "swid": "{abc}", "s2": "xyz"}
    assert result.league_name == "Office League"
    assert [t.id for t in result.teams] == ["1", "2"]
    assert result.teams[1].name is None


def test_league_import_omits_missing_cookies():
    transport = league_transport(body={"teams": []})
    client = LeagueImportClient(base_url="https://league.test/import", transport=transport)
    result = run(client.fetch_league(LeagueImportRequest(provider="sleeper", league_id="99")))
    assert transport.seen[0] == {"provider": "sleeper", "leagueId": "99"}
    assert result.teams == []
    assert result.league_name == ""


def test_league_import_unconfigured():
    client = LeagueImportClient(base_url="", transport=league_transport(body={}))
    client.base_url = None
    with pytest.raises(LeagueImportError):
        run(client.fetch_league(LeagueImportRequest(provider="mfl", league_id="1")))


@pytest.mark.parametrize("transport", [
    league_transport(status_code=500, body={"error": "boom"}),
    league_transport(raw=b"not json"),
    league_transport(body=["a", "list"]),
    league_transport(body={"teams": "nope"}),
])
def test_league_import_failures(transport):
    client = LeagueImportClient(base_url="https://league.test/import", transport=transport)
    with pytest.raises(LeagueImportError):
        run(client.fetch_league(LeagueImportRequest(provider="mfl", league_id="1")))
