from collections import Counter
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest
from fastapi.testclient import TestClient

from app.api import deps
from app.core.team_store import JobStore, TeamStore
from app.utils import postprocess
from app.utils.capabilities import LocalFileSaver
from app.utils.image_generation_client import ImageGenerationClient
from app.utils.league_client import LeagueImportClient
from app.utils.resources import ResourceStore
from main import app

from conftest import encode_png, make_pixels

API = "/api/v1"


class GenerationEndpoint:
    """Fake generation endpoint; seeds in ``failures`` fail that many times first."""

    def __init__(self, failures=None):
        self.failures = dict(failures or {})
        self.calls = Counter()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        seed = int(parse_qs(urlsplit(str(request.url)).query)["seed"][0])
        self.calls[seed] += 1
        if self.calls[seed] <= self.failures.get(seed, 0):
            return httpx.Response(503, text="busy")
        return httpx.Response(200, content=b"\x89PNG", headers={"content-type": "image/png"})


@pytest.fixture
def env(tmp_path):
    stores = {
        "teams": TeamStore(),
        "jobs": JobStore(),
        "resources": ResourceStore(),
        "endpoint": GenerationEndpoint(),
        "league_body": {"league": {"name": "Office League"}, "teams": [{"id": 11, "name": "Gridiron Bears"}, {"id": 12}]},
        "export_dir": tmp_path / "exports",
    }

    def generation_client():
        return ImageGenerationClient(
            base_url="https://gen.test/prompt",
            transport=httpx.MockTransport(lambda r: stores["endpoint"](r)),
        )

    def league_client():
        return LeagueImportClient(
            base_url="https://league.test/import",
            transport=httpx.MockTransport(lambda r: httpx.Response(200, json=stores["league_body"])),
        )

    app.dependency_overrides[deps.get_team_store] = lambda: stores["teams"]
    app.dependency_overrides[deps.get_job_store] = lambda: stores["jobs"]
    app.dependency_overrides[deps.get_resource_store] = lambda: stores["resources"]
    app.dependency_overrides[deps.get_image_generation_client] = generation_client
    app.dependency_overrides[deps.get_league_import_client] = league_client
    app.dependency_overrides[deps.get_file_saver] = lambda: LocalFileSaver(str(stores["export_dir"]))
    with TestClient(app) as client:
        stores["client"] = client
        yield stores
    app.dependency_overrides.clear()


def load_demo(client):
    response = client.post(f"{API}/league/demo")
    assert response.status_code == 200
    return response.json()["teams"]


def test_root(env):
    assert env["client"].get("/").status_code == 200


def test_import_league_normalizes_teams(env):
    response = env["client"].post(f"{API}/league/import", json={"provider": "sleeper", "league_id": "123"})
    assert response.status_code == 200
    data = response.json()
    assert data["league_name"] == "Office League"
    assert [t["id"] for t in data["teams"]] == ["11", "12"]
    assert data["teams"][0]["mascot"] == "bear"
    assert data["teams"][1]["name"] == "Team 2"
    assert len(env["teams"]) == 2


def test_import_league_failure_is_502(env):
    env["league_body"] = ["not", "an", "object"]
    response = env["client"].post(f"{API}/league/import", json={"provider": "espn", "league_id": "1"})
    assert response.status_code == 502
    assert "SWID/S2" in response.json()["detail"]


def test_import_league_rejects_unknown_provider(env):
    response = env["client"].post(f"{API}/league/import", json={"provider": "yahoo", "league_id": "1"})
    assert response.status_code == 422


def test_team_crud(env):
    client = env["client"]
    load_demo(client)

    response = client.patch(f"{API}/teams/1", json={"primary": "banana", "seed": "abc", "style": 9})
    assert response.status_code == 200
    team = response.json()
    assert team["primary"] == "#FFFFFF"
    assert team["seed"] == 1
    assert team["style"] == 1

    response = client.post(f"{API}/teams", json={"name": "Late Joiners"})
    assert response.status_code == 201
    assert response.json()["id"] == "13"
    assert client.post(f"{API}/teams", json={"id": "13"}).status_code == 409

    assert client.get(f"{API}/teams/2/mascot-suggestion").json()["mascot"] == "eagle"
    assert client.delete(f"{API}/teams/13").status_code == 200
    assert client.get(f"{API}/teams/13").status_code == 404
    assert client.patch(f"{API}/teams/nope", json={"name": "x"}).status_code == 404
    assert len(client.get(f"{API}/teams").json()["teams"]) == 12


def test_palette_operations(env):
    client = env["client"]
    load_demo(client)
    teams = client.post(f"{API}/teams/palette/apply").json()["teams"]
    assert teams[0]["primary"] == "#E31837"
    assert teams[1]["secondary"] == "#FFB612"
    teams = client.post(f"{API}/teams/palette/remix").json()["teams"]
    assert len(teams) == 12


def test_generate_single_logo(env):
    client = env["client"]
    load_demo(client)
    response = client.post(f"{API}/logos/1/generate")
    assert response.status_code == 200
    url = response.json()["url"]
    assert "seed=7123" in url
    team = client.get(f"{API}/teams/1").json()
    assert team["logo_url"] == url
    assert team["generating"] is False

    cleared = client.post(f"{API}/teams/logos/clear").json()["teams"]
    assert all(t["logo_url"] == "" for t in cleared)


def test_generate_single_logo_failure_names_team(env):
    client = env["client"]
    load_demo(client)
    env["endpoint"].failures[7123] = 1
    response = client.post(f"{API}/logos/1/generate")
    assert response.status_code == 502
    assert "Blue Wolves" in response.json()["detail"]
    assert client.get(f"{API}/teams/1").json()["generating"] is False
    # a manual retry works straight away
    assert client.post(f"{API}/logos/1/generate").status_code == 200


def test_generate_unknown_team_is_404(env):
    assert env["client"].post(f"{API}/logos/missing/generate").status_code == 404


def test_generate_all_with_retry(env):
    client = env["client"]
    load_demo(client)
    env["endpoint"].failures[5177] = 2   # third demo team

    response = client.post(f"{API}/logos/generate-all")
    assert response.status_code == 202
    job_id = response.json()["job_id"]

    status = client.get(f"{API}/logos/jobs/{job_id}").json()
    assert status["status"] == "completed"
    assert status["completed"] == status["total"] == 12
    assert status["succeeded"] == 12
    assert status["outcomes"][2]["attempts"] == 3
    teams = client.get(f"{API}/teams").json()["teams"]
    assert all(t["logo_url"] and not t["generating"] for t in teams)


def test_generate_all_without_teams_is_400(env):
    assert env["client"].post(f"{API}/logos/generate-all").status_code == 400


def test_unknown_job_is_404(env):
    assert env["client"].get(f"{API}/logos/jobs/nope").status_code == 404


def logo_bytes():
    px = make_pixels(50, 50)
    px[10:30, 15:35] = (0, 51, 141, 255)
    return encode_png(px)


def test_postprocess_download_and_save(env, monkeypatch):
    async def fake_fetch(url, client=None):
        return logo_bytes()

    monkeypatch.setattr(postprocess, "fetch_image", fake_fetch)
    client = env["client"]
    response = client.post(f"{API}/logos/postprocess", json={
        "image_url": "https://img.test/x.png", "primary": "#00338D", "secondary": "red", "filename": "Blue_Wolves_logo",
    })
    assert response.status_code == 200
    data = response.json()
    # 20 rows x 20 cols of content plus 1px padding on each side
    assert (data["width"], data["height"]) == (22, 22)
    assert data["svg"] is None

    download = client.get(data["png"]["url"])
    assert download.status_code == 200
    assert download.headers["content-type"] == "image/png"
    assert 'filename="Blue_Wolves_logo.png"' in download.headers["content-disposition"]

    saved = client.post(f"{API}/logos/resources/{data['png']['resource_id']}/save")
    assert saved.status_code == 200
    assert (env["export_dir"] / "Blue_Wolves_logo.png").read_bytes() == download.content

    assert client.get(f"{API}/logos/resources/nope").status_code == 404


def test_postprocess_fetch_failure_is_502(env, monkeypatch):
    async def fake_fetch(url, client=None):
        return b"not an image"

    monkeypatch.setattr(postprocess, "fetch_image", fake_fetch)
    response = env["client"].post(f"{API}/logos/postprocess", json={
        "image_url": "https://img.test/x.png", "primary": "#00338D", "secondary": "red",
    })
    assert response.status_code == 502


def test_team_postprocess(env, monkeypatch):
    async def fake_fetch(url, client=None):
        return logo_bytes()

    monkeypatch.setattr(postprocess, "fetch_image", fake_fetch)
    client = env["client"]
    load_demo(client)
    assert client.post(f"{API}/logos/1/postprocess").status_code == 409

    client.post(f"{API}/logos/1/generate")
    response = client.post(f"{API}/logos/1/postprocess", json={"vectorize": False})
    assert response.status_code == 200
    assert response.json()["png"]["filename"] == "Blue_Wolves_logo.png"
    assert client.post(f"{API}/logos/nope/postprocess").status_code == 404


def test_added_team_gets_a_free_id_after_delete(env):
    client = env["client"]
    for name in ("A", "B", "C"):
        assert client.post(f"{API}/teams", json={"name": name}).status_code == 201
    assert client.delete(f"{API}/teams/1").status_code == 200

    response = client.post(f"{API}/teams", json={"name": "D"})
    assert response.status_code == 201
    assert response.json()["id"] == "4"
    assert sorted(t["id"] for t in client.get(f"{API}/teams").json()["teams"]) == ["2", "3", "4"]


def test_second_batch_is_rejected_while_one_is_active(env):
    client = env["client"]
    load_demo(client)
    running = env["jobs"].create(total=12)
    running.status = "running"

    response = client.post(f"{API}/logos/generate-all")
    assert response.status_code == 409
    assert running.job_id in response.json()["detail"]

    running.status = "completed"
    assert client.post(f"{API}/logos/generate-all").status_code == 202


def test_single_generation_is_rejected_during_a_batch(env):
    client = env["client"]
    load_demo(client)
    env["teams"].batch_running = True
    assert client.post(f"{API}/logos/1/generate").status_code == 409
    env["teams"].batch_running = False

    env["teams"].update("1", generating=True)
    assert client.post(f"{API}/logos/1/generate").status_code == 409


def test_postprocess_filename_is_sanitized(env, monkeypatch):
    async def fake_fetch(url, client=None):
        return logo_bytes()

    monkeypatch.setattr(postprocess, "fetch_image", fake_fetch)
    client = env["client"]
    response = client.post(f"{API}/logos/postprocess", json={
        "image_url": "https://img.test/x.png", "primary": "#00338D", "secondary": "red",
        "filename": "Blé Wölves/../logo",
    })
    assert response.status_code == 200
    png = response.json()["png"]
    assert png["filename"] == "Bl_W_lves_.._logo.png"

    download = client.get(png["url"])
    assert download.status_code == 200
    assert 'filename="Bl_W_lves_.._logo.png"' in download.headers["content-disposition"]
