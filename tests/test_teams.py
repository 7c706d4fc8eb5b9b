"""
Team, player, event and news endpoint tests.
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from conftest import create_event, create_player, create_team

NOW = datetime.now(timezone.utc)


def _iso(ts: datetime) -> str:
    return ts.isoformat()


# ── Teams ───────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_admin_creates_and_lists_teams(admin_client: AsyncClient):
    resp = await admin_client.post("/api/teams", json={"name": "  Northside United  "})
    assert resp.status_code == 201, resp.text
    team = resp.json()
    assert team["name"] == "Northside United"

    await admin_client.post("/api/teams", json={"name": "Athletic Club"})

    resp = await admin_client.get("/api/teams")
    assert resp.status_code == 200
    assert [t["name"] for t in resp.json()] == ["Athletic Club", "Northside United"]

    resp = await admin_client.get(f"/api/teams/{team['id']}")
    assert resp.status_code == 200
    assert resp.json()["created_by_id"] == team["created_by_id"]


@pytest.mark.asyncio
async def test_team_name_must_not_be_blank(admin_client: AsyncClient):
    resp = await admin_client.post("/api/teams", json={"name": "   "})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "name"


@pytest.mark.asyncio
async def test_unknown_team_is_404(reader_client: AsyncClient):
    for path in ("", "/players", "/events", "/news", "/next-match"):
        resp = await reader_client.get(f"/api/teams/999{path}")
        assert resp.status_code == 404, path
        assert resp.json()["detail"] == "Team not found"


# ── Players ─────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_editor_manages_players(editor_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    base = f"/api/teams/{team.id}/players"

    resp = await editor_client.post(
        base, json={"name": "Sam Keeper", "position": "GK", "number": 1, "photo_url": "/p/1.png"}
    )
    assert resp.status_code == 201, resp.text
    keeper = resp.json()
    assert keeper["team_id"] == team.id

    await editor_client.post(base, json={"name": "Dani Nine", "position": "FWD", "number": 9})

    resp = await editor_client.get(base)
    assert [p["number"] for p in resp.json()] == [1, 9]

    resp = await editor_client.put(
        f"{base}/{keeper['id']}", json={"number": 13, "name": None, "photo_url": None}
    )
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["number"] == 13
    assert updated["name"] == "Sam Keeper"
    assert updated["photo_url"] is None

    resp = await editor_client.delete(f"{base}/{keeper['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Player deleted successfully"}
    assert len((await editor_client.get(base)).json()) == 1


@pytest.mark.asyncio
async def test_player_validation(editor_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    base = f"/api/teams/{team.id}/players"

    resp = await editor_client.post(base, json={"name": "X", "position": "COACH", "number": 5})
    assert resp.status_code == 400
    assert any(e["field"] == "position" for e in resp.json()["errors"])

    resp = await editor_client.post(base, json={"name": "X", "position": "MID", "number": 0})
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_player_scoped_to_team(editor_client: AsyncClient, session_factory):
    home = await create_team(session_factory, "Home")
    away = await create_team(session_factory, "Away")
    player = await create_player(session_factory, home.id, "Lee", 4)

    resp = await editor_client.put(f"/api/teams/{away.id}/players/{player.id}", json={"number": 5})
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Player not found"


# ── Events ──────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_editor_manages_events(editor_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    base = f"/api/teams/{team.id}/events"
    start = NOW + timedelta(days=3)

    resp = await editor_client.post(
        base,
        json={
            "title": "League match",
            "type": "match",
            "start_date": _iso(start),
            "end_date": _iso(start + timedelta(hours=2)),
            "opponent": "Harbour Town",
            "location": "Home ground",
        },
    )
    assert resp.status_code == 201, resp.text
    event = resp.json()
    assert event["home_score"] is None

    resp = await editor_client.put(
        f"{base}/{event['id']}", json={"home_score": 2, "away_score": 1, "title": None}
    )
    assert resp.status_code == 200
    assert (resp.json()["home_score"], resp.json()["away_score"]) == (2, 1)
    assert resp.json()["title"] == "League match"

    resp = await editor_client.get(f"{base}/{event['id']}")
    assert resp.json()["opponent"] == "Harbour Town"

    resp = await editor_client.delete(f"{base}/{event['id']}")
    assert resp.status_code == 200
    assert (await editor_client.get(f"{base}/{event['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_event_dates_must_be_ordered(editor_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    base = f"/api/teams/{team.id}/events"
    start = NOW + timedelta(days=1)

    resp = await editor_client.post(
        base,
        json={
            "title": "Backwards",
            "type": "training",
            "start_date": _iso(start),
            "end_date": _iso(start - timedelta(hours=1)),
        },
    )
    assert resp.status_code == 400

    event = await create_event(
        session_factory, team.id, title="Training", type="training",
        start_date=start, end_date=start + timedelta(hours=1),
    )
    resp = await editor_client.put(
        f"{base}/{event.id}", json={"end_date": _iso(start - timedelta(minutes=5))}
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "end_date must not be before start_date"


@pytest.mark.asyncio
async def test_event_type_is_validated(editor_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    resp = await editor_client.post(
        f"/api/teams/{team.id}/events",
        json={"title": "Party", "type": "party", "start_date": _iso(NOW), "end_date": _iso(NOW)},
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_next_match_is_earliest_upcoming_match(reader_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    url = f"/api/teams/{team.id}/next-match"

    assert (await reader_client.get(url)).json() is None

    def window(days: float):
        start = NOW + timedelta(days=days)
        return {"start_date": start, "end_date": start + timedelta(hours=2)}

    await create_event(session_factory, team.id, title="Past match", type="match", **window(-2))
    await create_event(session_factory, team.id, title="Training", type="training", **window(1))
    await create_event(session_factory, team.id, title="Cup final", type="match", **window(10))
    await create_event(session_factory, team.id, title="Derby", type="match", **window(3))

    resp = await reader_client.get(url)
    assert resp.status_code == 200
    assert resp.json()["title"] == "Derby"


# ── News ────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_editor_manages_news(editor_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    base = f"/api/teams/{team.id}/news"

    first = await editor_client.post(base, json={"title": "Kit launch", "content": "New kit."})
    second = await editor_client.post(base, json={"title": "Signing", "content": "Welcome!"})
    first, second = first.json(), second.json()

    resp = await editor_client.get(base)
    assert [n["id"] for n in resp.json()] == [second["id"], first["id"]]

    resp = await editor_client.put(f"{base}/{first['id']}", json={"content": "New kit is out."})
    assert resp.status_code == 200
    assert resp.json()["content"] == "New kit is out."
    assert resp.json()["title"] == "Kit launch"

    assert (await editor_client.delete(f"{base}/{first['id']}")).status_code == 200
    assert (await editor_client.delete(f"{base}/{first['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_news_requires_title_and_content(editor_client: AsyncClient, session_factory):
    team = await create_team(session_factory)
    resp = await editor_client.post(
        f"/api/teams/{team.id}/news", json={"title": "Empty", "content": "  "}
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "content"
