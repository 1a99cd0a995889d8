import asyncio
import json

import httpx

from koshien_digest.models.enums import FailureKind
from koshien_digest.scrapers.gamelist_scraper import GameListScraper, build_gamelist_scraper
from koshien_digest.scrapers.roster_scraper import RosterScraper, build_roster_scraper

from conftest import FEED_BASE, ROSTER_URL


def _feed(entries):
    return {"result": {"info": {"game_list": entries}}}


def _wrapped(payload):
    return "koya_vk_chihou_gamelist(" + json.dumps(payload, ensure_ascii=False) + ");"


def test_roster_fetch_sends_key_and_translates_fields(settings, make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(
            200,
            json=[
                {"teamName": "県立A高校", "prefectureKey": 13, "prefectureName": "東京"},
                {"teamName": "府立C高校", "prefectureKey": "27", "prefectureName": "大阪"},
            ],
        )

    scraper = build_roster_scraper(settings, client=make_client(handler))
    result = asyncio.run(scraper.fetch_tracked_teams())

    assert result.ok
    assert [(t.team_name, t.region_key, t.region_name) for t in result.items] == [
        ("県立A高校", "13", "東京"),
        ("府立C高校", "27", "大阪"),
    ]
    assert seen[0].url.params["key"] == "secret-roster-key"
    assert str(seen[0].url).startswith(ROSTER_URL)


def test_roster_skips_invalid_rows(make_client):
    def handler(request):
        return httpx.Response(
            200,
            json=[
                {"teamName": "県立A高校", "prefectureKey": "13", "prefectureName": "東京"},
                {"prefectureKey": "13"},
                "not a row",
            ],
        )

    scraper = RosterScraper(ROSTER_URL, "k", client=make_client(handler))
    result = asyncio.run(scraper.fetch_tracked_teams())

    assert result.ok
    assert len(result.items) == 1


def test_roster_non_array_is_a_shape_failure(make_client):
    scraper = RosterScraper(
        ROSTER_URL, "k", client=make_client(lambda r: httpx.Response(200, json={"error": "bad key"}))
    )
    result = asyncio.run(scraper.fetch_tracked_teams())

    assert result.items == []
    assert result.failure is FailureKind.SHAPE


def test_roster_invalid_json_is_a_parse_failure(make_client):
    scraper = RosterScraper(
        ROSTER_URL, "k", client=make_client(lambda r: httpx.Response(200, text="<html>"))
    )
    result = asyncio.run(scraper.fetch_tracked_teams())

    assert result.items == []
    assert result.failure is FailureKind.PARSE


def test_roster_server_error_is_recovered(make_client):
    scraper = RosterScraper(
        ROSTER_URL, "k", client=make_client(lambda r: httpx.Response(500))
    )
    result = asyncio.run(scraper.fetch_tracked_teams())

    assert result.items == []
    assert result.failure is FailureKind.TRANSPORT


def test_roster_connection_error_is_recovered(make_client):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    scraper = RosterScraper(ROSTER_URL, "k", client=make_client(handler))
    result = asyncio.run(scraper.fetch_tracked_teams())

    assert result.failure is FailureKind.TRANSPORT


def test_request_retried_when_attempts_allow(make_client):
    responses = [httpx.Response(503), httpx.Response(200, json=[])]
    calls = []

    def handler(request):
        calls.append(request)
        return responses[len(calls) - 1]

    scraper = RosterScraper(ROSTER_URL, "k", client=make_client(handler), max_attempts=2)
    result = asyncio.run(scraper.fetch_tracked_teams())

    assert result.ok
    assert len(calls) == 2


def test_no_retry_by_default(make_client):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(503)

    scraper = RosterScraper(ROSTER_URL, "k", client=make_client(handler))
    asyncio.run(scraper.fetch_tracked_teams())

    assert len(calls) == 1


def test_gamelist_unwraps_and_filters(settings, make_client, raw_game):
    seen = []
    payload = _feed(
        [
            raw_game(game_id="g1"),
            raw_game(top="私立X高校", bottom="私立Y高校", game_id="g2"),
            raw_game(top="私立Z高校", bottom="県立A高校", game_id="g3"),
        ]
    )

    def handler(request):
        seen.append(request)
        return httpx.Response(200, text=_wrapped(payload))

    scraper = build_gamelist_scraper(settings, client=make_client(handler))
    result = asyncio.run(scraper.fetch_games_for_region("13", ["県立A高校"]))

    assert result.ok
    assert [game.id for game in result.items] == ["g1", "g3"]
    assert str(seen[0].url) == f"{FEED_BASE}/13.json"


def test_gamelist_accepts_plain_json(make_client, raw_game):
    scraper = GameListScraper(
        FEED_BASE,
        client=make_client(lambda r: httpx.Response(200, json=_feed([raw_game()]))),
    )
    result = asyncio.run(scraper.fetch_games_for_region("13", ["県立B高校"]))

    assert [game.id for game in result.items] == ["g1"]


def test_gamelist_missing_path_is_empty(make_client):
    scraper = GameListScraper(
        FEED_BASE, client=make_client(lambda r: httpx.Response(200, json={"result": {}}))
    )
    result = asyncio.run(scraper.fetch_games_for_region("13", ["県立A高校"]))

    assert result.items == []
    assert result.failure is FailureKind.SHAPE


def test_gamelist_bad_body_is_empty(make_client):
    scraper = GameListScraper(
        FEED_BASE,
        client=make_client(lambda r: httpx.Response(200, text="koya_vk_chihou_gamelist(oops);")),
    )
    result = asyncio.run(scraper.fetch_games_for_region("13", ["県立A高校"]))

    assert result.items == []
    assert result.failure is FailureKind.PARSE


def test_gamelist_not_found_is_empty(make_client):
    scraper = GameListScraper(FEED_BASE, client=make_client(lambda r: httpx.Response(404)))
    result = asyncio.run(scraper.fetch_games_for_region("99", ["県立A高校"]))

    assert result.items == []
    assert result.failure is FailureKind.TRANSPORT


def test_gamelist_region_key_with_control_character_is_empty(make_client):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=_feed([]))

    scraper = GameListScraper(FEED_BASE, client=make_client(handler))
    result = asyncio.run(scraper.fetch_games_for_region("13\n", ["県立A高校"]))

    assert result.items == []
    assert result.failure is FailureKind.TRANSPORT
    assert calls == []
