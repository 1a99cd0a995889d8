import httpx
import pytest

from koshien_digest.config.settings import load_settings

ROSTER_URL = "https://script.example.com/macros/exec"
WEBHOOK_URL = "https://hooks.example.com/services/T000/B000/XXXX"
FEED_BASE = "https://feeds.example.com/chihou_gamelist"


SETTINGS_ENV_VARS = [
    "GAS_API_URL",
    "GAS_API_KEY",
    "SLACK_WEBHOOK_URL",
    "GAMELIST_BASE_URL",
    "REGION_LINK_BASE_URL",
    "REQUEST_TIMEOUT",
    "MAX_ATTEMPTS",
    "TIMEZONE",
    "LOG_LEVEL",
    "DRY_RUN",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of settings built by tests."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def settings():
    """Settings built without touching the environment's .env file."""
    return load_settings(
        _env_file=None,
        roster_api_url=ROSTER_URL,
        roster_api_key="secret-roster-key",
        slack_webhook_url=WEBHOOK_URL,
        gamelist_base_url=FEED_BASE,
    )


@pytest.fixture
def make_client():
    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def raw_game():
    """Factory for feed entries shaped like the prefectural game list."""

    def _make(top="県立A高校", bottom="県立B高校", game_id="g1", **extra):
        entry = {
            "game_id": game_id,
            "round_name": "1回戦",
            "game_date_m": "7",
            "game_date_d": "15",
            "game_time": "10:00",
            "stadium_name": "甲子園",
            "top_school_display_name": top,
            "bottom_school_display_name": bottom,
            "top_score_sum": "5",
            "bottom_score_sum": "3",
        }
        entry.update(extra)
        return entry

    return _make
