import pytest
from pydantic import ValidationError

from playmode.config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate settings from the developer's environment and .env file."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "PLAYMODE_TRANSITION_SECONDS",
        "PLAYMODE_DEFAULT_STEP_SECONDS",
        "PLAYMODE_TICK_INTERVAL_SECONDS",
        "PLAYMODE_TIME_ADJUST_OPTIONS",
        "PLAYMODE_LOG_LEVEL",
        "PLAYMODE_LOG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings()

    assert settings.transition_seconds == 10
    assert settings.default_step_seconds == 60
    assert settings.tick_interval_seconds == 1.0
    assert settings.time_adjust_options == [15, 30, 60]
    assert settings.log_level == "INFO"
    assert settings.log_file is None


def test_values_come_from_environment(monkeypatch):
    monkeypatch.setenv("PLAYMODE_TRANSITION_SECONDS", "15")
    monkeypatch.setenv("PLAYMODE_TIME_ADJUST_OPTIONS", "[10, 20]")
    monkeypatch.setenv("PLAYMODE_LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.transition_seconds == 15
    assert settings.time_adjust_options == [10, 20]
    assert settings.log_level == "DEBUG"


def test_values_come_from_dotenv(tmp_path):
    (tmp_path / ".env").write_text("PLAYMODE_DEFAULT_STEP_SECONDS=45\n", encoding="utf-8")
    assert Settings().default_step_seconds == 45


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("PLAYMODE_TRANSITION_SECONDS", "0"),
        ("PLAYMODE_DEFAULT_STEP_SECONDS", "-5"),
        ("PLAYMODE_TICK_INTERVAL_SECONDS", "0"),
        ("PLAYMODE_TIME_ADJUST_OPTIONS", "[]"),
        ("PLAYMODE_TIME_ADJUST_OPTIONS", "[15, 0]"),
        ("PLAYMODE_LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings()
