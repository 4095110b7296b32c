import pytest

from timeclock.config import get_settings_module, load_settings


@pytest.mark.parametrize(
    "env, expected",
    [
        ("production", "timeclock.config.production"),
        ("PROD", "timeclock.config.production"),
        ("test", "timeclock.config.testing"),
        ("anything", "timeclock.config.development"),
    ],
)
def test_settings_module_follows_app_env(monkeypatch, env, expected):
    monkeypatch.setenv("APP_ENV", env)
    assert get_settings_module() == expected


def test_testing_settings_are_importable(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    settings = load_settings()

    assert settings.TESTING is True
    assert settings.AUTO_INIT_DB is False
    assert settings.MAX_BREAK_MINUTES == 90
