import logging

import pytest

from aqring import config
from aqring.classify import Parameter
from aqring.data_ingest import OPENWEATHER_AIR_POLLUTION_URL


def test_defaults_from_empty_env():
    settings = config.load_settings({})
    assert settings.api_key is None
    assert settings.base_url == OPENWEATHER_AIR_POLLUTION_URL
    assert settings.radius_km == 10.0
    assert (settings.rings, settings.angles) == (5, 16)
    assert settings.parameter is Parameter.AQI
    assert settings.request_timeout is None


def test_values_from_env():
    settings = config.load_settings(
        {
            "OPENWEATHER_API_KEY": "abc",
            "AQRING_RADIUS_KM": "25",
            "AQRING_RINGS": "3",
            "AQRING_ANGLES": "8",
            "AQRING_PARAMETER": "o3",
            "AQRING_REQUEST_TIMEOUT": "15",
            "AQRING_LOG_LEVEL": "debug",
        }
    )
    assert settings.api_key == "abc"
    assert settings.radius_km == 25.0
    assert (settings.rings, settings.angles) == (3, 8)
    assert settings.parameter is Parameter.O3
    assert settings.request_timeout == 15.0
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env, match",
    [
        ({"AQRING_RADIUS_KM": "far"}, "AQRING_RADIUS_KM"),
        ({"AQRING_RADIUS_KM": "0"}, "AQRING_RADIUS_KM"),
        ({"AQRING_RINGS": "two"}, "AQRING_RINGS"),
        ({"AQRING_ANGLES": "0"}, "AQRING_ANGLES"),
        ({"AQRING_PARAMETER": "no2"}, "Unknown parameter"),
    ],
)
def test_invalid_values(env, match):
    with pytest.raises(ValueError, match=match):
        config.load_settings(env)


def test_process_env_and_dotenv(monkeypatch):
    loaded = []
    monkeypatch.setattr(config, "load_dotenv", lambda: loaded.append(True))
    monkeypatch.setenv("OPENWEATHER_API_KEY", "from-env")
    settings = config.load_settings()
    assert loaded == [True]
    assert settings.api_key == "from-env"


def test_configure_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
    config.configure_logging("debug")
    assert calls[0]["level"] == logging.DEBUG
