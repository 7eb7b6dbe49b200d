import pytest

import settings as settings_module
from expr_engine.expressions.types import ARRAY_INDEX_CAP, DEFAULT_LIMIT, POWER_LIMIT


def test_power_limit_cannot_be_lower_than_default():
    with pytest.raises(ValueError):
        settings_module.TestSettings(AUTOCOMPLETE_DEFAULT_LIMIT=50, AUTOCOMPLETE_POWER_LIMIT=40)


def test_delimiters_cannot_be_empty():
    with pytest.raises(ValueError):
        settings_module.TestSettings(EXPRESSION_SUFFIX="")


def test_cors_origins_are_split_and_trimmed():
    config = settings_module.TestSettings(CORS_ALLOW_ORIGINS="http://a.test, http://b.test,")
    assert config.cors_origins == ["http://a.test", "http://b.test"]


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("AUTOCOMPLETE_ENV_ALIAS", "env")
    assert settings_module.get_settings().AUTOCOMPLETE_ENV_ALIAS == "env"


@pytest.mark.parametrize("env, error", [("prod", NotImplementedError), ("staging", ValueError)])
def test_unsupported_environments(monkeypatch, env, error):
    monkeypatch.setenv("APP_ENV", env)
    with pytest.raises(error):
        settings_module.get_settings()


def test_defaults_match_engine_limits():
    config = settings_module.TestSettings()
    assert config.AUTOCOMPLETE_DEFAULT_LIMIT == DEFAULT_LIMIT
    assert config.AUTOCOMPLETE_POWER_LIMIT == POWER_LIMIT
    assert config.AUTOCOMPLETE_ARRAY_INDEX_CAP == ARRAY_INDEX_CAP
