import pytest

from api_envelope.config import Settings, load_settings
from api_envelope.i18n.translator import DEFAULT_LOCALES_PATH


def test_defaults():
    settings = Settings()
    assert settings.environment == "development"
    assert settings.fallback_language == "tr"
    assert settings.error_fallback_language == "en"
    assert settings.json_logs is False
    assert settings.i18n_path == DEFAULT_LOCALES_PATH


def test_production_defaults_to_json_logs():
    settings = Settings(environment="production")
    assert settings.is_prod is True
    assert settings.json_logs is True


@pytest.mark.parametrize(
    "kwargs",
    [
        {"environment": "staging"},
        {"fallback_language": "de"},
        {"error_fallback_language": "fr"},
        {"log_level": "VERBOSE"},
    ],
)
def test_invalid_choices_fail_fast(kwargs):
    with pytest.raises(ValueError):
        Settings(**kwargs)


def test_load_settings_reads_environment(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("LOG_JSON", "false")
    monkeypatch.setenv("FALLBACK_LANGUAGE", "en")
    monkeypatch.setenv("ERROR_FALLBACK_LANGUAGE", "tr")
    settings = load_settings()
    assert settings.environment == "production"
    assert settings.json_logs is False
    assert settings.fallback_language == "en"
    assert settings.error_fallback_language == "tr"


def test_safe_dict_is_serializable():
    assert Settings().safe_dict()["i18n_path"] == str(DEFAULT_LOCALES_PATH)
