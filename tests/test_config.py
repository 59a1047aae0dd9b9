import pytest

from plantlens.config import Settings, load_settings


def test_defaults_without_key():
    settings = load_settings(secrets={}, environ={})
    assert settings == Settings()
    assert not settings.has_api_key


def test_secrets_take_precedence_over_environment():
    settings = load_settings(
        secrets={"GEMINI_API_KEY": "from-secrets"},
        environ={"GEMINI_API_KEY": "from-env", "GEMINI_MODEL": "gemini-test"},
    )
    assert settings.gemini_api_key == "from-secrets"
    assert settings.gemini_model == "gemini-test"
    assert settings.has_api_key


def test_placeholder_key_counts_as_missing():
    settings = load_settings(secrets={"GEMINI_API_KEY": "your_gemini_api_key_here"}, environ={})
    assert not settings.has_api_key


def test_numeric_values_are_converted():
    settings = load_settings(environ={"GEMINI_TIMEOUT": "12.5", "PLANTLENS_MAX_IMAGE_SIDE": "800"})
    assert settings.gemini_timeout == 12.5
    assert settings.max_image_side == 800


def test_unknown_timezone_falls_back_to_default():
    settings = load_settings(environ={"PLANTLENS_TIMEZONE": "Mars/Olympus"})
    assert settings.timezone == "US/Eastern"
    assert settings.tz.zone == "US/Eastern"


def test_log_level_is_upper_cased():
    assert load_settings(environ={"PLANTLENS_LOG_LEVEL": "debug"}).log_level == "DEBUG"


@pytest.mark.parametrize("environ", [
    {"GEMINI_TIMEOUT": "abc"},
    {"GEMINI_TIMEOUT": "-1"},
    {"PLANTLENS_MAX_IMAGE_SIDE": "big"},
    {"PLANTLENS_MAX_IMAGE_SIDE": "12.5"},
    {"PLANTLENS_MAX_IMAGE_SIDE": "0"},
])
def test_malformed_numbers_fall_back_to_defaults(environ, caplog):
    settings = load_settings(environ=environ)
    assert settings.gemini_timeout == 30.0
    assert settings.max_image_side == 1536
    assert "using" in caplog.text
