from pathlib import Path

from flashdeck.application.config import AppConfig, resolve_config


def test_defaults(mock_home):
    config = resolve_config()
    assert config.data_path == Path(mock_home) / ".local/share/flashdeck/decks.json"
    assert config.gemini_model == "gemini-2.5-flash"
    assert config.gemini_api_key is None
    assert config.default_card_count == 5
    assert config.seed_demo is True


def test_env_overrides(mock_home, monkeypatch, tmp_path):
    monkeypatch.setenv("FLASHDECK_DATA_PATH", str(tmp_path / "x.json"))
    monkeypatch.setenv("FLASHDECK_GEMINI_API_KEY", "secret")
    monkeypatch.setenv("FLASHDECK_SEED_DEMO", "false")

    config = resolve_config()
    assert config.data_path == tmp_path / "x.json"
    assert config.gemini_api_key == "secret"
    assert config.seed_demo is False


def test_toml_file_is_read(mock_home):
    cfg = mock_home / ".config/flashdeck/config.toml"
    cfg.parent.mkdir(parents=True)
    cfg.write_text('gemini_model = "gemini-pro"\ndefault_card_count = 8\n')

    config = resolve_config()
    assert config.gemini_model == "gemini-pro"
    assert config.default_card_count == 8


def test_env_beats_toml_and_overrides_beat_env(mock_home, monkeypatch):
    cfg = mock_home / ".flashdeck.toml"
    cfg.write_text('gemini_model = "from-toml"\n')
    monkeypatch.setenv("FLASHDECK_GEMINI_MODEL", "from-env")

    assert resolve_config().gemini_model == "from-env"
    assert resolve_config({"gemini_model": "from-cli"}).gemini_model == "from-cli"


def test_none_overrides_are_ignored(mock_home):
    config = resolve_config({"gemini_model": None, "verbose": 2})
    assert config.gemini_model == "gemini-2.5-flash"
    assert config.verbose == 2


def test_blank_api_key_is_none(mock_home):
    assert AppConfig(gemini_api_key="  ").gemini_api_key is None


def test_paths_expand_user(mock_home):
    config = AppConfig(data_path="~/cards.json")
    assert config.data_path == Path(mock_home) / "cards.json"
