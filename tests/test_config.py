from collector.commons.config import load_settings, trim_trailing_slash


def test_defaults_when_file_missing(tmp_path):
    settings = load_settings(str(tmp_path / "missing.yaml"), env={})
    assert settings.api.base_url == "https://api-staging.dardoc.com"
    assert settings.api.timeout_sec == 20
    assert settings.collector.party_id == "BOOM_HEALTH"
    assert settings.display.timezone == "Asia/Dubai"


def test_yaml_and_env_overrides(tmp_path):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(
        "api:\n  base_url: https://yaml.test/\n  timeout_sec: 5\ncollector:\n  party_id: YAML\n",
        encoding="utf-8",
    )
    settings = load_settings(str(cfg), env={})
    assert settings.api.base_url == "https://yaml.test"
    assert settings.api.timeout_sec == 5
    assert settings.collector.party_id == "YAML"

    settings = load_settings(
        str(cfg),
        env={"COLLECTOR_API_BASE_URL": " https://env.test// ", "COLLECTOR_PARTY_ID": "ENV"},
    )
    assert settings.api.base_url == "https://env.test"
    assert settings.collector.party_id == "ENV"


def test_blank_env_is_ignored(tmp_path):
    settings = load_settings(str(tmp_path / "none.yaml"), env={"COLLECTOR_PARTY_ID": "   "})
    assert settings.collector.party_id == "BOOM_HEALTH"


def test_trim_trailing_slash():
    assert trim_trailing_slash("https://a.test///") == "https://a.test"
