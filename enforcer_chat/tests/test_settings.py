from enforcer_chat.config.settings import Settings


def test_yaml_config_is_loaded(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("default_model: gemini-1.5-pro\nhttp_timeout: 12\npersona: assistant\n", encoding="utf-8")
    monkeypatch.setenv("ENFORCER_CONFIG_FILE", str(cfg))
    monkeypatch.delenv("DEFAULT_MODEL", raising=False)

    s = Settings(_env_file=None)
    assert s.default_model == "gemini-1.5-pro"
    assert s.http_timeout == 12.0
    assert s.persona == "assistant"


def test_env_overrides_yaml(monkeypatch, tmp_path):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("default_max_tokens: 200\n", encoding="utf-8")
    monkeypatch.setenv("ENFORCER_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("DEFAULT_MAX_TOKENS", "400")
    monkeypatch.setenv("GEMINI_BASE_URL", "http://localhost:8080/v1beta/")

    s = Settings(_env_file=None)
    assert s.default_max_tokens == 400
    assert s.gemini_base_url == "http://localhost:8080/v1beta"
