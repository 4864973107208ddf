from chat_widget.config.settings import WidgetSettings
from chat_widget.widget.config import WidgetConfig


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("CHAT_WIDGET_API_BASE_URL", " https://agent.example.com/ ")
    monkeypatch.setenv("CHAT_WIDGET_STATELESS_MODE", "true")
    s = WidgetSettings()
    assert s.api_base_url == "https://agent.example.com/"
    assert s.stateless_mode is True

    config = WidgetConfig.from_settings(s)
    assert config.base_url == "https://agent.example.com"
    assert config.mode == "stateless"
    assert config.endpoint == "https://agent.example.com/api/v1/agent/chat-stateless"


def test_settings_from_yaml(monkeypatch, tmp_path):
    cfg = tmp_path / "widget.yaml"
    cfg.write_text("api_base_url: https://yaml.example.com\nhttp_timeout: 12\n", encoding="utf-8")
    monkeypatch.setenv("CHAT_WIDGET_CONFIG_FILE", str(cfg))
    monkeypatch.delenv("CHAT_WIDGET_API_BASE_URL", raising=False)
    s = WidgetSettings()
    assert s.api_base_url == "https://yaml.example.com"
    assert s.http_timeout == 12


def test_env_overrides_yaml(monkeypatch, tmp_path):
    cfg = tmp_path / "widget.yaml"
    cfg.write_text("stateless_mode: true\n", encoding="utf-8")
    monkeypatch.setenv("CHAT_WIDGET_CONFIG_FILE", str(cfg))
    monkeypatch.setenv("CHAT_WIDGET_STATELESS_MODE", "false")
    assert WidgetSettings().stateless_mode is False


def test_widget_config_defaults():
    config = WidgetConfig()
    assert config.mode == "stateful"
    assert config.user_id == "web-user"
    assert config.endpoint == "/api/v1/agent/chat"
