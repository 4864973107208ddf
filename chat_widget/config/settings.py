"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。

环境变量统一使用 ``CHAT_WIDGET_`` 前缀，例如::

    CHAT_WIDGET_API_BASE_URL=https://agent.example.com/
    CHAT_WIDGET_STATELESS_MODE=true
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> Optional[Path]:
    """按优先级查找 config.yaml，找不到时返回 None。"""
    candidates = []
    explicit = os.getenv("CHAT_WIDGET_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
        Path(__file__).resolve().parents[1] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if path in seen:
            continue
        seen.add(path)
        if path.is_file():
            return path
    return None


class WidgetSettings(BaseSettings):
    """聊天挂件配置（使用 Pydantic）。"""

    # ---- 远端 Agent 服务 ----
    api_base_url: str = Field(
        default="",
        description="Agent API 的 origin（必填），末尾的 / 会被去掉；为空时只有相对路径，请求无法发出",
    )
    stateless_mode: bool = Field(
        default=False,
        description="是否使用无状态接口（不发送、不保存 session_id）",
    )
    user_id: str = Field(default="web-user", description="请求体中固定的客户端标识")
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")

    # ---- 持久化 ----
    storage_root: str = Field(default=".storage", description="存储根目录")
    storage_scope: str = Field(
        default="default",
        description="会话作用域，对应浏览器 sessionStorage 的生命周期",
    )

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_level: str = Field(default="INFO", description="日志级别")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_prefix="CHAT_WIDGET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        return (v or "").strip()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = (v or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v!r}")
        return level

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources = [init_settings, env_settings, dotenv_settings]
        config_file = _find_config_file()
        if config_file is not None:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=config_file))
        sources.append(file_secret_settings)
        return tuple(sources)


settings = WidgetSettings()

# 类型别名，让外部代码可以使用 Settings 类型
Settings = WidgetSettings
