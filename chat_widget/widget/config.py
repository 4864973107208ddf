"""Widget-scoped configuration value."""

from __future__ import annotations

from dataclasses import dataclass

from chat_widget.domain.models import Mode
from chat_widget.providers.agent_client import normalize_base_url, resolve_endpoint


DEFAULT_USER_ID = "web-user"


@dataclass(frozen=True)
class WidgetConfig:
    """启动时确定、之后不再变化的挂件配置。

    Attributes:
        base_url: Agent API origin，已去掉末尾的 /。
        mode: stateful 发送并保存 session_id；stateless 两者都不做。
        user_id: 请求体里固定的客户端标识。
        timeout: 单次请求的超时时间（秒）。
        redact_content: 日志里是否只记录消息长度而不记录内容。
    """

    base_url: str = ""
    mode: Mode = "stateful"
    user_id: str = DEFAULT_USER_ID
    timeout: float = 30.0
    redact_content: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalize_base_url(self.base_url))

    @property
    def endpoint(self) -> str:
        return resolve_endpoint(self.base_url, self.mode)

    @property
    def is_stateless(self) -> bool:
        return self.mode == "stateless"

    @classmethod
    def from_settings(cls, settings) -> "WidgetConfig":
        return cls(
            base_url=settings.api_base_url,
            mode="stateless" if settings.stateless_mode else "stateful",
            user_id=settings.user_id or DEFAULT_USER_ID,
            timeout=settings.http_timeout,
            redact_content=settings.log_redact_content,
        )
