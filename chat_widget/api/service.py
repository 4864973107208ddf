"""对外 API 服务模块。

提供组装好的 ChatController 供展示层调用。
"""

from typing import Optional

from chat_widget.config.settings import Settings, settings as default_settings
from chat_widget.infrastructure.logging.logger import logger
from chat_widget.infrastructure.storage.session_store import (
    JsonFileStorage,
    PersistentStore,
    StorageBackend,
)
from chat_widget.providers import create_client
from chat_widget.providers.agent_client import AgentClient
from chat_widget.widget.config import WidgetConfig
from chat_widget.widget.controller import ChatController
from chat_widget.widget.state_store import WidgetStateStore


_controller: Optional[ChatController] = None


def create_controller(
    settings: Optional[Settings] = None,
    storage: Optional[StorageBackend] = None,
    client: Optional[AgentClient] = None,
) -> ChatController:
    """按配置组装一个新的 ChatController。

    Args:
        settings: 配置对象（可选，默认使用全局 settings）
        storage: 存储后端（可选，默认使用 JsonFileStorage）
        client: Agent 客户端（可选，默认按配置创建）

    Returns:
        已从持久化存储恢复状态的 ChatController
    """
    cfg = settings or default_settings
    config = WidgetConfig.from_settings(cfg)
    backend = storage or JsonFileStorage(root=cfg.storage_root, scope=cfg.storage_scope)
    state_store = WidgetStateStore.restore(PersistentStore(backend), config.mode)
    agent_client = client or create_client(config)
    if not config.base_url:
        # httpx 无法请求相对地址，未配置 api_base_url 时每次交互都会以错误结束
        logger.warning(
            "api_base_url is not configured",
            extra={"extra": {"endpoint": agent_client.endpoint}},
        )
    logger.info(
        "Chat widget initialised",
        extra={"extra": {
            "mode": config.mode,
            "endpoint": agent_client.endpoint,
            "restored_messages": len(state_store.state.messages),
            "has_session": bool(state_store.state.session_id),
        }},
    )
    return ChatController(state_store, agent_client, config)


def get_default_controller() -> ChatController:
    """获取默认的 ChatController 实例（单例）。"""
    global _controller
    if _controller is None:
        _controller = create_controller()
    return _controller
