"""Agent 服务集成层。

- agent_client: 接口路径选择与 HTTP 调用。
"""

from typing import TYPE_CHECKING

from chat_widget.providers.agent_client import AgentClient, resolve_endpoint

if TYPE_CHECKING:
    from chat_widget.widget.config import WidgetConfig


def create_client(config: "WidgetConfig") -> AgentClient:
    """根据挂件配置创建客户端。"""

    return AgentClient(resolve_endpoint(config.base_url, config.mode), timeout=config.timeout)
