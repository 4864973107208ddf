"""挂件核心：配置值、状态持有者与请求生命周期管理器。"""

from chat_widget.widget.config import WidgetConfig
from chat_widget.widget.controller import ChatController
from chat_widget.widget.state_store import WidgetStateStore

__all__ = ["ChatController", "WidgetConfig", "WidgetStateStore"]
