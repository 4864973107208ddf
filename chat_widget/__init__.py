"""Chat Widget 顶层包。

该包提供嵌入式聊天挂件的核心实现：配置加载、消息与会话状态、
会话级持久化、与远端 Agent 服务的请求生命周期管理，以及 tkinter 面板。
"""

from chat_widget.api.service import create_controller, get_default_controller

__all__ = ["create_controller", "get_default_controller"]
