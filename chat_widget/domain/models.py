"""聊天挂件的数据模型。

- ChatMessage: 历史记录中的一条消息（user/agent）。
- ChatRequestBody: 发往 Agent 服务的请求体。
- AgentReply: 从 Agent 服务响应中解析出的结果。
- MessageIdFactory: 生成唯一的消息 id，时间戳部分按创建顺序递增。

这些模型只做数据承载与 JSON 转换，不包含任何 IO。
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, get_args

from chat_widget.domain.exceptions import ValidationError


Role = Literal["user", "agent"]
# 普通消息的 status 为 None，序列化时省略该字段
MessageStatus = Literal["typing", "fallback", "error"]
Mode = Literal["stateful", "stateless"]

_ROLES = frozenset(get_args(Role))
_STATUSES = frozenset(get_args(MessageStatus))


@dataclass(frozen=True)
class ChatMessage:
    """一条对话消息。

    - id: 唯一、稳定的字符串；按时间戳部分（而非整个字符串）可排出创建顺序。
    - role: user 或 agent。
    - text: 展示文本，可能是占位文案（如 "Escribiendo…"）。
    - status: typing/fallback/error，普通消息为 None。
    """

    id: str
    role: Role
    text: str
    status: Optional[MessageStatus] = None

    @property
    def is_typing(self) -> bool:
        return self.status == "typing"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "role": self.role, "text": self.text}
        if self.status:
            data["status"] = self.status
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "ChatMessage":
        """从持久化的 dict 还原消息，结构不合法时抛 ValidationError。"""

        if not isinstance(data, dict):
            raise ValidationError(code="INVALID_MESSAGE", message=f"message must be an object, got {type(data).__name__}")
        msg_id = data.get("id")
        role = data.get("role")
        text = data.get("text")
        status = data.get("status") or None
        if not isinstance(msg_id, str) or not msg_id:
            raise ValidationError(code="INVALID_MESSAGE", message="message id missing")
        if role not in _ROLES:
            raise ValidationError(code="INVALID_MESSAGE", message=f"unknown role: {role!r}")
        if not isinstance(text, str):
            raise ValidationError(code="INVALID_MESSAGE", message="message text must be a string")
        if status is not None and status not in _STATUSES:
            raise ValidationError(code="INVALID_MESSAGE", message=f"unknown status: {status!r}")
        return cls(id=msg_id, role=role, text=text, status=status)


@dataclass(frozen=True)
class ChatRequestBody:
    """一次发往 Agent 服务的请求体。"""

    user_id: str
    session_id: str
    message: str

    def to_payload(self) -> Dict[str, str]:
        return {
            "user_id": self.user_id,
            "session_id": self.session_id,
            "message": self.message,
        }


@dataclass(frozen=True)
class AgentReply:
    """Agent 服务的成功响应。缺失字段一律视为空字符串。"""

    response: str = ""
    session_id: str = ""
    raw: Optional[Any] = field(default=None, compare=False)

    @classmethod
    def from_payload(cls, data: Any) -> "AgentReply":
        if not isinstance(data, dict):
            return cls(raw=data)
        response = data.get("response")
        session_id = data.get("session_id")
        return cls(
            response=response if isinstance(response, str) else "",
            session_id=session_id if isinstance(session_id, str) else "",
            raw=data,
        )


class MessageIdFactory:
    """生成 ``<prefix>-<毫秒时间戳>`` 形式的消息 id。

    同一毫秒内连续生成时，时间戳部分会被顺延 1ms，保证 id 唯一。只有时间戳部分
    随创建顺序严格递增；前缀不同（如 user- 与 agent-）的 id 按整串比较并不反映创建顺序。
    """

    def __init__(self, clock=None):
        self._clock = clock or time.time
        self._last_ms = 0

    def next(self, prefix: str) -> str:
        now_ms = int(self._clock() * 1000)
        if now_ms <= self._last_ms:
            now_ms = self._last_ms + 1
        self._last_ms = now_ms
        return f"{prefix}-{now_ms}"
