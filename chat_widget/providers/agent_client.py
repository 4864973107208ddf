"""Agent 服务 HTTP 客户端。

本模块负责：

1. 根据运行模式选择接口路径（有状态 / 无状态）。
2. 把 ChatRequestBody 以 JSON 形式 POST 到 Agent 服务。
3. 把网络错误、非 2xx 状态以及无法解析的响应统一转换为业务异常。
4. 把响应 JSON 解析为 AgentReply。

Agent 的内部推理对挂件是不透明的，这里只关心请求/响应契约。
"""

from typing import Optional

import httpx

from chat_widget.domain.exceptions import ApiError, NetworkError
from chat_widget.domain.models import AgentReply, ChatRequestBody, Mode
from chat_widget.domain.texts import ERROR_AGENT_UNREACHABLE


STATEFUL_PATH = "/api/v1/agent/chat"
STATELESS_PATH = "/api/v1/agent/chat-stateless"


def normalize_base_url(url: Optional[str]) -> str:
    if not url:
        return ""
    return url[:-1] if url.endswith("/") else url


def resolve_endpoint(base_url: Optional[str], mode: Mode) -> str:
    """接口地址只由模式决定；base 为空时返回相对路径。"""
    path = STATELESS_PATH if mode == "stateless" else STATEFUL_PATH
    return f"{normalize_base_url(base_url)}{path}"


class AgentClient:
    """Agent 服务客户端。

    - endpoint: 完整的接口地址（已按模式选好路径）。
    - send: 执行一次请求，成功时返回 AgentReply，失败时抛出 NetworkError/ApiError。
    """

    name = "agent"

    def __init__(self, endpoint: str, timeout: float = 30.0):
        self.endpoint = endpoint
        self._timeout = timeout

    async def send(self, body: ChatRequestBody) -> AgentReply:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, trust_env=False, follow_redirects=True) as client:
                resp = await client.post(
                    self.endpoint,
                    json=body.to_payload(),
                    headers={"Content-Type": "application/json"},
                )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接超时等
            raise NetworkError(code="NETWORK_ERROR", message=str(e), endpoint=self.endpoint)
        if resp.status_code < 200 or resp.status_code >= 300:
            raise ApiError(
                code="API_ERROR",
                message=ERROR_AGENT_UNREACHABLE,
                http_status=resp.status_code,
                endpoint=self.endpoint,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise ApiError(
                code="INVALID_RESPONSE",
                message=str(e),
                http_status=resp.status_code,
                endpoint=self.endpoint,
            )
        return AgentReply.from_payload(data)
