"""请求生命周期管理器。

一次交互（exchange）的状态机::

    Idle -> Sending -> {Success | Fallback | Error} -> Idle

- 同一时刻最多只有一个请求在途，由 is_sending 标志保证，第二次 submit 直接丢弃；
- 用户消息在网络结果返回前就写入历史，失败也不回滚；
- 每次交互只插入一条 typing 占位消息，并且恰好被替换一次；
- 请求一旦发出就一定跑完，即使面板已经关闭，结果也照常写回历史。
"""

import logging
import time
from typing import Any, Dict, Optional
from uuid import uuid4

from chat_widget.domain.exceptions import BusinessError
from chat_widget.domain.models import AgentReply, ChatMessage, ChatRequestBody, MessageIdFactory
from chat_widget.domain.state import ConversationState
from chat_widget.domain.texts import ERROR_GENERIC, FALLBACK_MESSAGE, TYPING_TEXT
from chat_widget.infrastructure.logging.logger import logger
from chat_widget.providers.agent_client import AgentClient
from chat_widget.widget.config import WidgetConfig
from chat_widget.widget.state_store import WidgetStateStore


class ChatController:
    def __init__(
        self,
        state_store: WidgetStateStore,
        client: AgentClient,
        config: WidgetConfig,
        id_factory: Optional[MessageIdFactory] = None,
    ):
        self._store = state_store
        self._client = client
        self._config = config
        self._ids = id_factory or MessageIdFactory()

    @property
    def state(self) -> ConversationState:
        return self._store.state

    @property
    def config(self) -> WidgetConfig:
        return self._config

    def subscribe(self, listener):
        return self._store.subscribe(listener)

    # ---- 展示层可调用的 UI 意图 ----------------------------------------

    def set_draft(self, text: str) -> None:
        self._store.set_draft(text)

    def set_open(self, is_open: bool) -> None:
        self._store.set_open(is_open)

    def toggle_open(self) -> None:
        self._store.set_open(not self.state.is_open)

    # ---- 核心流程 ------------------------------------------------------

    async def submit(self, draft_text: Optional[str] = None) -> bool:
        """发送一条消息并等待 Agent 回复。

        Args:
            draft_text: 要发送的文本；为 None 时使用当前草稿。

        Returns:
            真正发起了一次交互时返回 True；文本为空或已有请求在途时返回 False，
            此时不修改任何状态、不发网络请求。
        """
        content = (self.state.draft if draft_text is None else draft_text or "").strip()
        if not content or self.state.is_sending:
            return False

        # 从检查到 set_sending(True) 之间不能有 await
        self._store.set_error("")
        self._store.set_sending(True)
        self._store.set_draft("")
        self._store.append_message(ChatMessage(id=self._ids.next("user"), role="user", text=content))
        self._store.append_message(
            ChatMessage(id=self._ids.next("typing"), role="agent", text=TYPING_TEXT, status="typing")
        )

        body = ChatRequestBody(
            user_id=self._config.user_id,
            session_id="" if self._config.is_stateless else self.state.session_id,
            message=content,
        )
        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "mode": self._config.mode,
            "endpoint": self._client.endpoint,
        }
        self._log(logging.INFO, "Exchange started", log_ctx, **self._content_fields(content))

        try:
            reply = await self._client.send(body)
        except BusinessError as e:
            self._fail(e.message, log_ctx, start_time, code=e.code, http_status=e.http_status)
        except Exception as e:  # noqa: BLE001 - 任何失败都要回到 Idle
            self._fail(str(e), log_ctx, start_time, code=type(e).__name__)
        except BaseException as e:
            # 任务被取消时占位消息同样要被替换，然后继续向上抛
            self._fail("", log_ctx, start_time, code=type(e).__name__)
            raise
        else:
            self._reconcile(reply, log_ctx, start_time)
        finally:
            self._store.set_sending(False)
        return True

    def _reconcile(self, reply: AgentReply, log_ctx: Dict[str, Any], start_time: float) -> None:
        if not self._config.is_stateless and reply.session_id:
            self._store.set_session_id(reply.session_id)

        text = reply.response.strip()
        if text:
            self._store.replace_typing(ChatMessage(id=self._ids.next("agent"), role="agent", text=text))
            outcome = "success"
        else:
            self._store.replace_typing(
                ChatMessage(id=self._ids.next("agent"), role="agent", text=FALLBACK_MESSAGE, status="fallback")
            )
            outcome = "fallback"
        self._log(
            logging.INFO,
            "Exchange finished",
            log_ctx,
            outcome=outcome,
            session_updated=bool(reply.session_id) and not self._config.is_stateless,
            elapsed_ms=self._elapsed_ms(start_time),
        )

    def _fail(self, message: str, log_ctx: Dict[str, Any], start_time: float, **fields: Any) -> None:
        self._store.set_error(message or ERROR_GENERIC)
        self._store.replace_typing(
            ChatMessage(id=self._ids.next("error"), role="agent", text=FALLBACK_MESSAGE, status="error")
        )
        self._log(
            logging.WARNING,
            "Exchange failed",
            log_ctx,
            outcome="error",
            error=message,
            elapsed_ms=self._elapsed_ms(start_time),
            **fields,
        )

    def _content_fields(self, content: str) -> Dict[str, Any]:
        if self._config.redact_content:
            return {"message_chars": len(content)}
        return {"message_chars": len(content), "message_preview": content[:64]}

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
