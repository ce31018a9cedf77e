"""请求流水线。

把一次用户输入变成一轮完整对话：追加 user 记录、序列化整段历史、
调用 Provider、成功时追加 assistant 记录。失败的一轮不会回滚 user 记录。
"""

import logging
import threading
import time
from typing import Any, Dict, Optional
from uuid import uuid4

from enforcer_chat.config.settings import settings
from enforcer_chat.domain.conversation import ConversationStore
from enforcer_chat.domain.exceptions import BusinessError, MissingCredentialError, RequestInFlightError
from enforcer_chat.domain.models import ChatRequest, ChatResult, Message, ModelConfig
from enforcer_chat.infrastructure.logging.logger import logger
from enforcer_chat.prompts import load_system_prompt
from enforcer_chat.providers.base import ProviderClient


class RequestPipeline:
    def __init__(
        self,
        store: ConversationStore,
        provider_client: ProviderClient,
        system_instruction: Optional[str] = None,
    ):
        self._store = store
        self._provider_client = provider_client
        self._system_instruction = system_instruction or load_system_prompt(settings.persona)
        self._lock = threading.Lock()

    @property
    def store(self) -> ConversationStore:
        return self._store

    @property
    def system_instruction(self) -> str:
        return self._system_instruction

    def submit(self, raw_text: str, config: ModelConfig, credential: Optional[str]) -> Optional[Message]:
        """执行一轮对话。

        Args:
            raw_text: 用户输入，首尾空白会被去掉
            config: 本轮使用的生成参数（只读）
            credential: API Key

        Returns:
            新追加的 assistant 消息；输入为空白时返回 None 且不做任何事。

        Raises:
            MissingCredentialError: 未配置 API Key，不会发起网络请求
            RequestInFlightError: 已有一轮对话在进行中
            RequestFailedError / MalformedResponseError: 请求失败，user 记录保留
        """
        text = (raw_text or "").strip()
        if not text:
            return None
        if not credential:
            raise MissingCredentialError(
                code="MISSING_API_KEY",
                message="Please enter your Gemini API Key in Settings first.",
            )
        if not self._lock.acquire(blocking=False):
            raise RequestInFlightError(code="REQUEST_IN_FLIGHT", message="A reply is still pending.")
        try:
            return self._run_turn(text, config, credential)
        finally:
            self._lock.release()

    def build_request(self, config: ModelConfig) -> ChatRequest:
        """用当前会话快照构造请求，历史不做裁剪。"""

        return ChatRequest(
            model=config.model,
            history=self._store.snapshot(),
            system_instruction=self._system_instruction,
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

    def _run_turn(self, text: str, config: ModelConfig, credential: str) -> Message:
        start_time = time.time()
        log_ctx: Dict[str, Any] = {
            "trace_id": f"tr-{uuid4().hex}",
            "provider": self._provider_client.name,
            "model": config.model,
        }

        self._store.append(Message(role="user", content=text))
        req = self.build_request(config)
        self._log(
            logging.INFO,
            "Calling provider",
            log_ctx,
            message_count=len(req.history),
            max_tokens=config.max_tokens,
            temperature=config.temperature,
        )

        try:
            result: ChatResult = self._provider_client.chat(req, credential)
        except BusinessError as e:
            self._log(
                logging.WARNING,
                "Provider call failed",
                log_ctx,
                error_code=e.code,
                http_status=e.http_status,
                elapsed_seconds=round(time.time() - start_time, 2),
            )
            raise

        if result.fallback:
            self._log(logging.WARNING, "Response had no candidate text", log_ctx, finish_reason=result.finish_reason)
        reply = Message(role="assistant", content=result.text)
        self._store.append(reply)
        self._log(
            logging.INFO,
            "Completed turn",
            log_ctx,
            elapsed_seconds=round(time.time() - start_time, 2),
            reply_chars=len(reply.content),
            total_tokens=result.usage.total_tokens if result.usage else None,
            history_size=len(self._store),
        )
        return reply

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
