"""Gemini（Generative Language API）Provider 适配器。

本模块负责：

1. 接收统一的 ChatRequest。
2. 将其转换为 generateContent 的请求 JSON（角色 assistant -> model）。
3. 发起一次 HTTP POST，并把网络/API 异常包装成业务异常。
4. 从响应中取出首个候选的首段文本，结构缺失时退化为占位文本。

API Key 只通过 x-goog-api-key 请求头发送，不出现在 URL 或请求体里。
"""

from typing import Any, Dict, List, Optional

import httpx

from enforcer_chat.config.settings import settings
from enforcer_chat.domain.exceptions import (
    ApiError,
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    RateLimitError,
)
from enforcer_chat.domain.models import ChatRequest, ChatResult, ChatUsage, Message
from enforcer_chat.providers.registry import GEMINI_CONFIG


# 响应里找不到文本时使用的占位回复
FALLBACK_REPLY = "No reply."

# 内部角色 -> Gemini 角色
_ROLE_MAP = {"assistant": "model", "user": "user"}


class GeminiClient:
    """Gemini 提供方客户端实现。

    - name: Provider 名称（供日志使用）。
    - chat: 执行一次非流式 generateContent 调用，返回 ChatResult。
    """

    name = GEMINI_CONFIG.name

    def __init__(self, cfg=settings):
        # Settings 里包含 base_url、超时等配置
        self._settings = cfg

    def chat(self, req: ChatRequest, api_key: str) -> ChatResult:
        if not api_key:
            raise MissingCredentialError(code="MISSING_API_KEY", message="Gemini API key not set")
        payload = self.build_payload(req)
        base = getattr(self._settings, "gemini_base_url", None) or GEMINI_CONFIG.base_url
        url = GEMINI_CONFIG.endpoint(req.model, base)
        try:
            with httpx.Client(timeout=self._settings.http_timeout, trust_env=False) as client:
                resp = client.post(
                    url,
                    json=payload,
                    headers={
                        GEMINI_CONFIG.api_key_header: api_key,
                        "Content-Type": "application/json",
                    },
                )
        except httpx.TimeoutException as e:
            raise NetworkError(
                code="TIMEOUT",
                message=f"Request timed out after {self._settings.http_timeout}s.",
                detail=str(e),
            )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e) or "Network error.")
        if resp.status_code == 429:
            raise RateLimitError(
                code="RATE_LIMIT",
                message="Gemini rate limit exceeded, try again later.",
                http_status=429,
            )
        if not 200 <= resp.status_code < 300:
            raise ApiError(
                code="API_ERROR",
                message="Invalid API Key or API Error.",
                http_status=resp.status_code,
                body=resp.text,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponseError(
                code="MALFORMED_RESPONSE",
                message=f"Could not parse Gemini response: {e}",
                http_status=resp.status_code,
            )
        return self.parse_response(data, req)

    def build_payload(self, req: ChatRequest) -> Dict[str, Any]:
        """将 ChatRequest 转成 generateContent 的请求 JSON。"""

        return {
            "contents": self.serialize_history(req.history),
            "systemInstruction": {"parts": [{"text": req.system_instruction}]},
            "generationConfig": {
                "maxOutputTokens": req.max_tokens,
                "temperature": req.temperature,
            },
        }

    @staticmethod
    def serialize_history(history) -> List[Dict[str, Any]]:
        return [_message_to_content(m) for m in history]

    def parse_response(self, data: Any, req: ChatRequest) -> ChatResult:
        """解析响应 JSON。

        只关心 candidates[0].content.parts[0].text；任何一层缺失或类型不对
        都不算错误，而是返回占位文本 FALLBACK_REPLY。
        """

        raw = data if isinstance(data, dict) else {}
        candidate = _first(raw.get("candidates"))
        content = candidate.get("content") if isinstance(candidate, dict) else None
        part = _first(content.get("parts")) if isinstance(content, dict) else None
        text = part.get("text") if isinstance(part, dict) else None

        fallback = not (isinstance(text, str) and text)
        finish_reason = candidate.get("finishReason") if isinstance(candidate, dict) else None
        return ChatResult(
            model=req.model,
            text=FALLBACK_REPLY if fallback else text,
            fallback=fallback,
            finish_reason=finish_reason,
            usage=_parse_usage(raw.get("usageMetadata")),
            raw=raw,
        )


def _message_to_content(message: Message) -> Dict[str, Any]:
    return {"role": _ROLE_MAP[message.role], "parts": [{"text": message.content}]}


def _first(items: Any) -> Optional[Any]:
    if isinstance(items, list) and items:
        return items[0]
    return None


def _parse_usage(usage_raw: Any) -> Optional[ChatUsage]:
    if not isinstance(usage_raw, dict):
        return None
    return ChatUsage(
        prompt_tokens=_as_count(usage_raw.get("promptTokenCount")),
        completion_tokens=_as_count(usage_raw.get("candidatesTokenCount")),
        total_tokens=_as_count(usage_raw.get("totalTokenCount")),
    )


def _as_count(value: Any) -> int:
    # 统计字段只用于日志，类型不对时按 0 处理
    if isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
