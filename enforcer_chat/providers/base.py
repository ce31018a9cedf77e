"""Provider 抽象接口。

RequestPipeline 不直接依赖 httpx，而是依赖此协议，
测试里可以用一个假的客户端替换真实的 GeminiClient。
"""

from typing import Protocol

from enforcer_chat.domain.models import ChatRequest, ChatResult


class ProviderClient(Protocol):
    """LLM Provider 客户端协议。

    - name: Provider 名称，用于日志。
    - chat(req, api_key): 执行一次调用，返回 ChatResult；失败时抛出 BusinessError。
    """

    name: str

    def chat(self, req: ChatRequest, api_key: str) -> ChatResult:
        ...
