"""LLM Provider 集成层。

- base: Provider 抽象接口。
- registry: 端点与可选模型。
- gemini_client: Generative Language API 的具体实现。
"""

from enforcer_chat.config.settings import settings
from enforcer_chat.providers.base import ProviderClient
from enforcer_chat.providers.gemini_client import GeminiClient


def create_provider(cfg=None) -> ProviderClient:
    """创建 Provider 实例，默认使用全局 settings。"""

    return GeminiClient(cfg or settings)
