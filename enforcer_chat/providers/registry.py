"""Provider 配置。

集中维护 Generative Language API 的名称、端点与鉴权头，
可选模型与取值范围定义在 domain.models。"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderConfig:
    """Provider 的整体配置。"""

    name: str
    base_url: str
    api_key_header: str

    def endpoint(self, model: str, base_url: str | None = None) -> str:
        """返回某个模型的 generateContent URL。"""

        base = (base_url or self.base_url).rstrip("/")
        return f"{base}/models/{model}:generateContent"


GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    api_key_header="x-goog-api-key",
)
