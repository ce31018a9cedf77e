"""对外会话服务模块。

ChatSession 持有页面级状态（消息、加载中、错误、设置、API Key），
前端（终端或其他界面）只调用它的方法，不直接接触流水线或存储。
"""

from typing import List, Optional

from enforcer_chat.agents.pipeline import RequestPipeline
from enforcer_chat.config.settings import settings
from enforcer_chat.domain.conversation import ConversationStore
from enforcer_chat.domain.credentials import CredentialStore
from enforcer_chat.domain.exceptions import BusinessError, MissingCredentialError
from enforcer_chat.domain.models import Message, ModelConfig
from enforcer_chat.infrastructure.logging.logger import logger
from enforcer_chat.infrastructure.storage.json_store import JsonCredentialStore
from enforcer_chat.providers import create_provider
from enforcer_chat.providers.base import ProviderClient


class ChatSession:
    """一次聊天会话的控制器。

    - send(): 发送一条消息，失败时把可读的错误写到 error 上而不是抛出。
    - set_api_key()/clear_api_key(): 修改并持久化 API Key。
    - set_model()/set_max_tokens()/set_temperature(): 修改生成参数。
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        provider_client: Optional[ProviderClient] = None,
        config: Optional[ModelConfig] = None,
        store: Optional[ConversationStore] = None,
        system_instruction: Optional[str] = None,
    ):
        self._credentials = credential_store
        self._api_key = credential_store.get() or ""
        self._store = store or ConversationStore()
        self._pipeline = RequestPipeline(
            store=self._store,
            provider_client=provider_client or create_provider(),
            system_instruction=system_instruction,
        )
        self.config = config or ModelConfig(
            model=settings.default_model,
            max_tokens=settings.default_max_tokens,
            temperature=settings.default_temperature,
        )
        self.is_loading = False
        self.error: Optional[str] = None
        # 缺少 Key 时由前端据此打开设置
        self.settings_requested = False

    # ---- 状态 ----

    @property
    def messages(self) -> List[Message]:
        return list(self._store.snapshot())

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    # ---- 对话 ----

    def send(self, text: str) -> Optional[Message]:
        """发送一条消息。

        Returns:
            assistant 回复；输入为空、正在等待回复或出错时返回 None。
        """
        if not (text or "").strip() or self.is_loading:
            return None
        self.error = None
        self.is_loading = True
        try:
            return self._pipeline.submit(text, self.config, self._api_key)
        except MissingCredentialError as e:
            self.error = e.message
            self.settings_requested = True
            return None
        except BusinessError as e:
            logger.error(f"Chat failed: {e.code}", extra={"extra": {"error_code": e.code}})
            self.error = e.message
            return None
        finally:
            self.is_loading = False

    # ---- 设置 ----

    def set_api_key(self, value: str) -> None:
        self._api_key = (value or "").strip()
        self._credentials.set(self._api_key)

    def clear_api_key(self) -> None:
        self.set_api_key("")

    def set_model(self, model: str) -> None:
        self.config = self.config.with_changes(model=model)

    def set_max_tokens(self, max_tokens: int) -> None:
        self.config = self.config.with_changes(max_tokens=max_tokens)

    def set_temperature(self, temperature: float) -> None:
        self.config = self.config.with_changes(temperature=temperature)


_session: Optional[ChatSession] = None


def get_default_session() -> ChatSession:
    """获取默认的 ChatSession 实例（单例），API Key 存在 settings.storage_root 下。"""
    global _session
    if _session is None:
        _session = ChatSession(credential_store=JsonCredentialStore())
    return _session
