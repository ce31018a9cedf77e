"""对话与请求/响应数据模型。

- Message: 一条对话记录（user/assistant），创建后不可变。
- ModelConfig: 用户可调的生成参数（模型、最大输出 token、温度）。
- ChatRequest: 流水线交给 Provider 客户端的一次完整请求。
- ChatResult: Provider 客户端解析后的统一响应结果。

Provider 适配器只依赖这些模型，负责在厂商 JSON 与这些结构之间转换。
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Literal, Optional, Tuple

from enforcer_chat.domain.exceptions import ValidationError


# 对话角色。Provider 侧的角色名（如 Gemini 的 "model"）由适配器转换
Role = Literal["user", "assistant"]

# 设置面板里可选的模型，第一个为默认值
MODEL_CHOICES: Tuple[str, ...] = (
    "gemini-2.5-flash",
    "gemini-2.0-flash-exp",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
    "gemini-2.0-flash-lite",
)
MAX_TOKENS_RANGE: Tuple[int, int] = (50, 500)
TEMPERATURE_RANGE: Tuple[float, float] = (0.0, 1.0)
TEMPERATURE_STEP = 0.1


def _snap_to_step(temperature: float) -> float:
    """按滑块步长取整，再消掉浮点误差（0.30000000000000004 -> 0.3）。"""

    return round(round(temperature / TEMPERATURE_STEP) * TEMPERATURE_STEP, 10)


@dataclass(frozen=True)
class Message:
    """一轮对话中的一条消息。"""

    role: Role
    content: str


@dataclass(frozen=True)
class ModelConfig:
    """生成参数。

    只由用户显式修改设置时产生新实例（见 with_changes），
    流水线在请求时只读取它。
    """

    model: str = MODEL_CHOICES[0]
    max_tokens: int = 150
    temperature: float = 0.7

    def __post_init__(self):
        if self.model not in MODEL_CHOICES:
            raise ValidationError(
                code="INVALID_CONFIG",
                message=f"Unknown model {self.model!r}; choose one of: {', '.join(MODEL_CHOICES)}",
            )
        lo, hi = MAX_TOKENS_RANGE
        if isinstance(self.max_tokens, bool) or not isinstance(self.max_tokens, int):
            raise ValidationError(code="INVALID_CONFIG", message="max_tokens must be an integer")
        if not lo <= self.max_tokens <= hi:
            raise ValidationError(
                code="INVALID_CONFIG",
                message=f"max_tokens must be between {lo} and {hi}",
            )
        t_lo, t_hi = TEMPERATURE_RANGE
        try:
            temperature = float(self.temperature)
        except (TypeError, ValueError):
            raise ValidationError(code="INVALID_CONFIG", message="temperature must be a number")
        if not t_lo <= temperature <= t_hi:
            raise ValidationError(
                code="INVALID_CONFIG",
                message=f"temperature must be between {t_lo} and {t_hi}",
            )
        object.__setattr__(self, "temperature", _snap_to_step(temperature))

    def with_changes(self, **changes: Any) -> "ModelConfig":
        """返回修改了部分字段的新配置，原实例不变。"""

        return replace(self, **changes)


@dataclass
class ChatRequest:
    """一次 generateContent 请求。

    history 为发送时刻会话存储的完整快照（已包含本轮 user 消息）。
    """

    model: str
    history: Tuple[Message, ...]
    system_instruction: str
    max_tokens: int
    temperature: float


@dataclass
class ChatUsage:
    """Provider 返回的 token 统计信息。"""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class ChatResult:
    """一次调用的解析结果。

    - text: 首个候选的首段文本；结构缺失时为占位文本。
    - fallback: text 是否为占位文本。
    - raw: 原始响应 JSON，用于调试。
    """

    model: str
    text: str
    fallback: bool = False
    finish_reason: Optional[str] = None
    usage: Optional[ChatUsage] = None
    raw: Dict[str, Any] = field(default_factory=dict)
