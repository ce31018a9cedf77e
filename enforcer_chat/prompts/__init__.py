"""系统提示词加载工具。

按人设(persona) 从 prompts/<locale> 目录读取 system instruction 文本，
随每次请求放进 systemInstruction 字段。
"""

from functools import lru_cache
from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_system_prompt(persona: str = "enforcer", locale: str = "en") -> str:
    """根据人设和语言加载系统提示词文本。

    目前提供 "enforcer"（默认的凶狠尼泊尔人设）和 "assistant" 两种。
    """

    fname = PROMPTS_DIR / locale / f"{persona}_system.md"
    return fname.read_text(encoding="utf-8").strip()
