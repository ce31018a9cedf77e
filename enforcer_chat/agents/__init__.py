"""对话流水线。"""

from enforcer_chat.agents.pipeline import RequestPipeline

__all__ = ["RequestPipeline"]
