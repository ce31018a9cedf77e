"""终端聊天界面。

支持的命令：
  /key <value>   设置并保存 API Key（/key clear 清除）
  /model [name]  查看或切换模型
  /tokens <n>    最大输出 token（50-500）
  /temp <t>      温度（0.0-1.0，步长 0.1）
  /settings      显示当前设置
  /help          显示帮助
  /quit, /exit   退出
"""

import argparse
from typing import Callable, List, Optional

from enforcer_chat.api.service import ChatSession, get_default_session
from enforcer_chat.domain.exceptions import BusinessError
from enforcer_chat.domain.models import MODEL_CHOICES

ASSISTANT_LABEL = "The Enforcer"
USER_PROMPT = "\nYou: "
EXIT_WORDS = {"/quit", "/exit"}


class ChatCli:
    def __init__(
        self,
        session: ChatSession,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.session = session
        self._input = input_fn
        self._output = output_fn

    def run(self) -> None:
        self._output("Enforcer AI - Nepali Personality v2.0")
        self._output("System Ready." if self.session.has_api_key else "System Ready. API Key Required in Settings (/key <value>)")
        while True:
            try:
                line = self._input(USER_PROMPT)
            except (EOFError, KeyboardInterrupt):
                self._output("Goodbye!")
                return
            if line.strip().lower() in EXIT_WORDS:
                self._output("Goodbye!")
                return
            if line.strip().startswith("/"):
                self.handle_command(line.strip())
                continue
            self.handle_message(line)

    def handle_message(self, text: str) -> None:
        if not text.strip():
            return
        self._output("Analysing...")
        reply = self.session.send(text)
        if reply is not None:
            self._output(f"\n{ASSISTANT_LABEL}: {reply.content}")
        elif self.session.error:
            self._output(f"Error: {self.session.error}")
            if self.session.settings_requested:
                self.session.settings_requested = False
                self.show_settings()

    def handle_command(self, line: str) -> None:
        name, _, arg = line.partition(" ")
        name = name.lower()
        arg = arg.strip()
        try:
            if name == "/key":
                if not arg:
                    self._output("Usage: /key <value> | /key clear")
                elif arg.lower() == "clear":
                    self.session.clear_api_key()
                    self._output("API key cleared.")
                else:
                    self.session.set_api_key(arg)
                    self._output("API key saved locally.")
            elif name == "/model":
                if arg:
                    self.session.set_model(arg)
                    self._output(f"Engine: {self.session.config.model}")
                else:
                    for m in MODEL_CHOICES:
                        marker = "*" if m == self.session.config.model else " "
                        self._output(f" {marker} {m}")
            elif name == "/tokens":
                self.session.set_max_tokens(_parse_number(arg, int))
                self._output(f"Tokens: {self.session.config.max_tokens}")
            elif name == "/temp":
                self.session.set_temperature(_parse_number(arg, float))
                self._output(f"Temp: {self.session.config.temperature}")
            elif name == "/settings":
                self.show_settings()
            elif name == "/help":
                self._output(__doc__.split("\n\n", 1)[1].rstrip())
            else:
                self._output(f"Unknown command {name}, try /help")
        except BusinessError as e:
            self._output(f"Error: {e.message}")

    def show_settings(self) -> None:
        cfg = self.session.config
        key_state = "set" if self.session.has_api_key else "missing"
        self._output(f"Gemini API Key: {key_state}")
        self._output(f"Engine: {cfg.model}")
        self._output(f"Tokens: {cfg.max_tokens}")
        self._output(f"Temp: {cfg.temperature}")


def _parse_number(raw: str, kind):
    try:
        return kind(raw)
    except ValueError:
        raise BusinessError(code="INVALID_CONFIG", message=f"{raw!r} is not a valid number")


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Terminal chat with the Enforcer (Gemini)")
    parser.add_argument("--model", choices=MODEL_CHOICES, help="Gemini model to use")
    parser.add_argument("--max-tokens", type=int, help="Max output tokens (50-500)")
    parser.add_argument("--temperature", type=float, help="Temperature (0.0-1.0)")
    args = parser.parse_args(argv)

    session = get_default_session()
    try:
        if args.model:
            session.set_model(args.model)
        if args.max_tokens is not None:
            session.set_max_tokens(args.max_tokens)
        if args.temperature is not None:
            session.set_temperature(args.temperature)
    except BusinessError as e:
        parser.error(e.message)
    ChatCli(session).run()


if __name__ == "__main__":
    main()
