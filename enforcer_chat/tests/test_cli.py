from enforcer_chat.api.service import ChatSession
from enforcer_chat.cli import ChatCli
from enforcer_chat.domain.models import ChatResult


class MemoryCredentialStore:
    def __init__(self, value=None):
        self.value = value

    def get(self):
        return self.value

    def set(self, value):
        self.value = value


class FakeProvider:
    name = "fake"

    def chat(self, req, api_key):
        return ChatResult(model=req.model, text=f"[{req.model}] no.")


def run_cli(lines, key=None):
    session = ChatSession(
        credential_store=MemoryCredentialStore(key),
        provider_client=FakeProvider(),
        system_instruction="be mean",
    )
    inputs = iter(lines)
    output = []

    def fake_input(prompt):
        try:
            return next(inputs)
        except StopIteration:
            raise EOFError

    ChatCli(session, input_fn=fake_input, output_fn=output.append).run()
    return session, output


def test_cli_chat_round():
    session, output = run_cli(["hello", "/quit"], key="k")
    assert "\nThe Enforcer: [gemini-2.5-flash] no." in output
    assert output[-1] == "Goodbye!"
    assert len(session.messages) == 2


def test_cli_requires_key_then_accepts_it():
    session, output = run_cli(["hello", "/key AIza-123", "hello"])
    assert "Error: Please enter your Gemini API Key in Settings first." in output
    assert "Gemini API Key: missing" in output
    assert "API key saved locally." in output
    assert session.api_key == "AIza-123"
    assert [m.role for m in session.messages] == ["user", "assistant"]


def test_cli_settings_commands():
    session, output = run_cli(["/model gemini-1.5-pro", "/tokens 300", "/temp 0.3", "/tokens 9000", "/temp warm"], key="k")
    assert session.config.model == "gemini-1.5-pro"
    assert session.config.max_tokens == 300
    assert session.config.temperature == 0.3
    assert "Error: max_tokens must be between 50 and 500" in output
    assert "Error: 'warm' is not a valid number" in output


def test_cli_unknown_model_is_reported():
    session, output = run_cli(["/model gpt-4"], key="k")
    assert session.config.model == "gemini-2.5-flash"
    assert any(line.startswith("Error: Unknown model 'gpt-4'") for line in output)


def test_cli_help_lists_commands():
    _, output = run_cli(["/help"], key="k")
    assert any("/key <value>" in line and "/quit" in line for line in output)


def test_cli_plain_goodbye_is_sent_to_the_bot():
    session, output = run_cli(["bye", "quit", "/exit"], key="k")
    assert [m.content for m in session.messages if m.role == "user"] == ["bye", "quit"]
    assert output.count("Goodbye!") == 1
    assert output[-1] == "Goodbye!"
