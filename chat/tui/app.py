"""Textual TUI for the webhook chat assistant.

Provides a chat panel that renders replies as Markdown, a settings panel for
the webhook URL (test / save), and toasts for failures.
"""

from rich.markdown import Markdown
from rich.text import Text
from textual import work, on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.widgets import (
    Header,
    Footer,
    Input,
    Button,
    Static,
    Label,
    RichLog,
)

from chat.service import ChatSession, InvalidEndpointError, validate_endpoint_url
from shared.errors import describe_failure
from shared.models import ErrorKind, Failure, Outcome, ProbeResult
from shared.models import Message as ChatMessage


# ═══════════════════════════════════════════════════════
#  Custom Messages
# ═══════════════════════════════════════════════════════


class ReplyReady(Message):
    """The in-flight send resolved (successfully or not)."""

    def __init__(self, reply: ChatMessage, outcome: Outcome) -> None:
        super().__init__()
        self.reply = reply
        self.outcome = outcome


class ProbeFinished(Message):
    """A connection probe resolved."""

    def __init__(self, result: ProbeResult, saved: bool = False) -> None:
        super().__init__()
        self.result = result
        self.saved = saved


# ═══════════════════════════════════════════════════════
#  TUI Application
# ═══════════════════════════════════════════════════════


class ChatTuiApp(App):
    """Textual TUI for chatting with a webhook-backed agent."""

    CSS_PATH = "styles.tcss"
    TITLE = "Webhook Chat Assistant"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+l", "clear_chat", "Clear chat"),
        Binding("ctrl+p", "command_palette", "Palette"),
    ]

    def __init__(self, session: ChatSession) -> None:
        super().__init__()
        self._session = session
        self._is_sending = False
        self._is_testing = False

    # ── Layout ───────────────────────────────────────

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-body"):
            with VerticalScroll(id="chat-panel"):
                yield RichLog(id="chat-log", auto_scroll=True, markup=False, wrap=True)
                yield Static("Assistant is typing...", id="busy-indicator")
            with Vertical(id="settings-panel"):
                yield Label("Webhook URL")
                yield Input(
                    id="endpoint-url",
                    placeholder="https://...",
                    value=self._session.endpoint_url,
                )
                with Horizontal(id="settings-buttons"):
                    yield Button("Test Connection", id="test-btn", variant="default")
                    yield Button("Save", id="save-btn", variant="primary")
                yield Static("", id="settings-status")
        with Horizontal(id="input-bar"):
            yield Input(id="user-input", placeholder="Type your message here...")
            yield Button("Send", id="send-btn", variant="primary")
        yield Footer()

    # ── Lifecycle ────────────────────────────────────

    def on_mount(self) -> None:
        self.query_one("#busy-indicator", Static).display = False
        if len(self._session.log):
            self._reload_chat_from_log()
        else:
            self._write_welcome()
        self.query_one("#user-input", Input).focus()

    def _write_welcome(self) -> None:
        chat_log = self.query_one("#chat-log", RichLog)
        chat_log.write(Text("Welcome to the Chat Assistant", style="bold"))
        chat_log.write(
            Text("Ask me anything and I'll do my best to assist you.", style="dim")
        )
        chat_log.write(Text(f"Webhook: {self._session.endpoint_url}", style="dim"))
        chat_log.write("")

    # ── Input handling ───────────────────────────────

    @on(Input.Submitted, "#user-input")
    def on_user_input_submitted(self, event: Input.Submitted) -> None:
        if not event.value.strip() or self._is_sending:
            return
        user_text = event.value.strip()
        event.input.clear()
        self._handle_input(user_text)

    @on(Button.Pressed, "#send-btn")
    def on_send_pressed(self, event: Button.Pressed) -> None:
        inp = self.query_one("#user-input", Input)
        if not inp.value.strip() or self._is_sending:
            return
        user_text = inp.value.strip()
        inp.clear()
        self._handle_input(user_text)

    def _handle_input(self, user_text: str) -> None:
        self._write_message(ChatMessage(role="user", content=user_text))

        self._set_sending(True)
        self.send_message(user_text)

    def _set_sending(self, sending: bool) -> None:
        self._is_sending = sending
        self.query_one("#user-input", Input).disabled = sending
        self.query_one("#send-btn", Button).disabled = sending
        self.query_one("#busy-indicator", Static).display = sending
        if not sending:
            self.query_one("#user-input", Input).focus()

    @work(exclusive=True, group="chat")
    async def send_message(self, user_text: str) -> None:
        """Dispatch the message through the session and post the reply."""
        try:
            reply, outcome = await self._session.send(user_text)
        except Exception as e:
            outcome = Failure(kind=ErrorKind.UNKNOWN, detail=str(e))
            reply = ChatMessage(role="assistant", content=describe_failure(outcome))
        self.post_message(ReplyReady(reply=reply, outcome=outcome))

    def on_reply_ready(self, event: ReplyReady) -> None:
        self._write_message(event.reply)
        if not event.outcome.ok:
            self.notify(
                "Failed to get a response. Please check your webhook URL or try again later.",
                title=event.outcome.kind.value.replace("_", " ").title(),
                severity="error",
            )
        self._set_sending(False)

    # ── Settings ─────────────────────────────────────

    @on(Button.Pressed, "#test-btn")
    def on_test_pressed(self, event: Button.Pressed) -> None:
        if self._is_testing:
            return
        url = self.query_one("#endpoint-url", Input).value
        try:
            url = validate_endpoint_url(url)
        except InvalidEndpointError as e:
            self.notify(str(e), severity="error")
            return
        self._set_testing(True)
        self.run_probe(url)

    @work(exclusive=True, group="probe")
    async def run_probe(self, url: str) -> None:
        """Probe a candidate URL without saving it."""
        try:
            result = await self._session.test_endpoint(url)
        except Exception as e:
            result = ProbeResult(ok=False, message=f"Connection failed: {e}")
        self.post_message(ProbeFinished(result=result))

    @on(Button.Pressed, "#save-btn")
    def on_save_pressed(self, event: Button.Pressed) -> None:
        url = self.query_one("#endpoint-url", Input).value
        try:
            task = self._session.save_endpoint(url)
        except InvalidEndpointError as e:
            self.notify(str(e), severity="error")
            return
        self.notify("Webhook URL updated successfully")
        self.query_one("#settings-status", Static).update(
            Text("Saved. Checking connection...", style="dim")
        )
        if task is not None:
            self.await_background_probe(task)

    @work(exclusive=False, group="background-probe")
    async def await_background_probe(self, task) -> None:
        """Report the post-save probe; a probe that blew up reports nothing."""
        result = await task
        if result is not None:
            self.post_message(ProbeFinished(result=result, saved=True))

    def on_probe_finished(self, event: ProbeFinished) -> None:
        result = event.result
        style = "green" if result.ok else "red"
        self.query_one("#settings-status", Static).update(Text(result.message, style=style))
        self.notify(result.message, severity="information" if result.ok else "warning")
        if not event.saved:
            self._set_testing(False)

    def _set_testing(self, testing: bool) -> None:
        self._is_testing = testing
        btn = self.query_one("#test-btn", Button)
        btn.disabled = testing
        btn.label = "Testing..." if testing else "Test Connection"

    # ── Rendering ────────────────────────────────────

    def _write_message(self, message: ChatMessage) -> None:
        chat_log = self.query_one("#chat-log", RichLog)
        stamp = message.timestamp.astimezone().strftime("%H:%M")
        if message.role == "user":
            chat_log.write(Text(f"You ({stamp}): {message.content}", style="bold cyan"))
        else:
            chat_log.write(Text(f"Assistant ({stamp}):", style="bold green"))
            chat_log.write(Markdown(message.content))
        chat_log.write("")

    def _reload_chat_from_log(self) -> None:
        """Reload the chat panel from the conversation log."""
        chat_log = self.query_one("#chat-log", RichLog)
        chat_log.clear()
        for message in self._session.log:
            self._write_message(message)

    # ── Actions ──────────────────────────────────────

    def action_clear_chat(self) -> None:
        """Clear the conversation (not while a message is in flight)."""
        if self._is_sending:
            return
        self._session.clear()
        self.query_one("#chat-log", RichLog).clear()
        self._write_welcome()
        self.notify("Chat cleared")
