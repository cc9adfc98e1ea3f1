"""In-memory, append-only conversation log."""

from shared.models import Message


class ConversationLog:
    """Ordered list of exchanged messages.

    Entries are immutable; the only writes are ``append`` and ``clear``.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def append(self, message: Message) -> None:
        self._messages.append(message)

    def clear(self) -> None:
        self._messages = []

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self.messages)
