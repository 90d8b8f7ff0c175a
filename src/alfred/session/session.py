"""Per-chat session state with atomic, versioned log replacement."""

from uuid import uuid4

from ..errors import ConcurrentModificationError, SessionBusyError
from ..llm.models import ChatMessage
from .models import ConversationEntry, UITurn


class ChatSession:
    """Owns the two conversation logs of one chat.

    Every write replaces a whole log. Model-state writes are a
    compare-and-swap on `version`, and only one turn may be in flight
    at a time.
    """

    def __init__(
        self,
        session_id: str | None = None,
        history: tuple[ConversationEntry, ...] = (),
    ):
        self.session_id = session_id or str(uuid4())
        self._model_state: tuple[ConversationEntry, ...] = tuple(history)
        self._ui_state: tuple[UITurn, ...] = ()
        self._version = 0
        self._busy = False

    @property
    def model_state(self) -> tuple[ConversationEntry, ...]:
        return self._model_state

    @property
    def ui_state(self) -> tuple[UITurn, ...]:
        return self._ui_state

    @property
    def version(self) -> int:
        return self._version

    @property
    def busy(self) -> bool:
        return self._busy

    def replace_model_state(
        self,
        expected_version: int,
        entries: tuple[ConversationEntry, ...],
    ) -> int:
        """Swap in a new model-state if nobody replaced it since it was read.

        Returns:
            The new version

        Raises:
            ConcurrentModificationError: If `expected_version` is stale
        """
        if expected_version != self._version:
            raise ConcurrentModificationError(expected_version, self._version)
        self._model_state = tuple(entries)
        self._version += 1
        return self._version

    def append_entry(self, entry: ConversationEntry) -> int:
        """Copy-append one entry to model-state."""
        return self.replace_model_state(self._version, (*self._model_state, entry))

    def append_turn(self, turn: UITurn) -> None:
        self._ui_state = (*self._ui_state, turn)

    def begin_turn(self) -> None:
        """Mark a turn as in flight.

        Raises:
            SessionBusyError: If the previous turn has not finished
        """
        if self._busy:
            raise SessionBusyError(
                "A reply is still being produced; wait for it before sending another message"
            )
        self._busy = True

    def end_turn(self) -> None:
        self._busy = False

    def to_chat_messages(self) -> list[ChatMessage]:
        """Model-state projected for the completion request (ids stripped)."""
        return [entry.to_chat_message() for entry in self._model_state]

    def clear(self) -> None:
        """Start over with empty logs."""
        if self._busy:
            raise SessionBusyError("Cannot clear a session while a turn is in flight")
        self.replace_model_state(self._version, ())
        self._ui_state = ()
