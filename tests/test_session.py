"""Unit tests for conversation state."""
import pytest
from hypothesis import given
from hypothesis import strategies as st

from alfred.errors import ConcurrentModificationError, SessionBusyError
from alfred.session import ChatSession, ConversationEntry, UITurn
from alfred.ui import StreamableHandle

entries = st.builds(
    ConversationEntry,
    role=st.sampled_from(["user", "assistant", "system", "function"]),
    content=st.text(),
    name=st.one_of(st.none(), st.sampled_from(["getFredData", "googleCSESearch"])),
)


class TestConversationEntry:
    """Tests for the entry model and its projection."""

    def test_ids_are_generated(self):
        """Test that each new entry gets its own internal id."""
        a = ConversationEntry(role="user", content="hi")
        b = ConversationEntry(role="user", content="hi")

        assert a.id and b.id
        assert a.id != b.id

    def test_projection_strips_id(self):
        """Test that the model only sees role, content and name."""
        entry = ConversationEntry(role="function", name="getFredData", content="{}")

        assert entry.to_model_message() == {"role": "function", "name": "getFredData", "content": "{}"}

    def test_projection_omits_missing_name(self):
        """Test that name is left out rather than sent as null."""
        assert "name" not in ConversationEntry(role="user", content="hi").to_model_message()

    @given(entries)
    def test_projection_round_trip(self, entry: ConversationEntry):
        """Property test: projecting and reading back loses only the id."""
        restored = ConversationEntry.from_model_message(entry.to_model_message())

        assert restored.id is None
        assert restored.model_dump(exclude={"id"}) == entry.model_dump(exclude={"id"})

    def test_entries_are_immutable(self):
        """Test that entries cannot be edited in place."""
        entry = ConversationEntry(role="user", content="hi")

        with pytest.raises(ValueError):
            entry.content = "changed"  # type: ignore


class TestChatSession:
    """Tests for versioned log replacement and turn bookkeeping."""

    def test_append_bumps_version(self):
        """Test that every write produces a new version and a new tuple."""
        session = ChatSession()
        before = session.model_state

        version = session.append_entry(ConversationEntry(role="user", content="hi"))

        assert version == 1
        assert session.version == 1
        assert before == ()
        assert len(session.model_state) == 1

    def test_stale_write_rejected(self):
        """Test that a write based on an old version is refused."""
        session = ChatSession()
        stale = session.version
        session.append_entry(ConversationEntry(role="user", content="first"))

        with pytest.raises(ConcurrentModificationError) as exc_info:
            session.replace_model_state(stale, (ConversationEntry(role="user", content="lost"),))

        assert exc_info.value.expected_version == 0
        assert exc_info.value.actual_version == 1
        assert [e.content for e in session.model_state] == ["first"]

    @given(st.lists(entries, max_size=10))
    def test_versions_count_writes(self, items: list[ConversationEntry]):
        """Property test: the version equals the number of successful writes."""
        session = ChatSession()
        for entry in items:
            session.append_entry(entry)

        assert session.version == len(items)
        assert list(session.model_state) == items

    def test_history_seeds_model_state(self):
        """Test that a session can start from persisted history."""
        history = (ConversationEntry(role="user", content="hi"),)
        session = ChatSession(session_id="abc", history=history)

        assert session.session_id == "abc"
        assert session.model_state == history
        assert session.to_chat_messages()[0].content == "hi"

    def test_begin_turn_twice_raises(self):
        """Test that only one turn may be in flight."""
        session = ChatSession()
        session.begin_turn()

        with pytest.raises(SessionBusyError):
            session.begin_turn()

        session.end_turn()
        session.begin_turn()
        assert session.busy

    def test_clear(self):
        """Test that clear() empties both logs."""
        session = ChatSession()
        session.append_entry(ConversationEntry(role="user", content="hi"))
        session.append_turn(UITurn(id=1, display=StreamableHandle()))

        session.clear()

        assert session.model_state == ()
        assert session.ui_state == ()

    def test_clear_while_busy_raises(self):
        """Test that a session cannot be cleared under a running turn."""
        session = ChatSession()
        session.begin_turn()

        with pytest.raises(SessionBusyError):
            session.clear()
