"""Editor session wiring: markers, persistence, chat and disposal."""
from __future__ import annotations

import httpx
import pytest

from policy_assistant.assistant import ChatSession
from policy_assistant.base.errors import AssistantError
from policy_assistant.config.defaults import DEFAULT_POLICY_DOCUMENT, STORAGE_KEY_EDITOR_CONTENT
from policy_assistant.editor import EditorSurface, PolicyEditorSession, initial_content
from policy_assistant.tests.helpers import FakeEditor, make_transport, sse_body, sse_line

SCHEMA = {"set-header": ["name", "exists-action"]}
BAD = '<policies><set-header name="a" bad="1" /></policies>'
GOOD = '<policies><set-header name="a" /></policies>'


def test_fake_editor_satisfies_protocol(fake_editor):
    assert isinstance(fake_editor, EditorSurface)  # nosec B101


def test_initial_content_prefers_saved_text(memory_store):
    assert initial_content(memory_store) == DEFAULT_POLICY_DOCUMENT  # nosec B101
    memory_store.set(STORAGE_KEY_EDITOR_CONTENT, GOOD)
    assert initial_content(memory_store) == GOOD  # nosec B101


def test_change_validates_sets_markers_and_persists(memory_store):
    editor = FakeEditor(GOOD)
    session = PolicyEditorSession(editor, memory_store, SCHEMA).attach()
    assert editor.markers == [] and not session.has_errors  # nosec B101

    flips = []
    session.on_errors_changed(flips.append)
    editor.type_text(BAD)
    assert [m.message for m in editor.markers] == ["Unknown attribute: bad"]  # nosec B101
    assert session.has_errors  # nosec B101
    assert memory_store.get(STORAGE_KEY_EDITOR_CONTENT) == BAD  # nosec B101

    editor.type_text(BAD.replace("bad", "worse"))
    editor.type_text(GOOD)
    assert editor.markers == [] and not session.has_errors  # nosec B101
    assert flips == [True, False]  # nosec B101


def test_markers_are_replaced_not_appended(memory_store):
    editor = FakeEditor(BAD)
    PolicyEditorSession(editor, memory_store, SCHEMA).attach()
    editor.type_text(BAD)
    editor.type_text(BAD)
    assert len(editor.markers) == 1  # nosec B101


def test_dispose_unsubscribes_and_ignores_later_changes(memory_store):
    editor = FakeEditor(GOOD)
    session = PolicyEditorSession(editor, memory_store, SCHEMA).attach()
    calls = editor.marker_calls
    session.dispose()
    session.dispose()
    assert editor.listener_count == 0 and session.disposed  # nosec B101
    session.handle_change()
    assert editor.marker_calls == calls  # nosec B101
    with pytest.raises(RuntimeError):
        session.attach()


def test_send_chat_uses_current_editor_text(memory_store):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.content.decode())
        return httpx.Response(200, content=sse_body("fine").encode())

    editor = FakeEditor(GOOD)
    chat = ChatSession(make_transport(handler))
    session = PolicyEditorSession(editor, memory_store, SCHEMA, chat).attach()
    result = session.send_chat("is this ok?")
    assert result.text == "fine"  # nosec B101
    assert "set-header" in seen[0]  # nosec B101
    session.propose_fix()
    assert "syntax errors" in seen[1]  # nosec B101


def test_dispose_cancels_active_turn(memory_store):
    chat = ChatSession(make_transport(lambda r: httpx.Response(200, content=iter([sse_line("a").encode(), sse_line("b").encode()]))))
    session = PolicyEditorSession(FakeEditor(GOOD), memory_store, SCHEMA, chat).attach()
    turn = chat.start_turn("q", GOOD)
    seen = []
    for event in turn:
        seen.append(event)
        if event.delta == "a":
            session.dispose()
    assert [e.delta for e in seen if not e.finish] == ["a"]  # nosec B101
    assert turn.result.finish_reason == "cancelled"  # nosec B101
    with pytest.raises(AssistantError):
        session.send_chat("again")


def test_chat_without_session_is_rejected(memory_store):
    session = PolicyEditorSession(FakeEditor(GOOD), memory_store, SCHEMA)
    with pytest.raises(AssistantError):
        session.send_chat("hi")
