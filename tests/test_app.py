import io

import pytest
from rich.console import Console
from textual import events

from app import DialogueApp, allowed_hint, browse_status, raw_key_identifier, render_dialogue
from focus import Direction, move
from event_log import read_events
from node_models import NodeAnnotation, NodeType
from session import BrowsingDialogue, ChoosingTopic, Editing
from tests.helpers import sample_focus, titles

SETTLE = 0.1


def render_text(renderable) -> str:
    console = Console(file=io.StringIO(), width=80, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


@pytest.mark.parametrize(
    "key, character, expected",
    [
        ("enter", "\r", "Enter"),
        ("exclamation_mark", "!", "!"),
        ("J", "J", "J"),
        ("up", None, "up"),
        ("ctrl+enter", None, "ctrl+enter"),
    ],
)
def test_raw_key_identifier(key, character, expected) -> None:
    assert raw_key_identifier(events.Key(key, character)) == expected


def test_render_dialogue_outline() -> None:
    output = render_text(render_dialogue(sample_focus().root()))

    for line in ["? Should we ship?", "! Yes, ship now", "+ Tests pass", "- Docs missing", "! Wait a week"]:
        assert line in output


def test_render_dialogue_previews_pending_child() -> None:
    pending = NodeAnnotation(NodeType.QUESTION, "Why now")

    output = render_text(render_dialogue(sample_focus().root(), pending))

    assert "? Why now" in output


def test_browse_status_shows_level() -> None:
    focus = move(sample_focus(), Direction.ENTER_LEVEL)

    assert browse_status(focus).startswith("Level 1 · ")
    assert browse_status(sample_focus()).startswith("Level 0 · ")


def test_allowed_hint_lists_attachable_types() -> None:
    idea = move(sample_focus(), Direction.ENTER_LEVEL)

    assert allowed_hint(sample_focus()) == "Question takes: Question, Idea"
    assert allowed_hint(idea) == "Idea takes: Question, Pro, Con"


@pytest.mark.asyncio
async def test_app_builds_map_from_keys() -> None:
    app = DialogueApp()
    async with app.run_test() as pilot:
        await pilot.pause(SETTLE)
        assert isinstance(app.state, ChoosingTopic)

        await pilot.press(*"ship")
        await pilot.press("enter")
        await pilot.pause(SETTLE)
        assert isinstance(app.state, BrowsingDialogue)
        assert app.state.focus.annotation.title == "ship"

        await pilot.press("!")
        await pilot.pause(SETTLE)
        assert isinstance(app.state, Editing)
        assert app.state.pending_type is NodeType.IDEA

        await pilot.press(*"go")
        await pilot.press("enter")
        await pilot.pause(SETTLE)
        assert isinstance(app.state, BrowsingDialogue)
        assert titles(app.state.focus.root()) == ["go"]

        await pilot.press("l")
        await pilot.pause(SETTLE)
        assert app.state.focus.annotation.title == "go"
        assert app.state.focus.annotation.is_selected

    statuses = [event[1] for event in read_events()]
    assert "FOCUS" in statuses


@pytest.mark.asyncio
async def test_app_prefills_topic() -> None:
    app = DialogueApp("Should we ship?")
    async with app.run_test() as pilot:
        await pilot.pause(SETTLE)
        await pilot.press("enter")
        await pilot.pause(SETTLE)
        assert isinstance(app.state, BrowsingDialogue)
        assert app.state.focus.root().title == "Should we ship?"


@pytest.mark.asyncio
async def test_app_rejects_forbidden_attachment() -> None:
    app = DialogueApp("q")
    async with app.run_test() as pilot:
        await pilot.pause(SETTLE)
        await pilot.press("enter")
        await pilot.pause(SETTLE)
        await pilot.press("+")
        await pilot.pause(SETTLE)
        await pilot.press(*"no")
        await pilot.press("enter")
        await pilot.pause(SETTLE)

        assert isinstance(app.state, Editing)
        assert app.state.statement == "no"
        assert "cannot be attached" in app.sub_title
        assert app.state.focus.node.children == ()


@pytest.mark.asyncio
async def test_missing_focus_target_is_logged_and_state_kept() -> None:
    app = DialogueApp("q")
    async with app.run_test() as pilot:
        await pilot.pause(SETTLE)
        state = app.state

        app._request_focus("missing-widget")
        await pilot.pause(SETTLE)

        assert app.state is state
        failures = [event for event in read_events() if event[1] == "FAIL"]
        assert len(failures) == 1
        assert failures[0][2] == "missing-widget"
