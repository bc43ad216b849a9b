from __future__ import annotations

import sys
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Footer, Header, Input, Static
from rich.text import Text
from rich.tree import Tree as RichTree

from event_log import log_event, reset_event_log
from focus import Focus
from keymap import CONFIRM_KEY
from node_models import DialogueNode, NodeAnnotation, NodeType, allowed_children
from session import (
    DIALOGUE_VIEW_ID,
    STATEMENT_INPUT_ID,
    TOPIC_INPUT_ID,
    AppState,
    BrowsingDialogue,
    ChoosingTopic,
    DialogueSession,
    EditStatementText,
    EditTopicText,
    Editing,
    FocusRequest,
    InputEvent,
    KeyPressed,
    Notice,
    Transition,
    initial_transition,
)

_TYPE_STYLES = {
    NodeType.QUESTION: "bold cyan",
    NodeType.IDEA: "bold yellow",
    NodeType.PRO: "bold green",
    NodeType.CON: "bold red",
}

BROWSE_HELP = "j/k siblings · h/l levels · ? question · ! idea · + pro · - con"


def _key_name_and_modifiers(key_value: str) -> tuple[str, set[str]]:
    parts = key_value.split("+")
    key_name = parts[-1].lower()
    modifiers = {part.lower() for part in parts[:-1] if part}
    return key_name, modifiers


def raw_key_identifier(event: events.Key) -> str:
    """Translate a Textual key event into the identifier the key mapper expects."""
    key_name, modifiers = _key_name_and_modifiers(event.key or "")
    if key_name == "enter" and not modifiers:
        return CONFIRM_KEY
    if event.is_printable and event.character:
        return event.character
    return event.key


def browse_status(focus: Focus) -> str:
    return f"Level {focus.depth} · {BROWSE_HELP}"


def allowed_hint(focus: Focus) -> str:
    """Name the node types that may be attached under the focused node."""
    allowed = allowed_children(focus.node_type)
    names = ", ".join(t.label for t in NodeType if t in allowed)
    return f"{focus.node_type.label} takes: {names}"


def node_label(annotation: NodeAnnotation) -> Text:
    label = Text()
    label.append(f"{annotation.node_type.marker} ", style=_TYPE_STYLES[annotation.node_type])
    label.append(annotation.title or "(untitled)")
    if annotation.is_selected:
        label.stylize("reverse")
    return label


def render_dialogue(root: DialogueNode, pending: Optional[NodeAnnotation] = None) -> RichTree:
    """Build a rich tree for ``root``.

    ``pending`` is previewed as a dim last child of the selected node, which is
    always the node the session is focused on.
    """

    def add_children(branch: RichTree, node: DialogueNode) -> None:
        for child in node.children:
            add_children(branch.add(node_label(child.annotation)), child)
        if pending is not None and node.annotation.is_selected:
            preview = Text(f"{pending.node_type.marker} {pending.title}▌", style="dim italic")
            branch.add(preview)

    tree = RichTree(node_label(root.annotation), guide_style="dim")
    add_children(tree, root)
    return tree


class DialogueView(Static, can_focus=True):
    """Read-only outline of the argument map."""


class DialogueApp(App[None]):
    """Textual user interface for building an argument map."""

    TITLE = "argmap"

    CSS = """
    #dialogue-view {
        height: 1fr;
        padding: 1 2;
    }
    #dialogue-view:focus {
        background: $surface;
    }
    #topic-input, #statement-input {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, initial_topic: str | None = None) -> None:
        super().__init__()
        self.title = "argmap"
        self._initial_topic = initial_topic or ""
        self.session = DialogueSession()
        reset_event_log()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Input(placeholder="Topic question…", id=TOPIC_INPUT_ID)
        yield DialogueView(id=DIALOGUE_VIEW_ID)
        yield Input(id=STATEMENT_INPUT_ID)
        yield Footer()

    def on_mount(self) -> None:
        self.query_one(f"#{TOPIC_INPUT_ID}", Input).value = self._initial_topic
        transition = initial_transition(self._initial_topic)
        self.session.state = transition.state
        self._apply(transition, previous=None)

    @property
    def state(self) -> AppState:
        return self.session.state

    def dispatch_event(self, event: InputEvent) -> Transition:
        previous = self.session.state
        transition = self.session.dispatch(event)
        self._apply(transition, previous=previous)
        return transition

    def on_key(self, event: events.Key) -> None:
        # Text fields own their keys; Enter reaches us through Input.Submitted.
        if isinstance(self.focused, Input):
            return
        self.dispatch_event(KeyPressed(raw_key_identifier(event)))

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == TOPIC_INPUT_ID:
            self.dispatch_event(EditTopicText(event.value))
        elif event.input.id == STATEMENT_INPUT_ID:
            self.dispatch_event(EditStatementText(event.value))

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dispatch_event(KeyPressed(CONFIRM_KEY))

    def _apply(self, transition: Transition, *, previous: AppState | None) -> None:
        state = transition.state
        if state is not previous:
            self._render_state(state, previous)
        for effect in transition.effects:
            if isinstance(effect, FocusRequest):
                self.call_after_refresh(self._request_focus, effect.element_id)
            elif isinstance(effect, Notice):
                self.bell()
                self.show_status(effect.message)

    def _render_state(self, state: AppState, previous: AppState | None) -> None:
        view = self.query_one(f"#{DIALOGUE_VIEW_ID}", DialogueView)
        topic_input = self.query_one(f"#{TOPIC_INPUT_ID}", Input)
        statement_input = self.query_one(f"#{STATEMENT_INPUT_ID}", Input)
        topic_input.display = isinstance(state, ChoosingTopic)
        statement_input.display = isinstance(state, Editing)

        if isinstance(state, ChoosingTopic):
            view.update(Text("Type the question to discuss and press Enter.", style="dim"))
            self.show_status("Choose a topic")
            return

        if isinstance(state, BrowsingDialogue):
            view.update(render_dialogue(state.focus.root()))
            self.show_status(browse_status(state.focus))
            return

        if not isinstance(previous, Editing):
            statement_input.value = ""
            statement_input.placeholder = (
                f"New {state.pending_type.label} under '{state.focus.annotation.title}'…"
            )
        pending = NodeAnnotation(state.pending_type, state.statement)
        view.update(render_dialogue(state.focus.root(), pending))
        self.show_status(
            f"New {state.pending_type.label.lower()}: Enter to attach, empty to cancel"
            f" · {allowed_hint(state.focus)}"
        )

    def _request_focus(self, element_id: str) -> None:
        try:
            widget = self.query_one(f"#{element_id}")
        except NoMatches as exc:
            log_event("FAIL", element_id, str(exc))
            return
        widget.focus()
        log_event("FOCUS", element_id)

    def show_status(self, message: str | None = None) -> None:
        mode = _mode_label(self.session.state)
        self.sub_title = f"{mode} · {message}" if message else mode


def _mode_label(state: AppState) -> str:
    if isinstance(state, ChoosingTopic):
        return "Topic"
    if isinstance(state, BrowsingDialogue):
        return "Browse"
    return "Edit"


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    initial_topic = " ".join(args) if args else None
    DialogueApp(initial_topic).run()


if __name__ == "__main__":
    main()
