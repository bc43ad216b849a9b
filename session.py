"""Session state machine for the argument map.

``reduce`` is a pure function from (state, event) to a ``Transition`` that
carries the next state plus effects for the UI runtime. ``DialogueSession``
holds the single live state and records rejected attachments in the event
log.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from event_log import log_event
from focus import Direction, Focus, ForbiddenAttachment, attach_child, create_root, move
from keymap import CharacterKey, Confirm, map_key
from node_models import NodeAnnotation, NodeType

TOPIC_INPUT_ID = "topic-input"
STATEMENT_INPUT_ID = "statement-input"
DIALOGUE_VIEW_ID = "dialogue-view"


# States


@dataclass(frozen=True)
class ChoosingTopic:
    topic: str = ""


@dataclass(frozen=True)
class BrowsingDialogue:
    focus: Focus


@dataclass(frozen=True)
class Editing:
    focus: Focus
    pending_type: NodeType
    statement: str = ""


AppState = Union[ChoosingTopic, BrowsingDialogue, Editing]


# Input events


@dataclass(frozen=True)
class KeyPressed:
    key: str


@dataclass(frozen=True)
class EditTopicText:
    text: str


@dataclass(frozen=True)
class EditStatementText:
    text: str


InputEvent = Union[KeyPressed, EditTopicText, EditStatementText]


# Commands derived from character keys while browsing


@dataclass(frozen=True)
class Move:
    direction: Direction


@dataclass(frozen=True)
class BeginNewNode:
    node_type: NodeType


BROWSE_COMMANDS: dict[str, Union[Move, BeginNewNode]] = {
    "?": BeginNewNode(NodeType.QUESTION),
    "!": BeginNewNode(NodeType.IDEA),
    "+": BeginNewNode(NodeType.PRO),
    "-": BeginNewNode(NodeType.CON),
    "j": Move(Direction.NEXT),
    "k": Move(Direction.PREVIOUS),
    "h": Move(Direction.LEAVE_LEVEL),
    "l": Move(Direction.ENTER_LEVEL),
}


# Effects


@dataclass(frozen=True)
class FocusRequest:
    element_id: str


@dataclass(frozen=True)
class Notice:
    message: str


Effect = Union[FocusRequest, Notice]


@dataclass(frozen=True)
class Transition:
    state: AppState
    effects: tuple[Effect, ...] = ()


def initial_transition(topic: str = "") -> Transition:
    return Transition(ChoosingTopic(topic), (FocusRequest(TOPIC_INPUT_ID),))


def _browse(focus: Focus) -> Transition:
    return Transition(BrowsingDialogue(focus), (FocusRequest(DIALOGUE_VIEW_ID),))


def _reduce_choosing(state: ChoosingTopic, event: InputEvent) -> Transition:
    if isinstance(event, EditTopicText):
        return Transition(replace(state, topic=event.text))
    if isinstance(event, KeyPressed) and isinstance(map_key(event.key), Confirm):
        return _browse(create_root(state.topic))
    return Transition(state)


def _reduce_browsing(state: BrowsingDialogue, event: InputEvent) -> Transition:
    if not isinstance(event, KeyPressed):
        return Transition(state)
    command = map_key(event.key)
    if not isinstance(command, CharacterKey):
        return Transition(state)
    action = BROWSE_COMMANDS.get(command.character)
    if isinstance(action, Move):
        return Transition(BrowsingDialogue(move(state.focus, action.direction)))
    if isinstance(action, BeginNewNode):
        editing = Editing(focus=state.focus, pending_type=action.node_type)
        return Transition(editing, (FocusRequest(STATEMENT_INPUT_ID),))
    return Transition(state)


def _reduce_editing(state: Editing, event: InputEvent) -> Transition:
    if isinstance(event, EditStatementText):
        return Transition(replace(state, statement=event.text))
    if not isinstance(event, KeyPressed) or not isinstance(map_key(event.key), Confirm):
        return Transition(state)
    title = state.statement.strip()
    if not title:
        return _browse(state.focus)
    try:
        attached = attach_child(state.focus, NodeAnnotation(state.pending_type, title))
    except ForbiddenAttachment as exc:
        return Transition(state, (Notice(str(exc)),))
    return _browse(attached)


def reduce(state: AppState, event: InputEvent) -> Transition:
    if isinstance(state, ChoosingTopic):
        return _reduce_choosing(state, event)
    if isinstance(state, BrowsingDialogue):
        return _reduce_browsing(state, event)
    if isinstance(state, Editing):
        return _reduce_editing(state, event)
    raise TypeError(f"Unknown application state: {state!r}")


@dataclass
class DialogueSession:
    state: AppState = field(default_factory=ChoosingTopic)

    def dispatch(self, event: InputEvent) -> Transition:
        transition = reduce(self.state, event)
        for effect in transition.effects:
            if isinstance(effect, Notice):
                log_event("REJECT", type(self.state).__name__, effect.message)
        self.state = transition.state
        return transition
