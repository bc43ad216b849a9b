"""Cursor over an immutable dialogue tree.

A ``Focus`` is the focused node plus the stack of frames needed to rebuild
everything above and beside it. Every operation returns a new ``Focus``;
old values stay valid and can be kept or compared by identity.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from node_models import DialogueNode, NodeAnnotation, NodeType, is_attachable


class ArgmapError(Exception):
    """Base class for argument map errors."""


class ForbiddenAttachment(ArgmapError):
    def __init__(self, parent_type: NodeType, child_type: NodeType) -> None:
        super().__init__(
            f"{child_type.label} cannot be attached under {parent_type.label}"
        )
        self.parent_type = parent_type
        self.child_type = child_type


class Direction(Enum):
    ENTER_LEVEL = "enter_level"
    LEAVE_LEVEL = "leave_level"
    NEXT = "next"
    PREVIOUS = "previous"


@dataclass(frozen=True)
class Frame:
    """One step of the path from the root down to the focused node."""

    parent: NodeAnnotation
    before: tuple[DialogueNode, ...]
    after: tuple[DialogueNode, ...]

    def rebuild(self, node: DialogueNode) -> DialogueNode:
        return DialogueNode(self.parent, self.before + (node,) + self.after)


@dataclass(frozen=True)
class Focus:
    node: DialogueNode
    path: tuple[Frame, ...] = ()

    @property
    def annotation(self) -> NodeAnnotation:
        return self.node.annotation

    @property
    def node_type(self) -> NodeType:
        return self.node.node_type

    @property
    def depth(self) -> int:
        return len(self.path)

    @property
    def is_root(self) -> bool:
        return not self.path

    def root(self) -> DialogueNode:
        node = self.node
        for frame in reversed(self.path):
            node = frame.rebuild(node)
        return node

    def with_annotation(self, annotation: NodeAnnotation) -> Focus:
        return replace(self, node=self.node.with_annotation(annotation))

    # Raw structural steps. They return None when the step is impossible and
    # never touch selection flags.

    def parent(self) -> Optional[Focus]:
        if not self.path:
            return None
        frame = self.path[-1]
        return Focus(frame.rebuild(self.node), self.path[:-1])

    def first_child(self) -> Optional[Focus]:
        children = self.node.children
        if not children:
            return None
        frame = Frame(self.node.annotation, (), children[1:])
        return Focus(children[0], self.path + (frame,))

    def next_sibling(self) -> Optional[Focus]:
        if not self.path or not self.path[-1].after:
            return None
        frame = self.path[-1]
        moved = Frame(frame.parent, frame.before + (self.node,), frame.after[1:])
        return Focus(frame.after[0], self.path[:-1] + (moved,))

    def previous_sibling(self) -> Optional[Focus]:
        if not self.path or not self.path[-1].before:
            return None
        frame = self.path[-1]
        moved = Frame(frame.parent, frame.before[:-1], (self.node,) + frame.after)
        return Focus(frame.before[-1], self.path[:-1] + (moved,))

    def step(self, direction: Direction) -> Optional[Focus]:
        if direction is Direction.ENTER_LEVEL:
            return self.first_child()
        if direction is Direction.LEAVE_LEVEL:
            return self.parent()
        if direction is Direction.NEXT:
            return self.next_sibling()
        return self.previous_sibling()


def create_root(topic: str) -> Focus:
    annotation = NodeAnnotation(NodeType.QUESTION, topic, is_selected=True)
    return Focus(DialogueNode(annotation))


def attach_child(focus: Focus, annotation: NodeAnnotation) -> Focus:
    """Append ``annotation`` as the last child of the focused node.

    Raises ``ForbiddenAttachment`` when the compatibility matrix rejects the
    pair. The returned focus stays on the parent and selection is unchanged.
    """
    if not is_attachable(focus.node_type, annotation.node_type):
        raise ForbiddenAttachment(focus.node_type, annotation.node_type)
    leaf = DialogueNode(annotation.deselected())
    return replace(focus, node=focus.node.with_child(leaf))


def move_selection(focus: Focus, direction: Direction) -> Focus:
    """Move the cursor and the selection marker together.

    The current node is deselected before the step and the arrival node is
    selected after it. When the step is impossible the original ``focus`` is
    returned unchanged.
    """
    detached = focus.with_annotation(focus.annotation.deselected())
    arrived = detached.step(direction)
    if arrived is None:
        return focus
    return arrived.with_annotation(arrived.annotation.selected())


move = move_selection
