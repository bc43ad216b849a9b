from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Tuple


class NodeType(Enum):
    QUESTION = "question"
    IDEA = "idea"
    PRO = "pro"
    CON = "con"

    @property
    def marker(self) -> str:
        return _MARKERS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_MARKERS = {
    NodeType.QUESTION: "?",
    NodeType.IDEA: "!",
    NodeType.PRO: "+",
    NodeType.CON: "-",
}


COMPATIBILITY: Mapping[NodeType, frozenset[NodeType]] = MappingProxyType(
    {
        NodeType.QUESTION: frozenset({NodeType.QUESTION, NodeType.IDEA}),
        NodeType.IDEA: frozenset({NodeType.QUESTION, NodeType.PRO, NodeType.CON}),
        NodeType.PRO: frozenset({NodeType.QUESTION}),
        NodeType.CON: frozenset({NodeType.QUESTION}),
    }
)


def allowed_children(parent_type: NodeType) -> frozenset[NodeType]:
    return COMPATIBILITY[parent_type]


def is_attachable(parent_type: NodeType, child_type: NodeType) -> bool:
    """Return True when ``child_type`` may hang directly under ``parent_type``."""
    return child_type in COMPATIBILITY[parent_type]


@dataclass(frozen=True)
class NodeAnnotation:
    node_type: NodeType
    title: str
    is_selected: bool = False

    def selected(self) -> "NodeAnnotation":
        return replace(self, is_selected=True)

    def deselected(self) -> "NodeAnnotation":
        return replace(self, is_selected=False)


@dataclass(frozen=True)
class DialogueNode:
    annotation: NodeAnnotation
    children: Tuple["DialogueNode", ...] = field(default_factory=tuple)

    @property
    def node_type(self) -> NodeType:
        return self.annotation.node_type

    @property
    def title(self) -> str:
        return self.annotation.title

    def with_annotation(self, annotation: NodeAnnotation) -> "DialogueNode":
        return replace(self, annotation=annotation)

    def with_child(self, child: "DialogueNode") -> "DialogueNode":
        return replace(self, children=self.children + (child,))

    def walk(self) -> Iterator["DialogueNode"]:
        """Yield this node and all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def selected_nodes(self) -> list["DialogueNode"]:
        return [node for node in self.walk() if node.annotation.is_selected]
