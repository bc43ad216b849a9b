from focus import Direction, Focus, attach_child, create_root, move
from node_models import DialogueNode, NodeAnnotation, NodeType


def annotation(node_type: NodeType, title: str) -> NodeAnnotation:
    return NodeAnnotation(node_type, title)


def sample_focus() -> Focus:
    """Root question with two ideas; the first idea has a pro and a con."""
    focus = create_root("Should we ship?")
    focus = attach_child(focus, annotation(NodeType.IDEA, "Yes, ship now"))
    focus = attach_child(focus, annotation(NodeType.IDEA, "Wait a week"))
    focus = move(focus, Direction.ENTER_LEVEL)
    focus = attach_child(focus, annotation(NodeType.PRO, "Tests pass"))
    focus = attach_child(focus, annotation(NodeType.CON, "Docs missing"))
    return move(focus, Direction.LEAVE_LEVEL)


def titles(node: DialogueNode) -> list[str]:
    return [child.title for child in node.children]


def assert_single_selection(focus: Focus) -> None:
    selected = focus.root().selected_nodes()
    assert len(selected) == 1
    assert selected[0].annotation == focus.annotation
    assert focus.annotation.is_selected
