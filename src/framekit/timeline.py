"""Timeline nodes — nested frame offsets and visibility windows.

A TimelineNode shifts its subtree's notion of "current frame" by
start_frame and hides the subtree outside [start_frame,
start_frame + duration_frames). Offsets compose additively down the tree:
a node at depth k with ancestor offsets o1..ok sees frame g - (o1 + ... + ok).

Nodes are frozen. A new frame changes only what is passed to evaluate()
and walk(), never the tree itself, so any number of renderers can walk the
same tree concurrently.

Leaf visual logic lives in a node's optional content callable:

    content(local_frame, composition) -> list[dict]

It receives the node-local frame explicitly; nothing reads an ambient
"current frame".
"""

from dataclasses import dataclass, field, replace
from numbers import Integral
from typing import Any, Callable, Iterator, NamedTuple

from .errors import ConfigurationError


Content = Callable[[int, Any], list]


def _is_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class TimelineNode:
    """A frame-offsetting, duration-bounded scope in a composition tree.

    Attributes:
        start_frame: Offset relative to the parent's local frame (>= 0).
        duration_frames: Visible length in frames, or None for unbounded.
        children: Child nodes, layered in order (later draws on top).
        name: Optional label for debugging and manifests.
        content: Optional leaf callable producing layer dicts.
    """

    start_frame: int = 0
    duration_frames: int | None = None
    children: tuple["TimelineNode", ...] = field(default_factory=tuple)
    name: str | None = None
    content: Content | None = field(default=None, compare=False)

    def __post_init__(self):
        label = f"Timeline node {self.name!r}" if self.name else "Timeline node"
        if not _is_int(self.start_frame) or self.start_frame < 0:
            raise ConfigurationError(
                f"{label}: start_frame must be an integer >= 0, got {self.start_frame!r}"
            )
        d = self.duration_frames
        if d is not None and (not _is_int(d) or d <= 0):
            raise ConfigurationError(
                f"{label}: duration_frames must be a positive integer or None, got {d!r}"
            )
        children = tuple(self.children)
        for i, child in enumerate(children):
            if not isinstance(child, TimelineNode):
                raise ConfigurationError(
                    f"{label}: child {i} is not a TimelineNode ({type(child).__name__})"
                )
        object.__setattr__(self, "children", children)
        if self.content is not None and not callable(self.content):
            raise ConfigurationError(f"{label}: content must be callable")

    @property
    def end_frame(self) -> int | None:
        """First frame (parent-local) after the window, or None if unbounded."""
        if self.duration_frames is None:
            return None
        return self.start_frame + self.duration_frames


class NodeState(NamedTuple):
    local_frame: int
    visible: bool


def sequence(
    *children: TimelineNode,
    start_frame: int = 0,
    duration_frames: int | None = None,
    name: str | None = None,
    content: Content | None = None,
) -> TimelineNode:
    """Convenience constructor: sequence(child_a, child_b, start_frame=30)."""
    return TimelineNode(
        start_frame=start_frame,
        duration_frames=duration_frames,
        children=children,
        name=name,
        content=content,
    )


def series(*nodes: TimelineNode, name: str | None = None) -> TimelineNode:
    """Place nodes back to back under a new unbounded parent.

    Each node starts where the previous one ended. A node's own start_frame
    is kept as an extra offset (a gap) after the previous node. Every node
    except the last must have a bounded duration.

    Raises:
        ConfigurationError: An unbounded node that is not last.
    """
    placed = []
    cursor = 0
    for i, node in enumerate(nodes):
        moved = replace(node, start_frame=cursor + node.start_frame)
        placed.append(moved)
        if moved.end_frame is None:
            if i < len(nodes) - 1:
                raise ConfigurationError(
                    f"series: node {i} ({node.name or 'unnamed'}) is unbounded "
                    f"but is followed by {len(nodes) - 1 - i} more node(s)"
                )
        else:
            cursor = moved.end_frame
    return TimelineNode(children=tuple(placed), name=name)


def evaluate(node: TimelineNode, frame: int) -> NodeState:
    """Map a parent-local frame into node's local frame and window.

    visible is True iff local_frame >= 0 and, for bounded nodes,
    local_frame < duration_frames.
    """
    if not _is_int(frame):
        raise ConfigurationError(f"frame must be an integer, got {frame!r}")
    local = frame - node.start_frame
    visible = local >= 0 and (
        node.duration_frames is None or local < node.duration_frames
    )
    return NodeState(int(local), visible)


def walk(node: TimelineNode, frame: int) -> Iterator[tuple[TimelineNode, int]]:
    """Yield (node, local_frame) for every visible node, depth-first pre-order.

    frame is in node's parent coordinates (the global frame for a root).
    Invisible subtrees are skipped entirely: their children are never
    evaluated and their content is never called.
    """
    state = evaluate(node, frame)
    if not state.visible:
        return
    yield node, state.local_frame
    for child in node.children:
        yield from walk(child, state.local_frame)


def collect_layers(node: TimelineNode, frame: int, composition: Any = None) -> list[dict]:
    """Run every visible node's content and concatenate the layer dicts.

    Order follows walk(): parents before children, siblings in order, so
    later layers draw on top.
    """
    layers = []
    for visible_node, local_frame in walk(node, frame):
        if visible_node.content is None:
            continue
        produced = visible_node.content(local_frame, composition)
        if produced:
            layers.extend(produced)
    return layers
