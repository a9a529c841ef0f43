"""Compositions and the composition registry.

A Composition is a top-level named scene: fixed duration, frame rate,
canvas size and a root TimelineNode. The registry maps ids to
compositions and is the contract boundary for renderers:

    registry.resolve(id)            -> Composition
    registry.render_frame(id, n)    -> list of layer dicts for frame n

Renderers may request frames in [0, duration_frames) in any order from
any thread or process. Frames outside that range are rejected; the engine
never clamps on the caller's behalf.
"""

import threading
from dataclasses import dataclass, field
from numbers import Integral

from .common import to_rgb
from .errors import ConfigurationError, DuplicateIdError, NotFoundError, OutOfRangeError
from .timeline import TimelineNode, collect_layers


def _positive_int(value) -> bool:
    return isinstance(value, Integral) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True)
class Composition:
    """A top-level scene definition consumed by a renderer."""

    id: str
    duration_frames: int
    fps: int
    width: int
    height: int
    root: TimelineNode = field(default_factory=TimelineNode)
    background: tuple[int, int, int] = (0, 0, 0)
    folder: str | None = None

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id.strip():
            raise ConfigurationError(
                f"Composition id must be a non-empty string, got {self.id!r}"
            )
        for name in ("duration_frames", "fps", "width", "height"):
            value = getattr(self, name)
            if not _positive_int(value):
                raise ConfigurationError(
                    f"Composition '{self.id}': {name} must be a positive integer, "
                    f"got {value!r}"
                )
        if not isinstance(self.root, TimelineNode):
            raise ConfigurationError(
                f"Composition '{self.id}': root must be a TimelineNode"
            )
        object.__setattr__(self, "background", to_rgb(self.background))

    def check_frame(self, frame: int) -> None:
        """Raise OutOfRangeError unless 0 <= frame < duration_frames."""
        if not isinstance(frame, Integral) or isinstance(frame, bool):
            raise OutOfRangeError(
                f"Composition '{self.id}': frame must be an integer, got {frame!r}"
            )
        if frame < 0 or frame >= self.duration_frames:
            raise OutOfRangeError(
                f"Composition '{self.id}': frame {frame} out of range "
                f"[0, {self.duration_frames})"
            )

    def render(self, frame: int) -> list[dict]:
        """Evaluate the timeline at frame and return its layer dicts."""
        self.check_frame(frame)
        return collect_layers(self.root, int(frame), self)

    def describe(self) -> dict:
        """Manifest entry for this composition."""
        return {
            "id": self.id,
            "duration_frames": self.duration_frames,
            "fps": self.fps,
            "width": self.width,
            "height": self.height,
            "folder": self.folder,
        }


class CompositionRegistry:
    """Maps composition id -> Composition.

    Populated once at startup. register() holds a lock so concurrent
    registration of the same id cannot both succeed; reads never mutate.
    """

    def __init__(self, compositions=()):
        self._compositions: dict[str, Composition] = {}
        self._lock = threading.Lock()
        for composition in compositions:
            self.register(composition)

    def register(self, composition: Composition) -> Composition:
        """Add a composition.

        Raises:
            DuplicateIdError: A composition with the same id exists.
        """
        if not isinstance(composition, Composition):
            raise ConfigurationError(
                f"expected a Composition, got {type(composition).__name__}"
            )
        with self._lock:
            if composition.id in self._compositions:
                raise DuplicateIdError(
                    f"Composition '{composition.id}' is already registered"
                )
            self._compositions[composition.id] = composition
        return composition

    def resolve(self, composition_id: str) -> Composition:
        """Look up a composition by id.

        Raises:
            NotFoundError: No composition with that id.
        """
        try:
            return self._compositions[composition_id]
        except (KeyError, TypeError):
            raise NotFoundError(
                f"Unknown composition '{composition_id}'. "
                f"Valid: {sorted(self._compositions)}"
            ) from None

    def render_frame(self, composition_id: str, frame: int) -> list[dict]:
        """Resolve a composition and evaluate one frame of it.

        Raises:
            NotFoundError: Unknown id.
            OutOfRangeError: frame not in [0, duration_frames).
        """
        return self.resolve(composition_id).render(frame)

    def manifest(self) -> list[dict]:
        """Ordered list of {id, duration_frames, fps, width, height, folder}."""
        return [c.describe() for c in self._compositions.values()]

    def ids(self) -> list[str]:
        return list(self._compositions)

    def __contains__(self, composition_id) -> bool:
        return composition_id in self._compositions

    def __len__(self) -> int:
        return len(self._compositions)
