"""Built-in compositions.

Each scene module exposes build() -> Composition. build_registry()
registers them in manifest order, the way a renderer expects to list them.
"""

from ..composition import CompositionRegistry
from . import countdown, intro, kinetic

SCENES = (intro.build, countdown.build, kinetic.build)


def build_registry() -> CompositionRegistry:
    """Return a fresh registry holding every built-in composition."""
    return CompositionRegistry(build() for build in SCENES)
