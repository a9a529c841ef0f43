"""Scene manifest loader — declarative compositions in YAML.

Parses YAML manifests, resolves ${var} variables, resolves palette names
and hex colors to RGB tuples, validates every composition, timeline node
and layer, and compiles animated properties into pure frame -> value
functions.

Manifest schema:
  vars:
    title: "Hello"
  colors:                       # optional named palette
    accent: "#da7756"
  compositions:
    - id: Intro
      duration: 90              # frames
      fps: 30
      width: 1280
      height: 720
      background: "#0a0a0f"     # optional, default black
      folder: Showcase          # optional grouping label
      timeline:                 # children of an unbounded root node
        - from: 0               # optional, default 0 (parent-local frames)
          duration: 60          # optional, default unbounded
          name: title
          layers:
            - type: text
              text: "${title}"
              x: 640
              y: {interpolate: {input: [0, 20], output: [400, 360],
                                easing: "out:cubic", extrapolate: clamp}}
              opacity: {spring: {damping: 12, stiffness: 100, delay: 5}}
              fill: {interpolate_colors: {input: [0, 30],
                                          output: ["#ffffff", accent]}}
          children: []

Animated properties are evaluated with the node-local frame, so the same
layer animates identically wherever its node is placed on the timeline.
"""

import math
from pathlib import Path

import yaml

from .common import resolve_color, resolve_vars, to_rgb
from .composition import Composition, CompositionRegistry
from .easing import from_name
from .errors import ConfigurationError, DuplicateIdError
from .interpolate import VALID_EXTRAPOLATIONS, interpolate, interpolate_colors, validate_breakpoints
from .raster import VALID_LAYER_TYPES
from .spring import SpringConfig, spring
from .timeline import TimelineNode


# ── Valid fields ──────────────────────────────────────────────────

REQUIRED_COMPOSITION_FIELDS = ("id", "duration", "fps", "width", "height")

REQUIRED_LAYER_FIELDS = {
    "rect": ("x", "y", "w", "h"),
    "ellipse": ("x", "y", "w", "h"),
    "text": ("x", "y", "text"),
    "line": ("x1", "y1", "x2", "y2"),
}

COLOR_FIELDS = {"fill", "outline"}

VALID_NODE_FIELDS = {"from", "duration", "name", "layers", "children"}

ANIMATION_KINDS = {"interpolate", "spring", "interpolate_colors"}

SPRING_FIELDS = {
    "mass", "stiffness", "damping", "from", "to", "duration",
    "delay", "overshoot_clamping",
}

INTERPOLATE_FIELDS = {
    "input", "output", "easing", "extrapolate",
    "extrapolate_left", "extrapolate_right",
}


# ── Manifest loading ──────────────────────────────────────────────


def load_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a scene manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Resolve ${var} variables in all string values.
      3. Parse the colors palette to RGB tuples.
      4. Validate composition fields (ids unique, sizes positive).
      5. Validate timeline nodes and layers; resolve colors to RGB.

    Args:
        manifest_path: Path to the YAML manifest file.

    Returns:
        Normalized config dict: {"colors": {...}, "compositions": [...]}.
        Animated properties are left as dicts; build_compositions()
        compiles them.

    Raises:
        ConfigurationError: Missing/invalid fields or colors.
        DuplicateIdError: Two compositions share an id.
        FileNotFoundError: Missing manifest file.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ConfigurationError("Manifest: top level must be a mapping")

    variables = raw.get("vars", {}) or {}
    if not isinstance(variables, dict):
        raise ConfigurationError("Manifest: 'vars' must be a mapping")

    raw_colors = raw.get("colors", {}) or {}
    if not isinstance(raw_colors, dict):
        raise ConfigurationError("Manifest: 'colors' must be a mapping")
    colors = {}
    for key, value in raw_colors.items():
        try:
            colors[key] = to_rgb(_resolve_vars(value, variables))
        except ConfigurationError as e:
            raise ConfigurationError(f"Manifest: colors.{key}: {e}") from None

    raw_compositions = raw.get("compositions")
    if not isinstance(raw_compositions, list) or not raw_compositions:
        raise ConfigurationError("Manifest: 'compositions' must be a non-empty list")

    compositions = []
    ids_seen = {}
    for i, comp in enumerate(raw_compositions):
        if not isinstance(comp, dict):
            raise ConfigurationError(f"Composition {i}: must be a mapping")
        comp = _resolve_vars(comp, variables)
        normalized = _validate_composition(comp, i, colors)

        cid = normalized["id"]
        if cid in ids_seen:
            raise DuplicateIdError(
                f"Composition {i}: duplicate id '{cid}' "
                f"(also used by composition {ids_seen[cid]})"
            )
        ids_seen[cid] = i
        compositions.append(normalized)

    return {"colors": colors, "compositions": compositions}


def _resolve_vars(obj, variables: dict):
    """Recursively resolve ${var} in all string values."""
    if isinstance(obj, str):
        return resolve_vars(obj, variables)
    elif isinstance(obj, dict):
        return {k: _resolve_vars(v, variables) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_resolve_vars(item, variables) for item in obj]
    return obj


def _validate_composition(comp: dict, index: int, colors: dict) -> dict:
    for key in REQUIRED_COMPOSITION_FIELDS:
        if key not in comp:
            raise ConfigurationError(
                f"Composition {index}: missing required field '{key}'"
            )

    cid = comp["id"]
    if not isinstance(cid, str) or not cid.strip():
        raise ConfigurationError(f"Composition {index}: 'id' must be a non-empty string")
    prefix = f"Composition {index} ({cid})"

    for key in ("duration", "fps", "width", "height"):
        value = comp[key]
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            raise ConfigurationError(
                f"{prefix}: {key} must be a positive integer, got {value!r}"
            )

    try:
        background = resolve_color(comp.get("background", "#000000"), colors)
    except ConfigurationError as e:
        raise ConfigurationError(f"{prefix}: background: {e}") from None

    timeline = comp.get("timeline", [])
    if not isinstance(timeline, list):
        raise ConfigurationError(f"{prefix}: 'timeline' must be a list")

    return {
        "id": cid,
        "duration": comp["duration"],
        "fps": comp["fps"],
        "width": comp["width"],
        "height": comp["height"],
        "background": background,
        "folder": comp.get("folder"),
        "timeline": [
            _validate_node(node, f"{prefix}, node {j}", colors)
            for j, node in enumerate(timeline)
        ],
    }


def _validate_node(node: dict, prefix: str, colors: dict) -> dict:
    """Validate one timeline node and its subtree."""
    if not isinstance(node, dict):
        raise ConfigurationError(f"{prefix}: must be a mapping")

    unknown = set(node) - VALID_NODE_FIELDS
    if unknown:
        raise ConfigurationError(
            f"{prefix}: unknown field(s) {sorted(unknown)}. "
            f"Valid: {sorted(VALID_NODE_FIELDS)}"
        )

    start = node.get("from", 0)
    if not isinstance(start, int) or isinstance(start, bool) or start < 0:
        raise ConfigurationError(f"{prefix}: 'from' must be an integer >= 0, got {start!r}")

    duration = node.get("duration")
    if duration is not None and (
        not isinstance(duration, int) or isinstance(duration, bool) or duration <= 0
    ):
        raise ConfigurationError(
            f"{prefix}: 'duration' must be a positive integer, got {duration!r}"
        )

    layers = node.get("layers", [])
    if not isinstance(layers, list):
        raise ConfigurationError(f"{prefix}: 'layers' must be a list")
    children = node.get("children", [])
    if not isinstance(children, list):
        raise ConfigurationError(f"{prefix}: 'children' must be a list")

    return {
        "from": start,
        "duration": duration,
        "name": node.get("name"),
        "layers": [
            _validate_layer(layer, f"{prefix}, layer {k}", colors)
            for k, layer in enumerate(layers)
        ],
        "children": [
            _validate_node(child, f"{prefix}, child {k}", colors)
            for k, child in enumerate(children)
        ],
    }


def _validate_layer(layer: dict, prefix: str, colors: dict) -> dict:
    """Validate a layer: type, required fields, colors, animation specs."""
    if not isinstance(layer, dict):
        raise ConfigurationError(f"{prefix}: must be a mapping")

    kind = layer.get("type")
    if kind not in VALID_LAYER_TYPES:
        raise ConfigurationError(
            f"{prefix}: invalid type '{kind}'. Valid: {sorted(VALID_LAYER_TYPES)}"
        )
    for key in REQUIRED_LAYER_FIELDS[kind]:
        if key not in layer:
            raise ConfigurationError(f"{prefix}: missing required field '{key}'")

    normalized = {}
    for key, value in layer.items():
        field_prefix = f"{prefix}, field '{key}'"
        if isinstance(value, dict):
            if key in COLOR_FIELDS:
                value = _resolve_animated_colors(value, colors, field_prefix)
            _validate_animation(value, field_prefix, color=key in COLOR_FIELDS)
            normalized[key] = value
        elif key in COLOR_FIELDS:
            try:
                normalized[key] = resolve_color(value, colors)
            except ConfigurationError as e:
                raise ConfigurationError(f"{field_prefix}: {e}") from None
        else:
            normalized[key] = value
    return normalized


def _resolve_animated_colors(spec: dict, colors: dict, prefix: str) -> dict:
    """Replace palette names in an interpolate_colors output list."""
    params = spec.get("interpolate_colors")
    if not isinstance(params, dict) or not isinstance(params.get("output"), list):
        return spec
    try:
        output = [resolve_color(c, colors) for c in params["output"]]
    except ConfigurationError as e:
        raise ConfigurationError(f"{prefix}: {e}") from None
    return {**spec, "interpolate_colors": {**params, "output": output}}


def _validate_animation(spec: dict, prefix: str, color: bool) -> None:
    """Validate an animated property by compiling it once."""
    if len(spec) != 1 or next(iter(spec)) not in ANIMATION_KINDS:
        raise ConfigurationError(
            f"{prefix}: animated values need exactly one of {sorted(ANIMATION_KINDS)}"
        )
    kind = next(iter(spec))
    if color and kind != "interpolate_colors":
        raise ConfigurationError(f"{prefix}: colors animate with 'interpolate_colors'")
    if not color and kind == "interpolate_colors":
        raise ConfigurationError(
            f"{prefix}: 'interpolate_colors' only applies to {sorted(COLOR_FIELDS)}"
        )
    try:
        compile_animation(spec)
    except ConfigurationError as e:
        raise ConfigurationError(f"{prefix}: {e}") from None


# ── Animation compiling ───────────────────────────────────────────


def _breakpoint_lists(kind: str, params: dict) -> tuple[list, list]:
    for key in ("input", "output"):
        if key not in params:
            raise ConfigurationError(f"{kind}: 'input' and 'output' are required")
        if not isinstance(params[key], list):
            raise ConfigurationError(
                f"{kind}: '{key}' must be a list, got {params[key]!r}"
            )
    return list(params["input"]), list(params["output"])


def _compile_interpolate(params: dict):
    unknown = set(params) - INTERPOLATE_FIELDS
    if unknown:
        raise ConfigurationError(f"interpolate: unknown field(s) {sorted(unknown)}")
    inputs, outputs = _breakpoint_lists("interpolate", params)
    inputs = validate_breakpoints(inputs, outputs)
    easing = from_name(params["easing"]) if "easing" in params else None
    extrapolate = params.get("extrapolate", "extend")
    left = params.get("extrapolate_left")
    right = params.get("extrapolate_right")
    for policy in (extrapolate, left, right):
        if policy is not None and policy not in VALID_EXTRAPOLATIONS:
            raise ConfigurationError(
                f"interpolate: invalid extrapolation '{policy}'. "
                f"Valid: {sorted(VALID_EXTRAPOLATIONS)}"
            )

    def _evaluate(frame, fps):
        return interpolate(
            frame, inputs, outputs, extrapolate,
            extrapolate_left=left, extrapolate_right=right, easing=easing,
        )
    # Evaluate once so bad outputs fail at load time.
    _evaluate(inputs[0], 1)
    return _evaluate


def _compile_colors(params: dict):
    unknown = set(params) - {"input", "output", "easing"}
    if unknown:
        raise ConfigurationError(f"interpolate_colors: unknown field(s) {sorted(unknown)}")
    inputs, outputs = _breakpoint_lists("interpolate_colors", params)
    colors = [to_rgb(c) for c in outputs]
    inputs = validate_breakpoints(inputs, colors)
    easing = from_name(params["easing"]) if "easing" in params else None

    def _evaluate(frame, fps):
        return interpolate_colors(frame, inputs, colors, easing=easing)
    return _evaluate


def _compile_spring(params: dict):
    unknown = set(params) - SPRING_FIELDS
    if unknown:
        raise ConfigurationError(f"spring: unknown field(s) {sorted(unknown)}")
    kwargs = {}
    for src, dst in (
        ("mass", "mass"), ("stiffness", "stiffness"), ("damping", "damping"),
        ("from", "from_value"), ("to", "to_value"),
        ("duration", "duration_in_frames"),
        ("overshoot_clamping", "overshoot_clamping"),
    ):
        if src in params:
            kwargs[dst] = params[src]
    config = SpringConfig(**kwargs)
    delay = params.get("delay", 0)
    if (not isinstance(delay, (int, float)) or isinstance(delay, bool)
            or not math.isfinite(delay)):
        raise ConfigurationError(f"spring: delay must be a finite number, got {delay!r}")

    def _evaluate(frame, fps):
        return spring(frame, fps, config, delay=delay)
    return _evaluate


_COMPILERS = {
    "interpolate": _compile_interpolate,
    "interpolate_colors": _compile_colors,
    "spring": _compile_spring,
}


def compile_animation(spec: dict):
    """Compile {"interpolate"|"spring"|"interpolate_colors": {...}}.

    Returns:
        A pure function (frame, fps) -> value.
    """
    kind, params = next(iter(spec.items()))
    if not isinstance(params, dict):
        raise ConfigurationError(f"{kind}: parameters must be a mapping")
    return _COMPILERS[kind](params)


def _compile_layer(layer: dict):
    """Split a layer into constant fields and compiled animated fields."""
    constants = {}
    animated = {}
    for key, value in layer.items():
        if isinstance(value, dict):
            animated[key] = compile_animation(value)
        else:
            constants[key] = value

    def _evaluate(frame, fps):
        values = dict(constants)
        for key, fn in animated.items():
            values[key] = fn(frame, fps)
        return values
    return _evaluate


def _build_node(node: dict) -> TimelineNode:
    compiled = [_compile_layer(layer) for layer in node["layers"]]
    content = None
    if compiled:
        def content(frame, composition):
            return [evaluate(frame, composition.fps) for evaluate in compiled]

    return TimelineNode(
        start_frame=node["from"],
        duration_frames=node["duration"],
        children=tuple(_build_node(child) for child in node["children"]),
        name=node["name"],
        content=content,
    )


# ── Composition building ──────────────────────────────────────────


def build_compositions(config: dict) -> list[Composition]:
    """Turn a normalized manifest config into Composition objects."""
    compositions = []
    for comp in config["compositions"]:
        root = TimelineNode(
            children=tuple(_build_node(node) for node in comp["timeline"]),
            name=comp["id"],
        )
        compositions.append(Composition(
            id=comp["id"],
            duration_frames=comp["duration"],
            fps=comp["fps"],
            width=comp["width"],
            height=comp["height"],
            root=root,
            background=comp["background"],
            folder=comp["folder"],
        ))
    return compositions


def load_registry(manifest_path: str | Path) -> CompositionRegistry:
    """Load a manifest and register all of its compositions."""
    config = load_manifest(manifest_path)
    return CompositionRegistry(build_compositions(config))
