"""Interpolator — piecewise mapping from a frame number to a value.

A breakpoint set pairs strictly increasing inputs with outputs. Within a
segment, progress is normalized to [0, 1], optionally eased, and used to
blend the two neighbouring outputs. Outside the breakpoint domain the
extrapolation policy decides:

  - clamp: hold the first/last output.
  - extend: continue the first/last segment's slope (linear, no easing).
  - identity: return the input frame unchanged.

Left and right policies are independent. The default on both sides is
"extend".
"""

import bisect
import math
from typing import Sequence

from .common import to_rgb
from .easing import EasingFunction
from .errors import ConfigurationError


VALID_EXTRAPOLATIONS = {"clamp", "extend", "identity"}


def _check_finite(value, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        try:
            value = float(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{what} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise ConfigurationError(f"{what} must be finite, got {value!r}")
    return value


def validate_breakpoints(inputs: Sequence[float], outputs: Sequence) -> list[float]:
    """Check the breakpoint invariants.

    Returns:
        The inputs as numbers (numeric strings are converted).

    Raises:
        ConfigurationError: Non-sequence arguments, length mismatch, fewer
            than 2 points, non-finite inputs, or inputs not strictly
            increasing.
    """
    for name, seq in (("inputs", inputs), ("outputs", outputs)):
        if isinstance(seq, (str, bytes)) or not hasattr(seq, "__len__"):
            raise ConfigurationError(f"{name} must be a sequence, got {seq!r}")
    if len(inputs) != len(outputs):
        raise ConfigurationError(
            f"inputs and outputs must have the same length, "
            f"got {len(inputs)} and {len(outputs)}"
        )
    if len(inputs) < 2:
        raise ConfigurationError(
            f"at least 2 breakpoints are required, got {len(inputs)}"
        )
    xs = [_check_finite(x, f"inputs[{i}]") for i, x in enumerate(inputs)]
    for i in range(1, len(xs)):
        if not xs[i] > xs[i - 1]:
            raise ConfigurationError(
                f"inputs must be strictly increasing, got {list(inputs)!r}"
            )
    return xs


def _resolve_policy(name: str | None, fallback: str, side: str) -> str:
    policy = fallback if name is None else name
    if policy not in VALID_EXTRAPOLATIONS:
        raise ConfigurationError(
            f"invalid {side} extrapolation '{policy}'. "
            f"Valid: {sorted(VALID_EXTRAPOLATIONS)}"
        )
    return policy


def _blend(y0: float, y1: float, t: float) -> float:
    # Written as a weighted sum so t = 0 and t = 1 land exactly on y0 / y1.
    return y0 * (1 - t) + y1 * t


def interpolate(
    frame: float,
    inputs: Sequence[float],
    outputs: Sequence[float],
    extrapolate: str = "extend",
    *,
    extrapolate_left: str | None = None,
    extrapolate_right: str | None = None,
    easing: EasingFunction | None = None,
) -> float:
    """Map frame through the breakpoint set (inputs -> outputs).

    Args:
        frame: The value to map, usually a (node-local) frame number.
        inputs: Strictly increasing breakpoint inputs, at least 2.
        outputs: Breakpoint outputs, same length as inputs.
        extrapolate: Policy for both sides: "clamp", "extend" or "identity".
        extrapolate_left: Override for frames below inputs[0].
        extrapolate_right: Override for frames above inputs[-1].
        easing: Optional curve applied to in-segment progress.

    Returns:
        The interpolated value. A frame exactly on a breakpoint returns
        that breakpoint's output exactly.

    Raises:
        ConfigurationError: Malformed breakpoints or unknown policy.
    """
    inputs = validate_breakpoints(inputs, outputs)
    outputs = [_check_finite(y, f"outputs[{i}]") for i, y in enumerate(outputs)]
    frame = _check_finite(frame, "frame")
    left = _resolve_policy(extrapolate_left, extrapolate, "left")
    right = _resolve_policy(extrapolate_right, extrapolate, "right")

    first, last = inputs[0], inputs[-1]

    if frame < first:
        if left == "clamp":
            return outputs[0]
        if left == "identity":
            return frame
        slope = (outputs[1] - outputs[0]) / (inputs[1] - inputs[0])
        return outputs[0] + (frame - first) * slope

    if frame > last:
        if right == "clamp":
            return outputs[-1]
        if right == "identity":
            return frame
        slope = (outputs[-1] - outputs[-2]) / (inputs[-1] - inputs[-2])
        return outputs[-1] + (frame - last) * slope

    # bisect_left puts a frame equal to inputs[k] at index k, so the
    # segment is (k-1, k): the frame sits on the segment's right edge.
    k = bisect.bisect_left(inputs, frame)
    if k < len(inputs) and inputs[k] == frame:
        return outputs[k]
    i = k - 1

    x0, x1 = inputs[i], inputs[i + 1]
    t = (frame - x0) / (x1 - x0)
    if easing is not None:
        t = easing(t)
    return _blend(outputs[i], outputs[i + 1], t)


def interpolate_colors(
    frame: float,
    inputs: Sequence[float],
    colors: Sequence,
    easing: EasingFunction | None = None,
) -> tuple[int, int, int]:
    """Interpolate RGB colors channel-wise, clamped on both sides.

    Colors may be '#RRGGBB' strings or RGB sequences. Returns an RGB tuple
    of ints (rounded).
    """
    inputs = validate_breakpoints(inputs, colors)
    rgb = [to_rgb(c) for c in colors]
    result = []
    for channel in range(3):
        value = interpolate(
            frame, inputs, [c[channel] for c in rgb],
            extrapolate="clamp", easing=easing,
        )
        result.append(int(round(min(255.0, max(0.0, value)))))
    return tuple(result)
