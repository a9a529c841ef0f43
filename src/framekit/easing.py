"""Easing curves — named progress remapping functions.

Every curve maps normalized progress t in [0, 1] to a real value. Curves
ideally satisfy f(0) = 0 and f(1) = 1 but are not required to be monotonic:
back() and elastic() overshoot before settling.

Base curves are "in" curves (slow start). The modifiers out() and in_out()
wrap any curve into its mirrored or symmetric variant:

    ease = out(cubic)           # 1 - (1 - t)^3
    ease = in_out(back(1.5))

from_name() parses the string form used by YAML manifests
("out:cubic", "in_out:back(1.5)", "bezier(0.25,0.1,0.25,1)").
"""

import math
import re
from typing import Callable

from .errors import ConfigurationError

EasingFunction = Callable[[float], float]


# ── Base curves ──────────────────────────────────────────────────


def linear(t: float) -> float:
    return t


def quad(t: float) -> float:
    return t * t


def cubic(t: float) -> float:
    return t * t * t


def poly(n: float) -> EasingFunction:
    """Power curve t**n."""
    def _poly(t: float) -> float:
        return t ** n
    return _poly


def sin(t: float) -> float:
    return 1 - math.cos(t * math.pi / 2)


def circle(t: float) -> float:
    return 1 - math.sqrt(max(0.0, 1 - t * t))


def exp(t: float) -> float:
    return 2 ** (10 * (t - 1))


def back(s: float = 1.70158) -> EasingFunction:
    """Overshoot curve: dips below 0 (as "in") or above 1 (as "out").

    Larger s means a larger overshoot. s = 0 degenerates to cubic.
    """
    def _back(t: float) -> float:
        return t * t * ((s + 1) * t - s)
    return _back


def elastic(bounciness: float = 1) -> EasingFunction:
    """Spring-like oscillation; bounciness 0 never overshoots."""
    p = bounciness * math.pi

    def _elastic(t: float) -> float:
        return 1 - math.cos(t * math.pi / 2) ** 3 * math.cos(t * p)
    return _elastic


def bounce(t: float) -> float:
    """Bouncing-ball curve (already an "out"-shaped curve)."""
    if t < 1 / 2.75:
        return 7.5625 * t * t
    if t < 2 / 2.75:
        t2 = t - 1.5 / 2.75
        return 7.5625 * t2 * t2 + 0.75
    if t < 2.5 / 2.75:
        t2 = t - 2.25 / 2.75
        return 7.5625 * t2 * t2 + 0.9375
    t2 = t - 2.625 / 2.75
    return 7.5625 * t2 * t2 + 0.984375


def bezier(x1: float, y1: float, x2: float, y2: float) -> EasingFunction:
    """CSS-style cubic-bezier curve through (0,0), (x1,y1), (x2,y2), (1,1).

    x1 and x2 must lie in [0, 1] so the curve is a function of x.
    """
    if not (0 <= x1 <= 1 and 0 <= x2 <= 1):
        raise ConfigurationError(
            f"bezier x values must be in [0, 1], got x1={x1!r}, x2={x2!r}"
        )

    def _coord(u: float, a1: float, a2: float) -> float:
        # B(u) for control points 0, a1, a2, 1.
        return 3 * (1 - u) * (1 - u) * u * a1 + 3 * (1 - u) * u * u * a2 + u * u * u

    def _slope(u: float, a1: float, a2: float) -> float:
        return (
            3 * (1 - u) * (1 - u) * a1
            + 6 * (1 - u) * u * (a2 - a1)
            + 3 * u * u * (1 - a2)
        )

    def _solve_u(x: float) -> float:
        # Newton first, bisection when the slope flattens out.
        u = x
        for _ in range(8):
            err = _coord(u, x1, x2) - x
            if abs(err) < 1e-7:
                return u
            d = _slope(u, x1, x2)
            if abs(d) < 1e-6:
                break
            u -= err / d
        lo, hi = 0.0, 1.0
        u = x
        for _ in range(50):
            cx = _coord(u, x1, x2)
            if abs(cx - x) < 1e-7:
                break
            if cx < x:
                lo = u
            else:
                hi = u
            u = (lo + hi) / 2
        return u

    def _bezier(t: float) -> float:
        if t <= 0:
            return 0.0
        if t >= 1:
            return 1.0
        if x1 == y1 and x2 == y2:
            return t
        return _coord(_solve_u(t), y1, y2)
    return _bezier


# ── Modifiers ────────────────────────────────────────────────────


def in_(easing: EasingFunction) -> EasingFunction:
    """Run the curve forwards (identity modifier)."""
    return easing


def out(easing: EasingFunction) -> EasingFunction:
    """Mirror the curve: fast start, slow end."""
    def _out(t: float) -> float:
        return 1 - easing(1 - t)
    return _out


def in_out(easing: EasingFunction) -> EasingFunction:
    """Curve forwards for the first half, mirrored for the second."""
    def _in_out(t: float) -> float:
        if t < 0.5:
            return easing(t * 2) / 2
        return 1 - easing((1 - t) * 2) / 2
    return _in_out


ease_in_cubic = cubic
ease_out_cubic = out(cubic)


# ── Name parsing ─────────────────────────────────────────────────

# Curves that are used directly, and factories that take numeric args.
CURVES = {
    "linear": linear,
    "quad": quad,
    "cubic": cubic,
    "sin": sin,
    "circle": circle,
    "exp": exp,
    "bounce": bounce,
}

FACTORIES = {
    "poly": poly,
    "back": back,
    "elastic": elastic,
    "bezier": bezier,
}

MODIFIERS = {"in": in_, "out": out, "in_out": in_out}

_NAME_RE = re.compile(
    r"^(?:(?P<mod>in|out|in_out):)?(?P<name>[a-z_]+)(?:\((?P<args>[^)]*)\))?$"
)


def from_name(spec: str) -> EasingFunction:
    """Build an easing function from its manifest string form.

    Grammar: [modifier ":"] name ["(" args ")"], e.g. "cubic",
    "out:cubic", "in_out:back(1.5)", "bezier(0.4, 0, 0.2, 1)".

    Raises:
        ConfigurationError: Unknown modifier/name or unparsable arguments.
    """
    m = _NAME_RE.match(spec.replace(" ", "")) if isinstance(spec, str) else None
    if m is None:
        raise ConfigurationError(f"Invalid easing: {spec!r}")

    name = m.group("name")
    raw_args = m.group("args")
    if name in CURVES:
        if raw_args:
            raise ConfigurationError(f"Easing '{name}' takes no arguments")
        base = CURVES[name]
    elif name in FACTORIES:
        try:
            args = [float(a) for a in raw_args.split(",")] if raw_args else []
        except ValueError:
            raise ConfigurationError(
                f"Easing '{name}': arguments must be numbers, got {raw_args!r}"
            ) from None
        try:
            base = FACTORIES[name](*args)
        except TypeError:
            raise ConfigurationError(
                f"Easing '{name}': wrong number of arguments ({len(args)})"
            ) from None
    else:
        raise ConfigurationError(
            f"Unknown easing '{name}'. "
            f"Valid: {sorted(set(CURVES) | set(FACTORIES))}"
        )

    mod = m.group("mod")
    if mod is None:
        return base
    return MODIFIERS[mod](base)
