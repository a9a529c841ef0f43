"""Spring solver — closed-form damped harmonic oscillator sampling.

A spring is released from rest at from_value and pulled toward to_value.
Its displacement at elapsed time t is evaluated analytically:

    x(t) = to + (from - to) * g(t)

where g is the unit step response of a mass-spring-damper, chosen by the
damping ratio zeta = damping / (2 * sqrt(stiffness * mass)):

  - underdamped (zeta < 1): exponentially decaying oscillation.
  - critically damped (zeta == 1): fastest non-oscillating approach.
  - overdamped (zeta > 1): slower non-oscillating approach.

No state is carried between frames, so frame 10_000 costs the same as
frame 1 and frames can be sampled in any order from any process.
"""

import math
from dataclasses import dataclass

from .errors import ConfigurationError


# Damping ratios within this distance of 1 use the critically damped form.
CRITICAL_TOLERANCE = 1e-6

# Normalized deviation from the target below which a spring counts as settled.
DEFAULT_REST_THRESHOLD = 0.005

# Upper bound for settle-time searches, in seconds of spring time.
_MAX_SETTLE_SECONDS = 3600.0


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class SpringConfig:
    """Physical parameters and endpoints of a spring animation.

    mass and stiffness must be > 0, damping >= 0. duration_in_frames, when
    set, stretches or compresses the spring so it settles at exactly that
    frame. overshoot_clamping stops the value from passing to_value.
    """

    mass: float = 1.0
    stiffness: float = 100.0
    damping: float = 10.0
    from_value: float = 0.0
    to_value: float = 1.0
    duration_in_frames: int | None = None
    overshoot_clamping: bool = False

    def __post_init__(self):
        for name in ("mass", "stiffness", "damping", "from_value", "to_value"):
            value = getattr(self, name)
            if not _is_number(value) or not math.isfinite(value):
                raise ConfigurationError(
                    f"spring {name} must be a finite number, got {value!r}"
                )
        if self.mass <= 0:
            raise ConfigurationError(f"spring mass must be > 0, got {self.mass!r}")
        if self.stiffness <= 0:
            raise ConfigurationError(
                f"spring stiffness must be > 0, got {self.stiffness!r}"
            )
        if self.damping < 0:
            raise ConfigurationError(
                f"spring damping must be >= 0, got {self.damping!r}"
            )
        d = self.duration_in_frames
        if d is not None and (not isinstance(d, int) or isinstance(d, bool) or d <= 0):
            raise ConfigurationError(
                f"spring duration_in_frames must be a positive integer, got {d!r}"
            )

    @property
    def angular_frequency(self) -> float:
        return math.sqrt(self.stiffness / self.mass)

    @property
    def damping_ratio(self) -> float:
        return self.damping / (2 * math.sqrt(self.stiffness * self.mass))


def _check_fps(fps) -> None:
    if not isinstance(fps, int) or isinstance(fps, bool) or fps <= 0:
        raise ConfigurationError(f"fps must be a positive integer, got {fps!r}")


def step_response(t: float, config: SpringConfig) -> float:
    """Normalized remaining displacement g(t): 1 at t=0, tending to 0."""
    if t <= 0:
        return 1.0
    omega = config.angular_frequency
    zeta = config.damping_ratio

    if abs(zeta - 1) <= CRITICAL_TOLERANCE:
        return math.exp(-omega * t) * (1 + omega * t)

    if zeta < 1:
        omega_d = omega * math.sqrt(1 - zeta * zeta)
        decay = math.exp(-zeta * omega * t)
        return decay * (
            math.cos(omega_d * t) + (zeta * omega / omega_d) * math.sin(omega_d * t)
        )

    root = math.sqrt(zeta * zeta - 1)
    r1 = -omega * (zeta - root)
    r2 = -omega * (zeta + root)
    return (r2 * math.exp(r1 * t) - r1 * math.exp(r2 * t)) / (r2 - r1)


def _deviation_bound(t: float, config: SpringConfig) -> float:
    """Monotone upper bound on |g(t')| for all t' >= t.

    The critically and overdamped responses decay monotonically, so the
    bound is the response itself. The underdamped response is bounded by
    its envelope e^(-zeta*omega*t) / sqrt(1 - zeta^2).
    """
    zeta = config.damping_ratio
    if zeta < 1 and abs(zeta - 1) > CRITICAL_TOLERANCE:
        return math.exp(-zeta * config.angular_frequency * t) / math.sqrt(1 - zeta * zeta)
    return abs(step_response(t, config))


def measure_spring(
    fps: int,
    config: SpringConfig | None = None,
    threshold: float = DEFAULT_REST_THRESHOLD,
) -> int:
    """Number of frames the spring needs to settle.

    Returns the first frame n such that the normalized deviation from the
    target stays within threshold for every frame >= n. Found by bisection
    on the closed-form envelope; nothing is stepped.

    Raises:
        ConfigurationError: Bad fps/threshold, or an undamped spring
            (damping == 0), which never settles.
    """
    _check_fps(fps)
    config = config or SpringConfig()
    if not _is_number(threshold) or not 0 < threshold < 1:
        raise ConfigurationError(f"threshold must be in (0, 1), got {threshold!r}")
    if config.damping == 0:
        raise ConfigurationError("an undamped spring (damping=0) never settles")

    hi = int(math.ceil(_MAX_SETTLE_SECONDS * fps))
    if _deviation_bound(hi / fps, config) > threshold:
        raise ConfigurationError(
            f"spring does not settle within {_MAX_SETTLE_SECONDS:.0f}s "
            f"(mass={config.mass}, stiffness={config.stiffness}, damping={config.damping})"
        )
    lo = 0  # deviation at frame 0 is 1 > threshold
    while hi - lo > 1:
        mid = (lo + hi) // 2
        if _deviation_bound(mid / fps, config) <= threshold:
            hi = mid
        else:
            lo = mid
    return hi


def spring(
    frame: float,
    fps: int,
    config: SpringConfig | None = None,
    *,
    delay: float = 0,
) -> float:
    """Sample a spring animation at a frame.

    Args:
        frame: Frame number; values <= delay return config.from_value.
        fps: Frames per second, converts frames to spring time.
        config: SpringConfig; defaults to mass 1, stiffness 100, damping 10,
            animating 0 -> 1.
        delay: Frames to wait before the spring is released.

    Returns:
        The spring's value at that frame.

    Raises:
        ConfigurationError: Invalid fps, frame or delay.
    """
    _check_fps(fps)
    config = config or SpringConfig()
    if not _is_number(frame) and not hasattr(frame, "__float__"):
        raise ConfigurationError(f"frame must be a number, got {frame!r}")
    if not _is_number(delay) or not math.isfinite(delay):
        raise ConfigurationError(f"delay must be a finite number, got {delay!r}")
    frame = float(frame) - delay
    if not math.isfinite(frame):
        raise ConfigurationError(f"frame must be finite, got {frame!r}")
    if frame <= 0:
        return config.from_value

    if config.duration_in_frames is not None:
        natural = measure_spring(fps, config)
        frame = frame * natural / config.duration_in_frames

    g = step_response(frame / fps, config)
    value = config.to_value + (config.from_value - config.to_value) * g

    if config.overshoot_clamping:
        if config.to_value >= config.from_value:
            value = min(value, config.to_value)
        else:
            value = max(value, config.to_value)
    return value
