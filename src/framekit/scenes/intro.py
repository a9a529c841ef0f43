"""ClaudeCodeIntro — title reveal with orbiting particles (7 seconds).

The title springs in with a blinking terminal cursor after it, the
"AI-Powered Development" subtitle rises in at frame 45, an accent line
grows along the bottom from frame 60 and four corner brackets fade in
one after another. The gradient background, grid pattern and glow blur
are drawn as flat colours, and the accent line is a solid bar.
"""

import math

from ..composition import Composition
from ..easing import cubic, out
from ..interpolate import interpolate
from ..spring import SpringConfig, spring
from ..timeline import TimelineNode, sequence

ID = "ClaudeCodeIntro"
FPS = 30
DURATION = 210
WIDTH, HEIGHT = 1920, 1080
CX, CY = WIDTH / 2, HEIGHT / 2

ACCENT = "#da7756"
HIGHLIGHT = "#f4a261"
SUBTITLE = "AI-Powered Development"

# Settles at exactly frame 60 regardless of the physical parameters.
TITLE_SPRING = SpringConfig(damping=12, stiffness=100, mass=0.8, duration_in_frames=60)

# Approximate half-width of the title text at full size.
TITLE_HALF_WIDTH = 400

# (corner x, corner y, arm direction x, arm direction y, first frame)
CORNERS = (
    (60, 60, 1, 1, 30),
    (WIDTH - 60, 60, -1, 1, 35),
    (60, HEIGHT - 60, 1, -1, 40),
    (WIDTH - 60, HEIGHT - 60, -1, -1, 45),
)
CORNER_ARM = 60
CORNER_STROKE = 3

ease_out_cubic = out(cubic)


def _fade_out(global_frame):
    return interpolate(global_frame, [180, 210], [1, 0], "clamp")


def _particles(frame, composition):
    fade = _fade_out(frame)
    layers = []
    for i in range(12):
        angle = i / 12 * math.pi * 2
        f = frame - i * 3
        radius = interpolate(f, [0, 60], [50, 200], "clamp", easing=ease_out_cubic)
        opacity = interpolate(f, [0, 20, 60], [0, 0.8, 0], "clamp")
        size = 4 + (i % 3) * 2
        layers.append({
            "type": "ellipse",
            "x": CX + math.cos(angle) * radius, "y": CY + math.sin(angle) * radius,
            "w": size, "h": size, "fill": ACCENT,
            "opacity": opacity * fade,
        })
    return layers


def _title(frame, composition):
    fade = _fade_out(frame)
    scale = spring(frame, composition.fps, TITLE_SPRING)
    opacity = interpolate(frame, [0, 30], [0, 1], extrapolate_right="clamp")
    glow = interpolate(frame, [30, 60, 90, 120, 150], [0, 1, 0.6, 1, 0.8], "clamp")
    spread = interpolate(frame, [20, 50], [0, 60], "clamp", easing=ease_out_cubic)
    bracket_opacity = interpolate(frame, [20, 40], [0, 0.6], "clamp")
    cursor = 1 if (frame // 15) % 2 == 0 else 0

    return [
        {
            "type": "ellipse", "x": CX, "y": CY, "w": 900, "h": 300,
            "fill": ACCENT, "opacity": 0.15 * glow * fade,
        },
        {
            "type": "text", "text": "<", "x": CX - 480 - spread, "y": CY,
            "size": 160, "fill": HIGHLIGHT, "opacity": bracket_opacity * fade,
        },
        {
            "type": "text", "text": "/>", "x": CX + 480 + spread, "y": CY,
            "size": 160, "fill": HIGHLIGHT, "opacity": bracket_opacity * fade,
        },
        {
            "type": "text", "text": "Claude Code", "x": CX, "y": CY,
            "size": 120 * scale, "bold": True, "fill": "#ffffff",
            "opacity": opacity * fade,
        },
        {
            "type": "rect", "name": "cursor",
            "x": CX + (TITLE_HALF_WIDTH + 14) * scale, "y": CY,
            "w": 8 * scale, "h": 100 * scale, "fill": ACCENT,
            "opacity": cursor * opacity * fade,
        },
    ]


def _subtitle(offset: int):
    def content(frame, composition):
        # The title spring and fade run on the global frame.
        fade = _fade_out(frame + offset)
        scale = spring(frame + offset, composition.fps, TITLE_SPRING)
        opacity = interpolate(frame, [0, 30], [0, 1], extrapolate_right="clamp")
        y = interpolate(
            frame, [0, 30], [20, 0], extrapolate_right="clamp", easing=ease_out_cubic,
        )
        return [
            {
                "type": "text", "text": SUBTITLE.upper(),
                "x": CX, "y": CY + (120 + y) * scale, "size": 36 * scale,
                "fill": "#ffffff", "opacity": 0.7 * opacity * fade,
            },
        ]
    return content


def _accents(frame, composition):
    fade = _fade_out(frame)
    layers = []
    width = interpolate(frame, [60, 100], [0, 400], "clamp", easing=ease_out_cubic)
    if width > 0:
        layers.append({
            "type": "rect", "name": "accent_line",
            "x": CX, "y": HEIGHT - 120 - 1.5, "w": width, "h": 3, "radius": 1,
            "fill": ACCENT, "opacity": fade,
        })

    half = CORNER_ARM / 2
    edge = CORNER_STROKE / 2
    for x, y, dx, dy, start in CORNERS:
        opacity = 0.4 * interpolate(frame, [start, start + 20], [0, 1], "clamp") * fade
        layers.append({
            "type": "rect", "name": "corner",
            "x": x + dx * half, "y": y + dy * edge,
            "w": CORNER_ARM, "h": CORNER_STROKE, "fill": ACCENT, "opacity": opacity,
        })
        layers.append({
            "type": "rect", "name": "corner",
            "x": x + dx * edge, "y": y + dy * half,
            "w": CORNER_STROKE, "h": CORNER_ARM, "fill": ACCENT, "opacity": opacity,
        })
    return layers


def build() -> Composition:
    root = TimelineNode(
        name=ID,
        children=(
            sequence(name="particles", content=_particles),
            sequence(name="title", content=_title),
            sequence(start_frame=45, name="subtitle", content=_subtitle(45)),
            sequence(name="accents", content=_accents),
        ),
    )
    return Composition(
        id=ID, duration_frames=DURATION, fps=FPS, width=WIDTH, height=HEIGHT,
        root=root, background=(26, 26, 46),
    )
