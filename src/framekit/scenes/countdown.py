"""CountdownTimer — "3, 2, 1, GO!" with pulsing rings (7 seconds).

Timeline:
  0-210    pulsing background rings + "GET READY" title
  30-60    3
  60-90    2
  90-120   1
  120-     GO! with particle burst
  150-     bottom subtitle

Each sequence's content receives its own local frame. Content that also
needs the global frame (the closing fade) is built with the sequence's
start offset bound in, so global = local + offset without any shared
frame counter.
"""

import math

from ..common import random_value
from ..composition import Composition
from ..easing import cubic, out
from ..interpolate import interpolate
from ..spring import SpringConfig, spring
from ..timeline import TimelineNode, sequence

ID = "CountdownTimer"
FPS = 30
DURATION = 210
WIDTH, HEIGHT = 1920, 1080
CX, CY = WIDTH / 2, HEIGHT / 2

NUMBER_SECONDS = 1
COUNT_START = 30

NUMBER_COLORS = {3: "#ef4444", 2: "#f59e0b", 1: "#22c55e"}
GO_COLORS = ("#22c55e", "#4ade80", "#86efac")

NUMBER_SPRING = SpringConfig(damping=8, stiffness=100)
GO_SPRING = SpringConfig(damping=6, stiffness=120)
LETTER_SPRING = SpringConfig(damping=8, stiffness=150)

ease_out_cubic = out(cubic)


def _fade_out(global_frame: int) -> float:
    return interpolate(global_frame, [180, 210], [1, 0], "clamp")


def _background(frame, composition):
    fade = _fade_out(frame)
    layers = []
    for i in range(4):
        phase = (frame + i * 20) % 90
        scale = interpolate(phase, [0, 90], [0.5, 2], extrapolate_right="clamp")
        opacity = interpolate(phase, [0, 90], [0.3, 0], extrapolate_right="clamp")
        layers.append({
            "type": "ellipse", "x": CX, "y": CY,
            "w": 400 * scale, "h": 400 * scale,
            "outline": (255, 255, 255), "outline_width": 2,
            "opacity": opacity * fade,
        })

    title_opacity = interpolate(frame, [0, 20], [0, 1], extrapolate_right="clamp")
    title_y = interpolate(
        frame, [0, 20], [-30, 0], extrapolate_right="clamp", easing=ease_out_cubic,
    )
    layers.append({
        "type": "text", "text": "G E T   R E A D Y",
        "x": CX, "y": 130 + title_y, "size": 48, "bold": True,
        "fill": "#ffffff", "opacity": title_opacity * fade,
    })
    return layers


def _countdown_number(number: int, offset: int):
    color = NUMBER_COLORS[number]

    def content(frame, composition):
        fade = _fade_out(frame + offset)
        scale = spring(frame, composition.fps, NUMBER_SPRING)
        opacity = interpolate(frame, [0, 10], [0, 1], extrapolate_right="clamp")
        ring_scale = interpolate(
            frame, [0, 30], [0.8, 1.5], extrapolate_right="clamp", easing=ease_out_cubic,
        )
        ring_opacity = interpolate(frame, [0, 30], [0.8, 0], extrapolate_right="clamp")
        return [
            {
                "type": "ellipse", "x": CX, "y": CY,
                "w": 400 * ring_scale, "h": 400 * ring_scale,
                "outline": color, "outline_width": 4,
                "opacity": ring_opacity * fade,
            },
            {
                "type": "text", "text": str(number), "x": CX, "y": CY,
                "size": 350 * scale, "bold": True, "fill": color,
                "opacity": opacity * fade,
            },
        ]
    return content


def _go(offset: int):
    def content(frame, composition):
        fps = composition.fps
        fade = _fade_out(frame + offset)
        layers = []

        # Particle burst. Speed, size and color are seeded per particle.
        particle_opacity = interpolate(frame, [0, 60], [1, 0], extrapolate_right="clamp")
        for i in range(20):
            angle = i / 20 * math.pi * 2
            speed = 5 + random_value(f"go-speed-{i}") * 10
            size = 10 + random_value(f"go-size-{i}") * 20
            color = GO_COLORS[int(random_value(f"go-color-{i}") * 3)]
            distance = frame * speed
            layers.append({
                "type": "ellipse",
                "x": CX + math.cos(angle) * distance,
                "y": CY + math.sin(angle) * distance,
                "w": size, "h": size, "fill": color,
                "opacity": particle_opacity * fade,
            })

        # Burst lines.
        length = interpolate(
            frame, [0, 30], [0, 300], extrapolate_right="clamp", easing=ease_out_cubic,
        )
        line_opacity = interpolate(frame, [10, 40], [1, 0], "clamp")
        for i in range(12):
            angle = i / 12 * math.pi * 2
            inner, outer = 150, 150 + length
            layers.append({
                "type": "line",
                "x1": CX + math.cos(angle) * inner, "y1": CY + math.sin(angle) * inner,
                "x2": CX + math.cos(angle) * outer, "y2": CY + math.sin(angle) * outer,
                "fill": "#22c55e", "width": 4,
                "opacity": line_opacity * fade,
            })

        # Staggered letters.
        opacity = interpolate(frame, [0, 15], [0, 1], extrapolate_right="clamp")
        group_scale = spring(frame, fps, GO_SPRING)
        for i, letter in enumerate("GO!"):
            letter_scale = spring(frame, fps, LETTER_SPRING, delay=i * 5)
            layers.append({
                "type": "text", "text": letter,
                "x": CX + (i - 1) * 200 * group_scale, "y": CY,
                "size": 250 * letter_scale, "bold": True, "fill": "#22c55e",
                "opacity": opacity * fade,
            })
        return layers
    return content


def _subtitle(offset: int):
    def content(frame, composition):
        opacity = interpolate(frame, [0, 20], [0, 1], "clamp")
        return [{
            "type": "text", "text": "Let's build something amazing",
            "x": CX, "y": HEIGHT - 100, "size": 32, "fill": (153, 153, 153),
            "opacity": opacity * _fade_out(frame + offset),
        }]
    return content


def build() -> Composition:
    n = NUMBER_SECONDS * FPS
    numbers = [
        sequence(
            start_frame=COUNT_START + k * n, duration_frames=n,
            name=f"number-{number}",
            content=_countdown_number(number, COUNT_START + k * n),
        )
        for k, number in enumerate((3, 2, 1))
    ]
    go_start = COUNT_START + 3 * n
    root = TimelineNode(
        name=ID,
        content=_background,
        children=(
            *numbers,
            sequence(start_frame=go_start, name="go", content=_go(go_start)),
            sequence(start_frame=150, name="subtitle", content=_subtitle(150)),
        ),
    )
    return Composition(
        id=ID, duration_frames=DURATION, fps=FPS, width=WIDTH, height=HEIGHT,
        root=root, background=(10, 10, 15), folder="Showcase",
    )
