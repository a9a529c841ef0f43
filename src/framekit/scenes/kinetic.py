"""KineticTypography — animated quote, word by word (14 seconds)."""

import math

from ..composition import Composition
from ..easing import back, cubic, out
from ..interpolate import interpolate
from ..spring import SpringConfig, spring
from ..timeline import TimelineNode, sequence

ID = "KineticTypography"
FPS = 30
DURATION = 420
WIDTH, HEIGHT = 1920, 1080
CX, CY = WIDTH / 2, HEIGHT / 2

# Rough advance width of a bold glyph relative to its font size; the
# preview renderer has no text layout engine.
CHAR_WIDTH = 0.6

ease_out_cubic = out(cubic)
ease_out_back = out(back(1.5))

SCALE_SPRING = SpringConfig(damping=10, stiffness=100)
BOUNCE_SPRING = SpringConfig(damping=8, stiffness=150)

CODE_SYMBOLS = ("{", "}", "<", ">", "/", ";", "=", "(", ")")


def _clamped(frame, inputs, outputs, easing=None):
    return interpolate(frame, inputs, outputs, "clamp", easing=easing)


# ── Word effects ─────────────────────────────────────────────────
# Each effect maps a word-local frame (already shifted by its delay) and
# fps to {opacity, dx, dy, scale, rotation}.


def _fade_up(f, fps):
    return {
        "opacity": _clamped(f, [0, 20], [0, 1]),
        "dy": _clamped(f, [0, 20], [50, 0], ease_out_cubic),
    }


def _scale_in(f, fps):
    return {
        "opacity": _clamped(f, [0, 15], [0, 1]),
        "scale": spring(f, fps, SCALE_SPRING),
    }


def _slide_right(f, fps):
    return {
        "opacity": _clamped(f, [0, 15], [0, 1]),
        "dx": _clamped(f, [0, 25], [-200, 0], ease_out_cubic),
    }


def _rotate_in(f, fps):
    return {
        "opacity": _clamped(f, [0, 20], [0, 1]),
        "rotation": _clamped(f, [0, 25], [-90, 0], ease_out_back),
        "scale": _clamped(f, [0, 25], [0.5, 1]),
    }


def _bounce_in(f, fps):
    return {
        "opacity": _clamped(f, [0, 10], [0, 1]),
        "scale": spring(f, fps, BOUNCE_SPRING),
    }


EFFECTS = {
    "fadeUp": _fade_up,
    "scaleIn": _scale_in,
    "slideRight": _slide_right,
    "rotateIn": _rotate_in,
    "bounceIn": _bounce_in,
}


def _word_layer(word, x, y, size, color, effect, frame, delay, fps):
    values = EFFECTS[effect](frame - delay, fps)
    scale = values.get("scale", 1.0)
    return {
        "type": "text", "text": word,
        "x": x + values.get("dx", 0.0), "y": y + values.get("dy", 0.0),
        "size": size * scale, "bold": True, "fill": color,
        "rotation": values.get("rotation", 0.0),
        "opacity": values["opacity"],
    }


def _line_of_words(words, y):
    """Content for a centred row of (word, delay, effect, color, size)."""
    def content(frame, composition):
        widths = [len(w) * CHAR_WIDTH * size + size * 0.3 for w, _, _, _, size in words]
        x = CX - sum(widths) / 2
        layers = []
        for (word, delay, effect, color, size), width in zip(words, widths):
            layers.append(_word_layer(
                word, x + width / 2, y, size, color, effect,
                frame, delay, composition.fps,
            ))
            x += width
        return layers
    return content


def _character_reveal(text, start_delay, char_delay, color, size, y):
    def content(frame, composition):
        step = size * CHAR_WIDTH
        x0 = CX - step * (len(text) - 1) / 2
        layers = []
        for i, char in enumerate(text):
            f = frame - (start_delay + i * char_delay)
            layers.append({
                "type": "text", "text": char,
                "x": x0 + i * step,
                "y": y + _clamped(f, [0, 10], [30, 0], ease_out_cubic),
                "size": size, "bold": True, "fill": color,
                "opacity": _clamped(f, [0, 10], [0, 1]),
            })
        return layers
    return content


def _attribution(frame, composition):
    line = _clamped(frame, [0, 30], [0, 1])
    text_f = frame - 20
    return [
        {
            "type": "rect", "x": CX, "y": CY - 30,
            "w": max(1.0, 100 * line), "h": 2,
            "fill": "#4b5563", "opacity": line,
        },
        {
            "type": "text", "text": "- Linus Torvalds",
            "x": CX, "y": CY + 30 + _clamped(text_f, [0, 20], [20, 0]),
            "size": 36, "fill": "#9ca3af",
            "opacity": _clamped(text_f, [0, 20], [0, 1]),
        },
    ]


def _background(frame, composition):
    pulse = interpolate(frame % 60, [0, 30, 60], [0.02, 0.05, 0.02], extrapolate_right="clamp")
    layers = [{
        "type": "ellipse", "x": CX, "y": CY, "w": WIDTH, "h": WIDTH,
        "fill": "#8b5cf6", "opacity": pulse,
    }]
    for i, symbol in enumerate(CODE_SYMBOLS):
        angle = i / len(CODE_SYMBOLS) * math.pi * 2
        radius = 350 + (i % 3) * 50
        speed = 0.005 * (1 if i % 2 == 0 else -1)
        current = angle + frame * speed
        layers.append({
            "type": "text", "text": symbol,
            "x": CX + math.cos(current) * radius,
            "y": CY + math.sin(current) * radius,
            "size": 40 + (i % 3) * 20, "fill": "#8b5cf6",
            "opacity": 0.1 + (i % 3) * 0.05,
        })
    return layers


def _fade_out(frame, composition):
    # Black veil drawn last; stands in for fading the whole frame.
    return [{
        "type": "rect", "x": CX, "y": CY, "w": WIDTH, "h": HEIGHT,
        "fill": "#000000", "opacity": _clamped(frame, [0, 30], [0, 1]),
    }]


def build() -> Composition:
    root = TimelineNode(
        name=ID,
        content=_background,
        children=(
            sequence(
                start_frame=0, duration_frames=120, name="talk-is-cheap",
                content=_line_of_words([
                    ("Talk", 0, "slideRight", "#8b5cf6", 120),
                    ("is", 15, "fadeUp", "#ffffff", 120),
                    ("cheap.", 30, "bounceIn", "#f59e0b", 120),
                ], CY),
            ),
            sequence(
                start_frame=100, duration_frames=120, name="show-me",
                content=_line_of_words([
                    ("Show", 0, "rotateIn", "#22c55e", 140),
                    ("me", 20, "scaleIn", "#ffffff", 140),
                ], CY),
            ),
            sequence(
                sequence(
                    start_frame=20, name="code",
                    content=_character_reveal("CODE", 0, 5, "#ec4899", 180, CY + 60),
                ),
                start_frame=200, duration_frames=140, name="the-code",
                content=_line_of_words([("the", 0, "fadeUp", "#6b7280", 80)], CY - 120),
            ),
            sequence(
                start_frame=320, duration_frames=100, name="attribution",
                content=_attribution,
            ),
            sequence(start_frame=390, name="fade-out", content=_fade_out),
        ),
    )
    return Composition(
        id=ID, duration_frames=DURATION, fps=FPS, width=WIDTH, height=HEIGHT,
        root=root, background=(0, 0, 0), folder="Showcase",
    )
