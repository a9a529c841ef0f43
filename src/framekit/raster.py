"""Preview rasterizer — draw layer dicts into an RGB frame.

Each layer is rendered as a small RGBA patch with Pillow, its alpha scaled
by the layer's opacity, and alpha-blended into the frame with numpy at its
centre position. Patches that hang off the frame edge are clipped.

Layer types (coordinates are the shape's centre):
  - rect:    x, y, w, h, fill?, outline?, outline_width?, radius?
  - ellipse: x, y, w, h, fill?, outline?, outline_width?
  - text:    x, y, text, size, fill?, bold?, rotation?
  - line:    x1, y1, x2, y2, fill?, width?

All types accept opacity in [0, 1] (default 1). Colors are '#RRGGBB' or
RGB sequences.
"""

import math

import numpy as np
from PIL import Image, ImageDraw

from .common import load_font, to_rgb
from .errors import ConfigurationError


VALID_LAYER_TYPES = {"rect", "ellipse", "text", "line"}

DEFAULT_FILL = (255, 255, 255)


# ── Patch rendering ──────────────────────────────────────────────


def _rgba(color, alpha: int = 255) -> tuple[int, int, int, int] | None:
    if color is None:
        return None
    return (*to_rgb(color), alpha)


def _shape_patch(layer: dict) -> tuple[np.ndarray, float, float]:
    """Render a rect or ellipse patch. Returns (patch, centre_x, centre_y)."""
    w = max(1, int(round(layer["w"])))
    h = max(1, int(round(layer["h"])))
    fill = _rgba(layer.get("fill"))
    outline = _rgba(layer.get("outline"))
    outline_width = int(round(layer.get("outline_width", 1)))
    if fill is None and outline is None:
        fill = (*DEFAULT_FILL, 255)

    img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    box = [(0, 0), (w - 1, h - 1)]
    if layer["type"] == "rect":
        radius = int(round(layer.get("radius", 0)))
        if radius > 0:
            draw.rounded_rectangle(
                box, radius=radius, fill=fill, outline=outline, width=outline_width,
            )
        else:
            draw.rectangle(box, fill=fill, outline=outline, width=outline_width)
    else:
        draw.ellipse(box, fill=fill, outline=outline, width=outline_width)
    return np.array(img), layer["x"], layer["y"]


def _text_patch(layer: dict) -> tuple[np.ndarray, float, float]:
    """Render text centred on (x, y), optionally rotated (degrees, clockwise)."""
    text = str(layer["text"])
    font = load_font(layer.get("size", 32), bold=bool(layer.get("bold", False)))
    color = _rgba(layer.get("fill", DEFAULT_FILL))

    # Measure text.
    draw_tmp = ImageDraw.Draw(Image.new("RGBA", (1, 1)))
    bbox = draw_tmp.textbbox((0, 0), text, font=font)
    text_w = max(1, bbox[2] - bbox[0])
    text_h = max(1, bbox[3] - bbox[1])

    img = Image.new("RGBA", (text_w, text_h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.text((-bbox[0], -bbox[1]), text, fill=color, font=font)

    rotation = layer.get("rotation", 0)
    if rotation:
        # Pillow rotates counter-clockwise; layers rotate clockwise.
        img = img.rotate(-rotation, expand=True, resample=Image.BICUBIC)

    return np.array(img), layer["x"], layer["y"]


def _line_patch(layer: dict) -> tuple[np.ndarray, float, float]:
    x1, y1, x2, y2 = layer["x1"], layer["y1"], layer["x2"], layer["y2"]
    width = max(1, int(round(layer.get("width", 2))))
    pad = width
    left, top = min(x1, x2) - pad, min(y1, y2) - pad
    w = int(math.ceil(abs(x2 - x1))) + 2 * pad + 1
    h = int(math.ceil(abs(y2 - y1))) + 2 * pad + 1

    img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.line(
        [(x1 - left, y1 - top), (x2 - left, y2 - top)],
        fill=_rgba(layer.get("fill", DEFAULT_FILL)), width=width,
    )
    return np.array(img), left + w / 2, top + h / 2


_PATCH_RENDERERS = {
    "rect": _shape_patch,
    "ellipse": _shape_patch,
    "text": _text_patch,
    "line": _line_patch,
}


def render_layer_patch(layer: dict) -> tuple[np.ndarray, float, float]:
    """Render one layer to an RGBA patch.

    Returns:
        (patch, centre_x, centre_y) where patch has shape (h, w, 4), uint8.

    Raises:
        ConfigurationError: Unknown layer type or missing field.
    """
    kind = layer.get("type")
    if kind not in _PATCH_RENDERERS:
        raise ConfigurationError(
            f"Unknown layer type '{kind}'. Valid: {sorted(VALID_LAYER_TYPES)}"
        )
    try:
        return _PATCH_RENDERERS[kind](layer)
    except KeyError as e:
        raise ConfigurationError(
            f"{kind} layer missing required field {e.args[0]!r}"
        ) from None


# ── Frame-level compositing ──────────────────────────────────────


def blend_patch(
    frame: np.ndarray, patch: np.ndarray, x: int, y: int, opacity: float = 1.0,
) -> None:
    """Alpha-blend an RGBA patch into frame (in place) at top-left (x, y).

    Parts of the patch outside the frame are dropped.
    """
    frame_h, frame_w = frame.shape[:2]
    patch_h, patch_w = patch.shape[:2]

    x0, y0 = max(0, x), max(0, y)
    x1, y1 = min(frame_w, x + patch_w), min(frame_h, y + patch_h)
    if x0 >= x1 or y0 >= y1:
        return

    sub = patch[y0 - y:y1 - y, x0 - x:x1 - x]
    alpha = sub[:, :, 3:4].astype(np.float32) / 255.0 * opacity
    rgb = sub[:, :, :3].astype(np.float32)
    dest = frame[y0:y1, x0:x1].astype(np.float32)
    blended = dest * (1 - alpha) + rgb * alpha
    frame[y0:y1, x0:x1] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)


def rasterize(
    layers: list[dict],
    width: int,
    height: int,
    background=(0, 0, 0),
) -> np.ndarray:
    """Draw layers in order onto a solid background.

    Returns:
        numpy array of shape (height, width, 3), dtype uint8.
    """
    frame = np.empty((height, width, 3), dtype=np.uint8)
    frame[:, :] = to_rgb(background)

    for layer in layers:
        opacity = float(layer.get("opacity", 1.0))
        opacity = min(1.0, max(0.0, opacity))
        if opacity <= 0:
            continue
        patch, cx, cy = render_layer_patch(layer)
        patch_h, patch_w = patch.shape[:2]
        x = int(round(cx - patch_w / 2))
        y = int(round(cy - patch_h / 2))
        blend_patch(frame, patch, x, y, opacity)

    return frame


def render_composition_frame(composition, frame: int) -> np.ndarray:
    """Evaluate and rasterize one frame of a composition."""
    layers = composition.render(frame)
    return rasterize(
        layers, composition.width, composition.height, composition.background,
    )
