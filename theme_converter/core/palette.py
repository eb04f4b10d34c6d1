"""Colour arithmetic: hex parsing/formatting, HSL lightness, alpha, luminance.

Colours travel through the resolver as hex strings. This module converts
them to RGBA tuples (ints 0-255, alpha float 0-1), does the maths, and
formats them back as lowercase '#rrggbb' (opaque) or '#rrggbbaa'.

The prominence helpers (lighter_color/darker_color) work in linear light,
where relative luminance is a plain weighted sum of the channels. That
makes the luminance of the result Lfg + factor * (Lbg - Lfg), up to 8-bit rounding.
"""

import colorsys
import re

import numpy as np
from PIL import ImageColor

RGBA = tuple[int, int, int, float]

_HEX_RE = re.compile(r'^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$')

# WCAG 2 relative luminance weights for linear R, G, B
_LUMA = np.array([0.2126, 0.7152, 0.0722])

DEFAULT_PROMINENCE_FACTOR = 0.5


def parse_color(value: str) -> RGBA | None:
    """Parse '#rgb', '#rgba', '#rrggbb' or '#rrggbbaa'. Returns None if invalid."""
    if not isinstance(value, str) or not _HEX_RE.match(value):
        return None
    channels = ImageColor.getrgb(value)
    r, g, b = channels[:3]
    a = channels[3] / 255.0 if len(channels) == 4 else 1.0
    return (r, g, b, a)


def _byte(x: float) -> int:
    # round half up, like the 8-bit hex formatting editors use
    return max(0, min(255, int(x + 0.5)))


def to_hex(color: RGBA) -> str:
    """Format an RGBA tuple. Alpha is only written when the colour is not opaque."""
    r, g, b, a = color
    alpha = _byte(a * 255)
    out = f'#{r:02x}{g:02x}{b:02x}'
    if alpha < 255:
        out += f'{alpha:02x}'
    return out


def with_alpha(color: RGBA, alpha: float) -> RGBA:
    r, g, b, _a = color
    return (r, g, b, max(0.0, min(1.0, alpha)))


def darken(color: RGBA, factor: float) -> RGBA:
    """Reduce HSL lightness by *factor* of itself."""
    return _scale_lightness(color, 1.0 - factor)


def lighten(color: RGBA, factor: float) -> RGBA:
    """Increase HSL lightness by *factor* of itself, capped at 1."""
    return _scale_lightness(color, 1.0 + factor)


def _scale_lightness(color: RGBA, scale: float) -> RGBA:
    r, g, b, a = color
    h, lightness, s = colorsys.rgb_to_hls(r / 255.0, g / 255.0, b / 255.0)
    lightness = max(0.0, min(1.0, lightness * scale))
    nr, ng, nb = colorsys.hls_to_rgb(h, lightness, s)
    return (_byte(nr * 255), _byte(ng * 255), _byte(nb * 255), a)


# ---------------------------------------------------------------------------
# Luminance and relative prominence
# ---------------------------------------------------------------------------


def _to_linear(color: RGBA) -> np.ndarray:
    c = np.array(color[:3], dtype=float) / 255.0
    return np.where(c <= 0.04045, c / 12.92, ((c + 0.055) / 1.055) ** 2.4)


def _from_linear(linear: np.ndarray, alpha: float) -> RGBA:
    linear = np.clip(linear, 0.0, 1.0)
    c = np.where(linear <= 0.0031308, linear * 12.92, 1.055 * linear ** (1 / 2.4) - 0.055)
    r, g, b = (_byte(float(v) * 255) for v in c)
    return (r, g, b, alpha)


def luminance(color: RGBA) -> float:
    """WCAG 2 relative luminance, 0 (black) to 1 (white). Alpha is ignored."""
    return float(_to_linear(color) @ _LUMA)


def lighter_color(of: RGBA, relative: RGBA, factor: float | None = None) -> RGBA:
    """Move *of* toward white, closing *factor* of the luminance gap to *relative*.

    Returns *of* unchanged if it is already at least as light as *relative*.
    When 8-bit rounding would land on *of* (or reach *relative*) for a
    fractional factor, one channel is stepped a single byte instead, so the
    result stays strictly between the two wherever a byte step fits.
    """
    lum1 = luminance(of)
    lum2 = luminance(relative)
    if lum1 >= lum2:
        return of

    factor = DEFAULT_PROMINENCE_FACTOR if factor is None else factor
    amount = factor * (lum2 - lum1) / lum2
    # mixing toward white by w adds w * (1 - lum1) luminance
    weight = amount * lum2 / (1.0 - lum1)
    linear = _to_linear(of)
    moved = _from_linear(linear + weight * (1.0 - linear), of[3])
    if 0 < factor < 1 and not lum1 < luminance(moved) < lum2:
        start, step = (of, 1) if luminance(moved) <= lum1 else (moved, -1)
        moved = _byte_step_between(start, step, lum1, lum2) or moved
    return moved


def darker_color(of: RGBA, relative: RGBA, factor: float | None = None) -> RGBA:
    """Move *of* toward black, closing *factor* of the luminance gap to *relative*.

    Returns *of* unchanged if it is already at least as dark as *relative*.
    Rounding is corrected the same way as in lighter_color().
    """
    lum1 = luminance(of)
    lum2 = luminance(relative)
    if lum1 <= lum2:
        return of

    factor = DEFAULT_PROMINENCE_FACTOR if factor is None else factor
    amount = factor * (lum1 - lum2) / lum1
    moved = _from_linear(_to_linear(of) * (1.0 - amount), of[3])
    if 0 < factor < 1 and not lum2 < luminance(moved) < lum1:
        start, step = (of, -1) if luminance(moved) >= lum1 else (moved, 1)
        moved = _byte_step_between(start, step, lum2, lum1) or moved
    return moved


def _byte_step_between(start: RGBA, step: int, low: float, high: float) -> RGBA | None:
    """Move one channel of *start* by *step* so its luminance lands in (low, high)."""
    # blue first: the smallest luminance change per byte
    for channel in (2, 0, 1):
        channels = list(start[:3])
        channels[channel] += step
        if not 0 <= channels[channel] <= 255:
            continue
        candidate = (channels[0], channels[1], channels[2], start[3])
        if low < luminance(candidate) < high:
            return candidate
    return None
