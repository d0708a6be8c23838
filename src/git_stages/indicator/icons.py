"""Icon drawing for the change-count tray indicator.

Icons are drawn with Pillow: a rounded badge holding either a single ``0``
(clean tree) or the staged count stacked over the unstaged count.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Dict, Iterable, Tuple

from PIL import Image, ImageDraw, ImageFont

from .presentation import IndicatorView
from .state import IndicatorState

ICON_SIZES: Tuple[int, ...] = (16, 20, 24, 32, 40, 48, 64)
MAX_BADGE_VALUE = 99

Color = Tuple[int, int, int, int]


class IndicatorTheme(str, Enum):
    """Supported indicator icon themes."""

    LIGHT = "light"
    DARK = "dark"
    HIGH_CONTRAST = "high_contrast"


@dataclass(frozen=True)
class _IconKey:
    state: IndicatorState
    staged: int
    unstaged: int
    theme: IndicatorTheme
    size: int


class IndicatorIconFactory:
    """Draws and caches Pillow images for indicator views."""

    def __init__(self, sizes: Iterable[int] = ICON_SIZES) -> None:
        self._sizes = tuple(sorted(set(sizes)))
        if not self._sizes:
            raise ValueError("At least one icon size is required")

    @property
    def sizes(self) -> Tuple[int, ...]:
        return self._sizes

    def image(
        self, view: IndicatorView, theme: IndicatorTheme, size: int
    ) -> Image.Image:
        """Fetch a Pillow image for the given view."""
        if size not in self._sizes:
            raise ValueError(f"Unsupported indicator icon size {size}")
        key = _IconKey(
            state=view.state,
            staged=view.counts.staged,
            unstaged=view.counts.unstaged,
            theme=theme,
            size=size,
        )
        return self._draw(key)

    @lru_cache(maxsize=256)  # noqa: B019
    def _draw(self, key: _IconKey) -> Image.Image:
        background, border, accents = palette_for_theme(key.theme)
        image = Image.new("RGBA", (key.size, key.size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        inset = max(1, key.size // 16)
        draw.rounded_rectangle(
            (0, 0, key.size - 1, key.size - 1),
            radius=key.size // 5,
            fill=background,
            outline=border,
            width=inset,
        )
        if key.state is IndicatorState.CLEAN:
            _draw_centered(
                draw, "0", key.size, key.size // 2, key.size, accents["clean"]
            )
        else:
            _draw_centered(
                draw,
                _badge_text(key.staged),
                key.size,
                key.size // 4 + inset,
                key.size // 2,
                accents["staged"],
            )
            _draw_centered(
                draw,
                _badge_text(key.unstaged),
                key.size,
                (key.size * 3) // 4 - inset,
                key.size // 2,
                accents["unstaged"],
            )
        return image


def _badge_text(value: int) -> str:
    return f"{MAX_BADGE_VALUE}+" if value > MAX_BADGE_VALUE else str(value)


def _draw_centered(
    draw: ImageDraw.ImageDraw,
    text: str,
    width: int,
    center_y: int,
    line_height: int,
    color: Color,
) -> None:
    font = _font(max(6, int(line_height * 0.8)))
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = (width - (right - left)) / 2 - left
    y = center_y - (bottom - top) / 2 - top
    draw.text((x, y), text, font=font, fill=color)


@lru_cache(maxsize=32)
def _font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=size)


def palette_for_theme(
    theme: IndicatorTheme,
) -> Tuple[Color, Color, Dict[str, Color]]:
    """Return background, border and text accents for ``theme``."""
    if theme is IndicatorTheme.HIGH_CONTRAST:
        background = (0, 0, 0, 255)
        border = (255, 255, 255, 255)
        accents = {
            "clean": (0, 255, 0, 255),
            "staged": (0, 255, 255, 255),
            "unstaged": (255, 255, 0, 255),
        }
    elif theme is IndicatorTheme.DARK:
        background = (30, 30, 30, 230)
        border = (230, 230, 230, 255)
        accents = {
            "clean": (120, 220, 180, 255),
            "staged": (120, 200, 255, 255),
            "unstaged": (255, 170, 0, 255),
        }
    else:
        background = (255, 255, 255, 230)
        border = (50, 50, 50, 255)
        accents = {
            "clean": (67, 160, 71, 255),
            "staged": (30, 136, 229, 255),
            "unstaged": (230, 81, 0, 255),
        }
    return background, border, accents
