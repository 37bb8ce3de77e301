from typing import Iterable, Optional, Set, Tuple
from PIL import Image, ImageDraw

from drawerlayout.catalog import CatalogIndex
from drawerlayout.geometry import placement_size
from drawerlayout.state import LayoutState
from drawerlayout.summary import invalid_placement_ids
from drawerlayout.utils.colors import contrast_text, hex_to_rgb, sanitize_color

DRAWER_FILL = (241, 245, 249, 255)
GRID_COLOR = (203, 213, 225, 255)
BIN_OUTLINE = (51, 65, 85, 255)
INVALID_OUTLINE = (220, 38, 38, 255)
SELECTED_OUTLINE = (37, 99, 235, 255)


def _box(x: float, y: float, w: float, l: float, scale: int) -> Tuple[int, int, int, int]:
    x1 = int(round(x * scale))
    y1 = int(round(y * scale))
    x2 = int(round((x + w) * scale)) - 1
    y2 = int(round((y + l) * scale)) - 1
    return x1, y1, max(x1, x2), max(y1, y2)


def render_layout(
    state: LayoutState,
    catalog: CatalogIndex,
    scale: int = 20,
    grid: bool = True,
    selected: Optional[Iterable[str]] = None,
) -> Image.Image:
    """Draw the drawer and its placements at ``scale`` pixels per inch.

    Invalid placements (out of bounds or overlapping) get a red outline,
    selected ones a blue outline. Labels fall back to the bin size.
    """
    width = max(1, int(round(state.drawer_width * scale)))
    height = max(1, int(round(state.drawer_length * scale)))
    canvas = Image.new("RGBA", (width, height), DRAWER_FILL)
    draw = ImageDraw.Draw(canvas)

    if grid and scale >= 4:
        for i in range(1, int(state.drawer_width) + 1):
            draw.line([(i * scale, 0), (i * scale, height)], fill=GRID_COLOR)
        for j in range(1, int(state.drawer_length) + 1):
            draw.line([(0, j * scale), (width, j * scale)], fill=GRID_COLOR)

    invalid = invalid_placement_ids(state, catalog)
    chosen: Set[str] = set(selected or ())
    for p in state.placements:
        size = placement_size(p, catalog)
        if size is None:
            continue
        color = sanitize_color(p.color)
        box = _box(p.x, p.y, size.width, size.length, scale)
        if p.id in invalid:
            outline = INVALID_OUTLINE
        elif p.id in chosen:
            outline = SELECTED_OUTLINE
        else:
            outline = BIN_OUTLINE
        draw.rectangle(box, fill=hex_to_rgb(color) + (255,), outline=outline, width=2 if outline != BIN_OUTLINE else 1)
        text = p.label or f"{size.width:g}x{size.length:g}"
        draw.text((box[0] + 3, box[1] + 2), text, fill=hex_to_rgb(contrast_text(color)) + (255,))
    return canvas
