from __future__ import annotations

import random
import string
from dataclasses import dataclass, field
from typing import Any, Literal

from .types import Point
from .styles import (
    BINDING,
    FONT_SIZES,
    LINE_HEIGHT,
    STROKE_WIDTHS,
    estimate_text_height,
    estimate_text_width,
)
from .theme import TEXT_COLOR

# ============================================================================
# Scene graph — Excalidraw-flavoured draw primitives
#
# Elements are immutable. The only post-creation change, attaching bound
# arrows to shapes, goes through dataclasses.replace.
# ============================================================================

ElementType = Literal["rectangle", "ellipse", "line", "arrow", "text"]
StrokeStyle = Literal["solid", "dashed"]
Arrowhead = Literal["arrow", "triangle"]
TextAlign = Literal["left", "center"]
VerticalAlign = Literal["top", "middle"]

DEFAULT_SEED = 1000

# Excalidraw roundness types
ROUND_LINEAR = 2
ROUND_ADAPTIVE = 3

FONT_FAMILY = 1

ID_ALPHABET = string.ascii_letters + string.digits
ID_LENGTH = 8

# Ordered base-62 digits; ASCII order matches numeric order
INDEX_DIGITS = string.digits + string.ascii_uppercase + string.ascii_lowercase


@dataclass(frozen=True, slots=True)
class Binding:
    element_id: str
    focus: float = BINDING["focus"]
    gap: float = BINDING["gap"]

    def to_dict(self) -> dict[str, Any]:
        return {
            "elementId": self.element_id,
            "focus": self.focus,
            "gap": self.gap,
            "fixedPoint": None,
        }


@dataclass(frozen=True, slots=True)
class BoundElement:
    id: str
    type: Literal["arrow", "text"] = "arrow"


@dataclass(frozen=True, slots=True)
class Element:
    id: str
    type: ElementType
    x: float
    y: float
    width: float
    height: float
    # Fractional-index z-order key
    index: str
    seed: int
    stroke_color: str = TEXT_COLOR
    background_color: str = "transparent"
    fill_style: str = "hachure"
    stroke_width: float = STROKE_WIDTHS["shape"]
    stroke_style: StrokeStyle = "solid"
    roughness: int = 1
    opacity: int = 100
    roundness: int | None = None
    bound_elements: tuple[BoundElement, ...] = ()

    # Text elements
    text: str | None = None
    font_size: float | None = None
    text_align: TextAlign | None = None
    vertical_align: VerticalAlign | None = None
    line_height: float | None = None

    # Linear elements (line, arrow); points are relative to (x, y)
    points: tuple[tuple[float, float], ...] = ()
    start_binding: Binding | None = None
    end_binding: Binding | None = None
    start_arrowhead: Arrowhead | None = None
    end_arrowhead: Arrowhead | None = None

    @property
    def is_shape(self) -> bool:
        return self.type in ("rectangle", "ellipse")

    @property
    def is_linear(self) -> bool:
        return self.type in ("line", "arrow")

    def to_dict(self) -> dict[str, Any]:
        """Excalidraw element JSON (camelCase keys)."""
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "angle": 0,
            "strokeColor": self.stroke_color,
            "backgroundColor": self.background_color,
            "fillStyle": self.fill_style,
            "strokeWidth": self.stroke_width,
            "strokeStyle": self.stroke_style,
            "roughness": self.roughness,
            "opacity": self.opacity,
            "groupIds": [],
            "frameId": None,
            "index": self.index,
            "roundness": {"type": self.roundness} if self.roundness is not None else None,
            "seed": self.seed,
            "version": 1,
            "versionNonce": self.seed,
            "isDeleted": False,
            "boundElements": [{"id": b.id, "type": b.type} for b in self.bound_elements] or None,
            "updated": 1,
            "link": None,
            "locked": False,
        }

        if self.type == "text":
            data.update(
                {
                    "text": self.text,
                    "fontSize": self.font_size,
                    "fontFamily": FONT_FAMILY,
                    "textAlign": self.text_align,
                    "verticalAlign": self.vertical_align,
                    "containerId": None,
                    "originalText": self.text,
                    "autoResize": True,
                    "lineHeight": self.line_height,
                }
            )
        elif self.is_linear:
            data.update(
                {
                    "points": [list(p) for p in self.points],
                    "lastCommittedPoint": None,
                    "startBinding": self.start_binding.to_dict() if self.start_binding else None,
                    "endBinding": self.end_binding.to_dict() if self.end_binding else None,
                    "startArrowhead": self.start_arrowhead,
                    "endArrowhead": self.end_arrowhead,
                }
            )

        return data


@dataclass(frozen=True, slots=True)
class TextElementInfo:
    """(id, text) pair for a text element, embedded outside the drawing."""

    id: str
    text: str


@dataclass(slots=True)
class Scene:
    elements: list[Element] = field(default_factory=list)
    texts: list[TextElementInfo] = field(default_factory=list)
    width: float = 0
    height: float = 0
    # Theme name from the directive, passed on to the document layer
    theme: str | None = None

    def to_elements(self) -> list[dict[str, Any]]:
        return [el.to_dict() for el in self.elements]

    def by_id(self, element_id: str) -> Element | None:
        for el in self.elements:
            if el.id == element_id:
                return el
        return None


# ============================================================================
# Element factory — per-conversion seed, id and z-order state
# ============================================================================


def fractional_index(n: int) -> str:
    """n-th z-order key: a0..az, b00..bzz, c000..; strictly increasing."""
    if n < 0:
        raise ValueError(f"index must be non-negative, got {n}")

    digits = 1
    span = len(INDEX_DIGITS)
    while n >= span:
        n -= span
        digits += 1
        span *= len(INDEX_DIGITS)

    body = ""
    for _ in range(digits):
        n, r = divmod(n, len(INDEX_DIGITS))
        body = INDEX_DIGITS[r] + body

    return chr(ord("a") + digits - 1) + body


class ElementFactory:
    """Builds elements for one conversion.

    Seeds count up from the starting seed, ids come from a random generator
    seeded with the same value, and every element gets the next z-order key,
    so the same input always yields the same scene.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._next_seed = DEFAULT_SEED if seed is None else seed
        self._rng = random.Random(self._next_seed)
        self._ids: set[str] = set()
        self._count = 0

    def next_seed(self) -> int:
        seed = self._next_seed
        self._next_seed += 1
        return seed

    def next_id(self) -> str:
        while True:
            candidate = "".join(self._rng.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
            if candidate not in self._ids:
                self._ids.add(candidate)
                return candidate

    def next_index(self) -> str:
        key = fractional_index(self._count)
        self._count += 1
        return key

    def _base(self, type_: ElementType, x: float, y: float, width: float, height: float, **attrs) -> Element:
        return Element(
            id=self.next_id(),
            type=type_,
            x=x,
            y=y,
            width=width,
            height=height,
            index=self.next_index(),
            seed=self.next_seed(),
            **attrs,
        )

    # --- shapes ---

    def rectangle(self, x: float, y: float, width: float, height: float, **attrs) -> Element:
        return self._base("rectangle", x, y, width, height, **attrs)

    def ellipse(self, x: float, y: float, width: float, height: float, **attrs) -> Element:
        return self._base("ellipse", x, y, width, height, **attrs)

    # --- text ---

    def text(
        self,
        x: float,
        y: float,
        text: str,
        font_size: float = FONT_SIZES["node_label"],
        text_align: TextAlign = "center",
        vertical_align: VerticalAlign = "middle",
        color: str = TEXT_COLOR,
    ) -> Element:
        """Free-standing text; width and height are estimated from the characters."""
        return self._base(
            "text",
            x,
            y,
            estimate_text_width(text, font_size),
            estimate_text_height(text, font_size),
            stroke_color=color,
            text=text,
            font_size=font_size,
            text_align=text_align,
            vertical_align=vertical_align,
            line_height=LINE_HEIGHT,
        )

    # --- linear ---

    def line(self, points: list[Point], color: str = TEXT_COLOR, **attrs) -> Element:
        x, y, width, height, relative = _linear_geometry(points)
        return self._base(
            "line",
            x,
            y,
            width,
            height,
            stroke_color=color,
            stroke_width=STROKE_WIDTHS["decoration"],
            points=relative,
            **attrs,
        )

    def arrow(
        self,
        points: list[Point],
        start_binding: Binding | None = None,
        end_binding: Binding | None = None,
        start_arrowhead: Arrowhead | None = None,
        end_arrowhead: Arrowhead | None = "arrow",
        stroke_style: StrokeStyle = "solid",
    ) -> Element:
        x, y, width, height, relative = _linear_geometry(points)
        return self._base(
            "arrow",
            x,
            y,
            width,
            height,
            stroke_style=stroke_style,
            roundness=ROUND_LINEAR,
            points=relative,
            start_binding=start_binding,
            end_binding=end_binding,
            start_arrowhead=start_arrowhead,
            end_arrowhead=end_arrowhead,
        )


def _linear_geometry(
    points: list[Point],
) -> tuple[float, float, float, float, tuple[tuple[float, float], ...]]:
    """Anchor at the first point; width/height span every point."""
    if len(points) < 2:
        raise ValueError("linear elements need at least two points")

    origin = points[0]
    relative = tuple((p.x - origin.x, p.y - origin.y) for p in points)
    xs = [dx for dx, _ in relative]
    ys = [dy for _, dy in relative]
    return origin.x, origin.y, max(xs) - min(xs), max(ys) - min(ys), relative
