# statcard/services/layout.py
"""
Layout builder: turns UserStats plus the synthetic series into a CardLayout.

The CardLayout is a tree of positioned, styled elements with every coordinate,
colour and string already resolved, so a renderer only has to paint it.
Children are listed back-to-front. Positions come from fixed margins and sizes;
long text is not measured and may overflow its box.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from statcard.core.models import MonthlySample, UserStats
from statcard.utils.synthetic import HEATMAP_SIZE

CANVAS_WIDTH = 1200
CANVAS_HEIGHT = 800
ERROR_WIDTH = 800
ERROR_HEIGHT = 400

VARIANTS = ("cards", "bars", "area")
THEMES = ("dark", "light", "neon")

BACKGROUND_STOPS = ("#0f172a", "#1e293b", "#0f172a")
ERROR_BACKGROUND = "#dc2626"
WHITE = "#ffffff"
MUTED = "#94a3b8"
EMERALD = "#10b981"
BLUE = "#3b82f6"
PURPLE = "#8b5cf6"

PADDING = 40
CARD_WIDTH = 250
CARD_HEIGHT = 150
CARD_RADIUS = 12
SECTION_GAP = 40
ICON_BOX = 44
ICON_TINT = 0x20 / 0xFF  # accent + "20" hex alpha
MAX_BAR_HEIGHT = 200
HEATMAP_CELL = 32
HEATMAP_GAP = 6
FOOTER_HEIGHT = 40

KIND_CONTAINER = "container"
KIND_HEADING = "heading"
KIND_PARAGRAPH = "paragraph"
KIND_RECTANGLE = "rectangle"
KIND_LINE_PATH = "line-path"
KIND_POINT_MARKER = "point-marker"
KIND_TEXT_LABEL = "text-label"

Point = Tuple[float, float]


@dataclass(frozen=True)
class Gradient:
    stops: Tuple[str, ...]
    direction: str = "diagonal"  # or "vertical"


@dataclass(frozen=True)
class Style:
    fill: Optional[str] = None
    gradient: Optional[Gradient] = None
    stroke: Optional[str] = None
    stroke_width: float = 0
    stroke_opacity: float = 1.0
    radius: float = 0
    font_size: Optional[int] = None
    font_weight: str = "normal"
    text_color: Optional[str] = None
    text_align: str = "left"
    opacity: float = 1.0


@dataclass(frozen=True)
class VisualElement:
    kind: str
    x: float
    y: float
    width: float
    height: float
    style: Style = field(default_factory=Style)
    text: Optional[str] = None
    points: Tuple[Point, ...] = ()
    children: Tuple["VisualElement", ...] = ()

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(frozen=True)
class CardLayout:
    width: int
    height: int
    root: VisualElement
    # accepted for API compatibility; no colour or size depends on it yet
    theme: str = "dark"

    def find(self, kind: str) -> List[VisualElement]:
        return [e for e in self.root.walk() if e.kind == kind]


@dataclass(frozen=True)
class StatCard:
    title: str
    value: int
    icon: str
    color: str


def _text(kind: str, x, y, width, height, text: str, size: int, color: str,
          weight: str = "normal", align: str = "left") -> VisualElement:
    return VisualElement(
        kind=kind, x=x, y=y, width=width, height=height, text=text,
        style=Style(font_size=size, font_weight=weight, text_color=color, text_align=align),
    )


def _panel(x, y, width, height, children=()) -> VisualElement:
    style = Style(fill=WHITE, opacity=0.05, stroke=WHITE, stroke_width=1, stroke_opacity=0.1, radius=CARD_RADIUS)
    return VisualElement(KIND_RECTANGLE, x, y, width, height, style=style, children=tuple(children))


def stat_cards(stats: UserStats) -> List[StatCard]:
    return [
        StatCard("Total Commits", stats.estimated_total_commits, "📈", EMERALD),
        StatCard("Avg per Month", stats.estimated_avg_commits_per_month, "📅", BLUE),
        StatCard("Peak Month", stats.estimated_peak_month_commits, "⚡", PURPLE),
    ]


def _title_block(stats: UserStats, width: float) -> Tuple[VisualElement, float]:
    inner = width - 2 * PADDING
    heading = _text(KIND_HEADING, PADDING, PADDING, inner, 50, "GitHub Activity", 42, WHITE,
                    weight="bold", align="center")
    subtitle = _text(KIND_PARAGRAPH, PADDING, PADDING + 60, inner, 24,
                     f"@{stats.username} · a visual journey through code contributions", 18, MUTED,
                     align="center")
    block = VisualElement(KIND_CONTAINER, PADDING, PADDING, inner, 84, children=(heading, subtitle))
    return block, PADDING + 84 + SECTION_GAP


def _card_row(stats: UserStats, width: float, top: float) -> Tuple[VisualElement, float]:
    inner = width - 2 * PADDING
    cards = stat_cards(stats)
    step = (inner - CARD_WIDTH) / (len(cards) - 1)
    elements = []
    for i, card in enumerate(cards):
        x = PADDING + i * step
        bubble = VisualElement(
            KIND_RECTANGLE, x + 20, top + 20, ICON_BOX, ICON_BOX,
            style=Style(fill=card.color, opacity=ICON_TINT, radius=8),
            children=(_text(KIND_TEXT_LABEL, x + 20, top + 28, ICON_BOX, 28, card.icon, 24, card.color,
                            align="center"),),
        )
        value = _text(KIND_HEADING, x + 20, top + 76, CARD_WIDTH - 40, 36, str(card.value), 32, WHITE,
                      weight="bold")
        label = _text(KIND_PARAGRAPH, x + 20, top + 116, CARD_WIDTH - 40, 18, card.title, 14, MUTED)
        elements.append(_panel(x, top, CARD_WIDTH, CARD_HEIGHT, (bubble, value, label)))
    row = VisualElement(KIND_CONTAINER, PADDING, top, inner, CARD_HEIGHT, children=tuple(elements))
    return row, top + CARD_HEIGHT + SECTION_GAP


def bar_heights(monthly: Sequence[MonthlySample], max_height: float = MAX_BAR_HEIGHT) -> List[float]:
    peak = max((s.commits for s in monthly), default=0)
    if peak <= 0:
        return [0.0 for _ in monthly]
    return [s.commits / peak * max_height for s in monthly]


def _chart(monthly: Sequence[MonthlySample], x, y, width, height, area: bool) -> VisualElement:
    heading = _text(KIND_HEADING, x + 20, y + 20, width - 40, 24, "Monthly Commits", 18, WHITE, weight="bold")
    left = x + 40
    plot_width = width - 80
    baseline = y + 70 + MAX_BAR_HEIGHT
    slot = plot_width / len(monthly)
    heights = bar_heights(monthly)

    children: List[VisualElement] = [heading]
    labels = [
        _text(KIND_TEXT_LABEL, left + i * slot, baseline + 12, slot, 16, s.month, 13, MUTED, align="center")
        for i, s in enumerate(monthly)
    ]
    axis = VisualElement(
        KIND_LINE_PATH, left, baseline, plot_width, 0,
        points=((left, baseline), (left + plot_width, baseline)),
        style=Style(stroke=WHITE, stroke_width=1, stroke_opacity=0.1),
    )

    if not area:
        bar_width = slot * 0.6
        children.append(axis)
        for i, h in enumerate(heights):
            bx = left + i * slot + (slot - bar_width) / 2
            children.append(VisualElement(
                KIND_RECTANGLE, bx, baseline - h, bar_width, h,
                style=Style(gradient=Gradient((BLUE, PURPLE), "vertical"), radius=4),
            ))
    else:
        points = tuple((left + i * slot + slot / 2, baseline - h) for i, h in enumerate(heights))
        first_x, last_x = points[0][0], points[-1][0]
        fill = VisualElement(
            KIND_LINE_PATH, first_x, y + 70, last_x - first_x, MAX_BAR_HEIGHT,
            points=points + ((last_x, baseline), (first_x, baseline)),
            style=Style(fill=BLUE, opacity=0.2),
        )
        line = VisualElement(
            KIND_LINE_PATH, first_x, y + 70, last_x - first_x, MAX_BAR_HEIGHT,
            points=points, style=Style(stroke=BLUE, stroke_width=3),
        )
        children.extend([fill, axis, line])
        for px, py in points:
            children.append(VisualElement(
                KIND_POINT_MARKER, px - 5, py - 5, 10, 10,
                style=Style(fill=BLUE, stroke=WHITE, stroke_width=2, radius=5),
            ))

    children.extend(labels)
    return _panel(x, y, width, height, children)


def heatmap_cell_style(intensity: float, accent: str = EMERALD) -> Style:
    if intensity > 0.7:
        return Style(fill=accent, radius=4)
    if intensity > 0.4:
        return Style(fill=accent, opacity=0.6, radius=4)
    if intensity > 0.2:
        return Style(fill=accent, opacity=0.3, radius=4)
    return Style(fill=WHITE, opacity=0.05, radius=4)


def _heatmap(intensities: Sequence[float], x, y, width, height) -> VisualElement:
    # cosmetic filler: intensities are random, not real activity
    heading = _text(KIND_HEADING, x + 20, y + 20, width - 40, 24, "Activity Heatmap", 18, WHITE, weight="bold")
    grid = HEATMAP_SIZE * HEATMAP_CELL + (HEATMAP_SIZE - 1) * HEATMAP_GAP
    gx = x + (width - grid) / 2
    gy = y + 64
    cells = []
    for i, value in enumerate(intensities):
        row, col = divmod(i, HEATMAP_SIZE)
        cells.append(VisualElement(
            KIND_RECTANGLE,
            gx + col * (HEATMAP_CELL + HEATMAP_GAP),
            gy + row * (HEATMAP_CELL + HEATMAP_GAP),
            HEATMAP_CELL, HEATMAP_CELL,
            style=heatmap_cell_style(value),
        ))
    return _panel(x, y, width, height, [heading] + cells)


def _footer(stats: UserStats, width: float, top: float) -> VisualElement:
    inner = width - 2 * PADDING
    slot = inner / 3
    readouts = [
        f"⭐ {stats.total_stars} Stars",
        f"📦 {stats.public_repo_count} Repositories",
        f"👥 {stats.followers} Followers",
    ]
    labels = tuple(
        _text(KIND_TEXT_LABEL, PADDING + i * slot, top + 8, slot, 24, t, 20, MUTED, align="center")
        for i, t in enumerate(readouts)
    )
    return VisualElement(KIND_CONTAINER, PADDING, top, inner, FOOTER_HEIGHT, children=labels)


def build_layout(
    stats: UserStats,
    monthly: Sequence[MonthlySample],
    width: int = CANVAS_WIDTH,
    height: int = CANVAS_HEIGHT,
    theme: str = "dark",
    variant: str = "bars",
    heatmap: Optional[Sequence[float]] = None,
) -> CardLayout:
    if variant not in VARIANTS:
        raise ValueError(f"unknown variant {variant!r}")
    if len(monthly) != 12:
        raise ValueError(f"expected 12 monthly samples, got {len(monthly)}")
    if variant == "area" and (heatmap is None or len(heatmap) != HEATMAP_SIZE * HEATMAP_SIZE):
        raise ValueError(f"area variant needs {HEATMAP_SIZE * HEATMAP_SIZE} heatmap intensities")

    title, top = _title_block(stats, width)
    cards, top = _card_row(stats, width, top)
    children = [title, cards]

    inner = width - 2 * PADDING
    if variant == "bars":
        chart_height = height - top - PADDING - FOOTER_HEIGHT - 20
        children.append(_chart(monthly, PADDING, top, inner, chart_height, area=False))
        children.append(_footer(stats, width, top + chart_height + 20))
    elif variant == "area":
        chart_height = height - top - PADDING
        panel_width = 340
        chart_width = inner - panel_width - SECTION_GAP
        children.append(_chart(monthly, PADDING, top, chart_width, chart_height, area=True))
        children.append(_heatmap(heatmap, PADDING + chart_width + SECTION_GAP, top, panel_width, chart_height))

    root = VisualElement(
        KIND_CONTAINER, 0, 0, width, height,
        style=Style(gradient=Gradient(BACKGROUND_STOPS, "diagonal")),
        children=tuple(children),
    )
    return CardLayout(width=width, height=height, root=root, theme=theme)


def build_error_layout(message: str = "Error: User not found") -> CardLayout:
    label = _text(KIND_TEXT_LABEL, 0, ERROR_HEIGHT / 2 - 24, ERROR_WIDTH, 48, message, 40, WHITE,
                  weight="bold", align="center")
    root = VisualElement(KIND_CONTAINER, 0, 0, ERROR_WIDTH, ERROR_HEIGHT,
                         style=Style(fill=ERROR_BACKGROUND), children=(label,))
    return CardLayout(width=ERROR_WIDTH, height=ERROR_HEIGHT, root=root)
