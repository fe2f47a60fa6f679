import random

import pytest

from statcard.core.models import MonthlySample
from statcard.services import layout as L
from statcard.services.stats import aggregate
from statcard.utils.synthetic import generate_heatmap_intensities, generate_monthly_samples
from statcard.utils.time import MONTH_LABELS


def make_stats(public_repos=10):
    user = {"login": "octocat", "name": "The Octocat", "followers": 12, "following": 1, "public_repos": public_repos}
    repos = [{"name": "a", "stargazers_count": 4, "forks_count": 1, "language": "Python"},
             {"name": "b", "stargazers_count": 6, "forks_count": 0, "language": None}]
    return aggregate(user, repos)


def make_monthly(values=None):
    values = values or [10, 20, 30, 40, 15, 25, 35, 39, 12, 22, 32, 11]
    return [MonthlySample(m, v) for m, v in zip(MONTH_LABELS, values)]


def texts(layout):
    return [e.text for e in layout.root.walk() if e.text]


def test_root_fills_canvas_with_dark_gradient():
    layout = L.build_layout(make_stats(), make_monthly())
    root = layout.root
    assert (layout.width, layout.height) == (1200, 800)
    assert (root.kind, root.x, root.y, root.width, root.height) == ("container", 0, 0, 1200, 800)
    assert root.style.gradient.stops == ("#0f172a", "#1e293b", "#0f172a")


def test_title_block_is_centered_and_mentions_user():
    layout = L.build_layout(make_stats(), make_monthly())
    title = layout.root.children[0]
    heading, subtitle = title.children
    assert heading.kind == "heading" and heading.text == "GitHub Activity"
    assert heading.style.text_align == "center"
    assert heading.x + heading.width / 2 == layout.width / 2
    assert "octocat" in subtitle.text


def test_three_stat_cards_in_fixed_order():
    layout = L.build_layout(make_stats(public_repos=10), make_monthly())
    row = layout.root.children[1]
    assert len(row.children) == 3
    values = [card.children[1].text for card in row.children]
    titles = [card.children[2].text for card in row.children]
    colors = [card.children[0].style.fill for card in row.children]
    assert values == ["150", "13", "33"]
    assert titles == ["Total Commits", "Avg per Month", "Peak Month"]
    assert colors == ["#10b981", "#3b82f6", "#8b5cf6"]
    assert [card.children[0].children[0].text for card in row.children] == ["📈", "📅", "⚡"]


def test_stat_cards_are_evenly_spaced_inside_margins():
    row = L.build_layout(make_stats(), make_monthly()).root.children[1]
    xs = [card.x for card in row.children]
    assert xs[0] == L.PADDING
    assert xs[1] - xs[0] == pytest.approx(xs[2] - xs[1])
    assert xs[2] + L.CARD_WIDTH == pytest.approx(1200 - L.PADDING)


def bars_of(layout):
    chart = layout.root.children[2]
    return [e for e in chart.children if e.kind == "rectangle"]


def test_bar_heights_scale_to_max_sample():
    monthly = make_monthly()
    bars = bars_of(L.build_layout(make_stats(), monthly))
    peak = max(s.commits for s in monthly)
    assert len(bars) == 12
    for bar, sample in zip(bars, monthly):
        assert bar.height == pytest.approx(sample.commits / peak * L.MAX_BAR_HEIGHT)
    assert max(b.height for b in bars) == L.MAX_BAR_HEIGHT


def test_bars_share_a_baseline_and_equal_slots():
    bars = bars_of(L.build_layout(make_stats(), make_monthly()))
    baselines = {round(b.y + b.height, 6) for b in bars}
    assert len(baselines) == 1
    gaps = [round(b2.x - b1.x, 6) for b1, b2 in zip(bars, bars[1:])]
    assert len(set(gaps)) == 1


def test_month_labels_in_calendar_order():
    chart = L.build_layout(make_stats(), make_monthly()).root.children[2]
    labels = [e.text for e in chart.children if e.kind == "text-label"]
    assert labels == list(MONTH_LABELS)


def test_all_zero_series_has_flat_bars():
    bars = bars_of(L.build_layout(make_stats(), make_monthly([0] * 12)))
    assert all(b.height == 0 for b in bars)


def test_bars_variant_footer_readouts():
    layout = L.build_layout(make_stats(), make_monthly(), variant="bars")
    footer = layout.root.children[3]
    assert [e.text for e in footer.children] == ["⭐ 10 Stars", "📦 10 Repositories", "👥 12 Followers"]
    assert footer.y + footer.height <= layout.height


def test_cards_variant_has_no_chart():
    layout = L.build_layout(make_stats(), make_monthly(), variant="cards")
    assert len(layout.root.children) == 2
    assert layout.find("line-path") == []


def test_area_variant_line_markers_and_heatmap():
    heatmap = [0.9, 0.5, 0.3, 0.1] * 12 + [0.71]
    layout = L.build_layout(make_stats(), make_monthly(), variant="area", heatmap=heatmap)
    chart, panel = layout.root.children[2:]
    markers = [e for e in chart.children if e.kind == "point-marker"]
    paths = [e for e in chart.children if e.kind == "line-path"]
    assert len(markers) == 12
    line = [p for p in paths if p.style.stroke == L.BLUE][0]
    assert len(line.points) == 12
    peak_y = min(y for _, y in line.points)
    baseline = max(y for _, y in paths[0].points)
    assert baseline - peak_y == pytest.approx(L.MAX_BAR_HEIGHT)

    cells = [e for e in panel.children if e.kind == "rectangle"]
    assert len(cells) == 49
    assert (cells[0].style.fill, cells[0].style.opacity) == (L.EMERALD, 1.0)
    assert (cells[1].style.fill, cells[1].style.opacity) == (L.EMERALD, 0.6)
    assert (cells[2].style.fill, cells[2].style.opacity) == (L.EMERALD, 0.3)
    assert (cells[3].style.fill, cells[3].style.opacity) == (L.WHITE, 0.05)
    assert chart.x + chart.width < panel.x
    assert panel.x + panel.width == pytest.approx(1200 - L.PADDING)


@pytest.mark.parametrize("value, opacity", [(1.0, 1.0), (0.7, 0.6), (0.4, 0.3), (0.2, 0.05), (0.0, 0.05)])
def test_heatmap_threshold_boundaries(value, opacity):
    assert L.heatmap_cell_style(value).opacity == opacity


def test_area_variant_requires_heatmap():
    with pytest.raises(ValueError):
        L.build_layout(make_stats(), make_monthly(), variant="area")
    with pytest.raises(ValueError):
        L.build_layout(make_stats(), make_monthly(), variant="area", heatmap=[0.5] * 10)


def test_rejects_wrong_sample_count_and_variant():
    with pytest.raises(ValueError):
        L.build_layout(make_stats(), make_monthly()[:11])
    with pytest.raises(ValueError):
        L.build_layout(make_stats(), make_monthly(), variant="pie")


def test_layout_is_deterministic():
    stats, monthly = make_stats(), make_monthly()
    heatmap = generate_heatmap_intensities(random.Random(7))
    assert L.build_layout(stats, monthly, variant="area", heatmap=heatmap) == \
        L.build_layout(stats, monthly, variant="area", heatmap=heatmap)


def test_theme_is_recorded_but_inert():
    stats, monthly = make_stats(), make_monthly()
    dark = L.build_layout(stats, monthly, theme="dark")
    neon = L.build_layout(stats, monthly, theme="neon")
    assert neon.theme == "neon"
    assert dark.root == neon.root


def test_error_layout():
    layout = L.build_error_layout()
    assert (layout.width, layout.height) == (800, 400)
    assert layout.root.style.fill == L.ERROR_BACKGROUND
    assert texts(layout) == ["Error: User not found"]


def test_synthetic_generators_with_seeded_rng():
    monthly = generate_monthly_samples(random.Random(1))
    assert [s.month for s in monthly] == list(MONTH_LABELS)
    assert all(10 <= s.commits <= 39 for s in monthly)
    assert monthly == generate_monthly_samples(random.Random(1))
    heat = generate_heatmap_intensities(random.Random(1))
    assert len(heat) == 49 and all(0 <= v < 1 for v in heat)
