# statcard/utils/synthetic.py
"""
Placeholder data for the chart and heatmap.

Nothing here comes from real commit history: the monthly series and the
heatmap intensities are random filler, regenerated on every request so the
card does not need the (much heavier) commits/events endpoints. The generator
is always passed in, so tests can hand over a seeded `random.Random`.
"""
import random
from typing import List

from statcard.core.models import MonthlySample
from statcard.utils.time import MONTH_LABELS

COMMITS_MIN = 10
COMMITS_MAX = 39
HEATMAP_SIZE = 7


def generate_monthly_samples(rng: random.Random) -> List[MonthlySample]:
    return [MonthlySample(month=m, commits=rng.randint(COMMITS_MIN, COMMITS_MAX)) for m in MONTH_LABELS]


def generate_heatmap_intensities(rng: random.Random) -> List[float]:
    return [rng.random() for _ in range(HEATMAP_SIZE * HEATMAP_SIZE)]
