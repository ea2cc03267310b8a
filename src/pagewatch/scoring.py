"""Scoring engine: turn a population of issues into one 0-100 score.

Each severity tier contributes ``weight * ln(1 + count)``, so the Nth issue
of a tier always costs less than the one before it.  The summed penalty is
scaled, subtracted from 100, clamped and rounded:

    score = round(clamp(100 - k * sum_s(w_s * ln(1 + n_s)), 0, 100))

With the default ``k = 2.5`` a lone critical issue scores 83 (B), a lone
minor issue 98 (A) and ten critical issues 40 (D).

Only severity counts enter the formula, which is why scoring a list of issues
and scoring its summary yield identical results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Union

import numpy as np

from .models import SEVERITY_WEIGHTS, Category, Issue, ScanSummary, Severity, summarize

DEFAULT_SCALE_FACTOR = 2.5

# Fixed order so the weight and count vectors line up.
_SEVERITY_ORDER = (Severity.CRITICAL, Severity.SERIOUS, Severity.MODERATE, Severity.MINOR)
_WEIGHTS = np.array([SEVERITY_WEIGHTS[s] for s in _SEVERITY_ORDER], dtype=float)


@dataclass(frozen=True)
class ScoreResult:
    score: int  # 0-100
    grade: str  # A | B | C | D | F
    color: str  # #RRGGBB
    label: str

    def to_dict(self) -> dict[str, object]:
        return {"score": self.score, "grade": self.grade, "color": self.color, "label": self.label}


# (lower bound, grade, color, label), highest band first
GRADE_BANDS: tuple[tuple[int, str, str, str], ...] = (
    (90, "A", "#00C853", "Excellent"),
    (75, "B", "#64DD17", "Good"),
    (50, "C", "#FFD600", "Needs Work"),
    (25, "D", "#FF9100", "Poor"),
    (0, "F", "#FF3D00", "Critical"),
)


def grade_for(score: int) -> ScoreResult:
    """Attach grade, color and label to an integer score."""
    for lower, grade, color, label in GRADE_BANDS:
        if score >= lower:
            return ScoreResult(score=score, grade=grade, color=color, label=label)
    _, grade, color, label = GRADE_BANDS[-1]
    return ScoreResult(score=score, grade=grade, color=color, label=label)


def _score_counts(counts: Mapping[Severity, int], scale_factor: float) -> ScoreResult:
    vector = np.array([max(0, int(counts.get(s, 0))) for s in _SEVERITY_ORDER], dtype=float)
    if not vector.any():
        return grade_for(100)

    penalty = float(np.dot(_WEIGHTS, np.log1p(vector)))
    raw = float(np.clip(100.0 - scale_factor * penalty, 0.0, 100.0))
    # Half-up rounding; Python's round() would send 72.5 to 72.
    return grade_for(int(np.floor(raw + 0.5)))


def score_issues(issues: Iterable[Issue], scale_factor: float = DEFAULT_SCALE_FACTOR) -> ScoreResult:
    return _score_counts(summarize(issues).by_severity, scale_factor)


def score_summary(summary: ScanSummary, scale_factor: float = DEFAULT_SCALE_FACTOR) -> ScoreResult:
    return _score_counts(summary.by_severity, scale_factor)


def score(
    subject: Union[ScanSummary, Iterable[Issue]],
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> ScoreResult:
    """Score either a summary or an iterable of issues."""
    if isinstance(subject, ScanSummary):
        return score_summary(subject, scale_factor)
    return score_issues(subject, scale_factor)


def get_score_breakdown(
    issues: Iterable[Issue],
    scale_factor: float = DEFAULT_SCALE_FACTOR,
) -> dict[Category, ScoreResult]:
    """Score each category independently.

    Categories without issues are absent from the result rather than
    reported as 100.
    """
    by_category: dict[Category, list[Issue]] = {}
    for issue in issues:
        by_category.setdefault(issue.category, []).append(issue)

    return {
        category: score_issues(category_issues, scale_factor)
        for category, category_issues in by_category.items()
    }
