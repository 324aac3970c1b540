"""
Progressive overload suggestions.

Looks at an exercise's recent history (most recent session first) and decides
whether the lifter should add load, hold, or back off:

- READY      every working set of the last session reached the top of the
             target rep range
- ATTENTION  average RPE of the last session was 9+, reps fell below the
             bottom of the range (last two sessions), or the same top weight
             has been used for four sessions at high effort
- MAINTAIN   anything else
- NO_DATA    no history, or no set with both reps and weight logged

Sets without a weight count as zero load for volume but never count towards
"met the target". A missing RPE only switches off the RPE rules.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, assert_never

from app.schemas.exercise_set import SetEntry
from app.services.sets import HistoryEntry, summarize_sets


class ProgressionStatus(str, Enum):
    READY = "ready"            # increase weight/reps
    MAINTAIN = "maintain"      # on track, keep current load
    ATTENTION = "attention"    # stalled or too hard
    NO_DATA = "no_data"        # nothing to base a suggestion on


DEFAULT_REP_RANGE = (1, 15)
HIGH_RPE = 9
EASY_RPE = 6.5
PRODUCTIVE_RPE = 7.5
STALL_SESSIONS = 4
STALL_RPE = 8.5
TARGET_RPE = "7-8"
SMALL_INCREMENT = 2.5
LARGE_INCREMENT = 5.0
DELOAD = -5.0


@dataclass(frozen=True, slots=True)
class RepRange:
    low: int
    high: int


@dataclass(slots=True)
class Recommendation:
    weight_change: float = 0
    rep_change: int = 0
    target_rpe: str | None = None


@dataclass(slots=True)
class LastSessionSummary:
    date: date | None
    max_weight: float
    total_reps: int
    total_sets: int
    avg_reps: int
    avg_rpe: float | None


@dataclass(slots=True)
class ProgressionSuggestion:
    status: ProgressionStatus
    message: str
    short_message: str
    recommendation: Recommendation | None = None
    suggested_weight: float | None = None
    suggested_reps: int | None = None
    last_session_rpe: float | None = None
    rpe_trend: float = 0
    fatigue: str | None = None
    readiness: str | None = None
    sessions_analyzed: int = 0
    last_session: LastSessionSummary | None = None

    @property
    def weight_change(self) -> float:
        return self.recommendation.weight_change if self.recommendation else 0

    @property
    def rep_change(self) -> int:
        return self.recommendation.rep_change if self.recommendation else 0


@dataclass(slots=True)
class ProgressionCategories:
    ready_to_progress: list[Any] = field(default_factory=list)
    maintain: list[Any] = field(default_factory=list)
    needs_attention: list[Any] = field(default_factory=list)
    no_data: list[Any] = field(default_factory=list)


def _to_int(text: str) -> int | None:
    try:
        return int(text.strip())
    except ValueError:
        return None


def parse_rep_range(value: str | None) -> RepRange:
    """"8-12" -> (8, 12); "5" -> (4, 6); missing or garbage -> (1, 15)."""
    if not value or not value.strip():
        return RepRange(*DEFAULT_REP_RANGE)
    if "-" in value:
        lo_text, _, hi_text = value.partition("-")
        low = _to_int(lo_text) or DEFAULT_REP_RANGE[0]
        high = _to_int(hi_text) or DEFAULT_REP_RANGE[1]
        return RepRange(min(low, high), max(low, high))
    target = _to_int(value)
    if target is None:
        return RepRange(*DEFAULT_REP_RANGE)
    return RepRange(max(target - 1, 1), target + 1)


def working_sets(sets: Iterable[SetEntry]) -> list[SetEntry]:
    """Sets with both reps and weight logged."""
    return [s for s in sets if s.is_completed]


def summarize_last_session(entry: HistoryEntry) -> LastSessionSummary:
    summary = summarize_sets(entry.sets)
    avg_reps = round(summary.total_reps / summary.total_sets) if summary.total_sets else 0
    return LastSessionSummary(
        date=entry.date,
        max_weight=summary.max_weight,
        total_reps=summary.total_reps,
        total_sets=summary.total_sets,
        avg_reps=avg_reps,
        avg_rpe=summary.average_rpe,
    )


def _fell_short(sets: list[SetEntry], low: int) -> bool:
    return bool(sets) and all(s.reps < low for s in sets)


def is_below_range(history: list[HistoryEntry], low: int) -> bool:
    last = working_sets(history[0].sets)
    if not _fell_short(last, low):
        return False
    if len(history) > 1:
        previous = working_sets(history[1].sets)
        if previous and not _fell_short(previous, low):
            return False
    return True


def is_stalled(history: list[HistoryEntry]) -> bool:
    """Same top weight for the last four sessions with mean RPE >= 8.5."""
    if len(history) < STALL_SESSIONS:
        return False
    summaries = [summarize_sets(e.sets) for e in history[:STALL_SESSIONS]]
    if any(s.max_weight != summaries[0].max_weight for s in summaries):
        return False
    rpes = [s.average_rpe for s in summaries if s.average_rpe]
    if not rpes:
        return False
    return sum(rpes) / len(rpes) >= STALL_RPE


def rpe_trend(history: list[HistoryEntry]) -> float:
    """Change in average RPE between the two most recent rated sessions (positive = harder)."""
    rated = [
        summarize_sets(e.sets).average_rpe
        for e in history
        if any(s.rpe for s in e.sets)
    ][:3]
    if len(rated) < 2:
        return 0
    return round(rated[0] - rated[1], 1)


def _fatigue(avg_rpe: float | None) -> str | None:
    if avg_rpe is None:
        return None
    if avg_rpe >= 8.5:
        return "high"
    return "moderate" if avg_rpe >= 7 else "low"


def _readiness(avg_rpe: float | None) -> str | None:
    if avg_rpe is None:
        return None
    if avg_rpe <= 7:
        return "good"
    return "moderate" if avg_rpe <= 8.5 else "poor"


def _decide(
    history: list[HistoryEntry],
    working: list[SetEntry],
    rep_range: RepRange,
    avg_rpe: float | None,
) -> tuple[ProgressionStatus, str, str, Recommendation]:
    if avg_rpe is not None and avg_rpe >= HIGH_RPE:
        return (
            ProgressionStatus.ATTENTION,
            "RPE too high - reduce weight to improve form",
            "Consider deload",
            Recommendation(weight_change=DELOAD, rep_change=0, target_rpe=TARGET_RPE),
        )
    if is_below_range(history, rep_range.low):
        return (
            ProgressionStatus.ATTENTION,
            f"Reps below the {rep_range.low}-{rep_range.high} target - reduce weight",
            "Below range",
            Recommendation(weight_change=DELOAD, rep_change=0, target_rpe=TARGET_RPE),
        )
    if is_stalled(history):
        return (
            ProgressionStatus.ATTENTION,
            f"Same weight for {STALL_SESSIONS} sessions at high effort - consider a deload",
            "Stalled",
            Recommendation(weight_change=DELOAD, rep_change=0, target_rpe=TARGET_RPE),
        )
    if all(s.reps >= rep_range.high for s in working):
        easy = avg_rpe is not None and avg_rpe <= EASY_RPE
        bump = LARGE_INCREMENT if easy else SMALL_INCREMENT
        message = (
            "RPE too low - increase weight and reset reps"
            if easy
            else "Top of the rep range reached - increase weight and reset reps"
        )
        return (
            ProgressionStatus.READY,
            message,
            f"+{bump:g}kg",
            Recommendation(
                weight_change=bump,
                rep_change=-(working[-1].reps - rep_range.low),
                target_rpe=TARGET_RPE,
            ),
        )
    if avg_rpe is not None and avg_rpe <= PRODUCTIVE_RPE:
        return (
            ProgressionStatus.MAINTAIN,
            "Good RPE - add one more rep",
            "+1 rep",
            Recommendation(weight_change=0, rep_change=1, target_rpe=TARGET_RPE),
        )
    return (
        ProgressionStatus.MAINTAIN,
        "Good intensity - maintain weight and reps",
        "On track",
        Recommendation(target_rpe=TARGET_RPE if avg_rpe is not None else None),
    )


def get_progression_suggestion(
    history: Iterable[HistoryEntry] | None,
    target_rep_range: str | None = None,
    current_weight: float = 0,
) -> ProgressionSuggestion:
    """
    history: past sessions of one exercise, most recent first.
    target_rep_range: "lo-hi" (or a single target); defaults to 1-15.
    current_weight: fallback load when the last session has no weighted set.
    """
    history = list(history or [])
    if not history:
        return ProgressionSuggestion(
            status=ProgressionStatus.NO_DATA,
            message="Need more sessions for suggestions",
            short_message="Not enough data",
        )

    last_session = summarize_last_session(history[0])
    working = working_sets(history[0].sets)
    if not working:
        return ProgressionSuggestion(
            status=ProgressionStatus.NO_DATA,
            message="Log reps and weight to get suggestions",
            short_message="No working sets",
            sessions_analyzed=len(history),
            last_session=last_session,
        )

    avg_rpe = last_session.avg_rpe
    status, message, short_message, rec = _decide(
        history, working, parse_rep_range(target_rep_range), avg_rpe
    )
    base_weight = last_session.max_weight or current_weight
    suggested_reps = (
        max(last_session.avg_reps + rec.rep_change, 1) if last_session.avg_reps else None
    )
    return ProgressionSuggestion(
        status=status,
        message=message,
        short_message=short_message,
        recommendation=rec,
        suggested_weight=max(base_weight + rec.weight_change, 0),
        suggested_reps=suggested_reps,
        last_session_rpe=avg_rpe,
        rpe_trend=rpe_trend(history),
        fatigue=_fatigue(avg_rpe),
        readiness=_readiness(avg_rpe),
        sessions_analyzed=len(history),
        last_session=last_session,
    )


def _status_of(item: Any) -> ProgressionStatus:
    raw = item["status"] if isinstance(item, Mapping) else item.status
    # ValueError for anything outside the enum
    return ProgressionStatus(raw)


def categorize_exercises(items: Iterable[Any]) -> ProgressionCategories:
    """Bucket records carrying a `status` (mapping key or attribute)."""
    categories = ProgressionCategories()
    for item in items:
        status = _status_of(item)
        match status:
            case ProgressionStatus.READY:
                categories.ready_to_progress.append(item)
            case ProgressionStatus.MAINTAIN:
                categories.maintain.append(item)
            case ProgressionStatus.ATTENTION:
                categories.needs_attention.append(item)
            case ProgressionStatus.NO_DATA:
                categories.no_data.append(item)
            case _:
                assert_never(status)
    return categories


def format_suggestion_text(suggestion: ProgressionSuggestion | None) -> str:
    if suggestion is None or suggestion.status is ProgressionStatus.NO_DATA:
        return "Complete more sessions to get suggestions"

    last = suggestion.last_session
    if last is None:
        return suggestion.message

    text = f"Last: {last.max_weight:g}kg x {last.avg_reps}"
    if suggestion.last_session_rpe:
        text += f" @ RPE {suggestion.last_session_rpe:g}"

    if suggestion.weight_change > 0:
        text += f" -> Try {last.max_weight + suggestion.weight_change:g}kg"
    elif suggestion.rep_change > 0:
        text += f" -> Aim for {last.avg_reps + suggestion.rep_change} reps"
    elif suggestion.weight_change < 0:
        text += f" -> Consider {last.max_weight + suggestion.weight_change:g}kg (deload)"
    return text
