# app/calculation.py
from __future__ import annotations
from dataclasses import dataclass
import math

from app.errors import ScoringInputError


@dataclass(frozen=True)
class ScoringWeights:
    """
    Tunable constants of the marks formula.

    marks = max_marks * accuracy_weight * (accuracy / 100) ** accuracy_exponent
          + max_marks * speed_weight * min(wpm / target_wpm, speed_cap)
    """
    accuracy_weight: float = 0.75
    speed_weight: float = 0.25
    accuracy_exponent: float = 2.5
    speed_cap: float = 1.1
    chars_per_word: int = 5
    min_elapsed_seconds: float = 0.5


DEFAULT_WEIGHTS = ScoringWeights()
# earlier revision of the formula
LEGACY_WEIGHTS = ScoringWeights(accuracy_weight=0.7, speed_weight=0.3, accuracy_exponent=2.0, speed_cap=1.5)


@dataclass(frozen=True)
class Score:
    wpm: int
    accuracy: int
    current_marks: int


@dataclass(frozen=True)
class TypingStats:
    wpm: int = 0
    accuracy: int = 100
    errors: int = 0
    total_chars: int = 0
    time_elapsed_seconds: float = 0.0
    current_marks: int = 0


@dataclass(frozen=True)
class Grade:
    letter: str
    label: str


_GRADES = [
    (90, Grade("A+", "Distinction (A+)")),
    (80, Grade("A", "Excellent (A)")),
    (70, Grade("B", "Very Good (B)")),
    (60, Grade("C", "Good (C)")),
    (50, Grade("D", "Pass (D)")),
]
_LOWEST_GRADE = Grade("E", "Needs Practice (E)")


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _check_inputs(match_count, error_count, total_typed_chars, elapsed_seconds, target_wpm, max_marks, cursor):
    for name, value in (
        ("match_count", match_count),
        ("error_count", error_count),
        ("total_typed_chars", total_typed_chars),
        ("cursor", cursor),
    ):
        if value < 0:
            raise ScoringInputError(f"{name} must be >= 0, got {value}")
    if elapsed_seconds < 0:
        raise ScoringInputError(f"elapsed_seconds must be >= 0, got {elapsed_seconds}")
    if target_wpm <= 0:
        raise ScoringInputError(f"target_wpm must be > 0, got {target_wpm}")
    if max_marks <= 0:
        raise ScoringInputError(f"max_marks must be > 0, got {max_marks}")
    if match_count > max(total_typed_chars, cursor):
        raise ScoringInputError("match_count cannot exceed the typed or aligned length")


def accuracy_percent(match_count: int, total_typed_chars: int, cursor: int = 0) -> int:
    # skips push the cursor past the typed length, so they still cost accuracy
    denominator = max(total_typed_chars, cursor)
    if denominator == 0:
        return 100
    return round_half_up(match_count / denominator * 100)


def words_per_minute(match_count: int, elapsed_seconds: float, weights: ScoringWeights = DEFAULT_WEIGHTS) -> int:
    """Only matched characters count, 5 characters to a word."""
    seconds = max(weights.min_elapsed_seconds, elapsed_seconds)
    return round_half_up((match_count / weights.chars_per_word) / (seconds / 60.0))


def calculate_marks(wpm: int, accuracy: int, target_wpm: float, max_marks: int,
                    weights: ScoringWeights = DEFAULT_WEIGHTS) -> int:
    acc_points = max_marks * weights.accuracy_weight * (accuracy / 100.0) ** weights.accuracy_exponent
    speed_points = max_marks * weights.speed_weight * min(wpm / target_wpm, weights.speed_cap)
    return max(0, min(round_half_up(acc_points + speed_points), max_marks))


def score(match_count: int, error_count: int, total_typed_chars: int, elapsed_seconds: float,
          target_wpm: float, max_marks: int, cursor: int = 0,
          weights: ScoringWeights = DEFAULT_WEIGHTS) -> Score:
    _check_inputs(match_count, error_count, total_typed_chars, elapsed_seconds, target_wpm, max_marks, cursor)

    accuracy = accuracy_percent(match_count, total_typed_chars, cursor)
    wpm = words_per_minute(match_count, elapsed_seconds, weights)
    if total_typed_chars == 0:
        marks = 0
    else:
        marks = calculate_marks(wpm, accuracy, target_wpm, max_marks, weights)
    return Score(wpm=wpm, accuracy=accuracy, current_marks=marks)


def build_stats(result, total_typed_chars: int, elapsed_seconds: float, target_wpm: float,
                max_marks: int, weights: ScoringWeights = DEFAULT_WEIGHTS) -> TypingStats:
    """Combine an AlignmentResult with the clock reading into a fresh TypingStats."""
    s = score(
        result.match_count,
        result.error_count,
        total_typed_chars,
        elapsed_seconds,
        target_wpm,
        max_marks,
        cursor=result.cursor,
        weights=weights,
    )
    return TypingStats(
        wpm=s.wpm,
        accuracy=s.accuracy,
        errors=result.error_count,
        total_chars=total_typed_chars,
        time_elapsed_seconds=max(weights.min_elapsed_seconds, elapsed_seconds),
        current_marks=s.current_marks,
    )


def grade(marks: int, max_marks: int) -> Grade:
    if max_marks <= 0:
        raise ScoringInputError(f"max_marks must be > 0, got {max_marks}")
    percentage = marks / max_marks * 100
    for threshold, g in _GRADES:
        if percentage >= threshold:
            return g
    return _LOWEST_GRADE
