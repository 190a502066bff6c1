# services/feedback.py
from __future__ import annotations
import logging
from typing import Callable, Optional

from app.calculation import TypingStats

log = logging.getLogger(__name__)

FeedbackGenerator = Callable[[str], str]

FALLBACK_FEEDBACK = "Assessment complete. Good effort on the typing module."


def build_feedback_prompt(stats: TypingStats, topic: str) -> str:
    return (
        f"Quick feedback: WPM {stats.wpm}, Accuracy {stats.accuracy}%, Topic {topic}. "
        "1-2 short sentences."
    )


def local_feedback(stats: TypingStats, target_wpm: float = 60) -> str:
    if stats.total_chars == 0:
        return "No input was recorded. Start typing as soon as the assessment begins."
    if stats.accuracy < 80:
        return (
            f"Accuracy of {stats.accuracy}% is holding your score back. "
            "Slow down and focus on hitting the right keys."
        )
    if stats.wpm < target_wpm:
        return (
            f"Good accuracy at {stats.accuracy}%. "
            f"Keep practising to lift your speed from {stats.wpm} towards {target_wpm:g} WPM."
        )
    return f"Excellent work: {stats.wpm} WPM at {stats.accuracy}% accuracy."


def get_performance_feedback(stats: TypingStats, topic: str,
                             generator: Optional[FeedbackGenerator] = None) -> str:
    if generator is None:
        return local_feedback(stats)
    try:
        text = (generator(build_feedback_prompt(stats, topic)) or "").strip()
    except Exception as e:
        log.warning("Feedback generation failed: %s", e)
        return FALLBACK_FEEDBACK
    return text or FALLBACK_FEEDBACK
