# services/typing_engine.py
from app.calculation import DEFAULT_WEIGHTS, ScoringWeights, TypingStats, build_stats
from services.alignment import LOOKAHEAD, AlignmentResult, align


class TypingEngine:
    """
    Holds the reference passage and everything typed so far in one attempt.

    The alignment is rebuilt from the full typed value after every change;
    nothing is carried over between keystrokes.
    """

    def __init__(self, target_text: str = "", lookahead: int = LOOKAHEAD):
        self.lookahead = lookahead
        self.set_text(target_text)

    def set_text(self, text: str):
        self.target = text or ""
        self.reset()

    def reset(self):
        self.typed = ""
        self._alignment = AlignmentResult()

    def set_input(self, value: str) -> AlignmentResult:
        self.typed = value or ""
        self._alignment = align(self.target, self.typed, self.lookahead)
        return self._alignment

    def process_key(self, ch: str) -> AlignmentResult:
        if not ch:
            return self._alignment
        return self.set_input(self.typed + ch)

    def backspace(self) -> AlignmentResult:
        return self.set_input(self.typed[:-1])

    @property
    def alignment(self) -> AlignmentResult:
        return self._alignment

    @property
    def is_complete(self) -> bool:
        return bool(self.target) and self._alignment.is_complete(len(self.target))

    def stats(self, elapsed_seconds: float, target_wpm: float, max_marks: int,
              weights: ScoringWeights = DEFAULT_WEIGHTS) -> TypingStats:
        return build_stats(self._alignment, len(self.typed), elapsed_seconds, target_wpm, max_marks, weights)
