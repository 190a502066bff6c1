# services/weakkeys.py
from collections import Counter

from services.alignment import AlignmentResult, PartKind


class WeakKeys:
    """Weakness score per reference character, rebuilt from an alignment."""

    def __init__(self):
        self.counts = Counter()
        self.hits = Counter()
        self.misses = Counter()

    def note(self, ch: str, correct: bool):
        if not ch:
            return
        key = ch.lower()
        # mistakes weigh more than correct presses
        self.counts[key] += 2 if not correct else 0.5
        (self.hits if correct else self.misses)[key] += 1

    @classmethod
    def from_alignment(cls, reference: str, result: AlignmentResult) -> "WeakKeys":
        weak = cls()
        for part in result.parts:
            if part.reference_index is None:
                continue
            # credit the key that should have been pressed
            weak.note(reference[part.reference_index], part.kind is PartKind.MATCH)
        return weak

    def snapshot(self) -> dict:
        return dict(self.counts)

    def ranked(self):
        result = []
        for key in set(self.hits) | set(self.misses):
            hit, miss = self.hits[key], self.misses[key]
            result.append((key, miss / (hit + miss), hit, miss))
        return sorted(result, key=lambda x: (-x[1], -(x[2] + x[3]), x[0]))
