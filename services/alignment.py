# services/alignment.py
"""
Character alignment of the typed input against the reference passage.

The input is walked with two cursors. When a typed character does not match
the reference, the next few reference characters are searched for it; a hit
means the user skipped ahead, so the characters in between become ``skip``
parts instead of turning every later keystroke into a mismatch.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple

from app.errors import ScoringInputError

LOOKAHEAD = 10


class PartKind(str, Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    SKIP = "skip"
    EXTRA = "extra"


ERROR_KINDS = frozenset({PartKind.MISMATCH, PartKind.SKIP, PartKind.EXTRA})


@dataclass(frozen=True)
class AlignmentPart:
    kind: PartKind
    character: str
    reference_index: Optional[int] = None

    @property
    def is_error(self) -> bool:
        return self.kind in ERROR_KINDS


@dataclass(frozen=True)
class AlignmentResult:
    parts: Tuple[AlignmentPart, ...] = ()
    cursor: int = 0
    match_count: int = 0
    error_count: int = 0

    def is_complete(self, reference_length: int) -> bool:
        return self.cursor >= reference_length

    def counts(self) -> Dict[PartKind, int]:
        c = Counter(p.kind for p in self.parts)
        return {kind: c.get(kind, 0) for kind in PartKind}


def _resync_offset(reference: Sequence[str], t: int, ch: str, lookahead: int) -> int:
    """First offset s in 1..lookahead with reference[t + s] == ch, or 0."""
    end = min(len(reference) - 1, t + lookahead)
    for pos in range(t + 1, end + 1):
        if reference[pos] == ch:
            return pos - t
    return 0


def align(reference: Sequence[str], user_input: Sequence[str], lookahead: int = LOOKAHEAD) -> AlignmentResult:
    if not isinstance(lookahead, int) or isinstance(lookahead, bool):
        raise ScoringInputError(f"lookahead must be an int, got {lookahead!r}")
    if lookahead < 0:
        raise ScoringInputError(f"lookahead must be >= 0, got {lookahead}")

    parts = []
    t = i = 0
    matches = errors = 0
    ref_len = len(reference)

    while i < len(user_input):
        ch = user_input[i]

        if t >= ref_len:
            # typed past the end; never resynchronises
            parts.append(AlignmentPart(PartKind.EXTRA, ch))
            errors += 1
            i += 1
            continue

        if ch == reference[t]:
            parts.append(AlignmentPart(PartKind.MATCH, ch, t))
            matches += 1
            t += 1
            i += 1
            continue

        s = _resync_offset(reference, t, ch, lookahead)
        if s:
            for k in range(t, t + s):
                parts.append(AlignmentPart(PartKind.SKIP, reference[k], k))
            errors += s
            t += s
            parts.append(AlignmentPart(PartKind.MATCH, ch, t))
            matches += 1
        else:
            parts.append(AlignmentPart(PartKind.MISMATCH, ch, t))
            errors += 1
        t += 1
        i += 1

    return AlignmentResult(tuple(parts), t, matches, errors)
