import pytest

from app.calculation import TypingStats
from services.alignment import PartKind
from services.typing_engine import TypingEngine
from services.weakkeys import WeakKeys


@pytest.fixture
def engine():
    return TypingEngine("abcdef")


class TestTypingEngine:
    def test_initial_state(self, engine):
        assert engine.typed == ""
        assert engine.alignment.parts == ()
        assert not engine.is_complete

    def test_process_key_realigns(self, engine):
        for ch in "abd":
            engine.process_key(ch)
        assert engine.typed == "abd"
        assert [p.kind for p in engine.alignment.parts] == [
            PartKind.MATCH, PartKind.MATCH, PartKind.SKIP, PartKind.MATCH,
        ]
        assert engine.alignment.cursor == 4

    def test_empty_key_is_ignored(self, engine):
        engine.process_key("a")
        before = engine.alignment
        engine.process_key("")
        assert engine.alignment is before

    def test_backspace_recomputes_from_scratch(self, engine):
        engine.set_input("abX")
        engine.backspace()
        assert engine.typed == "ab"
        assert engine.alignment.error_count == 0
        assert engine.alignment.cursor == 2

    def test_set_input_replaces_value(self, engine):
        engine.set_input("abcdef")
        assert engine.is_complete
        engine.set_input("a")
        assert not engine.is_complete

    def test_set_text_resets(self, engine):
        engine.set_input("abc")
        engine.set_text("xyz")
        assert engine.typed == ""
        assert engine.target == "xyz"
        assert engine.alignment.cursor == 0

    def test_empty_text_is_never_complete(self):
        e = TypingEngine("")
        e.set_input("a")
        assert not e.is_complete

    def test_stats(self, engine):
        engine.set_input("abdef")
        stats = engine.stats(60, target_wpm=60, max_marks=100)
        assert isinstance(stats, TypingStats)
        assert stats.errors == 1
        assert stats.total_chars == 5
        assert stats.accuracy == 83

    def test_lookahead_passed_through(self):
        e = TypingEngine("abcdef", lookahead=0)
        e.set_input("abdef")
        assert PartKind.SKIP not in [p.kind for p in e.alignment.parts]


class TestWeakKeys:
    def test_mismatch_charged_to_reference_key(self):
        e = TypingEngine("abcabc")
        e.set_input("abXabc")
        weak = WeakKeys.from_alignment(e.target, e.alignment)
        assert weak.ranked()[0] == ("c", 0.5, 1, 1)
        assert weak.snapshot()["c"] == 2.5
        assert weak.snapshot()["a"] == 1.0

    def test_skip_counts_as_miss(self):
        e = TypingEngine("abcdef")
        e.set_input("abdef")
        weak = WeakKeys.from_alignment(e.target, e.alignment)
        assert weak.misses["c"] == 1
        assert weak.hits["c"] == 0

    def test_extra_ignored(self):
        e = TypingEngine("ab")
        e.set_input("abzz")
        weak = WeakKeys.from_alignment(e.target, e.alignment)
        assert "z" not in weak.snapshot()

    def test_case_folded(self):
        weak = WeakKeys()
        weak.note("A", False)
        weak.note("a", True)
        assert weak.snapshot() == {"a": 2.5}

    def test_empty_char_ignored(self):
        weak = WeakKeys()
        weak.note("", False)
        assert weak.snapshot() == {}
