import logging

import pytest

from app.calculation import TypingStats
from services.feedback import (
    FALLBACK_FEEDBACK,
    build_feedback_prompt,
    get_performance_feedback,
    local_feedback,
)
from services.texts import (
    CS_STATIC_TEXTS,
    DEFAULT_TOPIC,
    build_text_prompt,
    generate_typing_text,
    get_static_text,
    topics,
)


class TestStaticTexts:
    def test_catalog_topics(self):
        assert len(topics()) == 4
        assert DEFAULT_TOPIC in topics()
        assert all(CS_STATIC_TEXTS[t] for t in topics())

    def test_unknown_topic_falls_back(self):
        assert get_static_text("Astronomy") == CS_STATIC_TEXTS[DEFAULT_TOPIC]

    def test_known_topic(self):
        assert get_static_text("Official Assessment: Networking").startswith("Computer networks")


class TestGenerateTypingText:
    def test_without_generator_uses_catalog(self):
        assert generate_typing_text("Official Assessment: Cybersecurity") == \
            CS_STATIC_TEXTS["Official Assessment: Cybersecurity"]

    def test_generator_receives_prompt(self):
        seen = []

        def gen(prompt):
            seen.append(prompt)
            return "  Fresh passage.  "

        assert generate_typing_text("Databases", "Hard", gen) == "Fresh passage."
        assert seen == [build_text_prompt("Databases", "Hard")]
        assert "Level: Hard" in seen[0]

    def test_failing_generator_falls_back(self, caplog):
        def gen(prompt):
            raise ConnectionError("offline")

        with caplog.at_level(logging.WARNING):
            text = generate_typing_text("Official Assessment: Networking", "Easy", gen)
        assert text == CS_STATIC_TEXTS["Official Assessment: Networking"]
        assert "offline" in caplog.text

    @pytest.mark.parametrize("answer", ["", "   ", None])
    def test_empty_answer_falls_back(self, answer):
        assert generate_typing_text("x", "Easy", lambda p: answer) == CS_STATIC_TEXTS[DEFAULT_TOPIC]


class TestFeedback:
    def test_prompt_mentions_stats(self):
        p = build_feedback_prompt(TypingStats(wpm=42, accuracy=97), "Networking")
        assert "WPM 42" in p and "Accuracy 97%" in p and "Networking" in p

    def test_generator_answer(self):
        assert get_performance_feedback(TypingStats(), "t", lambda p: " Nice. ") == "Nice."

    def test_generator_failure(self):
        def gen(prompt):
            raise RuntimeError("quota")

        assert get_performance_feedback(TypingStats(), "t", gen) == FALLBACK_FEEDBACK

    def test_empty_generator_answer(self):
        assert get_performance_feedback(TypingStats(), "t", lambda p: "") == FALLBACK_FEEDBACK

    def test_local_feedback_branches(self):
        assert "No input" in local_feedback(TypingStats())
        assert "holding your score back" in local_feedback(TypingStats(total_chars=10, accuracy=50))
        assert "towards 60 WPM" in local_feedback(TypingStats(total_chars=10, accuracy=95, wpm=30))
        assert "Excellent" in local_feedback(TypingStats(total_chars=10, accuracy=95, wpm=70))

    def test_default_is_local(self):
        stats = TypingStats(total_chars=10, accuracy=95, wpm=70)
        assert get_performance_feedback(stats, "t") == local_feedback(stats)
