import json

import pytest

from app.calculation import LEGACY_WEIGHTS, ScoringWeights
from app.errors import ConfigError, RegistrationRequired
from app.settings import TestSettings, load_settings, save_settings, settings_from_dict
from app.validation import sanitize_student_name, sanitize_username, validate_student


class TestSettingsDefaults:
    def test_defaults(self):
        s = TestSettings()
        assert s.duration == 60
        assert s.max_marks == 100
        assert s.target_wpm == 60
        assert s.lookahead == 10
        assert s.weights == ScoringWeights()

    @pytest.mark.parametrize("kwargs", [
        dict(duration=0),
        dict(difficulty="Impossible"),
        dict(max_marks=0),
        dict(target_wpm=-1),
        dict(lookahead=-1),
        dict(weights=ScoringWeights(chars_per_word=0)),
        dict(weights=ScoringWeights(speed_weight=-0.1)),
    ])
    def test_invalid_values_fail_fast(self, kwargs):
        with pytest.raises(ConfigError):
            TestSettings(**kwargs)


class TestLoadSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "nope.json") == TestSettings()

    def test_load_with_weights(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({
            "duration": 120,
            "topic": "Official Assessment: Networking",
            "weights": {"accuracy_weight": 0.7, "speed_weight": 0.3,
                        "accuracy_exponent": 2, "speed_cap": 1.5},
        }), encoding="utf-8")
        s = load_settings(path)
        assert s.duration == 120
        assert s.topic == "Official Assessment: Networking"
        assert s.weights == LEGACY_WEIGHTS

    def test_roundtrip_through_file(self, tmp_path):
        path = tmp_path / "settings.json"
        original = TestSettings(duration=90, difficulty="Hard", weights=LEGACY_WEIGHTS)
        save_settings(original, path)
        assert load_settings(path) == original

    @pytest.mark.parametrize("payload", [
        "not json",
        "[1, 2]",
        json.dumps({"colour": "red"}),
        json.dumps({"weights": {"bogus": 1}}),
        json.dumps({"weights": 3}),
        json.dumps({"duration": "long"}),
        json.dumps({"max_marks": -10}),
        json.dumps({"lookahead": 2.5}),
        json.dumps({"lookahead": "3"}),
        json.dumps({"lookahead": True}),
        json.dumps({"weights": {"chars_per_word": 5.5}}),
        json.dumps({"weights": {"chars_per_word": "5"}}),
    ])
    def test_bad_files(self, tmp_path, payload):
        path = tmp_path / "settings.json"
        path.write_text(payload, encoding="utf-8")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_whole_float_chars_per_word_accepted(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"weights": {"chars_per_word": 6.0}}), encoding="utf-8")
        assert load_settings(path).weights.chars_per_word == 6

    def test_fractional_lookahead_rejected_at_load(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"lookahead": 2.5}), encoding="utf-8")
        with pytest.raises(ConfigError, match="lookahead"):
            load_settings(path)

    def test_from_dict_unknown_key(self):
        with pytest.raises(ConfigError, match="colour"):
            settings_from_dict({"colour": "red"})


class TestValidation:
    def test_sanitize_username(self):
        assert sanitize_username("  AB-12_3!  ") == "AB-12_3"
        assert len(sanitize_username("x" * 40)) == 24

    def test_sanitize_student_name(self):
        assert sanitize_student_name("  Mary   O'Neil-Smith 3 ") == "Mary O'Neil-Smith"

    def test_validate_student(self):
        assert validate_student(" 1042 ", "Ada  Lovelace") == ("1042", "Ada Lovelace")

    @pytest.mark.parametrize("admission,name", [("", "Ada"), ("1042", ""), ("!!", "Ada"), ("1042", "123")])
    def test_missing_details(self, admission, name):
        with pytest.raises(RegistrationRequired):
            validate_student(admission, name)
