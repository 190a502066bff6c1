# app/settings.py
from __future__ import annotations
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict
import json
import logging

from app.calculation import ScoringWeights
from app.errors import ConfigError
from services.alignment import LOOKAHEAD
from services.texts import DEFAULT_TOPIC, DIFFICULTIES

log = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path("settings.json")


@dataclass(frozen=True)
class TestSettings:
    __test__ = False  # not a pytest class

    duration: int = 60
    difficulty: str = "Medium"
    topic: str = DEFAULT_TOPIC
    max_marks: int = 100
    target_wpm: float = 60
    lookahead: int = LOOKAHEAD
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    def __post_init__(self):
        if self.duration <= 0:
            raise ConfigError(f"duration must be positive, got {self.duration}")
        if self.difficulty not in DIFFICULTIES:
            raise ConfigError(f"difficulty must be one of {', '.join(DIFFICULTIES)}, got {self.difficulty!r}")
        if self.max_marks <= 0:
            raise ConfigError(f"max_marks must be positive, got {self.max_marks}")
        if self.target_wpm <= 0:
            raise ConfigError(f"target_wpm must be positive, got {self.target_wpm}")
        if not isinstance(self.lookahead, int) or isinstance(self.lookahead, bool):
            raise ConfigError(f"lookahead must be a whole number, got {self.lookahead!r}")
        if self.lookahead < 0:
            raise ConfigError(f"lookahead must not be negative, got {self.lookahead}")
        w = self.weights
        if w.chars_per_word <= 0 or w.min_elapsed_seconds <= 0:
            raise ConfigError("chars_per_word and min_elapsed_seconds must be positive")
        if w.accuracy_weight < 0 or w.speed_weight < 0 or w.speed_cap < 0:
            raise ConfigError("scoring weights must not be negative")


def _weights_from_dict(d: Dict[str, Any]) -> ScoringWeights:
    known = {f.name for f in fields(ScoringWeights)}
    unknown = set(d) - known
    if unknown:
        raise ConfigError(f"Unknown scoring keys: {', '.join(sorted(unknown))}")
    cpw = d.get("chars_per_word", 5)
    if isinstance(cpw, bool) or not isinstance(cpw, (int, float)) or (isinstance(cpw, float) and not cpw.is_integer()):
        raise ConfigError(f"chars_per_word must be a whole number, got {cpw!r}")
    try:
        return ScoringWeights(**{k: float(v) if k != "chars_per_word" else int(v) for k, v in d.items()})
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid scoring weights: {e}") from e


def settings_from_dict(d: Dict[str, Any]) -> TestSettings:
    known = {f.name for f in fields(TestSettings)}
    unknown = set(d) - known
    if unknown:
        raise ConfigError(f"Unknown settings keys: {', '.join(sorted(unknown))}")
    values = dict(d)
    if "weights" in values:
        if not isinstance(values["weights"], dict):
            raise ConfigError("weights must be an object")
        values["weights"] = _weights_from_dict(values["weights"])
    try:
        return TestSettings(**values)
    except TypeError as e:
        raise ConfigError(f"Invalid settings: {e}") from e


def settings_to_dict(settings: TestSettings) -> Dict[str, Any]:
    return asdict(settings)


def load_settings(path: Path = DEFAULT_SETTINGS_FILE) -> TestSettings:
    """Read settings from a JSON file; a missing file means defaults."""
    path = Path(path)
    if not path.exists():
        return TestSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read settings from {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    settings = settings_from_dict(data)
    log.info("Loaded settings from %s", path)
    return settings


def save_settings(settings: TestSettings, path: Path = DEFAULT_SETTINGS_FILE) -> None:
    Path(path).write_text(
        json.dumps(settings_to_dict(settings), ensure_ascii=False, indent=2), encoding="utf-8"
    )
