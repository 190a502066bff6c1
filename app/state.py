from __future__ import annotations
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Callable, Optional
import logging
import time
import uuid

from app.calculation import TypingStats, calculate_marks
from app.errors import RegistrationRequired
from app.settings import TestSettings
from app.validation import validate_student
from services.typing_engine import TypingEngine
from services.weakkeys import WeakKeys

log = logging.getLogger(__name__)


class TestStatus(str, Enum):
    __test__ = False

    IDLE = "IDLE"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"


@dataclass
class StudentInfo:
    admission_number: str = ""
    student_name: str = ""
    class_name: str = "Class 10-A"

    @property
    def is_registered(self) -> bool:
        return bool(self.admission_number.strip() and self.student_name.strip())


@dataclass(frozen=True)
class LeaderboardEntry:
    id: str
    timestamp: float
    topic: str
    admission_number: str
    student_name: str
    class_name: str
    wpm: int
    accuracy: int
    errors: int
    total_chars: int
    time_elapsed_seconds: float
    current_marks: int
    weak_keys: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AssessmentSession:
    """
    One timed attempt at a reference passage.

    Every input event replaces ``stats`` wholesale. The attempt ends when the
    passage has been typed through or the configured duration runs out.
    """
    settings: TestSettings
    student: StudentInfo
    reference: str
    clock: Callable[[], float] = time.time
    status: TestStatus = TestStatus.IDLE
    started_at: float = 0.0
    ended_at: float = 0.0
    stats: TypingStats = field(default_factory=TypingStats)
    engine: TypingEngine = field(init=False)
    _entry: Optional[LeaderboardEntry] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self.engine = TypingEngine(self.reference, lookahead=self.settings.lookahead)

    def reset(self, reference: Optional[str] = None):
        if reference is not None:
            self.reference = reference
        self.engine.set_text(self.reference)
        self.status = TestStatus.IDLE
        self.started_at = 0.0
        self.ended_at = 0.0
        self.stats = TypingStats()
        self._entry = None

    @property
    def is_running(self) -> bool:
        return self.status is TestStatus.RUNNING

    @property
    def user_input(self) -> str:
        return self.engine.typed

    def start(self):
        if self.status is TestStatus.IDLE:
            self.started_at = self.clock()
            self.status = TestStatus.RUNNING
            log.info("Attempt started: topic=%r student=%s", self.settings.topic, self.student.admission_number)

    def elapsed(self) -> float:
        if self.status is TestStatus.IDLE:
            return 0.0
        end = self.ended_at or self.clock()
        return min(float(self.settings.duration), max(0.0, end - self.started_at))

    def time_left(self) -> float:
        return max(0.0, self.settings.duration - self.elapsed())

    def tick(self) -> bool:
        """Call periodically; ends the attempt once time is up. Returns True when it ended."""
        if self.is_running and self.time_left() <= 0:
            self.stop()
            return True
        return False

    def stop(self):
        if self.status is TestStatus.RUNNING:
            self.ended_at = self.clock()
            self.status = TestStatus.COMPLETED
            log.info(
                "Attempt finished: wpm=%s accuracy=%s%% marks=%s",
                self.stats.wpm, self.stats.accuracy, self.stats.current_marks,
            )

    def handle_input(self, value: str) -> TypingStats:
        if self.status is TestStatus.COMPLETED:
            return self.stats
        if not self.student.is_registered:
            raise RegistrationRequired("Please enter your Admission Number and Name first.")
        validate_student(self.student.admission_number, self.student.student_name)

        self.start()
        result = self.engine.set_input(value)
        self.stats = self.engine.stats(
            self.elapsed(), self.settings.target_wpm, self.settings.max_marks, self.settings.weights
        )
        done = len(value) >= len(self.reference) or result.is_complete(len(self.reference))
        if done or self.time_left() <= 0:
            self.stop()
        return self.stats

    def finish(self) -> LeaderboardEntry:
        """Close the attempt and build its record. Repeated calls return the same entry."""
        if self._entry is not None:
            return self._entry
        if self.status is TestStatus.RUNNING:
            self.stop()
        final = self.stats
        if final.total_chars == 0:
            marks = 0
        else:
            marks = calculate_marks(
                final.wpm, final.accuracy, self.settings.target_wpm, self.settings.max_marks, self.settings.weights
            )
        self.status = TestStatus.COMPLETED
        self._entry = LeaderboardEntry(
            id=uuid.uuid4().hex[:9],
            timestamp=self.ended_at or self.clock(),
            topic=self.settings.topic,
            admission_number=self.student.admission_number,
            student_name=self.student.student_name,
            class_name=self.student.class_name,
            wpm=final.wpm,
            accuracy=final.accuracy,
            errors=final.errors,
            total_chars=final.total_chars,
            time_elapsed_seconds=final.time_elapsed_seconds,
            current_marks=marks,
            weak_keys=WeakKeys.from_alignment(self.reference, self.engine.alignment).snapshot(),
        )
        return self._entry
