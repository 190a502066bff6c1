# core/threads.py
import logging

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from app.calculation import TypingStats
from services.feedback import FALLBACK_FEEDBACK, FeedbackGenerator, build_feedback_prompt
from services.texts import TextGenerator, build_text_prompt, get_static_text

log = logging.getLogger(__name__)


class WorkerSignals(QObject):
    loaded = Signal(str)
    failed = Signal(str)


class _FallbackWorker(QRunnable):
    """
    Runs ``provider(prompt)`` on the thread pool.

    ``loaded`` always fires with a usable string: the provider's answer, or the
    fallback when the provider raised or returned nothing. ``failed`` carries
    the error message first in that case.
    """

    def __init__(self, provider, prompt: str, fallback: str):
        super().__init__()
        self.provider = provider
        self.prompt = prompt
        self.fallback = fallback
        self.signals = WorkerSignals()

    def run(self):
        try:
            data = (self.provider(self.prompt) or "").strip()
        except Exception as e:
            log.warning("%s failed: %s", type(self).__name__, e)
            self.signals.failed.emit(str(e))
            self.signals.loaded.emit(self.fallback)
            return
        if not data:
            self.signals.failed.emit("empty response")
            data = self.fallback
        self.signals.loaded.emit(data)


class TextLoadWorker(_FallbackWorker):
    def __init__(self, generator: TextGenerator, topic: str, difficulty: str = "Medium"):
        super().__init__(generator, build_text_prompt(topic, difficulty), get_static_text(topic))
        self.topic = topic


class FeedbackWorker(_FallbackWorker):
    def __init__(self, generator: FeedbackGenerator, stats: TypingStats, topic: str):
        super().__init__(generator, build_feedback_prompt(stats, topic), FALLBACK_FEEDBACK)


class Workers:
    pool = QThreadPool.globalInstance()
