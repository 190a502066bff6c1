# main.py
from __future__ import annotations
import argparse
from dataclasses import replace
import sys
import logging
from pathlib import Path

from app.calculation import grade
from app.errors import TypemasterError
from app.settings import DEFAULT_SETTINGS_FILE, load_settings
from app.state import AssessmentSession, StudentInfo
from app.validation import validate_student
from services.feedback import get_performance_feedback
from utils.db_helper import DB_PATH, insert_result
from utils.file_handler import load_reference_text, load_text_file


def setup_logging(log_file: str = "app.log") -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )

    # Log any uncaught exceptions rather than silently dying
    def excepthook(exctype, value, tb):
        logging.exception("Unhandled exception", exc_info=(exctype, value, tb))
        # exit with non-zero so run scripts don’t think it succeeded
        sys.exit(1)

    sys.excepthook = excepthook


class ReplayClock:
    """Clock that reports ``start`` until advanced; used to score a recorded input."""

    def __init__(self, start: float = 1.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Score a typed passage against an assessment text.")
    p.add_argument("--input", required=True, help="file with the text the student typed")
    p.add_argument("--elapsed", type=float, required=True, help="seconds the student spent typing")
    p.add_argument("--admission", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--class-name", default="Class 10-A")
    p.add_argument("--topic", help="overrides the topic from the settings file")
    p.add_argument("--reference", help="file with the reference passage")
    p.add_argument("--settings", default=str(DEFAULT_SETTINGS_FILE))
    p.add_argument("--db", default=DB_PATH)
    p.add_argument("--no-save", action="store_true")
    return p.parse_args(argv)


def run(args) -> int:
    settings = load_settings(Path(args.settings))
    if args.topic:
        settings = replace(settings, topic=args.topic)

    admission, name = validate_student(args.admission, args.name)
    student = StudentInfo(admission, name, args.class_name)

    if args.reference:
        reference = load_text_file(args.reference, settings.topic)
    else:
        reference = load_reference_text(settings.topic)
    typed = Path(args.input).read_text(encoding="utf-8").rstrip("\r\n")

    if args.elapsed < 0:
        raise TypemasterError(f"--elapsed must not be negative, got {args.elapsed}")

    clock = ReplayClock()
    session = AssessmentSession(settings, student, reference, clock=clock)
    session.start()
    clock.advance(args.elapsed)
    session.handle_input(typed)
    entry = session.finish()
    g = grade(entry.current_marks, settings.max_marks)

    print(f"Topic:     {entry.topic}")
    print(f"Speed:     {entry.wpm} WPM")
    print(f"Accuracy:  {entry.accuracy}%")
    print(f"Mistakes:  {entry.errors}")
    print(f"Score:     {entry.current_marks} / {settings.max_marks}  {g.label}")
    print(get_performance_feedback(session.stats, entry.topic))

    if not args.no_save:
        insert_result(entry, args.db)
        logging.info("Saved result %s to %s", entry.id, args.db)
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()
    try:
        return run(args)
    except (TypemasterError, OSError) as e:
        logging.error("%s", e)
        return 2


if __name__ == "__main__":
    sys.exit(main())
