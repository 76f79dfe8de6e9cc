# -*- coding: utf-8 -*-
"""
Interactive metadata prompts.

The questions are a fixed, ordered list.  Each answer is validated on the
spot (an invalid answer prints the reason and asks again) and collected in
an accumulator; only when every question is answered is a ReportSubmission
built.  If the input is closed or interrupted midway, PromptAborted is
raised and nothing downstream ever sees the partial answers.

``read`` and ``write`` default to ``input`` and ``print`` and can be replaced
by any callables with the same shape (tests use scripted answers).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence

from common_utils import parse_report_date, today_iso
from publish_core import Category, PromptAborted, ReportSubmission

logger = logging.getLogger("publisher.prompt")

Reader = Callable[[str], str]
Writer = Callable[[str], None]
Validator = Callable[[str], Optional[str]]


@dataclass(frozen=True)
class Question:
    name: str
    message: str
    choices: Sequence[str] = field(default_factory=tuple)
    default: Optional[str] = None
    validate: Optional[Validator] = None

    @property
    def is_select(self) -> bool:
        return bool(self.choices)


def required(label: str) -> Validator:
    def _check(answer: str) -> Optional[str]:
        return None if answer else f"{label} is required"
    return _check


def valid_date(answer: str) -> Optional[str]:
    try:
        parse_report_date(answer)
    except ValueError:
        return "Date must be a calendar date in YYYY-MM-DD form"
    return None


def match_choice(answer: str, choices: Sequence[str]) -> Optional[str]:
    """Resolve a 1-based number or the exact choice text; None when neither matches."""
    if answer in choices:
        return answer
    if answer.isdigit():
        n = int(answer)
        if 1 <= n <= len(choices):
            return choices[n - 1]
    return None


def ask(question: Question, read: Reader = input, write: Writer = print) -> str:
    """Ask one question until it gets a valid answer and return that answer."""
    while True:
        if question.is_select:
            write(question.message)
            for i, choice in enumerate(question.choices, 1):
                write(f"  {i}) {choice}")
            prompt = "> "
        elif question.default:
            prompt = f"{question.message} [{question.default}] "
        else:
            prompt = f"{question.message} "

        try:
            raw = read(prompt)
        except (EOFError, KeyboardInterrupt) as e:
            raise PromptAborted(f"input closed while asking for {question.name}") from e

        answer = (raw or "").strip()
        if not answer and question.default is not None:
            answer = question.default

        if question.is_select:
            picked = match_choice(answer, question.choices)
            if picked is None:
                write(f"Please choose one of: {', '.join(question.choices)}")
                continue
            answer = picked

        error = question.validate(answer) if question.validate else None
        if error is None:
            return answer
        write(error)


def build_questions(
    filenames: Sequence[str],
    default_read_time: str = "5 min read",
    today: Optional[str] = None,
) -> List[Question]:
    return [
        Question("filename", "Select a report to publish:", choices=tuple(filenames)),
        Question("title", "Report Title:", validate=required("Title")),
        Question("category", "Category:", choices=tuple(c.value for c in Category)),
        Question("date", "Date (YYYY-MM-DD):", default=today or today_iso(), validate=valid_date),
        Question("excerpt", "Excerpt (short description):", validate=required("Excerpt")),
        Question("read_time", 'Read Time (e.g., "5 min read"):', default=default_read_time),
    ]


def collect_submission(
    filenames: Sequence[str],
    read: Reader = input,
    write: Writer = print,
    default_read_time: str = "5 min read",
    today: Optional[str] = None,
) -> ReportSubmission:
    """
    Ask every question in order and return the validated submission.

    Args:
        filenames: Pending reports offered at the first prompt.
        read: Input callable, ``input`` by default.
        write: Output callable, ``print`` by default.
        default_read_time: Default offered at the read-time prompt.
        today: Default for the date prompt, today's date when omitted.

    Raises:
        ValueError: ``filenames`` is empty.
        PromptAborted: Input ended before all questions were answered.
    """
    if not filenames:
        raise ValueError("no reports to choose from")
    answers: Dict[str, str] = {}
    for question in build_questions(filenames, default_read_time, today):
        answers[question.name] = ask(question, read, write)
    logger.info("submission collected: %s (%s)", answers["filename"], answers["category"])
    return ReportSubmission(
        filename=answers["filename"],
        title=answers["title"],
        category=Category(answers["category"]),
        date=parse_report_date(answers["date"]),
        excerpt=answers["excerpt"],
        read_time=answers["read_time"],
    )
