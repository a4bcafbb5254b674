"""Loading of the question bank asset.

File format (JSON array, one object per question):

    [
      {
        "question": "Which document proves a vehicle lease is settled?",
        "options": ["Release letter", "Quotation", "Receipt book", "Fuel pass"],
        "answer": "Release letter"
      }
    ]

Every question has exactly four non-empty options and ``answer`` must be one
of them. Option order in the file does not matter; sessions shuffle it.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path

from fintrex_quiz.constants.quiz_constants import OPTIONS_PER_QUESTION
from fintrex_quiz.core.models import Question

logger = logging.getLogger(__name__)

DEFAULT_BANK_PATH = Path(__file__).resolve().parent.parent / "data" / "questionnaire.json"


class QuestionBankError(Exception):
    """Raised when the question bank cannot be read or parsed."""


@dataclass(slots=True)
class QuestionBank:
    """Container for the loaded bank and where it came from."""

    source_path: Path | None
    questions: list[Question]

    def __len__(self) -> int:
        return len(self.questions)


def load_question_bank(file_path: Path | None = None) -> QuestionBank:
    path = file_path or DEFAULT_BANK_PATH
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise QuestionBankError(f"Could not read question bank {path}: {exc}") from exc
    questions = parse_question_bank(text)
    logger.info("Loaded %d questions from %s", len(questions), path)
    return QuestionBank(source_path=path, questions=questions)


def parse_question_bank(text: str) -> list[Question]:
    try:
        entries = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuestionBankError(f"Question bank is not valid JSON: {exc}") from exc
    if not isinstance(entries, list):
        raise QuestionBankError("Question bank must be a JSON array.")

    questions = [_parse_entry(index, entry) for index, entry in enumerate(entries, start=1)]
    if not questions:
        raise QuestionBankError("Question bank did not contain any questions.")
    return questions


def _parse_entry(index: int, entry: object) -> Question:
    if not isinstance(entry, dict):
        raise QuestionBankError(f"Question {index}: expected an object.")

    text = entry.get("question")
    if not isinstance(text, str) or not text.strip():
        raise QuestionBankError(f"Question {index}: missing question text.")

    options = entry.get("options")
    if not isinstance(options, list) or len(options) != OPTIONS_PER_QUESTION:
        raise QuestionBankError(
            f"Question {index}: expected exactly {OPTIONS_PER_QUESTION} options."
        )
    if any(not isinstance(option, str) or not option.strip() for option in options):
        raise QuestionBankError(f"Question {index}: option text cannot be empty.")
    cleaned = tuple(option.strip() for option in options)
    if len(set(cleaned)) != len(cleaned):
        raise QuestionBankError(f"Question {index}: options must be distinct.")

    answer = entry.get("answer")
    if not isinstance(answer, str) or answer.strip() not in cleaned:
        raise QuestionBankError(f"Question {index}: answer must be one of the options.")

    return Question(text=text.strip(), options=cleaned, correct_option=answer.strip())
