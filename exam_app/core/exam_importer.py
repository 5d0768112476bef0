"""Utilities for seeding the exam backend from a human-friendly text file.

File format (blocks separated by a line containing only '---'):

    ID: algebra-midterm
    TITLE: Algebra Midterm
    SUBJECT: Mathematics          (optional)
    CLASS: Grade 9A               (optional)
    DURATION: 45                  (optional, minutes; omit for an untimed exam)
    DESCRIPTION: One line summary (optional)
    FILEURL: https://...          (optional downloadable paper)
    FILENAME: midterm.pdf         (optional)
    CONTENT:
    Everything after CONTENT: up to the end of the block is the inline
    exam text. Blank lines inside the content are kept.

Architecture note:
    Blocks are split on '---' only, not on blank lines, because exam content
    is free text that usually spans several paragraphs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from exam_app.core.errors import ExamImportError
from exam_app.core.models import ExamDefinition

_SINGLE_LINE_FIELDS = ("ID", "TITLE", "SUBJECT", "CLASS", "DURATION", "DESCRIPTION", "FILEURL", "FILENAME")


@dataclass(slots=True)
class ImportedExams:
    """Container for the exams read from one seed file."""

    source_path: Path
    exams: list[ExamDefinition]


def load_exams_from_file(file_path: Path) -> ImportedExams:
    text = file_path.read_text(encoding="utf-8")
    exams = parse_exam_text(text)
    if not exams:
        raise ExamImportError("Exam file did not contain any exams.")
    return ImportedExams(source_path=file_path, exams=exams)


def parse_exam_text(text: str) -> list[ExamDefinition]:
    blocks: list[list[str]] = []
    current_block: list[str] = []
    for raw_line in text.splitlines():
        if raw_line.strip() == "---":
            blocks.append(current_block)
            current_block = []
            continue
        current_block.append(raw_line)
    blocks.append(current_block)

    exams = [_parse_block(block) for block in blocks if any(line.strip() for line in block)]
    seen: set[str] = set()
    for exam in exams:
        if exam.exam_id in seen:
            raise ExamImportError(f"Duplicate exam id '{exam.exam_id}'.")
        seen.add(exam.exam_id)
    return exams


def _parse_block(lines: list[str]) -> ExamDefinition:
    fields: dict[str, str] = {}
    content_lines: list[str] | None = None

    for raw_line in lines:
        if content_lines is not None:
            content_lines.append(raw_line.rstrip())
            continue

        line = raw_line.strip()
        if not line:
            continue

        key, separator, value = line.partition(":")
        key = key.strip().upper()
        if not separator:
            raise ExamImportError(f"Encountered text outside of a known field: '{line}'.")
        if key == "CONTENT":
            content_lines = [value.strip()] if value.strip() else []
            continue
        if key not in _SINGLE_LINE_FIELDS:
            raise ExamImportError(f"Unknown field '{key}'.")
        fields[key] = value.strip()

    exam_id = fields.get("ID", "")
    if not exam_id:
        raise ExamImportError("Exam id missing (ID: ...)")
    title = fields.get("TITLE", "")
    if not title:
        raise ExamImportError(f"Exam '{exam_id}' has no title (TITLE: ...)")

    content = "\n".join(content_lines).strip() if content_lines is not None else ""

    return ExamDefinition(
        exam_id=exam_id,
        title=title,
        subject=fields.get("SUBJECT") or None,
        class_name=fields.get("CLASS") or None,
        duration_minutes=_parse_duration(exam_id, fields.get("DURATION")),
        content=content or None,
        file_url=fields.get("FILEURL") or None,
        file_name=fields.get("FILENAME") or None,
        description=fields.get("DESCRIPTION") or None,
    )


def _parse_duration(exam_id: str, raw_value: str | None) -> int | None:
    if not raw_value:
        return None
    try:
        parsed_value = int(raw_value)
    except ValueError as exc:
        raise ExamImportError(f"DURATION for '{exam_id}' must be an integer number of minutes.") from exc
    if parsed_value <= 0:
        raise ExamImportError(f"DURATION for '{exam_id}' must be a positive integer.")
    return parsed_value
