from pathlib import Path

import pytest

from exam_app.core.errors import ExamImportError
from exam_app.core.exam_importer import load_exams_from_file, parse_exam_text

SAMPLE_FILE = Path(__file__).resolve().parent.parent / "exam_app" / "data" / "sample_exams.txt"


def test_sample_file_loads():
    imported = load_exams_from_file(SAMPLE_FILE)

    ids = [exam.exam_id for exam in imported.exams]
    assert ids == ["algebra-midterm", "history-essay", "reading-reflection"]
    algebra, history, reflection = imported.exams
    assert algebra.duration_minutes == 45
    assert algebra.class_name == "Grade 9A"
    assert history.file_name == "industrial-revolution.pdf"
    assert reflection.duration_minutes is None


def test_content_keeps_blank_lines():
    exams = parse_exam_text(
        "ID: e1\n"
        "TITLE: Essay\n"
        "DURATION: 30\n"
        "CONTENT:\n"
        "First paragraph.\n"
        "\n"
        "ID: not a field inside content\n"
    )

    assert len(exams) == 1
    assert exams[0].content == "First paragraph.\n\nID: not a field inside content"


def test_inline_content_on_marker_line():
    exams = parse_exam_text("ID: e1\nTITLE: Quiz\nCONTENT: Name three primes.")
    assert exams[0].content == "Name three primes."


def test_blocks_split_on_separator():
    exams = parse_exam_text("ID: a\nTITLE: A\n---\n\n---\nID: b\nTITLE: B\n")
    assert [exam.exam_id for exam in exams] == ["a", "b"]


@pytest.mark.parametrize(
    "text",
    [
        "TITLE: No id",
        "ID: e1",
        "ID: e1\nTITLE: Exam\nDURATION: soon",
        "ID: e1\nTITLE: Exam\nDURATION: 0",
        "ID: e1\nTITLE: Exam\nTEACHER: Someone",
        "ID: e1\nTITLE: Exam\nstray text",
        "ID: e1\nTITLE: A\n---\nID: e1\nTITLE: B",
    ],
)
def test_invalid_files_are_rejected(text):
    with pytest.raises(ExamImportError):
        parse_exam_text(text)


def test_empty_file_is_rejected(tmp_path):
    empty = tmp_path / "exams.txt"
    empty.write_text("\n---\n", encoding="utf-8")
    with pytest.raises(ExamImportError):
        load_exams_from_file(empty)
