"""Main window for taking a single timed exam."""

from __future__ import annotations

from PySide6.QtGui import QCloseEvent, QFont
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QTextBrowser,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.exam_constants import LOW_TIME_WARNING_SECONDS
from exam_app.constants.ui_constants import (
    ANSWER_PLACEHOLDER,
    CANCEL_BUTTON,
    LOAD_FAILED_MESSAGE,
    LOADING_MESSAGE,
    RETRY_BUTTON,
    SUBMIT_BUTTON,
    SUBMIT_FAILED_MESSAGE,
    SUBMIT_SUCCESS_MESSAGE,
    SUBMITTING_BUTTON,
    TIME_LEFT_TEMPLATE,
    TIME_UP_MESSAGE,
    UNTIMED_LABEL,
    WINDOW_TITLE,
)
from exam_app.core.content_renderer import renderer
from exam_app.core.errors import ExamLoadError
from exam_app.core.models import AttemptSnapshot, AttemptStatus, ExamDefinition
from exam_app.core.timing import format_mm_ss
from exam_app.ui.dialog_helpers import confirm_leave_exam, show_error, show_info, show_warning
from exam_app.ui.session_runner import SessionRunner


class TakeExamWindow(QMainWindow):
    """Renders the exam, the countdown and the answer box; forwards actions to the runner."""

    def __init__(self, runner: SessionRunner, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._runner = runner
        self._last_status: AttemptStatus | None = None
        self._shut_down: bool = False

        self.setWindowTitle(WINDOW_TITLE)
        self.resize(900, 720)
        self._build_ui()

        runner.snapshot_changed.connect(self._apply_snapshot)
        runner.definition_loaded.connect(self._show_definition)
        runner.load_failed.connect(self._handle_load_failure)
        runner.validation_failed.connect(self._handle_validation_failure)

    def _build_ui(self) -> None:
        central = QWidget(self)
        layout = QVBoxLayout()
        central.setLayout(layout)
        self.setCentralWidget(central)

        header_row = QHBoxLayout()
        heading = QVBoxLayout()
        self.title_label = QLabel(LOADING_MESSAGE, self)
        title_font: QFont = self.title_label.font()
        title_font.setPointSize(18)
        title_font.setBold(True)
        self.title_label.setFont(title_font)
        self.meta_label = QLabel("", self)
        heading.addWidget(self.title_label)
        heading.addWidget(self.meta_label)
        header_row.addLayout(heading, stretch=1)

        self.time_label = QLabel(UNTIMED_LABEL, self)
        time_font: QFont = self.time_label.font()
        time_font.setPointSize(14)
        time_font.setBold(True)
        self.time_label.setFont(time_font)
        self.time_label.setVisible(False)
        header_row.addWidget(self.time_label)
        layout.addLayout(header_row)

        self.content_view = QTextBrowser(self)
        self.content_view.setOpenExternalLinks(True)
        layout.addWidget(self.content_view, stretch=1)

        layout.addWidget(QLabel("Your Answers:", self))
        self.answer_edit = QPlainTextEdit(self)
        self.answer_edit.setPlaceholderText(ANSWER_PLACEHOLDER)
        self.answer_edit.setEnabled(False)
        self.answer_edit.textChanged.connect(self._on_answer_changed)
        layout.addWidget(self.answer_edit, stretch=1)

        self.status_label = QLabel("", self)
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        button_row = QHBoxLayout()
        button_row.addStretch(1)
        self.cancel_button = QPushButton(CANCEL_BUTTON, self)
        self.cancel_button.clicked.connect(self._on_cancel_clicked)
        self.submit_button = QPushButton(SUBMIT_BUTTON, self)
        self.submit_button.setEnabled(False)
        self.submit_button.clicked.connect(self._on_submit_clicked)
        button_row.addWidget(self.cancel_button)
        button_row.addWidget(self.submit_button)
        layout.addLayout(button_row)

    # --- Runner signals ---

    def _show_definition(self, definition: ExamDefinition) -> None:
        self.setWindowTitle(f"{WINDOW_TITLE} - {definition.title}")
        self.title_label.setText(definition.title)
        self.meta_label.setText(
            f"Subject: {definition.subject or 'General'} | Class: {definition.class_name or 'All Classes'}"
        )
        self.content_view.setHtml(renderer.render_exam(definition))
        self.time_label.setVisible(definition.is_timed)

    def _apply_snapshot(self, snapshot: AttemptSnapshot) -> None:
        status = snapshot.status
        self._update_time_label(snapshot.remaining_seconds)

        self.answer_edit.setEnabled(status is not AttemptStatus.LOADING)
        self.answer_edit.setReadOnly(status is not AttemptStatus.IN_PROGRESS)
        self.submit_button.setEnabled(status in (AttemptStatus.IN_PROGRESS, AttemptStatus.SUBMIT_FAILED))
        self.cancel_button.setEnabled(status is not AttemptStatus.SUBMITTING)
        if status is AttemptStatus.SUBMITTING:
            self.submit_button.setText(SUBMITTING_BUTTON)
        elif status is AttemptStatus.SUBMIT_FAILED:
            self.submit_button.setText(RETRY_BUTTON)
        else:
            self.submit_button.setText(SUBMIT_BUTTON)

        previous, self._last_status = self._last_status, status
        if status is previous:
            return

        if status is AttemptStatus.SUBMITTING:
            self.status_label.setText(TIME_UP_MESSAGE if snapshot.submitted_automatically else "")
        elif status is AttemptStatus.SUBMITTED:
            show_info(self, "Exam Submitted", SUBMIT_SUCCESS_MESSAGE)
            self.close()
        elif status is AttemptStatus.SUBMIT_FAILED:
            outcome = snapshot.submission_outcome
            message = outcome.error.message if outcome is not None and outcome.error is not None else SUBMIT_FAILED_MESSAGE
            self.status_label.setText(message)
            show_error(self, "Submission Failed", message)

    def _update_time_label(self, remaining: int | None) -> None:
        if remaining is None:
            self.time_label.setText(UNTIMED_LABEL)
            return
        self.time_label.setText(TIME_LEFT_TEMPLATE.format(remaining=format_mm_ss(remaining)))
        color = "#b91c1c" if remaining <= LOW_TIME_WARNING_SECONDS else "#15803d"
        self.time_label.setStyleSheet(f"color: {color};")

    def _handle_load_failure(self, error: ExamLoadError) -> None:
        show_error(self, "Exam Unavailable", error.message or LOAD_FAILED_MESSAGE)
        self.close()

    def _handle_validation_failure(self, message: str) -> None:
        show_warning(self, "Nothing To Submit", message)

    # --- Widget actions ---

    def _on_answer_changed(self) -> None:
        if self._last_status is AttemptStatus.IN_PROGRESS:
            self._runner.update_answer(self.answer_edit.toPlainText())

    def _on_submit_clicked(self) -> None:
        # Push the latest text first; both calls run in order on the session loop.
        self._runner.update_answer(self.answer_edit.toPlainText())
        self._runner.submit()

    def _on_cancel_clicked(self) -> None:
        if self._last_status in (AttemptStatus.IN_PROGRESS, AttemptStatus.SUBMIT_FAILED):
            if not confirm_leave_exam(self):
                return
        self.close()

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        if self._last_status is AttemptStatus.SUBMITTING:
            self.status_label.setText("Please wait until your submission has been delivered.")
            event.ignore()
            return
        if not self._shut_down:
            self._shut_down = True
            self._runner.cancel()
            self._runner.shutdown()
        event.accept()
