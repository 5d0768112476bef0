"""Static metadata describing ExamQt."""

APP_NAME = "ExamQt"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "ExamQt is the timed online exam client of the school portal, built with Qt and FastAPI. "
    "Open a live exam, type your answers and submit before the clock runs out."
)
