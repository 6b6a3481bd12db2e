"""Shared test fixtures for tmpl tests."""
import pytest

from tmpl.core.config import TmplConfig, set_config
from tmpl.engine import run_template


class FakeSpinner:
    def __init__(self, ui, message):
        self.ui = ui
        self.message = message

    def start(self):
        self.ui.events.append(("start", self.message))
        return self

    def stop(self, success=True):
        self.ui.events.append(("stop", self.message, success))

    def __enter__(self):
        return self.start()

    def __exit__(self, exc_type, exc, tb):
        self.stop(success=exc_type is None)
        return False


class FakeUI:
    """Records prompts and progress indications instead of drawing them."""

    def __init__(self, answers=None):
        self.answers = dict(answers or {})
        self.questions = []
        self.events = []

    def ask(self, question, default=""):
        self.questions.append((question, default))
        return self.answers.get(question, default)

    def progress(self, message):
        return FakeSpinner(self, message)


@pytest.fixture
def ui():
    """UI collaborator that answers prompts with their defaults."""
    return FakeUI()


@pytest.fixture
def run(tmp_path, ui):
    """Run template text in tmp_path and return the report."""
    def _run(text, **kwargs):
        return run_template(text, kwargs.pop("ui", ui), cwd=kwargs.pop("cwd", tmp_path), **kwargs)
    return _run


@pytest.fixture
def tmpl_config(tmp_path):
    """Point the global configuration at a throwaway data directory."""
    config = TmplConfig(data_dir=str(tmp_path / "data"), download_attempts=1)
    set_config(config)
    yield config
    set_config(None)
