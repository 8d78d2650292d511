"""Tests for FileHeapCompleter."""

import pytest

from prompt_toolkit.document import Document

from cli.completer import FileHeapCompleter
from cli.constants import COMMANDS


@pytest.fixture
def local_dir(tmp_path):
    """
    Create a temporary directory with files to upload.

    Returns:
        Path to the temporary directory
    """
    (tmp_path / "report.csv").write_text("content")
    (tmp_path / "readme.txt").write_text("content")
    (tmp_path / ".hidden").write_text("content")
    data = tmp_path / "data"
    data.mkdir()
    (data / "raw.bin").write_bytes(b"\x00")
    return tmp_path


@pytest.fixture
def completer(local_dir):
    """Create a FileHeapCompleter rooted at the temporary directory."""
    return FileHeapCompleter(base_dir=local_dir)


def get_completions_list(completer, text):
    """Helper to get list of completion texts from completer."""
    doc = Document(text, len(text))
    return [c.text for c in completer.get_completions(doc, None)]


class TestCommandCompletion:
    """Tests for command name completion."""

    def test_empty_input_lists_all_commands(self, completer):
        assert get_completions_list(completer, "") == COMMANDS

    def test_partial_command(self, completer):
        assert get_completions_list(completer, "s") == ["seal", "stat"]

    def test_partial_is_case_insensitive(self, completer):
        assert get_completions_list(completer, "UP") == ["upload"]

    def test_no_argument_completion_for_other_commands(self, completer):
        assert get_completions_list(completer, "list abc ") == []


class TestUploadCompletion:
    """Tests for local path completion in 'upload'."""

    def test_no_completion_for_package_id(self, completer):
        assert get_completions_list(completer, "upload ") == []

    def test_lists_local_entries(self, completer):
        assert get_completions_list(completer, "upload abc ") == ["data/", "readme.txt", "report.csv"]

    def test_partial_name(self, completer):
        assert get_completions_list(completer, "upload abc re") == ["readme.txt", "report.csv"]

    def test_completes_into_directory(self, completer):
        assert get_completions_list(completer, "upload abc data/") == ["data/raw.bin"]

    def test_hidden_files_need_dot_prefix(self, completer):
        assert get_completions_list(completer, "upload abc .") == [".hidden"]

    def test_no_completion_for_remote_path(self, completer):
        assert get_completions_list(completer, "upload abc readme.txt ") == []

    def test_missing_directory(self, completer):
        assert get_completions_list(completer, "upload abc missing/") == []
