"""Tests for the annotext command-line entry point."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

import pytest

from annotext import cli
from annotext.filters import AnnotationError

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def no_logging_setup(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep main() from attaching handlers to the root logger."""
    monkeypatch.setattr(cli, "_setup_logging", lambda: None)


def set_stdin(monkeypatch: pytest.MonkeyPatch, text: str) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO(text))


@pytest.mark.usefixtures("no_logging_setup")
class TestMain:
    """Exit codes and output of main()."""

    def test_plain_text_from_stdin(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        set_stdin(monkeypatch, "ping @kneath about #release")

        assert cli.main(["--text"]) == 0

        out = capsys.readouterr().out
        assert out == (
            '<div>ping <span class="mention-kneath">kneath</span> about '
            '<span class="hashtag-release">release</span></div>\n'
        )

    def test_html_file_with_selected_filter(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        source = tmp_path / "in.html"
        source.write_text("<p>#tag @user</p>", encoding="utf-8")

        assert cli.main([str(source), "--filter", "hashtag"]) == 0

        out = capsys.readouterr().out
        assert out == '<p><span class="hashtag-tag">tag</span> @user</p>\n'

    def test_entities_table_on_stderr(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        set_stdin(monkeypatch, "#release for @kneath")

        assert cli.main(["--text", "--entities"]) == 0

        err = capsys.readouterr().err
        assert "hashtags" in err
        assert "release" in err
        assert "kneath" in err
        assert "none" in err

    def test_unknown_filter(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert cli.main(["--filter", "bogus", "--filter", "hashtag"]) == 2
        assert "unknown filter(s): bogus" in capsys.readouterr().err

    def test_annotation_error_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        class FailingPipeline:
            def __init__(self, filters):
                self.filters = filters

            def call(self, doc):
                raise AnnotationError("HashtagFilter", "bad builder")

        monkeypatch.setattr(cli, "Pipeline", FailingPipeline)
        set_stdin(monkeypatch, "#x")

        assert cli.main([]) == 1
        assert "HashtagFilter: bad builder" in capsys.readouterr().err


class TestSetupLogging:
    def test_installs_one_handler(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Repeated calls do not stack handlers."""
        root = logging.getLogger()
        saved_handlers = root.handlers[:]
        saved_level = root.level
        monkeypatch.setenv("ANNOTEXT_LOGGING__LEVEL", "warning")

        try:
            cli._setup_logging()
            cli._setup_logging()

            ours = [h for h in root.handlers if getattr(h, "_annotext", False)]
            assert len(ours) == 1
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
