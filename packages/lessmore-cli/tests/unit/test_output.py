"""Unit tests for lessmore_cli.output module."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from lessmore_cli import output


@pytest.fixture
def plain_console() -> Iterator[None]:
    """Swap in a colourless console writing to the captured stdout."""
    original = output.console
    output.console = output.create_console(no_color=True)
    try:
        yield
    finally:
        output.console = original


class TestCreateConsole:
    """Tests for create_console function."""

    def test_no_color(self) -> None:
        """no_color=True disables colours."""
        assert output.create_console(no_color=True).no_color is True

    def test_set_no_color_replaces_console(self) -> None:
        """set_no_color swaps the module console."""
        original = output.console
        try:
            output.set_no_color(True)
            assert output.console is not original
            assert output.console.no_color is True
        finally:
            output.console = original


@pytest.mark.usefixtures("plain_console")
class TestMessages:
    """Tests for the message helpers."""

    def test_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """success() prefixes a checkmark."""
        output.success("Wrote 2 stylesheet(s)")
        captured = capsys.readouterr()
        assert "✓ Wrote 2 stylesheet(s)" in captured.out

    def test_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """error() prefixes a cross."""
        output.error("screen not found")
        assert "✗ screen not found" in capsys.readouterr().out

    def test_warning(self, capsys: pytest.CaptureFixture[str]) -> None:
        """warning() prefixes a triangle."""
        output.warning("no roots")
        assert "⚠ no roots" in capsys.readouterr().out

    def test_notice_is_verbatim(self, capsys: pytest.CaptureFixture[str]) -> None:
        """notice() prints markup-like text unchanged."""
        output.notice("writing /srv/public/[red]/screen.css")
        assert capsys.readouterr().out == "writing /srv/public/[red]/screen.css\n"
