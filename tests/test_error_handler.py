"""Tests for the unified CLI error handler."""
import pytest
import typer
from rich.console import Console

from metrix import ui
from metrix.error_handler import _debug_mode, handle_errors
from metrix.errors import DecodeError, MetrixError, PackageNotFoundError


@pytest.fixture
def captured(monkeypatch):
    console = Console(record=True, width=300)
    monkeypatch.setattr(ui, "console", console)
    return console


class TestHandleErrorsDecorator:
    def test_passes_through_on_success(self):
        @handle_errors
        def good_func():
            return "ok"

        assert good_func() == "ok"

    def test_catches_decode_error(self, captured):
        @handle_errors
        def bad_func():
            raise DecodeError("Payload is not a valid gzip stream", stage="decompress")

        with pytest.raises(typer.Exit) as exc_info:
            bad_func()
        assert exc_info.value.exit_code == 2
        output = captured.export_text()
        assert "Payload is not a valid gzip stream" in output
        assert "metrix pack" in output

    def test_catches_lookup_miss(self, captured):
        @handle_errors
        def bad_func():
            raise PackageNotFoundError("a.b")

        with pytest.raises(typer.Exit) as exc_info:
            bad_func()
        assert exc_info.value.exit_code == 1
        assert "metrix tree" in captured.export_text()

    def test_catches_generic_metrix_error(self, captured):
        @handle_errors
        def bad_func():
            raise MetrixError("generic issue")

        with pytest.raises(typer.Exit) as exc_info:
            bad_func()
        assert exc_info.value.exit_code == 1

    def test_context_shown_in_debug(self, captured, monkeypatch):
        monkeypatch.setenv("METRIX_DEBUG", "1")

        @handle_errors
        def bad_func():
            raise DecodeError("bad", stage="transport", source="x.b64")

        with pytest.raises(typer.Exit):
            bad_func()
        output = captured.export_text()
        assert "stage: transport" in output
        assert "source: x.b64" in output

    def test_catches_unexpected_error(self, captured):
        @handle_errors
        def crash_func():
            raise RuntimeError("oops")

        with pytest.raises(typer.Exit) as exc_info:
            crash_func()
        assert exc_info.value.exit_code == 1
        assert "METRIX_DEBUG=1" in captured.export_text()

    def test_catches_keyboard_interrupt(self, captured):
        @handle_errors
        def interrupted():
            raise KeyboardInterrupt()

        with pytest.raises(typer.Exit) as exc_info:
            interrupted()
        assert exc_info.value.exit_code == 130

    def test_exit_passes_through(self):
        @handle_errors
        def exits():
            raise typer.Exit(3)

        with pytest.raises(typer.Exit) as exc_info:
            exits()
        assert exc_info.value.exit_code == 3


class TestDebugMode:
    def test_debug_off_by_default(self):
        assert _debug_mode() is False

    def test_debug_on_with_1(self, monkeypatch):
        monkeypatch.setenv("METRIX_DEBUG", "1")
        assert _debug_mode() is True

    def test_debug_on_with_true(self, monkeypatch):
        monkeypatch.setenv("METRIX_DEBUG", "true")
        assert _debug_mode() is True

    def test_debug_off_with_0(self, monkeypatch):
        monkeypatch.setenv("METRIX_DEBUG", "0")
        assert _debug_mode() is False
