"""Unit tests for the shared console."""

from tasktimer_cli.utils.ui.console import get_console


class TestGetConsole:
    def setup_method(self):
        get_console.cache_clear()

    def test_color_by_default(self):
        assert get_console().no_color is False

    def test_color_disabled(self):
        assert get_console(color=False).no_color is True

    def test_cached_per_arguments(self):
        assert get_console(color=False) is get_console(color=False)
        assert get_console(color=False) is not get_console()
