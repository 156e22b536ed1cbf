"""Unit tests for the keyboard handler."""

import io
import termios
from unittest.mock import MagicMock, patch

from tasktimer_cli.utils.ui.keyboard import KeyboardHandler


def _stream(data: str = "") -> MagicMock:
    stream = MagicMock()
    stream.fileno.return_value = 7
    stream.read.side_effect = io.StringIO(data).read
    return stream


class TestKeyboardHandler:
    def test_not_a_terminal_is_inactive(self):
        stream = _stream()
        with patch(
            "tasktimer_cli.utils.ui.keyboard.termios.tcgetattr",
            side_effect=termios.error(25, "Inappropriate ioctl for device"),
        ):
            handler = KeyboardHandler(stream)
            handler.start()

        assert handler.active is False
        assert handler.get_key() is None
        handler.stop()

    def test_start_enters_cbreak_and_stop_restores(self):
        stream = _stream()
        with (
            patch("tasktimer_cli.utils.ui.keyboard.termios.tcgetattr", return_value=["old"]),
            patch("tasktimer_cli.utils.ui.keyboard.tty.setcbreak") as mock_cbreak,
            patch("tasktimer_cli.utils.ui.keyboard.termios.tcsetattr") as mock_set,
        ):
            with KeyboardHandler(stream) as handler:
                assert handler.active is True
                mock_cbreak.assert_called_once_with(7)

        mock_set.assert_called_once_with(7, termios.TCSADRAIN, ["old"])
        assert handler.active is False

    def test_get_key_reads_when_ready(self):
        stream = _stream("x")
        with (
            patch("tasktimer_cli.utils.ui.keyboard.termios.tcgetattr", return_value=["old"]),
            patch("tasktimer_cli.utils.ui.keyboard.tty.setcbreak"),
            patch("tasktimer_cli.utils.ui.keyboard.termios.tcsetattr"),
            patch(
                "tasktimer_cli.utils.ui.keyboard.select.select",
                side_effect=[([stream], [], []), ([], [], [])],
            ),
        ):
            handler = KeyboardHandler(stream)
            handler.start()
            assert handler.get_key() == "x"
            assert handler.get_key() is None
            handler.stop()

    def test_start_is_idempotent(self):
        stream = _stream()
        with (
            patch(
                "tasktimer_cli.utils.ui.keyboard.termios.tcgetattr", return_value=["old"]
            ) as mock_get,
            patch("tasktimer_cli.utils.ui.keyboard.tty.setcbreak"),
            patch("tasktimer_cli.utils.ui.keyboard.termios.tcsetattr"),
        ):
            handler = KeyboardHandler(stream)
            handler.start()
            handler.start()
            handler.stop()

        mock_get.assert_called_once()
