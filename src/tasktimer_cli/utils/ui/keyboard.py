"""Non-blocking keyboard input for the task board."""

import logging
import select
import sys
import termios
import tty

logger = logging.getLogger(__name__)


class KeyboardHandler:
    """Read single key presses without blocking.

    The terminal is switched to cbreak mode on start and restored on stop;
    stop before handing the terminal to a line-based prompt.
    """

    def __init__(self, stream=None):
        self.stream = stream or sys.stdin
        self.old_settings = None

    def __enter__(self) -> "KeyboardHandler":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.stop()

    @property
    def active(self) -> bool:
        return self.old_settings is not None

    def start(self) -> None:
        """Put the terminal in cbreak mode."""
        if self.active:
            return
        try:
            fd = self.stream.fileno()
            self.old_settings = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        except (termios.error, OSError, ValueError) as e:
            # Not a terminal (piped input, test runner)
            logger.debug("keyboard unavailable: %s", e)
            self.old_settings = None

    def get_key(self) -> str | None:
        """Return the pressed key, or None if nothing is waiting."""
        if not self.active:
            return None
        readable, _, _ = select.select([self.stream], [], [], 0)
        if not readable:
            return None
        return self.stream.read(1) or None

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.old_settings is None:
            return
        try:
            termios.tcsetattr(
                self.stream.fileno(), termios.TCSADRAIN, self.old_settings
            )
        finally:
            self.old_settings = None
