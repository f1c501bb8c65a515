"""
Ramus spinner: multi-line progress indicator rendered with rich.live.

Model
- The spinner keeps an ordered list of lines, each with a LineState.
  • SPINNING lines show the current animation frame.
  • SUCCEEDED / FAILED / INFO lines show a fixed symbol.
  • PRESERVED lines are log-like entries kept above the active step.
- A background thread advances the frame and refreshes the Live display every
  interval while the spinner runs. The line list is guarded by a lock and the
  running state is a threading.Event.

Operations
- start(message): reset the lines to one spinning line and start animating.
- update_message(message): retitle the last spinning line.
- next_step(message): mark the last spinning line succeeded, append a new one.
- add_line(message): insert a preserved line before the first spinning line.
- succeed/fail/info/preserve(message=None): settle the last spinning line (or
  append one) and stop. A later start() begins a fresh run.
- stop(): stop animating and leave the final frame on screen.

Interrupts
- Spinner.interrupts() installs a SIGINT handler bound to this instance for
  the duration of a with block: SIGINT exits with status 130 and the spinner
  is stopped as the block unwinds. The previous handler is restored on exit.
"""
import contextlib
import enum
import logging
import signal
import sys
import threading
import time
from collections import namedtuple

from rich.console import Console, Group
from rich.live import Live
from rich.text import Text

logger = logging.getLogger(__name__)

FRAMES = {
    "dots": ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏"),
    "dots2": ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷"),
    "circle": ("◐", "◓", "◑", "◒"),
    "line": ("-", "\\", "|", "/"),
    "simple-dots-scrolling": (".  ", ".. ", "...", " ..", "  .", "   "),
    "star": ("✶", "✸", "✹", "✺", "✹", "✷"),
    "clock": ("🕛", "🕐", "🕑", "🕒", "🕓", "🕔", "🕕", "🕖", "🕗", "🕘", "🕙", "🕚"),
    "triangle": ("◢", "◣", "◤", "◥"),
    "bouncing-bar": (
        "[    ]", "[=   ]", "[==  ]", "[=== ]", "[ ===]", "[  ==]", "[   =]", "[    ]",
        "[   =]", "[  ==]", "[ ===]", "[====]", "[=== ]", "[==  ]", "[=   ]",
    ),
    "grow-vertical": (" ", "▃", "▄", "▅", "▆", "▇", "▆", "▅", "▄", "▃"),
}


class LineState(enum.Enum):
    SPINNING = "spinning"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    INFO = "info"
    PRESERVED = "preserved"


SpinnerLine = namedtuple("SpinnerLine", ("message", "state"))

_SYMBOLS = {
    LineState.SUCCEEDED: ("✔", "green"),
    LineState.FAILED: ("✖", "red"),
    LineState.INFO: ("ℹ", "blue"),
    LineState.PRESERVED: ("»", "dim"),
}


class Spinner:
    """
    Terminal spinner with several lines of state.

    Parameters
    - console: rich Console to draw on (a new stdout console when None).
    - frames: name of a FRAMES entry or a sequence of frame strings.
    - interval: seconds between frames (default 0.08).
    """

    def __init__(self, *, console=None, frames="dots", interval=0.08):
        if isinstance(frames, str):
            try:
                frames = FRAMES[frames]
            except KeyError:
                raise ValueError(f"spinner 'frames' must be one of {', '.join(FRAMES)}") from None
        if not frames or not all(isinstance(frame, str) for frame in frames):
            raise TypeError("spinner 'frames' must be a non-empty sequence of strings")
        if not isinstance(interval, int | float) or interval <= 0:
            raise ValueError("spinner 'interval' must be a positive number")

        self._console = console if console is not None else Console()
        self._frames = tuple(frames)
        self._interval = interval
        self._lines = []
        self._index = 0
        self._lock = threading.Lock()
        self._running = threading.Event()
        self._thread = None
        self._live = None

    @property
    def lines(self):
        """
        Snapshot of the current lines as SpinnerLine(message, state) tuples.
        """
        with self._lock:
            return tuple(self._lines)

    @property
    def running(self):
        return self._running.is_set()

    def __rich__(self):
        with self._lock:
            lines = list(self._lines)
            frame = self._frames[self._index % len(self._frames)]
        spinning = self._running.is_set()

        renders = []
        for line in lines:
            if line.state is LineState.SPINNING:
                prefix = Text(frame, "cyan") if spinning else Text(" ")
            else:
                prefix = Text(*_SYMBOLS[line.state])
            renders.append(Text.assemble(prefix, " ", line.message))
        return Group(*renders)

    def _spin(self):
        while self._running.is_set():
            self._live.refresh()
            time.sleep(self._interval)
            with self._lock:
                self._index = (self._index + 1) % len(self._frames)

    def _last_spinning(self):
        for index in range(len(self._lines) - 1, -1, -1):
            if self._lines[index].state is LineState.SPINNING:
                return index
        return None

    def start(self, message, /):
        """
        Begin a new run with a single spinning line. No-op while already running.
        """
        if self._running.is_set():
            return
        with self._lock:
            self._lines = [SpinnerLine(str(message), LineState.SPINNING)]
            self._index = 0

        self._live = Live(self, console=self._console, auto_refresh=False)
        self._live.start()
        self._running.set()
        self._thread = threading.Thread(target=self._spin, name="ramus-spinner", daemon=True)
        self._thread.start()
        logger.debug("spinner started: %s", message)

    def update_message(self, message, /):
        """
        Retitle the last spinning line; nothing happens when no line is spinning.
        """
        with self._lock:
            if (index := self._last_spinning()) is not None:
                self._lines[index] = self._lines[index]._replace(message=str(message))

    def next_step(self, message, /):
        """
        Mark the current step succeeded and continue with a new spinning line.
        """
        with self._lock:
            if (index := self._last_spinning()) is not None:
                self._lines[index] = self._lines[index]._replace(state=LineState.SUCCEEDED)
            self._lines.append(SpinnerLine(str(message), LineState.SPINNING))

    def add_line(self, message, /):
        """
        Keep a log-like line above the spinning steps.
        """
        with self._lock:
            index = next(
                (index for index, line in enumerate(self._lines) if line.state is LineState.SPINNING),
                len(self._lines),
            )
            self._lines.insert(index, SpinnerLine(str(message), LineState.PRESERVED))

    def _finalize(self, state, message):
        with self._lock:
            if (index := self._last_spinning()) is not None:
                line = self._lines[index]
                self._lines[index] = SpinnerLine(line.message if message is None else str(message), state)
            elif message is not None:
                self._lines.append(SpinnerLine(str(message), state))
        self.stop()

    def succeed(self, message=None, /):
        self._finalize(LineState.SUCCEEDED, message)

    def fail(self, message=None, /):
        self._finalize(LineState.FAILED, message)

    def info(self, message=None, /):
        self._finalize(LineState.INFO, message)

    def preserve(self, message=None, /):
        self._finalize(LineState.PRESERVED, message)

    def stop(self):
        """
        Stop animating, join the render thread and draw the final frame.
        """
        if not self._running.is_set():
            return
        self._running.clear()
        self._teardown()

    def _teardown(self):
        if self._thread is not None:
            if self._thread is not threading.current_thread():
                self._thread.join()
            self._thread = None
        if self._live is not None:
            self._live.stop()
            self._live = None
            logger.debug("spinner stopped")

    @contextlib.contextmanager
    def interrupts(self):
        """
        Stop this spinner and exit with status 130 on SIGINT while the block runs.

        The handler only flags the render thread to finish and raises SystemExit.
        Joining the thread and drawing the final frame happen on the way out of
        the with block, once any lock held at interrupt time has been released.

        Must be used from the main thread, like signal.signal itself.
        """
        def handler(signum, frame):
            self._running.clear()
            sys.exit(130)

        previous = signal.signal(signal.SIGINT, handler)
        try:
            yield self
        finally:
            # None means the previous handler was not installed from Python
            signal.signal(signal.SIGINT, previous if previous is not None else signal.SIG_DFL)
            if not self._running.is_set():
                self._teardown()


__all__ = (
    "FRAMES",
    "LineState",
    "SpinnerLine",
    "Spinner",
)
