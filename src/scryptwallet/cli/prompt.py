"""Interactive input for the four wallet factors.

Secrets are read with masked echo (one ``*`` per character) while the
terminal is in raw mode. Raw mode is only ever held inside raw_terminal(),
which restores the previous terminal state on every exit path.

Secrets are returned as bytes exactly as entered: no trimming, no Unicode
normalization. Either would change the derived wallet.
"""

import codecs
import logging
import os
import re
import sys
from contextlib import contextmanager
from getpass import getpass
from typing import Callable, Iterator, Optional, TextIO

from scryptwallet.config import get_settings
from scryptwallet.errors import InvalidParameterError

logger = logging.getLogger(__name__)

CTRL_C = "\x03"
BACKSPACE = ("\x08", "\x7f")
ESC = "\x1b"
ENTER = ("\r", "\n")

_POSITIVE_INT = re.compile(r"^[0-9]+$")


@contextmanager
def raw_terminal(fd: int) -> Iterator[None]:
    """Put a terminal in raw mode for the duration of the context."""
    import termios
    import tty

    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def _skip_escape_sequence(next_char: Callable[[], str]) -> None:
    """Consume the rest of an escape sequence after ESC.

    CSI (ESC [) and SS3 (ESC O) sequences run up to a final byte in
    0x40-0x7E; any other ESC pair is two characters long.
    """
    intro = next_char()
    if intro not in ("[", "O"):
        return
    while True:
        ch = next_char()
        if not ch or 0x40 <= ord(ch) <= 0x7E:
            return


def read_masked(next_char: Callable[[], str], echo: Callable[[str], None]) -> str:
    """Collect characters until Enter, echoing ``*`` for each one kept.

    Args:
        next_char: Returns the next input character, or "" at end of input
        echo: Writes feedback to the terminal

    Returns:
        The entered text

    Raises:
        KeyboardInterrupt: On Ctrl-C
    """
    chars: list[str] = []

    while True:
        ch = next_char()
        if not ch or ch in ENTER:
            break

        if ch == CTRL_C:
            echo("\r\n")
            raise KeyboardInterrupt

        if ch in BACKSPACE:
            if chars:
                chars.pop()
                echo("\b \b")
            continue

        if ch == ESC:
            _skip_escape_sequence(next_char)
            continue

        if ord(ch) < 32:
            continue

        chars.append(ch)
        echo("*")

    echo("\r\n")
    return "".join(chars)


def _fd_reader(fd: int) -> Callable[[], str]:
    """Build a next_char function reading UTF-8 characters from a file descriptor."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def next_char() -> str:
        while True:
            data = os.read(fd, 1)
            if not data:
                return decoder.decode(b"", final=True)
            ch = decoder.decode(data)
            if ch:
                return ch

    return next_char


def _readline(stdin: TextIO) -> bytes:
    """Read one line as raw bytes, without its trailing newline.

    The underlying binary buffer is used when there is one so piped
    secrets reach the derivation byte-for-byte, valid UTF-8 or not.
    """
    buffer = getattr(stdin, "buffer", None)
    if buffer is not None:
        line = buffer.readline()
    else:
        line = _encode(stdin.readline())
    return line[:-1] if line.endswith(b"\n") else line


def _encode(text: str) -> bytes:
    """UTF-8 encode typed text, without echoing it on failure."""
    try:
        return text.encode("utf-8")
    except UnicodeError:
        raise InvalidParameterError("Input is not valid UTF-8 text") from None


def read_secret(
    prompt: str,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> bytes:
    """Read one secret factor without echoing it.

    On a terminal the input is masked with ``*`` and returned UTF-8
    encoded. When stdin is not a terminal (a pipe or file) one line is
    read as raw bytes and its newline stripped.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    stdout.write(prompt)
    stdout.flush()

    if not stdin.isatty():
        return _readline(stdin)

    try:
        fd = stdin.fileno()
        import termios  # noqa: F401
    except (ImportError, OSError, ValueError):
        # No termios (Windows): hidden input without masking
        return _encode(getpass("", stream=stdout))

    def echo(text: str) -> None:
        stdout.write(text)
        stdout.flush()

    with raw_terminal(fd):
        return _encode(read_masked(_fd_reader(fd), echo))


def parse_cost_exponent(text: str) -> int:
    """Parse a cost exponent as a positive base-10 integer.

    Raises:
        InvalidParameterError: If the text is not a positive integer
    """
    value = text.strip()
    if not _POSITIVE_INT.match(value):
        raise InvalidParameterError("Please enter a valid positive number for the cost parameter")
    exponent = int(value, 10)
    if exponent <= 0:
        raise InvalidParameterError("Please enter a valid positive number for the cost parameter")
    return exponent


def read_cost_exponent(
    prompt: str,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """Prompt for the cost exponent (visible input)."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    stdout.write(prompt)
    stdout.flush()
    return parse_cost_exponent(_readline(stdin).decode("ascii", errors="replace"))


def require_factors(password: bytes, user_salt: bytes, application_salt: bytes) -> None:
    """Enforce the non-empty factor policy from settings.

    Raises:
        InvalidParameterError: Naming the missing factors, never their values
    """
    if not get_settings().require_all_factors:
        return

    missing = [
        name
        for name, value in (
            ("password", password),
            ("user salt", user_salt),
            ("application salt", application_salt),
        )
        if not value
    ]
    if missing:
        raise InvalidParameterError(
            "Password, user salt, and application salt are all required "
            f"(missing: {', '.join(missing)})"
        )
