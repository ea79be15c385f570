import logging
import sys
from os import getenv
from typing import Callable

from fips_180_4.sha import InputTooLarge, digest

logger = logging.getLogger(__name__)

PROMPT = "Enter your command: "
HASH_COMMAND = "sha256"
EXIT_COMMAND = "exit"
QUOTE = '"'
LOG_LEVEL = getenv("FIPS_180_4_LOG_LEVEL", "WARNING")


class Command:
    def __init__(self, raw: str):
        self.raw = raw.strip()
        tokens = self.raw.split()
        self.command, self.args = (tokens[0], tokens[1:]) if tokens else ("", [])

    def _quoted_argument(self) -> str | None:
        # No escape processing: exactly one leading and one trailing quote
        # are removed and anything between them is hashed verbatim.
        if len(self.args) != 1:
            return None
        arg = self.args[0]
        if len(arg) < 2 or not (arg.startswith(QUOTE) and arg.endswith(QUOTE)):
            return None
        return arg[1:-1]

    def is_exit(self) -> bool:
        return self.command == EXIT_COMMAND and not self.args

    def respond(self) -> str | None:
        """Return the line to print, or None if the loop should stop."""
        if self.is_exit():
            return None
        if self.command == HASH_COMMAND:
            text = self._quoted_argument()
            if text is not None:
                logger.debug(f"Hashing {len(text)} characters")
                try:
                    return f"Digest: {digest(text.encode())}"
                except InputTooLarge as e:
                    logger.warning(f"Rejected input: {e}")
                    return f"Error: {e}"
        logger.warning(f"Unsupported command: {self.raw!r}")
        return f"Unsupported command: {self.raw}"


def repl(
    read: Callable[[str], str] = input,
    write: Callable[[str], None] = print,
) -> None:
    while True:
        try:
            line = read(PROMPT)
        except EOFError:
            return
        response = Command(line).respond()
        if response is None:
            return
        write(response)


def setup_logging(level: str = LOG_LEVEL) -> None:
    log_level = getattr(logging, level.upper(), logging.WARNING)
    if not isinstance(log_level, int):
        log_level = logging.WARNING
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def main() -> None:
    setup_logging()
    repl(input, print)


if __name__ == "__main__":
    main()
