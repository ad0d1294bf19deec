"""Line-oriented command loop driving a calculator."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from rich.markup import escape

from regcalc._eval import CycleError
from regcalc._operations import IllegalOperationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from rich.console import Console

    from regcalc._calculator import Calculator

logger = logging.getLogger(__name__)

QUIT_KEYWORD = "quit"
PRINT_KEYWORD = "print"


class IllegalCommandError(ValueError):
    """Raised when a line does not match any command."""

    def __init__(self, line: str) -> None:
        self.line = line
        super().__init__(f"Illegal command: {line}")


@dataclass(slots=True, frozen=True)
class RecordCommand:
    """``<register> <operator> <register>``"""

    term1: str
    operator: str
    term2: str


@dataclass(slots=True, frozen=True)
class PrintCommand:
    """``print <register>``"""

    register: str


@dataclass(slots=True, frozen=True)
class QuitCommand:
    """``quit``"""


Command = RecordCommand | PrintCommand | QuitCommand


@dataclass(slots=True)
class SessionSummary:
    """Counters for a finished session."""

    recorded: int = 0
    printed: int = 0
    errors: int = 0
    quit: bool = False

    @property
    def success(self) -> bool:
        return self.errors == 0


def parse_command(line: str) -> Command | None:
    """Parse one input line.

    Keywords are matched case-insensitively; registers and operators are kept
    as written.

    Returns:
        The parsed command, or None for a blank line.

    Raises:
        IllegalCommandError: If the line has no recognised shape.

    """
    words = line.split()
    match words:
        case []:
            return None
        case [keyword] if keyword.lower() == QUIT_KEYWORD:
            return QuitCommand()
        case [keyword, register] if keyword.lower() == PRINT_KEYWORD:
            return PrintCommand(register=register)
        case [term1, operator, term2]:
            return RecordCommand(term1=term1, operator=operator, term2=term2)
        case _:
            raise IllegalCommandError(line.strip())


def run_session(
    lines: Iterable[str],
    calculator: Calculator,
    out: Console,
    err: Console,
    *,
    strict: bool = False,
) -> SessionSummary:
    """Run commands until ``quit`` or the end of input.

    Printed values go to ``out``; rejected commands and cycle errors go to
    ``err``. Errors do not end the session unless ``strict`` is set, in which
    case the first one does.
    """
    summary = SessionSummary()

    for line in lines:
        try:
            command = parse_command(line)
            match command:
                case None:
                    continue
                case QuitCommand():
                    summary.quit = True
                    break
                case PrintCommand(register):
                    out.print(calculator.query_register(register), soft_wrap=True)
                    summary.printed += 1
                case RecordCommand(term1, operator, term2):
                    calculator.record_operation(term1, operator, term2)
                    summary.recorded += 1
        except IllegalOperationError as e:
            logger.debug("%s", e)
            err.print(escape(f"Illegal command: {line.strip()}"), soft_wrap=True)
            summary.errors += 1
        except (IllegalCommandError, CycleError) as e:
            err.print(escape(str(e)), soft_wrap=True)
            summary.errors += 1
        else:
            continue

        if strict:
            logger.debug("Stopping at first error (strict mode)")
            break

    return summary
