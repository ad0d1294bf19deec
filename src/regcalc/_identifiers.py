"""Well-formedness checks for register identifiers."""

import re

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_ALPHANUMERIC_PATTERN = re.compile(r"[a-zA-Z0-9]+")


def is_integer_literal(identifier: str) -> bool:
    """Check if the identifier is a signed integer literal such as ``42`` or ``-7``."""
    return _INTEGER_PATTERN.fullmatch(identifier) is not None


def is_alphanumeric(identifier: str) -> bool:
    """Check if the identifier only contains ASCII letters and digits."""
    return _ALPHANUMERIC_PATTERN.fullmatch(identifier) is not None


def is_valid_register(identifier: str) -> bool:
    """Check if the identifier can be used as a register.

    A register is either an integer literal, which denotes itself,
    or an alphanumeric name.
    """
    return is_integer_literal(identifier) or is_alphanumeric(identifier)


def is_definable_register(identifier: str) -> bool:
    """Check if operations may be recorded against the identifier.

    Integer literals cannot be redefined, so only alphanumeric names
    that are not literals qualify.
    """
    return is_alphanumeric(identifier) and not is_integer_literal(identifier)
