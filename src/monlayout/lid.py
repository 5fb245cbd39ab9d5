"""
Lid state interpretation.

Reads ACPI lid state files such as /proc/acpi/button/lid/LID0/state, whose
content looks like "state:      closed".
"""

import logging
from typing import Iterable, Set

from .exceptions import LidFileReadError
from .models import LidRule

logger = logging.getLogger(__name__)

CLOSED_SUFFIX = "closed"


def read_lid_state(rule: LidRule) -> bool:
    """
    Check whether the lid file of a rule reports "closed".

    Args:
        rule: Lid rule to evaluate

    Returns:
        True if the trimmed file contents end with "closed"

    Raises:
        LidFileReadError: If the file is missing or unreadable
    """
    try:
        contents = rule.file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise LidFileReadError(f"Cannot read lid state file {rule.file}: {e}") from e

    return contents.strip().endswith(CLOSED_SUFFIX)


def excluded_heads(rules: Iterable[LidRule]) -> Set[str]:
    """
    Collect the head names to exclude because their lid is closed.

    Unreadable lid files are treated as "lid open" with a warning.
    """
    heads: Set[str] = set()
    for rule in rules:
        try:
            closed = read_lid_state(rule)
        except LidFileReadError as e:
            logger.warning(f"{e}; treating lid for {rule.head} as open")
            continue

        if closed:
            logger.info(f"Lid closed ({rule.file}), excluding {rule.head}")
            heads.add(rule.head)
        else:
            logger.debug(f"Lid open ({rule.file}), keeping {rule.head}")
    return heads
