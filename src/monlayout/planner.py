"""
Restore planning.

Pure decision logic: given what is connected, what was saved and which heads
sit behind a closed lid, decide per output what restore should do. Executing
the plan is left to the restore command.
"""

import logging
from typing import Iterable, List, Sequence

from .identity import find_collisions, resolve
from .models import (
    Apply,
    Output,
    RestoreAction,
    SavedConfiguration,
    Skip,
    Unmatched,
)

logger = logging.getLogger(__name__)

LID_CLOSED = "lid closed"


def plan(
    current_outputs: Sequence[Output],
    saved_config: SavedConfiguration,
    excluded_heads: Iterable[str],
) -> List[RestoreAction]:
    """
    Compute the restore plan, one action per current output.

    Args:
        current_outputs: Outputs in compositor enumeration order
        saved_config: Layout loaded from the store
        excluded_heads: Connector names excluded by closed lids

    Returns:
        Actions in enumeration order. Saved entries without a connected
        output produce nothing.
    """
    excluded = set(excluded_heads)
    ambiguous = find_collisions(current_outputs)
    actions: List[RestoreAction] = []

    for output in current_outputs:
        identity = resolve(output)

        if output.name in excluded:
            actions.append(Skip(identity=identity, name=output.name, reason=LID_CLOSED))
        elif identity in ambiguous:
            logger.warning(
                f"Output {output.name} shares identity '{identity}' with another "
                "connected output; leaving it unchanged"
            )
            actions.append(Unmatched(identity=identity, name=output.name))
        elif identity in saved_config:
            entry = saved_config.get(identity)
            actions.append(Apply(identity=identity, name=output.name, mode=entry.mode))
        else:
            actions.append(Unmatched(identity=identity, name=output.name))

    return actions
