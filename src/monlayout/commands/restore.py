"""Restore command.

Loads the saved layout, plans against the connected outputs and executes the
plan one output at a time. A failure on one output is recorded and the rest
of the plan still runs.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Set

from ..backends import Backend, create_backend
from ..config import Config
from ..exceptions import ApplyError, StoreNotFoundError
from ..lid import excluded_heads
from ..models import Apply, Mode, Output, RestoreAction, Skip, Unmatched
from ..planner import plan
from ..store import LayoutStore

logger = logging.getLogger(__name__)


@dataclass
class RestoreResult:
    """Outcome of a restore run."""
    actions: List[RestoreAction] = field(default_factory=list)
    applied: List[str] = field(default_factory=list)  # Output names changed
    unchanged: List[str] = field(default_factory=list)  # Already matching
    failed: Dict[str, str] = field(default_factory=dict)  # Output name -> error
    fallback: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed


def modes_match(current: Mode, target: Mode) -> bool:
    """Check whether an output already shows the target mode."""
    if not current.enabled and not target.enabled:
        return True
    return current == target


def restore_layout(
    config: Config,
    backend: Optional[Backend] = None,
    dry_run: bool = False,
    fallback_to_default: Optional[bool] = None,
) -> RestoreResult:
    """
    Restore the saved layout onto the connected outputs.

    Args:
        config: Config instance
        backend: Compositor backend (defaults to the configured one)
        dry_run: Print the plan without touching the compositor
        fallback_to_default: Use preferred modes when nothing is saved
            (defaults to the [restore] setting)

    Returns:
        RestoreResult; result.ok is False if any output failed to apply

    Raises:
        ConfigParseError: If the saved layout is malformed
        StoreNotFoundError: If nothing is saved and fallback is off
        EnumerationError: If the compositor cannot be queried
    """
    backend = backend or create_backend(config.backend)
    if fallback_to_default is None:
        fallback_to_default = config.restore.fallback_to_default

    excluded = excluded_heads(config.lid)

    store = LayoutStore(config.get_store_path())
    try:
        saved = store.load()
    except StoreNotFoundError as e:
        if not fallback_to_default:
            raise
        logger.error(f"{e} Falling back to preferred modes.")
        saved = None

    outputs = backend.enumerate()

    if saved is None:
        return _restore_fallback(backend, outputs, excluded, dry_run)

    result = RestoreResult(actions=plan(outputs, saved, excluded))
    by_name = {output.name: output for output in outputs}

    for action in result.actions:
        output = by_name[action.name]
        if dry_run:
            print(f"  {action.name:10} {action.identity}: {action.describe()}")
            continue

        if isinstance(action, Apply):
            _execute(backend, result, output, action.mode)
        elif isinstance(action, Skip):
            logger.info(f"Skipping {action.name}: {action.reason}")
            if config.restore.disable_lid_closed and output.mode.enabled:
                _execute(backend, result, output, replace(output.mode, enabled=False))
        elif isinstance(action, Unmatched):
            logger.info(f"No saved mode for {action.name} ({action.identity}), leaving unchanged")

    return result


def _execute(backend: Backend, result: RestoreResult, output: Output, mode: Mode) -> None:
    """Apply one mode, recording success or failure on the result."""
    if modes_match(output.mode, mode):
        logger.info(f"{output.name} already at {mode}, nothing to do")
        result.unchanged.append(output.name)
        return

    try:
        backend.apply(output, mode)
    except ApplyError as e:
        logger.error(f"Failed to apply {mode} to {output.name}: {e}")
        result.failed[output.name] = str(e)
        return

    logger.info(f"Applied {mode} to {output.name}")
    result.applied.append(output.name)


def _restore_fallback(
    backend: Backend,
    outputs: List[Output],
    excluded: Set[str],
    dry_run: bool,
) -> RestoreResult:
    """
    Lay out outputs left to right at their preferred modes.

    Outputs behind a closed lid are turned off.
    """
    result = RestoreResult(fallback=True)
    x = 0

    for output in outputs:
        if output.name in excluded:
            if dry_run:
                print(f"  {output.name:10} off (lid closed)")
            elif output.mode.enabled:
                try:
                    backend.disable(output)
                    result.applied.append(output.name)
                except ApplyError as e:
                    logger.error(f"Failed to disable {output.name}: {e}")
                    result.failed[output.name] = str(e)
            continue

        if dry_run:
            print(f"  {output.name:10} preferred mode at {x},0")
            x += (output.preferred or output.mode).width
            continue

        try:
            x += backend.apply_preferred(output, x)
            result.applied.append(output.name)
        except ApplyError as e:
            logger.error(f"Failed to enable {output.name}: {e}")
            result.failed[output.name] = str(e)

    return result
