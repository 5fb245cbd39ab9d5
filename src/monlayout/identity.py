"""
Stable output identity.

Connector names (DP-1, HDMI-A-1, ...) are handed out by the kernel in probe
order and change between boots, docks and cable swaps. Make, model and serial
come from EDID and follow the physical display, so those are used as the key.

Known limitation: displays that report no serial fall back to make+model.
Two identical such displays collide; see find_collisions().
"""

import logging
from typing import Dict, Iterable, List

from .models import IdentityKey, Output

logger = logging.getLogger(__name__)


def normalize(value: str) -> str:
    """Trim whitespace and fold case of a single identity attribute."""
    return (value or "").strip().casefold()


def make_key(make: str, model: str, serial: str) -> IdentityKey:
    """Build an identity key from raw EDID attributes."""
    return IdentityKey(
        make=normalize(make),
        model=normalize(model),
        serial=normalize(serial),
    )


def resolve(output: Output) -> IdentityKey:
    """
    Resolve the identity key of an output.

    The current connector name is ignored. Without a serial the key
    degrades to make+model only.
    """
    return make_key(output.make, output.model, output.serial)


def find_collisions(outputs: Iterable[Output]) -> Dict[IdentityKey, List[Output]]:
    """
    Group outputs that resolve to the same identity key.

    Returns:
        Mapping of colliding keys to the outputs sharing them. Empty when
        every output is uniquely identified.
    """
    groups: Dict[IdentityKey, List[Output]] = {}
    for output in outputs:
        groups.setdefault(resolve(output), []).append(output)

    collisions = {key: group for key, group in groups.items() if len(group) > 1}
    for key, group in collisions.items():
        names = ", ".join(o.name for o in group)
        logger.debug(f"Identity {key} shared by outputs: {names}")
    return collisions
