"""Snapshot of the current layout for saving."""

from typing import Sequence

from .exceptions import DuplicateIdentityError
from .identity import find_collisions, resolve
from .models import Output, SavedConfiguration, SavedEntry


def capture(current_outputs: Sequence[Output]) -> SavedConfiguration:
    """
    Record every current output's mode under its identity key.

    Modes are stored exactly as reported, disabled outputs included.

    Raises:
        DuplicateIdentityError: If two outputs share an identity key
    """
    collisions = find_collisions(current_outputs)
    if collisions:
        details = "; ".join(
            f"'{key}' ({', '.join(o.name for o in outputs)})"
            for key, outputs in collisions.items()
        )
        raise DuplicateIdentityError(
            f"Cannot save layout: outputs are indistinguishable: {details}. "
            "These displays report no unique serial number."
        )

    config = SavedConfiguration()
    for output in current_outputs:
        config.add(SavedEntry(
            identity=resolve(output),
            mode=output.mode,
            make=output.make,
            model=output.model,
            serial=output.serial,
        ))
    return config
