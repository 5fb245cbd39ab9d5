"""Save command."""

import logging
from typing import Optional

from ..backends import Backend, create_backend
from ..capture import capture
from ..config import Config
from ..models import SavedConfiguration
from ..store import LayoutStore

logger = logging.getLogger(__name__)


def save_layout(config: Config, backend: Optional[Backend] = None) -> SavedConfiguration:
    """
    Capture the current layout and replace the saved one.

    Every connected output is recorded, including disabled ones and heads
    behind a closed lid.

    Args:
        config: Config instance
        backend: Compositor backend (defaults to the configured one)

    Returns:
        The layout that was written

    Raises:
        EnumerationError: If the compositor cannot be queried
        DuplicateIdentityError: If two outputs cannot be told apart
        StoreWriteError: If the layout cannot be written
    """
    backend = backend or create_backend(config.backend)

    outputs = backend.enumerate()
    layout = capture(outputs)

    store = LayoutStore(config.get_store_path())
    store.save(layout)

    print(f"Saved {len(layout)} outputs to {store.path}")
    for output in outputs:
        print(f"  {output.name:10} {output.make} {output.model} {output.serial}".rstrip())
        print(f"  {'':10} {output.mode}")

    return layout
