"""Info command.

Shows connected heads, their identity keys and how restore would treat them.
"""

import json
from typing import Any, Dict, Optional

from ..backends import Backend, create_backend
from ..config import Config
from ..exceptions import StoreNotFoundError
from ..identity import find_collisions, resolve
from ..lid import excluded_heads
from ..models import SavedConfiguration
from ..store import LayoutStore


def _load_saved(store: LayoutStore) -> Optional[SavedConfiguration]:
    """Load the saved layout, None if missing."""
    try:
        return store.load()
    except StoreNotFoundError:
        return None


def get_info_json(config: Config, backend: Backend) -> Dict[str, Any]:
    """
    Get connected heads as JSON-serializable dict.

    Raises:
        ConfigParseError: If the saved layout is malformed
    """
    store = LayoutStore(config.get_store_path())
    saved = _load_saved(store)
    outputs = backend.enumerate()
    excluded = excluded_heads(config.lid)
    ambiguous = find_collisions(outputs)

    heads = []
    for output in outputs:
        identity = resolve(output)
        heads.append({
            "name": output.name,
            "make": output.make,
            "model": output.model,
            "serial": output.serial,
            "identity": identity.key,
            "mode": output.mode.to_dict(),
            "lid_closed": output.name in excluded,
            "ambiguous": identity in ambiguous,
            "saved": saved is not None and identity in saved,
        })

    return {
        "backend": config.backend.type,
        "store": str(store.path),
        "store_exists": saved is not None,
        "heads": heads,
    }


def show_info(config: Config, backend: Optional[Backend] = None, json_output: bool = False) -> None:
    """
    Display connected heads and saved layout status.

    Args:
        config: Config instance
        backend: Compositor backend (defaults to the configured one)
        json_output: If True, output JSON instead of human-readable text
    """
    backend = backend or create_backend(config.backend)
    info = get_info_json(config, backend)

    if json_output:
        print(json.dumps(info, indent=2))
        return

    heads = info["heads"]
    print(f"{len(heads)} connected heads:")
    for head in heads:
        flags = []
        if head["lid_closed"]:
            flags.append("lid closed")
        if head["ambiguous"]:
            flags.append("ambiguous identity")
        suffix = f" [{', '.join(flags)}]" if flags else ""

        print(f"* {head['name']}{suffix}")
        print(f"  Make:     {head['make']}")
        print(f"  Model:    {head['model']}")
        print(f"  Serial:   {head['serial']}")
        print(f"  Identity: {head['identity']}")
        print(f"  Saved:    {'yes' if head['saved'] else 'no'}")

    state = "" if info["store_exists"] else " (not saved yet)"
    print(f"Configuration path: {info['store']}{state}")
