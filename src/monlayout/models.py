"""
Data model for monitor layouts.

Outputs come from the compositor, saved entries come from the layout store,
and restore actions are derived by the planner.
"""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Any, Iterator, List, Optional


@dataclass(frozen=True)
class Mode:
    """Display mode and placement of a single output."""
    width: int
    height: int
    refresh_rate: float  # Hz
    x: int = 0
    y: int = 0
    scale: float = 1.0
    transform: int = 0  # wl_output.transform: 0-3 rotations, 4-7 flipped
    enabled: bool = True
    vrr: bool = False

    def __str__(self) -> str:
        if not self.enabled:
            return "disabled"
        return (
            f"{self.width}x{self.height}@{self.refresh_rate:g}Hz "
            f"+{self.x},{self.y} scale {self.scale:g} transform {self.transform}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Mode':
        """Create from JSON dict."""
        return cls(**data)


@dataclass(frozen=True)
class IdentityKey:
    """
    Stable identity of a physical display.

    Fields are already normalized (trimmed, case-folded). An empty serial
    means the key was built from make and model only.
    """
    make: str
    model: str
    serial: str = ""

    @property
    def key(self) -> str:
        parts = [self.make, self.model]
        if self.serial:
            parts.append(self.serial)
        return "|".join(parts)

    @property
    def has_serial(self) -> bool:
        return bool(self.serial)

    def __str__(self) -> str:
        return self.key


@dataclass
class Output:
    """
    Output currently exposed by the compositor.

    name is the volatile connector label ("DP-1", "eDP-1") and is not part of
    the identity.
    """
    name: str
    make: str
    model: str
    serial: str
    mode: Mode
    preferred: Optional[Mode] = None

    def __repr__(self) -> str:
        return f"Output({self.name}, {self.make} {self.model} {self.serial})"


@dataclass(frozen=True)
class SavedEntry:
    """One physical display known at the last save."""
    identity: IdentityKey
    mode: Mode
    # Raw attributes as reported at save time, for display and round-tripping
    make: str = ""
    model: str = ""
    serial: str = ""


@dataclass
class SavedConfiguration:
    """
    Mapping from identity key to saved entry, in save order.

    Identities are unique; add() refuses duplicates.
    """
    entries: Dict[IdentityKey, SavedEntry] = field(default_factory=dict)

    def add(self, entry: SavedEntry) -> None:
        if entry.identity in self.entries:
            raise KeyError(entry.identity)
        self.entries[entry.identity] = entry

    def get(self, identity: IdentityKey) -> Optional[SavedEntry]:
        return self.entries.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self.entries

    def __iter__(self) -> Iterator[SavedEntry]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class LidRule:
    """Exclude head when the lid state file reports "closed"."""
    file: Path
    head: str


# ============================================================================
# Restore actions
# ============================================================================

@dataclass(frozen=True)
class RestoreAction:
    """Base class of the planner's per-output decisions."""
    identity: IdentityKey
    name: str


@dataclass(frozen=True)
class Apply(RestoreAction):
    """Apply a saved mode to the output currently called name."""
    mode: Mode

    def describe(self) -> str:
        return f"apply {self.mode}"


@dataclass(frozen=True)
class Skip(RestoreAction):
    """Leave the saved mode unapplied for a reason (e.g. lid closed)."""
    reason: str

    def describe(self) -> str:
        return f"skip ({self.reason})"


@dataclass(frozen=True)
class Unmatched(RestoreAction):
    """Output has no usable saved entry; left as the compositor has it."""

    def describe(self) -> str:
        return "unmatched, left unchanged"


RestorePlan = List[RestoreAction]
