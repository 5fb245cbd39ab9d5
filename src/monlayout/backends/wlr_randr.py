"""
Backend for wlroots compositors via wlr-randr.

Works with any compositor implementing wlr-output-management (sway, river,
labwc, Hyprland, ...).
"""

from typing import Any, Dict, List, Optional

from ..exceptions import CompositorCommunicationError
from ..models import Mode, Output
from .base import Backend, format_number

TRANSFORMS = {
    "normal": 0,
    "90": 1,
    "180": 2,
    "270": 3,
    "flipped": 4,
    "flipped-90": 5,
    "flipped-180": 6,
    "flipped-270": 7,
}
TRANSFORMS_INV = {v: k for k, v in TRANSFORMS.items()}


class WlrRandrBackend(Backend):
    """Query and configure outputs with wlr-randr."""

    name = "wlr-randr"
    default_executable = "wlr-randr"

    def enumerate(self) -> List[Output]:
        return self._parse_outputs(self._query_json(["--json"]), self._parse_head)

    def _parse_head(self, head: Dict[str, Any]) -> Output:
        """
        Parse one entry of wlr-randr --json.

        Example entry:
        {
          "name": "DP-1",
          "make": "Dell Inc.",
          "model": "DELL U2412M",
          "serial": "S1",
          "enabled": true,
          "modes": [{"width": 1920, "height": 1200, "refresh": 59.95,
                     "preferred": true, "current": true}],
          "position": {"x": 0, "y": 0},
          "transform": "normal",
          "scale": 1.0,
          "adaptive_sync": false
        }

        Wrongly typed fields raise TypeError or ValueError, which
        enumerate() reports as a communication error.
        """
        name = head.get("name")
        if not name:
            raise CompositorCommunicationError("wlr-randr reported an output without a name")

        modes = head.get("modes") or []
        if not isinstance(modes, list) or not all(isinstance(m, dict) for m in modes):
            raise TypeError(f"'modes' of {name} must be a list of objects")
        current = next((m for m in modes if m.get("current")), None)
        preferred = next((m for m in modes if m.get("preferred")), None)
        # Disabled outputs have no current mode; keep something sensible for geometry
        base = current or preferred or (modes[0] if modes else {})

        position = head.get("position") or {}
        if not isinstance(position, dict):
            raise TypeError(f"'position' of {name} must be an object")

        transform = head.get("transform") or "normal"
        if transform not in TRANSFORMS:
            raise ValueError(f"unknown transform {transform!r} on {name}")

        mode = Mode(
            width=int(base.get("width", 0)),
            height=int(base.get("height", 0)),
            refresh_rate=float(base.get("refresh", 0.0)),
            x=int(position.get("x", 0)),
            y=int(position.get("y", 0)),
            scale=float(head.get("scale") or 1.0),
            transform=TRANSFORMS[transform],
            enabled=bool(head.get("enabled", False)) and bool(modes),
            vrr=bool(head.get("adaptive_sync", False)),
        )

        preferred_mode: Optional[Mode] = None
        if preferred:
            preferred_mode = Mode(
                width=int(preferred.get("width", 0)),
                height=int(preferred.get("height", 0)),
                refresh_rate=float(preferred.get("refresh", 0.0)),
            )

        return Output(
            name=str(name),
            make=str(head.get("make") or ""),
            model=str(head.get("model") or ""),
            serial=str(head.get("serial") or ""),
            mode=mode,
            preferred=preferred_mode,
        )

    def build_args(self, output: Output, mode: Mode) -> List[str]:
        """Build the wlr-randr arguments configuring one output."""
        args = ["--output", output.name]
        if not mode.enabled:
            args.append("--off")
            return args

        args += [
            "--on",
            "--mode", f"{mode.width}x{mode.height}@{format_number(mode.refresh_rate)}Hz",
            "--pos", f"{mode.x},{mode.y}",
            "--scale", format_number(mode.scale),
            "--transform", TRANSFORMS_INV.get(mode.transform, "normal"),
            "--adaptive-sync", "enabled" if mode.vrr else "disabled",
        ]
        return args

    def apply(self, output: Output, mode: Mode) -> None:
        self._run_command(self.build_args(output, mode), output.name)

    def apply_preferred(self, output: Output, x: int) -> int:
        args = [
            "--output", output.name,
            "--on",
            "--preferred",
            "--pos", f"{x},0",
            "--scale", "1",
            "--transform", "normal",
        ]
        self._run_command(args, output.name)
        reference = output.preferred or output.mode
        return reference.width
