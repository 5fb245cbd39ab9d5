"""
Backend for Hyprland via hyprctl.

Changes are made with runtime "keyword monitor" rules, which Hyprland keeps
until the next config reload.
"""

import re
from typing import Any, Dict, List, Optional

from ..exceptions import ApplyError, CompositorCommunicationError
from ..models import Mode, Output
from .base import Backend, format_number

# Entries of availableModes look like "1920x1080@60.00Hz"
MODE_PATTERN = re.compile(r'^(\d+)x(\d+)@([\d.]+)Hz$')


class HyprctlBackend(Backend):
    """Query and configure outputs with hyprctl."""

    name = "hyprctl"
    default_executable = "hyprctl"

    def enumerate(self) -> List[Output]:
        return self._parse_outputs(
            self._query_json(["-j", "monitors", "all"]), self._parse_monitor
        )

    def _parse_monitor(self, monitor: Dict[str, Any]) -> Output:
        """
        Parse one entry of hyprctl -j monitors all.

        Example entry:
        {
          "name": "DP-1",
          "make": "Dell Inc.",
          "model": "DELL U2412M",
          "serial": "S1",
          "width": 1920, "height": 1200, "refreshRate": 59.95,
          "x": 0, "y": 0, "scale": 1.00, "transform": 0,
          "disabled": false, "vrr": false,
          "availableModes": ["1920x1200@59.95Hz", "1920x1080@60.00Hz"]
        }
        """
        name = monitor.get("name")
        if not name:
            raise CompositorCommunicationError("hyprctl reported a monitor without a name")

        mode = Mode(
            width=int(monitor.get("width", 0)),
            height=int(monitor.get("height", 0)),
            refresh_rate=float(monitor.get("refreshRate", 0.0)),
            x=int(monitor.get("x", 0)),
            y=int(monitor.get("y", 0)),
            scale=float(monitor.get("scale", 1.0)),
            transform=int(monitor.get("transform", 0)),
            enabled=not monitor.get("disabled", False),
            vrr=bool(monitor.get("vrr", False)),
        )

        return Output(
            name=str(name),
            make=str(monitor.get("make") or ""),
            model=str(monitor.get("model") or ""),
            serial=str(monitor.get("serial") or ""),
            mode=mode,
            preferred=self._parse_preferred(monitor.get("availableModes") or []),
        )

    @staticmethod
    def _parse_preferred(available: List[str]) -> Optional[Mode]:
        """
        Guess the preferred mode from availableModes.

        hyprctl has no preferred flag. Its list follows the kernel's connector
        mode list, which puts the EDID preferred mode first, so the first entry
        is taken as what "preferred" resolves to. This is only used to report
        the width the fallback layout advances by.
        """
        if not isinstance(available, list):
            raise TypeError("'availableModes' must be a list")
        if not available or not isinstance(available[0], str):
            return None
        match = MODE_PATTERN.match(available[0])
        if not match:
            return None
        return Mode(
            width=int(match.group(1)),
            height=int(match.group(2)),
            refresh_rate=float(match.group(3)),
        )

    def build_rule(self, output: Output, mode: Mode) -> str:
        """Build the monitor rule configuring one output."""
        if not mode.enabled:
            return f"{output.name},disable"
        return (
            f"{output.name},{mode.width}x{mode.height}@{format_number(mode.refresh_rate)},"
            f"{mode.x}x{mode.y},{format_number(mode.scale)},"
            f"transform,{mode.transform},vrr,{1 if mode.vrr else 0}"
        )

    def _keyword_monitor(self, rule: str, output_name: str) -> None:
        stdout = self._run_command(["keyword", "monitor", rule], output_name)
        # hyprctl exits 0 even when it rejects a keyword
        reply = stdout.strip()
        if reply and reply != "ok":
            raise ApplyError(f"hyprctl rejected monitor rule '{rule}': {reply}")

    def apply(self, output: Output, mode: Mode) -> None:
        self._keyword_monitor(self.build_rule(output, mode), output.name)

    def apply_preferred(self, output: Output, x: int) -> int:
        self._keyword_monitor(f"{output.name},preferred,{x}x0,1", output.name)
        reference = output.preferred or output.mode
        return reference.width
