"""Test configuration and fixtures."""

import copy
from dataclasses import replace
from pathlib import Path
from typing import Callable, Dict, List, Optional, Set, Tuple

import pytest

from monlayout.backends import Backend
from monlayout.config import Config
from monlayout.exceptions import ApplyError, CompositorCommunicationError
from monlayout.models import LidRule, Mode, Output


class FakeBackend(Backend):
    """
    Deterministic in-memory compositor.

    apply() updates the stored outputs so a second restore sees the new state.
    """

    name = "fake"

    def __init__(self, outputs: Optional[List[Output]] = None) -> None:
        super().__init__(executable="fake", timeout=1)
        self.outputs: List[Output] = outputs or []
        self.calls: List[Tuple[str, Mode]] = []
        self.preferred_calls: List[Tuple[str, int]] = []
        self.fail_on: Set[str] = set()
        self.enumerate_error: Optional[Exception] = None

    def enumerate(self) -> List[Output]:
        if self.enumerate_error:
            raise self.enumerate_error
        return copy.deepcopy(self.outputs)

    def _replace_mode(self, name: str, mode: Mode) -> None:
        for i, output in enumerate(self.outputs):
            if output.name == name:
                self.outputs[i] = replace(output, mode=mode)

    def apply(self, output: Output, mode: Mode) -> None:
        if output.name in self.fail_on:
            raise ApplyError(f"fake failure on {output.name}")
        self.calls.append((output.name, mode))
        self._replace_mode(output.name, mode)

    def apply_preferred(self, output: Output, x: int) -> int:
        if output.name in self.fail_on:
            raise ApplyError(f"fake failure on {output.name}")
        self.preferred_calls.append((output.name, x))
        reference = output.preferred or output.mode
        self._replace_mode(output.name, replace(reference, x=x, y=0, scale=1.0, enabled=True))
        return reference.width


def make_mode(width: int = 1920, height: int = 1080, refresh: float = 60.0, **kwargs) -> Mode:
    return Mode(width=width, height=height, refresh_rate=refresh, **kwargs)


@pytest.fixture
def make_output() -> Callable[..., Output]:
    """Factory for outputs with sensible defaults."""
    def _make(
        name: str,
        make: str = "Dell Inc.",
        model: str = "U2412",
        serial: str = "S1",
        mode: Optional[Mode] = None,
        preferred: Optional[Mode] = None,
    ) -> Output:
        return Output(
            name=name,
            make=make,
            model=model,
            serial=serial,
            mode=mode or make_mode(),
            preferred=preferred,
        )
    return _make


@pytest.fixture
def sample_outputs(make_output) -> List[Output]:
    """An external monitor on DP-1 plus a laptop panel on eDP-1."""
    return [
        make_output("DP-1", make="Dell Inc.", model="U2412", serial="S1",
                    mode=make_mode(1920, 1080, 60.0, x=1920, y=0)),
        make_output("eDP-1", make="BOE", model="0x095F", serial="",
                    mode=make_mode(1920, 1200, 59.95, x=0, y=0, scale=1.25)),
    ]


@pytest.fixture
def backend_factory() -> Callable[[List[Output]], FakeBackend]:
    """Factory for fake compositors with arbitrary outputs."""
    return FakeBackend


@pytest.fixture
def fake_backend(sample_outputs) -> FakeBackend:
    """Fake compositor with the sample outputs connected."""
    return FakeBackend(list(sample_outputs))


@pytest.fixture
def xdg_dirs(tmp_path: Path, monkeypatch) -> Dict[str, Path]:
    """Point XDG config and state directories into a temp dir."""
    config_home = tmp_path / "config"
    state_home = tmp_path / "state"
    config_home.mkdir()
    state_home.mkdir()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setenv("XDG_STATE_HOME", str(state_home))
    return {"config": config_home / "monlayout", "state": state_home / "monlayout"}


@pytest.fixture
def lid_file(tmp_path: Path) -> Callable[[str], Path]:
    """Factory writing an ACPI-style lid state file."""
    def _write(state: str, name: str = "LID0") -> Path:
        path = tmp_path / "acpi" / name / "state"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"state:      {state}\n")
        return path
    return _write


@pytest.fixture
def test_config(xdg_dirs) -> Config:
    """Default config with isolated XDG directories."""
    return Config.load()


@pytest.fixture
def lid_config(xdg_dirs, lid_file) -> Callable[[str], Config]:
    """Factory for a config with one lid rule for eDP-1 in the given state."""
    def _make(state: str) -> Config:
        return Config(lid=[LidRule(file=lid_file(state), head="eDP-1")])
    return _make


@pytest.fixture
def broken_backend() -> FakeBackend:
    """Fake compositor that cannot be queried."""
    backend = FakeBackend()
    backend.enumerate_error = CompositorCommunicationError("compositor not responding")
    return backend
