"""Tests for the save and restore commands against a fake compositor."""

from dataclasses import replace

import pytest

from monlayout.commands import restore_layout, save_layout
from monlayout.commands.restore import modes_match
from monlayout.exceptions import (
    CompositorCommunicationError,
    ConfigParseError,
    DuplicateIdentityError,
    StoreNotFoundError,
)
from monlayout.models import Apply, Mode, Skip
from monlayout.store import LayoutStore


def _rearrange(backend) -> None:
    """Simulate the compositor reshuffling outputs after a replug."""
    for i, output in enumerate(backend.outputs):
        backend.outputs[i] = replace(output, mode=Mode(1024, 768, 60.0, x=i * 1024))


class TestSave:

    def test_writes_store(self, test_config, fake_backend, capsys):
        layout = save_layout(test_config, backend=fake_backend)

        assert len(layout) == 2
        assert LayoutStore(test_config.get_store_path()).load() == layout
        assert "Saved 2 outputs" in capsys.readouterr().out

    def test_does_not_touch_outputs(self, test_config, fake_backend):
        save_layout(test_config, backend=fake_backend)
        assert fake_backend.calls == []

    def test_includes_lid_closed_head(self, lid_config, fake_backend):
        config = lid_config("closed")
        layout = save_layout(config, backend=fake_backend)
        assert len(layout) == 2

    def test_duplicate_identity_writes_nothing(self, test_config, make_output, backend_factory):
        backend = backend_factory([
            make_output("DP-1", make="Acme", model="Panel", serial=""),
            make_output("DP-2", make="Acme", model="Panel", serial=""),
        ])

        with pytest.raises(DuplicateIdentityError):
            save_layout(test_config, backend=backend)

        assert not test_config.get_store_path().exists()

    def test_enumeration_failure(self, test_config, broken_backend):
        with pytest.raises(CompositorCommunicationError):
            save_layout(test_config, backend=broken_backend)
        assert not test_config.get_store_path().exists()


class TestRestore:

    def test_restores_saved_modes(self, test_config, fake_backend, sample_outputs):
        save_layout(test_config, backend=fake_backend)
        _rearrange(fake_backend)

        result = restore_layout(test_config, backend=fake_backend)

        assert result.ok
        assert result.applied == ["DP-1", "eDP-1"]
        assert [o.mode for o in fake_backend.outputs] == [o.mode for o in sample_outputs]

    def test_restore_follows_display_to_new_connector(self, test_config, fake_backend):
        save_layout(test_config, backend=fake_backend)
        fake_backend.outputs[0] = replace(
            fake_backend.outputs[0], name="HDMI-A-1", mode=Mode(1024, 768, 60.0))

        restore_layout(test_config, backend=fake_backend)

        name, mode = fake_backend.calls[0]
        assert name == "HDMI-A-1"
        assert mode == Mode(1920, 1080, 60.0, x=1920, y=0)

    def test_idempotent(self, test_config, fake_backend):
        """A second restore finds everything in place and changes nothing."""
        save_layout(test_config, backend=fake_backend)
        _rearrange(fake_backend)
        restore_layout(test_config, backend=fake_backend)
        fake_backend.calls.clear()

        result = restore_layout(test_config, backend=fake_backend)

        assert fake_backend.calls == []
        assert result.unchanged == ["DP-1", "eDP-1"]
        assert result.applied == []

    def test_unmatched_output_untouched(self, test_config, fake_backend, make_output):
        save_layout(test_config, backend=fake_backend)
        stranger = make_output("DP-3", make="LG", model="27GL850", serial="X",
                               mode=Mode(2560, 1440, 144.0))
        fake_backend.outputs.append(stranger)

        restore_layout(test_config, backend=fake_backend)

        assert "DP-3" not in [name for name, _ in fake_backend.calls]
        assert fake_backend.outputs[-1].mode == Mode(2560, 1440, 144.0)

    def test_partial_failure_continues(self, test_config, fake_backend):
        save_layout(test_config, backend=fake_backend)
        _rearrange(fake_backend)
        fake_backend.fail_on.add("DP-1")

        result = restore_layout(test_config, backend=fake_backend)

        assert not result.ok
        assert "DP-1" in result.failed
        assert "fake failure" in result.failed["DP-1"]
        assert result.applied == ["eDP-1"]

    def test_missing_store_is_fatal(self, test_config, fake_backend):
        with pytest.raises(StoreNotFoundError):
            restore_layout(test_config, backend=fake_backend)
        assert fake_backend.calls == []

    def test_malformed_store_touches_nothing(self, test_config, fake_backend):
        path = test_config.get_store_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("[]")

        with pytest.raises(ConfigParseError):
            restore_layout(test_config, backend=fake_backend)
        assert fake_backend.calls == []

    def test_dry_run_applies_nothing(self, test_config, fake_backend, capsys):
        save_layout(test_config, backend=fake_backend)
        _rearrange(fake_backend)
        capsys.readouterr()

        result = restore_layout(test_config, backend=fake_backend, dry_run=True)

        assert fake_backend.calls == []
        assert [type(a) for a in result.actions] == [Apply, Apply]
        out = capsys.readouterr().out
        assert "DP-1" in out
        assert "apply 1920x1080@60Hz" in out


class TestLid:

    def test_closed_lid_skips_panel(self, lid_config, fake_backend):
        config = lid_config("closed")
        save_layout(config, backend=fake_backend)
        _rearrange(fake_backend)

        result = restore_layout(config, backend=fake_backend)

        assert isinstance(result.actions[1], Skip)
        assert [name for name, _ in fake_backend.calls] == ["DP-1"]
        assert fake_backend.outputs[1].mode == Mode(1024, 768, 60.0, x=1024)

    def test_open_lid_restores_panel(self, lid_config, fake_backend):
        config = lid_config("open")
        save_layout(config, backend=fake_backend)
        _rearrange(fake_backend)

        restore_layout(config, backend=fake_backend)

        assert [name for name, _ in fake_backend.calls] == ["DP-1", "eDP-1"]

    def test_disable_lid_closed(self, lid_config, fake_backend):
        config = lid_config("closed")
        config.restore.disable_lid_closed = True
        save_layout(config, backend=fake_backend)

        result = restore_layout(config, backend=fake_backend)

        assert fake_backend.outputs[1].mode.enabled is False
        assert "eDP-1" in result.applied


class TestFallback:

    def test_lays_out_left_to_right(self, test_config, make_output, backend_factory):
        backend = backend_factory([
            make_output("DP-1", serial="S1", preferred=Mode(2560, 1440, 60.0)),
            make_output("DP-2", serial="S2", preferred=Mode(1920, 1080, 60.0)),
        ])

        result = restore_layout(test_config, backend=backend, fallback_to_default=True)

        assert result.fallback
        assert backend.preferred_calls == [("DP-1", 0), ("DP-2", 2560)]

    def test_lid_closed_head_turned_off(self, lid_config, fake_backend):
        config = lid_config("closed")

        result = restore_layout(config, backend=fake_backend, fallback_to_default=True)

        assert fake_backend.preferred_calls == [("DP-1", 0)]
        assert fake_backend.calls[0][0] == "eDP-1"
        assert fake_backend.calls[0][1].enabled is False
        assert result.ok

    def test_enabled_from_config(self, test_config, fake_backend):
        test_config.restore.fallback_to_default = True
        result = restore_layout(test_config, backend=fake_backend)
        assert result.fallback

    def test_not_used_when_layout_saved(self, test_config, fake_backend):
        save_layout(test_config, backend=fake_backend)
        result = restore_layout(test_config, backend=fake_backend, fallback_to_default=True)
        assert not result.fallback
        assert fake_backend.preferred_calls == []

    def test_failure_recorded(self, test_config, fake_backend):
        fake_backend.fail_on.add("eDP-1")
        result = restore_layout(test_config, backend=fake_backend, fallback_to_default=True)
        assert list(result.failed) == ["eDP-1"]
        assert result.applied == ["DP-1"]


@pytest.mark.parametrize("current,target,expected", [
    (Mode(1920, 1080, 60.0), Mode(1920, 1080, 60.0), True),
    (Mode(1920, 1080, 60.0), Mode(1920, 1080, 60.0, x=10), False),
    (Mode(1920, 1080, 60.0, enabled=False), Mode(1024, 768, 75.0, enabled=False), True),
    (Mode(1920, 1080, 60.0, enabled=False), Mode(1920, 1080, 60.0), False),
])
def test_modes_match(current, target, expected):
    assert modes_match(current, target) is expected
