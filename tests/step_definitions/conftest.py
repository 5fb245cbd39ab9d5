"""
Shared steps for layout features.

Given steps that set up connected displays, saved layouts and lid state are
used by both the save and restore features.
"""

import pytest
from pytest_bdd import given, parsers

from monlayout.config import Config
from monlayout.identity import make_key
from monlayout.models import LidRule, Mode, Output, SavedConfiguration, SavedEntry
from monlayout.store import LayoutStore


@pytest.fixture
def layout_context(xdg_dirs, backend_factory):
    """Context for layout scenarios."""
    return {
        "config": Config(),
        "backend": backend_factory([]),
        "saved": SavedConfiguration(),
        "result": None,
        "second_result": None,
        "calls_after_first": None,
        "error": None,
    }


def _connect(layout_context, make, model, serial, name, width, height):
    layout_context["backend"].outputs.append(Output(
        name=name,
        make=make,
        model=model,
        serial=serial,
        mode=Mode(width, height, 60.0),
    ))


def _save(layout_context, make, model, serial, width, height, x, y):
    saved = layout_context["saved"]
    saved.add(SavedEntry(
        identity=make_key(make, model, serial),
        mode=Mode(width, height, 60.0, x=x, y=y),
        make=make,
        model=model,
        serial=serial,
    ))
    LayoutStore(layout_context["config"].get_store_path()).save(saved)


# ============================================================================
# Given Steps
# ============================================================================

@given(parsers.parse(
    'the display "{make}" "{model}" with serial "{serial}" is connected as "{name}" '
    'at {width:d}x{height:d}'
))
def given_display_with_serial(layout_context, make, model, serial, name, width, height):
    """Connect a display that reports a serial number."""
    _connect(layout_context, make, model, serial, name, width, height)


@given(parsers.parse(
    'the display "{make}" "{model}" without serial is connected as "{name}" '
    'at {width:d}x{height:d}'
))
def given_display_without_serial(layout_context, make, model, name, width, height):
    """Connect a display that reports no serial number."""
    _connect(layout_context, make, model, "", name, width, height)


@given(parsers.parse(
    'a saved layout with "{make}" "{model}" with serial "{serial}" '
    'at {width:d}x{height:d} position {x:d},{y:d}'
))
def given_saved_with_serial(layout_context, make, model, serial, width, height, x, y):
    _save(layout_context, make, model, serial, width, height, x, y)


@given(parsers.parse(
    'a saved layout with "{make}" "{model}" without serial '
    'at {width:d}x{height:d} position {x:d},{y:d}'
))
def given_saved_without_serial(layout_context, make, model, width, height, x, y):
    _save(layout_context, make, model, "", width, height, x, y)


@given(parsers.parse('the lid for "{head}" is {state}'))
def given_lid_state(layout_context, lid_file, head, state):
    """Write a lid state file and add a rule for the head."""
    path = lid_file(state, name=f"LID-{head}")
    layout_context["config"].lid.append(LidRule(file=path, head=head))
