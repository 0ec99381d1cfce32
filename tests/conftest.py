"""Shared pytest fixtures for TabataX tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from tabatax.database.db import configure_engine, init_db
from tabatax.timer.engine import RunController
from tabatax.workout.models import Config, Exercise

from helpers import FakeEmitter


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv)
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def config():
    return Config(work_duration=20, rest_duration=10, set_rest_duration=30, num_sets=2)


@pytest.fixture
def two_exercises():
    return [Exercise(id="a", name="Squats"), Exercise(id="b", name="Push-ups")]


@pytest.fixture
def emitter():
    return FakeEmitter()


@pytest.fixture
def controller(qapp, config, two_exercises, emitter):
    """RunController over [Squats, Push-ups] × 2 sets with a recording emitter."""
    ctl = RunController(
        parent=None, config=config, exercises=two_exercises, emitter=emitter,
    )
    yield ctl
    ctl.shutdown()
