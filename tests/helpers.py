"""Shared test helpers for TabataX."""

from dataclasses import replace

from tabatax.timer.engine import RunController
from tabatax.timer.state import Phase


class SignalCollector:
    """Utility to capture pyqtSignal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def clear(self):
        self.items.clear()


class FakeEmitter:
    """Records every call the controller makes on its cue emitter."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.suspended = 0
        self.resumed = 0
        self.disposed = 0

    def play(self, kind):
        self.calls.append(("play", kind))

    def speak(self, text, category):
        self.calls.append(("speak", text, category))

    def suspend(self):
        self.suspended += 1

    def resume(self):
        self.resumed += 1

    def dispose(self):
        self.disposed += 1

    @property
    def sounds(self):
        return [c[1] for c in self.calls if c[0] == "play"]

    @property
    def spoken(self):
        return [(c[1], c[2]) for c in self.calls if c[0] == "speak"]


def finish_phase(controller: RunController) -> None:
    """Fast-complete the current phase by jumping to the last tick."""
    controller._state = replace(controller._state, time_left=1)
    controller._on_tick()


def run_to_end(controller: RunController, limit: int = 1000) -> list[Phase]:
    """Finish phases until the run stops; returns every phase visited."""
    phases = [controller.phase]
    for _ in range(limit):
        if not controller.is_running:
            break
        finish_phase(controller)
        phases.append(controller.phase)
    return phases
