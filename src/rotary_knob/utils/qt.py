"""Qt helper utilities."""

from PySide6 import QtCore

from ..engine.knob import Knob, KnobListener


class KnobSignals(QtCore.QObject, KnobListener):
    """Knob listener that re-emits notifications as Qt signals.

    Lets a Qt host connect a knob the way it connects a ``QSlider``:
    ``valueChanged(value, from_user)``, ``trackingStarted()`` and
    ``trackingStopped()``.
    """

    valueChanged = QtCore.Signal(float, bool)
    trackingStarted = QtCore.Signal()
    trackingStopped = QtCore.Signal()

    def attach(self, knob: Knob) -> None:
        """Install these signals as ``knob``'s listener."""
        knob.set_listener(self)

    def on_tracking_started(self, knob: Knob) -> None:
        self.trackingStarted.emit()

    def on_tracking_stopped(self, knob: Knob) -> None:
        self.trackingStopped.emit()

    def on_value_changed(self, knob: Knob, value: float, from_user: bool) -> None:
        self.valueChanged.emit(float(value), bool(from_user))


__all__ = ["KnobSignals"]
