"""Runtime services (telemetry) shared by the codec, document and map layers."""

from . import telemetry

__all__ = ["telemetry"]
