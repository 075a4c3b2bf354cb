"""Runtime services: telemetry, clocks and configuration."""

from .clock import Clock, ManualClock, MonotonicClock, TimerHandle
from .config import EngineConfig

__all__ = ["Clock", "EngineConfig", "ManualClock", "MonotonicClock", "TimerHandle"]
