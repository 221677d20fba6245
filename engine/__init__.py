"""
engine/
-------
Run control, recording and configuration layer.

    from engine import StepController, Recorder, compare
"""

from engine.config     import EngineConfig, SPEED_PRESETS, speed_to_delay_ms
from engine.controller import AlgorithmRun, ControllerBusyError, Phase, StepController
from engine.recorder   import Recorder, RunMetrics, ComparisonResult, compare

__all__ = [
    "EngineConfig",
    "SPEED_PRESETS",
    "speed_to_delay_ms",
    "AlgorithmRun",
    "ControllerBusyError",
    "Phase",
    "StepController",
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
]
