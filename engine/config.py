"""
config.py — Engine Configuration
==================================
Animation speed and server settings.

Speed is a percentage slider (1 = slowest, 100 = fastest).  The driving
loop waits `2400 - 15 * speed` milliseconds between steps:

    speed 1    →  2385 ms
    speed 50   →  1650 ms
    speed 100  →   900 ms

Environment variables (all optional):
    GRAPHVIZ_SPEED      int 1–100
    GRAPHVIZ_LOG_LEVEL  DEBUG / INFO / WARNING …
    GRAPHVIZ_HOST       bind address
    GRAPHVIZ_PORT       bind port
    GRAPHVIZ_DEBUG      1 / true / yes to enable Flask debug mode
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Mapping, Optional

logger = logging.getLogger(__name__)

MIN_SPEED = 1
MAX_SPEED = 100
DEFAULT_SPEED = 50

# ---------------------------------------------------------------------------
# Speed presets (percent)
# ---------------------------------------------------------------------------
SPEED_PRESETS: Dict[str, int] = {
    "slow":   1,      # teaching mode
    "medium": 50,
    "fast":   80,
    "turbo":  100,    # demo mode
}


def clamp_speed(speed: int) -> int:
    return max(MIN_SPEED, min(MAX_SPEED, int(speed)))


def speed_to_delay_ms(speed: int) -> int:
    """Inter-step delay in milliseconds for a 1–100 speed setting."""
    return 2400 - 15 * clamp_speed(speed)


def resolve_speed(value) -> int:
    """Accept a preset name or a number; anything else raises ValueError."""
    if isinstance(value, str) and value in SPEED_PRESETS:
        return SPEED_PRESETS[value]
    if isinstance(value, bool):
        raise ValueError(f"Invalid speed: {value!r}")
    try:
        return clamp_speed(int(value))
    except (TypeError, ValueError):
        raise ValueError(f"Invalid speed: {value!r}") from None


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


# ---------------------------------------------------------------------------
# EngineConfig
# ---------------------------------------------------------------------------
@dataclass
class EngineConfig:
    """
    Attributes:
        speed     : Animation speed, 1–100.
        log_level : Name of the root logging level.
        host      : Flask bind address.
        port      : Flask bind port.
        debug     : Flask debug mode.
    """

    speed:     int  = DEFAULT_SPEED
    log_level: str  = "INFO"
    host:      str  = "127.0.0.1"
    port:      int  = 5000
    debug:     bool = False

    @property
    def delay_ms(self) -> int:
        return speed_to_delay_ms(self.speed)

    def set_speed(self, value) -> int:
        self.speed = resolve_speed(value)
        logger.debug("Speed set to %d (%d ms/step)", self.speed, self.delay_ms)
        return self.speed

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        env = os.environ if environ is None else environ
        config = cls()
        if "GRAPHVIZ_SPEED" in env:
            config.speed = resolve_speed(env["GRAPHVIZ_SPEED"])
        if "GRAPHVIZ_LOG_LEVEL" in env:
            config.log_level = env["GRAPHVIZ_LOG_LEVEL"].upper()
        if "GRAPHVIZ_HOST" in env:
            config.host = env["GRAPHVIZ_HOST"]
        if "GRAPHVIZ_PORT" in env:
            config.port = int(env["GRAPHVIZ_PORT"])
        if "GRAPHVIZ_DEBUG" in env:
            config.debug = _flag(env["GRAPHVIZ_DEBUG"])
        return config

    def to_dict(self) -> dict:
        return {
            "speed":     self.speed,
            "delay_ms":  self.delay_ms,
            "log_level": self.log_level,
            "host":      self.host,
            "port":      self.port,
            "debug":     self.debug,
        }
