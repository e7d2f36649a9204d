"""Health monitoring: liveness probes, the per-cycle monitor and its scheduler."""

from .monitor import CycleReport, CycleState, HealthMonitor
from .probe import LIVENESS_REQUEST, LivenessProber, ProbeResult
from .scheduler import HealthCheckScheduler

__all__ = [
    "CycleReport",
    "CycleState",
    "HealthCheckScheduler",
    "HealthMonitor",
    "LIVENESS_REQUEST",
    "LivenessProber",
    "ProbeResult",
]
