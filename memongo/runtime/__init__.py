"""mongod process runtime: launching and readiness detection."""

from .mongod_launcher import MongodLauncher, MongodProcess, find_mongod
from .readiness import FailureReason, ReadinessClassifier, ReadinessState, ReadinessVerdict

__all__ = [
    'MongodLauncher',
    'MongodProcess',
    'find_mongod',
    'FailureReason',
    'ReadinessClassifier',
    'ReadinessState',
    'ReadinessVerdict'
]
