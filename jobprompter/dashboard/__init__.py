# Job Prompter Dashboard
"""Dashboard state, reconciliation and manual imports."""

from .controller import DashboardController, LOAD_ERROR_MESSAGE
from .reconciler import Reconciler, ReconcileResult
from .scheduler import RecheckScheduler
from .submission import ImportSubmitter, SubmissionError, SubmissionResult

__all__ = [
    "DashboardController",
    "LOAD_ERROR_MESSAGE",
    "Reconciler",
    "ReconcileResult",
    "RecheckScheduler",
    "ImportSubmitter",
    "SubmissionError",
    "SubmissionResult",
]
