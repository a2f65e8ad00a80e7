"""
Error taxonomy for the analysis pipeline.

Every error carries a stable ``code`` so the HTTP layer can report it without
inspecting messages.
"""


class AnalysisError(Exception):
    """Base class for all recoverable pipeline errors."""

    code = "analysis_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class MalformedInput(AnalysisError):
    """The upload could not be decoded into a time series."""

    code = "malformed_input"


class InsufficientData(MalformedInput):
    """The decoded series is shorter than the minimum analyzable length."""

    code = "insufficient_data"


class ScorerUnavailable(AnalysisError):
    """The external scorer is not installed or not reachable."""

    code = "scorer_unavailable"


class ScorerContractViolation(AnalysisError):
    """The external scorer returned a malformed or miscounted result."""

    code = "scorer_contract_violation"


class NotFound(AnalysisError):
    """The requested record does not exist."""

    code = "not_found"
