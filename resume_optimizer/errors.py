"""Error taxonomy raised by the analysis engine.

Every error is raised at the point of detection and never retried inside the
engine. Callers decide whether to refresh, reanalyze, or show the error.
"""


class ResumeOptimizerError(Exception):
    """Base class for all engine errors."""

    code: str = "engine_error"


class InvalidInputError(ResumeOptimizerError):
    """Malformed or empty input to analyze."""

    code = "invalid_input"


class ScorerFailureError(ResumeOptimizerError):
    """A dimension scorer raised or returned an invalid result."""

    code = "scorer_failure"

    def __init__(self, dimension: str, message: str) -> None:
        super().__init__(f"{dimension} scorer failed: {message}")
        self.dimension = dimension


class NotFoundError(ResumeOptimizerError):
    """Unknown or stale analysis / suggestion id."""

    code = "not_found"

    def __init__(self, analysis_id: str, suggestion_id: str | None = None) -> None:
        if suggestion_id is None:
            message = f"Analysis {analysis_id!r} not found or no longer current"
        else:
            message = f"Suggestion {suggestion_id!r} not found in analysis {analysis_id!r}"
        super().__init__(message)
        self.analysis_id = analysis_id
        self.suggestion_id = suggestion_id


class PatchNotApplicableError(ResumeOptimizerError):
    """The patch's beforeText no longer occurs verbatim in the working text."""

    code = "patch_not_applicable"

    def __init__(self, suggestion_id: str, before_text: str) -> None:
        super().__init__(
            f"Suggestion {suggestion_id!r} no longer applies: "
            f"{before_text[:60]!r} not found in the working document"
        )
        self.suggestion_id = suggestion_id
        self.before_text = before_text


class AlreadyInProgressError(ResumeOptimizerError):
    """A reanalysis was requested while another run is still analyzing."""

    code = "already_in_progress"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id!r} already has an analysis in progress")
        self.session_id = session_id
