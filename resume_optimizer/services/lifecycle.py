"""Suggestion lifecycle manager.

Tracks adopt/ignore/modify status for the suggestions of one AnalysisResult.
States: proposed (initial), adopted, ignored, modified. Nothing returns to
proposed; a reanalysis replaces the whole manager instead.

Transitions never raise for unknown ids; they return ``NotFound`` so callers
holding ids from a discarded analysis can refresh.
"""

import logging
from collections.abc import Callable

from resume_optimizer.models.analysis import AnalysisResult
from resume_optimizer.models.lifecycle import (
    LifecycleEvent,
    NotFound,
    SuggestionState,
    SuggestionStatus,
)

logger = logging.getLogger(__name__)

Listener = Callable[[LifecycleEvent], None]


class SuggestionLifecycleManager:
    def __init__(self, result: AnalysisResult) -> None:
        self.analysis_id = result.id
        self._states: dict[str, SuggestionState] = {
            s.id: SuggestionState(analysis_id=result.id, suggestion_id=s.id)
            for s in result.suggestions
        }
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def state_of(self, suggestion_id: str) -> SuggestionState | NotFound:
        state = self._states.get(suggestion_id)
        if state is None:
            return NotFound(self.analysis_id, suggestion_id)
        return state

    def states(self) -> list[SuggestionState]:
        return list(self._states.values())

    def adopt(self, suggestion_id: str) -> SuggestionState | NotFound:
        return self._transition(suggestion_id, SuggestionStatus.ADOPTED)

    def ignore(self, suggestion_id: str) -> SuggestionState | NotFound:
        return self._transition(suggestion_id, SuggestionStatus.IGNORED)

    def modify(self, suggestion_id: str, text: str) -> SuggestionState | NotFound:
        return self._transition(suggestion_id, SuggestionStatus.MODIFIED, text)

    def _transition(
        self,
        suggestion_id: str,
        new_status: SuggestionStatus,
        modified_text: str | None = None,
    ) -> SuggestionState | NotFound:
        current = self._states.get(suggestion_id)
        if current is None:
            logger.debug("Transition to %s for unknown suggestion %s", new_status.value, suggestion_id)
            return NotFound(self.analysis_id, suggestion_id)

        if current.status == new_status and current.modified_text == modified_text:
            return current

        updated = SuggestionState(
            analysis_id=self.analysis_id,
            suggestion_id=suggestion_id,
            status=new_status,
            modified_text=modified_text,
        )
        self._states[suggestion_id] = updated
        logger.debug(
            "Suggestion %s: %s -> %s", suggestion_id, current.status.value, new_status.value
        )

        event = LifecycleEvent(self.analysis_id, suggestion_id, current.status, new_status)
        for listener in self._listeners:
            listener(event)
        return updated
