"""In-memory store for saved analyses.

Backs the save/fetch endpoints. Results are immutable, so they are stored
as-is and returned by reference.
"""

import logging
import threading
from datetime import datetime, timezone

from resume_optimizer.errors import NotFoundError
from resume_optimizer.models.analysis import AnalysisResult
from resume_optimizer.models.responses import SavedAnalysis

logger = logging.getLogger(__name__)


class AnalysisStore:
    def __init__(self) -> None:
        self._saved: dict[str, SavedAnalysis] = {}
        self._lock = threading.Lock()

    def save(self, result: AnalysisResult, user_id: str | None = None) -> SavedAnalysis:
        record = SavedAnalysis(
            id=result.id,
            user_id=user_id,
            saved_at=datetime.now(timezone.utc),
            analysis=result,
        )
        with self._lock:
            # Re-saving moves the record to the newest position
            self._saved.pop(result.id, None)
            self._saved[result.id] = record
        logger.info("Saved analysis %s (user=%s)", result.id, user_id)
        return record

    def get(self, analysis_id: str) -> SavedAnalysis:
        with self._lock:
            record = self._saved.get(analysis_id)
        if record is None:
            raise NotFoundError(analysis_id)
        return record

    def list_for_user(self, user_id: str) -> list[SavedAnalysis]:
        """Saved analyses for *user_id*, newest first."""
        with self._lock:
            records = [r for r in self._saved.values() if r.user_id == user_id]
        return records[::-1]

    def delete(self, analysis_id: str, user_id: str | None = None) -> None:
        """Remove a saved analysis; with *user_id*, only if that user saved it."""
        with self._lock:
            record = self._saved.get(analysis_id)
            if record is None or (user_id is not None and record.user_id != user_id):
                raise NotFoundError(analysis_id)
            del self._saved[analysis_id]
        logger.info("Deleted analysis %s (user=%s)", analysis_id, user_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._saved)
