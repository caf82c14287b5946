"""Content patch applier: exact-match text splicing.

Only the patch fields of a suggestion are inspected. Replacement is
case-sensitive, first occurrence only, and never fuzzy: if ``before_text``
is no longer in the working text the patch fails instead of guessing.
"""

import logging

from resume_optimizer.errors import PatchNotApplicableError
from resume_optimizer.models.lifecycle import SuggestionState, SuggestionStatus
from resume_optimizer.models.suggestion import Suggestion

logger = logging.getLogger(__name__)


def _splice(working_text: str, suggestion: Suggestion, replacement: str) -> str:
    before = suggestion.before_text
    index = working_text.find(before)
    if index < 0:
        raise PatchNotApplicableError(suggestion.id, before)
    logger.debug("Applying %s at offset %d", suggestion.id, index)
    return working_text[:index] + replacement + working_text[index + len(before):]


def apply_patch(working_text: str, suggestion: Suggestion, state: SuggestionState) -> str:
    """Return the working text after applying *suggestion* in its lifecycle *state*.

    - adopted with a patch: ``before_text`` -> ``after_text``
    - modified with a patch: ``before_text`` -> the user's ``modified_text``
    - modified advisory: ``modified_text`` appended on its own line
    - anything else: *working_text* unchanged
    """
    if state.status == SuggestionStatus.ADOPTED and suggestion.has_patch:
        return _splice(working_text, suggestion, suggestion.after_text)

    if state.status == SuggestionStatus.MODIFIED:
        if suggestion.has_patch:
            return _splice(working_text, suggestion, state.modified_text)
        if not state.modified_text:
            return working_text
        separator = "" if not working_text or working_text.endswith("\n") else "\n"
        return f"{working_text}{separator}{state.modified_text}"

    return working_text
