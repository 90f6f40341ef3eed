"""
Debounced intervention confirmation.

A single noisy frame from the hand model must not cost a patient points.
The debouncer counts consecutive positive checks (a third-party hand inside
the body box) and reports `detected` once the streak reaches the confirm
threshold. Any negative check drops the streak back to zero.

`detected` is derived from the live counter on every call, it does not
latch: a streak that breaks after confirming reports False on the next
call. Callers that need "was it ever confirmed during this item" track that
themselves (InterventionSession.confirmed_this_item does).
"""

from intervention.constants import CONFIRM_THRESHOLD_DEFAULT


class InterventionDebouncer:
    """Consecutive-positive counter with a confirm threshold."""

    def __init__(self, confirm_threshold: int = CONFIRM_THRESHOLD_DEFAULT):
        self.confirm_threshold = max(1, int(confirm_threshold))
        self._consecutive = 0

    @property
    def consecutive(self) -> int:
        return self._consecutive

    @property
    def detected(self) -> bool:
        return self._consecutive >= self.confirm_threshold

    def update(self, positive: bool) -> bool:
        """Record one check; returns the recomputed `detected` flag."""
        if positive:
            self._consecutive += 1
        else:
            self._consecutive = 0
        return self.detected

    def reset(self) -> None:
        self._consecutive = 0
