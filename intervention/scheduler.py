"""Frame throttling for the hand-tracking model."""

from intervention.constants import FRAME_SKIP_DEFAULT


class FrameScheduler:
    """
    Decide which captured frames go to the hand model.

    The counter advances on every tick; only every `frame_skip`-th tick is
    due. Hand tracking is the expensive model, so at the default of 5 it runs
    at a fifth of the camera rate.
    """

    def __init__(self, frame_skip: int = FRAME_SKIP_DEFAULT):
        self.frame_skip = max(1, int(frame_skip))
        self._counter = 0

    @property
    def counter(self) -> int:
        return self._counter

    def tick(self) -> bool:
        """Advance the counter; True if this frame should be sent."""
        self._counter += 1
        return self._counter % self.frame_skip == 0

    def reset(self) -> None:
        self._counter = 0
