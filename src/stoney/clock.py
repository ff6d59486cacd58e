"""
clock.py: Turns variable frame callbacks into a stream of fixed simulation steps.
"""

from typing import List, Optional

from .constants import MAX_FRAME, NOMINAL_STEP, STEP


class FixedStepClock:
    """
    Fixed timestep accumulator.

    Feed it a monotonically increasing timestamp (seconds) once per frame;
    it returns the normalized `dt` of every step the simulation owes.
    """

    def __init__(self, step: float = STEP, max_frame: float = MAX_FRAME,
                 nominal_step: float = NOMINAL_STEP):
        if step <= 0 or nominal_step <= 0:
            raise ValueError("step sizes must be > 0")
        self.step = step
        self.max_frame = max_frame
        self.dt = step / nominal_step
        self.accumulator = 0.0
        self._last: Optional[float] = None

    def advance(self, now: float) -> List[float]:
        """Returns one `dt` per fixed step that fits in the elapsed time."""
        if self._last is None:
            self._last = now
            return []

        elapsed = min(max(0.0, now - self._last), self.max_frame)
        self._last = now
        self.accumulator += elapsed

        steps = []
        while self.accumulator >= self.step:
            steps.append(self.dt)
            self.accumulator -= self.step
        return steps

    def reset(self):
        """Forgets the reference timestamp; the next advance only seeds it."""
        self._last = None
        self.accumulator = 0.0
