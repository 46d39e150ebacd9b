# anime_renamer/enums.py
from enum import Enum

class ExecutionPhase(Enum):
    """Step of the two-phase rename a failure happened in."""
    PHASE_ONE = "phase-one"  # original -> temporary
    PHASE_TWO = "phase-two"  # temporary -> target

    def __str__(self):
        return self.value
