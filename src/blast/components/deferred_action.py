from dataclasses import dataclass
from typing import Callable


@dataclass(slots=True)
class DeferredAction:
    """A callback due after ``remaining`` seconds of unpaused game time.

    ``epoch`` records the session epoch at scheduling time; the action is
    discarded if the session has been reset before it fires.
    """
    remaining: float
    callback: Callable[[], None]
    epoch: int
    label: str = ""
