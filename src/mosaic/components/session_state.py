"""Session state resource describing whether a grid has been generated."""
from dataclasses import dataclass
from enum import Enum, auto

from mosaic.constants import DEFAULT_VIEWPORT, INITIAL_POOL_SIZE


class SessionMode(Enum):
    """IDLE until the first successful start; COMPOSING while a grid exists."""
    IDLE = auto()
    COMPOSING = auto()


@dataclass
class SessionState:
    """Singleton component storing session-wide settings and mode."""
    mode: SessionMode = SessionMode.IDLE
    alternate_finish: bool = False
    surcharge: float = 0
    pool_size: int = INITIAL_POOL_SIZE
    viewport: tuple[int, int] = DEFAULT_VIEWPORT
