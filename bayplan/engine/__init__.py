from .replication import replicate
from .session import DragOutcome, Session

__all__ = ["DragOutcome", "Session", "replicate"]
