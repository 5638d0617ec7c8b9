"""
Swipeable Row

Two-state machine behind a transaction row that slides left to reveal
edit and delete buttons.

    CLOSED (offset 0)  --drag release past threshold-->  OPEN (offset -reveal)
    OPEN               --tap / short drag release------>  CLOSED

Only leftward drags move the row. The edit/delete buttons call back into
the screen and leave the state alone; the screen re-renders the row.
"""

from collections.abc import Callable
from enum import Enum
from typing import Optional

from pinee.config import get_settings


class SwipeState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class SwipeableRow:
    """
    Interaction state for one swipeable row.

    Args:
        on_edit: Called when the edit button is pressed
        on_delete: Called when the delete button is pressed
        threshold: Leftward distance needed to open (default from settings)
        reveal_width: How far an open row slides (default from settings)
    """

    def __init__(
        self,
        on_edit: Callable[[], None],
        on_delete: Callable[[], None],
        threshold: Optional[float] = None,
        reveal_width: Optional[float] = None,
    ):
        if threshold is None or reveal_width is None:
            app_settings = get_settings().app
            threshold = threshold if threshold is not None else app_settings.swipe_threshold
            reveal_width = reveal_width if reveal_width is not None else app_settings.swipe_reveal_width
        self._on_edit = on_edit
        self._on_delete = on_delete
        self.threshold = threshold
        self.reveal_width = reveal_width
        self.offset = 0.0
        self.state = SwipeState.CLOSED

    @property
    def is_swiped(self) -> bool:
        return self.state == SwipeState.OPEN

    def drag_changed(self, translation_x: float) -> None:
        """Finger moved. The row follows leftward drags only."""
        if translation_x < 0:
            self.offset = translation_x

    def drag_ended(self, translation_x: float) -> None:
        """Finger lifted. Snap open past the threshold, closed otherwise."""
        if translation_x < -self.threshold:
            self._open()
        else:
            self._close()

    def tap(self) -> None:
        if self.is_swiped:
            self._close()

    def edit(self) -> None:
        self._on_edit()

    def delete(self) -> None:
        self._on_delete()

    def _open(self) -> None:
        self.offset = -self.reveal_width
        self.state = SwipeState.OPEN

    def _close(self) -> None:
        self.offset = 0.0
        self.state = SwipeState.CLOSED
