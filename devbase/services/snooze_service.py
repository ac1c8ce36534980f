"""
Update-prompt snooze for devbase.

The snooze is a single deadline (UNIX epoch seconds) in a scalar store.
Reading fails open: a missing, empty or garbled value means "not snoozed",
so a corrupted file can never block update notices for good. The next
``set`` overwrites whatever was there.
"""

import time
from typing import Callable, Optional, Union
import logging

from ..domain.update import SnoozeState
from ..exit_codes import SnoozeValueError
from ..infra.state_store import ScalarStore

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600


class SnoozeStore:
    """
    Persisted snooze deadline.

    Example:
        snooze = SnoozeStore(FileScalarStore(config_dir / "update-snooze"))
        snooze.set(24)
        if snooze.is_active():
            return
    """

    def __init__(self, store: ScalarStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def set(self, hours: Union[int, str]) -> SnoozeState:
        """
        Snooze update notices for a number of hours.

        Args:
            hours: Positive whole number of hours (int or numeric string)

        Raises:
            SnoozeValueError: for non-numeric, zero or negative input
        """
        if isinstance(hours, bool):
            raise SnoozeValueError(hours)
        if isinstance(hours, str):
            text = hours.strip()
            if not (text.isascii() and text.isdecimal()):
                raise SnoozeValueError(hours)
            hours = int(text)
        if not isinstance(hours, int) or hours <= 0:
            raise SnoozeValueError(hours)

        state = SnoozeState(until=int(self.clock()) + hours * SECONDS_PER_HOUR)
        self.store.write(str(state.until))
        logger.debug(f"Update notices snoozed until {state.until}")
        return state

    def state(self) -> Optional[SnoozeState]:
        """The stored deadline, or None if absent or unparseable."""
        raw = self.store.read()
        if raw is None:
            return None
        raw = raw.strip()
        if not (raw.isascii() and raw.isdecimal()):
            if raw:
                logger.debug(f"Ignoring malformed snooze value: {raw!r}")
            return None
        return SnoozeState(until=int(raw))

    def is_active(self) -> bool:
        """True iff a valid deadline is stored and still in the future."""
        state = self.state()
        return state is not None and state.is_active(self.clock())

    def clear(self) -> None:
        """Remove the snooze; safe to call when none is set."""
        self.store.clear()
