"""Bounded restart scheduling for recognition streams."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 50
DEFAULT_RESTART_DELAY = 0.1
# Streams that end after every utterance are restarted almost immediately
SINGLE_UTTERANCE_RESTART_DELAY = 0.01


@dataclass(frozen=True)
class RestartPolicy:
    """Fixed attempt budget and fixed delay for automatic restarts."""
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    delay: float = DEFAULT_RESTART_DELAY

    def __post_init__(self):
        if self.max_attempts < 0:
            raise ValueError(f"max_attempts must be >= 0, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    @classmethod
    def for_platform(cls, single_utterance: bool, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> "RestartPolicy":
        """Pick the restart delay for a recognizer.

        Args:
            single_utterance: True if the recognizer terminates after each utterance
            max_attempts: Restart budget for one session
        """
        delay = SINGLE_UTTERANCE_RESTART_DELAY if single_utterance else DEFAULT_RESTART_DELAY
        return cls(max_attempts=max_attempts, delay=delay)


class BoundedRestarter:
    """Runs a restart action after a fixed delay, at most max_attempts times.

    Must be used from inside a running asyncio loop. At most one restart is
    pending at any time; scheduling again replaces the pending one.
    """

    def __init__(self, policy: RestartPolicy):
        self.policy = policy
        self.attempts = 0
        self._pending: Optional[asyncio.TimerHandle] = None

    @property
    def exhausted(self) -> bool:
        return self.attempts >= self.policy.max_attempts

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, action: Callable[[], None]) -> bool:
        """Schedule action after the policy delay.

        Returns:
            False if the budget is exhausted and nothing was scheduled
        """
        if self.exhausted:
            return False

        self.cancel()
        self.attempts += 1
        loop = asyncio.get_running_loop()
        self._pending = loop.call_later(self.policy.delay, self._run, action)
        logger.debug(f"Restart {self.attempts}/{self.policy.max_attempts} scheduled in {self.policy.delay}s")
        return True

    def _run(self, action: Callable[[], None]) -> None:
        self._pending = None
        try:
            action()
        except Exception as e:
            logger.warning(f"Restart action failed: {e}")

    def cancel(self) -> None:
        """Cancel the pending restart, if any. Attempts already made still count."""
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def reset(self) -> None:
        """Cancel any pending restart and restore the full budget."""
        self.cancel()
        self.attempts = 0
