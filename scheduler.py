import random

from loguru import logger

from config import DrillConfig
from facts import ALL_KEYS
from queues import QueueManager
from session import SessionTracker


def choose_candidate(
    candidates: list[str],
    rng: random.Random,
    policy: str = "random",
) -> str | None:
    """Pick one key from a candidate list according to the pool policy."""
    if not candidates:
        return None
    if policy == "first":
        return candidates[0]
    return rng.choice(candidates)


class FactSelector:
    """Decides which fact to ask next.

    Policy, first match wins:
    1. Stop once the session has asked `session_length` distinct facts.
    2. At the injection checkpoint, serve the oldest fact missed last session.
    3. A fact from the unmastered pool not yet asked this session.
    4. The next fact in the mastered cycle not yet asked, rotating the cycle.
    5. Any fact of the 121 not yet asked this session.

    Selection mutates the queues; the caller persists the profile afterwards.
    """

    def __init__(
        self,
        queues: QueueManager,
        config: DrillConfig,
        rng: random.Random | None = None,
    ):
        self.queues = queues
        self.config = config
        self.rng = rng or random.Random()

    def pick_next(self, session: SessionTracker) -> str | None:
        asked = session.asked

        if len(asked) >= self.config.session_length:
            return None

        injected = self._pick_missed(session)
        if injected is not None:
            return injected

        if self.queues.both_empty():
            logger.warning("Both queues empty, rebuilding from fact stats")
            self.queues.recompute()

        candidates = [k for k in self.queues.unmastered if k not in asked]
        key = choose_candidate(candidates, self.rng, self.config.unmastered_policy)
        if key is not None:
            logger.debug(f"Picked unmastered fact {key}")
            return key

        key = self.queues.rotate_cycle(asked)
        if key is not None:
            logger.debug(f"Picked mastered fact {key} from the cycle")
            return key

        remaining = [k for k in ALL_KEYS if k not in asked]
        key = choose_candidate(remaining, self.rng)
        if key is not None:
            logger.debug(f"Picked fallback fact {key}")
        return key

    def _pick_missed(self, session: SessionTracker) -> str | None:
        """Serve one carried-over miss at the injection checkpoint.

        The popped key is consumed even when it was already asked this
        session; the checkpoint runs at most once per session.
        """
        if session.missed_checkpoint_done:
            return None
        if len(session.asked) != self.config.missed_injection_at:
            return None
        if not self.queues.last_missed:
            return None

        session.missed_checkpoint_done = True
        key = self.queues.pop_missed()
        if key is None or key in session.asked:
            logger.debug(f"Discarded carried-over miss {key}")
            return None

        logger.debug(f"Injected carried-over miss {key}")
        return key
