"""BTC dominance history persisted between runs."""

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

MAX_SAMPLES = 720


class DominanceHistory:
    """
    Timestamped dominance samples, oldest first.

    With a *path* the samples are stored as JSON and survive between runs;
    without one they only live in memory.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        max_samples: int = MAX_SAMPLES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.path = Path(path) if path is not None else None
        self.max_samples = max_samples
        self._clock = clock
        self._samples: List[Tuple[datetime, float]] = self._load()
        logger.info(
            f"Dominance history: {len(self._samples)} samples"
            + (f" from {self.path}" if self.path else " (in memory)")
        )

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def samples(self) -> List[Tuple[datetime, float]]:
        return list(self._samples)

    def record(self, dominance: float):
        """Append the current reading and persist."""
        self._samples.append((self._clock(), float(dominance)))
        if len(self._samples) > self.max_samples:
            self._samples = self._samples[-self.max_samples:]
        self._save()

    def change(self, hours: float = 24, max_age_hours: float = 48) -> Optional[float]:
        """
        Latest reading minus the newest one at least *hours* old.

        Samples older than *max_age_hours* are ignored, so a long gap between
        runs yields None instead of a change over the wrong window.
        """
        if len(self._samples) < 2:
            return None

        now = self._clock()
        latest = self._samples[-1][1]
        cutoff = now - timedelta(hours=hours)
        oldest_allowed = now - timedelta(hours=max_age_hours)

        reference = None
        for taken_at, value in self._samples:
            if oldest_allowed <= taken_at <= cutoff:
                reference = value
        if reference is None:
            return None
        return round(latest - reference, 2)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def _load(self) -> List[Tuple[datetime, float]]:
        if self.path is None or not self.path.exists():
            return []
        try:
            raw = json.loads(self.path.read_text())
            samples = [(datetime.fromisoformat(item["timestamp"]), float(item["btc"])) for item in raw]
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Ignoring unreadable dominance history {self.path}: {e}")
            return []
        samples.sort(key=lambda s: s[0])
        return samples[-self.max_samples:]

    def _save(self):
        if self.path is None:
            return
        payload = [{"timestamp": t.isoformat(), "btc": v} for t, v in self._samples]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2))
        except OSError as e:
            logger.warning(f"Could not save dominance history to {self.path}: {e}")
