"""Per-record fallback tracking for a build run."""

import logging
from typing import Dict

log = logging.getLogger("presse.monitoring")

SKIPPED_FILE = "skipped_file"
BAD_DATE = "bad_date"
CLEAN_FAILURE = "clean_failure"
CLASSIFY_FAILURE = "classify_failure"
INVALID_RECORD = "invalid_record"


class BuildMonitor:
    """Counts records that fell back to a default instead of aborting the build."""

    def __init__(self, alert_threshold: int = 50):
        self.alert_threshold = alert_threshold
        self._counts: Dict[str, int] = {}
        self._alerted: Dict[str, bool] = {}

    def record(self, stage: str, detail: str = "") -> bool:
        """Record one fallback. Returns True if the alert threshold was just crossed."""
        count = self._counts.get(stage, 0) + 1
        self._counts[stage] = count
        log.warning("%s #%d: %s", stage, count, detail)

        if count >= self.alert_threshold and not self._alerted.get(stage, False):
            self._alerted[stage] = True
            log.error("ALERTE: %d enregistrements en echec (%s).", count, stage)
            return True
        return False

    def get_count(self, stage: str) -> int:
        return self._counts.get(stage, 0)

    def get_status(self) -> Dict[str, int]:
        return dict(self._counts)

    @property
    def total(self) -> int:
        return sum(self._counts.values())

    def log_summary(self) -> None:
        if not self._counts:
            log.info("Aucun enregistrement ignore.")
            return
        parts = ", ".join(f"{k}={v}" for k, v in sorted(self._counts.items()))
        log.warning("Enregistrements en repli: %s", parts)
