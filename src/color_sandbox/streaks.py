from __future__ import annotations

import json
import logging
from pathlib import Path

log = logging.getLogger(__name__)


class StreakStore:
    """Best streak per quiz mode, kept in a small JSON file.

    A missing or unreadable file is treated as an empty record.
    """

    def __init__(self, path: Path | str | None) -> None:
        self.path = Path(path) if path else None

    def load(self) -> dict[str, int]:
        if self.path is None or not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            log.warning("ignoring unreadable streak file %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            log.warning("ignoring streak file %s: not an object", self.path)
            return {}
        out: dict[str, int] = {}
        for mode, best in data.items():
            if isinstance(best, int) and not isinstance(best, bool) and best >= 0:
                out[str(mode)] = best
        return out

    def save(self, streaks: dict[str, int]) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(streaks, sort_keys=True), encoding="utf-8")


class MemoryStreakStore(StreakStore):
    """In-process store; used when no streak file is configured and in tests."""

    def __init__(self, initial: dict[str, int] | None = None) -> None:
        super().__init__(None)
        self.saved: dict[str, int] = dict(initial or {})

    def load(self) -> dict[str, int]:
        return dict(self.saved)

    def save(self, streaks: dict[str, int]) -> None:
        self.saved = dict(streaks)


__all__ = ["MemoryStreakStore", "StreakStore"]
