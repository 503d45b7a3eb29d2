"""Learner progress persistence with atomic JSON writes."""

import asyncio
import json
import logging
import os
import uuid
from pathlib import Path
from typing import Dict, Optional, Set

from ..config import Config
from ..exceptions import PersistenceFailure

logger = logging.getLogger(__name__)

ProgressMap = Dict[str, Dict[str, bool]]


def _clean_entry(entry) -> Optional[Dict[str, bool]]:
    """Normalize one stored entry, None if it is malformed."""
    if not isinstance(entry, dict):
        return None
    return {
        "learned": entry.get("learned") is True,
        "starred": entry.get("starred") is True,
    }


class ProgressStore:
    """
    Persist the {card id -> {learned, starred}} map across sessions.

    The whole map is rewritten on every save, so the last write wins.
    Failures never propagate: progress keeps working in memory for the
    session even when it cannot be saved.
    """

    def __init__(self, progress_file: Optional[str] = None):
        """
        Initialize progress store.

        Args:
            progress_file: Path to progress JSON file (defaults to Config.PROGRESS_FILE)
        """
        self.progress_file = progress_file or Config.PROGRESS_FILE
        self._async_lock: Optional[asyncio.Lock] = None  # Lazy init for async
        self._pending: Set[asyncio.Task] = set()

    def _get_async_lock(self) -> asyncio.Lock:
        """Get or create async lock (lazy initialization)."""
        if self._async_lock is None:
            self._async_lock = asyncio.Lock()
        return self._async_lock

    def load(self) -> ProgressMap:
        """
        Load stored progress.

        Absent, unreadable or malformed data is treated as a fresh start.
        """
        if not os.path.exists(self.progress_file):
            return {}
        try:
            with open(self.progress_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not load progress file %s: %s", self.progress_file, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed progress data in %s", self.progress_file)
            return {}

        progress: ProgressMap = {}
        for card_id, entry in data.items():
            flags = _clean_entry(entry)
            if flags is not None:
                progress[str(card_id)] = flags
        return progress

    def _write(self, progress: ProgressMap) -> None:
        """Atomic write: temp file + rename."""
        temp_file = f"{self.progress_file}.{uuid.uuid4().hex[:8]}.tmp"
        try:
            Path(self.progress_file).parent.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(progress, f, indent=2)
            os.replace(temp_file, self.progress_file)
        except (OSError, TypeError, ValueError) as e:
            if os.path.exists(temp_file):
                try:
                    os.remove(temp_file)
                except OSError:
                    pass
            raise PersistenceFailure(f"Could not save progress to {self.progress_file}: {e}") from e

    def save(self, progress: ProgressMap) -> bool:
        """
        Save progress synchronously.

        Returns:
            True if written, False if the write failed (logged)
        """
        try:
            self._write(progress)
            return True
        except PersistenceFailure as e:
            logger.warning("%s", e)
            return False

    async def save_async(self, progress: ProgressMap) -> bool:
        """Save progress without blocking the event loop; writes stay ordered."""
        async with self._get_async_lock():
            loop = asyncio.get_running_loop()
            return await loop.run_in_executor(None, self.save, progress)

    def schedule_save(self, progress: ProgressMap) -> None:
        """
        Fire-and-forget save.

        Runs as a task on the current event loop when there is one, otherwise
        saves synchronously.
        """
        snapshot = {card_id: dict(flags) for card_id, flags in progress.items()}
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.save(snapshot)
            return

        task = loop.create_task(self.save_async(snapshot))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self) -> None:
        """Wait for all scheduled saves to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    def clear(self) -> bool:
        """Reset stored progress to a fresh start."""
        return self.save({})
