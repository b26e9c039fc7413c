"""
Rebuild-on-change support for ``tokenpipe build --watch``.

Polls the token data directory for JSON changes (mtime based, no extra
dependencies) and calls back with the changed files.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

TOKEN_PATTERNS = ["*.json"]


class FileWatcher:
    """
    Watches files for changes using polling (cross-platform compatible).

    The callback receives every file that was added, modified or removed
    since the previous poll, as one batch.
    """

    def __init__(
        self,
        paths: list[Path],
        on_change: Callable[[list[Path]], None],
        patterns: list[str] | None = None,
        poll_interval: float = 0.5,
    ):
        """
        Args:
            paths: Directories or files to watch
            on_change: Callback receiving the changed files
            patterns: Glob patterns to match inside directories
            poll_interval: How often to check for changes (seconds)
        """
        self.paths = paths
        self.on_change = on_change
        self.patterns = patterns or TOKEN_PATTERNS
        self.poll_interval = poll_interval

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._file_mtimes: dict[Path, float] = self._scan_files()

    def start(self) -> None:
        """Start watching in a daemon thread."""
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._watch_loop, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=2)

    def _scan_files(self) -> dict[Path, float]:
        """Scan all watched paths and return file mtimes."""
        mtimes: dict[Path, float] = {}

        for watch_path in self.paths:
            if not watch_path.exists():
                continue

            if watch_path.is_file():
                candidates = [watch_path]
            else:
                candidates = [f for pattern in self.patterns for f in watch_path.rglob(pattern)]

            for file_path in candidates:
                try:
                    mtimes[file_path] = file_path.stat().st_mtime
                except OSError:
                    # Removed between listing and stat
                    continue

        return mtimes

    def poll(self) -> list[Path]:
        """Check once for changes and return the changed files."""
        current = self._scan_files()
        changed = [
            path
            for path, mtime in current.items()
            if path not in self._file_mtimes or mtime > self._file_mtimes[path]
        ]
        changed.extend(path for path in self._file_mtimes if path not in current)
        self._file_mtimes = current
        return sorted(changed)

    def _watch_loop(self) -> None:
        while not self._stop_event.is_set():
            changed = self.poll()
            if changed:
                try:
                    self.on_change(changed)
                except Exception:
                    logger.exception("Error in change callback")
            self._stop_event.wait(self.poll_interval)


def watch_and_rebuild(
    data_dir: Path,
    rebuild: Callable[[], object],
    *,
    poll_interval: float = 0.5,
    stop_event: threading.Event | None = None,
) -> None:
    """
    Block, re-running ``rebuild`` whenever token files change.

    Runs until ``stop_event`` is set or the process is interrupted.
    """
    stop = stop_event or threading.Event()

    def on_change(changed: list[Path]) -> None:
        for path in changed:
            logger.info("Changed: %s", path)
        rebuild()

    watcher = FileWatcher([data_dir], on_change, poll_interval=poll_interval)
    watcher.start()
    logger.info("Watching %s for token changes", data_dir)
    try:
        while not stop.wait(poll_interval):
            pass
    except KeyboardInterrupt:
        logger.info("Stopping watcher")
    finally:
        watcher.stop()
