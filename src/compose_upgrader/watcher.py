"""Filesystem watch loop for the upgrade marker.

The watchdog observer delivers notifications on its own thread. Its handler
only pushes them onto an ``EventChannel``; ``UpgradeWatcher.run()`` drains the
channel on the calling thread and invokes the marker callback synchronously,
so at most one upgrade runs at a time and events queue up behind it.
"""

from __future__ import annotations

import os
import queue
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileMovedEvent, FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver
from watchdog.utils import platform

from compose_upgrader.constants import CHANNEL_POLL_INTERVAL_SECONDS, UPGRADE_INFO_FILE
from compose_upgrader.errors import WatchChannelClosed, WatchChannelError, WatcherSetupError
from compose_upgrader.logging import get_logger

log = get_logger("compose_upgrader.watcher")

ChannelItem = FileSystemEvent | WatchChannelError

_CLOSED = object()


class EventChannel:
    """Thread-safe hand-off from the observer thread to the watch loop."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Any] = queue.Queue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def put(self, item: ChannelItem) -> None:
        if not self.closed:
            self._queue.put(item)

    def close(self) -> None:
        """Close the channel; items already queued are still delivered."""
        if not self._closed.is_set():
            self._closed.set()
            self._queue.put(_CLOSED)

    def get(self, timeout: float | None = None) -> ChannelItem:
        """Return the next item.

        Raises:
            queue.Empty: If nothing arrived within ``timeout``.
            WatchChannelClosed: Once the channel is closed and drained.
        """
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            # Leave the sentinel for any later reader.
            self._queue.put(_CLOSED)
            raise WatchChannelClosed("watch channel closed")
        return item


class MarkerEventHandler(FileSystemEventHandler):
    """Forwards create and write notifications from the data directory.

    With ``close_events`` set (inotify), a write is signalled by the close of a
    file opened for writing; raw modify events are dropped there because
    inotify also reports attribute changes (chmod, touch) as modifications.
    Other emitters never send close events, so their modify events stand in
    for writes.

    A move whose destination lands in the data directory is forwarded too:
    writers that publish atomically (write a temp file, then rename) never
    produce a plain create for the final name. Deletes, moves out of the
    directory and directory events are dropped here.
    """

    def __init__(self, channel: EventChannel, data_dir: Path, close_events: bool = False) -> None:
        super().__init__()
        self._channel = channel
        self._close_events = close_events
        self._data_dir = os.path.realpath(data_dir)

    def dispatch(self, event: FileSystemEvent) -> None:
        try:
            super().dispatch(event)
        except Exception as exc:
            self._channel.put(WatchChannelError(f"failed to handle {event!r}: {exc}"))

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._channel.put(event)

    def on_modified(self, event: FileSystemEvent) -> None:
        if not event.is_directory and not self._close_events:
            self._channel.put(event)

    def on_closed(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._channel.put(event)

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        dest_dir = os.path.realpath(os.path.dirname(os.fsdecode(event.dest_path)))
        if dest_dir == self._data_dir:
            self._channel.put(event)


def emits_close_events(observer: BaseObserver) -> bool:
    """Whether ``observer`` reports writes as close-after-write events."""
    if not platform.is_linux():
        return False
    from watchdog.observers.inotify import InotifyObserver

    return isinstance(observer, InotifyObserver)


def event_filename(event: FileSystemEvent) -> str:
    """Base filename an event refers to (the destination for moves)."""
    path = event.dest_path if isinstance(event, FileMovedEvent) else event.src_path
    return os.path.basename(os.fsdecode(path))


class UpgradeWatcher:
    """Watches ``data_dir`` and calls ``on_marker`` for each marker event."""

    def __init__(
        self,
        data_dir: Path,
        on_marker: Callable[[], object],
        observer_factory: Callable[[], BaseObserver] = Observer,
        poll_interval: float = CHANNEL_POLL_INTERVAL_SECONDS,
    ) -> None:
        self._data_dir = data_dir
        self._on_marker = on_marker
        self._observer_factory = observer_factory
        self._poll_interval = poll_interval
        self._observer: BaseObserver | None = None
        self.channel = EventChannel()

    def start(self) -> None:
        """Subscribe to notifications for the data directory.

        Raises:
            WatcherSetupError: If the observer cannot watch the directory.
        """
        try:
            observer = self._observer_factory()
            handler = MarkerEventHandler(
                self.channel, self._data_dir, close_events=emits_close_events(observer)
            )
            observer.schedule(handler, str(self._data_dir), recursive=False)
            observer.start()
        except Exception as exc:
            raise WatcherSetupError(f"failed to watch {self._data_dir}: {exc}") from exc
        self._observer = observer
        log.info("watching", marker=UPGRADE_INFO_FILE, data_dir=str(self._data_dir))

    def stop(self) -> None:
        """Close the channel and shut the observer down."""
        self.channel.close()
        if self._observer is not None:
            self._observer.stop()
            if self._observer.is_alive():
                self._observer.join()
            self._observer = None

    def run(self) -> None:
        """Consume events until the channel closes."""
        while True:
            try:
                item = self.channel.get(timeout=self._poll_interval)
            except queue.Empty:
                if self._observer is not None and not self._observer.is_alive():
                    log.error("observer_stopped_unexpectedly", data_dir=str(self._data_dir))
                    self.channel.close()
                continue
            except WatchChannelClosed:
                log.info("watch_channel_closed")
                return

            if isinstance(item, WatchChannelError):
                log.warning("watcher_error", error=str(item))
                continue

            self._handle_event(item)

    def _handle_event(self, event: FileSystemEvent) -> None:
        if event_filename(event) != UPGRADE_INFO_FILE:
            return

        log.info("marker_detected", marker=UPGRADE_INFO_FILE, event_type=event.event_type)
        try:
            self._on_marker()
        except Exception:
            log.exception("marker_handler_failed")

    def __enter__(self) -> UpgradeWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

