"""Per-module lifecycle state, recorded as marker files in the module root directory.

A module is in exactly one of three states:

- not started: no markers;
- started, incomplete: ``STARTED`` present, whether or not ``COMPLETE`` is;
- complete: ``COMPLETE`` present and ``STARTED`` absent.

There is no failed marker. A module observed as incomplete after a pipeline run has
stopped, or after a crash, is re-run from scratch on the next invocation.
"""
import time
from abc import ABC
from abc import abstractmethod
from enum import Enum
from pathlib import Path
from typing import Callable

from modulechain.pipeline.errors import MarkerIOFailure
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import STARTED_MARKER
from modulechain.pipeline.module import COMPLETE_MARKER
from modulechain.standalone_utilities.log_formats import colorized_logger
from modulechain.standalone_utilities.log_formats import LOG_SPACER

logger = colorized_logger(__name__)


class ModuleState(Enum):
    NOT_STARTED = 'not started'
    INCOMPLETE = 'started, incomplete'
    COMPLETE = 'complete'


class MarkerStore(ABC):
    """Interface for creating and inspecting zero-content marker files."""

    @abstractmethod
    def create(self, path: Path) -> None:
        pass

    @abstractmethod
    def exists(self, path: Path) -> bool:
        pass

    @abstractmethod
    def remove(self, path: Path) -> None:
        pass

    @abstractmethod
    def modified_time(self, path: Path) -> float:
        """Seconds since the epoch."""


class FilesystemMarkerStore(MarkerStore):
    """Markers as real files; the system of record for resumable runs."""

    def create(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'wt', encoding='utf-8'):
            pass

    def exists(self, path: Path) -> bool:
        return path.exists()

    def remove(self, path: Path) -> None:
        path.unlink()

    def modified_time(self, path: Path) -> float:
        return path.stat().st_mtime


class InMemoryMarkerStore(MarkerStore):
    """Markers held in a dictionary, for tests that do not need a filesystem."""
    markers: dict[Path, float]

    def __init__(self, clock: Callable[[], float] = time.time):
        self.markers = {}
        self.clock = clock

    def create(self, path: Path) -> None:
        self.markers[path] = self.clock()

    def exists(self, path: Path) -> bool:
        return path in self.markers

    def remove(self, path: Path) -> None:
        try:
            del self.markers[path]
        except KeyError as error:
            raise FileNotFoundError(str(path)) from error

    def modified_time(self, path: Path) -> float:
        return self.markers[path]


def format_runtime(duration_milliseconds: float) -> str:
    """Formats as ``HH hours : MM minutes : SS seconds``. Negative durations count as zero,
    and a duration that would display as all zeros displays as one second."""
    elapsed = int(duration_milliseconds // 1000)
    if elapsed < 0:
        elapsed = 0
    hours = f'{elapsed // 3600:02d}'
    minutes = f'{elapsed % 3600 // 60:02d}'
    seconds = f'{elapsed % 60:02d}'
    if hours == '00' and minutes == '00' and seconds == '00':
        seconds = '01'
    return f'{hours} hours : {minutes} minutes : {seconds} seconds'


class LifecycleTracker:
    """Reads and writes the lifecycle markers of modules."""
    store: MarkerStore

    def __init__(self, store: MarkerStore | None = None):
        self.store = store if store is not None else FilesystemMarkerStore()

    def mark_started(self, module: Module) -> None:
        path = self._marker(module, STARTED_MARKER)
        self._create_verified(path)
        logger.info(LOG_SPACER)
        logger.info('STARTING %s', module.name)
        logger.info(LOG_SPACER)

    def mark_complete(self, module: Module) -> None:
        path = self._marker(module, COMPLETE_MARKER)
        self._create_verified(path)
        started = self._marker(module, STARTED_MARKER)
        try:
            self.store.remove(started)
        except FileNotFoundError:
            logger.warning('No %s marker to remove for %s.', STARTED_MARKER, module.name)
        except OSError as error:
            raise MarkerIOFailure(str(started), action='remove') from error
        logger.info(LOG_SPACER)
        logger.info('FINISHED %s', module.name)
        logger.info(LOG_SPACER)

    def reset(self, module: Module) -> None:
        """Clears markers left by an earlier, unfinished run of this module."""
        for name in (COMPLETE_MARKER, STARTED_MARKER):
            path = self._marker(module, name)
            if self.store.exists(path):
                try:
                    self.store.remove(path)
                except OSError as error:
                    raise MarkerIOFailure(str(path), action='remove') from error

    def is_complete(self, module: Module) -> bool:
        return self.store.exists(self._marker(module, COMPLETE_MARKER)) and \
            not self.is_incomplete(module)

    def is_incomplete(self, module: Module) -> bool:
        """A leftover ``STARTED`` marker means incomplete, even alongside ``COMPLETE``."""
        return self.store.exists(self._marker(module, STARTED_MARKER))

    def has_executed(self, module: Module) -> bool:
        return self.is_complete(module) or self.is_incomplete(module)

    def state(self, module: Module) -> ModuleState:
        if self.is_complete(module):
            return ModuleState.COMPLETE
        if self.is_incomplete(module):
            return ModuleState.INCOMPLETE
        return ModuleState.NOT_STARTED

    def runtime(self, module: Module, now: float | None = None) -> str | None:
        """Time elapsed since the module was marked started, or None if it is not
        currently marked started."""
        started = self._marker(module, STARTED_MARKER)
        if not self.store.exists(started):
            return None
        if now is None:
            now = time.time()
        return format_runtime(1000 * (now - self.store.modified_time(started)))

    def _create_verified(self, path: Path) -> None:
        try:
            self.store.create(path)
        except OSError as error:
            raise MarkerIOFailure(str(path)) from error
        if not self.store.exists(path):
            raise MarkerIOFailure(str(path))

    @staticmethod
    def _marker(module: Module, name: str) -> Path:
        if module.root_dir is None:
            raise ValueError(f'Module "{module.name}" has not been placed in a pipeline context.')
        return module.root_dir / name
