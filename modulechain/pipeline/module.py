"""The record describing one configured pipeline module, and the on-disk layout names
derived from it."""
from enum import Enum
from pathlib import Path
from typing import Callable

from attr import define
from attr import field
from attr import evolve

from modulechain.pipeline.errors import ConfigFormat
from modulechain.pipeline.errors import ConfigMissing

SCRIPT_DIR = 'script'
OUTPUT_DIR = 'output'
STARTED_MARKER = 'STARTED'
COMPLETE_MARKER = 'COMPLETE'
MAIN_SCRIPT_PREFIX = 'MAIN_'
SCRIPT_STARTED_SUFFIX = '.started'
SCRIPT_SUCCESS_SUFFIX = '.success'
SCRIPT_FAILURE_SUFFIX = '.failed'
RESERVED_SUFFIXES = (SCRIPT_STARTED_SUFFIX, SCRIPT_SUCCESS_SUFFIX, SCRIPT_FAILURE_SUFFIX)
RESERVED_NAMES = (STARTED_MARKER, COMPLETE_MARKER)


class OutputKind(Enum):
    """What kind of script a module's build capability produces."""
    SHELL = 'shell'
    RSCRIPT = 'rscript'

    @property
    def extension(self) -> str:
        return '.R' if self is OutputKind.RSCRIPT else '.sh'

    @property
    def interpreter(self) -> str:
        return '/usr/bin/env Rscript' if self is OutputKind.RSCRIPT else '/bin/bash'

    @property
    def template_flavor(self) -> str:
        return 'R' if self is OutputKind.RSCRIPT else 'sh'


@define(frozen=True)
class ScriptSettings:
    """Script generation options. ``timeout`` is in minutes; ``None`` means unbounded."""
    permissions: str | None
    batch_size: int | None
    num_threads: int | None
    timeout: int | None = None

    def validate(self, section: str = 'general') -> None:
        if self.permissions is None or self.permissions.strip() == '':
            raise ConfigMissing('script_permissions', section)
        try:
            int(self.permissions, 8)
        except ValueError as error:
            raise ConfigFormat('script_permissions', self.permissions, 'expected an octal mode') \
                from error
        for key, value in (('script_batch_size', self.batch_size),
                           ('script_num_threads', self.num_threads)):
            if value is None:
                raise ConfigMissing(key, section)
            if not _is_positive_integer(value):
                raise ConfigFormat(key, str(value), 'expected a positive integer')
        if self.timeout is not None and not _is_positive_integer(self.timeout):
            raise ConfigFormat('script_timeout', str(self.timeout), 'expected a positive integer')

    @property
    def mode(self) -> int:
        return int(str(self.permissions), 8)


def _is_positive_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


BuildCapability = Callable[['Module', list[Path]], list[list[str]]]
"""Contract for a module's build capability: given the module and one batch of input
files, return one list of command lines per input unit, in input order."""


@define(frozen=True)
class Module:
    """One executable unit of the pipeline.

    ``position`` and ``root_dir`` are unset until the module is placed in a
    ``PipelineContext``.
    """
    name: str
    module_type: str
    settings: ScriptSettings
    build: BuildCapability = field(eq=False, repr=False)
    build_paired: BuildCapability | None = field(default=None, eq=False, repr=False)
    capabilities: frozenset[str] = field(default=frozenset(), converter=frozenset)
    output_kind: OutputKind = OutputKind.SHELL
    parameters: dict[str, str] = field(factory=dict, eq=False)
    prerequisites: tuple[str, ...] = field(default=(), converter=tuple)
    position: int | None = None
    root_dir: Path | None = None

    def provides(self, capability: str) -> bool:
        return capability in self.capabilities

    def build_batch(self, files: list[Path], paired: bool) -> list[list[str]]:
        """Dispatch to the paired-aware build routine when ``paired`` is set. Modules
        without one treat paired and unpaired input identically."""
        if paired and self.build_paired is not None:
            return self.build_paired(self, files)
        return self.build(self, files)

    def placed(self, position: int, root_dir: Path) -> 'Module':
        return evolve(self, position=position, root_dir=root_dir)

    @property
    def script_dir(self) -> Path:
        return self._require_root() / SCRIPT_DIR

    @property
    def output_dir(self) -> Path:
        return self._require_root() / OUTPUT_DIR

    def _require_root(self) -> Path:
        if self.root_dir is None:
            raise ValueError(f'Module "{self.name}" has not been placed in a pipeline context.')
        return self.root_dir
