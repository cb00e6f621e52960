"""Generation of the worker scripts and the driver script for one module.

The module's input units are partitioned, in order, into batches no larger than the
configured batch size. Each batch is passed to the module's build capability, and the
resulting command lines are written to one worker script per batch. One driver script
runs every worker and records the permissions, thread count and timeout settings.
Launching the driver, and enforcing the timeout, is left to a launcher.
"""
import math
import os
import shlex
from importlib.resources import as_file
from importlib.resources import files
from pathlib import Path
from typing import Sequence
from typing import TypeVar

from attr import define
from jinja2 import Environment
from jinja2 import BaseLoader

from modulechain.pipeline.errors import ModuleBuildFailure
from modulechain.pipeline.inputs import InputUnit
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import MAIN_SCRIPT_PREFIX
from modulechain.pipeline.module import SCRIPT_FAILURE_SUFFIX
from modulechain.pipeline.module import SCRIPT_STARTED_SUFFIX
from modulechain.pipeline.module import SCRIPT_SUCCESS_SUFFIX
from modulechain.pipeline.registry import PipelineContext
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)

T = TypeVar('T')


@define(frozen=True)
class ScriptSet:
    """The scripts generated for one module. ``timeout`` (minutes) is for the launcher."""
    module_name: str
    driver: Path
    workers: tuple[Path, ...]
    batches: tuple[tuple[Path, ...], ...]
    permissions: str
    num_threads: int
    timeout: int | None = None


def partition(items: Sequence[T], batch_size: int) -> list[list[T]]:
    """Order-preserving split into ceil(len/batch_size) consecutive, disjoint batches."""
    if batch_size < 1:
        raise ValueError(f'Batch size must be positive, got {batch_size}.')
    number_batches = math.ceil(len(items) / batch_size)
    return [
        list(items[i * batch_size:(i + 1) * batch_size])
        for i in range(number_batches)
    ]


def get_runtime_params(
    params: Sequence[str] | None,
    num_threads_param: str | None,
    num_threads: int | None,
) -> str:
    """Free-form parameters joined by single spaces, preceded by ``<flag> <threads>`` if both
    a thread-count flag and a thread count are given."""
    segments = []
    if num_threads_param and num_threads is not None:
        segments.append(f'{num_threads_param} {num_threads}')
    if params:
        segments.append(' '.join(str(p).strip() for p in params if str(p).strip() != ''))
    return ' '.join(s for s in segments if s != '').strip()


def r_quote(value: str) -> str:
    """An R string literal."""
    return '"' + str(value).replace('\\', '\\\\').replace('"', '\\"') + '"'


def _retrieve_template(filename: str) -> str:
    template_file = files('modulechain.pipeline.templates').joinpath(filename)
    with as_file(template_file) as path:
        with open(path, 'rt', encoding='utf-8') as file:
            contents = file.read()
    return contents


class ScriptGenerator:
    """Writes worker and driver scripts into a module's script directory."""
    context: PipelineContext

    def __init__(self, context: PipelineContext):
        self.context = context
        self.jinja_environment = Environment(
            loader=BaseLoader(),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_environment.filters['shquote'] = shlex.quote
        self.jinja_environment.filters['rquote'] = r_quote

    def generate(self, module: Module, units: Sequence[InputUnit], paired: bool) -> ScriptSet:
        """Builds every batch, then writes the scripts. A build capability that raises
        aborts generation before anything is written."""
        module.settings.validate(section=f'module {module.name}')
        if len(units) == 0:
            raise ModuleBuildFailure(module.name, ValueError('no input files were found'))

        batches = partition(list(units), module.settings.batch_size)
        batch_files = [tuple(path for unit in batch for path in unit) for batch in batches]
        batch_lines = []
        for files_in_batch in batch_files:
            try:
                groups = module.build_batch(list(files_in_batch), paired)
                batch_lines.append(self._flatten(groups))
            except Exception as error:
                logger.error('Build capability of %s failed: %s', module.name, error)
                raise ModuleBuildFailure(module.name, error) from error

        written: list[Path] = []
        try:
            script_set = self._write_scripts(module, batch_files, batch_lines, written)
        except OSError:
            for path in written:
                path.unlink(missing_ok=True)
            raise
        logger.info('%s worker script(s) generated for %s (%s input units, batch size %s).',
                    len(script_set.workers), module.name, len(units), module.settings.batch_size)
        return script_set

    def _write_scripts(
        self,
        module: Module,
        batch_files: list[tuple[Path, ...]],
        batch_lines: list[list[str]],
        written: list[Path],
    ) -> ScriptSet:
        script_dir = self.context.require_sub_dir(module, 'script')
        self.context.require_sub_dir(module, 'output')
        ordinal = self.context.ordinal(module)
        extension = module.output_kind.extension
        flavor = module.output_kind.template_flavor
        width = len(str(len(batch_lines)))

        worker_template = self.jinja_environment.from_string(
            _retrieve_template(f'worker.{flavor}.jinja'))
        workers = []
        for index, lines in enumerate(batch_lines):
            path = script_dir / f'{ordinal}.{str(index).zfill(width)}_{module.name}{extension}'
            contents = worker_template.render(
                **self._common_variables(module, path),
                worker_number=index + 1,
                worker_count=len(batch_lines),
                input_count=len(batch_files[index]),
                working_directory=str(module.root_dir),
                lines=lines,
            )
            self._write_executable(path, contents, module.settings.mode)
            written.append(path)
            workers.append(path)

        driver = script_dir / f'{MAIN_SCRIPT_PREFIX}{ordinal}_{module.name}{extension}'
        driver_template = self.jinja_environment.from_string(
            _retrieve_template(f'driver.{flavor}.jinja'))
        contents = driver_template.render(
            **self._common_variables(module, driver),
            permissions=module.settings.permissions,
            num_threads=module.settings.num_threads,
            timeout=module.settings.timeout,
            workers=[str(worker) for worker in workers],
        )
        self._write_executable(driver, contents, module.settings.mode)
        written.append(driver)

        return ScriptSet(
            module_name=module.name,
            driver=driver,
            workers=tuple(workers),
            batches=tuple(batch_files),
            permissions=str(module.settings.permissions),
            num_threads=int(module.settings.num_threads),
            timeout=module.settings.timeout,
        )

    @staticmethod
    def _common_variables(module: Module, path: Path) -> dict[str, str]:
        return {
            'interpreter': module.output_kind.interpreter,
            'module_name': module.name,
            'script_path': str(path),
            'started_suffix': SCRIPT_STARTED_SUFFIX,
            'success_suffix': SCRIPT_SUCCESS_SUFFIX,
            'failure_suffix': SCRIPT_FAILURE_SUFFIX,
        }

    @staticmethod
    def _flatten(groups: list[list[str]]) -> list[str]:
        if not isinstance(groups, list):
            raise TypeError(f'Build capability must return a list of lists, got {type(groups)}.')
        lines = []
        for group in groups:
            if isinstance(group, str):
                raise TypeError('Build capability must return a list of lists of command lines.')
            lines.extend(str(line) for line in group)
        return lines

    @staticmethod
    def _write_executable(path: Path, contents: str, mode: int) -> None:
        with open(path, 'wt', encoding='utf-8') as file:
            file.write(contents)
        os.chmod(path, mode)
