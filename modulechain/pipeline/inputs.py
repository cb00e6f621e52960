"""Resolution of the input files that a module will process.

The first module of a pipeline reads the configured input directory. Each later module
reads the ``output/`` directory of the module before it.
"""
import os
import re
from pathlib import Path
from typing import Iterable

from modulechain.pipeline.errors import ConfigFormat
from modulechain.pipeline.module import Module
from modulechain.pipeline.registry import PipelineContext
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)

InputUnit = tuple[Path, ...]


def list_input_files(directory: Path, ignore_files: Iterable[str] = ()) -> list[Path]:
    """Regular, non-hidden files of the directory, sorted by name."""
    if not directory.is_dir():
        raise FileNotFoundError(f'Input directory not found: {directory}')
    ignored = set(ignore_files)
    return [
        directory / name
        for name in sorted(os.listdir(directory))
        if not name.startswith('.') and name not in ignored and (directory / name).is_file()
    ]


def pair_files(
    paths: list[Path],
    forward_token: str,
    reverse_token: str,
) -> list[InputUnit]:
    """Groups files into (forward, reverse) units, matched by the name with the pair
    token removed. Units are ordered by forward file name."""
    forward: dict[str, Path] = {}
    reverse: dict[str, Path] = {}
    for path in paths:
        if forward_token in path.name:
            forward[path.name.replace(forward_token, '', 1)] = path
        elif reverse_token in path.name:
            reverse[path.name.replace(reverse_token, '', 1)] = path
        else:
            raise ConfigFormat('paired_reads', 'true',
                               f'file {path.name} has neither pair token '
                               f'"{forward_token}" nor "{reverse_token}"')
    for key, path in reverse.items():
        if key not in forward:
            raise ConfigFormat('paired_reads', 'true', f'reverse file {path.name} has no mate')
    units = []
    for key in sorted(forward, key=lambda k: forward[k].name):
        if key not in reverse:
            raise ConfigFormat('paired_reads', 'true',
                               f'forward file {forward[key].name} has no mate')
        units.append((forward[key], reverse[key]))
    return units


def sample_id(path: Path, tokens: Iterable[str] = ()) -> str:
    name = path.name.split('.')[0]
    for token in tokens:
        if token:
            name = re.sub(re.escape(token), '', name, count=1)
    return name


class InputResolver:
    """Finds the input units for each module of a pipeline."""

    def __init__(
        self,
        context: PipelineContext,
        input_path: Path,
        ignore_files: Iterable[str] = (),
        paired_reads: bool = False,
        forward_token: str = '_R1',
        reverse_token: str = '_R2',
    ):
        self.context = context
        self.input_path = Path(input_path)
        self.ignore_files = tuple(ignore_files)
        self.paired_reads = paired_reads
        self.forward_token = forward_token
        self.reverse_token = reverse_token

    def input_directory(self, module: Module) -> Path:
        previous = self.context.get_previous_module(module)
        if previous is None:
            return self.input_path
        return previous.output_dir

    def is_paired(self, module: Module) -> bool:
        """Modules without a paired build routine see every file as its own unit."""
        return self.paired_reads and module.build_paired is not None

    def resolve(self, module: Module) -> list[InputUnit]:
        directory = self.input_directory(module)
        paths = list_input_files(directory, self.ignore_files)
        logger.debug('Found %s input files for %s in %s.', len(paths), module.name, directory)
        if self.is_paired(module):
            return pair_files(paths, self.forward_token, self.reverse_token)
        return [(path,) for path in paths]

    def sample_id(self, path: Path) -> str:
        tokens = (self.forward_token, self.reverse_token) if self.paired_reads else ()
        return sample_id(path, tokens)
