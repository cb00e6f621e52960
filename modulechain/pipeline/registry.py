"""The ordered list of configured modules, and lookups against it.

A ``PipelineContext`` is built once at pipeline start and passed explicitly to every
component that needs ordering or lookup.
"""
import os
import re
from pathlib import Path
from typing import Iterable

from modulechain.pipeline.errors import MissingRequiredModule
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import OUTPUT_DIR
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)

PARSER_CAPABILITY = 'parser'


class PipelineContext:
    """Canonical module ordering for one pipeline output directory."""
    output_path: Path
    modules: tuple[Module, ...]

    def __init__(self, output_path: Path | str, modules: Iterable[Module]):
        self.output_path = Path(output_path)
        unplaced = list(modules)
        names = [module.name for module in unplaced]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f'Module names must be unique, got duplicates: {duplicates}')
        width = len(str(len(unplaced)))
        self.modules = tuple(
            module.placed(i, self.output_path / f'{str(i).zfill(width)}_{module.name}')
            for i, module in enumerate(unplaced)
        )

    def __len__(self) -> int:
        return len(self.modules)

    def __iter__(self):
        return iter(self.modules)

    def ordinal(self, module: Module) -> str:
        """Zero-padded position of the module, as used in its directory name."""
        width = len(str(len(self.modules)))
        return str(self._index(module)).zfill(width)

    def module_root_dir(self, module: Module) -> Path:
        return self.output_path / f'{self.ordinal(module)}_{module.name}'

    def get_module(self, name: str) -> Module | None:
        for module in self.modules:
            if module.name == name:
                return module
        return None

    def module_exists(self, name: str) -> bool:
        return self.get_module(name) is not None

    def find_by_capability(self, capability: str) -> Module | None:
        """The first configured module providing the capability, if any."""
        for module in self.modules:
            if module.provides(capability):
                return module
        return None

    def get_parser_module(self) -> Module | None:
        return self.find_by_capability(PARSER_CAPABILITY)

    def require_parser_module(self) -> Module:
        parser = self.get_parser_module()
        if parser is None:
            raise MissingRequiredModule(PARSER_CAPABILITY)
        return parser

    def get_previous_module(self, module: Module) -> Module | None:
        index = self._index(module)
        if index == 0:
            return None
        return self.modules[index - 1]

    def check_prerequisites(self) -> None:
        """Every prerequisite capability must be provided by an earlier module."""
        for index, module in enumerate(self.modules):
            earlier = self.modules[:index]
            for capability in module.prerequisites:
                if not any(other.provides(capability) for other in earlier):
                    logger.error('Module "%s" requires an earlier "%s" module.',
                                 module.name, capability)
                    raise MissingRequiredModule(capability, required_by=module.name)

    def get_module_num(self, module: Module) -> str | None:
        """Reads the ordinal prefix back from an existing module directory, if any."""
        if not self.output_path.is_dir():
            return None
        for entry in sorted(os.listdir(self.output_path)):
            if entry.startswith('.') or not (self.output_path / entry).is_dir():
                continue
            match = re.match(r'^(\d+)_(.+)$', entry)
            if match and match.group(2) == module.name:
                return match.group(1)
        return None

    def get_sub_dir(self, module: Module, name: str) -> Path | None:
        directory = self.module_root_dir(module) / name
        if not directory.exists():
            return None
        return directory

    def require_sub_dir(self, module: Module, name: str) -> Path:
        directory = self.module_root_dir(module) / name
        if not directory.exists():
            directory.mkdir(parents=True)
            logger.info('Create directory: %s', directory)
        return directory

    def sub_dir_exists(self, module: Module, name: str) -> bool:
        return (self.module_root_dir(module) / name).exists()

    def is_metadata_module(
        self,
        module: Module,
        metadata_file_name: str,
        ignore_files: Iterable[str] = (),
    ) -> bool:
        """True if the module's output is exactly the metadata file, disregarding any
        ignored file names."""
        output_dir = self.get_sub_dir(module, OUTPUT_DIR)
        if output_dir is None:
            return False
        ignored = set(ignore_files)
        found_metadata = False
        found_other = False
        for name in os.listdir(output_dir):
            if name == metadata_file_name:
                found_metadata = True
            elif name not in ignored:
                found_other = True
        return found_metadata and not found_other

    def _index(self, module: Module) -> int:
        for index, candidate in enumerate(self.modules):
            if candidate.name == module.name:
                return index
        raise ValueError(f'Module "{module.name}" is not configured in this pipeline.')
