"""The module types that can be named in a pipeline configuration file.

Each type supplies the build capability that turns a batch of input files into command
lines, together with the capabilities it advertises and the ones it needs from earlier
modules. Command templates may use these placeholders:

- ``{input}``: the input file (the forward file in paired mode)
- ``{forward}``, ``{reverse}``: the two files of a paired unit
- ``{sample}``: the sample identifier derived from the input file name
- ``{output_dir}``: the module's ``output/`` directory
- ``{threads}``: the assembled runtime parameters (thread flag and extra parameters)
"""
import shlex
from pathlib import Path
from typing import Callable
from typing import NamedTuple

from modulechain.pipeline.inputs import sample_id
from modulechain.pipeline.module import BuildCapability
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import OutputKind
from modulechain.pipeline.registry import PARSER_CAPABILITY
from modulechain.pipeline.script_generation import get_runtime_params
from modulechain.pipeline.script_generation import r_quote

METADATA_MERGE_CAPABILITY = 'metadata merge'


class ModuleType(NamedTuple):
    """A wrapper object listing the implementation of one module type.

    Parameters
    ----------
    build: BuildCapability
        Produces one group of command lines per input file.
    build_paired: BuildCapability | None = None
        Produces one group per (forward, reverse) pair, when paired reads are enabled.
    capabilities: tuple[str, ...] = ()
        Tags that other modules may look this module up by.
    output_kind: OutputKind = OutputKind.SHELL
    prerequisites: tuple[str, ...] = ()
        Capabilities that must be provided by some earlier module.
    required_parameters: tuple[str, ...] = ()
        Keys that the module's configuration section must supply.
    """
    build: BuildCapability
    build_paired: BuildCapability | None = None
    capabilities: tuple[str, ...] = ()
    output_kind: OutputKind = OutputKind.SHELL
    prerequisites: tuple[str, ...] = ()
    required_parameters: tuple[str, ...] = ()


def fill_template(template: str, values: dict[str, str]) -> str:
    """Substitutes known ``{name}`` placeholders only, so that braces belonging to shell or
    R code survive."""
    for key, value in values.items():
        template = template.replace('{' + key + '}', value)
    return template


def runtime_params(module: Module) -> str:
    extra = module.parameters.get('params', '')
    return get_runtime_params(
        extra.split() if extra else None,
        module.parameters.get('threads_flag') or None,
        module.settings.num_threads,
    )


def _pair_tokens(module: Module) -> tuple[str, ...]:
    return tuple(
        module.parameters[key]
        for key in ('forward_token', 'reverse_token')
        if module.parameters.get(key)
    )


def _values(module: Module, input_file: Path, reverse: Path | None, quote: Callable[[str], str]):
    return {
        'input': quote(str(input_file)),
        'forward': quote(str(input_file)),
        'reverse': quote(str(reverse)) if reverse is not None else '',
        'sample': sample_id(input_file, _pair_tokens(module)),
        'output_dir': quote(str(module.output_dir)),
        'threads': runtime_params(module),
    }


def _build_single(quote: Callable[[str], str]) -> BuildCapability:
    def build(module: Module, files: list[Path]) -> list[list[str]]:
        template = module.parameters['command']
        return [
            [fill_template(template, _values(module, path, None, quote))]
            for path in files
        ]
    return build


def _build_pairs(quote: Callable[[str], str]) -> BuildCapability:
    def build_paired(module: Module, files: list[Path]) -> list[list[str]]:
        if len(files) % 2 != 0:
            raise ValueError(f'Paired input must contain an even number of files, got {len(files)}.')
        template = module.parameters.get('paired_command') or module.parameters['command']
        return [
            [fill_template(template, _values(module, files[i], files[i + 1], quote))]
            for i in range(0, len(files), 2)
        ]
    return build_paired


def build_metadata_merge(module: Module, files: list[Path]) -> list[list[str]]:
    metadata_file = module.parameters['metadata_file']
    return [
        [' '.join([
            'modulechain pipeline merge-metadata',
            f'--table {shlex.quote(str(path))}',
            f'--metadata {shlex.quote(metadata_file)}',
            f'--output {shlex.quote(str(module.output_dir / path.name))}',
        ])]
        for path in files
    ]


module_types = {
    'command': ModuleType(
        build=_build_single(shlex.quote),
        build_paired=_build_pairs(shlex.quote),
        required_parameters=('command',),
    ),
    'parser': ModuleType(
        build=_build_single(shlex.quote),
        build_paired=_build_pairs(shlex.quote),
        capabilities=(PARSER_CAPABILITY,),
        required_parameters=('command',),
    ),
    'rscript': ModuleType(
        build=_build_single(r_quote),
        build_paired=_build_pairs(r_quote),
        output_kind=OutputKind.RSCRIPT,
        required_parameters=('command',),
    ),
    'metadata_merge': ModuleType(
        build=build_metadata_merge,
        capabilities=(METADATA_MERGE_CAPABILITY,),
        prerequisites=(PARSER_CAPABILITY,),
        required_parameters=('metadata_file',),
    ),
}


def get_module_type_names() -> list[str]:
    return list(module_types.keys())


def get_module_type(name: str) -> ModuleType:
    if name not in module_types:
        raise KeyError(f'Unknown module type "{name}". Choose from: {get_module_type_names()}')
    return module_types[name]
