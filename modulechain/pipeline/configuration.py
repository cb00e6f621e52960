"""Reading of the pipeline configuration file.

The file is INI format. General options go under ``[general]``, and each module named
in the ``modules`` list has its own ``[module <name>]`` section::

    [general]
    input_path = /data/raw
    output_path = /data/pipeline
    modules = classify, parse, merge
    script_permissions = 770
    script_batch_size = 8
    script_num_threads = 2
    script_timeout = 60

    [module classify]
    type = command
    command = kraken2 {threads} --output {output_dir}/{sample}.txt {input}
    threads_flag = --threads

Any ``script_*`` option may be overridden in a module section.
"""
import configparser
from os.path import expanduser
from pathlib import Path

from modulechain.pipeline.errors import ConfigFormat
from modulechain.pipeline.errors import ConfigMissing
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import ScriptSettings
from modulechain.pipeline.module_types import get_module_type
from modulechain.pipeline.module_types import get_module_type_names
from modulechain.pipeline.registry import PipelineContext
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)

GENERAL_SECTION = 'general'
SCRIPT_KEYS = ('script_permissions', 'script_batch_size', 'script_num_threads', 'script_timeout')


def module_section(name: str) -> str:
    return f'module {name}'


class PipelineConfiguration:
    """Typed accessors over a parsed configuration file."""
    parser: configparser.ConfigParser

    def __init__(self, parser: configparser.ConfigParser):
        self.parser = parser

    @classmethod
    def from_file(cls, config_file: str | Path) -> 'PipelineConfiguration':
        path = Path(expanduser(str(config_file)))
        if not path.is_file():
            raise FileNotFoundError(f'Configuration file not found: {path}')
        parser = configparser.ConfigParser(interpolation=None)
        parser.read(path)
        return cls(parser)

    @classmethod
    def from_string(cls, contents: str) -> 'PipelineConfiguration':
        parser = configparser.ConfigParser(interpolation=None)
        parser.read_string(contents)
        return cls(parser)

    def get_string(self, key: str, section: str = GENERAL_SECTION) -> str | None:
        if not self.parser.has_option(section, key):
            return None
        value = self.parser.get(section, key).strip()
        return value if value != '' else None

    def require_string(self, key: str, section: str = GENERAL_SECTION) -> str:
        value = self.get_string(key, section)
        if value is None:
            raise ConfigMissing(key, section)
        return value

    def get_path(self, key: str, section: str = GENERAL_SECTION) -> Path | None:
        value = self.get_string(key, section)
        return Path(expanduser(value)) if value is not None else None

    def require_path(self, key: str, section: str = GENERAL_SECTION) -> Path:
        return Path(expanduser(self.require_string(key, section)))

    def get_positive_integer(self, key: str, section: str = GENERAL_SECTION) -> int | None:
        value = self.get_string(key, section)
        if value is None:
            return None
        try:
            number = int(value)
        except ValueError as error:
            raise ConfigFormat(key, value, 'expected a positive integer') from error
        if number < 1:
            raise ConfigFormat(key, value, 'expected a positive integer')
        return number

    def require_positive_integer(self, key: str, section: str = GENERAL_SECTION) -> int:
        number = self.get_positive_integer(key, section)
        if number is None:
            raise ConfigMissing(key, section)
        return number

    def get_boolean(self, key: str, section: str = GENERAL_SECTION, default: bool = False) -> bool:
        value = self.get_string(key, section)
        if value is None:
            return default
        lowered = value.lower()
        if lowered in ('true', 'yes', 'y', '1', 'on'):
            return True
        if lowered in ('false', 'no', 'n', '0', 'off'):
            return False
        raise ConfigFormat(key, value, 'expected a boolean')

    def get_list(self, key: str, section: str = GENERAL_SECTION) -> list[str]:
        value = self.get_string(key, section)
        if value is None:
            return []
        return [item.strip() for item in value.split(',') if item.strip() != '']

    def _script_value(self, key: str, section: str) -> str | None:
        value = self.get_string(key, section)
        if value is not None:
            return value
        return self.get_string(key, GENERAL_SECTION)

    def script_settings(self, section: str = GENERAL_SECTION) -> ScriptSettings:
        """Script options for a module section, falling back to ``[general]``. Presence is
        checked later, by ``ScriptSettings.validate``."""
        integers = {}
        for key in SCRIPT_KEYS[1:]:
            value = self._script_value(key, section)
            if value is None:
                integers[key] = None
                continue
            try:
                integers[key] = int(value)
            except ValueError as error:
                raise ConfigFormat(key, value, 'expected a positive integer') from error
        return ScriptSettings(
            permissions=self._script_value('script_permissions', section),
            batch_size=integers['script_batch_size'],
            num_threads=integers['script_num_threads'],
            timeout=integers['script_timeout'],
        )

    @property
    def input_path(self) -> Path:
        return self.require_path('input_path')

    @property
    def output_path(self) -> Path:
        return self.require_path('output_path')

    @property
    def paired_reads(self) -> bool:
        return self.get_boolean('paired_reads')

    @property
    def forward_token(self) -> str:
        return self.get_string('paired_forward_token') or '_R1'

    @property
    def reverse_token(self) -> str:
        return self.get_string('paired_reverse_token') or '_R2'

    @property
    def ignore_files(self) -> list[str]:
        return self.get_list('input_ignore_files')

    @property
    def metadata_file(self) -> Path | None:
        return self.get_path('metadata_file')

    def module_names(self) -> list[str]:
        names = self.get_list('modules')
        if len(names) == 0:
            raise ConfigMissing('modules')
        return names

    def build_module(self, name: str) -> Module:
        section = module_section(name)
        if not self.parser.has_section(section):
            raise ConfigMissing('type', section)
        type_name = self.require_string('type', section)
        try:
            module_type = get_module_type(type_name)
        except KeyError as error:
            raise ConfigFormat('type', type_name,
                               f'expected one of {get_module_type_names()}') from error
        parameters = {
            key: value.strip()
            for key, value in self.parser.items(section)
            if key not in SCRIPT_KEYS and key != 'type' and key not in self.parser.defaults()
        }
        if self.paired_reads:
            parameters.setdefault('forward_token', self.forward_token)
            parameters.setdefault('reverse_token', self.reverse_token)
        if 'metadata_file' not in parameters and self.metadata_file is not None:
            parameters['metadata_file'] = str(self.metadata_file)
        for key in module_type.required_parameters:
            if parameters.get(key, '') == '':
                raise ConfigMissing(key, section)
        settings = self.script_settings(section)
        logger.debug('Configured module %s of type %s.', name, type_name)
        return Module(
            name=name,
            module_type=type_name,
            settings=settings,
            build=module_type.build,
            build_paired=module_type.build_paired,
            capabilities=module_type.capabilities,
            output_kind=module_type.output_kind,
            parameters=parameters,
            prerequisites=module_type.prerequisites,
        )

    def build_context(self) -> PipelineContext:
        modules = [self.build_module(name) for name in self.module_names()]
        return PipelineContext(self.output_path, modules)
