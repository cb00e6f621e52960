"""CLI arguments solicitation."""
import re
from typing import Literal
from typing import get_args
from typing import cast
from argparse import ArgumentParser

SettingArgumentName = Literal['config file']
FileArgumentName = Literal['table file', 'metadata file', 'output file']


def add_argument(parser: ArgumentParser, name: SettingArgumentName | FileArgumentName,
                 required: bool = True):
    if name in get_args(FileArgumentName):
        add_file_argument(parser, cast(FileArgumentName, name), required=required)

    if name == 'config file':
        parser.add_argument('--config-file', dest='config_file', type=str, required=required,
                            help='Path to the pipeline configuration file (INI format).')


def add_file_argument(parser: ArgumentParser, name: FileArgumentName, required: bool = True):
    hyphens = re.sub(' ', '-', re.sub(' file$', '', name))
    snake = re.sub(' ', '_', name)
    parser.add_argument(f'--{hyphens}', dest=f'{snake}', type=str, required=required)
