"""The entry point into `modulechain` CLI commands."""
import argparse
import sys
import subprocess
from importlib.resources import as_file
from importlib.resources import files
import re
import signal

import modulechain
from modulechain import submodule_names


def get_commands(submodule_name: str) -> list[str]:
    if submodule_name in ['entry_point', 'standalone_utilities']:
        return []
    _files = files(f'modulechain.{submodule_name}')
    scripts = [
        re.search('/scripts/(.*)$', str(entry))
        for entry in (_files / 'scripts').iterdir()
    ]
    return sorted([
        re.sub(r'\.(py|sh)$', '', underscore_to_hyphen(script.group(1)))
        for script in scripts
        if script and (not re.search(r'^__.*__(\.py)?$', script.group(1)))
    ])


def underscore_to_hyphen(string: str, inverse: bool = False) -> str:
    if not inverse:
        return re.sub('_', '-', string)
    return re.sub('-', '_', string)


def get_executable_and_script(submodule_name: str, script_name_hyphenated: str):
    script_name = underscore_to_hyphen(script_name_hyphenated, inverse=True)
    package = f'modulechain.{submodule_name}.scripts'
    candidates = [(f'{script_name}.py', sys.executable), (f'{script_name}.sh', '/bin/bash')]
    for full_script_name, executable in candidates:
        _file = files(package).joinpath(full_script_name)
        if _file.is_file():
            with as_file(_file) as path:
                script_path = path
            return executable, script_path
    raise ValueError(f'Did not locate {script_name} from submodule "{submodule_name}".')


def print_version_and_all_commands():
    submodules_with_commands = [
        name for name in submodule_names if len(get_commands(name)) > 0
    ]
    commands_description = '\n\n'.join([
        '\n'.join(
            [f'modulechain {submodule} {command}' for command in get_commands(submodule)]
        )
        for submodule in submodules_with_commands
    ])
    print(f'Version {modulechain.__version__}')
    print('')
    print(commands_description)


def main_program():
    submodules_with_commands = [
        name for name in submodule_names if len(get_commands(name)) > 0
    ]
    parser = argparse.ArgumentParser(
        prog='modulechain',
        description='modulechain commands',
    )
    parser.add_argument(
        'module',
        choices=submodules_with_commands,
        help='The specific submodule the command is from.',
    )
    parser.add_argument(
        'command',
        nargs='?',
        default=None,
        help='The command name.',
    )
    parser.add_argument(
        'command_arguments',
        nargs='*',
        help='Arguments passed to the command.',
    )

    module = None
    if len(sys.argv) >= 2:
        if sys.argv[1] in submodules_with_commands:
            module = sys.argv[1]

    if module is None:
        print_version_and_all_commands()
        sys.exit()

    command = None
    if len(sys.argv) >= 3:
        if sys.argv[2] in get_commands(module):
            command = sys.argv[2]

    if command is None:
        print('    '.join(get_commands(module)))
        sys.exit()

    executable, script_path = get_executable_and_script(module, command)
    unparsed_arguments = sys.argv[3:]
    terminate = signal.SIGTERM
    interrupt = signal.SIGINT
    with subprocess.Popen([executable, str(script_path)] + unparsed_arguments) as running_process:
        signal.signal(terminate, lambda signum, frame: running_process.send_signal(terminate))
        signal.signal(interrupt, lambda signum, frame: running_process.send_signal(interrupt))
        exit_code = running_process.wait()
    sys.exit(exit_code)
