"""Collects the failure lines that worker and driver scripts leave in a module's script
directory."""
import os
from pathlib import Path
from typing import NamedTuple

import pandas as pd

from modulechain.pipeline.module import SCRIPT_FAILURE_SUFFIX


class FailureReportEntry(NamedTuple):
    script_file_name: str
    line: str

    def __str__(self) -> str:
        return f'{self.script_file_name} | {self.line}'


def get_script_errors(script_dir: Path | str) -> list[FailureReportEntry]:
    """One entry per line of every ``.failed`` file, in directory-listing order and then
    line order. Undecodable bytes are replaced. A missing directory means nothing has
    failed yet."""
    directory = Path(script_dir)
    if not directory.is_dir():
        return []
    entries = []
    for name in os.listdir(directory):
        if not name.endswith(SCRIPT_FAILURE_SUFFIX):
            continue
        with open(directory / name, 'rt', encoding='utf-8', errors='replace') as file:
            for line in file:
                entries.append(FailureReportEntry(name, line.rstrip('\r\n')))
    return entries


def format_script_errors(entries: list[FailureReportEntry]) -> list[str]:
    return [str(entry) for entry in entries]


def failures_table(entries: list[FailureReportEntry], module_name: str | None = None) -> pd.DataFrame:
    table = pd.DataFrame(entries, columns=['script_file_name', 'line'])
    if module_name is not None:
        table.insert(0, 'module', module_name)
    return table
