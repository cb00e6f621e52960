"""Locates the driver script of a module."""
import os
from pathlib import Path

from modulechain.pipeline.module import Module
from modulechain.pipeline.module import MAIN_SCRIPT_PREFIX
from modulechain.pipeline.module import RESERVED_SUFFIXES


def get_main_script(module: Module) -> Path | None:
    """The ``MAIN_`` script of the module, or None if there is no executable work."""
    script_dir = module.script_dir
    if not script_dir.is_dir():
        return None
    extension = module.output_kind.extension
    for name in sorted(os.listdir(script_dir)):
        if not name.startswith(MAIN_SCRIPT_PREFIX):
            continue
        if any(name.endswith(suffix) for suffix in RESERVED_SUFFIXES):
            continue
        if name.endswith(extension):
            return script_dir / name
    return None
