"""Read-only status reporting over a pipeline output directory."""
import os

import pandas as pd

from modulechain.pipeline.failures import failures_table
from modulechain.pipeline.failures import get_script_errors
from modulechain.pipeline.lifecycle import LifecycleTracker
from modulechain.pipeline.lifecycle import ModuleState
from modulechain.pipeline.main_script import get_main_script
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import SCRIPT_FAILURE_SUFFIX
from modulechain.pipeline.module import SCRIPT_STARTED_SUFFIX
from modulechain.pipeline.module import SCRIPT_SUCCESS_SUFFIX
from modulechain.pipeline.registry import PipelineContext


def count_script_markers(module: Module) -> dict[str, int]:
    counts = {'started': 0, 'succeeded': 0, 'failed': 0}
    if not module.script_dir.is_dir():
        return counts
    for name in os.listdir(module.script_dir):
        if name.endswith(SCRIPT_STARTED_SUFFIX):
            counts['started'] += 1
        elif name.endswith(SCRIPT_SUCCESS_SUFFIX):
            counts['succeeded'] += 1
        elif name.endswith(SCRIPT_FAILURE_SUFFIX):
            counts['failed'] += 1
    return counts


def status_table(context: PipelineContext, tracker: LifecycleTracker) -> pd.DataFrame:
    """One row per module. Only complete modules have output that may be relied upon."""
    rows = []
    for module in context:
        state = tracker.state(module)
        main_script = get_main_script(module)
        rows.append({
            'module': f'{context.ordinal(module)}_{module.name}',
            'type': module.module_type,
            'state': state.value,
            'valid output': state is ModuleState.COMPLETE,
            'main script': main_script.name if main_script is not None else '',
            'runtime': tracker.runtime(module) or '',
            **count_script_markers(module),
        })
    return pd.DataFrame(rows)


def all_failures_table(context: PipelineContext) -> pd.DataFrame:
    tables = [
        failures_table(get_script_errors(module.script_dir), module_name=module.name)
        for module in context
    ]
    return pd.concat(tables, ignore_index=True)
