"""Sequential execution of the configured modules."""
import shutil
from typing import NamedTuple

import pandas as pd

from modulechain.pipeline.failures import FailureReportEntry
from modulechain.pipeline.failures import format_script_errors
from modulechain.pipeline.failures import get_script_errors
from modulechain.pipeline.inputs import InputResolver
from modulechain.pipeline.launcher import Launcher
from modulechain.pipeline.lifecycle import LifecycleTracker
from modulechain.pipeline.lifecycle import ModuleState
from modulechain.pipeline.module import Module
from modulechain.pipeline.registry import PipelineContext
from modulechain.pipeline.script_generation import ScriptGenerator
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)


class ModuleSummary(NamedTuple):
    name: str
    state: ModuleState
    runtime: str | None = None
    failures: tuple[FailureReportEntry, ...] = ()
    skipped: bool = False


class PipelineSummary(NamedTuple):
    modules: tuple[ModuleSummary, ...]

    @property
    def succeeded(self) -> bool:
        return all(summary.state is ModuleState.COMPLETE for summary in self.modules)

    @property
    def failures(self) -> list[FailureReportEntry]:
        return [entry for summary in self.modules for entry in summary.failures]

    def as_table(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'module': summary.name,
                'state': summary.state.value,
                'runtime': summary.runtime if summary.runtime is not None else '',
                'failures': len(summary.failures),
                'skipped': summary.skipped,
            }
            for summary in self.modules
        ])


class PipelineRunner:
    """Runs each module in order, stopping at the first one whose scripts fail."""

    def __init__(
        self,
        context: PipelineContext,
        resolver: InputResolver,
        launcher: Launcher,
        tracker: LifecycleTracker | None = None,
        generator: ScriptGenerator | None = None,
    ):
        self.context = context
        self.resolver = resolver
        self.launcher = launcher
        self.tracker = tracker if tracker is not None else LifecycleTracker()
        self.generator = generator if generator is not None else ScriptGenerator(context)

    def validate(self) -> None:
        """Configuration problems surface here, before anything is written."""
        for module in self.context:
            module.settings.validate(section=f'module {module.name}')
        self.context.check_prerequisites()

    def run(self) -> PipelineSummary:
        self.validate()
        summaries = []
        for module in self.context:
            if self.tracker.is_complete(module):
                logger.info('Skipping %s, already complete.', module.name)
                summaries.append(ModuleSummary(module.name, ModuleState.COMPLETE, skipped=True))
                continue
            summary = self._run_module(module)
            summaries.append(summary)
            if summary.state is not ModuleState.COMPLETE:
                logger.error('Pipeline stopped at %s.', module.name)
                break
        return PipelineSummary(tuple(summaries))

    def _run_module(self, module: Module) -> ModuleSummary:
        if self.tracker.is_incomplete(module):
            logger.warning('Re-running %s from scratch after an unfinished run.', module.name)
            self.tracker.reset(module)
            if module.script_dir.exists():
                shutil.rmtree(module.script_dir)
        self.tracker.mark_started(module)
        units = self.resolver.resolve(module)
        script_set = self.generator.generate(module, units, self.resolver.is_paired(module))
        self.launcher.launch(script_set, module.root_dir)
        failures = tuple(get_script_errors(module.script_dir))
        runtime = self.tracker.runtime(module)
        if len(failures) > 0:
            for line in format_script_errors(list(failures)):
                logger.error(line)
            logger.error('%s failed after %s.', module.name, runtime)
            return ModuleSummary(module.name, ModuleState.INCOMPLETE, runtime, failures)
        logger.info('%s runtime: %s', module.name, runtime)
        self.tracker.mark_complete(module)
        return ModuleSummary(module.name, ModuleState.COMPLETE, runtime)
