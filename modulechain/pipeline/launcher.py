"""Launchers run a module's driver script."""
import os
import signal
import subprocess
from abc import ABC
from abc import abstractmethod
from pathlib import Path

from modulechain.pipeline.failures import get_script_errors
from modulechain.pipeline.module import SCRIPT_FAILURE_SUFFIX
from modulechain.pipeline.script_generation import ScriptSet
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)


class Launcher(ABC):
    """Interface for running generated scripts. Parallelism and timeout enforcement, if
    any, are the launcher's business."""

    @abstractmethod
    def launch(self, script_set: ScriptSet, working_directory: Path) -> int:
        """Runs the driver and returns its exit code. Script failures are reported through
        failure files, not exceptions."""


class SubprocessLauncher(Launcher):
    """Runs the driver as a local child process, in its own session so that a timeout
    stops the workers it started as well."""

    def launch(self, script_set: ScriptSet, working_directory: Path) -> int:
        driver = script_set.driver
        timeout_seconds = 60 * script_set.timeout if script_set.timeout is not None else None
        logger.info('Launching %s', driver.name)
        with subprocess.Popen(
            [str(driver)], cwd=str(working_directory), start_new_session=True,
        ) as process:
            try:
                exit_code = process.wait(timeout=timeout_seconds)
            except subprocess.TimeoutExpired:
                self._kill_process_group(process)
                process.wait()
                message = f'Driver timed out after {script_set.timeout} minutes'
                logger.error('%s: %s', driver.name, message)
                self._append_failure(driver, message)
                return -1
        if exit_code != 0:
            logger.warning('%s exited with status %s.', driver.name, exit_code)
            if len(get_script_errors(driver.parent)) == 0:
                self._append_failure(driver, f'Driver exited with status {exit_code}')
        return exit_code

    @staticmethod
    def _kill_process_group(process: subprocess.Popen) -> None:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            logger.debug('Process group %s already exited.', process.pid)

    @staticmethod
    def _append_failure(driver: Path, message: str) -> None:
        with open(f'{driver}{SCRIPT_FAILURE_SUFFIX}', 'at', encoding='utf-8') as file:
            file.write(message + '\n')
