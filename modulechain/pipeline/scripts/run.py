"""CLI utility to run, or resume, a configured module pipeline."""
import argparse
import sys

from modulechain.pipeline.cli_arguments import add_argument
from modulechain.pipeline.configuration import PipelineConfiguration
from modulechain.pipeline.errors import ModuleChainError
from modulechain.pipeline.inputs import InputResolver
from modulechain.pipeline.launcher import SubprocessLauncher
from modulechain.pipeline.runner import PipelineRunner
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger('modulechain pipeline run')


def parse_arguments():
    parser = argparse.ArgumentParser(
        prog='modulechain pipeline run',
        description='Run each configured module in order. Modules already marked COMPLETE are '
        'skipped; a module left STARTED by an earlier run is regenerated and re-run.',
    )
    add_argument(parser, 'config file')
    return parser.parse_args()


if __name__ == '__main__':
    args = parse_arguments()
    try:
        configuration = PipelineConfiguration.from_file(args.config_file)
        context = configuration.build_context()
        resolver = InputResolver(
            context,
            configuration.input_path,
            ignore_files=configuration.ignore_files,
            paired_reads=configuration.paired_reads,
            forward_token=configuration.forward_token,
            reverse_token=configuration.reverse_token,
        )
        summary = PipelineRunner(context, resolver, SubprocessLauncher()).run()
    except ModuleChainError as error:
        logger.error(error.message)
        sys.exit(1)
    print(summary.as_table().to_string(index=False))
    sys.exit(0 if summary.succeeded else 1)
