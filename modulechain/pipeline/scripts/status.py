"""CLI utility to show the lifecycle state of each module of a pipeline."""
import argparse

from modulechain.pipeline.cli_arguments import add_argument
from modulechain.pipeline.configuration import PipelineConfiguration
from modulechain.pipeline.lifecycle import LifecycleTracker
from modulechain.pipeline.summary import status_table

if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        prog='modulechain pipeline status',
        description='Report state, runtime and script outcome counts per module.',
    )
    add_argument(parser, 'config file')
    args = parser.parse_args()

    context = PipelineConfiguration.from_file(args.config_file).build_context()
    print(status_table(context, LifecycleTracker()).to_string(index=False))
