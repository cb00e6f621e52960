"""CLI utility to list the failure lines recorded by worker and driver scripts."""
import argparse

from modulechain.pipeline.cli_arguments import add_argument
from modulechain.pipeline.configuration import PipelineConfiguration
from modulechain.pipeline.summary import all_failures_table
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger('modulechain pipeline report-failures')

if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        prog='modulechain pipeline report-failures',
        description='Collect every line of every .failed file in the module script directories.',
    )
    add_argument(parser, 'config file')
    add_argument(parser, 'output file', required=False)
    args = parser.parse_args()

    context = PipelineConfiguration.from_file(args.config_file).build_context()
    table = all_failures_table(context)
    if args.output_file is not None:
        table.to_csv(args.output_file, sep='\t', index=False)
        logger.info('Wrote %s failure lines to %s.', len(table), args.output_file)
    elif len(table) == 0:
        logger.info('No failures recorded.')
    else:
        for _, row in table.iterrows():
            print(f'{row["module"]}: {row["script_file_name"]} | {row["line"]}')
