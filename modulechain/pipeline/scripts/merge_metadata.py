"""CLI utility to append sample metadata columns to a tab-separated table."""
import argparse

from modulechain.pipeline.cli_arguments import add_argument
from modulechain.pipeline.merge_metadata import merge_metadata_file

if __name__ == '__main__':
    parser = argparse.ArgumentParser(
        prog='modulechain pipeline merge-metadata',
        description='Rows are matched on the first column (sample ID). Rows without metadata '
        'are dropped.',
    )
    add_argument(parser, 'table file')
    add_argument(parser, 'metadata file')
    add_argument(parser, 'output file')
    args = parser.parse_args()
    merge_metadata_file(args.table_file, args.metadata_file, args.output_file)
