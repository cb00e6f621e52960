"""Appends sample metadata columns to a parsed table keyed by sample ID.

The first column of the table holds sample IDs. Rows whose sample ID is absent from the
metadata are dropped with a warning.
"""
from pathlib import Path

import pandas as pd

from modulechain.pipeline.errors import ConfigFormat
from modulechain.standalone_utilities.log_formats import colorized_logger

logger = colorized_logger(__name__)

QUOTE_CHARACTERS = '"\''


def read_metadata(metadata_file: Path | str) -> pd.DataFrame:
    """Tab-separated, first column is the sample ID. Quote characters are stripped, and
    each sample ID may appear only once."""
    metadata = pd.read_csv(metadata_file, sep='\t', dtype=str, keep_default_na=False)
    metadata.columns = [_strip_quotes(column) for column in metadata.columns]
    metadata = metadata.apply(lambda column: column.map(_strip_quotes))
    metadata = metadata.set_index(metadata.columns[0])
    duplicates = sorted(set(metadata.index[metadata.index.duplicated()]))
    if duplicates:
        raise ConfigFormat('metadata_file', str(metadata_file),
                           f'sample IDs appear more than once: {duplicates}')
    return metadata


def _strip_quotes(value: str) -> str:
    return ''.join(character for character in value if character not in QUOTE_CHARACTERS)


def merge_metadata(table: pd.DataFrame, metadata: pd.DataFrame) -> pd.DataFrame:
    if metadata.index.has_duplicates:
        raise ValueError('Metadata sample IDs must be unique.')
    sample_column = table.columns[0]
    sample_ids = table[sample_column].astype(str)
    known = sample_ids.isin(metadata.index)
    for sample in sample_ids[~known]:
        logger.warning('Sample %s has no metadata; removing it from the table.', sample)
    kept = table.loc[known].reset_index(drop=True)
    kept[sample_column] = kept[sample_column].astype(str)
    columns = [column for column in metadata.columns if column not in kept.columns]
    merged = kept.join(metadata[columns], on=sample_column)
    logger.info('Merged %s metadata columns onto %s of %s rows.',
                len(columns), len(merged), len(table))
    return merged


def merge_metadata_file(table_file: Path | str, metadata_file: Path | str,
                        output_file: Path | str) -> pd.DataFrame:
    table = pd.read_csv(table_file, sep='\t', dtype=str, keep_default_na=False)
    merged = merge_metadata(table, read_metadata(metadata_file))
    merged.to_csv(output_file, sep='\t', index=False)
    return merged
