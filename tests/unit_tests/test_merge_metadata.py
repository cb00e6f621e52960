"""Appending metadata columns to parsed tables."""
import pandas as pd
import pytest

from modulechain.pipeline.errors import ConfigFormat
from modulechain.pipeline.merge_metadata import merge_metadata
from modulechain.pipeline.merge_metadata import merge_metadata_file
from modulechain.pipeline.merge_metadata import read_metadata


def test_unmatched_rows_dropped():
    table = pd.DataFrame({'sample': ['S1', 'S2', 'S3'], 'count': ['10', '20', '30']})
    metadata = pd.DataFrame({'group': ['case', 'control']}, index=['S3', 'S1'])
    merged = merge_metadata(table, metadata)
    assert list(merged.columns) == ['sample', 'count', 'group']
    assert list(merged['sample']) == ['S1', 'S3']
    assert list(merged['group']) == ['control', 'case']


def test_merge_files(tmp_path):
    table_file = tmp_path / 'S.tsv'
    metadata_file = tmp_path / 'metadata.tsv'
    output_file = tmp_path / 'merged.tsv'
    table_file.write_text('id\tpathway\nS1\t0.5\nS9\t0.1\n', encoding='utf-8')
    metadata_file.write_text("id\tsite\tnote\nS1\tgut\tpatient's\n", encoding='utf-8')
    merge_metadata_file(table_file, metadata_file, output_file)
    assert output_file.read_text(encoding='utf-8') == 'id\tpathway\tsite\tnote\nS1\t0.5\tgut\tpatients\n'


def test_quotes_stripped(tmp_path):
    metadata_file = tmp_path / 'metadata.tsv'
    metadata_file.write_text("id\tlabel\nS1\tit's\n", encoding='utf-8')
    metadata = read_metadata(metadata_file)
    assert metadata.loc['S1', 'label'] == 'its'


def test_duplicate_sample_ids_rejected(tmp_path):
    metadata_file = tmp_path / 'metadata.tsv'
    metadata_file.write_text('id\tlabel\ns1\ta\ns1\tb\ns2\tc\n', encoding='utf-8')
    with pytest.raises(ConfigFormat):
        read_metadata(metadata_file)

    metadata = pd.DataFrame({'label': ['a', 'b', 'c']}, index=['s1', 's1', 's2'])
    with pytest.raises(ValueError):
        merge_metadata(pd.DataFrame({'id': ['s1', 's2']}), metadata)


def test_rows_matched_by_sample_id():
    table = pd.DataFrame({'id': ['s2', 's9', 's1'], 'value': ['x', 'y', 'z']})
    metadata = pd.DataFrame({'label': ['one', 'two']}, index=['s1', 's2'])
    merged = merge_metadata(table, metadata)
    assert merged.values.tolist() == [['s2', 'x', 'two'], ['s1', 'z', 'one']]
