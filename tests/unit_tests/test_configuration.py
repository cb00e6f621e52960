"""Parsing the pipeline configuration file into modules."""
from pathlib import Path

import pytest

from modulechain.pipeline.configuration import PipelineConfiguration
from modulechain.pipeline.errors import ConfigFormat
from modulechain.pipeline.errors import ConfigMissing
from modulechain.pipeline.module import OutputKind
from modulechain.pipeline.registry import PARSER_CAPABILITY

CONFIGURATION = """
[general]
input_path = /data/raw
output_path = /data/pipeline
modules = classify, parse, merge
metadata_file = /data/metadata.tsv
script_permissions = 770
script_batch_size = 8
script_num_threads = 2
script_timeout = 60

[module classify]
type = command
command = kraken2 {threads} --output {output_dir}/{sample}.txt {input}
threads_flag = --threads
script_batch_size = 4

[module parse]
type = parser
command = parse_report {input} > {output_dir}/{sample}.tsv

[module merge]
type = metadata_merge
"""


def test_modules_in_order():
    configuration = PipelineConfiguration.from_string(CONFIGURATION)
    context = configuration.build_context()
    assert [module.name for module in context] == ['classify', 'parse', 'merge']
    assert context.output_path == Path('/data/pipeline')
    assert configuration.input_path == Path('/data/raw')
    assert context.require_parser_module().name == 'parse'
    context.check_prerequisites()


def test_section_overrides_general():
    context = PipelineConfiguration.from_string(CONFIGURATION).build_context()
    classify = context.get_module('classify')
    parse = context.get_module('parse')
    assert classify.settings.batch_size == 4
    assert parse.settings.batch_size == 8
    assert parse.settings.num_threads == 2
    assert parse.settings.timeout == 60
    assert classify.parameters['threads_flag'] == '--threads'
    assert 'script_batch_size' not in classify.parameters
    assert parse.provides(PARSER_CAPABILITY)
    assert context.get_module('merge').parameters['metadata_file'] == '/data/metadata.tsv'


def test_rscript_type():
    configuration = PipelineConfiguration.from_string(CONFIGURATION.replace(
        'type = command', 'type = rscript'))
    module = configuration.build_module('classify')
    assert module.output_kind is OutputKind.RSCRIPT


def test_malformed_values():
    configuration = PipelineConfiguration.from_string(
        CONFIGURATION.replace('script_batch_size = 4', 'script_batch_size = four'))
    with pytest.raises(ConfigFormat):
        configuration.build_context()

    configuration = PipelineConfiguration.from_string(
        CONFIGURATION.replace('type = parser', 'type = unknown'))
    with pytest.raises(ConfigFormat):
        configuration.build_context()

    configuration = PipelineConfiguration.from_string('[general]\npaired_reads = maybe\n')
    with pytest.raises(ConfigFormat):
        _ = configuration.paired_reads

    configuration = PipelineConfiguration.from_string('[general]\ncount = 0\n')
    with pytest.raises(ConfigFormat):
        configuration.require_positive_integer('count')


def test_missing_values():
    configuration = PipelineConfiguration.from_string('[general]\noutput_path = /out\n')
    with pytest.raises(ConfigMissing):
        configuration.module_names()
    with pytest.raises(ConfigMissing):
        _ = configuration.input_path

    configuration = PipelineConfiguration.from_string(
        CONFIGURATION.replace('metadata_file = /data/metadata.tsv\n', ''))
    with pytest.raises(ConfigMissing) as raised:
        configuration.build_context()
    assert raised.value.key == 'metadata_file'

    configuration = PipelineConfiguration.from_string(
        CONFIGURATION.replace('script_permissions = 770\n', ''))
    module = configuration.build_module('parse')
    with pytest.raises(ConfigMissing):
        module.settings.validate()


def test_accessors():
    configuration = PipelineConfiguration.from_string(
        '[general]\nlist = a, b,, c\nflag = yes\npath = ~/data\n')
    assert configuration.get_list('list') == ['a', 'b', 'c']
    assert configuration.get_list('absent') == []
    assert configuration.get_boolean('flag')
    assert not configuration.get_boolean('absent')
    assert configuration.require_path('path') == Path.home() / 'data'
    assert configuration.get_positive_integer('absent') is None
    assert configuration.forward_token == '_R1'
    assert configuration.reverse_token == '_R2'


def test_from_file(tmp_path):
    config_file = tmp_path / 'pipeline.ini'
    config_file.write_text(CONFIGURATION, encoding='utf-8')
    assert PipelineConfiguration.from_file(config_file).module_names() == [
        'classify', 'parse', 'merge']
    with pytest.raises(FileNotFoundError):
        PipelineConfiguration.from_file(tmp_path / 'absent.ini')
