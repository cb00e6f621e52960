"""Module ordering, lookup by capability, and directory helpers."""
from pathlib import Path

import pytest

from modulechain.pipeline.errors import MissingRequiredModule
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import ScriptSettings
from modulechain.pipeline.registry import PARSER_CAPABILITY
from modulechain.pipeline.registry import PipelineContext


def _module(name: str, capabilities=(), prerequisites=()) -> Module:
    return Module(
        name=name,
        module_type='command',
        settings=ScriptSettings('770', 1, 1),
        build=lambda module, files: [[f'cat {f}'] for f in files],
        capabilities=capabilities,
        prerequisites=prerequisites,
    )


def test_parser_lookup_without_parser():
    context = PipelineContext('/out', [_module('trim'), _module('classify')])
    assert context.get_parser_module() is None
    with pytest.raises(MissingRequiredModule) as raised:
        context.require_parser_module()
    assert raised.value.capability == PARSER_CAPABILITY


def test_first_provider_wins():
    context = PipelineContext('/out', [
        _module('trim'),
        _module('parse_a', capabilities=[PARSER_CAPABILITY]),
        _module('parse_b', capabilities=[PARSER_CAPABILITY]),
    ])
    assert context.require_parser_module().name == 'parse_a'
    assert context.find_by_capability('unknown') is None


def test_ordinal_padding():
    context = PipelineContext('/out', [_module(f'm{i}') for i in range(10)])
    first = context.get_module('m0')
    last = context.get_module('m9')
    assert context.ordinal(first) == '00'
    assert context.ordinal(last) == '09'
    assert last.root_dir == Path('/out/09_m9')
    assert context.module_root_dir(last) == last.root_dir
    assert last.position == 9


def test_previous_module():
    context = PipelineContext('/out', [_module('a'), _module('b')])
    assert context.get_previous_module(context.get_module('a')) is None
    assert context.get_previous_module(context.get_module('b')).name == 'a'
    assert context.module_exists('b')
    assert not context.module_exists('c')


def test_duplicate_names_rejected():
    with pytest.raises(ValueError):
        PipelineContext('/out', [_module('a'), _module('a')])


def test_prerequisites_must_come_earlier():
    merge = _module('merge', prerequisites=[PARSER_CAPABILITY])
    parse = _module('parse', capabilities=[PARSER_CAPABILITY])
    PipelineContext('/out', [parse, merge]).check_prerequisites()
    with pytest.raises(MissingRequiredModule):
        PipelineContext('/out', [merge, parse]).check_prerequisites()


def test_sub_directories(tmp_path):
    context = PipelineContext(tmp_path, [_module('a'), _module('b')])
    module = context.get_module('b')
    assert context.get_module_num(module) is None
    assert context.get_sub_dir(module, 'script') is None
    created = context.require_sub_dir(module, 'script')
    assert created == tmp_path / '1_b' / 'script'
    assert context.sub_dir_exists(module, 'script')
    assert context.get_module_num(module) == '1'


def test_metadata_module_detection(tmp_path):
    context = PipelineContext(tmp_path, [_module('import_metadata')])
    module = context.modules[0]
    output = context.require_sub_dir(module, 'output')
    assert not context.is_metadata_module(module, 'metadata.tsv')
    (output / 'metadata.tsv').write_text('id\tgroup\n', encoding='utf-8')
    (output / 'README').write_text('', encoding='utf-8')
    assert not context.is_metadata_module(module, 'metadata.tsv')
    assert context.is_metadata_module(module, 'metadata.tsv', ignore_files=['README'])
