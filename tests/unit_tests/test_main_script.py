"""Finding a module's driver script."""
from modulechain.pipeline.main_script import get_main_script
from modulechain.pipeline.module import Module
from modulechain.pipeline.module import OutputKind
from modulechain.pipeline.module import ScriptSettings
from modulechain.pipeline.registry import PipelineContext


def _module(tmp_path, output_kind=OutputKind.SHELL) -> Module:
    module = Module('report', 'command', ScriptSettings('770', 1, 1),
                    build=lambda module, files: [], output_kind=output_kind)
    placed = PipelineContext(tmp_path, [module]).modules[0]
    placed.script_dir.mkdir(parents=True)
    return placed


def test_only_reserved_files(tmp_path):
    module = _module(tmp_path)
    for suffix in ('.started', '.success', '.failed'):
        (module.script_dir / f'MAIN_0_report.sh{suffix}').write_text('', encoding='utf-8')
    (module.script_dir / '0.0_report.sh').write_text('', encoding='utf-8')
    assert get_main_script(module) is None

    (module.script_dir / 'MAIN_0_report.sh').write_text('', encoding='utf-8')
    assert get_main_script(module) == module.script_dir / 'MAIN_0_report.sh'


def test_extension_follows_output_kind(tmp_path):
    module = _module(tmp_path, output_kind=OutputKind.RSCRIPT)
    (module.script_dir / 'MAIN_0_report.sh').write_text('', encoding='utf-8')
    assert get_main_script(module) is None
    (module.script_dir / 'MAIN_0_report.R').write_text('', encoding='utf-8')
    assert get_main_script(module).name == 'MAIN_0_report.R'


def test_no_script_directory(tmp_path):
    module = Module('report', 'command', ScriptSettings('770', 1, 1), build=lambda m, f: [])
    placed = PipelineContext(tmp_path, [module]).modules[0]
    assert get_main_script(placed) is None
