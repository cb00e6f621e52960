"""Collection of failure lines left by scripts."""
from modulechain.pipeline.failures import FailureReportEntry
from modulechain.pipeline.failures import failures_table
from modulechain.pipeline.failures import format_script_errors
from modulechain.pipeline.failures import get_script_errors


def test_failed_file_lines(tmp_path):
    (tmp_path / 'a_SCRIPT.sh.failed').write_text('line one\nline two\n', encoding='utf-8')
    (tmp_path / 'b_SCRIPT.sh.success').write_text('', encoding='utf-8')
    entries = get_script_errors(tmp_path)
    assert entries == [
        FailureReportEntry('a_SCRIPT.sh.failed', 'line one'),
        FailureReportEntry('a_SCRIPT.sh.failed', 'line two'),
    ]
    assert format_script_errors(entries) == [
        'a_SCRIPT.sh.failed | line one',
        'a_SCRIPT.sh.failed | line two',
    ]
    table = failures_table(entries, module_name='classify')
    assert list(table.columns) == ['module', 'script_file_name', 'line']
    assert len(table) == 2


def test_missing_script_directory(tmp_path):
    assert get_script_errors(tmp_path / 'absent') == []
    assert len(failures_table([])) == 0


def test_reading_does_not_modify(tmp_path):
    failed = tmp_path / 'x.sh.failed'
    failed.write_text('boom\n', encoding='utf-8')
    get_script_errors(tmp_path)
    assert sorted(p.name for p in tmp_path.iterdir()) == ['x.sh.failed']
    assert failed.read_text(encoding='utf-8') == 'boom\n'


def test_undecodable_bytes(tmp_path):
    (tmp_path / 'w.sh.failed').write_bytes(b'tool error: \xff\xfe bad bytes\n')
    entries = get_script_errors(tmp_path)
    assert len(entries) == 1
    assert entries[0].line.startswith('tool error: ')
    assert entries[0].line.endswith(' bad bytes')


def test_every_line_reported(tmp_path):
    (tmp_path / 'w.sh.failed').write_bytes(b'first\r\n\r\nthird\r\n')
    assert [entry.line for entry in get_script_errors(tmp_path)] == ['first', '', 'third']
