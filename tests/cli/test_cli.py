from click.testing import CliRunner

import wspace.runtime.interpreter as interpreter
from wspace.sasm.wsasm import compile
from wspace.tools.wsdis import disassemble

from unit_utils import ws, find_file, load_file
from fixtures import source_file  # noqa: F401


def test_run(source_file):  # noqa: F811
    path = source_file(ws('SS STL SS STL TSSS TLST LLL'))
    result = CliRunner().invoke(interpreter.run, [str(path)])

    assert result.exit_code == interpreter.EXIT_HALT
    assert result.output == '2'


def test_run_reads_stdin(tmp_path):
    binary = tmp_path / 'factorial.ws'
    CliRunner().invoke(compile, [str(find_file('testdata/factorial.wsasm')), str(binary)])

    result = CliRunner().invoke(interpreter.run, [str(binary)], input='5\n')

    assert result.exit_code == interpreter.EXIT_HALT
    assert result.output == '120\n'


def test_run_decode_error(source_file):  # noqa: F811
    path = source_file(ws('SS STL TLSS SS'))
    result = CliRunner().invoke(interpreter.run, [str(path)])

    assert result.exit_code == interpreter.EXIT_DECODE_ERROR
    assert result.output == ''


def test_run_runtime_error(source_file):  # noqa: F811
    path = source_file(ws('SS STL TLST TLST'))
    result = CliRunner().invoke(interpreter.run, [str(path)])

    assert result.exit_code == interpreter.EXIT_RUNTIME_ERROR
    assert result.output == '1'


def test_heap_default_option(source_file):  # noqa: F811
    # push 4; retrieve; outn
    path = source_file(ws('SS STSS L TTT TLST'))

    strict = CliRunner().invoke(interpreter.run, [str(path)])
    assert strict.exit_code == interpreter.EXIT_RUNTIME_ERROR

    lenient = CliRunner().invoke(interpreter.run, ['--heap-default', '0', str(path)])
    assert lenient.exit_code == interpreter.EXIT_HALT
    assert lenient.output == '0'


def test_config_file(source_file, tmp_path):  # noqa: F811
    path = source_file(ws('SS STSS L TTT TLST'))
    config = tmp_path / 'wspace.toml'
    config.write_text('[interpreter]\nheap_default = 7\n')

    result = CliRunner().invoke(interpreter.run, ['-c', str(config), str(path)])
    assert result.output == '7'

    # Command line overrides the file
    result = CliRunner().invoke(interpreter.run, ['-c', str(config), '--heap-default', '3', str(path)])
    assert result.output == '3'


def test_config_file_unknown_key(source_file, tmp_path):  # noqa: F811
    path = source_file(ws('LLL'))
    config = tmp_path / 'wspace.toml'
    config.write_text('[interpreter]\nheap_size = 7\n')

    result = CliRunner().invoke(interpreter.run, ['-c', str(config), str(path)])
    assert result.exit_code != interpreter.EXIT_HALT


def test_split_crlf_option(source_file):  # noqa: F811
    path = source_file('   \t\r\n\n\n')

    assert CliRunner().invoke(interpreter.run, [str(path)]).exit_code == interpreter.EXIT_DECODE_ERROR
    assert CliRunner().invoke(interpreter.run, ['--split-crlf', str(path)]).exit_code == interpreter.EXIT_HALT


def test_dump(source_file):  # noqa: F811
    path = source_file(ws('SS STL TLST LLL'))
    result = CliRunner().invoke(interpreter.run, ['--dump', str(path)])

    assert result.exit_code == interpreter.EXIT_HALT
    assert 'push 1' in result.output
    assert 'outn' in result.output


def test_wsasm_default_output(tmp_path):
    source = tmp_path / 'hello.wsasm'
    source.write_text(load_file('testdata/hello.wsasm'))

    result = CliRunner().invoke(compile, [str(source)])

    assert result.exit_code == 0
    assert (tmp_path / 'hello.ws').exists()

    run = CliRunner().invoke(interpreter.run, [str(tmp_path / 'hello.ws')])
    assert run.output == load_file('testdata/hello.log')


def test_wsasm_annotate(tmp_path):
    binary = tmp_path / 'out' / 'countdown.ws'
    CliRunner().invoke(compile, ['--annotate', str(find_file('testdata/countdown.wsasm')), str(binary)])

    assert binary.read_text().startswith('[push:5]')


def test_wsdis(source_file):  # noqa: F811
    path = source_file(ws('LSS T L SS STL LSL T L'))
    result = CliRunner().invoke(disassemble, [str(path)])

    assert result.exit_code == 0
    assert 'L1:' in result.output
    assert 'jmp L1' in result.output
    assert '// L1 -> #0' in result.output


def test_wsdis_decode_error(source_file):  # noqa: F811
    path = source_file(ws('T'))
    result = CliRunner().invoke(disassemble, [str(path)])

    assert result.exit_code == interpreter.EXIT_DECODE_ERROR


def test_run_surrogate_output(source_file):  # noqa: F811
    # push 0xD800; outc
    path = source_file(ws('SS S TTSTTSSSSSSSSSSS L TLSS'))
    result = CliRunner().invoke(interpreter.run, [str(path)])

    assert result.exit_code == interpreter.EXIT_RUNTIME_ERROR
    assert result.output == ''


def test_config_file_wrong_type(source_file, tmp_path):  # noqa: F811
    path = source_file(ws('SS STSS L TTT TLST'))
    config = tmp_path / 'wspace.toml'
    config.write_text('[interpreter]\nheap_default = "zero"\n')

    result = CliRunner().invoke(interpreter.run, ['-c', str(config), str(path)])
    assert result.exit_code != interpreter.EXIT_HALT
    assert result.output == ''
