import io
from pathlib import Path

from wspace.common.wsconf import SPACE, TAB, LF
from wspace.common.ops import Instruction, Program
from wspace.common.settings import Settings
from wspace.sasm.asm import assemble
import wspace.runtime.interpreter as interpreter
import wspace.runtime.vm as vm


NOTATION = {'S': SPACE, 'T': TAB, 'L': LF}


def find_file(filename: str) -> Path:
    return Path(__file__).parent / filename


def load_file(filename: str) -> str:
    return find_file(filename).read_text()


def ws(notation: str) -> str:
    ''' Whitespace source from S/T/L notation, anything else is dropped '''
    return ''.join(NOTATION[c] for c in notation if c in NOTATION)


def make_program(*instructions: Instruction) -> Program:
    program = Program()

    for instruction in instructions:
        program.append(instruction)

    return program


def run_program(
    program: Program,
    stdin: str = '',
    settings: Settings | None = None
) -> tuple[str, vm.VirtualMachine]:
    out = io.StringIO()
    machine = interpreter.execute(program, settings, io.StringIO(stdin), out)
    return out.getvalue(), machine


def run_source(
    source: str,
    stdin: str = '',
    settings: Settings | None = None
) -> tuple[str, vm.VirtualMachine]:
    out = io.StringIO()
    machine = interpreter.execute_source(source, settings, io.StringIO(stdin), out)
    return out.getvalue(), machine


def run_asm(text: str, stdin: str = '', settings: Settings | None = None) -> str:
    out, _ = run_source(assemble(text), stdin, settings)
    return out


def execute_testdata(name: str, stdin: str = ''):
    source = assemble(load_file(f'testdata/{name}.wsasm'))
    interpreter.execute_source(source, stdin=io.StringIO(stdin))
