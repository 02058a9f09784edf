import sys
from pathlib import Path
import logging as lg
import traceback
from typing import TextIO

import click

from wspace.common.ops import Program
from wspace.common.settings import Settings
from wspace.common.errors import DecodeError, ExecutionError
from wspace.decode.decoder import decode, decode_file
from wspace.sasm.disasm import format_program, format_labels
import wspace.runtime.vm as vm


EXIT_HALT = 0
EXIT_DECODE_ERROR = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD = 3
EXIT_EXEC_ERROR = 100


def dump_program(program: Program):
    click.echo(format_program(program), err=True)
    click.echo(format_labels(program), err=True)


def execute(
    program: Program,
    settings: Settings | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None
) -> vm.VirtualMachine:
    machine = vm.VirtualMachine(program, stdin, stdout, settings)
    machine.run()
    return machine


def execute_source(
    source: bytes | str,
    settings: Settings | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None
) -> vm.VirtualMachine:
    program = decode(source, settings)
    return execute(program, settings, stdin, stdout)


@click.command()
@click.pass_context
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--trace', is_flag=True, help='Log machine state after every instruction')
@click.option('--dump', is_flag=True, help='Print the decoded program before running')
@click.option('--split-crlf', is_flag=True, help='Treat CR and LF of CRLF as two terminators')
@click.option('--heap-default', type=int, help='Value of never-written heap cells')
@click.option('-c', '--config', type=click.Path(exists=True, path_type=Path), help='TOML settings file')
@click.argument('source', type=click.Path(exists=True, path_type=Path))
def run(
    ctx: click.Context,
    source: Path,
    config: Path | None,
    verbose: bool,
    trace: bool,
    dump: bool,
    split_crlf: bool,
    heap_default: int | None
):
    ctx.ensure_object(Settings)

    if config is not None:
        ctx.obj.load(config)

    # Flags left off keep the configured values
    settings: Settings = ctx.obj.update(
        verbose=verbose or None,
        trace=trace or None,
        dump=dump or None,
        split_crlf=split_crlf or None,
        heap_default=heap_default
    )

    lg.basicConfig(level=lg.DEBUG if settings.verbose or settings.trace else lg.INFO)
    lg.info('WSPACE')

    try:
        program = decode_file(source, settings)

        if settings.dump:
            dump_program(program)

        execute(program, settings)
        lg.info('Execution finished')
        sys.exit(EXIT_HALT)

    except DecodeError as error:
        lg.error(f'Decode error: {error}')
        sys.exit(EXIT_DECODE_ERROR)

    except ExecutionError as error:
        lg.error(f'Execution halted on {error}')
        sys.exit(EXIT_RUNTIME_ERROR)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        sys.exit(EXIT_KEYBOARD)

    except Exception as error:
        lg.info(f'Execution halted on general error {error}')
        traceback.print_exc()
        sys.exit(EXIT_EXEC_ERROR)


if __name__ == '__main__':
    run()
