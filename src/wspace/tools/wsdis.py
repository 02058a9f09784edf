import sys
from pathlib import Path
import logging as lg

import click

from wspace.common.settings import Settings
from wspace.common.errors import DecodeError
from wspace.runtime.interpreter import EXIT_DECODE_ERROR
from wspace.decode.decoder import decode_file
from wspace.sasm.disasm import format_program, format_labels


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--split-crlf', is_flag=True, help='Treat CR and LF of CRLF as two terminators')
@click.argument('source', type=click.Path(exists=True, path_type=Path))
def disassemble(verbose: bool, split_crlf: bool, source: Path):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info('WSPACE DIS')

    settings = Settings().update(verbose=verbose, split_crlf=split_crlf)

    try:
        program = decode_file(source, settings)
    except DecodeError as error:
        lg.error(f'Decode error: {error}')
        sys.exit(EXIT_DECODE_ERROR)

    click.echo(format_program(program))
    click.echo(format_labels(program))


if __name__ == '__main__':
    disassemble()
