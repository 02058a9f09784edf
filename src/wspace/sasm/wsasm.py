from pathlib import Path
import logging as lg

import click

from wspace.sasm.asm import assemble


def assemble_file(input: Path, output: Path, annotate: bool = False):
    lg.debug(f'Assembling file {input}')
    source = assemble(input.read_text(), annotate)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source)


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('--annotate', is_flag=True, help='Prefix every instruction with its mnemonic')
@click.argument('input', type=Path)
@click.argument('output', type=Path, required=False)
def compile(verbose: bool, annotate: bool, input: Path, output: Path | None):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info('WSPACE ASM')

    if not output:
        output = input.with_suffix('.ws')

    lg.info(f'Assembling {input.name} to {output.name}')
    assemble_file(input, output, annotate)


if __name__ == '__main__':
    compile()
