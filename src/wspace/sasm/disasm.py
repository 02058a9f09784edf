''' Decoded program listing in assembler syntax '''

from wspace.common.ops import Opcode, Operand, Instruction, Program, label_bits
from wspace.sasm.asm import MNEMONIC_NAMES


def label_name(label: int) -> str:
    return f'L{label_bits(label)}'


def format_instruction(instruction: Instruction) -> str:
    opcode = instruction.opcode
    operand = instruction.operand

    if opcode == Opcode.MARK:
        assert operand is not None
        return f'{label_name(operand)}:'

    name = MNEMONIC_NAMES[opcode]

    match opcode.operand:
        case Operand.NUMBER:
            return f'    {name} {operand}'
        case Operand.LABEL:
            assert operand is not None
            return f'    {name} {label_name(operand)}'

    return f'    {name}'


def format_program(program: Program) -> str:
    lines = []

    for index, instruction in enumerate(program.instructions):
        text = format_instruction(instruction)
        lines.append(f'{text:<23} // #{index}')

    return '\n'.join(lines)


def format_labels(program: Program) -> str:
    return '\n'.join(
        f'// {label_name(label)} -> #{index}'
        for label, index in sorted(program.labels.items(), key=lambda item: item[1])
    )
