import logging as lg
import re
from typing import cast

from wspace.common.wsconf import SPACE, TAB, LF
from wspace.common.ops import Opcode, Operand, Instruction, Program, ENCODINGS, label_bits
from wspace.common.errors import AssemblyError
from wspace.sasm.fpp import FPP
import wspace.sasm.grammar as grammar


# Label names that spell out their own bit string
BITS_NAME = re.compile('L([01]*)')

MNEMONIC_NAMES = {op: name for name, op in grammar.MNEMONICS.items()}


def encode_bits(bits: str) -> str:
    return bits.replace('0', SPACE).replace('1', TAB)


def encode_number(value: int) -> str:
    sign = SPACE if value >= 0 else TAB
    return sign + encode_bits(format(abs(value), 'b')) + LF


def encode_label(bits: str) -> str:
    return encode_bits(bits) + LF


def encode(opcode: Opcode, operand: int | None = None, bits: str | None = None) -> str:
    ''' Whitespace text of one instruction; label operands are given as bits '''
    code = ENCODINGS[opcode]

    match opcode.operand:
        case Operand.NUMBER:
            assert operand is not None
            code += encode_number(operand)
        case Operand.LABEL:
            assert bits is not None
            code += encode_label(bits)

    return code


def annotation(opcode: Opcode, operand: int | str | None) -> str:
    ''' Mnemonic as a comment, which must not contain whitespace '''
    name = MNEMONIC_NAMES[opcode]

    if operand is None:
        return f'[{name}]'

    return f'[{name}:{operand}]'


def assign_labels(names: list[str]) -> dict[str, str]:
    labels: dict[str, str] = {}

    for name in names:
        match = BITS_NAME.fullmatch(name)

        if match is not None:
            labels[name] = match.group(1)

    used = set(labels.values())
    counter = 0

    for name in names:
        if name in labels:
            continue

        while format(counter, 'b') in used:
            counter += 1

        labels[name] = format(counter, 'b')
        used.add(labels[name])

    return labels


def assemble(text: str, annotate: bool = False) -> str:
    # First pass
    first_pass = FPP()
    actions = grammar.program.parse_string(text)

    for (func, arg) in actions:  # type: ignore
        func(first_pass, arg)

    # Second pass
    labels = assign_labels(first_pass.label_names)
    undefined = set(first_pass.label_names) - first_pass.marked

    if undefined:
        raise AssemblyError(f'Undefined labels {sorted(undefined)}')

    chunks = []

    for (opcode, operand) in first_pass.cmd_list:
        if annotate:
            chunks.append(annotation(opcode, operand))

        if opcode.operand == Operand.LABEL:
            chunks.append(encode(opcode, bits=labels[cast(str, operand)]))
        else:
            chunks.append(encode(opcode, cast(int | None, operand)))

    lg.debug(f'Assembled {len(first_pass.cmd_list)} instructions, {len(labels)} labels')
    return ''.join(chunks)


def encode_instruction(instruction: Instruction) -> str:
    if instruction.opcode.operand == Operand.LABEL:
        assert instruction.operand is not None
        return encode(instruction.opcode, bits=label_bits(instruction.operand))

    return encode(instruction.opcode, instruction.operand)


def encode_program(program: Program) -> str:
    return ''.join(encode_instruction(i) for i in program.instructions)
