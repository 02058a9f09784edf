''' Source to instruction decoder '''

import logging as lg
from enum import Enum, auto
from pathlib import Path

from wspace.common.wsconf import SPACE, TAB, LF, CR, SIGNIFICANT, LABEL_SENTINEL, SOURCE_CHUNK_SIZE
from wspace.common.ops import (
    Imp, Opcode, Operand, Instruction, Program, IMP_PATTERNS, COMMAND_PATTERNS
)
from wspace.common.errors import DecodeError
from wspace.common.settings import Settings


class Stage(Enum):
    IMP = auto()
    COMMAND = auto()
    NUMBER = auto()
    LABEL = auto()


def is_prefix(pending: str, patterns: dict) -> bool:
    return any(p.startswith(pending) for p in patterns)


class Decoder:
    ''' Incremental decoder.

        Bytes are fed in any number of chunks; `finish` returns the program
        once the whole source has been seen. Decoder state is only valid
        between instructions, so ending the input anywhere else fails.
    '''
    stage: Stage
    imp: Imp | None
    opcode: Opcode | None
    pending: str            # Selector characters read in the current stage
    sign: int               # 0 until the sign character is read
    value: int              # Operand accumulator
    offset: int             # Bytes consumed so far
    last_byte: str | None

    def __init__(self, settings: Settings | None = None):
        self.settings = settings if settings is not None else Settings()
        self.program = Program()

        self.offset = 0
        self.last_byte = None
        self.reset()

    def reset(self):
        self.stage = Stage.IMP
        self.imp = None
        self.opcode = None
        self.pending = ''
        self.sign = 0
        self.value = 0

    def fail(self, message: str):
        raise DecodeError(message, self.offset, len(self.program))

    # - Input - #

    def feed(self, data: bytes | str):
        if isinstance(data, str):
            data = data.encode()

        # Only ASCII whitespace is significant, the rest can stay undecoded
        for c in data.decode('latin-1'):
            self.feed_char(c)
            self.last_byte = c
            self.offset += 1

    def feed_char(self, c: str):
        if c not in SIGNIFICANT:
            return

        if c == LF and self.last_byte == CR and not self.settings.split_crlf:
            return

        if c == CR:
            c = LF

        match self.stage:
            case Stage.IMP:
                self.on_imp(c)
            case Stage.COMMAND:
                self.on_command(c)
            case Stage.NUMBER:
                self.on_number(c)
            case Stage.LABEL:
                self.on_label(c)

    def finish(self) -> Program:
        if self.stage != Stage.IMP or self.pending:
            self.fail(f'Unexpected end of input in {self.stage.name} stage')

        lg.debug(f'Decoded {len(self.program)} instructions, {len(self.program.labels)} labels')
        return self.program

    # - Stages - #

    def on_imp(self, c: str):
        self.pending += c

        if self.pending in IMP_PATTERNS:
            self.imp = IMP_PATTERNS[self.pending]
            self.pending = ''
            self.stage = Stage.COMMAND
            return

        if not is_prefix(self.pending, IMP_PATTERNS):
            self.fail(f'Unknown instruction family {self.pending!r}')

    def on_command(self, c: str):
        assert self.imp is not None
        commands = COMMAND_PATTERNS[self.imp]
        self.pending += c

        if self.pending not in commands:
            if not is_prefix(self.pending, commands):
                self.fail(f'Unknown {self.imp.name} command {self.pending!r}')

            return

        self.opcode = commands[self.pending]
        self.pending = ''

        match self.opcode.operand:
            case Operand.NUMBER:
                self.stage = Stage.NUMBER
            case Operand.LABEL:
                self.value = LABEL_SENTINEL
                self.stage = Stage.LABEL
            case Operand.NONE:
                self.issue(Instruction(self.opcode))

    def on_number(self, c: str):
        if self.sign == 0:
            if c == LF:
                self.fail('Number without a sign')

            self.sign = 1 if c == SPACE else -1
            return

        if c == LF:
            assert self.opcode is not None
            self.issue(Instruction(self.opcode, self.sign * self.value))
            return

        self.value = (self.value << 1) | (1 if c == TAB else 0)

    def on_label(self, c: str):
        if c == LF:
            assert self.opcode is not None
            self.issue(Instruction(self.opcode, self.value))
            return

        self.value = (self.value << 1) | (1 if c == TAB else 0)

    def issue(self, instruction: Instruction):
        lg.debug(f'#{len(self.program)} {instruction} @ 0x{self.offset:X}')
        self.program.append(instruction)
        self.reset()


def decode(source: bytes | str, settings: Settings | None = None) -> Program:
    decoder = Decoder(settings)
    decoder.feed(source)
    return decoder.finish()


def decode_file(path: Path, settings: Settings | None = None) -> Program:
    lg.debug(f'Decoding {path}')
    decoder = Decoder(settings)

    with path.open('rb') as source:
        while chunk := source.read(SOURCE_CHUNK_SIZE):
            decoder.feed(chunk)

    return decoder.finish()
