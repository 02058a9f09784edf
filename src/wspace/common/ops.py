from dataclasses import dataclass, field
from enum import Enum, auto

from wspace.common.wsconf import SPACE as S, TAB as T, LF as L, LABEL_SENTINEL


class Imp(Enum):
    STACK = auto()
    ARITHMETIC = auto()
    HEAP = auto()
    FLOW = auto()
    IO = auto()


class Operand(Enum):
    NONE = auto()
    NUMBER = auto()     # Signed integer
    LABEL = auto()      # Unsigned bit string


class Opcode(Enum):
    # Stack
    PUSH = auto()       # n -> S
    DUP = auto()        # S[0] -> S
    COPY = auto()       # S[n] -> S
    SWAP = auto()       # S[0] <-> S[1]
    DISCARD = auto()    # S[0] -> /dev/null
    SLIDE = auto()      # drop S[1]..S[n], keep S[0]

    # Arithmetic
    ADD = auto()        # a +  b -> S
    SUB = auto()        # a -  b -> S
    MUL = auto()        # a *  b -> S
    DIV = auto()        # a // b -> S
    MOD = auto()        # a %  b -> S

    # Heap
    STORE = auto()      # H[a] <- v
    RETRIEVE = auto()   # H[a] -> S

    # Flow
    MARK = auto()       # l:
    CALL = auto()       # push PC + 1; PC <- l
    JUMP = auto()       # PC <- l
    JZ = auto()         # if S[0] .eq 0: PC <- l
    JN = auto()         # if S[0] .lt 0: PC <- l
    RETURN = auto()     # PC <- pop
    END = auto()        # halt

    # I/O
    OUTC = auto()       # S[0] -> chr -> out
    OUTN = auto()       # S[0] -> dec -> out
    INC = auto()        # in -> ord -> H[S[0]]
    INN = auto()        # in -> int -> H[S[0]]

    @property
    def operand(self) -> Operand:
        return OPERANDS.get(self, Operand.NONE)


OPERANDS = {
    Opcode.PUSH: Operand.NUMBER,
    Opcode.COPY: Operand.NUMBER,
    Opcode.SLIDE: Operand.NUMBER,
    Opcode.MARK: Operand.LABEL,
    Opcode.CALL: Operand.LABEL,
    Opcode.JUMP: Operand.LABEL,
    Opcode.JZ: Operand.LABEL,
    Opcode.JN: Operand.LABEL,
}

IMP_PATTERNS = {
    S: Imp.STACK,
    T + S: Imp.ARITHMETIC,
    T + T: Imp.HEAP,
    L: Imp.FLOW,
    T + L: Imp.IO,
}

COMMAND_PATTERNS = {
    Imp.STACK: {
        S: Opcode.PUSH,
        L + S: Opcode.DUP,
        T + S: Opcode.COPY,
        L + T: Opcode.SWAP,
        L + L: Opcode.DISCARD,
        T + L: Opcode.SLIDE,
    },
    Imp.ARITHMETIC: {
        S + S: Opcode.ADD,
        S + T: Opcode.SUB,
        S + L: Opcode.MUL,
        T + S: Opcode.DIV,
        T + T: Opcode.MOD,
    },
    Imp.HEAP: {
        S: Opcode.STORE,
        T: Opcode.RETRIEVE,
    },
    Imp.FLOW: {
        S + S: Opcode.MARK,
        S + T: Opcode.CALL,
        S + L: Opcode.JUMP,
        T + S: Opcode.JZ,
        T + T: Opcode.JN,
        T + L: Opcode.RETURN,
        L + L: Opcode.END,
    },
    Imp.IO: {
        S + S: Opcode.OUTC,
        S + T: Opcode.OUTN,
        T + S: Opcode.INC,
        T + T: Opcode.INN,
    },
}

# Opcode -> full character pattern (IMP + command)
ENCODINGS = {
    opcode: imp_chars + cmd_chars
    for imp_chars, imp in IMP_PATTERNS.items()
    for cmd_chars, opcode in COMMAND_PATTERNS[imp].items()
}


@dataclass(frozen=True)
class Instruction:
    opcode: Opcode
    operand: int | None = None

    def __str__(self) -> str:
        if self.operand is None:
            return self.opcode.name

        return f'{self.opcode.name} {self.operand}'


@dataclass
class Program:
    instructions: list[Instruction] = field(default_factory=list)
    labels: dict[int, int] = field(default_factory=dict)   # Label -> instruction index

    def __len__(self) -> int:
        return len(self.instructions)

    def __getitem__(self, index: int) -> Instruction:
        return self.instructions[index]

    def append(self, instruction: Instruction):
        if instruction.opcode == Opcode.MARK:
            assert instruction.operand is not None
            self.labels[instruction.operand] = len(self.instructions)

        self.instructions.append(instruction)


def label_bits(label: int) -> str:
    ''' Bit string of a label value, without the leading sentinel bit '''
    return format(label, 'b')[1:]


def label_from_bits(bits: str) -> int:
    return (LABEL_SENTINEL << len(bits)) | int(bits or '0', 2)
