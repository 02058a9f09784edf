import re
import sys
import logging as lg
from dataclasses import dataclass
from typing import Callable, TextIO

from wspace.common.ops import Opcode, Program
from wspace.common.settings import Settings
import wspace.common.errors as e


INT_LINE = re.compile(r'\s*([+-]?[0-9]+)\s*')
SURROGATES = (0xD800, 0xDFFF)   # Not encodable on output


class Halt(Exception):
    pass


@dataclass(frozen=True)
class MachineState:
    pc: int
    stack: tuple[int, ...]
    call_stack: tuple[int, ...]
    heap: dict[int, int]


class VirtualMachine():
    pc: int                 # Program counter
    stack: list[int]        # Operand stack
    call_stack: list[int]   # Return addresses
    heap: dict[int, int]    # Sparse memory

    def __init__(
        self,
        program: Program,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        settings: Settings | None = None
    ):
        self.program = program
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.settings = settings if settings is not None else Settings()

        self.pc = 0
        self.stack = []
        self.call_stack = []
        self.heap = {}

    # - Helpers - #

    def snapshot(self) -> MachineState:
        return MachineState(
            pc=self.pc,
            stack=tuple(self.stack),
            call_stack=tuple(self.call_stack),
            heap=dict(self.heap)
        )

    def debug_dump(self):
        lg.debug(f'PC:{self.pc} S:{self.stack} C:{self.call_stack} H:{self.heap}')

    def push(self, val: int):
        self.stack.append(val)

    def pop(self) -> int:
        if not self.stack:
            raise e.StackUnderflow('Pop from empty stack')

        return self.stack.pop()

    def peek(self, depth: int = 0) -> int:
        if depth < 0 or depth >= len(self.stack):
            raise e.StackIndexError(f'No item at depth {depth} of {len(self.stack)}')

        return self.stack[-1 - depth]

    def arithm_pair(self, op: Callable[[int, int], int]):
        b = self.pop()
        a = self.pop()
        self.push(op(a, b))

    def divisor(self) -> int:
        if not self.stack:
            raise e.StackUnderflow('Pop from empty stack')

        if self.stack[-1] == 0:
            raise e.DivisionByZero('Divisor is zero')

        return self.pop()

    def target(self, label: int) -> int:
        if label not in self.program.labels:
            raise e.UnresolvedLabel(f'Label {label:b} is not marked')

        return self.program.labels[label]

    def read_char(self) -> str:
        c = self.stdin.read(1)

        if not c:
            raise e.InputExhausted('No character to read')

        return c

    def read_number(self) -> int:
        line = self.stdin.readline()

        if not line:
            raise e.InputExhausted('No number to read')

        match = INT_LINE.fullmatch(line)

        if match is None:
            raise e.NumberParseError(f'Not a number: {line.rstrip()!r}')

        return int(match.group(1))

    def write(self, text: str):
        self.stdout.write(text)
        self.stdout.flush()

    # - Stack - #

    def push_op(self, n: int):
        self.push(n)

    def dup(self, _):
        if not self.stack:
            raise e.StackUnderflow('Duplicate on empty stack')

        self.push(self.stack[-1])

    def copy(self, n: int):
        self.push(self.peek(n))

    def swap(self, _):
        if len(self.stack) < 2:
            raise e.StackUnderflow('Swap needs two items')

        self.stack[-1], self.stack[-2] = self.stack[-2], self.stack[-1]

    def discard(self, _):
        self.pop()

    def slide(self, n: int):
        if n < 0:
            raise e.StackIndexError(f'Negative slide {n}')

        if n >= len(self.stack):
            raise e.StackUnderflow(f'Slide {n} below top of {len(self.stack)}')

        top = self.pop()
        del self.stack[len(self.stack) - n:]
        self.push(top)

    # - Arithmetic - #

    def add(self, _):
        self.arithm_pair(lambda a, b: a + b)

    def sub(self, _):
        self.arithm_pair(lambda a, b: a - b)

    def mul(self, _):
        self.arithm_pair(lambda a, b: a * b)

    def div(self, _):
        b = self.divisor()
        self.push(self.pop() // b)

    def mod(self, _):
        b = self.divisor()
        self.push(self.pop() % b)

    # - Heap - #

    def store(self, _):
        val = self.pop()
        addr = self.pop()
        self.heap[addr] = val

    def retrieve(self, _):
        addr = self.pop()

        if addr in self.heap:
            self.push(self.heap[addr])
        elif self.settings.heap_default is not None:
            self.push(self.settings.heap_default)
        else:
            raise e.HeapKeyError(f'Heap address {addr} was never written')

    # - Flow - #

    def mark(self, _):
        pass

    def call(self, label: int):
        addr = self.target(label)
        self.call_stack.append(self.pc)
        self.pc = addr

    def jump(self, label: int):
        self.pc = self.target(label)

    def jz(self, label: int):
        if self.pop() == 0:
            self.jump(label)

    def jn(self, label: int):
        if self.pop() < 0:
            self.jump(label)

    def ret(self, _):
        if not self.call_stack:
            raise e.CallStackUnderflow('Return outside of a subroutine')

        self.pc = self.call_stack.pop()

    def end(self, _):
        raise Halt()

    # - I/O - #

    def outc(self, _):
        val = self.pop()

        try:
            c = chr(val)
        except (ValueError, OverflowError):
            raise e.InvalidCharacter(f'{val} is not a code point')

        if SURROGATES[0] <= val <= SURROGATES[1]:
            raise e.InvalidCharacter(f'{val} is a surrogate code point')

        self.write(c)

    def outn(self, _):
        self.write(str(self.pop()))

    def inc(self, _):
        c = self.read_char()
        self.heap[self.pop()] = ord(c)

    def inn(self, _):
        val = self.read_number()
        self.heap[self.pop()] = val

    HANDLERS = {
        Opcode.PUSH: push_op,
        Opcode.DUP: dup,
        Opcode.COPY: copy,
        Opcode.SWAP: swap,
        Opcode.DISCARD: discard,
        Opcode.SLIDE: slide,

        Opcode.ADD: add,
        Opcode.SUB: sub,
        Opcode.MUL: mul,
        Opcode.DIV: div,
        Opcode.MOD: mod,

        Opcode.STORE: store,
        Opcode.RETRIEVE: retrieve,

        Opcode.MARK: mark,
        Opcode.CALL: call,
        Opcode.JUMP: jump,
        Opcode.JZ: jz,
        Opcode.JN: jn,
        Opcode.RETURN: ret,
        Opcode.END: end,

        Opcode.OUTC: outc,
        Opcode.OUTN: outn,
        Opcode.INC: inc,
        Opcode.INN: inn
    }

    # -- Implementation -- #

    def running(self) -> bool:
        return self.pc < len(self.program)

    def exec_next(self):
        pc = self.pc
        instruction = self.program[pc]
        handler = self.HANDLERS[instruction.opcode]

        # Flow handlers overwrite the advanced counter
        self.pc += 1

        try:
            handler(self, instruction.operand)
        except e.ExecutionError as error:
            raise error.locate(pc, instruction)

        if self.settings.trace:
            lg.debug(f'#{pc} {instruction}')
            self.debug_dump()

    def run(self):
        try:
            while self.running():
                self.exec_next()

            lg.debug('Execution ran off the end of the program')

        except Halt:
            lg.debug(f'Execution halted at #{self.pc - 1}')
