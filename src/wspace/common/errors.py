from wspace.common.ops import Instruction


class WhitespaceError(Exception):
    pass


class DecodeError(WhitespaceError):
    ''' Malformed source; nothing is executed '''
    offset: int     # Byte offset of the offending character
    index: int      # Number of instructions decoded before the failure

    def __init__(self, message: str, offset: int, index: int):
        super().__init__(message)
        self.message = message
        self.offset = offset
        self.index = index

    def __str__(self) -> str:
        return f'{self.message} at byte {self.offset} (instruction #{self.index})'


class ExecutionError(WhitespaceError):
    ''' Fatal run-time failure '''
    pc: int | None = None
    instruction: Instruction | None = None

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__

    def locate(self, pc: int, instruction: Instruction):
        self.pc = pc
        self.instruction = instruction
        return self

    def __str__(self) -> str:
        if self.pc is None:
            return f'{self.kind}: {self.message}'

        return f'{self.kind}: {self.message} at #{self.pc} ({self.instruction})'


class StackUnderflow(ExecutionError):
    pass


class StackIndexError(ExecutionError):
    pass


class HeapKeyError(ExecutionError):
    pass


class CallStackUnderflow(ExecutionError):
    pass


class DivisionByZero(ExecutionError):
    pass


class UnresolvedLabel(ExecutionError):
    pass


class InputExhausted(ExecutionError):
    pass


class NumberParseError(ExecutionError):
    pass


class InvalidCharacter(ExecutionError):
    pass


class AssemblyError(WhitespaceError):
    pass
