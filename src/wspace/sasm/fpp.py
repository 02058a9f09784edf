import logging as lg
from typing import Any, List, Tuple

from wspace.common.ops import Opcode
from wspace.common.errors import AssemblyError

Tokens = List[Any]
Arg = int | str | None


class FPP:
    ''' First pass processor '''
    cmd_list: List[Tuple[Opcode, Arg]]
    label_names: List[str]   # In order of first appearance
    marked: set[str]

    def __init__(self):
        self.cmd_list = list()
        self.label_names = list()
        self.marked = set()

    def set_operand(self, value: Arg):
        opcode, _ = self.cmd_list[-1]
        self.cmd_list[-1] = (opcode, value)

    def use_label(self, name: str):
        if name not in self.label_names:
            self.label_names.append(name)

    # Handlers
    def issue_op(self, op: Opcode):
        lg.debug(f'Issuing command {op.name}')
        self.cmd_list.append((op, None))

    def on_number(self, tokens: Tokens):
        self.set_operand(int(tokens[0]))

    def on_char(self, tokens: Tokens):
        text = tokens[0]

        if len(text) != 1:
            raise AssemblyError(f'Character literal {text!r} is not a single character')

        self.set_operand(ord(text))

    def on_label(self, tokens: Tokens):
        name = tokens[0]

        if name in self.marked:
            lg.warning(f'Label {name} is marked more than once, the last mark wins')

        lg.debug(f'Label {name} @ #{len(self.cmd_list)}')
        self.use_label(name)
        self.marked.add(name)
        self.cmd_list.append((Opcode.MARK, name))

    def on_ref(self, tokens: Tokens):
        name = tokens[0]
        lg.debug(f'Ref {name}')
        self.use_label(name)
        self.set_operand(name)

    def on_fail(self, rest: Tokens):
        raise AssemblyError(f'Unknown command {rest[0]!r}')
