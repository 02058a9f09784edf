# type: ignore
''' Mnemonic assembly grammar '''

import pyparsing as pp

from wspace.common.ops import Opcode
from wspace.sasm.fpp import FPP


MNEMONICS = {
    'push': Opcode.PUSH,
    'dup': Opcode.DUP,
    'copy': Opcode.COPY,
    'swap': Opcode.SWAP,
    'discard': Opcode.DISCARD,
    'slide': Opcode.SLIDE,
    'add': Opcode.ADD,
    'sub': Opcode.SUB,
    'mul': Opcode.MUL,
    'div': Opcode.DIV,
    'mod': Opcode.MOD,
    'store': Opcode.STORE,
    'retrieve': Opcode.RETRIEVE,
    'mark': Opcode.MARK,
    'call': Opcode.CALL,
    'jmp': Opcode.JUMP,
    'jz': Opcode.JZ,
    'jn': Opcode.JN,
    'ret': Opcode.RETURN,
    'end': Opcode.END,
    'outc': Opcode.OUTC,
    'outn': Opcode.OUTN,
    'inc': Opcode.INC,
    'inn': Opcode.INN,
}


def g_cmd(literal, op):
    return pp.Keyword(literal).setParseAction(lambda _: (FPP.issue_op, op))


id = pp.Word(pp.alphas + '_', pp.alphanums + '_')
comment = pp.Suppress(pp.Regex(r'//[^\n]*'))

label = (id + pp.Suppress(':')).setParseAction(lambda r: (FPP.on_label, r))
mark_cmd = (pp.Suppress(pp.Keyword('mark')) + id).setParseAction(lambda r: (FPP.on_label, r))

s_dec_const = pp.Regex('[+-]?[0-9]+').setParseAction(lambda r: (FPP.on_number, r))
char_const = pp.QuotedString("'", esc_char='\\').setParseAction(lambda r: (FPP.on_char, r))
number = s_dec_const ^ char_const

ref = id.copy().setParseAction(lambda r: (FPP.on_ref, r))


def g_cmd_n(literal):
    return g_cmd(literal, MNEMONICS[literal]) + number


def g_cmd_l(literal):
    return g_cmd(literal, MNEMONICS[literal]) + ref


# Stack
push_cmd = g_cmd_n('push')
dup_cmd = g_cmd('dup', Opcode.DUP)
copy_cmd = g_cmd_n('copy')
swap_cmd = g_cmd('swap', Opcode.SWAP)
discard_cmd = g_cmd('discard', Opcode.DISCARD)
slide_cmd = g_cmd_n('slide')

# Arithmetic
add_cmd = g_cmd('add', Opcode.ADD)
sub_cmd = g_cmd('sub', Opcode.SUB)
mul_cmd = g_cmd('mul', Opcode.MUL)
div_cmd = g_cmd('div', Opcode.DIV)
mod_cmd = g_cmd('mod', Opcode.MOD)

# Heap
store_cmd = g_cmd('store', Opcode.STORE)
retrieve_cmd = g_cmd('retrieve', Opcode.RETRIEVE)

# Flow
call_cmd = g_cmd_l('call')
jmp_cmd = g_cmd_l('jmp')
jz_cmd = g_cmd_l('jz')
jn_cmd = g_cmd_l('jn')
ret_cmd = g_cmd('ret', Opcode.RETURN)
end_cmd = g_cmd('end', Opcode.END)

# I/O
outc_cmd = g_cmd('outc', Opcode.OUTC)
outn_cmd = g_cmd('outn', Opcode.OUTN)
inc_cmd = g_cmd('inc', Opcode.INC)
inn_cmd = g_cmd('inn', Opcode.INN)

cmd = push_cmd \
    ^ dup_cmd \
    ^ copy_cmd \
    ^ swap_cmd \
    ^ discard_cmd \
    ^ slide_cmd \
    ^ add_cmd \
    ^ sub_cmd \
    ^ mul_cmd \
    ^ div_cmd \
    ^ mod_cmd \
    ^ store_cmd \
    ^ retrieve_cmd \
    ^ mark_cmd \
    ^ call_cmd \
    ^ jmp_cmd \
    ^ jz_cmd \
    ^ jn_cmd \
    ^ ret_cmd \
    ^ end_cmd \
    ^ outc_cmd \
    ^ outn_cmd \
    ^ inc_cmd \
    ^ inn_cmd

# Fail on unknown command
unknown = pp.Regex(r'\S+').setParseAction(lambda r: (FPP.on_fail, r))

statement = (pp.Optional(label) + cmd + pp.ZeroOrMore(comment)) ^ (label + pp.ZeroOrMore(comment))
program = pp.ZeroOrMore(statement ^ comment ^ unknown)
