SPACE = ' '
TAB = '\t'
LF = '\n'
CR = '\r'

SIGNIFICANT = frozenset([SPACE, TAB, LF, CR])

LABEL_SENTINEL = 1      # Leading bit prepended to every label's bit string

SOURCE_CHUNK_SIZE = 0x4000
