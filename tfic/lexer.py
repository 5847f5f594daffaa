import re

from .errors import LexError, LexErrorKind

INT_MAX = 2**31 - 1

KEYWORDS = {
    'rrr': 'CONST',
    'pushpa': 'LET',
    'bahubali': 'PRINT',
    'magadheera': 'IF',
    'karthikeya': 'ELSE',
    'pokiri': 'WHILE',
    'eega': 'FOR',
}

OPERATORS = {
    'PLUS': '+',
    'MINUS': '-',
    'MUL': '*',
    'DIV': '/',
    'GEQ': '>=',
    'LEQ': '<=',
    'EQ': '==',
    'NEQ': '!=',
    'GT': '>',
    'LT': '<',
}

# Printable ASCII allowed between double quotes: everything but " and \.
STRING_CHAR = re.compile(r'[A-Za-z0-9 !#$%&\'()*+,\-./:;<=>?@\[\]^_`{|}~]')


class Token:
    def __init__(self, type, value, line, column, offset=0, length=0):
        self.type = type
        self.value = value
        self.line = line
        self.column = column
        self.offset = offset
        self.length = length

    @property
    def end_column(self):
        return self.column + self.length

    def is_keyword(self):
        return self.type in KEYWORDS.values()

    def is_operator(self):
        return self.type in OPERATORS

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type, self.value) == (other.type, other.value)

    def __hash__(self):
        return hash((self.type, self.value))

    def __repr__(self):
        return f"Token({self.type}, {repr(self.value)})"


def keyword_name(token_type):
    """Source spelling of a keyword token type, or None."""
    for word, kind in KEYWORDS.items():
        if kind == token_type:
            return word
    return None


def lex(code):
    token_specification = [
        ('COMMENT',   r'//[^\n]*'),
        ('NUMBER',    r'[0-9]+'),
        ('ID',        r'[A-Za-z_][A-Za-z0-9_]*'),
        ('STRING',    r'"[^"\n]*"'),
        ('UNTERMINATED', r'"[^"\n]*'),
        ('GEQ',       r'>='),
        ('LEQ',       r'<='),
        ('EQ',        r'=='),
        ('NEQ',       r'!='),
        ('GT',        r'>'),
        ('LT',        r'<'),
        ('ASSIGN',    r'='),
        ('LPAREN',    r'\('),
        ('RPAREN',    r'\)'),
        ('LBRACE',    r'\{'),
        ('RBRACE',    r'\}'),
        ('COMMA',     r','),
        ('SEMI',      r';'),
        ('PLUS',      r'\+'),
        ('MINUS',     r'-'),
        ('MUL',       r'\*'),
        ('DIV',       r'/'),
        ('NEWLINE',   r'\n'),
        ('SKIP',      r'[ \t\r]+'),
        ('MISMATCH',  r'.'),
    ]
    tok_regex = '|'.join('(?P<%s>%s)' % pair for pair in token_specification)
    line_num = 1
    line_start = 0
    tokens = []
    for mo in re.finditer(tok_regex, code):
        kind = mo.lastgroup
        value = mo.group()
        column = mo.start() - line_start + 1
        if kind == 'NEWLINE':
            line_start = mo.end()
            line_num += 1
            continue
        elif kind == 'SKIP' or kind == 'COMMENT':
            continue
        elif kind == 'MISMATCH':
            raise LexError(LexErrorKind.UNEXPECTED_CHARACTER,
                           f'{value!r} unexpected on line {line_num}',
                           char=value, offset=mo.start(), line=line_num, column=column)
        elif kind == 'UNTERMINATED':
            raise LexError(LexErrorKind.UNTERMINATED_STRING,
                           f'unterminated string starting on line {line_num}',
                           char='"', offset=mo.start(), line=line_num, column=column)

        if kind == 'STRING':
            text = value[1:-1]
            for i, ch in enumerate(text):
                if not STRING_CHAR.match(ch):
                    raise LexError(LexErrorKind.UNEXPECTED_CHARACTER,
                                   f'{ch!r} not allowed in string literal on line {line_num}',
                                   char=ch, offset=mo.start() + 1 + i,
                                   line=line_num, column=column + 1 + i)
            tokens.append(Token(kind, text, line_num, column, mo.start(), len(value)))
        elif kind == 'NUMBER':
            number = int(value)
            if number > INT_MAX:
                raise LexError(LexErrorKind.INTEGER_OVERFLOW,
                               f'number {value} does not fit in 32 bits on line {line_num}',
                               offset=mo.start(), line=line_num, column=column)
            tokens.append(Token(kind, number, line_num, column, mo.start(), len(value)))
        elif kind == 'ID':
            tokens.append(Token(KEYWORDS.get(value, 'ID'), value, line_num, column, mo.start(), len(value)))
        else:
            tokens.append(Token(kind, value, line_num, column, mo.start(), len(value)))
    tokens.append(Token('EOF', '', line_num, len(code) - line_start + 1, len(code), 0))
    return tokens
