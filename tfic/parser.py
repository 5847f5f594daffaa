import re

from .errors import TfiSyntaxError
from .lexer import lex, keyword_name
from .nodes import (
    BinaryOp, ConstDecl, DECLARATIONS, For, Identifier, If, LetDecl,
    NumberLiteral, Print, StringLiteral, While,
)

DESCRIPTIONS = {
    'SEMI': "';'",
    'RPAREN': "')'",
    'RBRACE': "'}'",
    'LPAREN': "'('",
    'LBRACE': "'{'",
    'ASSIGN': "'='",
    'COMMA': "','",
    'ID': "an identifier",
}

# Missing closers are reported just past the token they should follow.
TERMINATORS = ('SEMI', 'RPAREN', 'RBRACE')

USAGE = {
    'bahubali': 'bahubali("message");',
    'magadheera': 'magadheera(condition) { ... }',
    'pokiri': 'pokiri(condition) { ... }',
    'eega': 'eega(rrr i = 0; i < 3; i + 1) { ... }',
}

BARE_ASSIGN = re.compile(r'(?<![=!<>])=(?!=)')


def suggest(source_line, expected):
    """Pick one actionable hint for a syntax error on `source_line`."""
    text = source_line.strip()
    if expected == DESCRIPTIONS['SEMI']:
        return "Statements must end with ';'."
    if not text:
        return 'Add a valid TFI statement like bahubali("Hello");'
    words = set(re.findall(r'[A-Za-z_]+', text))
    if BARE_ASSIGN.search(text) and not words & {'rrr', 'pushpa'}:
        return "Variable declarations need 'rrr' (const) or 'pushpa' (let): rrr x = 10;"
    for keyword, usage in USAGE.items():
        if keyword in words and '(' not in text:
            return f"{keyword} statements need parentheses: {usage}"
    if expected == DESCRIPTIONS['RBRACE']:
        return "Close every block with '}'."
    return "Check your syntax and make sure all statements end with ';'."


class Parser:
    def __init__(self, tokens, source=None):
        self.tokens = tokens
        self.pos = 0
        self.source_lines = source.split('\n') if source is not None else []

    def peek(self):
        return self.tokens[self.pos]

    def consume(self, expected_type=None, construct=None):
        tok = self.tokens[self.pos]
        if expected_type and tok.type != expected_type:
            self.error(DESCRIPTIONS.get(expected_type, expected_type), construct,
                       after_previous=expected_type in TERMINATORS)
        self.pos += 1
        return tok

    def _source_line(self, line):
        if 1 <= line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return ""

    def error(self, expected, construct=None, after_previous=False, tok=None):
        tok = tok or self.peek()
        if after_previous and self.pos > 0:
            prev = self.tokens[self.pos - 1]
            line, column = prev.line, prev.end_column
        else:
            line, column = tok.line, tok.column
        found = "end of input" if tok.type == 'EOF' else repr(str(tok.value))
        where = f" in {construct}" if construct else ""
        snippet = self._source_line(line)
        raise TfiSyntaxError(f"Expected {expected}{where}, found {found}",
                             line=line, column=column, expected=expected,
                             snippet=snippet, hint=suggest(snippet, expected))

    def parse_program(self):
        stmts = []
        while self.peek().type != 'EOF':
            stmts.append(self.parse_statement())
        return stmts

    def parse_statement(self):
        kind = self.peek().type
        if kind == 'PRINT':
            return self.parse_print()
        if kind == 'CONST':
            return self.parse_decl(ConstDecl)
        if kind == 'LET':
            return self.parse_decl(LetDecl)
        if kind == 'IF':
            return self.parse_if()
        if kind == 'WHILE':
            return self.parse_while()
        if kind == 'FOR':
            return self.parse_for()
        self.error("a statement")

    def parse_print(self):
        line = self.peek().line
        self.consume('PRINT')
        construct = "bahubali statement"
        self.consume('LPAREN', construct)
        args = []
        if self.peek().type != 'RPAREN':
            while True:
                args.append(self.parse_expr())
                if self.peek().type == 'COMMA':
                    self.consume('COMMA')
                else:
                    break
        self.consume('RPAREN', construct)
        self.consume('SEMI', construct)
        return Print(args, line=line)

    def parse_decl(self, node_class):
        tok = self.consume()
        construct = f"{tok.value} declaration"
        name = self.consume('ID', construct).value
        self.consume('ASSIGN', construct)
        value = self.parse_expr()
        self.consume('SEMI', construct)
        return node_class(name, value, line=tok.line)

    def parse_condition(self, construct):
        self.consume('LPAREN', construct)
        cond = self.parse_expr()
        self.consume('RPAREN', construct)
        return cond

    def parse_block(self, construct):
        self.consume('LBRACE', construct)
        body = []
        while self.peek().type != 'RBRACE':
            if self.peek().type == 'EOF':
                self.error(DESCRIPTIONS['RBRACE'], construct, after_previous=True)
            body.append(self.parse_statement())
        self.consume('RBRACE', construct)
        return body

    def parse_if(self):
        line = self.peek().line
        self.consume('IF')
        cond = self.parse_condition("magadheera statement")
        then_block = self.parse_block("magadheera block")
        else_block = None
        if self.peek().type == 'ELSE':
            self.consume('ELSE')
            else_block = self.parse_block("karthikeya block")
        return If(cond, then_block, else_block, line=line)

    def parse_while(self):
        line = self.peek().line
        self.consume('WHILE')
        cond = self.parse_condition("pokiri statement")
        body = self.parse_block("pokiri block")
        return While(cond, body, line=line)

    def parse_for(self):
        line = self.peek().line
        self.consume('FOR')
        construct = "eega statement"
        self.consume('LPAREN', construct)
        init_tok = self.peek()
        init = self.parse_statement()
        if not isinstance(init, DECLARATIONS):
            self.error(f"'{keyword_name('CONST')}' or '{keyword_name('LET')}' declaration",
                       "eega initializer", tok=init_tok)
        cond = self.parse_expr()
        self.consume('SEMI', construct)
        update = self.parse_expr()
        self.consume('RPAREN', construct)
        body = self.parse_block("eega block")
        return For(init, cond, update, body, line=line)

    def parse_expr(self):
        # Flat precedence: every operator folds left to right.
        left = self.parse_term()
        while self.peek().is_operator():
            op = self.consume().value
            right = self.parse_term()
            left = BinaryOp(left, op, right)
        return left

    def parse_term(self):
        tok = self.peek()
        if tok.type == 'NUMBER':
            self.consume()
            return NumberLiteral(tok.value)
        if tok.type == 'ID':
            self.consume()
            return Identifier(tok.value)
        if tok.type == 'STRING':
            self.consume()
            return StringLiteral(tok.value)
        if tok.type == 'LPAREN':
            self.consume()
            expr = self.parse_expr()
            self.consume('RPAREN', "parenthesized expression")
            return expr
        self.error("an expression")


def parse_program(source):
    """Tokenize and parse `source` into a list of top-level statements."""
    return Parser(lex(source), source).parse_program()
