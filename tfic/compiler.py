import logging
from dataclasses import dataclass, field, replace
from typing import List

from .codegen import CodeGen
from .errors import CompilationError, GenerationError, LexError, TfiSyntaxError
from .lexer import lex
from .nodes import (
    BinaryOp, ConstDecl, For, Identifier, If, LetDecl, Print, While,
    child_blocks,
)
from .parser import Parser
from .validator import validate_program

logger = logging.getLogger(__name__)

MAX_PRINT_ARGS = 5
MAX_LOOP_STATEMENTS = 10
INDENT_SIZE = 4
STRICT_DIRECTIVE = '"use strict";'


@dataclass
class CompilationResult:
    js_code: str
    statement_count: int
    warnings: List[str] = field(default_factory=list)

    def add_warning(self, warning):
        self.warnings.append(warning)

    def has_warnings(self):
        return bool(self.warnings)

    def warning_count(self):
        return len(self.warnings)


@dataclass(frozen=True)
class CompilationOptions:
    """Text post-passes applied to the generated JavaScript.

    None of these change parsing or validation.
    """

    format_output: bool = False
    add_comments: bool = False
    strict_mode: bool = False
    minify: bool = False

    def with_formatting(self):
        return replace(self, format_output=True)

    def with_comments(self):
        return replace(self, add_comments=True)

    def with_strict_mode(self):
        return replace(self, strict_mode=True)

    def with_minification(self):
        return replace(self, minify=True)


@dataclass
class CompilationStats:
    total_statements: int = 0
    print_statements: int = 0
    const_declarations: int = 0
    let_declarations: int = 0
    if_statements: int = 0
    while_loops: int = 0
    for_loops: int = 0

    def total_declarations(self):
        return self.const_declarations + self.let_declarations

    def total_control_structures(self):
        return self.if_statements + self.while_loops + self.for_loops

    def summary(self):
        return (
            "Compilation Summary:\n"
            f" - Total statements: {self.total_statements}\n"
            f" - Print statements: {self.print_statements}\n"
            f" - Variable declarations: {self.total_declarations()}\n"
            f" - Control structures: {self.total_control_structures()}"
        )


def _parse(source):
    try:
        tokens = lex(source)
    except LexError as e:
        raise CompilationError("lex", e, source=source) from e
    logger.debug("lexed %d tokens", len(tokens) - 1)
    try:
        ast = Parser(tokens, source).parse_program()
    except TfiSyntaxError as e:
        raise CompilationError("parse", e, source=source) from e
    logger.debug("parsed %d top-level statements", len(ast))
    return ast


def compile_with_details(source):
    """Compile TFI source to JavaScript, with warnings and statement count.

    Raises CompilationError wrapping the first stage error.
    """
    ast = _parse(source)

    error = validate_program(ast)
    if error is not None:
        raise CompilationError("validate", error, source=source)
    logger.debug("validation passed")

    try:
        js_code = CodeGen().generate(ast)
    except GenerationError as e:
        raise CompilationError("generate", e, source=source) from e

    result = CompilationResult(js_code, len(ast))
    for warning in collect_warnings(ast):
        result.add_warning(warning)
    logger.debug("generated %d bytes with %d warning(s)", len(js_code), result.warning_count())
    return result


def compile(source):
    """Compile TFI source to JavaScript text."""
    return compile_with_details(source).js_code


def compile_with_options(source, options):
    result = compile_with_details(source)
    code = result.js_code
    if options.minify:
        code = minify_js_code(code)
        if options.strict_mode:
            code = STRICT_DIRECTIVE + code
        result.js_code = code
        return result
    if options.format_output:
        code = format_js_code(code)
    if options.strict_mode:
        code = f"{STRICT_DIRECTIVE}\n{code}"
    if options.add_comments:
        code = add_source_comments(code, source)
    result.js_code = code
    return result


def format_js_code(js_code):
    """Re-indent by brace depth."""
    formatted = []
    indent_level = 0
    for line in js_code.split('\n'):
        trimmed = line.strip()
        if not trimmed:
            formatted.append('')
            continue
        if trimmed.startswith('}'):
            indent_level = max(indent_level - 1, 0)
        formatted.append(' ' * (indent_level * INDENT_SIZE) + trimmed)
        if trimmed.endswith('{'):
            indent_level += 1
    return '\n'.join(formatted) + '\n'


def add_source_comments(js_code, source):
    lines = ["// Generated from TFI source code", "// Original source:"]
    for i, line in enumerate(source.split('\n'), 1):
        if line.strip():
            lines.append(f"// {i}: {line.strip()}")
    lines.append("")
    return '\n'.join(lines) + '\n' + js_code


def minify_js_code(js_code):
    return ''.join(line.strip() for line in js_code.split('\n'))


class _UsageScan:
    """Finds declarations that are never read before their scope closes."""

    def __init__(self):
        self.scopes = [{}]
        self.unread = []

    def _close(self, scope):
        for name, (statement, read) in scope.items():
            if not read:
                self.unread.append((statement, name))

    def declare(self, name, statement):
        scope = self.scopes[-1]
        if name in scope:
            self._close({name: scope[name]})
        scope[name] = (statement, False)

    def read(self, expr):
        if isinstance(expr, Identifier):
            for scope in reversed(self.scopes):
                if expr.name in scope:
                    scope[expr.name] = (scope[expr.name][0], True)
                    return
        elif isinstance(expr, BinaryOp):
            self.read(expr.left)
            self.read(expr.right)

    def block(self, body, statement):
        self.scopes.append({})
        for stmt in body:
            self.statement(stmt, statement)
        self._close(self.scopes.pop())

    def statement(self, stmt, statement):
        if isinstance(stmt, Print):
            for expr in stmt.expressions:
                self.read(expr)
        elif isinstance(stmt, (ConstDecl, LetDecl)):
            self.read(stmt.value)
            self.declare(stmt.name, statement)
        elif isinstance(stmt, If):
            self.read(stmt.condition)
            for body in child_blocks(stmt):
                self.block(body, statement)
        elif isinstance(stmt, While):
            self.read(stmt.condition)
            self.block(stmt.body, statement)
        elif isinstance(stmt, For):
            self.scopes.append({})
            self.statement(stmt.init, statement)
            self.read(stmt.condition)
            self.read(stmt.update)
            self.block(stmt.body, statement)
            self._close(self.scopes.pop())

    def run(self, ast):
        for i, stmt in enumerate(ast, 1):
            self.statement(stmt, i)
        self._close(self.scopes[0])
        return sorted(self.unread)


def collect_warnings(ast):
    """Advisory warnings for a validated program."""
    warnings = []
    if not ast:
        warnings.append("Program contains no statements")

    def visit(stmt, i):
        if isinstance(stmt, Print) and len(stmt.expressions) > MAX_PRINT_ARGS:
            warnings.append(f"Statement {i}: Print statement has {len(stmt.expressions)} arguments, "
                            "consider breaking it up")
        elif isinstance(stmt, (While, For)) and len(stmt.body) > MAX_LOOP_STATEMENTS:
            loop = "While" if isinstance(stmt, While) else "For"
            warnings.append(f"Statement {i}: {loop} loop has {len(stmt.body)} statements, "
                            "consider refactoring")
        for body in child_blocks(stmt):
            for child in body:
                visit(child, i)

    for i, stmt in enumerate(ast, 1):
        visit(stmt, i)
    for i, name in _UsageScan().run(ast):
        warnings.append(f"Statement {i}: Variable '{name}' is declared but never read")
    return warnings


def _count(stmt, stats):
    if isinstance(stmt, Print):
        stats.print_statements += 1
    elif isinstance(stmt, ConstDecl):
        stats.const_declarations += 1
    elif isinstance(stmt, LetDecl):
        stats.let_declarations += 1
    elif isinstance(stmt, If):
        stats.if_statements += 1
    elif isinstance(stmt, While):
        stats.while_loops += 1
    elif isinstance(stmt, For):
        stats.for_loops += 1
    for body in child_blocks(stmt):
        for child in body:
            _count(child, stats)


def get_compilation_stats(source):
    """Statement counts for `source`; only lexing and parsing are run."""
    ast = _parse(source)
    stats = CompilationStats(total_statements=len(ast))
    for stmt in ast:
        _count(stmt, stats)
    return stats
