from dataclasses import dataclass
from enum import Enum

from .errors import ValidationError, ValidationErrorKind as Kind
from .lexer import OPERATORS, keyword_name
from .nodes import (
    BinaryOp, ConstDecl, DECLARATIONS, For, Identifier, If,
    NumberLiteral, Print, StringLiteral, While,
)

KNOWN_OPERATORS = frozenset(OPERATORS.values())


class DeclarationType(Enum):
    CONST = "rrr"
    LET = "pushpa"


@dataclass(frozen=True)
class Binding:
    line: int
    kind: DeclarationType


class ValidationContext:
    """Declared names, one map per open block."""

    def __init__(self):
        self.scopes = [{}]

    def push_scope(self):
        self.scopes.append({})

    def pop_scope(self):
        if len(self.scopes) == 1:
            raise RuntimeError("cannot pop the global validation scope")
        self.scopes.pop()

    def lookup(self, name):
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def is_declared(self, name):
        return self.lookup(name) is not None

    def declared_names(self):
        names = set()
        for scope in self.scopes:
            names.update(scope)
        return names

    def declare(self, name, line, kind, statement=None):
        """Bind `name`, or return the DuplicateVariable error.

        Only a CONST binding may be redeclared, and only as LET.
        """
        existing = self.lookup(name)
        if existing is not None and not (
                existing.kind is DeclarationType.CONST and kind is DeclarationType.LET):
            return make_error(Kind.DUPLICATE_VARIABLE, statement if statement is not None else line,
                              line=line, name=name, original_line=existing.line)
        self.scopes[-1][name] = Binding(line, kind)
        return None


def _message(kind, name=None, construct=None, detail=None):
    if kind is Kind.EMPTY_PRINT_STATEMENT:
        return "bahubali() requires at least one argument"
    if kind is Kind.EMPTY_IDENTIFIER:
        return f"{construct} declaration requires a valid identifier"
    if kind is Kind.EMPTY_BLOCK:
        return f"{construct} block cannot be empty"
    if kind is Kind.DUPLICATE_VARIABLE:
        return f"Variable '{name}' is already declared"
    if kind is Kind.UNDEFINED_VARIABLE:
        return f"Variable '{name}' is not defined"
    return detail


def _suggestion(kind, name=None, construct=None):
    if kind is Kind.EMPTY_PRINT_STATEMENT:
        return 'bahubali("Hello, world!");'
    if kind is Kind.EMPTY_IDENTIFIER:
        return f"{construct} variable_name = value;"
    if kind is Kind.EMPTY_BLOCK:
        return f'{construct} (condition) {{ bahubali("action"); }}'
    if kind is Kind.DUPLICATE_VARIABLE:
        return "Use a different variable name or redeclare with 'pushpa'"
    if kind is Kind.UNDEFINED_VARIABLE:
        return f"Declare the variable first with 'rrr {name} = value;' or 'pushpa {name} = value;'"
    return "Use one of the operators + - * / > < >= <= == !="


def make_error(kind, statement, line=None, name=None, construct=None, original_line=None, detail=None):
    return ValidationError(kind, _message(kind, name, construct, detail),
                           statement=statement, line=line, name=name,
                           original_line=original_line,
                           hint=_suggestion(kind, name, construct))


def validate_expression(expr, statement, context, line=None):
    if isinstance(expr, (NumberLiteral, StringLiteral)):
        return None
    if isinstance(expr, Identifier):
        if not context.is_declared(expr.name):
            return make_error(Kind.UNDEFINED_VARIABLE, statement, line=line, name=expr.name)
        return None
    if isinstance(expr, BinaryOp):
        error = validate_expression(expr.left, statement, context, line)
        if error is None:
            error = validate_expression(expr.right, statement, context, line)
        if error is None and expr.operator not in KNOWN_OPERATORS:
            error = make_error(Kind.INVALID_EXPRESSION, statement, line=line,
                               detail=f"Unknown operator: {expr.operator}")
        return error
    return make_error(Kind.INVALID_EXPRESSION, statement, line=line,
                      detail=f"Unknown expression node: {expr!r}")


def validate_block(body, statement, context, construct, line=None):
    """Validate `body` in its own scope; nothing it declares survives."""
    if not body:
        return make_error(Kind.EMPTY_BLOCK, statement, line=line, construct=construct)
    context.push_scope()
    try:
        for stmt in body:
            error = validate_statement(stmt, statement, context)
            if error is not None:
                return error
        return None
    finally:
        context.pop_scope()


def validate_statement(stmt, statement, context):
    """Return the first ValidationError in `stmt`, or None.

    `statement` is the 1-based index of the enclosing top-level statement.
    """
    line = getattr(stmt, 'line', None)
    if isinstance(stmt, Print):
        if not stmt.expressions:
            return make_error(Kind.EMPTY_PRINT_STATEMENT, statement, line=line)
        for expr in stmt.expressions:
            error = validate_expression(expr, statement, context, line)
            if error is not None:
                return error
        return None
    if isinstance(stmt, DECLARATIONS):
        kind = DeclarationType.CONST if isinstance(stmt, ConstDecl) else DeclarationType.LET
        if not stmt.name:
            return make_error(Kind.EMPTY_IDENTIFIER, statement, line=line, construct=kind.value)
        # The initializer cannot see the name it is about to bind.
        error = validate_expression(stmt.value, statement, context, line)
        if error is not None:
            return error
        return context.declare(stmt.name, line if line is not None else statement, kind, statement)
    if isinstance(stmt, If):
        # Empty bodies are reported before anything inside the statement.
        if not stmt.then_block:
            return make_error(Kind.EMPTY_BLOCK, statement, line=line, construct=keyword_name('IF'))
        if stmt.else_block is not None and not stmt.else_block:
            return make_error(Kind.EMPTY_BLOCK, statement, line=line, construct=keyword_name('ELSE'))
        error = validate_expression(stmt.condition, statement, context, line)
        if error is None:
            error = validate_block(stmt.then_block, statement, context, keyword_name('IF'), line)
        if error is None and stmt.else_block is not None:
            error = validate_block(stmt.else_block, statement, context, keyword_name('ELSE'), line)
        return error
    if isinstance(stmt, While):
        if not stmt.body:
            return make_error(Kind.EMPTY_BLOCK, statement, line=line, construct=keyword_name('WHILE'))
        error = validate_expression(stmt.condition, statement, context, line)
        if error is None:
            error = validate_block(stmt.body, statement, context, keyword_name('WHILE'), line)
        return error
    if isinstance(stmt, For):
        if not isinstance(stmt.init, DECLARATIONS):
            return make_error(Kind.INVALID_EXPRESSION, statement, line=line,
                              detail="eega initializer must be a rrr or pushpa declaration")
        if not stmt.body:
            return make_error(Kind.EMPTY_BLOCK, statement, line=line, construct=keyword_name('FOR'))
        # The loop variable belongs to the loop's own scope.
        context.push_scope()
        try:
            error = validate_statement(stmt.init, statement, context)
            if error is None:
                error = validate_expression(stmt.condition, statement, context, line)
            if error is None:
                error = validate_expression(stmt.update, statement, context, line)
            if error is None:
                error = validate_block(stmt.body, statement, context, keyword_name('FOR'), line)
            return error
        finally:
            context.pop_scope()
    return make_error(Kind.INVALID_EXPRESSION, statement, line=line,
                      detail=f"Unknown statement node: {stmt!r}")


def validate_program(statements):
    """Fail-fast validation: the first error found, or None."""
    context = ValidationContext()
    for i, stmt in enumerate(statements, 1):
        error = validate_statement(stmt, i, context)
        if error is not None:
            return error
    return None


def validate_program_detailed(statements):
    """Every top-level statement's first error, in order."""
    context = ValidationContext()
    errors = []
    for i, stmt in enumerate(statements, 1):
        error = validate_statement(stmt, i, context)
        if error is not None:
            errors.append(error)
    return errors
