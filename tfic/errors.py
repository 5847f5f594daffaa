"""Error taxonomy shared by every compiler stage."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class LexErrorKind(Enum):
    UNEXPECTED_CHARACTER = "UnexpectedCharacter"
    UNTERMINATED_STRING = "UnterminatedString"
    INTEGER_OVERFLOW = "IntegerOverflow"


class ValidationErrorKind(Enum):
    EMPTY_PRINT_STATEMENT = "EmptyPrintStatement"
    EMPTY_IDENTIFIER = "EmptyIdentifier"
    EMPTY_BLOCK = "EmptyBlock"
    DUPLICATE_VARIABLE = "DuplicateVariable"
    UNDEFINED_VARIABLE = "UndefinedVariable"
    INVALID_EXPRESSION = "InvalidExpression"


class TfiError(Exception):
    """Base class for all compiler errors surfaced to users."""

    code: Optional[str] = None
    hint: Optional[str] = None

    def __init__(self, message, *, line=None, column=None, code=None, hint=None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        if code is not None:
            self.code = code
        if hint is not None:
            self.hint = hint

    def location(self):
        if self.line is not None and self.column is not None:
            return f"{self.line}:{self.column}"
        if self.line is not None:
            return f"line {self.line}"
        return None

    def format(self):
        text = self.message
        meta = [part for part in (self.location(), self.code) if part]
        if meta:
            text += f" ({'; '.join(meta)})"
        if self.hint:
            text += f" Hint: {self.hint}"
        return text

    def __str__(self):
        return self.format()


class LexError(TfiError):
    """Raised when the source text cannot be tokenized."""

    def __init__(self, kind, message, *, char=None, offset=None, line=None, column=None):
        hints = {
            LexErrorKind.UNEXPECTED_CHARACTER: "Remove the character or move it inside a string literal.",
            LexErrorKind.UNTERMINATED_STRING: 'Close the string with a matching " on the same line.',
            LexErrorKind.INTEGER_OVERFLOW: "Number literals must fit in a signed 32-bit integer.",
        }
        super().__init__(message, line=line, column=column, code=kind.value, hint=hints[kind])
        self.kind = kind
        self.char = char
        self.offset = offset


class TfiSyntaxError(TfiError):
    """Raised when the token stream does not match the grammar."""

    def __init__(self, message, *, line, column, expected, snippet="", hint=None):
        super().__init__(message, line=line, column=column, code="SyntaxError", hint=hint)
        self.expected = expected
        self.snippet = snippet


class ValidationError(TfiError):
    """A semantic violation found while walking the AST.

    Validation errors are returned rather than raised by the validator; the
    compiler raises them wrapped in a CompilationError.
    """

    def __init__(self, kind, message, *, statement, line=None, name=None, original_line=None, hint=None):
        super().__init__(message, line=line, code=kind.value, hint=hint)
        self.kind = kind
        self.statement = statement
        self.name = name
        self.original_line = original_line

    def __eq__(self, other):
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (self.kind, self.statement, self.name, self.original_line) == (
            other.kind, other.statement, other.name, other.original_line)

    def __hash__(self):
        return hash((self.kind, self.statement, self.name, self.original_line))

    def __repr__(self):
        return f"ValidationError({self.kind.value}, statement={self.statement}, name={self.name!r})"


class GenerationError(TfiError):
    """Raised when the generator meets a node it has no template for."""


class CompilationError(TfiError):
    """Uniform error raised by the compiler entry points.

    `cause` keeps the original stage error so callers can still inspect the
    structured details.
    """

    headers = {
        "lex": "Lexical Error",
        "parse": "Parse Error",
        "validate": "Validation Error",
        "generate": "Generation Error",
    }

    def __init__(self, stage, cause, *, source=None):
        super().__init__(cause.message, line=cause.line, column=cause.column,
                         code=cause.code, hint=cause.hint)
        self.stage = stage
        self.cause = cause
        self.source_lines = source.split('\n') if source else []

    def _snippet(self):
        snippet = getattr(self.cause, "snippet", None)
        if not snippet and self.line is not None and 1 <= self.line <= len(self.source_lines):
            snippet = self.source_lines[self.line - 1]
        return snippet

    def render(self):
        header = self.headers.get(self.stage, "Compilation Error")
        if self.line is not None and self.column is not None:
            header += f" at line {self.line}, column {self.column}"
        elif self.line is not None:
            header += f" at line {self.line}"
        elif isinstance(self.cause, ValidationError):
            header += f" at statement {self.cause.statement}"
        lines = [header, f"   {self.message}"]
        snippet = self._snippet()
        if snippet:
            lines.append(f"   {snippet}")
            if self.column is not None:
                lines.append("   " + " " * (self.column - 1) + "^")
        if self.hint:
            lines.append(f"   Suggestion: {self.hint}")
        return "\n".join(lines)

    def __str__(self):
        return self.render()


__all__ = [
    "TfiError",
    "LexError",
    "LexErrorKind",
    "TfiSyntaxError",
    "ValidationError",
    "ValidationErrorKind",
    "GenerationError",
    "CompilationError",
]
