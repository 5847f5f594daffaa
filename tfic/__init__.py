"""TFI to JavaScript compiler."""

__version__ = "1.0.0"

from .compiler import (
    CompilationOptions,
    CompilationResult,
    CompilationStats,
    compile,
    compile_with_details,
    compile_with_options,
    get_compilation_stats,
)
from .errors import CompilationError
from .parser import parse_program
from .validator import validate_program, validate_program_detailed

__all__ = [
    "CompilationError",
    "CompilationOptions",
    "CompilationResult",
    "CompilationStats",
    "compile",
    "compile_with_details",
    "compile_with_options",
    "get_compilation_stats",
    "parse_program",
    "validate_program",
    "validate_program_detailed",
]
