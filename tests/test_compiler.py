from __future__ import annotations

import pytest

from tfic import (
    CompilationError,
    CompilationOptions,
    compile,
    compile_with_details,
    compile_with_options,
    get_compilation_stats,
)
from tfic.compiler import add_source_comments, collect_warnings, format_js_code, minify_js_code
from tfic.errors import (
    LexError, LexErrorKind, TfiSyntaxError, ValidationError, ValidationErrorKind as Kind,
)
from tfic.parser import parse_program

BASIC = """
    bahubali("Hello, world!");
    rrr x = 10;
    pushpa y = 5;
    bahubali("The value of x is", x);
    bahubali(x + y);
"""


def test_basic_compilation() -> None:
    js_code = compile(BASIC)
    assert 'console.log("Hello, world!");' in js_code
    assert "const x = 10;" in js_code
    assert "let y = 5;" in js_code
    assert "console.log((x + y));" in js_code


def test_scenario_declaration_then_print() -> None:
    assert compile("rrr x = 10; bahubali(x);") == "const x = 10;\nconsole.log(x);"


def test_compile_is_deterministic() -> None:
    source = 'rrr a = 1; pushpa b = "two"; bahubali(a, b);'
    assert compile(source) == compile(source)


def test_whitespace_and_comments_do_not_change_output() -> None:
    compact = 'rrr x=1;magadheera(x>0){bahubali("yes");}'
    spaced = """
        // leading comment
        rrr   x = 1;   // trailing comment
        magadheera ( x > 0 )
        {
            bahubali( "yes" ) ;
        }
    """
    assert compile(compact) == compile(spaced)


def test_control_structures() -> None:
    source = """
        rrr x = 15;
        magadheera(x > 10) {
            bahubali("big");
        }
        karthikeya {
            bahubali("small");
        }
        pushpa i = 0;
        pokiri(i < 3) {
            bahubali(i);
        }
        eega(rrr k = 0; k < 5; k + 1) {
            bahubali(k);
        }
    """
    js_code = compile(source)
    assert "if ((x > 10)) {" in js_code
    assert "} else {" in js_code
    assert "while ((i < 3)) {" in js_code
    assert "for (const k = 0; (k < 5); (k + 1)) {" in js_code


def test_empty_print_fails_validation() -> None:
    with pytest.raises(CompilationError) as info:
        compile("bahubali();")
    error = info.value
    assert error.stage == "validate"
    assert isinstance(error.cause, ValidationError)
    assert error.cause.kind is Kind.EMPTY_PRINT_STATEMENT
    assert error.cause.statement == 1


def test_empty_if_block_fails_validation() -> None:
    with pytest.raises(CompilationError) as info:
        compile("magadheera(x > 5) { }")
    assert info.value.cause.kind is Kind.EMPTY_BLOCK


def test_duplicate_variable_fails_validation() -> None:
    with pytest.raises(CompilationError) as info:
        compile("rrr x = 10; rrr x = 20;")
    cause = info.value.cause
    assert cause.kind is Kind.DUPLICATE_VARIABLE
    assert (cause.name, cause.original_line) == ("x", 1)


def test_missing_terminator_fails_parsing() -> None:
    with pytest.raises(CompilationError) as info:
        compile("rrr x = 42")
    error = info.value
    assert error.stage == "parse"
    assert isinstance(error.cause, TfiSyntaxError)
    assert (error.line, error.column) == (1, 11)


def test_lex_errors_are_wrapped() -> None:
    with pytest.raises(CompilationError) as info:
        compile('bahubali("open);')
    assert info.value.stage == "lex"
    assert isinstance(info.value.cause, LexError)
    assert info.value.cause.kind is LexErrorKind.UNTERMINATED_STRING
    assert info.value.__cause__ is info.value.cause


def test_rendered_syntax_error() -> None:
    with pytest.raises(CompilationError) as info:
        compile("rrr x = 42")
    rendered = info.value.render()
    assert rendered.splitlines() == [
        "Parse Error at line 1, column 11",
        "   Expected ';' in rrr declaration, found end of input",
        "   rrr x = 42",
        "             ^",
        "   Suggestion: Statements must end with ';'.",
    ]


def test_rendered_validation_error() -> None:
    with pytest.raises(CompilationError) as info:
        compile("rrr x = 1;\nbahubali(y);")
    rendered = str(info.value)
    assert rendered.startswith("Validation Error at line 2")
    assert "Variable 'y' is not defined" in rendered
    assert "   bahubali(y);" in rendered
    assert "Suggestion: Declare the variable first" in rendered


def test_rendered_validation_error_without_line() -> None:
    error = CompilationError("validate", ValidationError(
        Kind.EMPTY_PRINT_STATEMENT, "bahubali() requires at least one argument", statement=3))
    assert error.render().startswith("Validation Error at statement 3")


def test_compilation_with_details() -> None:
    result = compile_with_details('bahubali("Hello");\nrrr x = 42;\nbahubali(x);')
    assert result.statement_count == 3
    assert not result.has_warnings()
    assert "console.log" in result.js_code


def test_unused_variable_warning() -> None:
    result = compile_with_details("rrr x = 42; pushpa y = x;")
    assert result.warnings == ["Statement 2: Variable 'y' is declared but never read"]
    assert result.warning_count() == 1


def test_unused_variable_in_block() -> None:
    result = compile_with_details("pokiri(1 < 2) { rrr tmp = 1; bahubali(2); }")
    assert result.warnings == ["Statement 1: Variable 'tmp' is declared but never read"]


def test_shadowed_const_read_before_widening() -> None:
    result = compile_with_details("rrr x = 1; pushpa x = x + 1; bahubali(x);")
    assert not result.has_warnings()


def test_structural_warnings() -> None:
    prints = "bahubali(1);" * 11
    source = f"bahubali(1, 2, 3, 4, 5, 6); pokiri(1 < 2) {{ {prints} }}"
    warnings = collect_warnings(parse_program(source))
    assert warnings == [
        "Statement 1: Print statement has 6 arguments, consider breaking it up",
        "Statement 2: While loop has 11 statements, consider refactoring",
    ]


def test_empty_program_warns() -> None:
    result = compile_with_details("// nothing here\n")
    assert result.js_code == ""
    assert result.statement_count == 0
    assert result.warnings == ["Program contains no statements"]


def test_compilation_with_options() -> None:
    source = 'rrr x = 42;\nmagadheera(x > 1) {\n    bahubali("Hello", x);\n}'
    options = CompilationOptions().with_formatting().with_comments()
    js_code = compile_with_options(source, options).js_code
    assert js_code.startswith("// Generated from TFI source code\n// Original source:\n")
    assert '// 3: bahubali("Hello", x);' in js_code
    assert 'if ((x > 1)) {\n    console.log("Hello", x);\n}\n' in js_code


def test_strict_mode_option() -> None:
    js_code = compile_with_options("bahubali(1);", CompilationOptions(strict_mode=True)).js_code
    assert js_code == '"use strict";\nconsole.log(1);'


def test_minify_option() -> None:
    source = "rrr x = 1; magadheera(x > 0) { bahubali(x); } karthikeya { bahubali(0); }"
    options = CompilationOptions().with_minification().with_comments()
    js_code = compile_with_options(source, options).js_code
    assert js_code == "const x = 1;if ((x > 0)) {console.log(x);} else {console.log(0);}"


def test_options_do_not_change_validation() -> None:
    options = CompilationOptions(format_output=True, add_comments=True, strict_mode=True, minify=True)
    with pytest.raises(CompilationError):
        compile_with_options("bahubali();", options)


def test_options_builder() -> None:
    options = CompilationOptions().with_formatting().with_comments().with_strict_mode()
    assert options.format_output
    assert options.add_comments
    assert options.strict_mode
    assert not options.minify
    assert CompilationOptions() == CompilationOptions(False, False, False, False)


def test_format_js_code() -> None:
    js_code = "while ((i < 3)) {\nif (1) {\nconsole.log(i);\n}\n}"
    assert format_js_code(js_code) == (
        "while ((i < 3)) {\n    if (1) {\n        console.log(i);\n    }\n}\n"
    )


def test_add_source_comments() -> None:
    commented = add_source_comments("console.log('hello');", 'bahubali("hello");\n\n')
    assert commented == (
        "// Generated from TFI source code\n"
        "// Original source:\n"
        '// 1: bahubali("hello");\n'
        "\n"
        "console.log('hello');"
    )


def test_minify_js_code() -> None:
    assert minify_js_code("if (1) {\n    console.log(1);\n}") == "if (1) {console.log(1);}"


def test_compilation_stats() -> None:
    source = """
        bahubali("Hello");
        rrr x = 10;
        pushpa y = 5;
        magadheera(x > 5) {
            bahubali("x is greater than 5");
        }
        pokiri(y < 10) {
            bahubali(y);
            pushpa z = y + 1;
        }
    """
    stats = get_compilation_stats(source)
    assert stats.total_statements == 5
    assert stats.print_statements == 3
    assert stats.const_declarations == 1
    assert stats.let_declarations == 2
    assert stats.if_statements == 1
    assert stats.while_loops == 1
    assert stats.for_loops == 0
    summary = stats.summary()
    assert "Total statements: 5" in summary
    assert "Print statements: 3" in summary
    assert "Variable declarations: 3" in summary
    assert "Control structures: 2" in summary


def test_stats_only_parse() -> None:
    stats = get_compilation_stats("bahubali(); rrr x = 1; rrr x = 2;")
    assert stats.total_statements == 3
    with pytest.raises(CompilationError):
        get_compilation_stats("rrr x = ")


def test_stage_errors_format_location_and_hint() -> None:
    with pytest.raises(LexError) as info:
        parse_program("rrr x = 1 @ 2;")
    assert str(info.value) == (
        "'@' unexpected on line 1 (1:11; UnexpectedCharacter) "
        "Hint: Remove the character or move it inside a string literal."
    )
