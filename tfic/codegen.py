from .errors import GenerationError
from .nodes import (
    BinaryOp, ConstDecl, For, Identifier, If, LetDecl, NumberLiteral, Print,
    StringLiteral, While,
)

INDENT = '    '


class CodeGen:
    """Emits JavaScript for a validated statement list.

    Blocks are emitted flat, one statement per line; re-indenting by brace
    depth is left to the compiler's formatting pass.
    """

    def generate(self, ast):
        return '\n'.join(self.generate_statement(stmt) for stmt in ast)

    def generate_statement(self, stmt, indent_level=0):
        code = self._statement(stmt)
        if indent_level:
            prefix = INDENT * indent_level
            code = '\n'.join(prefix + line for line in code.split('\n'))
        return code

    def _block(self, body):
        return '\n'.join(self._statement(s) for s in body)

    def _statement(self, stmt):
        if isinstance(stmt, Print):
            args = ', '.join(self.generate_expression(e) for e in stmt.expressions)
            return f"console.log({args});"
        if isinstance(stmt, ConstDecl):
            return f"const {stmt.name} = {self.generate_expression(stmt.value)};"
        if isinstance(stmt, LetDecl):
            return f"let {stmt.name} = {self.generate_expression(stmt.value)};"
        if isinstance(stmt, If):
            code = f"if ({self.generate_expression(stmt.condition)}) {{\n{self._block(stmt.then_block)}\n}}"
            if stmt.else_block is not None:
                code += f" else {{\n{self._block(stmt.else_block)}\n}}"
            return code
        if isinstance(stmt, While):
            return f"while ({self.generate_expression(stmt.condition)}) {{\n{self._block(stmt.body)}\n}}"
        if isinstance(stmt, For):
            # The update is evaluated and discarded each iteration.
            init = self._statement(stmt.init).rstrip(';')
            cond = self.generate_expression(stmt.condition)
            update = self.generate_expression(stmt.update)
            return f"for ({init}; {cond}; {update}) {{\n{self._block(stmt.body)}\n}}"
        raise GenerationError(f"no template for statement {stmt!r}")

    def generate_expression(self, expr):
        if isinstance(expr, NumberLiteral):
            return str(expr.value)
        if isinstance(expr, Identifier):
            return expr.name
        if isinstance(expr, StringLiteral):
            return f'"{expr.text}"'
        if isinstance(expr, BinaryOp):
            return f"({self.generate_expression(expr.left)} {expr.operator} {self.generate_expression(expr.right)})"
        raise GenerationError(f"no template for expression {expr!r}")
