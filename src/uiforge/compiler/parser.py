"""
Recursive-descent parser for component source.

Accepts the markup-returning subset of JavaScript that generated
components are written in: declarations, closures, conditionals,
destructuring, loops, template literals and JSX. Statements outside the
subset (switch, try blocks, classes) are skipped structurally so that
event handlers using them still parse; reaching one during a render is
an error. Anything else that does not parse is rejected.
"""

import html
import re

from . import nodes as n
from .errors import ParseError

IDENT_RE = re.compile(r"[A-Za-z_$][\w$]*")
JSX_NAME_RE = re.compile(r"[A-Za-z_$][\w$\-]*(?:[.:][A-Za-z_$][\w$\-]*)*")
NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
    r"|(?:\d[\d_]*(?:\.\d[\d_]*)?|\.\d[\d_]*)(?:[eE][+-]?\d+)?"
)

WHITESPACE = " \t\r\n\v\f\ufeff\u00a0\u2028\u2029"

RESERVED = frozenset({
    "break", "case", "catch", "class", "const", "continue", "default", "delete",
    "do", "else", "export", "finally", "for", "function", "if", "import", "in",
    "instanceof", "let", "new", "return", "switch", "throw", "try", "typeof",
    "var", "void", "while",
})

# Statements recognised only so they can be skipped
SKIPPED_KEYWORDS = frozenset({"switch", "try", "class"})

TYPESCRIPT_KEYWORDS = frozenset({"interface", "enum"})

HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

ESCAPES = {
    "n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "v": "\v", "0": "\0",
}

ASSIGN_OPS = ("??=", "||=", "&&=", "+=", "-=", "*=", "/=", "%=", "=")
EQUALITY_OPS = ("===", "!==", "==", "!=")
RELATIONAL_OPS = ("<=", ">=", "<", ">")
ADDITIVE_OPS = ("+", "-")
MULTIPLICATIVE_OPS = ("*", "/", "%")


class Parser:
    """Single-use parser over one source string."""

    def __init__(self, source: str):
        self.src = source
        self.pos = 0
        self.length = len(source)
        # Offsets already known not to start an arrow function
        self._not_arrow: set[int] = set()

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse_program(self) -> n.Program:
        body = []
        while True:
            self._skip_ws()
            if self.pos >= self.length:
                break
            stmt = self._progressing_statement()
            if stmt is not None:
                body.append(stmt)
        return n.Program(tuple(body))

    def parse_expression(self) -> n.Expr:
        expr = self._assignment()
        self._skip_ws()
        if self.pos < self.length:
            raise self._error(f"Unexpected trailing input {self.src[self.pos]!r}")
        return expr

    # ------------------------------------------------------------------
    # Scanning helpers
    # ------------------------------------------------------------------

    def _error(self, message: str) -> ParseError:
        return ParseError(message, self.pos, self.src)

    def _skip_ws(self) -> bool:
        """Skip whitespace and comments; report whether a newline was crossed."""
        newline = False
        src = self.src
        while self.pos < self.length:
            c = src[self.pos]
            if c in WHITESPACE:
                if c == "\n":
                    newline = True
                self.pos += 1
            elif src.startswith("//", self.pos):
                end = src.find("\n", self.pos)
                self.pos = self.length if end == -1 else end
            elif src.startswith("/*", self.pos):
                end = src.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error("Unterminated comment")
                if "\n" in src[self.pos:end]:
                    newline = True
                self.pos = end + 2
            else:
                break
        return newline

    def _peek(self, token: str) -> bool:
        self._skip_ws()
        return self.src.startswith(token, self.pos)

    def _peek_op(self, op: str) -> bool:
        """Match an operator that is not a prefix of a longer one."""
        if not self._peek(op):
            return False
        nxt = self.src[self.pos + len(op):self.pos + len(op) + 1]
        if op in ("=", "==", "!=", "<", ">", "!"):
            return nxt != "=" and not (op == "=" and nxt == ">")
        if op in ("+", "-"):
            return nxt not in (op, "=")
        if op in ("*", "/", "%"):
            return nxt not in ("=", "*")
        if op in ("&&", "||", "??"):
            return nxt != "="
        if op == "?":
            return nxt not in ("?", ".")
        if op == ".":
            return nxt != "."
        return True

    def _eat(self, token: str) -> bool:
        if self._peek(token):
            self.pos += len(token)
            return True
        return False

    def _expect(self, token: str) -> None:
        if not self._eat(token):
            found = self.src[self.pos] if self.pos < self.length else "end of input"
            raise self._error(f"Expected {token!r} but found {found!r}")

    def _peek_word(self) -> str | None:
        self._skip_ws()
        match = IDENT_RE.match(self.src, self.pos)
        return match.group() if match else None

    def _peek_keyword(self, word: str) -> bool:
        return self._peek_word() == word

    def _eat_keyword(self, word: str) -> bool:
        if self._peek_keyword(word):
            self.pos += len(word)
            return True
        return False

    def _identifier(self) -> str:
        word = self._peek_word()
        if word is None:
            raise self._error("Expected identifier")
        self.pos += len(word)
        return word

    def _binding_identifier(self) -> str:
        name = self._identifier()
        if name in RESERVED:
            raise self._error(f"Unexpected keyword {name!r}")
        return name

    def _newline_before(self) -> bool:
        """True if a line break separates the cursor from the previous token."""
        i = self.pos - 1
        while i >= 0 and self.src[i] in WHITESPACE:
            if self.src[i] == "\n":
                return True
            i -= 1
        return False

    def _end_statement(self) -> None:
        """Consume a statement terminator, allowing automatic insertion."""
        self._skip_ws()
        if self._eat(";"):
            return
        if self._newline_before() or self.pos >= self.length or self._peek("}"):
            return
        raise self._error(f"Unexpected {self.src[self.pos]!r}")

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _statement(self) -> n.Stmt | None:
        self._skip_ws()
        start = self.pos
        if self._eat(";"):
            return None
        if self._peek("{"):
            return n.Block(self._block())
        word = self._peek_word()
        if word in ("import", "export"):
            self._skip_statement()
            return n.ModuleDecl(word, start)
        if word in ("const", "let", "var"):
            return self._var_decl()
        if word == "function" or (word == "async" and self._async_function_ahead()):
            self._eat_keyword("async")
            return n.FunctionDecl(self._function(require_name=True))
        if word == "return":
            return self._return()
        if word == "if":
            return self._if()
        if word == "for":
            return self._for()
        if word == "while":
            return self._while()
        if word == "do":
            return self._do_while()
        if word in ("break", "continue"):
            self.pos += len(word)
            self._end_statement()
            return n.Break() if word == "break" else n.Continue()
        if word == "throw":
            self.pos += len(word)
            argument = self._expression()
            self._end_statement()
            return n.Throw(argument)
        if word in TYPESCRIPT_KEYWORDS:
            raise self._error(f"TypeScript {word} declarations are not supported")
        if word in SKIPPED_KEYWORDS:
            self._skip_keyword_statement(word)
            return n.Skipped(word, start)
        expr = self._expression()
        self._end_statement()
        return n.ExprStmt(expr)

    def _progressing_statement(self) -> n.Stmt | None:
        """Parse one statement, refusing input that would not move the cursor."""
        start = self.pos
        stmt = self._statement()
        if self.pos == start:
            raise self._error(f"Unexpected {self.src[self.pos]!r}")
        return stmt

    def _async_function_ahead(self) -> bool:
        saved = self.pos
        self.pos += len("async")
        ahead = self._peek_keyword("function")
        self.pos = saved
        return ahead

    def _block(self) -> tuple[n.Stmt, ...]:
        self._expect("{")
        body = []
        while not self._peek("}"):
            if self.pos >= self.length:
                raise self._error("Unterminated block")
            stmt = self._progressing_statement()
            if stmt is not None:
                body.append(stmt)
        self._expect("}")
        return tuple(body)

    def _var_decl(self) -> n.VarDecl:
        decl = self._var_declarations()
        self._end_statement()
        return decl

    def _var_declarations(self) -> n.VarDecl:
        kind = self._identifier()
        declarations = []
        while True:
            target = self._pattern()
            init = None
            if self._peek_op("="):
                self.pos += 1
                init = self._assignment()
            declarations.append((n.Binding(target), init))
            if not self._eat(","):
                break
        return n.VarDecl(kind, tuple(declarations))

    def _return(self) -> n.Return:
        self.pos += len("return")
        newline = self._skip_ws()
        if newline or self.pos >= self.length or self._peek(";") or self._peek("}"):
            self._eat(";")
            return n.Return(None)
        argument = self._expression()
        self._end_statement()
        return n.Return(argument)

    def _if(self) -> n.If:
        self.pos += len("if")
        self._expect("(")
        test = self._expression()
        self._expect(")")
        consequent = self._statement_or_empty()
        alternate = None
        if self._eat_keyword("else"):
            alternate = self._statement_or_empty()
        return n.If(test, consequent, alternate)

    def _statement_or_empty(self) -> n.Stmt:
        stmt = self._statement()
        return stmt if stmt is not None else n.Block(())

    def _for(self) -> n.Stmt:
        self.pos += len("for")
        if self._peek_keyword("await"):
            raise self._error("'for await' loops are not supported")
        self._expect("(")
        init: n.Stmt | None = None
        word = self._peek_word()
        if word in ("const", "let", "var"):
            saved = self.pos
            self.pos += len(word)
            each = self._for_each_tail(word, n.Binding(self._pattern()))
            if each is not None:
                return each
            self.pos = saved
            init = self._var_declarations()
        elif not self._peek(";"):
            if word is not None and word not in RESERVED:
                saved = self.pos
                self.pos += len(word)
                each = self._for_each_tail(None, n.Identifier(word))
                if each is not None:
                    return each
                self.pos = saved
            init = n.ExprStmt(self._expression())
        self._expect(";")
        test = None if self._peek(";") else self._expression()
        self._expect(";")
        update = None if self._peek(")") else self._expression()
        self._expect(")")
        return n.For(init, test, update, self._statement_or_empty())

    def _for_each_tail(self, declaration: str | None, target: "n.Binding | n.Identifier") -> n.ForEach | None:
        """Finish ``for (x of items)`` / ``for (k in obj)`` once the target is read."""
        for kind in ("of", "in"):
            if self._eat_keyword(kind):
                iterable = self._expression()
                self._expect(")")
                return n.ForEach(kind, declaration, target, iterable, self._statement_or_empty())
        return None

    def _while(self) -> n.While:
        self.pos += len("while")
        self._expect("(")
        test = self._expression()
        self._expect(")")
        return n.While(test, self._statement_or_empty())

    def _do_while(self) -> n.DoWhile:
        self.pos += len("do")
        body = self._statement_or_empty()
        if not self._eat_keyword("while"):
            raise self._error("Expected 'while' after do body")
        self._expect("(")
        test = self._expression()
        self._expect(")")
        self._eat(";")
        return n.DoWhile(body, test)

    # ------------------------------------------------------------------
    # Structural skipping
    # ------------------------------------------------------------------

    def _skip_keyword_statement(self, word: str) -> None:
        self.pos += len(word)
        if word == "switch":
            self._skip_group("(", ")")
            self._skip_group("{", "}")
        elif word == "try":
            self._skip_group("{", "}")
            while self._eat_keyword("catch"):
                if self._peek("("):
                    self._skip_group("(", ")")
                self._skip_group("{", "}")
            if self._eat_keyword("finally"):
                self._skip_group("{", "}")
        else:
            while not self._peek("{"):
                if self.pos >= self.length:
                    raise self._error(f"Unterminated {word} declaration")
                self.pos += 1
            self._skip_group("{", "}")

    def _skip_group(self, opener: str, closer: str) -> None:
        self._skip_ws()
        if not self.src.startswith(opener, self.pos):
            raise self._error(f"Expected {opener!r}")
        depth = 0
        while self.pos < self.length:
            c = self.src[self.pos]
            if self._skip_quoted():
                continue
            if c in "([{":
                depth += 1
            elif c in ")]}":
                depth -= 1
                if depth == 0:
                    self.pos += 1
                    return
            self.pos += 1
        raise self._error(f"Unbalanced {opener!r}")

    def _skip_statement(self) -> None:
        """Skip to the end of the current statement without parsing it."""
        depth = 0
        consumed = False
        while self.pos < self.length:
            c = self.src[self.pos]
            if self._skip_quoted():
                consumed = True
                continue
            if c in "([{":
                depth += 1
            elif c in ")]}":
                if depth == 0:
                    if not consumed:
                        raise self._error(f"Unexpected {c!r}")
                    return
                depth -= 1
                if depth == 0 and c == "}":
                    self.pos += 1
                    line_end = self.src.find("\n", self.pos)
                    rest = self.src[self.pos:self.length if line_end == -1 else line_end].strip()
                    if not rest or rest.startswith(";"):
                        self._eat(";")
                        return
                    continue
            elif c == ";" and depth == 0:
                self.pos += 1
                return
            elif c == "\n" and depth == 0 and consumed:
                return
            if not c.isspace():
                consumed = True
            self.pos += 1

    def _skip_quoted(self) -> bool:
        """Skip a string, template or comment at the cursor if there is one."""
        src = self.src
        c = src[self.pos]
        if c in "\"'":
            self.pos += 1
            while self.pos < self.length and src[self.pos] != c:
                if src[self.pos] == "\\":
                    self.pos += 1
                elif src[self.pos] == "\n":
                    raise self._error("Unterminated string")
                self.pos += 1
            if self.pos >= self.length:
                raise self._error("Unterminated string")
            self.pos += 1
            return True
        if c == "`":
            self._template()
            return True
        if src.startswith("//", self.pos):
            end = src.find("\n", self.pos)
            self.pos = self.length if end == -1 else end
            return True
        if src.startswith("/*", self.pos):
            end = src.find("*/", self.pos + 2)
            if end == -1:
                raise self._error("Unterminated comment")
            self.pos = end + 2
            return True
        return False

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _expression(self) -> n.Expr:
        return self._assignment()

    def _assignment(self) -> n.Expr:
        self._skip_ws()
        start = self.pos
        arrow = self._try_arrow()
        if arrow is not None:
            return arrow
        self.pos = start
        target = self._conditional()
        for op in ASSIGN_OPS:
            if self._peek_op(op) if op == "=" else self._peek(op):
                if not isinstance(target, (n.Identifier, n.Member)):
                    raise self._error("Invalid assignment target")
                self.pos += len(op)
                return n.Assign(op, target, self._assignment())
        return target

    def _try_arrow(self) -> n.Function | None:
        if self._peek_keyword("async"):
            saved = self.pos
            self.pos += len("async")
            if not (self._peek("(") or self._peek_word()):
                self.pos = saved
                return None
        start = self.pos
        word = self._peek_word()
        if word is not None and word not in RESERVED:
            self.pos += len(word)
            if self._peek("=>"):
                self.pos += 2
                return n.Function(None, (n.Binding(word),), self._arrow_body(), is_arrow=True)
            self.pos = start
            return None
        if not self._peek("(") or self.pos in self._not_arrow:
            return None
        try:
            params, rest = self._params()
        except ParseError:
            self._not_arrow.add(start)
            self.pos = start
            return None
        if not self._peek("=>"):
            self._not_arrow.add(start)
            self.pos = start
            return None
        self.pos += 2
        return n.Function(None, params, self._arrow_body(), rest=rest, is_arrow=True)

    def _arrow_body(self) -> "n.Expr | n.Block":
        if self._peek("{"):
            return n.Block(self._block())
        return self._assignment()

    def _params(self) -> tuple[tuple[n.Binding, ...], str | None]:
        self._expect("(")
        params = []
        rest = None
        while not self._peek(")"):
            if self._eat("..."):
                rest = self._binding_identifier()
                self._eat(",")
                break
            target = self._pattern()
            default = None
            if self._peek_op("="):
                self.pos += 1
                default = self._assignment()
            params.append(n.Binding(target, default))
            if not self._eat(","):
                break
        self._expect(")")
        return tuple(params), rest

    def _pattern(self) -> "str | n.ArrayPattern | n.ObjectPattern":
        if self._eat("["):
            elements: list[n.Binding | None] = []
            rest = None
            while not self._peek("]"):
                if self._peek(","):
                    self.pos += 1
                    elements.append(None)
                    continue
                if self._eat("..."):
                    rest = self._binding_identifier()
                    break
                elements.append(self._pattern_element())
                if not self._eat(","):
                    break
            self._expect("]")
            return n.ArrayPattern(tuple(elements), rest)
        if self._eat("{"):
            properties = []
            rest = None
            while not self._peek("}"):
                if self._eat("..."):
                    rest = self._binding_identifier()
                    break
                key = self._property_key_text()
                if self._eat(":"):
                    binding = self._pattern_element()
                else:
                    default = None
                    if self._peek_op("="):
                        self.pos += 1
                        default = self._assignment()
                    binding = n.Binding(key, default)
                properties.append((key, binding))
                if not self._eat(","):
                    break
            self._expect("}")
            return n.ObjectPattern(tuple(properties), rest)
        return self._binding_identifier()

    def _pattern_element(self) -> n.Binding:
        target = self._pattern()
        default = None
        if self._peek_op("="):
            self.pos += 1
            default = self._assignment()
        return n.Binding(target, default)

    def _property_key_text(self) -> str:
        self._skip_ws()
        c = self.src[self.pos:self.pos + 1]
        if c in ("\"", "'"):
            return self._string(c)
        match = NUMBER_RE.match(self.src, self.pos)
        if match:
            self.pos = match.end()
            return match.group()
        return self._identifier()

    def _conditional(self) -> n.Expr:
        test = self._binary(0)
        if self._peek_op("?"):
            self.pos += 1
            consequent = self._assignment()
            self._expect(":")
            alternate = self._assignment()
            return n.Conditional(test, consequent, alternate)
        return test

    # Precedence levels, loosest first
    _LEVELS = (
        ("??",),
        ("||",),
        ("&&",),
        EQUALITY_OPS,
        RELATIONAL_OPS,
        ADDITIVE_OPS,
        MULTIPLICATIVE_OPS,
    )

    def _binary(self, level: int) -> n.Expr:
        if level == len(self._LEVELS):
            return self._unary()
        left = self._binary(level + 1)
        ops = self._LEVELS[level]
        while True:
            op = next((o for o in ops if self._peek_op(o)), None)
            if op is None and ops is RELATIONAL_OPS:
                op = next((w for w in ("instanceof", "in") if self._peek_keyword(w)), None)
            if op is None:
                return left
            self.pos += len(op)
            right = self._binary(level + 1)
            if op in ("&&", "||", "??"):
                left = n.Logical(op, left, right)
            else:
                left = n.Binary(op, left, right)

    def _unary(self) -> n.Expr:
        self._skip_ws()
        for op in ("++", "--"):
            if self._eat(op):
                return n.Unary(op, self._unary())
        for op in ("!", "-", "+", "~"):
            if self._eat(op):
                return n.Unary(op, self._unary())
        for word in ("typeof", "void", "await", "delete"):
            if self._eat_keyword(word):
                return n.Unary(word, self._unary())
        expr = self._postfix()
        if not self._at_line_break() and (self._peek("++") or self._peek("--")):
            op = self.src[self.pos:self.pos + 2]
            self.pos += 2
            return n.Unary("post" + op, expr)
        return expr

    def _at_line_break(self) -> bool:
        self._skip_ws()
        return self._newline_before()

    def _postfix(self) -> n.Expr:
        expr = self._primary()
        while True:
            if self._peek("?."):
                self.pos += 2
                if self._peek("("):
                    expr = n.Call(expr, self._arguments(), optional=True)
                elif self._eat("["):
                    index = self._expression()
                    self._expect("]")
                    expr = n.Member(expr, index, optional=True)
                else:
                    expr = n.Member(expr, n.Literal(self._identifier()), optional=True)
            elif self._peek_op("."):
                self.pos += 1
                expr = n.Member(expr, n.Literal(self._identifier()))
            elif self._peek("["):
                if self._at_line_break():
                    return expr
                self.pos += 1
                index = self._expression()
                self._expect("]")
                expr = n.Member(expr, index)
            elif self._peek("("):
                if self._at_line_break():
                    return expr
                expr = n.Call(expr, self._arguments())
            elif self._peek("!") and not self._peek("!=") and not self._at_line_break():
                raise self._error("Type annotations are not supported")
            else:
                return expr

    def _arguments(self) -> tuple["n.Expr | n.Spread", ...]:
        self._expect("(")
        args: list[n.Expr | n.Spread] = []
        while not self._peek(")"):
            if self._eat("..."):
                args.append(n.Spread(self._assignment()))
            else:
                args.append(self._assignment())
            if not self._eat(","):
                break
        self._expect(")")
        return tuple(args)

    def _primary(self) -> n.Expr:
        self._skip_ws()
        if self.pos >= self.length:
            raise self._error("Unexpected end of input")
        src = self.src
        c = src[self.pos]

        if c in ("\"", "'"):
            return n.Literal(self._string(c))
        if c == "`":
            return self._template()
        if c.isdigit() or (c == "." and src[self.pos + 1:self.pos + 2].isdigit()):
            return n.Literal(self._number())
        if c == "(":
            self.pos += 1
            expr = self._expression()
            while self._eat(","):
                expr = self._expression()
            self._expect(")")
            return expr
        if c == "[":
            return self._array()
        if c == "{":
            return self._object()
        if c == "<":
            return self._jsx_element()

        word = self._peek_word()
        if word is None:
            raise self._error(f"Unexpected character {c!r}")
        if word == "true":
            self.pos += 4
            return n.Literal(True)
        if word == "false":
            self.pos += 5
            return n.Literal(False)
        if word in ("null", "undefined"):
            self.pos += len(word)
            return n.Literal(None)
        if word == "function" or (word == "async" and self._async_function_ahead()):
            self._eat_keyword("async")
            return self._function(require_name=False)
        if word == "new":
            self.pos += 3
            callee = self._primary()
            while self._peek_op("."):
                self.pos += 1
                callee = n.Member(callee, n.Literal(self._identifier()))
            args = self._arguments() if self._peek("(") else ()
            return n.Call(callee, args, is_new=True)
        if word in RESERVED:
            raise self._error(f"Unexpected keyword {word!r}")
        self.pos += len(word)
        return n.Identifier(word)

    def _function(self, require_name: bool) -> n.Function:
        self._expect("function")
        self._eat("*")
        name = None
        if not self._peek("("):
            name = self._binding_identifier()
        elif require_name:
            raise self._error("Function declaration requires a name")
        params, rest = self._params()
        if not self._peek("{"):
            raise self._error("Expected function body")
        return n.Function(name, params, n.Block(self._block()), rest=rest)

    def _array(self) -> n.ArrayExpr:
        self._expect("[")
        elements: list[n.Expr | n.Spread] = []
        while not self._peek("]"):
            if self._peek(","):
                self.pos += 1
                elements.append(n.Literal(None))
                continue
            if self._eat("..."):
                elements.append(n.Spread(self._assignment()))
            else:
                elements.append(self._assignment())
            if not self._eat(","):
                break
        self._expect("]")
        return n.ArrayExpr(tuple(elements))

    def _object(self) -> n.ObjectExpr:
        self._expect("{")
        properties: list[n.Property | n.Spread] = []
        while not self._peek("}"):
            if self._eat("..."):
                properties.append(n.Spread(self._assignment()))
            else:
                properties.append(self._property())
            if not self._eat(","):
                break
        self._expect("}")
        return n.ObjectExpr(tuple(properties))

    def _property(self) -> n.Property:
        if self._eat("["):
            key: n.Expr = self._assignment()
            self._expect("]")
            self._expect(":")
            return n.Property(key, self._assignment())
        self._skip_ws()
        is_word = IDENT_RE.match(self.src, self.pos) is not None
        name = self._property_key_text()
        key = n.Literal(name)
        if self._eat(":"):
            return n.Property(key, self._assignment())
        if self._peek("("):
            params, rest = self._params()
            return n.Property(key, n.Function(name, params, n.Block(self._block()), rest=rest))
        if not is_word:
            raise self._error("Expected ':' after property key")
        return n.Property(key, n.Identifier(name))

    # ------------------------------------------------------------------
    # Literals
    # ------------------------------------------------------------------

    def _number(self) -> int | float:
        match = NUMBER_RE.match(self.src, self.pos)
        if match is None:
            raise self._error("Invalid number")
        text = match.group().replace("_", "")
        self.pos = match.end()
        if IDENT_RE.match(self.src, self.pos):
            raise self._error("Identifier directly after number")
        lowered = text.lower()
        if lowered.startswith("0x"):
            return int(text[2:], 16)
        if lowered.startswith("0b"):
            return int(text[2:], 2)
        if lowered.startswith("0o"):
            return int(text[2:], 8)
        if "." in text or "e" in lowered:
            return float(text)
        return int(text)

    def _escape(self) -> str:
        """Decode the escape sequence after a backslash at the cursor."""
        src = self.src
        self.pos += 1
        if self.pos >= self.length:
            raise self._error("Unterminated escape")
        c = src[self.pos]
        self.pos += 1
        if c in ESCAPES:
            return ESCAPES[c]
        if c == "x":
            digits = src[self.pos:self.pos + 2]
            self.pos += 2
            return chr(self._hex(digits, 2))
        if c == "u":
            if src.startswith("{", self.pos):
                end = src.find("}", self.pos)
                if end == -1:
                    raise self._error("Unterminated unicode escape")
                digits = src[self.pos + 1:end]
                self.pos = end + 1
                code = self._hex(digits, None)
                if code > 0x10FFFF:
                    raise self._error("Invalid unicode escape")
                return chr(code)
            digits = src[self.pos:self.pos + 4]
            self.pos += 4
            code = self._hex(digits, 4)
            # Join surrogate pairs written as two escapes
            tail = src[self.pos + 2:self.pos + 6]
            if (
                0xD800 <= code <= 0xDBFF
                and src.startswith("\\u", self.pos)
                and len(tail) == 4
                and all(d in HEX_DIGITS for d in tail)
            ):
                low = int(tail, 16)
                if 0xDC00 <= low <= 0xDFFF:
                    self.pos += 6
                    return chr(0x10000 + ((code - 0xD800) << 10) + (low - 0xDC00))
            return chr(code)
        if c == "\r" and src.startswith("\n", self.pos):
            self.pos += 1
            return ""
        if c in "\n\u2028\u2029":
            return ""
        return c

    def _hex(self, digits: str, width: int | None) -> int:
        if (width is not None and len(digits) != width) or not digits or any(d not in HEX_DIGITS for d in digits):
            raise self._error("Invalid escape sequence")
        return int(digits, 16)

    def _string(self, quote: str) -> str:
        self.pos += 1
        parts = []
        src = self.src
        while True:
            if self.pos >= self.length:
                raise self._error("Unterminated string")
            c = src[self.pos]
            if c == quote:
                self.pos += 1
                return "".join(parts)
            if c == "\\":
                parts.append(self._escape())
            elif c == "\n":
                raise self._error("Unterminated string")
            else:
                parts.append(c)
                self.pos += 1

    def _template(self) -> n.TemplateLiteral:
        self.pos += 1
        quasis = []
        expressions = []
        current: list[str] = []
        src = self.src
        while True:
            if self.pos >= self.length:
                raise self._error("Unterminated template literal")
            c = src[self.pos]
            if c == "`":
                self.pos += 1
                quasis.append("".join(current))
                return n.TemplateLiteral(tuple(quasis), tuple(expressions))
            if c == "\\":
                current.append(self._escape())
            elif src.startswith("${", self.pos):
                self.pos += 2
                quasis.append("".join(current))
                current = []
                expressions.append(self._expression())
                self._expect("}")
            else:
                current.append(c)
                self.pos += 1

    # ------------------------------------------------------------------
    # JSX
    # ------------------------------------------------------------------

    def _jsx_name(self) -> str:
        self._skip_ws()
        match = JSX_NAME_RE.match(self.src, self.pos)
        if match is None:
            raise self._error("Expected element name")
        self.pos = match.end()
        return match.group()

    def _jsx_element(self) -> n.JSXElement:
        self._expect("<")
        if self._eat(">"):
            children = self._jsx_children()
            self._expect("</")
            self._expect(">")
            return n.JSXElement(None, (), children)

        name = self._jsx_name()
        attributes: list[n.JSXAttribute | n.Spread] = []
        while True:
            if self._eat("/>"):
                return n.JSXElement(name, tuple(attributes), ())
            if self._eat(">"):
                break
            if self._eat("{"):
                self._expect("...")
                attributes.append(n.Spread(self._assignment()))
                self._expect("}")
                continue
            attr_name = self._jsx_name()
            value: n.Expr = n.Literal(True)
            if self._peek_op("="):
                self.pos += 1
                value = self._jsx_attribute_value()
            attributes.append(n.JSXAttribute(attr_name, value))

        children = self._jsx_children()
        self._expect("</")
        closing = self._jsx_name()
        if closing != name:
            raise self._error(f"Expected closing tag for <{name}> but found </{closing}>")
        self._expect(">")
        return n.JSXElement(name, tuple(attributes), children)

    def _jsx_attribute_value(self) -> n.Expr:
        self._skip_ws()
        c = self.src[self.pos:self.pos + 1]
        if c in ("\"", "'"):
            end = self.src.find(c, self.pos + 1)
            if end == -1:
                raise self._error("Unterminated attribute value")
            text = self.src[self.pos + 1:end]
            self.pos = end + 1
            return n.Literal(html.unescape(text))
        if c == "{":
            self.pos += 1
            expr = self._assignment()
            self._expect("}")
            return expr
        if c == "<":
            return self._jsx_element()
        raise self._error("Invalid attribute value")

    def _jsx_children(self) -> tuple[n.Expr, ...]:
        children: list[n.Expr] = []
        src = self.src
        while True:
            if self.pos >= self.length:
                raise self._error("Unterminated element")
            if src.startswith("</", self.pos):
                return tuple(children)
            c = src[self.pos]
            if c == "<":
                children.append(self._jsx_element())
            elif c == "{":
                self.pos += 1
                if self._eat("}"):
                    continue
                if self._eat("..."):
                    children.append(self._assignment())
                else:
                    children.append(self._expression())
                self._expect("}")
            else:
                end = self.pos
                while end < self.length and src[end] not in "<{":
                    end += 1
                text = jsx_text(src[self.pos:end])
                self.pos = end
                if text:
                    children.append(n.Literal(text))


def jsx_text(raw: str) -> str:
    """Collapse JSX text the way the JSX transform does."""
    lines = raw.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    last_content = max((i for i, line in enumerate(lines) if line.strip(" \t")), default=-1)
    out = []
    for i, line in enumerate(lines):
        text = line.replace("\t", " ")
        if i > 0:
            text = text.lstrip(" ")
        if i < len(lines) - 1:
            text = text.rstrip(" ")
        if text:
            if i != last_content:
                text += " "
            out.append(text)
    return html.unescape("".join(out))


def parse_program(source: str) -> n.Program:
    """Parse a whole component source file."""
    return Parser(source).parse_program()


def parse_expression(source: str) -> n.Expr:
    """Parse a single standalone expression."""
    return Parser(source).parse_expression()
