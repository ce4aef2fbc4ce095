"""Tree-walking evaluation of parsed component source.

Values map onto Python directly: objects are dicts, arrays are lists,
``null`` and ``undefined`` are both None. Functions defined in source
become ``Closure`` objects that Python code can call like any callable.
"""

import functools
import math
from collections.abc import Callable
from typing import Any

from . import nodes as n
from .values import (
    FRAGMENT,
    Element,
    RenderError,
    flatten_children,
    format_number,
    is_number,
    loose_equals,
    strict_equals,
    to_js_string,
    to_number,
    truthy,
    typeof,
)

_NO_RETURN = object()
_SHORT_CIRCUIT = object()
_BREAK = object()
_CONTINUE = object()

# Loop iterations allowed across one render
MAX_LOOP_ITERATIONS = 10_000

# Failures inside native helpers that surface as render errors
NATIVE_ERRORS = (TypeError, ValueError, KeyError, IndexError, AttributeError, OverflowError, ZeroDivisionError)


class Scope:
    """Lexical scope chain."""

    __slots__ = ("vars", "parent")

    def __init__(self, parent: "Scope | None" = None, values: dict[str, Any] | None = None):
        self.vars: dict[str, Any] = dict(values or {})
        self.parent = parent

    def lookup(self, name: str) -> Any:
        scope: Scope | None = self
        while scope is not None:
            if name in scope.vars:
                return scope.vars[name]
            scope = scope.parent
        raise RenderError(f"{name} is not defined")

    def has(self, name: str) -> bool:
        scope: Scope | None = self
        while scope is not None:
            if name in scope.vars:
                return True
            scope = scope.parent
        return False

    def declare(self, name: str, value: Any) -> None:
        self.vars[name] = value

    def assign(self, name: str, value: Any) -> None:
        scope: Scope | None = self
        while scope is not None:
            if name in scope.vars:
                scope.vars[name] = value
                return
            scope = scope.parent
        raise RenderError(f"{name} is not defined")


class Closure:
    """A function from component source bound to its defining scope."""

    __slots__ = ("node", "scope", "interpreter")

    def __init__(self, node: n.Function, scope: Scope, interpreter: "Interpreter"):
        self.node = node
        self.scope = scope
        self.interpreter = interpreter

    @property
    def name(self) -> str:
        return self.node.name or "anonymous"

    def __call__(self, *args: Any) -> Any:
        return self.interpreter.call_function(self, list(args))

    def __repr__(self) -> str:
        return f"<Closure {self.name}>"


# ============================================================================
# Member access
# ============================================================================


def _index(key: Any) -> int | None:
    if is_number(key):
        return int(key) if float(key).is_integer() else None
    if isinstance(key, str) and key.isdigit():
        return int(key)
    return None


def _callback(fn: Any) -> Callable[..., Any]:
    if not callable(fn):
        raise RenderError(f"{typeof(fn)} is not a function")
    return fn


def _int_arg(value: Any, default: int) -> int:
    if value is None:
        return default
    number = to_number(value)
    if isinstance(number, float):
        if math.isnan(number):
            return 0
        if math.isinf(number):
            return default if number > 0 else 0
    return int(number)


def _list_reduce(items: list, fn: Any, *initial: Any) -> Any:
    fn = _callback(fn)
    if initial:
        acc, start = initial[0], 0
    elif items:
        acc, start = items[0], 1
    else:
        raise RenderError("Reduce of empty array with no initial value")
    for i in range(start, len(items)):
        acc = fn(acc, items[i], i, items)
    return acc


def _list_sort(items: list, fn: Any = None) -> list:
    if fn is None:
        items.sort(key=lambda item: (item is None, to_js_string(item)))
    else:
        compare = _callback(fn)
        items.sort(key=functools.cmp_to_key(lambda a, b: to_number(compare(a, b))))
    return items


def _list_push(items: list, *values: Any) -> int:
    items.extend(values)
    return len(items)


def _list_flat(items: list, depth: Any = 1) -> list:
    out: list = []
    for item in items:
        if isinstance(item, list) and _int_arg(depth, 1) > 0:
            out.extend(_list_flat(item, _int_arg(depth, 1) - 1))
        else:
            out.append(item)
    return out


def _for_each(items: list, fn: Any, *_: Any) -> None:
    fn = _callback(fn)
    for i, item in enumerate(items):
        fn(item, i, items)


def _find_index(items: list, fn: Any) -> int:
    fn = _callback(fn)
    return next((i for i, item in enumerate(items) if truthy(fn(item, i, items))), -1)


def _index_of(items: list, value: Any) -> int:
    return next((i for i, item in enumerate(items) if strict_equals(item, value)), -1)


LIST_METHODS: dict[str, Callable[..., Any]] = {
    "map": lambda items, fn, *_: [_callback(fn)(item, i, items) for i, item in enumerate(items)],
    "filter": lambda items, fn, *_: [
        item for i, item in enumerate(items) if truthy(_callback(fn)(item, i, items))
    ],
    "forEach": _for_each,
    "find": lambda items, fn, *_: next(
        (item for i, item in enumerate(items) if truthy(_callback(fn)(item, i, items))), None
    ),
    "findIndex": lambda items, fn, *_: _find_index(items, fn),
    "some": lambda items, fn, *_: any(truthy(_callback(fn)(item, i, items)) for i, item in enumerate(items)),
    "every": lambda items, fn, *_: all(truthy(_callback(fn)(item, i, items)) for i, item in enumerate(items)),
    "includes": lambda items, value, *_: any(
        strict_equals(item, value) or (is_number(item) and is_number(value) and math.isnan(item) and math.isnan(value))
        for item in items
    ),
    "indexOf": lambda items, value, *_: _index_of(items, value),
    "join": lambda items, sep=",", *_: to_js_string(sep).join(
        "" if item is None else to_js_string(item) for item in items
    ),
    "slice": lambda items, start=None, end=None, *_: items[_int_arg(start, 0):_int_arg(end, len(items))],
    "concat": lambda items, *others: items + [
        v for other in others for v in (other if isinstance(other, list) else [other])
    ],
    "reduce": _list_reduce,
    "reverse": lambda items, *_: items.reverse() or items,
    "sort": _list_sort,
    "push": _list_push,
    "flat": _list_flat,
    "flatMap": lambda items, fn, *_: _list_flat(
        [_callback(fn)(item, i, items) for i, item in enumerate(items)]
    ),
    "at": lambda items, index=0, *_: items[_int_arg(index, 0)] if -len(items) <= _int_arg(index, 0) < len(items) else None,
}


def _split(text: str, sep: Any = None, limit: Any = None) -> list[str]:
    if sep is None:
        parts = [text]
    elif to_js_string(sep) == "":
        parts = list(text)
    else:
        parts = text.split(to_js_string(sep))
    return parts if limit is None else parts[:_int_arg(limit, len(parts))]


def _replace(text: str, pattern: Any, replacement: Any, count: int = 1) -> str:
    needle = to_js_string(pattern)
    if callable(replacement):
        pieces = text.split(needle, count if count > 0 else -1)
        return "".join(
            piece if i == 0 else to_js_string(replacement(needle)) + piece for i, piece in enumerate(pieces)
        )
    return text.replace(needle, to_js_string(replacement), count)


def _substring(text: str, start: Any = 0, end: Any = None) -> str:
    lo = max(0, _int_arg(start, 0))
    hi = max(0, _int_arg(end, len(text)))
    lo, hi = min(lo, hi), max(lo, hi)
    return text[lo:hi]


STRING_METHODS: dict[str, Callable[..., Any]] = {
    "toUpperCase": lambda s, *_: s.upper(),
    "toLowerCase": lambda s, *_: s.lower(),
    "trim": lambda s, *_: s.strip(),
    "trimStart": lambda s, *_: s.lstrip(),
    "trimEnd": lambda s, *_: s.rstrip(),
    "includes": lambda s, sub="undefined", *_: to_js_string(sub) in s,
    "startsWith": lambda s, sub="undefined", *_: s.startswith(to_js_string(sub)),
    "endsWith": lambda s, sub="undefined", *_: s.endswith(to_js_string(sub)),
    "indexOf": lambda s, sub="undefined", *_: s.find(to_js_string(sub)),
    "slice": lambda s, start=None, end=None, *_: s[_int_arg(start, 0):_int_arg(end, len(s))],
    "substring": _substring,
    "split": _split,
    "replace": lambda s, pattern, replacement, *_: _replace(s, pattern, replacement, 1),
    "replaceAll": lambda s, pattern, replacement, *_: _replace(s, pattern, replacement, -1),
    "charAt": lambda s, index=0, *_: s[_int_arg(index, 0)] if 0 <= _int_arg(index, 0) < len(s) else "",
    "padStart": lambda s, width, fill=" ", *_: (to_js_string(fill) * _int_arg(width, 0))[: max(0, _int_arg(width, 0) - len(s))] + s,
    "padEnd": lambda s, width, fill=" ", *_: s + (to_js_string(fill) * _int_arg(width, 0))[: max(0, _int_arg(width, 0) - len(s))],
    "repeat": lambda s, count=0, *_: s * max(0, _int_arg(count, 0)),
    "concat": lambda s, *others: s + "".join(to_js_string(o) for o in others),
    "at": lambda s, index=0, *_: s[_int_arg(index, 0)] if -len(s) <= _int_arg(index, 0) < len(s) else None,
}


def _to_fixed(value: int | float, digits: Any = 0, *_: Any) -> str:
    if isinstance(value, float) and not math.isfinite(value):
        return format_number(value)
    return f"{value:.{_int_arg(digits, 0)}f}"


NUMBER_METHODS: dict[str, Callable[..., Any]] = {
    "toFixed": _to_fixed,
    "toString": lambda value, *_: format_number(value),
    "toLocaleString": lambda value, *_: f"{value:,}" if isinstance(value, int) else format_number(value),
}


def get_member(obj: Any, key: Any) -> Any:
    """Read ``obj[key]`` with JavaScript semantics for supported values."""
    if obj is None:
        raise RenderError(f"Cannot read properties of undefined (reading '{to_js_string(key)}')")
    if isinstance(obj, dict):
        return obj.get(key if isinstance(key, str) else to_js_string(key))
    if isinstance(obj, (list, str)):
        index = _index(key)
        if index is not None:
            return obj[index] if 0 <= index < len(obj) else None
        if key == "length":
            return len(obj)
        method = (LIST_METHODS if isinstance(obj, list) else STRING_METHODS).get(key)
        return functools.partial(method, obj) if method else None
    if is_number(obj):
        method = NUMBER_METHODS.get(key)
        return functools.partial(method, obj) if method else None
    if isinstance(obj, Element):
        return {"type": obj.tag, "props": obj.props}.get(key)
    if isinstance(obj, Closure):
        return {"name": obj.name, "length": len(obj.node.params)}.get(key)
    return None


def set_member(obj: Any, key: Any, value: Any) -> None:
    if isinstance(obj, dict):
        obj[key if isinstance(key, str) else to_js_string(key)] = value
        return
    if isinstance(obj, list):
        index = _index(key)
        if index is None:
            raise RenderError(f"Cannot set property '{to_js_string(key)}' on an array")
        if index >= len(obj):
            obj.extend([None] * (index + 1 - len(obj)))
        obj[index] = value
        return
    raise RenderError(f"Cannot set properties of {typeof(obj)} (setting '{to_js_string(key)}')")


# ============================================================================
# Operators
# ============================================================================


def _is_primitive(value: Any) -> bool:
    return value is None or isinstance(value, (str, bool, int, float))


def _divide(left: int | float, right: int | float) -> int | float:
    if right == 0:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1, right)
    if isinstance(left, int) and isinstance(right, int) and left % right == 0:
        return left // right
    return left / right


def _remainder(left: int | float, right: int | float) -> int | float:
    if right == 0 or math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    if math.isinf(right):
        return left
    result = math.fmod(left, right)
    return int(result) if isinstance(left, int) and isinstance(right, int) else result


def binary_op(op: str, left: Any, right: Any) -> Any:
    if op == "+":
        if isinstance(left, str) or isinstance(right, str) or not (_is_primitive(left) and _is_primitive(right)):
            return to_js_string(left) + to_js_string(right)
        return to_number(left) + to_number(right)
    if op in ("-", "*", "/", "%"):
        a, b = to_number(left), to_number(right)
        if op == "-":
            return a - b
        if op == "*":
            return a * b
        if op == "/":
            return _divide(a, b)
        return _remainder(a, b)
    if op in ("<", ">", "<=", ">="):
        if isinstance(left, str) and isinstance(right, str):
            a, b = left, right
        else:
            a, b = to_number(left), to_number(right)
            if math.isnan(a) or math.isnan(b):
                return False
        return {"<": a < b, ">": a > b, "<=": a <= b, ">=": a >= b}[op]
    if op == "===":
        return strict_equals(left, right)
    if op == "!==":
        return not strict_equals(left, right)
    if op == "==":
        return loose_equals(left, right)
    if op == "!=":
        return not loose_equals(left, right)
    if op == "in":
        return isinstance(right, dict) and to_js_string(left) in right
    if op == "instanceof":
        return False
    raise RenderError(f"Unsupported operator {op}")


def _describe(node: n.Node) -> str:
    if isinstance(node, n.Identifier):
        return node.name
    if isinstance(node, n.Member) and isinstance(node.property, n.Literal):
        return f"{_describe(node.object)}.{node.property.value}"
    return "expression"


# ============================================================================
# Interpreter
# ============================================================================


class Interpreter:
    """Evaluates component syntax trees against a scope chain."""

    def __init__(self, max_depth: int = 64, max_iterations: int = MAX_LOOP_ITERATIONS):
        self.max_depth = max_depth
        self.max_iterations = max_iterations
        self._depth = 0
        self._iterations = 0

    # ------------------------------------------------------------------
    # Functions
    # ------------------------------------------------------------------

    def call_value(self, fn: Any, args: list[Any], name: str = "expression") -> Any:
        if isinstance(fn, Closure):
            return self.call_function(fn, args)
        if callable(fn):
            try:
                return fn(*args)
            except RenderError:
                raise
            except NATIVE_ERRORS as e:
                raise RenderError(f"{name}: {e}") from e
        raise RenderError(f"{name} is not a function")

    def call_function(self, fn: Closure, args: list[Any]) -> Any:
        if self._depth >= self.max_depth:
            raise RenderError(f"Maximum render depth {self.max_depth} exceeded in {fn.name}")
        self._depth += 1
        try:
            node = fn.node
            scope = Scope(fn.scope)
            for i, param in enumerate(node.params):
                self.bind(param, args[i] if i < len(args) else None, scope)
            if node.rest:
                scope.declare(node.rest, list(args[len(node.params):]))
            if isinstance(node.body, n.Block):
                self._hoist(node.body.body, scope)
                result = self.execute(node.body.body, scope)
                return None if result in (_NO_RETURN, _BREAK, _CONTINUE) else result
            return self.evaluate(node.body, scope)
        finally:
            self._depth -= 1

    def bind(self, binding: n.Binding, value: Any, scope: Scope) -> None:
        """Bind a (possibly destructuring) pattern in ``scope``."""
        if value is None and binding.default is not None:
            value = self.evaluate(binding.default, scope)
        target = binding.target
        if isinstance(target, str):
            scope.declare(target, value)
        elif isinstance(target, n.ArrayPattern):
            if not isinstance(value, (list, str)):
                raise RenderError(f"{typeof(value)} is not iterable")
            items = list(value)
            for i, element in enumerate(target.elements):
                if element is not None:
                    self.bind(element, items[i] if i < len(items) else None, scope)
            if target.rest:
                scope.declare(target.rest, items[len(target.elements):])
        else:
            if value is None:
                raise RenderError("Cannot destructure properties of undefined")
            for key, sub in target.properties:
                self.bind(sub, get_member(value, key), scope)
            if target.rest:
                taken = {key for key, _ in target.properties}
                rest = {k: v for k, v in value.items() if k not in taken} if isinstance(value, dict) else {}
                scope.declare(target.rest, rest)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def run_program(self, program: n.Program, scope: Scope) -> None:
        self._hoist(program.body, scope)
        self.execute(program.body, scope)

    def _hoist(self, body: tuple[n.Stmt, ...], scope: Scope) -> None:
        for stmt in body:
            if isinstance(stmt, n.FunctionDecl):
                scope.declare(stmt.function.name, Closure(stmt.function, scope, self))

    def execute(self, body: tuple[n.Stmt, ...], scope: Scope) -> Any:
        for stmt in body:
            result = self._statement(stmt, scope)
            if result is not _NO_RETURN:
                return result
        return _NO_RETURN

    def _statement(self, stmt: n.Stmt, scope: Scope) -> Any:
        match stmt:
            case n.ExprStmt(expression=expression):
                self.evaluate(expression, scope)
            case n.VarDecl(declarations=declarations):
                for binding, init in declarations:
                    self.bind(binding, None if init is None else self.evaluate(init, scope), scope)
            case n.Return(argument=argument):
                return None if argument is None else self.evaluate(argument, scope)
            case n.If(test=test, consequent=consequent, alternate=alternate):
                branch = consequent if truthy(self.evaluate(test, scope)) else alternate
                if branch is not None:
                    return self._statement(branch, scope)
            case n.Block(body=body):
                inner = Scope(scope)
                self._hoist(body, inner)
                return self.execute(body, inner)
            case n.For():
                return self._for(stmt, scope)
            case n.ForEach():
                return self._iterate(stmt, scope)
            case n.While(test=test, body=body):
                while truthy(self.evaluate(test, scope)):
                    self._tick()
                    result = self._statement(body, scope)
                    if result is _BREAK:
                        break
                    if result is not _NO_RETURN and result is not _CONTINUE:
                        return result
            case n.DoWhile(body=body, test=test):
                while True:
                    self._tick()
                    result = self._statement(body, scope)
                    if result is _BREAK:
                        break
                    if result is not _NO_RETURN and result is not _CONTINUE:
                        return result
                    if not truthy(self.evaluate(test, scope)):
                        break
            case n.Break():
                return _BREAK
            case n.Continue():
                return _CONTINUE
            case n.Throw(argument=argument):
                raise RenderError(f"Uncaught {to_js_string(self.evaluate(argument, scope))}")
            case n.Skipped(keyword=keyword):
                raise RenderError(f"'{keyword}' statements cannot run during a render")
        return _NO_RETURN

    # ------------------------------------------------------------------
    # Loops
    # ------------------------------------------------------------------

    def _tick(self) -> None:
        self._iterations += 1
        if self._iterations > self.max_iterations:
            raise RenderError(f"Loop iteration limit {self.max_iterations} exceeded")

    def _for(self, stmt: n.For, scope: Scope) -> Any:
        init = stmt.init
        # var bindings live in the enclosing scope, let/const get a fresh one per iteration
        per_iteration = not (isinstance(init, n.VarDecl) and init.kind == "var")
        loop = Scope(scope) if per_iteration else scope
        if init is not None:
            self._statement(init, loop)
        while stmt.test is None or truthy(self.evaluate(stmt.test, loop)):
            self._tick()
            result = self._statement(stmt.body, loop)
            if result is _BREAK:
                break
            if result is not _NO_RETURN and result is not _CONTINUE:
                return result
            if per_iteration:
                loop = Scope(scope, loop.vars)
            if stmt.update is not None:
                self.evaluate(stmt.update, loop)
        return _NO_RETURN

    def _iterate(self, stmt: n.ForEach, scope: Scope) -> Any:
        value = self.evaluate(stmt.iterable, scope)
        if stmt.kind == "of":
            if not isinstance(value, (list, str)):
                raise RenderError(f"{typeof(value)} is not iterable")
            items: list[Any] = list(value)
        elif isinstance(value, dict):
            items = list(value)
        elif isinstance(value, (list, str)):
            items = [str(i) for i in range(len(value))]
        else:
            items = []
        for item in items:
            self._tick()
            inner = Scope(scope)
            if stmt.declaration is None:
                self._store(stmt.target, item, scope)
            else:
                self.bind(stmt.target, item, inner)
            result = self._statement(stmt.body, inner)
            if result is _BREAK:
                break
            if result is not _NO_RETURN and result is not _CONTINUE:
                return result
        return _NO_RETURN

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def evaluate(self, node: n.Node, scope: Scope) -> Any:
        match node:
            case n.Literal(value=value):
                return value
            case n.Identifier(name=name):
                return scope.lookup(name)
            case n.TemplateLiteral(quasis=quasis, expressions=expressions):
                parts = [quasis[0]]
                for expression, quasi in zip(expressions, quasis[1:]):
                    parts.append(to_js_string(self.evaluate(expression, scope)))
                    parts.append(quasi)
                return "".join(parts)
            case n.ArrayExpr(elements=elements):
                items: list[Any] = []
                for element in elements:
                    if isinstance(element, n.Spread):
                        items.extend(self._spread(self.evaluate(element.argument, scope)))
                    else:
                        items.append(self.evaluate(element, scope))
                return items
            case n.ObjectExpr(properties=properties):
                return self._object(properties, scope)
            case n.Member():
                result = self._member(node, scope)
                return None if result is _SHORT_CIRCUIT else result
            case n.Call():
                result = self._call(node, scope)
                return None if result is _SHORT_CIRCUIT else result
            case n.Unary():
                return self._unary(node, scope)
            case n.Binary(operator=operator, left=left, right=right):
                return binary_op(operator, self.evaluate(left, scope), self.evaluate(right, scope))
            case n.Logical(operator=operator, left=left, right=right):
                value = self.evaluate(left, scope)
                if operator == "&&":
                    return self.evaluate(right, scope) if truthy(value) else value
                if operator == "||":
                    return value if truthy(value) else self.evaluate(right, scope)
                return self.evaluate(right, scope) if value is None else value
            case n.Conditional(test=test, consequent=consequent, alternate=alternate):
                branch = consequent if truthy(self.evaluate(test, scope)) else alternate
                return self.evaluate(branch, scope)
            case n.Assign():
                return self._assign(node, scope)
            case n.Function():
                return Closure(node, scope, self)
            case n.JSXElement():
                return self._element(node, scope)
        raise RenderError(f"Cannot evaluate {type(node).__name__}")

    def _spread(self, value: Any) -> list[Any]:
        if isinstance(value, (list, str)):
            return list(value)
        raise RenderError(f"{typeof(value)} is not iterable")

    def _object(self, properties: tuple, scope: Scope) -> dict[str, Any]:
        obj: dict[str, Any] = {}
        for prop in properties:
            if isinstance(prop, n.Spread):
                value = self.evaluate(prop.argument, scope)
                if isinstance(value, dict):
                    obj.update(value)
                elif isinstance(value, list):
                    obj.update({str(i): v for i, v in enumerate(value)})
            else:
                obj[to_js_string(self.evaluate(prop.key, scope))] = self.evaluate(prop.value, scope)
        return obj

    def _key(self, node: n.Node, scope: Scope) -> Any:
        return node.value if isinstance(node, n.Literal) else self.evaluate(node, scope)

    def _chain(self, node: n.Node, scope: Scope) -> Any:
        if isinstance(node, n.Member):
            return self._member(node, scope)
        if isinstance(node, n.Call):
            return self._call(node, scope)
        return self.evaluate(node, scope)

    def _member(self, node: n.Member, scope: Scope) -> Any:
        obj = self._chain(node.object, scope)
        if obj is _SHORT_CIRCUIT or (obj is None and node.optional):
            return _SHORT_CIRCUIT
        return get_member(obj, self._key(node.property, scope))

    def _call(self, node: n.Call, scope: Scope) -> Any:
        callee = node.callee
        if isinstance(callee, n.Member):
            obj = self._chain(callee.object, scope)
            if obj is _SHORT_CIRCUIT or (obj is None and callee.optional):
                return _SHORT_CIRCUIT
            fn = get_member(obj, self._key(callee.property, scope))
        else:
            fn = self._chain(callee, scope)
            if fn is _SHORT_CIRCUIT:
                return _SHORT_CIRCUIT
        if fn is None and node.optional:
            return _SHORT_CIRCUIT
        if node.is_new:
            raise RenderError(f"Cannot construct {_describe(callee)} during render")
        args: list[Any] = []
        for arg in node.arguments:
            if isinstance(arg, n.Spread):
                args.extend(self._spread(self.evaluate(arg.argument, scope)))
            else:
                args.append(self.evaluate(arg, scope))
        return self.call_value(fn, args, _describe(callee))

    def _unary(self, node: n.Unary, scope: Scope) -> Any:
        op = node.operator
        if op == "typeof":
            if isinstance(node.operand, n.Identifier) and not scope.has(node.operand.name):
                return "undefined"
            return typeof(self.evaluate(node.operand, scope))
        if op in ("++", "--", "post++", "post--"):
            current = to_number(self.evaluate(node.operand, scope))
            updated = current + (1 if op.endswith("++") else -1)
            self._store(node.operand, updated, scope)
            return current if op.startswith("post") else updated
        if op == "delete":
            target = node.operand
            if isinstance(target, n.Member):
                obj = self.evaluate(target.object, scope)
                if isinstance(obj, dict):
                    obj.pop(to_js_string(self._key(target.property, scope)), None)
            return True
        value = self.evaluate(node.operand, scope)
        if op == "!":
            return not truthy(value)
        if op == "-":
            return -to_number(value)
        if op == "+":
            return to_number(value)
        if op == "~":
            number = to_number(value)
            return ~int(number) if math.isfinite(number) else -1
        if op == "void":
            return None
        # await: there are no pending values during a render
        return value

    def _store(self, target: n.Node, value: Any, scope: Scope) -> None:
        if isinstance(target, n.Identifier):
            scope.assign(target.name, value)
        elif isinstance(target, n.Member):
            set_member(self.evaluate(target.object, scope), self._key(target.property, scope), value)
        else:
            raise RenderError("Invalid assignment target")

    def _assign(self, node: n.Assign, scope: Scope) -> Any:
        op = node.operator
        if op == "=":
            value = self.evaluate(node.value, scope)
        else:
            current = self.evaluate(node.target, scope)
            if op == "??=":
                if current is not None:
                    return current
                value = self.evaluate(node.value, scope)
            elif op == "||=":
                if truthy(current):
                    return current
                value = self.evaluate(node.value, scope)
            elif op == "&&=":
                if not truthy(current):
                    return current
                value = self.evaluate(node.value, scope)
            else:
                value = binary_op(op[:-1], current, self.evaluate(node.value, scope))
        self._store(node.target, value, scope)
        return value

    def _element(self, node: n.JSXElement, scope: Scope) -> Any:
        props: dict[str, Any] = {}
        for attr in node.attributes:
            if isinstance(attr, n.Spread):
                value = self.evaluate(attr.argument, scope)
                if isinstance(value, dict):
                    props.update(value)
            else:
                props[attr.name] = self.evaluate(attr.value, scope)
        children = [self.evaluate(child, scope) for child in node.children]

        name = node.name
        if name is None or name in ("Fragment", "React.Fragment"):
            return Element(FRAGMENT, {}, flatten_children(children))
        if is_intrinsic(name):
            return Element(name, props, flatten_children(children))

        head, *path = name.split(".")
        component = scope.lookup(head)
        for part in path:
            component = get_member(component, part)
        if children:
            props["children"] = children[0] if len(children) == 1 else children
        return self.call_value(component, [props], name)


def is_intrinsic(tag: str) -> bool:
    """Lowercase tags are host elements; capitalized or dotted ones are components."""
    return ":" in tag or ("." not in tag and tag[0].islower())
