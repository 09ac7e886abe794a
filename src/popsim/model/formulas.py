"""Expression-string formulas compiled with sympy."""

from typing import Any, Callable, Dict, Iterable, Tuple

import sympy as sp

from ..exceptions import ModelDefinitionError

TIME_NAME = "t"
"""Name under which formulas see the current time."""


class ExpressionFormula:
    """
    Formula given as text, e.g. ``"g*x*(1 - x/k)"``.

    The text is parsed once with sympy. Names the model knows about are
    forced to plain symbols so that model variables such as ``gamma`` or
    ``E`` are not mistaken for sympy's special functions and constants.
    The parsed expression is compiled lazily with ``sympy.lambdify`` for
    each evaluation backend that asks for it ("numpy" or "jax").
    """

    def __init__(self, text: str, known_names: Iterable[str] = ()):
        self.text = str(text)
        local_dict = {name: sp.Symbol(name) for name in known_names}
        local_dict[TIME_NAME] = sp.Symbol(TIME_NAME)

        try:
            expr = sp.parse_expr(self.text, local_dict=local_dict)
        except Exception as e:
            raise ModelDefinitionError(f"Cannot parse formula '{self.text}': {e}") from e
        if not isinstance(expr, sp.Expr):
            raise ModelDefinitionError(
                f"Formula '{self.text}' is not a scalar expression (got {type(expr).__name__})"
            )

        self.expr = expr
        self.symbols: Tuple[sp.Symbol, ...] = tuple(
            sorted(expr.free_symbols, key=lambda s: s.name)
        )
        self._compiled: Dict[str, Callable[..., Any]] = {}

    @property
    def references(self) -> Tuple[str, ...]:
        """Names the expression reads, in argument order."""
        return tuple(s.name for s in self.symbols)

    def compile(self, backend: str = "numpy") -> Callable[..., Any]:
        fn = self._compiled.get(backend)
        if fn is None:
            fn = sp.lambdify(self.symbols, self.expr, modules=backend)
            self._compiled[backend] = fn
        return fn

    def __call__(self, values, t):
        fn = self.compile(getattr(values, "backend", "numpy"))
        args = [t if name == TIME_NAME else values[name] for name in self.references]
        return fn(*args)

    def __repr__(self) -> str:
        return f"ExpressionFormula({self.text!r})"
