"""Core model: named state, formulas and derivative bindings."""

import numbers
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..exceptions import (
    CyclicFormulaError,
    ModelDefinitionError,
    UnresolvedReferenceError,
)
from .formulas import TIME_NAME, ExpressionFormula

Formula = Union[Callable[[Any, Any], Any], ExpressionFormula, float]


class EvaluationScope:
    """
    Name lookup for a single evaluation of a model at ``(time, state)``.

    Indexing a scope resolves, in order: time (``"t"``), state variables,
    then formulas. Formula results are memoised for the lifetime of the
    scope, so each formula runs at most once per evaluation no matter how
    many other formulas read it. The names currently being computed are
    kept on a stack to detect cycles.
    """

    def __init__(
        self,
        model: "Model",
        time: Any,
        state: Mapping[str, Any],
        backend: str = "numpy",
    ):
        self.model = model
        self.time = time
        self.state = state
        self.backend = backend
        self._cache: Dict[str, Any] = {}
        self._stack: List[str] = []

    def __contains__(self, name: str) -> bool:
        return name == TIME_NAME or name in self.state or name in self.model.formulas

    def __getitem__(self, name: str) -> Any:
        if name == TIME_NAME:
            return self.time
        if name in self.state:
            return self.state[name]
        if name in self._cache:
            return self._cache[name]

        formula = self.model.formulas.get(name)
        if formula is None:
            referenced_by = self._stack[-1] if self._stack else None
            raise UnresolvedReferenceError(name, referenced_by)
        if name in self._stack:
            cycle = self._stack[self._stack.index(name):] + [name]
            raise CyclicFormulaError(cycle)

        self._stack.append(name)
        try:
            value = formula(self, self.time) if callable(formula) else formula
        finally:
            self._stack.pop()

        self._cache[name] = value
        return value


class Model:
    """
    ODE model made of named state variables and formulas.

    Args:
        initials: State-variable name -> value at the start of a run.
        formulas: Variable name -> formula. A formula is a callable
            ``f(values, t)``, an expression string parsed with sympy, or a
            plain number (a constant parameter).
        derivatives: Derivative (formula) name -> state variable it
            integrates, e.g. ``{"velocity": "x"}``.
        captures: Names recorded at each sample. Defaults to the state
            variables.
        name: Label used in logs and output file names.

    Raises:
        UnresolvedReferenceError: A derivative, capture or expression string
            references an unknown name.
        ModelDefinitionError: Structural problems such as a name that is both
            a state variable and a formula.
    """

    def __init__(
        self,
        initials: Mapping[str, float],
        formulas: Mapping[str, Any],
        derivatives: Mapping[str, str],
        captures: Optional[Sequence[str]] = None,
        name: str = "model",
    ):
        self.name = name
        self.initials: Dict[str, float] = {k: float(v) for k, v in initials.items()}
        self.state: Dict[str, float] = dict(self.initials)
        self.derivatives: Dict[str, str] = dict(derivatives)
        self._check_names(formulas)
        self.formulas: Dict[str, Formula] = self._build_formulas(formulas)
        self.captures: Tuple[str, ...] = (
            tuple(captures) if captures is not None else tuple(self.initials)
        )
        self._validate()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _check_names(self, formulas: Mapping[str, Any]) -> None:
        if TIME_NAME in self.initials or TIME_NAME in formulas:
            raise ModelDefinitionError(f"'{TIME_NAME}' is reserved for time")
        clashes = sorted(set(self.initials) & set(formulas))
        if clashes:
            raise ModelDefinitionError(
                f"Names defined both as state variables and formulas: {clashes}"
            )

    def _build_formulas(self, formulas: Mapping[str, Any]) -> Dict[str, Formula]:
        known_names = set(self.initials) | set(formulas)
        built: Dict[str, Formula] = {}
        for name, formula in formulas.items():
            if isinstance(formula, str):
                built[name] = ExpressionFormula(formula, known_names)
            elif isinstance(formula, numbers.Real) and not isinstance(formula, bool):
                built[name] = float(formula)
            elif callable(formula):
                built[name] = formula
            else:
                raise ModelDefinitionError(
                    f"Formula '{name}' must be a callable, a number or an expression "
                    f"string, got {type(formula).__name__}"
                )
        return built

    def _validate(self) -> None:
        for derivative, target in self.derivatives.items():
            if derivative not in self.formulas:
                raise UnresolvedReferenceError(derivative, "derivatives")
            if target not in self.initials:
                raise UnresolvedReferenceError(target, f"derivatives[{derivative!r}]")

        for name, formula in self.formulas.items():
            if isinstance(formula, ExpressionFormula):
                for ref in formula.references:
                    if ref != TIME_NAME and ref not in self.initials and ref not in self.formulas:
                        raise UnresolvedReferenceError(ref, name)

        if len(set(self.captures)) != len(self.captures):
            raise ModelDefinitionError(f"Duplicate names in captures: {list(self.captures)}")
        for name in self.captures:
            if name not in self.initials and name not in self.formulas:
                raise UnresolvedReferenceError(name, "captures")

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    @property
    def state_names(self) -> Tuple[str, ...]:
        return tuple(self.initials)

    def scope(
        self,
        time: Any,
        state: Optional[Mapping[str, Any]] = None,
        backend: str = "numpy",
    ) -> EvaluationScope:
        """Create a fresh evaluation scope (empty memo cache)."""
        return EvaluationScope(self, time, self.state if state is None else state, backend)

    def evaluate(
        self, time: float, state: Optional[Mapping[str, float]] = None
    ) -> Dict[str, float]:
        """
        Evaluate every formula at ``time``.

        Args:
            time: Time at which to evaluate
            state: State to evaluate against (defaults to ``self.state``)

        Returns:
            Mapping from every formula name to its value

        Raises:
            UnresolvedReferenceError: A formula reads an unknown name
            CyclicFormulaError: Formulas depend on each other in a cycle
        """
        scope = self.scope(time, state)
        return {name: float(scope[name]) for name in self.formulas}

    def derivative_vector(
        self, time: float, state: Optional[Mapping[str, float]] = None
    ) -> List[Tuple[str, float]]:
        """Pair every derivative's value with the state variable it integrates."""
        scope = self.scope(time, state)
        return [
            (target, float(scope[derivative]))
            for derivative, target in self.derivatives.items()
        ]

    def rates(
        self, time: Any, state: Mapping[str, Any], backend: str = "numpy"
    ) -> Dict[str, Any]:
        """
        Rate of change of every state variable.

        Derivatives bound to the same state variable add up; state variables
        with no derivative get a zero rate.
        """
        scope = self.scope(time, state, backend)
        rates: Dict[str, Any] = {name: 0.0 for name in self.initials}
        for derivative, target in self.derivatives.items():
            rates[target] = rates[target] + scope[derivative]
        return rates

    def capture(
        self, time: float, state: Optional[Mapping[str, float]] = None
    ) -> Dict[str, float]:
        """Values of the captured variables at ``(time, state)``."""
        scope = self.scope(time, state)
        return {name: float(scope[name]) for name in self.captures}

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_model_info(self) -> Dict[str, Any]:
        """Summary of the model's structure (used in run summaries)."""

        def describe(formula: Formula) -> Any:
            if isinstance(formula, ExpressionFormula):
                return formula.text
            if callable(formula):
                return f"<callable {getattr(formula, '__name__', type(formula).__name__)}>"
            return formula

        return {
            "name": self.name,
            "initials": dict(self.initials),
            "formulas": {name: describe(f) for name, f in self.formulas.items()},
            "derivatives": dict(self.derivatives),
            "captures": list(self.captures),
        }

    def __repr__(self) -> str:
        return (
            f"Model(name={self.name!r}, state={list(self.initials)}, "
            f"formulas={list(self.formulas)}, captures={list(self.captures)})"
        )
