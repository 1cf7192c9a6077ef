"""Lifting of elementary functions to dual numbers.

Any unary function ``h`` with a known derivative ``dh`` acts on duals through
the chain rule::

    lift(h, dh)(Dual(a, d)) == Dual(h(a), dh(a) * d)

:func:`lift` builds such a function without touching the dual types, and
:func:`register_elementary` additionally records it in a registry so that
``np.<ufunc>(dual)`` and ``dual.<name>()`` find it. Each name (and each
NumPy ufunc) maps to exactly one rule.

Warning:
    The pair ``(h, dh)`` is trusted as given. If ``dh`` is not the
    derivative of ``h``, every derivative computed through it is silently
    wrong; no check is (or can be) made at registration time.

Examples:
    Registering a new function:

        >>> import numpy as np
        >>> from dualkit.dual.elementary import register_elementary
        >>> softplus = register_elementary(
        ...     "softplus",
        ...     lambda x: np.log1p(np.exp(x)),
        ...     lambda x: 1.0 / (1.0 + np.exp(-x)),
        ... )
        >>> # softplus(Dual.variable(0.0)).derivative == 0.5  # doctest: +SKIP

Notes:
    - Names are case/spacing/punctuation insensitive, as are aliases.
    - For the canonical names available at runtime, call
      ``available_elementary()``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable, Iterable, Mapping

import numpy as np

from dualkit.dual.base import DualBase
from dualkit.errors import UnsupportedOperationError
from dualkit.logger import dualkit_logger

__all__ = [
    "ElementaryFunction",
    "lift",
    "register_elementary",
    "get_elementary",
    "find_elementary",
    "rule_for_ufunc",
    "available_elementary",
    "sin", "cos", "tan",
    "exp", "expm1", "log", "log1p", "log2", "log10",
    "sqrt", "cbrt",
    "sinh", "cosh", "tanh",
    "arcsin", "arccos", "arctan",
    "arcsinh", "arccosh", "arctanh",
]


@dataclass(frozen=True)
class ElementaryFunction:
    """A registered elementary function and its chain-rule lifting.

    Attributes:
        name: Canonical name.
        function: Plain value-level function ``h``.
        derivative: Plain value-level derivative ``dh``.
        lifted: Callable accepting plain numbers and duals.
        ufunc: NumPy ufunc dispatching to this rule, if any.
        aliases: Additional accepted names.
    """

    name: str
    function: Callable[[Any], Any]
    derivative: Callable[[Any], Any]
    lifted: Callable[[Any], Any]
    ufunc: np.ufunc | None = None
    aliases: tuple[str, ...] = ()


def lift(
    function: Callable[[Any], Any],
    derivative: Callable[[Any], Any],
    *,
    name: str | None = None,
) -> Callable[[Any], Any]:
    """Lifts a unary function to dual numbers via the chain rule.

    The returned callable maps a dual ``f`` to
    ``type(f)(function(f.value), derivative(f.value) * tangent)`` and passes
    anything else straight to ``function``.

    Args:
        function: Value-level function ``h``.
        derivative: Value-level derivative ``dh``. Must be the true
            derivative of ``function``; this is not checked.
        name: Name given to the returned callable. Defaults to
            ``function.__name__``.

    Returns:
        The lifted function.
    """
    label = name or getattr(function, "__name__", "lifted")

    def lifted(x):
        if isinstance(x, DualBase):
            value = x.value
            return x._chain(function(value), derivative(value))
        return function(x)

    lifted.__name__ = label
    lifted.__qualname__ = label
    lifted.__doc__ = f"Chain-rule lifting of {label!r} to dual numbers."
    return lifted


_ELEMENTARY_SPECS: list[ElementaryFunction] = []


def _norm(s: str) -> str:
    """Normalize a function name for robust matching (case/spacing/punct insensitive).

    Args:
        s: Input string.

    Returns:
        Normalized string.
    """
    return re.sub(r"[^a-z0-9]+", "", s.lower())


@lru_cache(maxsize=1)
def _rule_maps() -> tuple[
    Mapping[str, ElementaryFunction],
    Mapping[np.ufunc, ElementaryFunction],
    tuple[str, ...],
]:
    """Construct and cache lookup tables for registered elementary functions.

    Returns:
        A tuple ``(name_map, ufunc_map, canonical_names)`` where ``name_map``
        maps normalized names and aliases to rules, ``ufunc_map`` maps NumPy
        ufuncs to rules and ``canonical_names`` lists the sorted canonical names.
    """
    name_map: dict[str, ElementaryFunction] = {}
    ufunc_map: dict[np.ufunc, ElementaryFunction] = {}
    for rule in _ELEMENTARY_SPECS:
        for label in (rule.name, *rule.aliases):
            name_map[_norm(label)] = rule
        if rule.ufunc is not None:
            ufunc_map[rule.ufunc] = rule
    canonical = tuple(sorted(rule.name for rule in _ELEMENTARY_SPECS))
    return name_map, ufunc_map, canonical


def register_elementary(
    name: str,
    function: Callable[[Any], Any],
    derivative: Callable[[Any], Any],
    *,
    ufunc: np.ufunc | None = None,
    aliases: Iterable[str] = (),
) -> Callable[[Any], Any]:
    """Register a new elementary function for dual numbers.

    The dual types are not modified; the registry is consulted by
    ``np.<ufunc>(dual)``, ``dual.<name>()`` and :func:`get_elementary`.

    Args:
        name: Canonical public name (e.g. "erf").
        function: Value-level function ``h``.
        derivative: Value-level derivative ``dh`` (trusted, not verified).
        ufunc: Optional unary NumPy ufunc that should dispatch to this rule.
        aliases: Additional accepted spellings.

    Returns:
        The lifted function.

    Raises:
        ValueError: If the name, an alias or the ufunc is already registered,
            or if the ufunc is not unary.
    """
    aliases = tuple(aliases)
    name_map, ufunc_map, _ = _rule_maps()
    for label in (name, *aliases):
        key = _norm(label)
        if not key:
            raise ValueError(f"Invalid elementary function name {label!r}.")
        if key in name_map:
            raise ValueError(
                f"Elementary function {label!r} is already registered "
                f"(as {name_map[key].name!r})."
            )
    if ufunc is not None:
        if ufunc.nin != 1 or ufunc.nout != 1:
            raise ValueError(f"ufunc {ufunc.__name__!r} must be unary.")
        if ufunc in ufunc_map:
            raise ValueError(
                f"ufunc {ufunc.__name__!r} already dispatches to {ufunc_map[ufunc].name!r}."
            )

    lifted = lift(function, derivative, name=name)
    _ELEMENTARY_SPECS.append(
        ElementaryFunction(name, function, derivative, lifted, ufunc, aliases)
    )
    _rule_maps.cache_clear()
    dualkit_logger.debug("Registered elementary function %r.", name)
    return lifted


def find_elementary(name: str) -> Callable[[Any], Any] | None:
    """Returns the lifted function registered under ``name``, or None."""
    name_map, _, _ = _rule_maps()
    rule = name_map.get(_norm(name))
    return None if rule is None else rule.lifted


def get_elementary(name: str) -> Callable[[Any], Any]:
    """Returns the lifted function registered under ``name``.

    Raises:
        UnsupportedOperationError: If no function is registered under ``name``.
    """
    lifted = find_elementary(name)
    if lifted is None:
        opts = ", ".join(available_elementary())
        raise UnsupportedOperationError(
            f"No dual rule registered for {name!r}. Choose one of {{{opts}}} "
            "or add it with register_elementary()."
        )
    return lifted


def rule_for_ufunc(ufunc: np.ufunc) -> ElementaryFunction:
    """Returns the rule a NumPy ufunc dispatches to on dual arguments.

    Raises:
        UnsupportedOperationError: If the ufunc has no registered rule.
    """
    _, ufunc_map, _ = _rule_maps()
    try:
        return ufunc_map[ufunc]
    except KeyError:
        raise UnsupportedOperationError(
            f"numpy.{ufunc.__name__} has no dual-number rule; register one with "
            "register_elementary(..., ufunc=...)."
        ) from None


def available_elementary() -> list[str]:
    """List canonical names of the registered elementary functions.

    Returns:
        List of names.
    """
    _, _, canon = _rule_maps()
    return list(canon)


_LN2 = np.log(2.0)
_LN10 = np.log(10.0)

# (name, function, derivative, aliases); the ufunc is the numpy function itself.
_BUILTIN_SPECS = [
    ("sin", np.sin, np.cos, ()),
    ("cos", np.cos, lambda x: -np.sin(x), ()),
    ("tan", np.tan, lambda x: 1.0 / np.cos(x) ** 2, ()),
    ("exp", np.exp, np.exp, ()),
    ("expm1", np.expm1, np.exp, ()),
    ("log", np.log, lambda x: 1.0 / x, ("ln",)),
    ("log1p", np.log1p, lambda x: 1.0 / (1.0 + x), ()),
    ("log2", np.log2, lambda x: 1.0 / (x * _LN2), ()),
    ("log10", np.log10, lambda x: 1.0 / (x * _LN10), ()),
    ("sqrt", np.sqrt, lambda x: 0.5 / np.sqrt(x), ()),
    ("cbrt", np.cbrt, lambda x: 1.0 / (3.0 * np.cbrt(x) ** 2), ()),
    ("sinh", np.sinh, np.cosh, ()),
    ("cosh", np.cosh, np.sinh, ()),
    ("tanh", np.tanh, lambda x: 1.0 - np.tanh(x) ** 2, ()),
    ("arcsin", np.arcsin, lambda x: 1.0 / np.sqrt(1.0 - x * x), ("asin",)),
    ("arccos", np.arccos, lambda x: -1.0 / np.sqrt(1.0 - x * x), ("acos",)),
    ("arctan", np.arctan, lambda x: 1.0 / (1.0 + x * x), ("atan",)),
    ("arcsinh", np.arcsinh, lambda x: 1.0 / np.sqrt(x * x + 1.0), ("asinh",)),
    ("arccosh", np.arccosh, lambda x: 1.0 / np.sqrt(x * x - 1.0), ("acosh",)),
    ("arctanh", np.arctanh, lambda x: 1.0 / (1.0 - x * x), ("atanh",)),
]

for _name, _function, _derivative, _aliases in _BUILTIN_SPECS:
    register_elementary(_name, _function, _derivative, ufunc=_function, aliases=_aliases)

sin = get_elementary("sin")
cos = get_elementary("cos")
tan = get_elementary("tan")
exp = get_elementary("exp")
expm1 = get_elementary("expm1")
log = get_elementary("log")
log1p = get_elementary("log1p")
log2 = get_elementary("log2")
log10 = get_elementary("log10")
sqrt = get_elementary("sqrt")
cbrt = get_elementary("cbrt")
sinh = get_elementary("sinh")
cosh = get_elementary("cosh")
tanh = get_elementary("tanh")
arcsin = get_elementary("arcsin")
arccos = get_elementary("arccos")
arctan = get_elementary("arctan")
arcsinh = get_elementary("arcsinh")
arccosh = get_elementary("arccosh")
arctanh = get_elementary("arctanh")
