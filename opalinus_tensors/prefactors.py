"""Scalar prefactor sources evaluated at query points."""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol, runtime_checkable

import numpy as np


@dataclass(frozen=True, eq=False)
class QueryPoint:
    """A quadrature point: its global coordinates plus element and qp indices."""
    coordinates: Any
    element: int = 0
    qp: int = 0

    def __post_init__(self):
        coordinates = np.array(self.coordinates, dtype=float).reshape(-1)
        coordinates.setflags(write=False)
        object.__setattr__(self, 'coordinates', coordinates)


@dataclass(frozen=True)
class EvaluationState:
    """Time/iteration marker handed through to prefactor functions untouched."""
    time: float = 0.0
    step: str = "current"


@runtime_checkable
class PointScalarSource(Protocol):
    def evaluate(self, point: QueryPoint, state: EvaluationState) -> float:
        ...


class FunctionPrefactor:
    """Analytic prefactor, func(coordinates, state) -> float."""

    def __init__(self, func: Callable[[np.ndarray, EvaluationState], float]):
        if not callable(func):
            raise TypeError("func must be callable")
        self.func = func

    def evaluate(self, point, state):
        return float(self.func(point.coordinates, state))


class ConstantPrefactor:
    def __init__(self, value):
        self.value = float(value)

    def evaluate(self, point, state):
        return self.value


class MaterialPropertyPrefactor:
    """
    Precomputed scalar property looked up at the query point.

    1-D values are indexed by the qp index, 2-D values by [element, qp].
    """

    def __init__(self, values):
        self.update(values)

    def update(self, values):
        """Replace the stored values, e.g. after the property was recomputed."""
        values = np.array(values, dtype=float)
        if values.ndim not in (1, 2):
            raise ValueError("values must be a 1-D (qp) or 2-D (element, qp) array")
        self.values = values

    def evaluate(self, point, state):
        if self.values.ndim == 1:
            return float(self.values[point.qp])
        return float(self.values[point.element, point.qp])


def combined_prefactor(functor: Optional[PointScalarSource],
                       mat_prop: Optional[PointScalarSource],
                       point: QueryPoint,
                       state: EvaluationState) -> Optional[float]:
    """
    Product of the configured prefactor sources at a point.

    Returns None when neither source is configured. The property source is not
    consulted once the functor value is exactly zero.
    """
    if functor is None and mat_prop is None:
        return None

    f = functor.evaluate(point, state) if functor is not None else 1.0

    if mat_prop is not None and f != 0.0:
        f *= mat_prop.evaluate(point, state)
    return f


def as_point_scalar_source(source):
    """Wrap plain numbers and callables so they can be used as prefactor sources."""
    if source is None or isinstance(source, PointScalarSource):
        return source
    if isinstance(source, (int, float, np.number)):
        return ConstantPrefactor(source)
    if callable(source):
        return FunctionPrefactor(source)
    raise TypeError(f"Cannot use {type(source).__name__} as a prefactor, "
                    "expected an object with evaluate(point, state), a number or a callable")
