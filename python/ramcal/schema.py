"""
Parameter schema shared by the sampler output and every summary artifact.

A schema is an ordered list of parameter names. Position ``i`` in a parameter
vector, in a chain column and in every written table always refers to
``schema.names[i]``.

Example:
    >>> from ramcal.schema import ParameterSchema
    >>> schema = ParameterSchema(["climate_sensitivity", "ocean_diffusivity"])
    >>> schema.index("ocean_diffusivity")
    1
    >>> list(schema.items())
    [('climate_sensitivity', 0), ('ocean_diffusivity', 1)]
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any

import numpy as np
from numpy.typing import NDArray

from .exceptions import ValidationError

__all__ = ["ParameterSchema"]


class ParameterSchema:
    """
    Ordered, validated parameter names.

    Parameters
    ----------
    names
        Parameter names in the order used by the log-posterior.

    Raises
    ------
    ValidationError
        If no names are given, a name is blank, or a name is repeated.
    """

    def __init__(self, names: Iterable[str]) -> None:
        names = tuple(str(name) for name in names)
        if not names:
            msg = "A parameter schema needs at least one parameter name"
            raise ValidationError(msg)

        blank = [i for i, name in enumerate(names) if not name.strip()]
        if blank:
            msg = f"Blank parameter names at positions {blank}"
            raise ValidationError(msg)

        seen: set[str] = set()
        duplicates = []
        for name in names:
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        if duplicates:
            msg = f"Duplicate parameter names: {', '.join(duplicates)}"
            raise ValidationError(msg)

        self._names = names
        self._index = {name: i for i, name in enumerate(names)}

    @property
    def names(self) -> list[str]:
        """Parameter names in order."""
        return list(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParameterSchema):
            return NotImplemented
        return self._names == other._names

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"ParameterSchema({list(self._names)!r})"

    def items(self) -> Iterator[tuple[str, int]]:
        """Iterate over ``(name, index)`` pairs."""
        return iter(self._index.items())

    def index(self, name: str) -> int:
        """
        Get the position of a parameter.

        Raises
        ------
        KeyError
            If the name is not part of the schema.
        """
        try:
            return self._index[name]
        except KeyError:
            msg = f"Unknown parameter '{name}'. Known parameters: {self.names}"
            raise KeyError(msg) from None

    def validate_vector(self, values: Any) -> NDArray[np.float64]:
        """
        Convert ``values`` to a float vector matching this schema.

        Parameters
        ----------
        values
            Array-like of length ``len(self)``.

        Returns
        -------
        NDArray[np.float64]
            A new 1-D float array.

        Raises
        ------
        ValidationError
            If the shape does not match the schema.
        """
        vector = np.array(values, dtype=float, copy=True)
        if vector.ndim != 1 or vector.shape[0] != len(self):
            msg = (
                f"Expected a vector of {len(self)} parameters, "
                f"got an array of shape {vector.shape}"
            )
            raise ValidationError(msg)
        return vector

    def validate_columns(self, n_columns: int) -> None:
        """Check that a table with ``n_columns`` columns can be labelled."""
        if n_columns != len(self):
            msg = (
                f"Cannot label {n_columns} columns with a schema of "
                f"{len(self)} parameters"
            )
            raise ValidationError(msg)

    @classmethod
    def default(cls, n_params: int) -> ParameterSchema:
        """Build a schema with placeholder names ``theta_0 ... theta_{n-1}``."""
        return cls(f"theta_{i}" for i in range(n_params))
