from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence, Union

from ...fields.model import CalculationConfig

Result = Union[int, float]
Resolver = Callable[[str], Any]


class Calculator(ABC):
    """Calculator interface (Strategy Pattern per calculation type).

    ``operands`` are the raw values of ``config.target_fields`` in order;
    ``resolve`` looks up any field value by id. Returning None means the
    inputs are incomplete and the result field must be left untouched.
    """

    @abstractmethod
    def compute(self, config: CalculationConfig, operands: Sequence[Any], resolve: Resolver) -> Optional[Result]:
        raise NotImplementedError
