"""
Operation catalogue.

The set of operations is closed: two primitives that carry no data and four
derived operations that each capture their right-hand operand when built.

    Increment, Decrement            primitives
    Add, Subtract, Multiply, Divide derived, capture ``operand``

Operations only describe work.  The engine decides how to carry it out, by
matching on the variant, so adding a variant means extending that match.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from values import Value


@dataclass(frozen=True)
class Increment:

    def render(self) -> str:
        return "Increment"


@dataclass(frozen=True)
class Decrement:

    def render(self) -> str:
        return "Decrement"


# -- derived ------------------------------------------------------------------

@dataclass(frozen=True)
class Add:
    operand: Value

    def render(self) -> str:
        return f"Add({self.operand.render()})"


@dataclass(frozen=True)
class Subtract:
    operand: Value

    def render(self) -> str:
        return f"Subtract({self.operand.render()})"


@dataclass(frozen=True)
class Multiply:
    operand: Value

    def render(self) -> str:
        return f"Multiply({self.operand.render()})"


@dataclass(frozen=True)
class Divide:
    operand: Value

    def render(self) -> str:
        return f"Divide({self.operand.render()})"


Operation = Union[Increment, Decrement, Add, Subtract, Multiply, Divide]

INCREMENT = Increment()
DECREMENT = Decrement()
