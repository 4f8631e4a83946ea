"""
Membership function shapes for the fuzzy brake controller
"""

from dataclasses import dataclass
from typing import Any, Dict, Union


@dataclass(frozen=True)
class Triangular:
    """Triangular membership function with feet at a and c and peak at b"""

    name: str
    a: float
    b: float
    c: float

    def degree(self, x: float) -> float:
        """
        Degree of membership of x

        A degenerate side (a == b or b == c) evaluates to the peak value at the
        shared breakpoint, so shoulders such as (0, 0, 4) are 1 at x = 0.

        Args:
            x: Crisp input value

        Returns:
            Membership degree in [0, 1]
        """
        if x < self.a or x > self.c:
            return 0.0
        if x == self.b:
            return 1.0
        if x < self.b:
            return (x - self.a) / (self.b - self.a)
        return (self.c - x) / (self.c - self.b)

    def is_monotonic(self) -> bool:
        return self.a <= self.b <= self.c

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "type": "tri", "params": [self.a, self.b, self.c]}


@dataclass(frozen=True)
class Trapezoidal:
    """Trapezoidal membership function, 1 on the plateau [b, c]"""

    name: str
    a: float
    b: float
    c: float
    d: float

    def degree(self, x: float) -> float:
        """
        Degree of membership of x

        Args:
            x: Crisp input value

        Returns:
            Membership degree in [0, 1]
        """
        if x < self.a or x > self.d:
            return 0.0
        if self.b <= x <= self.c:
            return 1.0
        if x < self.b:
            return (x - self.a) / (self.b - self.a)
        return (self.d - x) / (self.d - self.c)

    def is_monotonic(self) -> bool:
        return self.a <= self.b <= self.c <= self.d

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": "trap",
            "params": [self.a, self.b, self.c, self.d],
        }


MembershipFunction = Union[Triangular, Trapezoidal]


def membership_from_dict(data: Dict[str, Any]) -> MembershipFunction:
    """
    Build a membership function from its dictionary form

    Args:
        data: Mapping with "name", "type" ("tri" or "trap") and "params"

    Returns:
        Triangular or Trapezoidal membership function
    """
    kind = data.get("type")
    params = [float(p) for p in data.get("params", [])]
    name = str(data["name"])

    if kind == "tri":
        if len(params) != 3:
            raise ValueError(f"Triangular function '{name}' needs 3 parameters, got {len(params)}")
        return Triangular(name, *params)
    if kind == "trap":
        if len(params) != 4:
            raise ValueError(f"Trapezoidal function '{name}' needs 4 parameters, got {len(params)}")
        return Trapezoidal(name, *params)
    raise ValueError(f"Unknown membership function type '{kind}' for '{name}'")
