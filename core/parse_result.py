"""
Explicit success/failure values returned by the date and time parsers
"""

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    reason: str

    @property
    def ok(self) -> bool:
        return False


ParseResult = Union[Success, Failure]
