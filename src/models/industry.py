"""Industry categories offered for safety training."""
from enum import Enum
from typing import List


class Industry(str, Enum):
    """Closed set of industry categories."""

    CONSTRUCTION = "건설업"
    MANUFACTURING = "제조업"
    SERVICE = "서비스업"
    PUBLIC = "공공기관"

    def __str__(self) -> str:
        return self.value


INDUSTRIES: List[Industry] = list(Industry)
