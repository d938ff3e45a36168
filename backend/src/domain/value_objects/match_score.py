"""
MatchScore Value Object
Candidate/job fit estimate stored on applications (0-100)
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class MatchScore:
    """AI match score value object - immutable"""

    value: int

    def __post_init__(self):
        """Validate match score range"""
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError("Match score must be an integer")

        if not 0 <= self.value <= 100:
            raise ValueError("Match score must be between 0 and 100")

    def __str__(self) -> str:
        return f"{self.value}/100"

    def __repr__(self) -> str:
        return f"MatchScore({self.value})"
