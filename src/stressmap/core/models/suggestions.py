"""
Module: suggestions

Purpose:
    Provides the Suggestion dataclass - an immutable, named remediation
    action looked up by canonical region id.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Suggestion:
    """
    Named remediation action.

    Attributes:
        name: Short title ("Chin Tucks")
        description: One or two sentence instruction
    """

    name: str
    description: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("suggestion name cannot be empty")

    def to_dict(self) -> dict:
        return {"name": self.name, "description": self.description}
