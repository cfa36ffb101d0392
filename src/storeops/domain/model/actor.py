"""The staff member performing an operation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    ADMIN = "admin"
    COLLABORATOR = "colaborador"


PRIVILEGED_ROLES = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class Actor:
    username: str
    role: Role

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES
