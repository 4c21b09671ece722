"""Partial-update structures for users, networks and validators.

A patch field left as ``UNSET`` means "no change". Any other value, including
an empty string or zero, is applied and then validated by the owning service.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, List


class _Unset:
    """Marker for a field the caller did not provide."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass
class _Patch:

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """Build a patch from provided keys only. ``None`` counts as not provided."""
        names = {f.name for f in fields(cls)}
        return cls(**{
            key: value for key, value in data.items()
            if key in names and value is not None
        })

    def provided(self) -> Dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def apply(self, target) -> List[str]:
        """Copy provided values onto ``target``; returns the names that changed."""
        changed = []
        for name, value in self.provided().items():
            if getattr(target, name) != value:
                setattr(target, name, value)
                changed.append(name)
        return changed


@dataclass
class UserPatch(_Patch):
    name: Any = UNSET
    email: Any = UNSET
    role: Any = UNSET
    company: Any = UNSET
    is_active: Any = UNSET


@dataclass
class NetworkPatch(_Patch):
    name: Any = UNSET
    description: Any = UNSET
    status: Any = UNSET
    node_count: Any = UNSET
    deployment_type: Any = UNSET


@dataclass
class ValidatorPatch(_Patch):
    name: Any = UNSET
    power: Any = UNSET
    address: Any = UNSET
    pub_key: Any = UNSET
    status: Any = UNSET
