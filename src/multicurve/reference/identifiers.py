"""
External identifiers for conventions, securities and market data.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple, Union


@dataclass(frozen=True, order=True)
class ExternalId:
    """
    A scheme-qualified identifier, e.g. ``ExternalId("CONVENTION", "USD Deposit")``.

    Attributes:
        scheme: Identification scheme
        value: Identifier within the scheme
    """
    scheme: str
    value: str

    @classmethod
    def of(cls, scheme: str, value: str) -> "ExternalId":
        return cls(scheme, value)

    @classmethod
    def parse(cls, text: str) -> "ExternalId":
        """Parse the ``scheme~value`` form."""
        scheme, sep, value = text.partition("~")
        if not sep or not scheme or not value:
            raise ValueError(f"Invalid external id: {text}")
        return cls(scheme, value)

    def to_bundle(self) -> "ExternalIdBundle":
        return ExternalIdBundle((self,))

    def __str__(self) -> str:
        return f"{self.scheme}~{self.value}"


@dataclass(frozen=True)
class ExternalIdBundle:
    """An unordered set of identifiers that all refer to the same object."""
    ids: Tuple[ExternalId, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "ids", tuple(sorted(set(self.ids))))

    @classmethod
    def of(cls, *ids: Union[ExternalId, Iterable[ExternalId]]) -> "ExternalIdBundle":
        flat = []
        for item in ids:
            if isinstance(item, ExternalId):
                flat.append(item)
            else:
                flat.extend(item)
        return cls(tuple(flat))

    def __iter__(self):
        return iter(self.ids)

    def __contains__(self, identifier: ExternalId) -> bool:
        return identifier in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def __str__(self) -> str:
        return "Bundle[" + ", ".join(str(i) for i in self.ids) + "]"


__all__ = ["ExternalId", "ExternalIdBundle"]
