"""
Read-only lookup services consumed by curve construction.

Provides:
- ConventionSource: conventions by identifier, kind and version date
- SecuritySource: securities by identifier bundle
- HolidaySource: region and currency holiday calendars
- MarketDataSource: one scalar quote per market data identifier
- ConfigurationSource: curve construction configurations and curve definitions

Each lookup raises the matching not-found error from ``multicurve.errors``.
In-memory implementations are provided for tests and small deployments;
they are populated up front and only read during a calibration.
"""

from abc import ABC, abstractmethod
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Type, Union
import logging

import pandas as pd

from ..dates import HolidayCalendar, WEEKEND_CALENDAR
from ..errors import (
    ConfigurationNotFoundError,
    ConventionNotFoundError,
    MissingMarketDataError,
    SecurityNotFoundError,
)
from .conventions import FinancialConvention
from .identifiers import ExternalId, ExternalIdBundle
from .securities import Security

logger = logging.getLogger(__name__)

IdLike = Union[ExternalId, ExternalIdBundle]


def _ids(identifier: IdLike) -> Tuple[ExternalId, ...]:
    if isinstance(identifier, ExternalId):
        return (identifier,)
    return tuple(identifier)


class ConventionSource(ABC):
    """Convention lookup."""

    @abstractmethod
    def get_convention(
        self,
        identifier: IdLike,
        kind: Type[FinancialConvention] = FinancialConvention,
        as_of: Optional[datetime] = None
    ) -> FinancialConvention:
        """
        Get the convention registered under an identifier.

        Args:
            identifier: Convention id or bundle
            kind: Expected convention class
            as_of: Version date; latest version when None

        Raises:
            ConventionNotFoundError: If nothing of the expected kind is registered
        """


class SecuritySource(ABC):
    """Security lookup."""

    @abstractmethod
    def get_security(self, identifier: IdLike) -> Security:
        """Raises SecurityNotFoundError when absent."""


class HolidaySource(ABC):
    """Holiday calendar lookup."""

    @abstractmethod
    def region_calendar(self, region: Optional[ExternalId]) -> HolidayCalendar:
        pass

    @abstractmethod
    def currency_calendar(self, currency: str) -> HolidayCalendar:
        pass


class MarketDataSource(ABC):
    """Market data lookup."""

    @abstractmethod
    def get_quote(self, identifier: ExternalId) -> float:
        """Raises MissingMarketDataError when absent."""


class ConfigurationSource(ABC):
    """Curve construction configuration and curve definition lookup."""

    @abstractmethod
    def get_configuration(self, name: str):
        """Raises ConfigurationNotFoundError when absent."""

    @abstractmethod
    def get_curve_definition(self, name: str):
        """Raises ConfigurationNotFoundError when absent."""


class InMemoryConventionSource(ConventionSource):
    """
    Versioned in-memory convention store.

    Every convention is indexed under each of its external ids. Versions are
    ordered by their ``valid_from`` time; a lookup returns the latest version
    valid at ``as_of``.
    """

    def __init__(self, conventions: Iterable[FinancialConvention] = ()):
        self._versions: Dict[ExternalId, List[Tuple[datetime, FinancialConvention]]] = defaultdict(list)
        for convention in conventions:
            self.add(convention)

    def add(self, convention: FinancialConvention, valid_from: Optional[datetime] = None) -> None:
        valid_from = valid_from or datetime.min
        for identifier in convention.external_ids:
            versions = self._versions[identifier]
            versions.append((valid_from, convention))
            versions.sort(key=lambda item: item[0])

    def get_convention(
        self,
        identifier: IdLike,
        kind: Type[FinancialConvention] = FinancialConvention,
        as_of: Optional[datetime] = None
    ) -> FinancialConvention:
        for eid in _ids(identifier):
            candidates = [
                convention for valid_from, convention in self._versions.get(eid, [])
                if as_of is None or valid_from <= as_of
            ]
            if candidates and isinstance(candidates[-1], kind):
                return candidates[-1]
        raise ConventionNotFoundError(identifier, kind)


class InMemorySecuritySource(SecuritySource):
    """In-memory security store indexed under every external id."""

    def __init__(self, securities: Iterable[Security] = ()):
        self._securities: Dict[ExternalId, Security] = {}
        for security in securities:
            self.add(security)

    def add(self, security: Security) -> None:
        for identifier in security.external_ids:
            self._securities[identifier] = security

    def get_security(self, identifier: IdLike) -> Security:
        for eid in _ids(identifier):
            if eid in self._securities:
                return self._securities[eid]
        raise SecurityNotFoundError(identifier)


class InMemoryHolidaySource(HolidaySource):
    """
    Holiday calendars by region id and by currency code.

    Unknown regions and currencies get a weekend-only calendar.
    """

    def __init__(
        self,
        regions: Optional[Mapping[ExternalId, Iterable]] = None,
        currencies: Optional[Mapping[str, Iterable]] = None
    ):
        self._regions = {
            region: HolidayCalendar(str(region), frozenset(days))
            for region, days in (regions or {}).items()
        }
        self._currencies = {
            currency: HolidayCalendar(currency, frozenset(days))
            for currency, days in (currencies or {}).items()
        }

    def region_calendar(self, region: Optional[ExternalId]) -> HolidayCalendar:
        if region is None:
            return WEEKEND_CALENDAR
        if region not in self._regions:
            logger.debug("No holidays registered for region %s, using weekends only", region)
            return HolidayCalendar(str(region))
        return self._regions[region]

    def currency_calendar(self, currency: str) -> HolidayCalendar:
        if currency not in self._currencies:
            logger.debug("No holidays registered for currency %s, using weekends only", currency)
            return HolidayCalendar(currency)
        return self._currencies[currency]


class InMemoryMarketDataSnapshot(MarketDataSource):
    """
    Immutable snapshot of scalar quotes.

    Attributes:
        quotes: Quote by market data identifier
    """

    def __init__(self, quotes: Optional[Mapping[ExternalId, float]] = None):
        self._quotes: Dict[ExternalId, float] = {k: float(v) for k, v in (quotes or {}).items()}

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        id_column: str = "id",
        quote_column: str = "quote"
    ) -> "InMemoryMarketDataSnapshot":
        """
        Build a snapshot from a DataFrame.

        Identifiers are read either from ``scheme``/``value`` columns or from a
        single column holding ``scheme~value`` strings.
        """
        if {"scheme", "value"}.issubset(frame.columns):
            ids = [ExternalId(str(s), str(v)) for s, v in zip(frame["scheme"], frame["value"])]
        elif id_column in frame.columns:
            ids = [ExternalId.parse(str(text)) for text in frame[id_column]]
        else:
            raise ValueError(
                f"Market data frame needs 'scheme'/'value' or '{id_column}' columns, "
                f"got {list(frame.columns)}"
            )
        return cls(dict(zip(ids, frame[quote_column].astype(float))))

    @classmethod
    def from_csv(cls, path: str, **kwargs) -> "InMemoryMarketDataSnapshot":
        return cls.from_frame(pd.read_csv(path), **kwargs)

    def get_quote(self, identifier: ExternalId) -> float:
        if identifier not in self._quotes:
            raise MissingMarketDataError(identifier)
        return self._quotes[identifier]

    def with_quotes(self, quotes: Mapping[ExternalId, float]) -> "InMemoryMarketDataSnapshot":
        merged = dict(self._quotes)
        merged.update(quotes)
        return InMemoryMarketDataSnapshot(merged)

    def without(self, identifier: ExternalId) -> "InMemoryMarketDataSnapshot":
        return InMemoryMarketDataSnapshot({k: v for k, v in self._quotes.items() if k != identifier})

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [{"scheme": k.scheme, "value": k.value, "quote": v} for k, v in sorted(self._quotes.items())],
            columns=["scheme", "value", "quote"]
        )

    def __contains__(self, identifier: ExternalId) -> bool:
        return identifier in self._quotes

    def __len__(self) -> int:
        return len(self._quotes)


class InMemoryConfigurationSource(ConfigurationSource):
    """Curve construction configurations and curve definitions keyed by name."""

    def __init__(self, configurations: Iterable = (), definitions: Iterable = ()):
        self._configurations = {}
        self._definitions = {}
        for configuration in configurations:
            self.add_configuration(configuration)
        for definition in definitions:
            self.add_definition(definition)

    def add_configuration(self, configuration) -> None:
        self._configurations[configuration.name] = configuration

    def add_definition(self, definition) -> None:
        self._definitions[definition.name] = definition

    def get_configuration(self, name: str):
        if name not in self._configurations:
            raise ConfigurationNotFoundError(name)
        return self._configurations[name]

    def get_curve_definition(self, name: str):
        if name not in self._definitions:
            raise ConfigurationNotFoundError(name, "curve definition")
        return self._definitions[name]


__all__ = [
    "ConventionSource",
    "SecuritySource",
    "HolidaySource",
    "MarketDataSource",
    "ConfigurationSource",
    "InMemoryConventionSource",
    "InMemorySecuritySource",
    "InMemoryHolidaySource",
    "InMemoryMarketDataSnapshot",
    "InMemoryConfigurationSource",
]
