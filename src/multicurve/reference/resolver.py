"""
Convention resolution with security fallback.

Some reference data registers only an index security, not the index
convention itself. The resolver first asks the convention source for the
identifier; on a miss it looks the identifier up as an index security and
resolves the convention the security points at. The outcome is returned as
a ConventionResolution so callers branch on it explicitly.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Generic, Optional, Type, TypeVar
import logging

from ..errors import ConventionNotFoundError, MulticurveError, SecurityNotFoundError
from .conventions import FinancialConvention
from .identifiers import ExternalId
from .securities import IndexSecurity, Security
from .sources import ConventionSource, SecuritySource

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=FinancialConvention)


@dataclass(frozen=True)
class ConventionResolution(Generic[C]):
    """
    Result of a two-step convention lookup.

    Attributes:
        identifier: Identifier that was asked for
        convention: Resolved convention, None on failure
        security: Index security used by the fallback, if any
        primary_error: The direct lookup failure (set whenever the fallback ran)
        fallback_error: The fallback failure, when both steps failed
    """
    identifier: ExternalId
    convention: Optional[C] = None
    security: Optional[Security] = None
    primary_error: Optional[ConventionNotFoundError] = None
    fallback_error: Optional[MulticurveError] = None

    @property
    def ok(self) -> bool:
        return self.convention is not None

    @property
    def via_security(self) -> bool:
        return self.ok and self.security is not None

    def unwrap(self) -> C:
        """Return the convention or raise the original not-found error."""
        if self.convention is None:
            raise ConventionNotFoundError(self.identifier) from self.primary_error
        return self.convention


class ConventionResolver:
    """
    Resolve conventions by id, falling back to index securities.

    Attributes:
        conventions: Convention source
        securities: Security source
        as_of: Version date passed to every convention lookup
    """

    def __init__(
        self,
        conventions: ConventionSource,
        securities: SecuritySource,
        as_of: Optional[datetime] = None
    ):
        self.conventions = conventions
        self.securities = securities
        self.as_of = as_of

    def resolve(
        self,
        identifier: ExternalId,
        kind: Type[C] = FinancialConvention
    ) -> ConventionResolution[C]:
        """
        Look up a convention directly, then through an index security.

        Args:
            identifier: Convention or index security id
            kind: Expected convention class

        Returns:
            ConventionResolution describing which path succeeded
        """
        try:
            convention = self.conventions.get_convention(identifier, kind, self.as_of)
            return ConventionResolution(identifier, convention)
        except ConventionNotFoundError as primary:
            return self._resolve_via_security(identifier, kind, primary)

    def _resolve_via_security(
        self,
        identifier: ExternalId,
        kind: Type[C],
        primary: ConventionNotFoundError
    ) -> ConventionResolution[C]:
        try:
            security = self.securities.get_security(identifier)
        except SecurityNotFoundError as e:
            return ConventionResolution(identifier, primary_error=primary, fallback_error=e)

        if not isinstance(security, IndexSecurity):
            error = SecurityNotFoundError(identifier)
            return ConventionResolution(identifier, security=security, primary_error=primary, fallback_error=error)

        try:
            convention = self.conventions.get_convention(security.convention_id, kind, self.as_of)
        except ConventionNotFoundError as e:
            return ConventionResolution(identifier, security=security, primary_error=primary, fallback_error=e)

        logger.info(
            "Convention %s not found directly, resolved %s through security %s",
            identifier, security.convention_id, security.name
        )
        return ConventionResolution(identifier, convention, security=security, primary_error=primary)

    def resolve_convention(self, identifier: ExternalId, kind: Type[C] = FinancialConvention) -> C:
        """Resolve or raise ConventionNotFoundError chained to the original cause."""
        return self.resolve(identifier, kind).unwrap()


__all__ = ["ConventionResolution", "ConventionResolver"]
