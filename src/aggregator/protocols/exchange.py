"""
Exchange payload protocols.

Adapter data models parse exchange JSON into Pydantic models that satisfy
these protocols through their properties. The normalizer only depends on
the protocols, never on an exchange's field names.

Key design principles:
- Raw tokens (status, side, type) are exposed verbatim as strings
- Quantities are exposed as Decimal parsed from the payload's string form
- Which quantity is reported (remaining or executed) is declared by the
  exchange's order vocabulary, not guessed from the payload
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RawOrderProtocol(Protocol):
    """
    Protocol for an exchange order payload.

    Semantic Role: Input to the order normalizer
    """

    @property
    def order_id(self) -> str:
        """Exchange order identifier."""
        ...

    @property
    def symbol(self) -> str:
        """Native market symbol, decoded through the exchange codec."""
        ...

    @property
    def raw_status(self) -> str:
        """Status token as the exchange spells it."""
        ...

    @property
    def raw_side(self) -> str:
        """Side token as the exchange spells it."""
        ...

    @property
    def raw_type(self) -> str:
        """Order type token as the exchange spells it."""
        ...

    @property
    def original_amount(self) -> Decimal:
        """Amount the order was placed for."""
        ...

    @property
    def reported_amount(self) -> Decimal:
        """Remaining or executed amount, depending on the fill basis."""
        ...

    @property
    def limit_price(self) -> Decimal:
        """Price the order was placed at."""
        ...

    @property
    def average_price(self) -> Decimal | None:
        """Average execution price, None or zero when nothing filled."""
        ...

    @property
    def created(self) -> str | int | float:
        """Creation time in the exchange's timestamp format."""
        ...


@runtime_checkable
class RawBalanceProtocol(Protocol):
    """
    Protocol for one exchange balance row.

    Exchanges report different pairs of quantities; any field may be None
    and the normalizer derives the missing ones.
    """

    @property
    def currency(self) -> str:
        """Currency code or exchange asset name."""
        ...

    @property
    def total(self) -> Decimal | None:
        """Total balance, if reported."""
        ...

    @property
    def available(self) -> Decimal | None:
        """Balance available for trading, if reported."""
        ...

    @property
    def hold(self) -> Decimal | None:
        """Balance locked in orders, if reported."""
        ...


@runtime_checkable
class TransportProtocol(Protocol):
    """Protocol for the HTTP collaborator used by adapters."""

    @property
    def has_credentials(self) -> bool:
        """Whether authenticated requests can be signed."""
        ...

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        auth: bool = False,
    ) -> Any:
        """Send a request and return the decoded JSON payload."""
        ...
