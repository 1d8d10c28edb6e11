"""Atomic <-> display unit conversion.

Native assets are divided by ``10**decimals`` using :mod:`decimal` with a
context precision sized to the operand, so no digit is ever rounded away.
Token amounts pass through unchanged; their decimals live in an external
asset catalog.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, localcontext
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from onchain_ops.config.settings import NetworkConfig


@dataclass(frozen=True)
class NativeAsset:
    """A network's native asset and its atomic-unit exponent."""

    asset_id: str
    decimals: int = 18

    @property
    def divisor(self) -> int:
        return 10**self.decimals


def atomic_to_decimal(atomic_amount: int, decimals: int) -> Decimal:
    """Exact ``atomic_amount / 10**decimals``."""
    digits = len(str(abs(atomic_amount)))
    with localcontext() as ctx:
        ctx.prec = max(28, digits + decimals + 1)
        return Decimal(atomic_amount) / Decimal(10**decimals)


def format_amount(value: int | Decimal) -> str:
    """Render an amount in fixed-point notation (never ``1E-18`` style)."""
    if isinstance(value, int):
        return str(value)
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


class AmountNormalizer:
    """Converts stored atomic amounts into display units.

    Usage::

        normalizer = AmountNormalizer.from_networks(config.networks)
        normalizer.to_display_units(2_500_000_000_000_000_000, "eth", "base-sepolia")
        # Decimal('2.5')
    """

    def __init__(self, native_assets: dict[str, NativeAsset] | None = None) -> None:
        """Initialize the normalizer.

        Args:
            native_assets: network_id -> native asset. Defaults to no networks,
                in which case every amount is returned unchanged.
        """
        self._native_assets = dict(native_assets or {})

    @classmethod
    def from_networks(cls, networks: Iterable[NetworkConfig]) -> AmountNormalizer:
        return cls(
            {
                net.network_id: NativeAsset(net.native_asset_id, net.decimals)
                for net in networks
            }
        )

    def native_asset(self, asset_id: str, network_id: str | None = None) -> NativeAsset | None:
        """Return the native asset matching ``asset_id``, if it is one.

        With no ``network_id`` the asset matches any configured network.
        """
        if network_id is not None:
            native = self._native_assets.get(network_id)
            if native is not None and native.asset_id == asset_id:
                return native
            return None
        for native in self._native_assets.values():
            if native.asset_id == asset_id:
                return native
        return None

    def to_display_units(
        self,
        atomic_amount: int,
        asset_id: str,
        network_id: str | None = None,
    ) -> int | Decimal:
        """Convert an atomic amount to display units.

        Args:
            atomic_amount: Amount in the asset's smallest unit.
            asset_id: Symbolic asset id (e.g. ``"eth"``, ``"usdc"``).
            network_id: Network the amount lives on.

        Returns:
            A ``Decimal`` for native assets, the unchanged ``int`` otherwise.
        """
        native = self.native_asset(asset_id, network_id)
        if native is None:
            return atomic_amount
        return atomic_to_decimal(atomic_amount, native.decimals)
