"""
Validation against the on-chain reference

Daily pool data is sampled once a day, not at checkpoint time, so the sum
of reconstructed daily fees is expected to differ from the contract's
collectable amount by a small number of base units.
"""

from dataclasses import dataclass
from typing import Mapping

from ..data.types import TokenFeeAmount

# base units; tiny for 18-decimal tokens
DEFAULT_TOLERANCE = 1000


@dataclass(frozen=True)
class FeeComparison:
    reconstructed: TokenFeeAmount
    reference: TokenFeeAmount
    tolerance: int

    @property
    def difference(self) -> TokenFeeAmount:
        return self.reconstructed - self.reference

    @property
    def within_tolerance(self) -> bool:
        diff = self.difference
        return abs(diff.amount0) < self.tolerance and abs(diff.amount1) < self.tolerance


def sum_daily_fees(daily: Mapping[int, TokenFeeAmount]) -> TokenFeeAmount:
    total = TokenFeeAmount.zero()
    for amount in daily.values():
        total = total + amount
    return total


def compare_with_reference(
    daily: Mapping[int, TokenFeeAmount],
    reference: TokenFeeAmount,
    tolerance: int = DEFAULT_TOLERANCE
) -> FeeComparison:
    """Compare the summed daily series with the contract's collectable fees"""
    return FeeComparison(
        reconstructed=sum_daily_fees(daily),
        reference=reference,
        tolerance=tolerance,
    )
