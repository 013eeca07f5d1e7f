"""Fee percentages the engine needs, decoupled from settings."""
from dataclasses import dataclass
from decimal import Decimal

from config.settings import Settings


@dataclass(frozen=True)
class FeeSchedule:
    activation_fee_percent: Decimal  # paid to treasury on activation
    filler_incentive_percent: Decimal  # reserved with the order for fillers
    transfer_fee_usd: Decimal  # flat ledger fee per transfer

    @property
    def maker_fee_percent(self) -> Decimal:
        return self.activation_fee_percent + self.filler_incentive_percent

    @classmethod
    def from_settings(cls, s: Settings) -> "FeeSchedule":
        return cls(
            activation_fee_percent=s.ACTIVATION_FEE_PERCENT,
            filler_incentive_percent=s.FILLER_INCENTIVE_PERCENT,
            transfer_fee_usd=s.CKUSDC_TRANSFER_FEE_USD,
        )
