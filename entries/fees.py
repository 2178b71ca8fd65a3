# entries/fees.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings

PENNY = Decimal('0.01')


@dataclass(frozen=True)
class FeeBreakdown:
    entry_fee: Decimal
    processing_fee: Decimal
    total: Decimal

    @property
    def total_minor_units(self):
        """ Total in pence, as the payment service expects it. """
        return int((self.total * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def as_dict(self):
        return {
            'entry_fee': str(self.entry_fee),
            'processing_fee': str(self.processing_fee),
            'total': str(self.total),
            'total_minor_units': self.total_minor_units,
        }


def calculate_fees(entry_fee=None):
    """
    Entry fee plus the card processing fee (2.9% + 30p by default), rounded to the penny.
    An empty or zero fee falls back to DEFAULT_ENTRY_FEE.
    """
    fee = Decimal(str(entry_fee)) if entry_fee else settings.DEFAULT_ENTRY_FEE
    fee = fee.quantize(PENNY, rounding=ROUND_HALF_UP)
    processing_fee = (fee * settings.PROCESSING_FEE_RATE + settings.PROCESSING_FEE_FIXED).quantize(
        PENNY, rounding=ROUND_HALF_UP
    )
    return FeeBreakdown(entry_fee=fee, processing_fee=processing_fee, total=fee + processing_fee)
