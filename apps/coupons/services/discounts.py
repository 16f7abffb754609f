"""
Value objects describing a discount quote.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass
class DiscountLine:
    """One coupon's contribution to a quote"""
    coupon: Any
    discount: Decimal
    applied: Decimal = Decimal('0.00')

    @property
    def code(self) -> str:
        return self.coupon.code

    @property
    def free_shipping(self) -> bool:
        return self.coupon.coupon_type == 'free_shipping'

    @property
    def campaign(self):
        return self.coupon.campaign

    def to_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'type': self.coupon.coupon_type,
            'discount': self.discount,
            'applied': self.applied,
            'free_shipping': self.free_shipping,
            'campaign_id': self.coupon.campaign_id,
        }


@dataclass
class DiscountQuote:
    subtotal: Decimal
    lines: List[DiscountLine] = field(default_factory=list)
    total_discount: Decimal = Decimal('0.00')
    stacked: bool = False
    cap: Optional[Decimal] = None
    rejected: Dict[str, str] = field(default_factory=dict)

    @property
    def free_shipping(self) -> bool:
        return any(line.free_shipping for line in self.lines)

    @property
    def final_total(self) -> Decimal:
        return self.subtotal - self.total_discount

    @property
    def codes(self) -> List[str]:
        return [line.code for line in self.lines]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subtotal': self.subtotal,
            'lines': [line.to_dict() for line in self.lines],
            'total_discount': self.total_discount,
            'final_total': self.final_total,
            'free_shipping': self.free_shipping,
            'stacked': self.stacked,
            'cap': self.cap,
            'rejected': self.rejected,
        }
