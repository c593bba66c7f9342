"""Settings documents: tax, business information and receipt layout."""
from dataclasses import dataclass, asdict, fields
from decimal import Decimal
from typing import Optional, Dict, Any

from pos.utils.number_format import parse_money


@dataclass(frozen=True)
class TaxSettings:
    """Tax applied at checkout. ``rate`` is a percentage (20 means 20%)."""

    enabled: bool
    rate: Decimal
    name: str = 'Tax'
    tax_number: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'enabled': self.enabled,
            'rate': str(self.rate),
            'name': self.name,
            'tax_number': self.tax_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TaxSettings':
        return cls(
            enabled=bool(data.get('enabled', False)),
            rate=parse_money(data.get('rate', '0')),
            name=data.get('name') or 'Tax',
            tax_number=data.get('tax_number') or None,
        )


@dataclass(frozen=True)
class BusinessInfo:
    name: str = ''
    address: str = ''
    phone: str = ''
    email: str = ''
    website: str = ''
    tax_number: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BusinessInfo':
        known = {f.name for f in fields(cls)}
        return cls(**{k: (v or '') for k, v in data.items() if k in known})


@dataclass(frozen=True)
class ReceiptSettings:
    show_logo: bool = True
    show_tax_number: bool = True
    show_website: bool = True
    show_barcode: bool = False
    header: str = 'Thank you for your purchase!'
    footer: str = 'Please visit us again'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ReceiptSettings':
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
