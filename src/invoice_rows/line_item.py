"""Invoice line records and the per-line financial computation."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .errors import ValidationError
from .money import parse_decimal

ZERO = Decimal(0)


class DiscountKind(Enum):
    """How a discount magnitude is applied to the subtotal."""
    AMOUNT_OFF = "amount"
    PERCENT_OFF = "percent"


class TaxKind(Enum):
    """How a tax magnitude is charged on the discounted subtotal."""
    FIXED_AMOUNT = "amount"
    PERCENT_OF_BASE = "percent"


@dataclass(frozen=True)
class DiscountSpec:
    kind: DiscountKind
    value: Decimal

    @property
    def is_zero(self) -> bool:
        return self.value == ZERO


@dataclass(frozen=True)
class TaxSpec:
    kind: TaxKind
    value: Decimal


def _pick_variant(percent: Optional[str], amount: Optional[str], field: str, line: Optional[int]):
    """Return ("percent"|"amount", raw) for exactly one populated field."""
    has_percent = percent is not None and str(percent).strip() != ""
    has_amount = amount is not None and str(amount).strip() != ""

    if has_percent and has_amount:
        raise ValidationError("both percent and amount are set", field=field, line=line)
    if not has_percent and not has_amount:
        raise ValidationError("one of percent or amount is required", field=field, line=line)
    if has_percent:
        return "percent", percent
    return "amount", amount


@dataclass
class DiscountInput:
    """Discount as it arrives on the wire: exactly one of the two is set."""
    percent: Optional[str] = None
    amount: Optional[str] = None

    def prepare(self, line: Optional[int] = None) -> DiscountSpec:
        variant, raw = _pick_variant(self.percent, self.amount, "discount", line)
        value = parse_decimal(raw, f"discount.{variant}", line)
        if value < ZERO:
            raise ValidationError("discount must not be negative", field=f"discount.{variant}", line=line)
        kind = DiscountKind.PERCENT_OFF if variant == "percent" else DiscountKind.AMOUNT_OFF
        return DiscountSpec(kind=kind, value=value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiscountInput":
        return cls(percent=data.get("percent"), amount=data.get("amount"))


@dataclass
class TaxInput:
    """Tax as it arrives on the wire: exactly one of the two is set."""
    percent: Optional[str] = None
    amount: Optional[str] = None

    def prepare(self, line: Optional[int] = None) -> TaxSpec:
        variant, raw = _pick_variant(self.percent, self.amount, "tax", line)
        value = parse_decimal(raw, f"tax.{variant}", line)
        kind = TaxKind.PERCENT_OF_BASE if variant == "percent" else TaxKind.FIXED_AMOUNT
        return TaxSpec(kind=kind, value=value)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TaxInput":
        return cls(percent=data.get("percent"), amount=data.get("amount"))


@dataclass
class LineItem:
    """A raw invoice line with text-encoded decimal fields."""
    name: str
    unit_cost: str
    quantity: str
    paid_incl_vat: str
    description: str = ""
    paid_excl_vat: Optional[str] = None
    discount: Optional[DiscountInput] = None
    tax: Optional[TaxInput] = None

    REQUIRED_KEYS = ("name", "unit_cost", "quantity", "paid_incl_vat")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], line: Optional[int] = None) -> "LineItem":
        """Build a LineItem from a parsed JSON/YAML mapping."""
        if not isinstance(data, Mapping):
            raise ValidationError(f"expected a mapping, got {type(data).__name__}", line=line)
        for key in cls.REQUIRED_KEYS:
            if key not in data:
                raise ValidationError("missing required field", field=key, line=line)

        discount = data.get("discount")
        tax = data.get("tax")
        for key, value in (("discount", discount), ("tax", tax)):
            if value is not None and not isinstance(value, Mapping):
                raise ValidationError("expected a mapping with percent or amount", field=key, line=line)
        return cls(
            name=data["name"],
            description=data.get("description") or "",
            unit_cost=data["unit_cost"],
            quantity=data["quantity"],
            paid_incl_vat=data["paid_incl_vat"],
            paid_excl_vat=data.get("paid_excl_vat"),
            discount=DiscountInput.from_dict(discount) if discount is not None else None,
            tax=TaxInput.from_dict(tax) if tax is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "unit_cost": self.unit_cost,
            "quantity": self.quantity,
            "paid_incl_vat": self.paid_incl_vat,
        }
        if self.paid_excl_vat is not None:
            data["paid_excl_vat"] = self.paid_excl_vat
        for key, spec in (("discount", self.discount), ("tax", self.tax)):
            if spec is not None:
                data[key] = {k: v for k, v in (("percent", spec.percent), ("amount", spec.amount)) if v is not None}
        return data

    def prepare(self, index: Optional[int] = None) -> "PreparedLine":
        return prepare(self, index)


@dataclass(frozen=True)
class PreparedLine:
    """A validated line. All money fields are Decimals; nothing is re-parsed."""
    name: str
    description: str
    unit_cost: Decimal
    quantity: Decimal
    paid_incl_vat: Decimal
    paid_excl_vat: Optional[Decimal] = None
    discount: Optional[DiscountSpec] = None
    tax: Optional[TaxSpec] = None
    index: Optional[int] = None

    def subtotal_excl_tax_excl_discount(self) -> Decimal:
        return self.unit_cost * self.quantity

    def subtotal_excl_tax_incl_discount(self) -> Decimal:
        """Subtotal after discount. Amount discounts are not clamped at zero."""
        total = self.subtotal_excl_tax_excl_discount()
        if self.discount is None:
            return total
        if self.discount.kind == DiscountKind.AMOUNT_OFF:
            return total - self.discount.value
        return total - total * self.discount.value.scaleb(-2)

    def discount_amount(self) -> Decimal:
        return self.subtotal_excl_tax_excl_discount() - self.subtotal_excl_tax_incl_discount()

    def tax_amount(self) -> Decimal:
        """Tax charged on the discounted subtotal; fixed amounts are used as-is."""
        if self.tax is None:
            return ZERO
        if self.tax.kind == TaxKind.FIXED_AMOUNT:
            return self.tax.value
        return self.subtotal_excl_tax_incl_discount() * self.tax.value.scaleb(-2)

    def grand_total(self) -> Decimal:
        return self.subtotal_excl_tax_incl_discount() + self.tax_amount()


def prepare(item: LineItem, index: Optional[int] = None) -> PreparedLine:
    """
    Validate a raw LineItem and parse every decimal field once.

    Fails on the first bad field with ParseError or ValidationError naming
    the field and the line index.
    """
    if not isinstance(item.name, str) or not item.name.strip():
        raise ValidationError("name is required", field="name", line=index)
    description = item.description or ""
    if not isinstance(description, str):
        raise ValidationError("description must be text", field="description", line=index)

    unit_cost = parse_decimal(item.unit_cost, "unit_cost", index)
    quantity = parse_decimal(item.quantity, "quantity", index)
    paid_incl_vat = parse_decimal(item.paid_incl_vat, "paid_incl_vat", index)
    paid_excl_vat = None
    if item.paid_excl_vat is not None:
        paid_excl_vat = parse_decimal(item.paid_excl_vat, "paid_excl_vat", index)

    discount = item.discount.prepare(index) if item.discount is not None else None
    tax = item.tax.prepare(index) if item.tax is not None else None

    return PreparedLine(
        name=item.name,
        description=description,
        unit_cost=unit_cost,
        quantity=quantity,
        paid_incl_vat=paid_incl_vat,
        paid_excl_vat=paid_excl_vat,
        discount=discount,
        tax=tax,
        index=index,
    )
