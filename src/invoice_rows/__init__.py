"""Invoice line computation and row layout on top of ReportLab."""

from .config import InvoiceStyle, RenderGeometry, load_style
from .document import InvoiceDocument, UnreadableItem, compute_totals, load_items, prepare_items
from .errors import InvoiceError, ParseError, ValidationError
from .line_item import (
    DiscountInput,
    DiscountKind,
    DiscountSpec,
    LineItem,
    PreparedLine,
    TaxInput,
    TaxKind,
    TaxSpec,
    prepare,
)
from .money import MoneyFormat, parse_decimal
from .row_layout import RowLayout, RowResult
from .surface import ReportLabSurface

__all__ = [
    "DiscountInput",
    "DiscountKind",
    "DiscountSpec",
    "InvoiceDocument",
    "InvoiceError",
    "InvoiceStyle",
    "LineItem",
    "MoneyFormat",
    "ParseError",
    "PreparedLine",
    "RenderGeometry",
    "ReportLabSurface",
    "RowLayout",
    "RowResult",
    "TaxInput",
    "TaxKind",
    "TaxSpec",
    "UnreadableItem",
    "ValidationError",
    "compute_totals",
    "load_items",
    "load_style",
    "parse_decimal",
    "prepare",
    "prepare_items",
]
