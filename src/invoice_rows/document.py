"""Compose prepared lines into a one-page invoice PDF."""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union
import yaml

from .config import InvoiceStyle
from .errors import InvoiceError, ValidationError
from .line_item import LineItem, PreparedLine, ZERO
from .row_layout import RowLayout, RowResult
from .styles import get_bold_font
from .surface import PAGE_SIZES, ReportLabSurface

Rejected = Tuple[int, InvoiceError]


@dataclass
class UnreadableItem:
    """An input entry that could not be read as a LineItem; preparing it raises the load error."""
    data: Any
    error: InvoiceError

    def prepare(self, index: Optional[int] = None) -> PreparedLine:
        raise self.error


@dataclass
class InvoiceTotals:
    """Sums over all rendered lines."""
    subtotal: Decimal = ZERO  # excl. tax, incl. discount
    tax: Decimal = ZERO
    paid_incl_vat: Decimal = ZERO
    paid_excl_vat: Optional[Decimal] = None


@dataclass
class DocumentResult:
    rows: List[RowResult] = field(default_factory=list)
    rejected: List[Rejected] = field(default_factory=list)
    totals: InvoiceTotals = field(default_factory=InvoiceTotals)
    page_count: int = 1


def load_items(path: Path) -> Tuple[List[Union[LineItem, UnreadableItem]], Optional[str]]:
    """
    Load raw line items from a YAML or JSON file.

    The file holds either a list of item mappings or a mapping with an
    ``items`` list and an optional ``title``. Returns (items, title).

    Entries that are not mappings or miss a required field stay in the
    list as UnreadableItem, so they fail (or are skipped) at their own
    index when the items are prepared.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    title = None
    if isinstance(data, dict):
        title = data.get("title")
        data = data.get("items")
    if not isinstance(data, list):
        raise ValidationError(f"expected a list of items in {path}", field="items")

    items: List[Union[LineItem, UnreadableItem]] = []
    for idx, entry in enumerate(data):
        try:
            items.append(LineItem.from_dict(entry, line=idx))
        except ValidationError as exc:
            items.append(UnreadableItem(entry, exc))
    return items, title


def prepare_items(
    items: Sequence[Union[LineItem, UnreadableItem]],
    skip_invalid: bool = False,
) -> Tuple[List[PreparedLine], List[Rejected]]:
    """
    Prepare every item with its index.

    A failing line either stops the whole document (the default) or is
    left out and reported in the rejected list.
    """
    prepared: List[PreparedLine] = []
    rejected: List[Rejected] = []
    for idx, item in enumerate(items):
        try:
            prepared.append(item.prepare(idx))
        except InvoiceError as exc:
            if not skip_invalid:
                raise
            rejected.append((idx, exc))
    return prepared, rejected


def compute_totals(lines: Sequence[PreparedLine]) -> InvoiceTotals:
    totals = InvoiceTotals()
    for line in lines:
        totals.subtotal += line.subtotal_excl_tax_incl_discount()
        totals.tax += line.tax_amount()
        totals.paid_incl_vat += line.paid_incl_vat

    # Only meaningful when every line carries it
    if lines and all(line.paid_excl_vat is not None for line in lines):
        totals.paid_excl_vat = sum((line.paid_excl_vat for line in lines), ZERO)
    return totals


class InvoiceDocument:
    """Renders a title, the item table and a totals block onto a single page."""

    def __init__(
        self,
        items: Sequence[Union[LineItem, UnreadableItem, PreparedLine]],
        style: Optional[InvoiceStyle] = None,
        title: str = "Invoice",
    ):
        self.items = list(items)
        self.style = style or InvoiceStyle()
        self.title = title
        self.row_layout = RowLayout(self.style)

    def _make_surface(self, target: Any) -> ReportLabSurface:
        if self.style.page_size not in PAGE_SIZES:
            raise ValidationError(f"unknown page size {self.style.page_size!r}", field="page_size")
        return ReportLabSurface(
            target,
            page_size=PAGE_SIZES[self.style.page_size],
            left_margin=self.style.geometry.name,
            top_margin=self.style.margin_top,
            cell_margin=self.style.cell_padding,
            font_family=self.style.font_family,
            font_size=self.style.base_font_size,
            text_color=self.style.base_text_color,
        )

    def render(self, target: Any, skip_invalid: bool = False) -> DocumentResult:
        """
        Render to a path or writable binary file object.

        Items that are not prepared yet are prepared here. Rows run on one
        page; nothing is moved to a new page when the table is long.
        """
        raw = [item for item in self.items if not isinstance(item, PreparedLine)]
        if raw and len(raw) != len(self.items):
            raise TypeError("items must be all raw or all PreparedLine")
        if raw:
            lines, rejected = prepare_items(raw, skip_invalid=skip_invalid)
        else:
            lines, rejected = list(self.items), []

        if isinstance(target, (str, Path)):
            Path(target).parent.mkdir(parents=True, exist_ok=True)
            target = str(target)

        surface = self._make_surface(target)
        result = DocumentResult(rejected=rejected, totals=compute_totals(lines))

        self._draw_title(surface)
        self.row_layout.render_header(surface)
        for line in lines:
            result.rows.append(self.row_layout.render(surface, line))
        self._draw_totals(surface, result.totals)

        result.page_count = surface.page + 1
        surface.save()
        return result

    def _draw_title(self, surface: ReportLabSurface) -> None:
        style = self.style
        with surface.style(size=style.title_font_size, family=get_bold_font(style.font_family)):
            surface.set_x(style.geometry.name)
            surface.cell(style.geometry.table_width, style.title_font_size * 0.5, surface.encode_string(self.title))
        surface.set_y(surface.get_y() + style.title_font_size * 0.5 + style.line_height)

    def _draw_totals(self, surface: ReportLabSurface, totals: InvoiceTotals) -> None:
        style = self.style
        geo = style.geometry
        money = style.money

        rule_y = surface.get_y() + 1
        surface.line(geo.name, rule_y, geo.right_edge, rule_y)
        surface.set_y(rule_y + 2)

        rows = [("Total excl. tax", totals.subtotal), ("Tax", totals.tax)]
        if totals.paid_excl_vat is not None:
            rows.append(("Paid excl. tax", totals.paid_excl_vat))
        rows.append(("Total", totals.paid_incl_vat))

        label_width = geo.total - geo.discount
        value_width = geo.right_edge - geo.total
        for idx, (label, value) in enumerate(rows):
            is_last = idx == len(rows) - 1
            family = get_bold_font(style.font_family) if is_last else style.font_family
            with surface.style(family=family):
                surface.set_x(geo.discount)
                surface.cell(label_width, style.line_height + 1, surface.encode_string(label), align="R")
                surface.cell(value_width, style.line_height + 1, surface.encode_string(money.format_money_decimal(value)))
            surface.set_y(surface.get_y() + style.line_height + 1)
