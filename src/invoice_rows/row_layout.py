"""Lay out one prepared invoice line as a row of bounded columns."""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import COLUMNS, InvoiceStyle
from .line_item import DiscountKind, PreparedLine, TaxKind
from .money import format_plain
from .styles import get_bold_font
from .surface import DrawnCell, ReportLabSurface


@dataclass
class RowResult:
    """Where a row landed and what was drawn for it."""
    index: Optional[int]
    page: int
    base_y: float
    col_height: float
    end_y: float
    cells: List[DrawnCell] = field(default_factory=list)

    def column_cells(self, x: float) -> List[DrawnCell]:
        """Cells drawn at the given column offset."""
        return [c for c in self.cells if c.x == x]


class RowLayout:
    """
    Renders a PreparedLine onto a surface.

    Row height comes only from the wrapped name and description; every
    numeric column is drawn at that height. Font and color are the same
    after render() as before it, whichever branches were taken.
    """

    def __init__(self, style: Optional[InvoiceStyle] = None):
        self.style = style or InvoiceStyle()
        self.geometry = self.style.geometry.validate()
        self.money = self.style.money

    def render(self, surface: ReportLabSurface, line: PreparedLine) -> RowResult:
        if not isinstance(line, PreparedLine):
            raise TypeError(
                f"render() needs a PreparedLine, got {type(line).__name__}; call prepare() first"
            )

        style = self.style
        geo = self.geometry
        first_cell = len(surface.cells)

        # Base Y (top of row)
        base_y = surface.get_y()

        # Name and description set the row height
        surface.set_x(geo.name)
        surface.multi_cell(geo.width("name"), style.line_height, surface.encode_string(line.name))

        if line.description:
            surface.set_xy(geo.name, surface.get_y() + style.description_gap)
            with surface.style(size=style.small_font_size, color=style.grey_text_color):
                surface.multi_cell(
                    geo.width("name"),
                    style.line_height,
                    surface.encode_string(line.description),
                )

        col_height = surface.get_y() - base_y

        # Unit price
        surface.set_xy(geo.unit_price, base_y)
        self._full_height_cell(surface, "unit_price", col_height, self.money.format_money_decimal(line.unit_cost))

        # Quantity
        surface.set_x(geo.quantity)
        self._full_height_cell(surface, "quantity", col_height, format_plain(line.quantity))

        self._render_tax(surface, line, base_y, col_height)
        self._render_discount(surface, line, base_y, col_height)

        # Total is the settled amount, shown as supplied
        surface.set_xy(geo.total, base_y)
        self._full_height_cell(surface, "total", col_height, self.money.format_money_decimal(line.paid_incl_vat))

        # Next row starts right below this one
        surface.set_y(base_y + col_height)

        return RowResult(
            index=line.index,
            page=surface.page,
            base_y=base_y,
            col_height=col_height,
            end_y=base_y + col_height,
            cells=surface.cells[first_cell:],
        )

    def _full_height_cell(self, surface: ReportLabSurface, column: str, height: float, text: str) -> None:
        surface.cell(self.geometry.width(column), height, surface.encode_string(text))

    def _split_cell(
        self,
        surface: ReportLabSurface,
        column: str,
        base_y: float,
        col_height: float,
        title: str,
        label: str,
        title_align: str = "",
    ) -> None:
        """Two half-height cells: title in the base style over a muted label."""
        x = getattr(self.geometry, column)
        width = self.geometry.width(column)
        half = col_height / 2

        surface.set_xy(x, base_y)
        surface.cell(width, half, surface.encode_string(title), align=title_align)

        surface.set_xy(x, base_y + half)
        with surface.style(size=self.style.small_font_size, color=self.style.grey_text_color):
            surface.cell(width, half, surface.encode_string(label), align="LT")

        surface.set_y(base_y)

    def _render_discount(self, surface: ReportLabSurface, line: PreparedLine, base_y: float, col_height: float) -> None:
        surface.set_xy(self.geometry.discount, base_y)
        discount = line.discount
        if discount is None or discount.is_zero:
            self._full_height_cell(surface, "discount", col_height, self.style.placeholder)
            return

        title = f"- {self.money.format_money_decimal(line.discount_amount())}"
        if discount.kind == DiscountKind.PERCENT_OFF:
            label = f"{format_plain(discount.value)} %"
        else:
            label = ""
        self._split_cell(surface, "discount", base_y, col_height, title, label)

    def _render_tax(self, surface: ReportLabSurface, line: PreparedLine, base_y: float, col_height: float) -> None:
        surface.set_xy(self.geometry.tax, base_y)
        tax = line.tax
        if tax is None:
            self._full_height_cell(surface, "tax", col_height, self.style.placeholder)
            return

        title = self.money.format_money_decimal(line.tax_amount())
        if tax.kind == TaxKind.PERCENT_OF_BASE:
            label = f"{format_plain(tax.value)} %"
        else:
            label = ""
        self._split_cell(surface, "tax", base_y, col_height, title, label, title_align="LB")

    def render_header(self, surface: ReportLabSurface) -> float:
        """Draw the column titles and a rule below them. Returns the consumed height."""
        style = self.style
        geo = self.geometry
        base_y = surface.get_y()

        with surface.style(family=get_bold_font(style.font_family)):
            for column in COLUMNS:
                surface.set_xy(getattr(geo, column), base_y)
                surface.cell(
                    geo.width(column),
                    style.header_height,
                    surface.encode_string(style.headers.get(column, "")),
                    align="B",
                )

        rule_y = base_y + style.header_height + 0.5
        surface.line(geo.name, rule_y, geo.right_edge, rule_y)
        surface.set_y(rule_y + 1.5)
        return surface.get_y() - base_y
