import io
import sys
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def style():
    from invoice_rows.config import InvoiceStyle

    return InvoiceStyle()


@pytest.fixture
def surface(style):
    from invoice_rows.surface import ReportLabSurface

    return ReportLabSurface(
        io.BytesIO(),
        left_margin=style.geometry.name,
        top_margin=style.margin_top,
        cell_margin=style.cell_padding,
        font_family=style.font_family,
        font_size=style.base_font_size,
        text_color=style.base_text_color,
    )


@pytest.fixture
def make_item():
    from invoice_rows.line_item import DiscountInput, LineItem, TaxInput

    def _make(
        unit_cost="100",
        quantity="1",
        paid="0",
        discount=None,
        tax=None,
        name="Widget",
        description="",
    ):
        return LineItem(
            name=name,
            description=description,
            unit_cost=unit_cost,
            quantity=quantity,
            paid_incl_vat=paid,
            discount=DiscountInput(**discount) if discount else None,
            tax=TaxInput(**tax) if tax else None,
        )

    return _make


@pytest.fixture
def items_yaml(tmp_path):
    path = tmp_path / "items.yaml"
    path.write_text(
        """title: March services
items:
  - name: Website maintenance
    description: Monthly plan covering updates, backups and uptime monitoring.
    unit_cost: "120.00"
    quantity: "2"
    paid_incl_vat: "216.00"
    discount:
      percent: "10"
    tax:
      percent: "0"
  - name: Domain renewal
    unit_cost: "15.50"
    quantity: "1"
    paid_incl_vat: "18.60"
    tax:
      percent: "20"
""",
        encoding="utf-8",
    )
    return path
