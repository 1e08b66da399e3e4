"""Built-in invoice style presets."""

import copy
from typing import Dict

from .config import InvoiceStyle, RenderGeometry
from .money import MoneyFormat


STYLE_PRESETS: Dict[str, InvoiceStyle] = {
    "classic": InvoiceStyle(),
    # Smaller type, tighter lines, wider name column
    "compact": InvoiceStyle(
        name="compact",
        font_family="Helvetica",
        base_font_size=7,
        small_font_size=6,
        title_font_size=12,
        base_text_color=(0, 0, 0),
        grey_text_color=(110, 110, 110),
        line_height=2.6,
        description_gap=0.6,
        header_height=5.0,
        cell_padding=0.8,
        margin_top=15.0,
        geometry=RenderGeometry(
            name=10.0,
            unit_price=90.0,
            quantity=110.0,
            tax=123.0,
            discount=143.0,
            total=166.0,
            right_edge=200.0,
        ),
        money=MoneyFormat(symbol=" EUR", format="%v%s", format_negative="-%v%s"),
    ),
    "letter": InvoiceStyle(
        name="letter",
        font_family="Times-Roman",
        page_size="LETTER",
        money=MoneyFormat(symbol="$", thousand=",", format="%s%v", format_negative="-%s%v"),
    ),
}


def get_style(name: str) -> InvoiceStyle:
    """Get a style preset by name, falling back to the classic style."""
    if name in STYLE_PRESETS:
        return copy.deepcopy(STYLE_PRESETS[name])
    return copy.deepcopy(STYLE_PRESETS["classic"])


def get_bold_font(font_family: str) -> str:
    """Get the bold variant of a font family."""
    if font_family == "Times-Roman":
        return "Times-Bold"
    elif font_family == "Courier":
        return "Courier-Bold"
    else:
        return f"{font_family}-Bold"
