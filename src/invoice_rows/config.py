"""Configuration dataclasses and YAML loading for invoice rendering."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple
import yaml

from .errors import ValidationError
from .money import MoneyFormat

RGB = Tuple[int, int, int]

# Column order, left to right
COLUMNS = ("name", "unit_price", "quantity", "tax", "discount", "total")


@dataclass
class RenderGeometry:
    """Column start offsets in page units (mm), plus the right edge of the table."""
    name: float = 10.0
    unit_price: float = 80.0
    quantity: float = 103.0
    tax: float = 118.0
    discount: float = 140.0
    total: float = 165.0
    right_edge: float = 190.0

    def offsets(self) -> Tuple[float, ...]:
        return tuple(getattr(self, col) for col in COLUMNS) + (self.right_edge,)

    def validate(self) -> "RenderGeometry":
        """Check that column offsets are strictly increasing."""
        offsets = self.offsets()
        names = COLUMNS + ("right_edge",)
        for idx in range(1, len(offsets)):
            if offsets[idx] <= offsets[idx - 1]:
                raise ValidationError(
                    f"column offset {offsets[idx]} must be greater than {offsets[idx - 1]}",
                    field=f"geometry.{names[idx]}",
                )
        return self

    def width(self, column: str) -> float:
        """Width of a column: distance to the next column start."""
        offsets = self.offsets()
        idx = COLUMNS.index(column)
        return offsets[idx + 1] - offsets[idx]

    @property
    def table_width(self) -> float:
        return self.right_edge - self.name


@dataclass
class InvoiceStyle:
    """Fonts, colors and geometry used to render an invoice."""

    name: str = "classic"
    font_family: str = "Helvetica"
    base_font_size: float = 8
    small_font_size: float = 7
    title_font_size: float = 14
    base_text_color: RGB = (35, 35, 35)
    grey_text_color: RGB = (82, 82, 82)

    # Vertical metrics (mm)
    line_height: float = 3.0
    description_gap: float = 1.0
    header_height: float = 6.0
    cell_padding: float = 1.0
    margin_top: float = 20.0

    page_size: str = "A4"  # "A4" or "LETTER"
    placeholder: str = "--"

    geometry: RenderGeometry = field(default_factory=RenderGeometry)
    money: MoneyFormat = field(default_factory=MoneyFormat)

    headers: Dict[str, str] = field(default_factory=lambda: {
        "name": "Items",
        "unit_price": "Unit cost",
        "quantity": "Quantity",
        "tax": "Tax",
        "discount": "Discount",
        "total": "Total",
    })

    @classmethod
    def from_dict(cls, data: dict) -> "InvoiceStyle":
        data = dict(data or {})

        # Colors come back from YAML as lists
        for key in ("base_text_color", "grey_text_color"):
            if key in data:
                data[key] = _to_rgb(data[key], key)

        if "headers" in data:
            headers = cls().headers
            headers.update(data["headers"])
            data["headers"] = headers

        try:
            if "geometry" in data:
                data["geometry"] = RenderGeometry(**data["geometry"])
            if "money" in data:
                data["money"] = MoneyFormat(**data["money"])
            style = cls(**data)
        except TypeError as exc:
            raise ValidationError(str(exc), field="style") from exc
        style.geometry.validate()
        return style

    @classmethod
    def from_yaml(cls, path: Path) -> "InvoiceStyle":
        """Load a style from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls.from_dict(data or {})

    def to_dict(self) -> dict:
        data = asdict(self)
        data["base_text_color"] = list(self.base_text_color)
        data["grey_text_color"] = list(self.grey_text_color)
        return data

    def to_yaml(self, path: Path) -> None:
        """Save the style to a YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def _to_rgb(value, key: str) -> RGB:
    try:
        r, g, b = (int(c) for c in value)
    except (TypeError, ValueError) as exc:
        raise ValidationError("expected three color channels", field=key) from exc
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValidationError(f"color channel {channel} out of range 0-255", field=key)
    return (r, g, b)


def load_style(path: Optional[Path] = None) -> InvoiceStyle:
    """Load style from path or return the default style."""
    if path is None:
        return InvoiceStyle()
    return InvoiceStyle.from_yaml(path)
