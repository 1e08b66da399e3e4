"""Drawing surface with an FPDF-style top-down cursor on top of a ReportLab canvas."""

import unicodedata
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

RGB = Tuple[int, int, int]

PAGE_SIZES = {
    "A4": A4,
    "LETTER": LETTER,
}

# Standard PDF fonts are drawn with WinAnsiEncoding
OUTPUT_CHARSET = "cp1252"


@dataclass
class DrawnCell:
    """Metadata for one drawn cell or wrapped text line, in page units from the top-left."""
    kind: str  # "cell" or "line"
    page: int
    x: float
    y: float
    width: float
    height: float
    text: str
    align: str
    font_family: str
    font_size: float
    color: RGB

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        """(x0, top, x1, bottom)."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)


def encode_string(text: str) -> str:
    """Make text safe for the output charset, stripping diacritics where needed."""
    out = []
    for ch in unicodedata.normalize("NFC", str(text)):
        try:
            ch.encode(OUTPUT_CHARSET)
            out.append(ch)
        except UnicodeEncodeError:
            decomposed = unicodedata.normalize("NFKD", ch)
            out.append(decomposed.encode(OUTPUT_CHARSET, "ignore").decode(OUTPUT_CHARSET))
    return "".join(out)


class ReportLabSurface:
    """
    Cursor-based drawing surface.

    Coordinates are in page units (mm by default) measured from the top-left
    corner; conversion to ReportLab's bottom-left point space happens when
    drawing. Font, color and cursor are shared state for the whole document.
    """

    def __init__(
        self,
        target,
        page_size: Tuple[float, float] = A4,
        unit: float = mm,
        left_margin: float = 10.0,
        top_margin: float = 10.0,
        cell_margin: float = 1.0,
        font_family: str = "Helvetica",
        font_size: float = 8,
        text_color: RGB = (0, 0, 0),
    ):
        self.canvas = canvas.Canvas(target, pagesize=page_size)
        self.unit = unit
        self.page_width = page_size[0] / unit
        self.page_height = page_size[1] / unit
        self.left_margin = left_margin
        self.top_margin = top_margin
        self.cell_margin = cell_margin
        self.page = 0
        self.cells: List[DrawnCell] = []

        self._x = left_margin
        self._y = top_margin
        self._font_family = font_family
        self._font_size = font_size
        self._text_color = text_color
        self.set_font(font_family, font_size)
        self.set_text_color(*text_color)

    # Cursor

    def get_x(self) -> float:
        return self._x

    def get_y(self) -> float:
        return self._y

    def set_x(self, x: float) -> None:
        self._x = x

    def set_y(self, y: float) -> None:
        """Move the cursor vertically; X goes back to the left margin."""
        self._y = y
        self._x = self.left_margin

    def set_xy(self, x: float, y: float) -> None:
        self.set_y(y)
        self.set_x(x)

    # Style

    @property
    def font_family(self) -> str:
        return self._font_family

    @property
    def font_size(self) -> float:
        return self._font_size

    @property
    def text_color(self) -> RGB:
        return self._text_color

    def set_font(self, family: str, size: float) -> None:
        self.canvas.setFont(family, size)
        self._font_family = family
        self._font_size = size

    def set_text_color(self, r: int, g: int, b: int) -> None:
        self.canvas.setFillColorRGB(r / 255.0, g / 255.0, b / 255.0)
        self._text_color = (r, g, b)

    @contextmanager
    def style(
        self,
        size: Optional[float] = None,
        color: Optional[RGB] = None,
        family: Optional[str] = None,
    ) -> Iterator["ReportLabSurface"]:
        """Apply a font/color for the duration of the block and always restore the previous one."""
        saved_family, saved_size, saved_color = self._font_family, self._font_size, self._text_color
        self.canvas.saveState()
        try:
            self.set_font(family or saved_family, size if size is not None else saved_size)
            if color is not None:
                self.set_text_color(*color)
            yield self
        finally:
            self.canvas.restoreState()
            self.set_font(saved_family, saved_size)
            self.set_text_color(*saved_color)

    # Text

    def encode_string(self, text: str) -> str:
        return encode_string(text)

    def string_width(self, text: str) -> float:
        """Width of text in page units with the current font."""
        return stringWidth(text, self._font_family, self._font_size) / self.unit

    def _font_height(self) -> float:
        return self._font_size / self.unit

    def _baseline(self, y: float, h: float, align: str) -> float:
        fh = self._font_height()
        if "T" in align:
            return y + 0.8 * fh
        if "B" in align:
            return y + h - 0.2 * fh
        return y + 0.5 * h + 0.3 * fh

    def _text_x(self, x: float, w: float, text: str, align: str) -> float:
        if "R" in align:
            return x + w - self.cell_margin - self.string_width(text)
        if "C" in align:
            return x + (w - self.string_width(text)) / 2
        return x + self.cell_margin

    def _draw_string(self, x: float, baseline: float, text: str) -> None:
        self.canvas.drawString(x * self.unit, (self.page_height - baseline) * self.unit, text)

    def _record(self, kind: str, x: float, y: float, w: float, h: float, text: str, align: str) -> None:
        self.cells.append(DrawnCell(
            kind=kind,
            page=self.page,
            x=x,
            y=y,
            width=w,
            height=h,
            text=text,
            align=align,
            font_family=self._font_family,
            font_size=self._font_size,
            color=self._text_color,
        ))

    def cell(self, w: float, h: float, text: str = "", align: str = "", border: bool = False) -> None:
        """
        Draw a single-line cell of fixed size at the cursor.

        align combines a horizontal flag (L, R, C; default L) with a vertical
        one (T, B; default middle). The cursor moves right by w.
        """
        x, y = self._x, self._y
        if border:
            self.canvas.rect(
                x * self.unit,
                (self.page_height - y - h) * self.unit,
                w * self.unit,
                h * self.unit,
                stroke=1,
                fill=0,
            )
        if text:
            self._draw_string(self._text_x(x, w, text, align), self._baseline(y, h, align), text)
        self._record("cell", x, y, w, h, text, align)
        self._x = x + w

    def multi_cell(self, w: float, h: float, text: str, align: str = "L") -> float:
        """
        Draw text wrapped to width w, one line per h.

        The cursor ends below the block at the left margin. Returns the
        consumed height.
        """
        x, start_y = self._x, self._y
        max_width = (w - 2 * self.cell_margin) * self.unit
        lines = simpleSplit(text, self._font_family, self._font_size, max_width) or [""]

        y = start_y
        for line in lines:
            if line:
                self._draw_string(self._text_x(x, w, line, align), self._baseline(y, h, align), line)
            self._record("line", x, y, w, h, line, align)
            y += h

        self._y = y
        self._x = self.left_margin
        return y - start_y

    def line(self, x1: float, y1: float, x2: float, y2: float, width: float = 0.2) -> None:
        """Draw a rule between two points in page units."""
        self.canvas.setLineWidth(width)
        self.canvas.line(
            x1 * self.unit,
            (self.page_height - y1) * self.unit,
            x2 * self.unit,
            (self.page_height - y2) * self.unit,
        )

    # Pages

    def show_page(self) -> None:
        """Finish the current page; cursor and style carry over to the next one."""
        self.canvas.showPage()
        self.page += 1
        self._x = self.left_margin
        self._y = self.top_margin
        # showPage resets the canvas graphics state
        self.set_font(self._font_family, self._font_size)
        self.set_text_color(*self._text_color)

    def save(self) -> None:
        self.canvas.save()
