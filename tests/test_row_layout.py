import pytest

from invoice_rows.line_item import prepare
from invoice_rows.row_layout import RowLayout

LONG_DESCRIPTION = (
    "Quarterly maintenance covering dependency upgrades, security patches, "
    "database backups, uptime monitoring and two hours of content changes "
    "requested through the support portal."
)


def style_state(surface):
    return (surface.font_family, surface.font_size, surface.text_color)


def test_row_height_follows_description(surface, style, make_item):
    layout = RowLayout(style)
    surface.set_y(30)
    short = layout.render(surface, prepare(make_item(description="Monthly")))
    tall = layout.render(surface, prepare(make_item(description=LONG_DESCRIPTION)))

    assert tall.col_height > short.col_height
    # name line + gap + one description line
    assert short.col_height == pytest.approx(2 * style.line_height + style.description_gap)


def test_row_without_description_is_one_line(surface, style, make_item):
    result = RowLayout(style).render(surface, prepare(make_item()))
    assert result.col_height == pytest.approx(style.line_height)


def test_cursor_ends_below_row(surface, style, make_item):
    surface.set_y(42)
    result = RowLayout(style).render(surface, prepare(make_item(description=LONG_DESCRIPTION)))

    assert result.base_y == 42
    assert result.end_y == pytest.approx(42 + result.col_height)
    assert surface.get_y() == pytest.approx(result.end_y)


def test_numeric_columns_span_row_height(surface, style, make_item):
    geo = style.geometry
    result = RowLayout(style).render(surface, prepare(make_item(description=LONG_DESCRIPTION)))

    for x in (geo.unit_price, geo.quantity, geo.total):
        (cell,) = result.column_cells(x)
        assert cell.height == pytest.approx(result.col_height)
        assert cell.y == result.base_y


def test_missing_discount_and_tax_show_placeholder(surface, style, make_item):
    geo = style.geometry
    result = RowLayout(style).render(surface, prepare(make_item()))

    for x in (geo.discount, geo.tax):
        (cell,) = result.column_cells(x)
        assert cell.text == "--"
        assert cell.height == pytest.approx(result.col_height)


def test_zero_discount_shows_placeholder(surface, style, make_item):
    result = RowLayout(style).render(surface, prepare(make_item(discount={"amount": "0.00"})))
    (cell,) = result.column_cells(style.geometry.discount)
    assert cell.text == "--"


def test_discount_splits_into_two_half_cells(surface, style, make_item):
    layout = RowLayout(style)
    line = prepare(make_item(unit_cost="100", quantity="2", discount={"percent": "10"}, description=LONG_DESCRIPTION))
    before = style_state(surface)

    result = layout.render(surface, line)

    top, bottom = result.column_cells(style.geometry.discount)
    half = result.col_height / 2
    assert top.height == pytest.approx(half)
    assert bottom.height == pytest.approx(half)
    assert bottom.y == pytest.approx(result.base_y + half)
    assert top.text == "- € 20.00"
    assert bottom.text == "10 %"
    assert bottom.font_size == style.small_font_size
    assert bottom.color == style.grey_text_color
    assert top.font_size == style.base_font_size
    assert style_state(surface) == before


def test_amount_discount_has_empty_label(surface, style, make_item):
    result = RowLayout(style).render(surface, prepare(make_item(discount={"amount": "7.5"})))
    top, bottom = result.column_cells(style.geometry.discount)
    assert top.text == "- € 7.50"
    assert bottom.text == ""


def test_tax_splits_with_percent_label(surface, style, make_item):
    line = prepare(make_item(unit_cost="100", discount={"percent": "10"}, tax={"percent": "20"}))
    before = style_state(surface)

    result = RowLayout(style).render(surface, line)

    top, bottom = result.column_cells(style.geometry.tax)
    assert top.text == "€ 18.00"
    assert top.align == "LB"
    assert bottom.text == "20 %"
    assert bottom.align == "LT"
    assert top.height == pytest.approx(result.col_height / 2)
    assert style_state(surface) == before


def test_total_shows_paid_amount_verbatim(surface, style, make_item):
    # Paid amount differs from the derived grand total on purpose
    line = prepare(make_item(unit_cost="10", quantity="3", tax={"percent": "20"}, paid="35.99"))
    result = RowLayout(style).render(surface, line)

    (cell,) = result.column_cells(style.geometry.total)
    assert cell.text == "€ 35.99"


def test_unit_price_and_quantity_text(surface, style, make_item):
    result = RowLayout(style).render(surface, prepare(make_item(unit_cost="1250.5", quantity="2.5")))
    (price,) = result.column_cells(style.geometry.unit_price)
    (qty,) = result.column_cells(style.geometry.quantity)
    assert price.text == "€ 1 250.50"
    assert qty.text == "2.5"


def test_style_restored_when_description_drawn(surface, style, make_item):
    before = style_state(surface)
    RowLayout(style).render(surface, prepare(make_item(description="muted text")))
    assert style_state(surface) == before

    desc_lines = [c for c in surface.cells if c.kind == "line" and c.text == "muted text"]
    assert desc_lines[0].font_size == style.small_font_size


def test_unprepared_line_is_refused(surface, style, make_item):
    with pytest.raises(TypeError):
        RowLayout(style).render(surface, make_item())
    assert surface.cells == []


def test_rows_stack(surface, style, make_item):
    layout = RowLayout(style)
    first = layout.render(surface, prepare(make_item(description=LONG_DESCRIPTION), index=0))
    second = layout.render(surface, prepare(make_item(), index=1))

    assert second.base_y == pytest.approx(first.end_y)
    assert (first.index, second.index) == (0, 1)


def test_header_draws_every_column(surface, style):
    height = RowLayout(style).render_header(surface)

    titles = [c.text for c in surface.cells]
    assert titles == [style.headers[col] for col in ("name", "unit_price", "quantity", "tax", "discount", "total")]
    assert height > style.header_height
    assert surface.font_family == style.font_family
