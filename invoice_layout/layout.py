"""Single-page invoice layout.

Each block is a pure step ``(cursor_y, data) -> (new_cursor_y, primitives)``.
The cursor is the lowest y occupied so far; blocks are composed top to bottom
in one pass by ``layout_invoice``.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

from .formatting import TextWidthProvider, fmt_date, fmt_money, fmt_qty, tax_label
from .models import InvoiceRecord, InvoiceStatus, Party, PricedLineItem, RenderedTotals
from .pdf_constants import (
    ADDRESS_GAP,
    BADGE_GAP,
    BADGE_H,
    BADGE_PAD_X,
    BADGE_TEXT_RISE,
    BILL_TO_GAP,
    CELL_PAD_LEFT,
    CELL_PAD_RIGHT,
    CLASSIC_FOOTER_Y,
    CLASSIC_HEADER_H,
    CLASSIC_META_X,
    CLIENT_ADDRESS_GAP,
    CLIENT_NAME_GAP,
    COLOR_BADGE_TEXT,
    COLOR_BAND,
    COLOR_BLACK,
    COLOR_DIVIDER,
    COLOR_FOOTER,
    COLOR_HEADER_BAND,
    COLOR_HEADER_TEXT,
    COLOR_LABEL,
    COLOR_PAID,
    COLOR_TABLE_BORDER,
    COLOR_TABLE_HEAD,
    COLOR_TABLE_HEAD_LIGHT,
    COLOR_TABLE_HEAD_TEXT,
    COLOR_TITLE,
    COLOR_TOTAL_BOX,
    COLOR_UNPAID,
    COLUMN_WIDTHS,
    CONTENT_RIGHT,
    CONTENT_W,
    DIVIDER_GAP,
    DIVIDER_THICKNESS,
    FONT_SIZE_HEADER,
    FONT_SIZE_NORMAL,
    FONT_SIZE_SMALL,
    FONT_SIZE_TITLE,
    FOOTER_DIVIDER_THICKNESS,
    FOOTER_FIRST_GAP,
    FOOTER_GAP,
    HEADER_BAND_H,
    LAYOUT_VARIANTS,
    LINE_HEIGHT,
    MARGIN_LEFT,
    NAME_GAP,
    NOTES_GAP,
    NOTES_INDENT,
    NOTES_LABEL_GAP,
    PAGE_H,
    PAGE_W,
    PAYMENT_TERMS,
    ROW_HEIGHT,
    ROW_TEXT_OFFSET,
    TABLE_GAP,
    TABLE_LABELS,
    THANK_YOU_TEXT,
    TITLE_OFFSET,
    TITLE_TEXT,
    TOTAL_BOX_GAP,
    TOTAL_BOX_H,
    TOTAL_TEXT_RISE,
    TOTALS_GAP,
    VARIANT_CLASSIC,
    VARIANT_DETAILED,
)
from .primitives import Color, FontFace, Line, Primitive, Rectangle, TextRun
from .textflow import flow_below, line_offsets, split_lines

Block = Tuple[float, List[Primitive]]

COLUMN_LEFTS = tuple(MARGIN_LEFT + sum(COLUMN_WIDTHS[:index]) for index in range(len(COLUMN_WIDTHS)))
COLUMN_RIGHTS = tuple(left + width for left, width in zip(COLUMN_LEFTS, COLUMN_WIDTHS))


def _text(
    x: float,
    y: float,
    text: str,
    size: int,
    color: Color,
    bold: bool = False,
) -> TextRun:
    return TextRun(x, y, text, FontFace.BOLD if bold else FontFace.REGULAR, size, color)


def _right(
    measure: TextWidthProvider,
    right_x: float,
    y: float,
    text: str,
    size: int,
    color: Color,
    bold: bool = False,
) -> TextRun:
    return _text(right_x - measure.text_width(text, size, bold=bold), y, text, size, color, bold)


def _centered(
    measure: TextWidthProvider,
    y: float,
    text: str,
    size: int,
    color: Color,
    bold: bool = False,
) -> TextRun:
    width = measure.text_width(text, size, bold=bold)
    return _text(PAGE_W / 2.0 - width / 2.0, y, text, size, color, bold)


def _status_value(status: Union[InvoiceStatus, str]) -> str:
    if isinstance(status, InvoiceStatus):
        return status.value
    return str(status)


def badge_color(status: Union[InvoiceStatus, str]) -> Color:
    """Paid invoices get the paid colour; every other status is unpaid."""
    if _status_value(status).strip().lower() == InvoiceStatus.PAID.value:
        return COLOR_PAID
    return COLOR_UNPAID


def layout_header(top_y: float, variant: str = VARIANT_DETAILED) -> Block:
    if variant == VARIANT_CLASSIC:
        title = _text(MARGIN_LEFT, top_y - TITLE_OFFSET, TITLE_TEXT, FONT_SIZE_TITLE, COLOR_TITLE, bold=True)
        return top_y - CLASSIC_HEADER_H, [title]

    band = Rectangle(0.0, top_y - HEADER_BAND_H, PAGE_W, HEADER_BAND_H, COLOR_HEADER_BAND)
    title = _text(MARGIN_LEFT, top_y - TITLE_OFFSET, TITLE_TEXT, FONT_SIZE_TITLE, COLOR_HEADER_TEXT, bold=True)
    return top_y - HEADER_BAND_H, [band, title]


def layout_company(cursor_y: float, company: Party) -> Block:
    name_y = cursor_y - NAME_GAP
    base_y = name_y - ADDRESS_GAP
    lines = split_lines(company.address)

    primitives: List[Primitive] = [
        _text(MARGIN_LEFT, name_y, company.name, FONT_SIZE_HEADER, COLOR_BLACK, bold=True)
    ]
    for y, line in zip(line_offsets(base_y, len(lines)), lines):
        primitives.append(_text(MARGIN_LEFT, y, line, FONT_SIZE_NORMAL, COLOR_BLACK))

    email_y = flow_below(base_y, lines)
    phone_y = email_y - LINE_HEIGHT
    primitives.append(_text(MARGIN_LEFT, email_y, f"Email: {company.email}", FONT_SIZE_NORMAL, COLOR_BLACK))
    primitives.append(_text(MARGIN_LEFT, phone_y, f"Phone: {company.phone}", FONT_SIZE_NORMAL, COLOR_BLACK))
    return phone_y, primitives


def layout_badge(
    right_x: float,
    top_y: float,
    status: Union[InvoiceStatus, str],
    measure: TextWidthProvider,
) -> Block:
    label = _status_value(status).upper()
    width = measure.text_width(label, FONT_SIZE_SMALL, bold=True) + 2 * BADGE_PAD_X
    x = right_x - width
    y = top_y - BADGE_H
    # Rectangle first so the label is drawn over it.
    return y, [
        Rectangle(x, y, width, BADGE_H, badge_color(status)),
        _text(x + BADGE_PAD_X, y + BADGE_TEXT_RISE, label, FONT_SIZE_SMALL, COLOR_BADGE_TEXT, bold=True),
    ]


def layout_meta(
    top_y: float,
    record: InvoiceRecord,
    measure: TextWidthProvider,
    variant: str = VARIANT_DETAILED,
) -> Block:
    """Invoice number, dates and status, level with the company block."""
    lines = [
        f"Invoice #: {record.invoice_number}",
        f"Date: {fmt_date(record.invoice_date)}",
        f"Due Date: {fmt_date(record.due_date)}",
    ]
    offsets = line_offsets(top_y - NAME_GAP, len(lines))

    if variant == VARIANT_CLASSIC:
        primitives = [
            _text(CLASSIC_META_X, y, line, FONT_SIZE_NORMAL, COLOR_BLACK)
            for y, line in zip(offsets, lines)
        ]
        return offsets[-1], primitives

    primitives = [
        _right(measure, CONTENT_RIGHT, y, line, FONT_SIZE_NORMAL, COLOR_BLACK)
        for y, line in zip(offsets, lines)
    ]
    bottom_y, badge = layout_badge(CONTENT_RIGHT, offsets[-1] - BADGE_GAP, record.status, measure)
    return bottom_y, primitives + badge


def layout_divider(
    cursor_y: float,
    gap: float = DIVIDER_GAP,
    thickness: float = DIVIDER_THICKNESS,
) -> Block:
    y = cursor_y - gap
    return y, [Line(MARGIN_LEFT, y, CONTENT_RIGHT, y, thickness, COLOR_DIVIDER)]


def layout_client(cursor_y: float, client: Party) -> Block:
    label_y = cursor_y - BILL_TO_GAP
    name_y = label_y - CLIENT_NAME_GAP
    base_y = name_y - CLIENT_ADDRESS_GAP
    lines = split_lines(client.address)

    primitives: List[Primitive] = [
        _text(MARGIN_LEFT, label_y, "BILL TO:", FONT_SIZE_HEADER, COLOR_LABEL, bold=True),
        _text(MARGIN_LEFT, name_y, client.name, FONT_SIZE_NORMAL, COLOR_BLACK, bold=True),
    ]
    for y, line in zip(line_offsets(base_y, len(lines)), lines):
        primitives.append(_text(MARGIN_LEFT, y, line, FONT_SIZE_NORMAL, COLOR_BLACK))

    email_y = flow_below(base_y, lines)
    primitives.append(_text(MARGIN_LEFT, email_y, f"Email: {client.email}", FONT_SIZE_NORMAL, COLOR_BLACK))
    return email_y, primitives


def _table_header(table_top: float, measure: TextWidthProvider, variant: str) -> List[Primitive]:
    row_y = table_top - ROW_HEIGHT
    if variant == VARIANT_CLASSIC:
        background = Rectangle(
            MARGIN_LEFT,
            row_y,
            CONTENT_W,
            ROW_HEIGHT,
            COLOR_TABLE_HEAD_LIGHT,
            border_color=COLOR_TABLE_BORDER,
            border_width=1.0,
        )
        color = COLOR_TITLE
    else:
        background = Rectangle(MARGIN_LEFT, row_y, CONTENT_W, ROW_HEIGHT, COLOR_TABLE_HEAD)
        color = COLOR_TABLE_HEAD_TEXT

    text_y = table_top - ROW_TEXT_OFFSET
    primitives: List[Primitive] = [
        background,
        _text(COLUMN_LEFTS[0] + CELL_PAD_LEFT, text_y, TABLE_LABELS[0], FONT_SIZE_HEADER, color, bold=True),
    ]
    for label, right in zip(TABLE_LABELS[1:], COLUMN_RIGHTS[1:]):
        primitives.append(_right(measure, right - CELL_PAD_RIGHT, text_y, label, FONT_SIZE_HEADER, color, bold=True))
    return primitives


def layout_table(
    cursor_y: float,
    items: Sequence[PricedLineItem],
    measure: TextWidthProvider,
    variant: str = VARIANT_DETAILED,
) -> Block:
    table_top = cursor_y - TABLE_GAP
    primitives = _table_header(table_top, measure, variant)

    for index, item in enumerate(items):
        row_top = table_top - ROW_HEIGHT * (index + 1)
        if index % 2 == 0:
            primitives.append(Rectangle(MARGIN_LEFT, row_top - ROW_HEIGHT, CONTENT_W, ROW_HEIGHT, COLOR_BAND))

        text_y = row_top - ROW_TEXT_OFFSET
        primitives.append(
            _text(COLUMN_LEFTS[0] + CELL_PAD_LEFT, text_y, item.description, FONT_SIZE_NORMAL, COLOR_BLACK)
        )
        cells = (fmt_qty(item.quantity), fmt_money(item.unit_price), fmt_money(item.amount))
        for cell, right in zip(cells, COLUMN_RIGHTS[1:]):
            primitives.append(_right(measure, right - CELL_PAD_RIGHT, text_y, cell, FONT_SIZE_NORMAL, COLOR_BLACK))

    return table_top - ROW_HEIGHT * (len(items) + 1), primitives


def layout_totals(
    cursor_y: float,
    totals: RenderedTotals,
    measure: TextWidthProvider,
    variant: str = VARIANT_DETAILED,
) -> Block:
    label_right = COLUMN_RIGHTS[2] - CELL_PAD_RIGHT
    value_right = COLUMN_RIGHTS[3] - CELL_PAD_RIGHT
    primitives: List[Primitive] = []

    if variant == VARIANT_CLASSIC:
        box_top = cursor_y - TOTAL_BOX_GAP
    else:
        rows = (
            ("Subtotal:", totals.subtotal),
            (tax_label(totals.tax_rate), totals.tax_amount),
        )
        offsets = line_offsets(cursor_y - TOTALS_GAP, len(rows))
        for y, (label, value) in zip(offsets, rows):
            primitives.append(_right(measure, label_right, y, label, FONT_SIZE_NORMAL, COLOR_LABEL))
            primitives.append(_right(measure, value_right, y, fmt_money(value), FONT_SIZE_NORMAL, COLOR_BLACK))
        box_top = offsets[-1] - TOTAL_BOX_GAP

    box_x = COLUMN_LEFTS[2]
    box_y = box_top - TOTAL_BOX_H
    text_y = box_y + TOTAL_TEXT_RISE
    primitives.append(Rectangle(box_x, box_y, COLUMN_RIGHTS[3] - box_x, TOTAL_BOX_H, COLOR_TOTAL_BOX))
    primitives.append(_right(measure, label_right, text_y, "Total:", FONT_SIZE_HEADER, COLOR_BLACK, bold=True))
    primitives.append(
        _right(measure, value_right, text_y, fmt_money(totals.grand_total), FONT_SIZE_HEADER, COLOR_TITLE, bold=True)
    )
    return box_y, primitives


def layout_payment(cursor_y: float, record: InvoiceRecord, totals: RenderedTotals) -> Block:
    """Payment information column, left of and level with the totals block."""
    if _status_value(record.status).strip().lower() == InvoiceStatus.PAID.value:
        status_line = "Paid in full."
    else:
        status_line = f"Amount due: {fmt_money(totals.grand_total)}"
    lines = [
        status_line,
        f"Due by: {fmt_date(record.due_date)}",
        f"Reference: {record.invoice_number}",
    ]

    label_y = cursor_y - TOTALS_GAP
    primitives: List[Primitive] = [
        _text(MARGIN_LEFT, label_y, "PAYMENT INFORMATION", FONT_SIZE_NORMAL, COLOR_LABEL, bold=True)
    ]
    offsets = line_offsets(label_y - LINE_HEIGHT, len(lines))
    for y, line in zip(offsets, lines):
        primitives.append(_text(MARGIN_LEFT, y, line, FONT_SIZE_NORMAL, COLOR_BLACK))
    return offsets[-1], primitives


def layout_notes(cursor_y: float, notes: Optional[str]) -> Block:
    if not notes or not notes.strip():
        return cursor_y, []

    label_y = cursor_y - NOTES_GAP
    lines = split_lines(notes)
    offsets = line_offsets(label_y - NOTES_LABEL_GAP, len(lines))

    primitives: List[Primitive] = [
        _text(MARGIN_LEFT, label_y, "NOTES:", FONT_SIZE_HEADER, COLOR_LABEL, bold=True)
    ]
    for y, line in zip(offsets, lines):
        primitives.append(_text(MARGIN_LEFT + NOTES_INDENT, y, line, FONT_SIZE_NORMAL, COLOR_BLACK))
    return offsets[-1], primitives


def layout_footer(
    cursor_y: float,
    generated_on: date,
    measure: TextWidthProvider,
    variant: str = VARIANT_DETAILED,
) -> Block:
    if variant == VARIANT_CLASSIC:
        return CLASSIC_FOOTER_Y, [
            _centered(measure, CLASSIC_FOOTER_Y, THANK_YOU_TEXT, FONT_SIZE_NORMAL, COLOR_LABEL)
        ]

    divider_y, primitives = layout_divider(cursor_y, gap=FOOTER_GAP, thickness=FOOTER_DIVIDER_THICKNESS)
    lines = [
        (THANK_YOU_TEXT, FONT_SIZE_NORMAL),
        (f"Generated on {fmt_date(generated_on)}", FONT_SIZE_SMALL),
        (PAYMENT_TERMS, FONT_SIZE_SMALL),
    ]
    offsets = line_offsets(divider_y - FOOTER_FIRST_GAP, len(lines))
    for y, (line, size) in zip(offsets, lines):
        primitives.append(_centered(measure, y, line, size, COLOR_FOOTER))
    return offsets[-1], primitives


def layout_invoice(
    record: InvoiceRecord,
    totals: RenderedTotals,
    measure: TextWidthProvider,
    variant: str = VARIANT_DETAILED,
    generated_on: Optional[date] = None,
) -> List[Primitive]:
    """Lay out one invoice page and return its primitives in draw order."""
    if variant not in LAYOUT_VARIANTS:
        raise ValueError(f"Unknown layout variant {variant!r}; expected one of {', '.join(LAYOUT_VARIANTS)}.")
    if generated_on is None:
        generated_on = date.today()

    primitives: List[Primitive] = []

    header_y, block = layout_header(PAGE_H, variant)
    primitives.extend(block)

    cursor, block = layout_company(header_y, record.company)
    primitives.extend(block)

    # Meta sits beside the company block and does not move the cursor.
    _, block = layout_meta(header_y, record, measure, variant)
    primitives.extend(block)

    cursor, block = layout_divider(cursor)
    primitives.extend(block)

    cursor, block = layout_client(cursor, record.client)
    primitives.extend(block)

    cursor, block = layout_table(cursor, totals.items, measure, variant)
    primitives.extend(block)

    table_bottom = cursor
    cursor, block = layout_totals(table_bottom, totals, measure, variant)
    primitives.extend(block)

    if variant == VARIANT_DETAILED:
        _, block = layout_payment(table_bottom, record, totals)
        primitives.extend(block)

    cursor, block = layout_notes(cursor, record.notes)
    primitives.extend(block)

    _, block = layout_footer(cursor, generated_on, measure, variant)
    primitives.extend(block)
    return primitives
