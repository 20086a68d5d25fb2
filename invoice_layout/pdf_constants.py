"""Page geometry, colours and fixed rates shared by the layout engine."""

from __future__ import annotations

from decimal import Decimal

# ISO A4 in points, bottom-left origin.
PAGE_W = 595.28
PAGE_H = 841.89

VARIANT_DETAILED = "detailed"
VARIANT_CLASSIC = "classic"
LAYOUT_VARIANTS = (VARIANT_DETAILED, VARIANT_CLASSIC)

# Single source of truth for tax, used by totals, labels and the preview endpoint.
TAX_RATE = Decimal("0.05")
CURRENCY_SYMBOL = "$"

MARGIN_LEFT = 50.0
COLUMN_WIDTHS = (280.0, 70.0, 80.0, 90.0)
CONTENT_RIGHT = MARGIN_LEFT + sum(COLUMN_WIDTHS)
CONTENT_W = CONTENT_RIGHT - MARGIN_LEFT
CELL_PAD_LEFT = 10.0
CELL_PAD_RIGHT = 8.0

LINE_HEIGHT = 15.0
ROW_HEIGHT = 25.0
ROW_TEXT_OFFSET = 16.0

HEADER_BAND_H = 80.0
TITLE_OFFSET = 50.0
CLASSIC_HEADER_H = 60.0
CLASSIC_META_X = PAGE_W - 200
CLASSIC_FOOTER_Y = 50.0

NAME_GAP = 30.0
ADDRESS_GAP = 20.0
DIVIDER_GAP = 25.0
DIVIDER_THICKNESS = 2.0
FOOTER_DIVIDER_THICKNESS = 1.0

BADGE_GAP = 10.0
BADGE_H = 16.0
BADGE_PAD_X = 8.0
BADGE_TEXT_RISE = 5.0

BILL_TO_GAP = 30.0
CLIENT_NAME_GAP = 20.0
CLIENT_ADDRESS_GAP = 15.0

TABLE_GAP = 30.0
TOTALS_GAP = 20.0
TOTAL_BOX_GAP = 10.0
TOTAL_BOX_H = 30.0
TOTAL_TEXT_RISE = 11.0

NOTES_GAP = 30.0
NOTES_LABEL_GAP = 20.0
NOTES_INDENT = 10.0

FOOTER_GAP = 25.0
FOOTER_FIRST_GAP = 20.0

FONT_SIZE_TITLE = 24
FONT_SIZE_HEADER = 12
FONT_SIZE_NORMAL = 10
FONT_SIZE_SMALL = 9

COLOR_BLACK = (0, 0, 0)
COLOR_TITLE = (51, 51, 51)
COLOR_LABEL = (102, 102, 102)
COLOR_DIVIDER = (204, 204, 204)
COLOR_HEADER_BAND = (44, 62, 80)
COLOR_HEADER_TEXT = (255, 255, 255)
COLOR_TABLE_HEAD = (51, 51, 51)
COLOR_TABLE_HEAD_TEXT = (255, 255, 255)
COLOR_TABLE_HEAD_LIGHT = (230, 230, 230)
COLOR_TABLE_BORDER = (204, 204, 204)
COLOR_BAND = (247, 247, 247)
COLOR_TOTAL_BOX = (242, 242, 242)
COLOR_PAID = (39, 174, 96)
COLOR_UNPAID = (192, 57, 43)
COLOR_BADGE_TEXT = (255, 255, 255)
COLOR_FOOTER = (102, 102, 102)

TITLE_TEXT = "INVOICE"
THANK_YOU_TEXT = "Thank you for your business!"
PAYMENT_TERMS = "Payment is due within 30 days of the invoice date."
TABLE_LABELS = ("Description", "Quantity", "Unit Price", "Amount")
