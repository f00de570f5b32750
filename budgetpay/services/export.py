"""Statement exports: spreadsheet (xlsx), PDF and CSV.

Renderers are pure functions of the expense rows; an empty slice produces an
empty (header-only) document rather than an error.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from io import BytesIO
from typing import Iterable, Iterator, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from reportlab.lib.pagesizes import LETTER
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from ..models.expense import Expense

logger = logging.getLogger(__name__)

SPREADSHEET = "xlsx"
PDF = "pdf"
CSV = "csv"

_FORMAT_ALIASES = {
    "xlsx": SPREADSHEET,
    "excel": SPREADSHEET,
    "spreadsheet": SPREADSHEET,
    "pdf": PDF,
    "csv": CSV,
}

MEDIA_TYPES = {
    SPREADSHEET: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    PDF: "application/pdf",
    CSV: "text/csv",
}

HEADERS = ("Date", "Description", "Category", "Amount")
CSV_HEADER = "date,description,category,amount"
CSV_FILENAME = "expenses.csv"

# PDF layout, in points measured from the top-left corner of a Letter page.
PAGE_WIDTH, PAGE_HEIGHT = LETTER
MARGIN = 36
CONTENT_BOTTOM = 760
ROW_HEIGHT = 16
COLUMN_X = (36, 120, 360, 500)
DESCRIPTION_WIDTH = 230
CATEGORY_WIDTH = 120
AMOUNT_WIDTH = 72
RULE_END = 576
FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
TITLE_SIZE = 16
BODY_SIZE = 10


@dataclass
class ExportDocument:
    content: bytes
    filename: str
    media_type: str


def normalize_format(value: Optional[str]) -> str:
    """Missing means the spreadsheet; anything unrecognised falls back to CSV."""
    key = (value or "").strip().lower() or SPREADSHEET
    return _FORMAT_ALIASES.get(key, CSV)


def build_filename(fmt: str, date_from: Optional[date] = None, date_to: Optional[date] = None) -> str:
    if fmt == CSV:
        return CSV_FILENAME
    parts = ["expenses"]
    if date_from:
        parts.append(f"from-{date_from.isoformat()}")
    if date_to:
        parts.append(f"to-{date_to.isoformat()}")
    return f"{'_'.join(parts)}.{fmt}"


def format_currency(amount: Decimal, currency: str) -> str:
    return f"{currency} {Decimal(amount):,.2f}"


# ─────────────────────────────
#   CSV
# ─────────────────────────────

def _quote(value: str) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def iter_csv_lines(rows: Iterable[Expense]) -> Iterator[str]:
    yield CSV_HEADER + "\n"
    for r in rows:
        yield f"{r.expense_date.isoformat()},{_quote(r.description)},{_quote(r.category)},{r.amount}\n"


def render_csv(rows: Iterable[Expense]) -> bytes:
    return "".join(iter_csv_lines(rows)).encode("utf-8")


# ─────────────────────────────
#   Spreadsheet
# ─────────────────────────────

def render_spreadsheet(rows: Iterable[Expense]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Expenses"

    ws.append(list(HEADERS))
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for letter, width in zip("ABCD", (15, 40, 20, 15)):
        ws.column_dimensions[letter].width = width

    for r in rows:
        ws.append([r.expense_date.isoformat(), r.description, r.category, float(r.amount)])

    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


# ─────────────────────────────
#   PDF
# ─────────────────────────────

def _fit(text: str, width: float, font: str = FONT, size: int = BODY_SIZE) -> str:
    """Truncate ``text`` with an ellipsis so it fits in ``width`` points."""
    text = str(text)
    if stringWidth(text, font, size) <= width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font, size) > width:
        text = text[:-1]
    return text + ellipsis


class _StatementCanvas:
    """Thin wrapper so drawing code can use top-down y coordinates."""

    def __init__(self, buffer: BytesIO):
        self.c = canvas.Canvas(buffer, pagesize=LETTER)
        self.c.setTitle("Expense Statement")

    def _baseline(self, y: float, size: int) -> float:
        return PAGE_HEIGHT - y - size

    def text(self, x: float, y: float, value: str, size: int = BODY_SIZE, font: str = FONT):
        self.c.setFont(font, size)
        self.c.drawString(x, self._baseline(y, size), value)

    def centered(self, y: float, value: str, size: int):
        self.c.setFont(FONT, size)
        self.c.drawCentredString(PAGE_WIDTH / 2, self._baseline(y, size), value)

    def right(self, x: float, y: float, width: float, value: str, size: int = BODY_SIZE, font: str = FONT):
        self.c.setFont(font, size)
        self.c.drawRightString(x + width, self._baseline(y, size), value)

    def rule(self, y: float):
        self.c.line(MARGIN, PAGE_HEIGHT - y, RULE_END, PAGE_HEIGHT - y)

    def new_page(self):
        self.c.showPage()

    def save(self):
        self.c.save()


def render_pdf(
    rows: Sequence[Expense],
    currency: str,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> bytes:
    buffer = BytesIO()
    doc = _StatementCanvas(buffer)

    y = MARGIN
    doc.centered(y, "Expense Statement", TITLE_SIZE)
    y += TITLE_SIZE + 8

    subtitle = []
    if date_from:
        subtitle.append(f"From {date_from.isoformat()}")
    if date_to:
        subtitle.append(f"To {date_to.isoformat()}")
    if subtitle:
        doc.c.setFillGray(0.4)
        doc.centered(y, "  ".join(subtitle), BODY_SIZE)
        doc.c.setFillGray(0)
    y += BODY_SIZE + 2 + 12

    header_y = y
    doc.text(COLUMN_X[0], header_y, HEADERS[0], font=FONT_BOLD)
    doc.text(COLUMN_X[1], header_y, HEADERS[1], font=FONT_BOLD)
    doc.text(COLUMN_X[2], header_y, HEADERS[2], font=FONT_BOLD)
    doc.right(COLUMN_X[3], header_y, AMOUNT_WIDTH, f"{HEADERS[3]} ({currency})", font=FONT_BOLD)
    doc.rule(header_y + 12)

    y = header_y + 18
    for r in rows:
        if y > CONTENT_BOTTOM:
            doc.new_page()
            y = MARGIN
        doc.text(COLUMN_X[0], y, r.expense_date.isoformat())
        doc.text(COLUMN_X[1], y, _fit(r.description, DESCRIPTION_WIDTH))
        doc.text(COLUMN_X[2], y, _fit(r.category, CATEGORY_WIDTH))
        doc.right(COLUMN_X[3], y, AMOUNT_WIDTH, format_currency(r.amount, currency))
        y += ROW_HEIGHT

    doc.save()
    return buffer.getvalue()


def render(
    rows: List[Expense],
    fmt: str,
    currency: str,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> ExportDocument:
    fmt = normalize_format(fmt)
    if fmt == SPREADSHEET:
        content = render_spreadsheet(rows)
    elif fmt == PDF:
        content = render_pdf(rows, currency, date_from, date_to)
    else:
        content = render_csv(rows)

    logger.info("Rendered %s export with %d rows", fmt, len(rows))
    return ExportDocument(
        content=content,
        filename=build_filename(fmt, date_from, date_to),
        media_type=MEDIA_TYPES[fmt],
    )
