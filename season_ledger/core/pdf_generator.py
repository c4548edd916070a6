"""Season summary PDF generator.

Renders the season rows on letter-size pages:
- Centered bold title and subtitle
- Red rule under the column headers
- One row per season: winner, winner points/wins, totals, average
- Dynamic font sizing (10pt down to 7pt) so a ledger fits one page
- At 7pt a page holds 59 rows; longer ledgers continue on further pages,
  each repeating the title and column headers
"""

import fitz  # PyMuPDF

from .models import Ledger, LedgerConfig
from .output_generator import season_summary_rows

# --- Page layout constants (letter: 612 x 792 pt) ---
PAGE_W = 612
PAGE_H = 792

LEFT_MARGIN = 40
RIGHT_MARGIN = PAGE_W - 40

# (header, row key, left x)
COLUMNS = [
    ('SEASON', 'season', 40),
    ('WINNER', 'winner', 95),
    ('PTS', 'winner_points', 250),
    ('WINS', 'winner_wins', 305),
    ('TOTAL WINS', 'total_wins', 360),
    ('AVG PTS', 'average_points', 445),
    ('TOTAL PTS', 'total_points', 515),
]

RED = (0.8, 0, 0)
BLACK = (0, 0, 0)
GRAY = (0.4, 0.4, 0.4)

TITLE_Y = 50
SUBTITLE_Y = 72
HEADERS_Y = 105
ROWS_START_Y = 125
ROWS_BOTTOM_Y = PAGE_H - 40

TITLE_SIZE = 18
SUBTITLE_SIZE = 10
HEADER_SIZE = 9
DEFAULT_ROW_SIZE = 10
MIN_ROW_SIZE = 7
LINE_HEIGHT_RATIO = 1.5

FONT_REGULAR = 'Times-Roman'
FONT_BOLD = 'Times-Bold'


def generate_summary_pdf(ledger: Ledger, config: LedgerConfig, output_path: str,
                         title: str = 'Season Summary'):
    """Generate the season summary PDF.

    Args:
        ledger: Loaded Ledger.
        config: LedgerConfig (rounding settings for the average column).
        output_path: Where to save the PDF.
        title: Title printed at the top of every page.
    """
    rows = season_summary_rows(ledger, config)
    font_size = _fit_font_size(len(rows))
    line_height = font_size * LINE_HEIGHT_RATIO
    per_page = max(1, int((ROWS_BOTTOM_Y - ROWS_START_Y) // line_height))

    doc = fitz.open()
    for start in range(0, len(rows), per_page):
        page = doc.new_page(width=PAGE_W, height=PAGE_H)
        _draw_header(page, title, ledger)
        y = ROWS_START_Y
        for row in rows[start:start + per_page]:
            _draw_row(page, y, row, font_size)
            y += line_height

    doc.save(output_path)
    doc.close()


def _fit_font_size(row_count: int) -> float:
    """Largest row font size (10pt-7pt) that fits every row on one page."""
    available = ROWS_BOTTOM_Y - ROWS_START_Y
    for size_10x in range(DEFAULT_ROW_SIZE * 10, MIN_ROW_SIZE * 10 - 1, -1):
        size = size_10x / 10
        if row_count * size * LINE_HEIGHT_RATIO <= available:
            return size
    return MIN_ROW_SIZE


def _draw_header(page, title: str, ledger: Ledger):
    _center_text(page, TITLE_Y, title.upper(), FONT_BOLD, TITLE_SIZE, BLACK)

    seasons = ledger.seasons()
    subtitle = f'{len(seasons)} seasons, {seasons[0]}-{seasons[-1]}'
    _center_text(page, SUBTITLE_Y, subtitle, FONT_REGULAR, SUBTITLE_SIZE, GRAY)

    for header, _, x in COLUMNS:
        page.insert_text(fitz.Point(x, HEADERS_Y), header,
                         fontname=FONT_BOLD, fontsize=HEADER_SIZE, color=BLACK)
    rule_y = HEADERS_Y + 6
    page.draw_line(fitz.Point(LEFT_MARGIN, rule_y), fitz.Point(RIGHT_MARGIN, rule_y),
                   color=RED, width=0.75)


def _draw_row(page, y, row: dict, font_size: float):
    for _, key, x in COLUMNS:
        page.insert_text(fitz.Point(x, y), str(row[key]),
                         fontname=FONT_REGULAR, fontsize=font_size, color=BLACK)


def _center_text(page, y, text, fontname, fontsize, color):
    tw = fitz.get_text_length(text, fontname=fontname, fontsize=fontsize)
    page.insert_text(fitz.Point(PAGE_W / 2 - tw / 2, y), text,
                     fontname=fontname, fontsize=fontsize, color=color)
