"""Printable leaderboard PDF for announcing War Derive results.

Generates a letter-size PDF with:
- Small-caps event title
- Red filled oval with the page label
- Place / team / points columns with red rules between tied groups
- Aggregate bonuses listed under each team in small type
"""

import fitz  # PyMuPDF

from .models import TeamScore
from .output_generator import BONUS_TITLES, assign_places

# --- Page layout constants (letter: 612 x 792 pt) ---
PAGE_W = 612
PAGE_H = 792

COL_PLACE_X = 72
COL_TEAM_X = 130
COL_POINTS_RIGHT_X = 540

# Colors
RED = (1, 0, 0)
WHITE = (1, 1, 1)
BLACK = (0, 0, 0)
GRAY = (0.35, 0.35, 0.35)

# Layout Y positions
TITLE_Y = 45
OVAL_CENTER_Y = 78
HEADERS_Y = 112
ROWS_START_Y = 136
ROWS_BOTTOM_Y = PAGE_H - 40
FOOTER_Y = PAGE_H - 14

# Font sizes
TITLE_LARGE = 22
TITLE_SMALL = 16
HEADER_SIZE = 10
ROW_SIZE = 12
BONUS_SIZE = 8
OVAL_LABEL_SIZE = 12
FOOTER_SIZE = 7

ROW_HEIGHT = ROW_SIZE * 1.4
BONUS_HEIGHT = BONUS_SIZE * 1.5

FONT_REGULAR = 'Times-Roman'
FONT_BOLD = 'Times-Bold'
FONT_ITALIC = 'Times-Italic'


def generate_leaderboard_pdf(scores: list[TeamScore], output_path: str,
                             event_name: str = 'War Derive'):
    """Generate the leaderboard PDF.

    Args:
        scores: Final team scores, highest total first.
        output_path: Where to save the PDF.
        event_name: Title printed at the top of each page.
    """
    doc = fitz.open()
    if not scores:
        doc.new_page(width=PAGE_W, height=PAGE_H)
        doc.save(output_path)
        doc.close()
        return

    places = assign_places(scores)
    pages = _paginate(scores)

    for page_num, (start, end) in enumerate(pages, start=1):
        page = doc.new_page(width=PAGE_W, height=PAGE_H)
        _draw_small_caps(page, PAGE_W / 2, TITLE_Y, event_name, TITLE_LARGE, TITLE_SMALL)

        label = 'FINAL STANDINGS' if len(pages) == 1 else f'FINAL STANDINGS {page_num}/{len(pages)}'
        _draw_oval(page, label, OVAL_CENTER_Y)
        _draw_headers(page)

        y = ROWS_START_Y
        for i in range(start, end):
            if i > start and scores[i].total != scores[i - 1].total:
                _draw_rule(page, y - ROW_SIZE + 2)
            y = _draw_team(page, y, places[i], scores[i])

        _draw_footer(page, len(scores))

    doc.save(output_path)
    doc.close()


def _row_height(team: TeamScore) -> float:
    return ROW_HEIGHT + (BONUS_HEIGHT if team.bonuses else 0)


def _paginate(scores: list[TeamScore]) -> list[tuple[int, int]]:
    """Split teams into (start, end) index ranges that fit on a page."""
    available = ROWS_BOTTOM_Y - ROWS_START_Y
    pages = []
    start = 0
    height = 0
    for i, team in enumerate(scores):
        needed = _row_height(team)
        if i > start and height + needed > available:
            pages.append((start, i))
            start = i
            height = 0
        height += needed
    pages.append((start, len(scores)))
    return pages


# --- Drawing functions ---

def _small_caps_spans(text, large_size, small_size):
    """Split a title into (chunk, font size) runs for small-caps drawing.

    The first letter of each word is a large capital and the rest of the
    word one small-capital run; word gaps use the large size.
    """
    spans = []
    for word in text.upper().split():
        if spans:
            spans.append((' ', large_size))
        spans.append((word[0], large_size))
        if len(word) > 1:
            spans.append((word[1:], small_size))
    return spans


def _draw_small_caps(page, center_x, y, text, large_size, small_size):
    """Draw a small-caps title centered on center_x."""
    spans = [(chunk, fs, fitz.get_text_length(chunk, fontname=FONT_BOLD, fontsize=fs))
             for chunk, fs in _small_caps_spans(text, large_size, small_size)]
    x = center_x - sum(width for _, _, width in spans) / 2
    for chunk, fs, width in spans:
        if chunk != ' ':
            page.insert_text(fitz.Point(x, y), chunk,
                             fontname=FONT_BOLD, fontsize=fs, color=BLACK)
        x += width


def _draw_oval(page, label, y_center):
    """Draw a red filled oval with white text label."""
    tw = fitz.get_text_length(label, fontname=FONT_BOLD, fontsize=OVAL_LABEL_SIZE)
    oval_w = tw + 40
    oval_h = 22

    rect = fitz.Rect(PAGE_W / 2 - oval_w / 2, y_center - oval_h / 2,
                     PAGE_W / 2 + oval_w / 2, y_center + oval_h / 2)
    page.draw_oval(rect, color=RED, fill=RED)

    page.insert_text(fitz.Point(PAGE_W / 2 - tw / 2, y_center + OVAL_LABEL_SIZE * 0.35),
                     label, fontname=FONT_BOLD, fontsize=OVAL_LABEL_SIZE, color=WHITE)


def _draw_headers(page):
    page.insert_text(fitz.Point(COL_PLACE_X, HEADERS_Y), 'PLACE',
                     fontname=FONT_BOLD, fontsize=HEADER_SIZE, color=BLACK)
    page.insert_text(fitz.Point(COL_TEAM_X, HEADERS_Y), 'TEAM',
                     fontname=FONT_BOLD, fontsize=HEADER_SIZE, color=BLACK)
    _insert_right(page, COL_POINTS_RIGHT_X, HEADERS_Y, 'POINTS', FONT_BOLD, HEADER_SIZE, BLACK)
    page.draw_line(fitz.Point(COL_PLACE_X, HEADERS_Y + 5),
                   fitz.Point(COL_POINTS_RIGHT_X, HEADERS_Y + 5),
                   color=BLACK, width=0.75)


def _draw_team(page, y, place, team: TeamScore) -> float:
    """Draw one leaderboard row and return the y of the next row."""
    page.insert_text(fitz.Point(COL_PLACE_X, y), place,
                     fontname=FONT_BOLD, fontsize=ROW_SIZE, color=BLACK)
    page.insert_text(fitz.Point(COL_TEAM_X, y), team.team_name,
                     fontname=FONT_REGULAR, fontsize=ROW_SIZE, color=BLACK)
    total = team.total
    if isinstance(total, float) and total.is_integer():
        total = int(total)
    _insert_right(page, COL_POINTS_RIGHT_X, y, str(total), FONT_BOLD, ROW_SIZE, BLACK)
    y += ROW_HEIGHT

    if team.bonuses:
        text = ', '.join(BONUS_TITLES.get(b, b) for b in team.bonuses)
        page.insert_text(fitz.Point(COL_TEAM_X + 10, y - 2), text,
                         fontname=FONT_ITALIC, fontsize=BONUS_SIZE, color=GRAY)
        y += BONUS_HEIGHT
    return y


def _draw_rule(page, y):
    page.draw_line(fitz.Point(COL_PLACE_X, y), fitz.Point(COL_POINTS_RIGHT_X, y),
                   color=RED, width=0.5)


def _insert_right(page, right_x, y, text, fontname, fontsize, color):
    tw = fitz.get_text_length(text, fontname=fontname, fontsize=fontsize)
    page.insert_text(fitz.Point(right_x - tw, y), text,
                     fontname=fontname, fontsize=fontsize, color=color)


def _draw_footer(page, n_teams):
    text = f'{n_teams} team{"s" if n_teams != 1 else ""} scored'
    tw = fitz.get_text_length(text, fontname=FONT_REGULAR, fontsize=FOOTER_SIZE)
    page.insert_text(fitz.Point(PAGE_W / 2 - tw / 2, FOOTER_Y), text,
                     fontname=FONT_REGULAR, fontsize=FOOTER_SIZE, color=BLACK)
