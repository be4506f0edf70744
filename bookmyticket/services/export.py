"""Fixed-schema booking export: a table of strings rendered to PDF."""
import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from bookmyticket.core.config import settings
from bookmyticket.schemas.booking import BookingView
from bookmyticket.utils.normalize import format_price

logger = logging.getLogger(__name__)

EXPORT_HEADER = ["Movie", "Date", "Time", "Seats", "Price", "Status"]

HEADER_FILL = colors.Color(239 / 255, 68 / 255, 68 / 255)


def export_row(view: BookingView) -> List[str]:
    """One table row. A booking whose movie is gone gets a blank Movie cell."""
    return [
        view.movie.title if view.movie else "",
        view.show_date.isoformat() if view.show_date else "N/A",
        view.time,
        ", ".join(view.seats),
        format_price(view.total_price),
        view.status.upper(),
    ]


def build_export_table(views: Sequence[BookingView]) -> List[List[str]]:
    """Header row followed by one row per booking."""
    return [list(EXPORT_HEADER)] + [export_row(v) for v in views]


def render_pdf(table: List[List[str]], title: Optional[str] = None) -> bytes:
    title = title or settings.EXPORT_TITLE
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, title=title)
    styles = getSampleStyleSheet()

    grid = Table(table, repeatRows=1, hAlign="LEFT")
    grid.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                ("FONTSIZE", (0, 0), (-1, -1), 10),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ]
        )
    )

    doc.build([Paragraph(title, styles["Title"]), Spacer(1, 12), grid])
    return buffer.getvalue()


def render_bookings_pdf(views: Sequence[BookingView], title: Optional[str] = None) -> bytes:
    return render_pdf(build_export_table(views), title)


def export_bookings_to_document(
    views: Sequence[BookingView],
    directory: Union[str, Path] = ".",
    title: Optional[str] = None,
) -> Path:
    """Write the export under the fixed file name, replacing any previous one."""
    path = Path(directory) / settings.EXPORT_FILENAME
    path.write_bytes(render_bookings_pdf(views, title))
    logger.info("Exported %d booking(s) to %s.", len(views), path)
    return path
