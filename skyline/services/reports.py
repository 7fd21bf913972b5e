"""
Likes report rendering.

CSV output targets spreadsheet tools: UTF-8 with a byte-order mark,
header "destination,likes", destinations always quoted with embedded
quotes doubled, rows separated by "\\n" and no trailing newline.
"""

import csv
import io
from typing import Iterable

from skyline.schemas.vacation import ReportRow

CSV_BOM = "\ufeff"
CSV_HEADER = "destination,likes"
CSV_FILENAME = "vacations-report.csv"


def render_csv(rows: Iterable[ReportRow]) -> str:
    """Render report rows as a BOM-prefixed CSV document."""
    buffer = io.StringIO()
    buffer.write(CSV_HEADER)

    # QUOTE_NONNUMERIC quotes the destination and leaves the count bare
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="")
    for row in rows:
        buffer.write("\n")
        writer.writerow([str(row.destination), int(row.likes)])

    return CSV_BOM + buffer.getvalue()
