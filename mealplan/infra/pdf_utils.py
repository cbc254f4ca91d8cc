import io
from typing import Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from mealplan.domain.ShoppingItem import ShoppingItem, format_quantity

STATUS_LABELS = {
    "need-to-buy": "Need to buy",
    "partial": "Partial",
    "in-stock": "In stock",
}


def generate_pdf_for_shopping_list(items: Sequence[ShoppingItem], start: Optional[str] = None,
                                   end: Optional[str] = None) -> bytes:
    """Generate a simple PDF table: Ingredient / Needed / In fridge / Status."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20)

    styles = getSampleStyleSheet()
    if start or end:
        title = f"Shopping List - {start or '...'} to {end or '...'}"
    else:
        title = "Shopping List"
    elements = [Paragraph(title, styles["Title"]), Spacer(1, 16)]

    data = [["Ingredient", "Needed", "In fridge", "Status"]]
    for item in items:
        data.append([
            item.name,
            f"{format_quantity(item.required_total)} {item.unit}".strip(),
            f"{format_quantity(item.in_stock)} {item.unit}".strip(),
            STATUS_LABELS.get(item.status, item.status),
        ])
    if len(data) == 1:
        data.append(["Nothing to buy", "-", "-", "-"])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("ALIGN", (1, 0), (-1, -1), "CENTER"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 12),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
