# farm/reports/pdf.py

import os
from datetime import datetime
from io import BytesIO
from xml.sax.saxutils import escape

from flask import current_app
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

HEADER_GREEN = colors.Color(46 / 255, 125 / 255, 50 / 255)
ALERT_AMBER = colors.Color(1, 160 / 255, 0)
FOOTER_TEXT = "Farm Management System"


def _font_name():
    """DejaVu when the TTF is shipped, Helvetica otherwise."""
    if "DejaVu" in pdfmetrics.getRegisteredFontNames():
        return "DejaVu"
    font_path = current_app.config.get("PDF_FONT_PATH")
    if font_path and os.path.exists(font_path):
        pdfmetrics.registerFont(TTFont("DejaVu", font_path))
        return "DejaVu"
    current_app.logger.debug("PDF font %s not found, using Helvetica", font_path)
    return "Helvetica"


def _footer(font):
    def draw(canvas, doc):
        width, _ = doc.pagesize
        canvas.saveState()
        canvas.setFont(font, 8)
        canvas.setFillColor(colors.grey)
        canvas.drawCentredString(width / 2, 20, FOOTER_TEXT)
        canvas.drawRightString(width - doc.rightMargin, 20, f"Page {doc.page}")
        canvas.restoreState()
    return draw


def _table(data, font, header_color, col_widths=None):
    table = Table(data, repeatRows=1, colWidths=col_widths)
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, -1), font),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('BACKGROUND', (0, 0), (-1, 0), header_color),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('ALIGN', (2, 1), (-1, -1), 'CENTER'),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
    ]))
    return table


def build_report_pdf(lines, start, end, summary=None) -> BytesIO:
    """Renders the inventory report; returns a rewound buffer ready for send_file."""
    font = _font_name()

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(name='ReportTitle', fontName=font, fontSize=18, leading=22))
    styles.add(ParagraphStyle(name='ReportHeading', fontName=font, fontSize=13, leading=16, spaceBefore=6))
    styles.add(ParagraphStyle(name='ReportNormal', fontName=font, fontSize=9, leading=12))
    styles.add(ParagraphStyle(name='ReportCell', fontName=font, fontSize=8, leading=10))

    buffer = BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=landscape(A4), title="Inventory Report",
                            leftMargin=30, rightMargin=30, topMargin=30, bottomMargin=40)
    elements = []

    # 📄 Header
    elements.append(Paragraph("Inventory Report", styles['ReportTitle']))
    elements.append(Paragraph(
        f"Date range: {start.strftime('%m/%d/%Y')} - {end.strftime('%m/%d/%Y')}", styles['ReportNormal']))
    elements.append(Paragraph(f"Generated: {datetime.now().strftime('%m/%d/%Y %H:%M')}", styles['ReportNormal']))
    if summary:
        elements.append(Paragraph(
            f"Products: {summary['totalProducts']} | Added: {summary['totalAdded']} | "
            f"Removed: {summary['totalRemoved']} | Low stock: {summary['lowStockCount']}",
            styles['ReportNormal'],
        ))
    elements.append(Spacer(1, 12))

    # 📊 Changes
    elements.append(Paragraph("Inventory Changes", styles['ReportHeading']))
    elements.append(Spacer(1, 6))
    data = [["Product", "Location", "Starting", "Added", "Removed", "Current", "Unit", "Field Notes", "Retail Notes"]]
    for line in lines:
        data.append([
            Paragraph(escape(line.name), styles['ReportCell']),
            line.field_location,
            str(line.starting),
            f"+{line.added}" if line.added else "0",
            f"-{line.removed}" if line.removed else "0",
            str(line.current),
            line.unit or "-",
            Paragraph(escape(line.notes.get("fieldNotes") or "-"), styles['ReportCell']),
            Paragraph(escape(line.notes.get("retailNotes") or "-"), styles['ReportCell']),
        ])
    if len(data) == 1:
        data.append(["No products in range", "", "", "", "", "", "", "", ""])
    changes = _table(data, font, HEADER_GREEN, col_widths=[110, 85, 50, 45, 50, 50, 45, 165, 165])
    critical_rows = [i for i, line in enumerate(lines, start=1) if line.is_critical_stock]
    for row in critical_rows:
        changes.setStyle(TableStyle([('TEXTCOLOR', (5, row), (5, row), colors.red)]))
    elements.append(changes)

    # ⚠️ Low stock
    low = [line for line in lines if line.is_low_stock]
    if low:
        elements.append(Spacer(1, 16))
        elements.append(Paragraph("Low Stock Alert", styles['ReportHeading']))
        elements.append(Spacer(1, 6))
        alert = [["Product", "Location", "Current", "Unit", "Status"]]
        for line in low:
            alert.append([
                line.name,
                line.field_location,
                str(line.current),
                line.unit or "-",
                "Critical" if line.is_critical_stock else "Low",
            ])
        elements.append(_table(alert, font, ALERT_AMBER, col_widths=[180, 140, 70, 70, 80]))

    footer = _footer(font)
    doc.build(elements, onFirstPage=footer, onLaterPages=footer)
    buffer.seek(0)
    return buffer
