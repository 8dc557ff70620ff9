from datetime import datetime

from flask import Blueprint, current_app, jsonify, request, send_file

from farm.api import validate_or_raise
from farm.history.forms import ReportFilterForm
from .pdf import build_report_pdf
from .services import build_inventory_report, summarize

reports_bp = Blueprint('reports', __name__, url_prefix='/api/reports')


def _report_window(form):
    """Missing dates fall back to today; the window starts at midnight."""
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    start = form.startDate.data or today
    end = form.endDate.data or today
    return start.replace(hour=0, minute=0, second=0, microsecond=0), end


def _build(form):
    start, end = _report_window(form)
    lines = build_inventory_report(
        start, end,
        include_reserved=form.include_reserved(default=False),
        product_id=form.selected_product_id,
    )
    return start, end, lines


@reports_bp.get('/inventory')
def inventory():
    form = validate_or_raise(ReportFilterForm(request.args), 'Invalid report filter')
    start, end, lines = _build(form)
    return jsonify({
        "startDate": start.date().isoformat(),
        "endDate": end.date().isoformat(),
        "items": [line.to_dict() for line in lines],
        "stats": summarize(lines),
    })


# 📄 PDF export
@reports_bp.get('/inventory.pdf')
def inventory_pdf():
    form = validate_or_raise(ReportFilterForm(request.args), 'Invalid report filter')
    start, end, lines = _build(form)

    buffer = build_report_pdf(lines, start, end, summary=summarize(lines))
    current_app.logger.info("Inventory report PDF built for %s..%s (%d products)", start.date(), end.date(), len(lines))
    return send_file(
        buffer,
        as_attachment=True,
        download_name=f"Inventory_Report_{end.strftime('%Y-%m-%d')}.pdf",
        mimetype='application/pdf',
    )
