from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_iso_date
from ..common.validators import optional_iso_date
from ..core.constants import DEFAULT_PAYER
from ..container import Container


def _rows_payload(rows) -> list[dict]:
    return [r.to_dict() for r in rows]


def register(app: Flask, container: Container) -> None:
    service = container.payroll_service

    @app.route("/api/payrolls/calculate", methods=["POST"], endpoint="api_payroll_calculate")
    def api_payroll_calculate():
        data = request.get_json(silent=True) or {}
        period = str(data.get("period_month", "")).strip()
        rows = service.calculate_payroll(period)
        return jsonify({"success": True, "period_month": period, "rows": _rows_payload(rows)})

    @app.route("/api/payrolls/pending-total", methods=["GET"], endpoint="api_payroll_pending_total")
    def api_payroll_pending_total():
        return jsonify({"pending_total": str(service.pending_total())})

    @app.route("/api/payrolls/current-estimate", methods=["GET"], endpoint="api_payroll_current_estimate")
    def api_payroll_current_estimate():
        today = optional_iso_date(request.args.get("today"), "today")
        cycle, rows = service.estimate_current_cycle(today)
        return jsonify(
            {
                "period_month": cycle.period_month,
                "cycle_start": format_iso_date(cycle.start),
                "cycle_end": format_iso_date(cycle.end),
                "rows": _rows_payload(rows),
            }
        )

    @app.route("/api/payrolls/<period>", methods=["GET"], endpoint="api_payroll_list")
    def api_payroll_list(period: str):
        rows = service.list_period(period)
        return jsonify({"period_month": period, "locked": any(r.is_paid for r in rows), "rows": _rows_payload(rows)})

    @app.route("/api/payrolls/<period>/distribute", methods=["POST"], endpoint="api_payroll_distribute")
    def api_payroll_distribute(period: str):
        data = request.get_json(silent=True) or {}
        result = service.distribute_payroll(
            period,
            paid_by=str(data.get("paid_by") or DEFAULT_PAYER),
            notes=data.get("notes"),
        )
        return jsonify(result.to_dict())

    @app.route("/api/payrolls/<period>/locked", methods=["GET"], endpoint="api_payroll_locked")
    def api_payroll_locked(period: str):
        return jsonify({"period_month": period, "locked": service.is_period_locked(period)})
