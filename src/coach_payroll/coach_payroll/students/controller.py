from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import optional_iso_date, require_int, require_iso_date
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.student_service

    @app.route("/api/students/<int:student_id>/transfer-coach", methods=["POST"], endpoint="api_student_transfer")
    def api_student_transfer(student_id: int):
        data = request.get_json(silent=True) or {}
        event = service.transfer_coach(
            student_id=student_id,
            new_coach_id=require_int(data.get("new_coach_id"), "new_coach_id"),
            transfer_date=require_iso_date(data.get("transfer_date"), "transfer_date"),
            notes=data.get("notes"),
        )
        return jsonify(event.to_dict())

    @app.route("/api/students/<int:student_id>/transfer-history", methods=["GET"], endpoint="api_student_transfers")
    def api_student_transfers(student_id: int):
        return jsonify([t.to_dict() for t in service.transfer_history(student_id)])

    @app.route("/api/students/<int:student_id>/renew", methods=["POST"], endpoint="api_student_renew")
    def api_student_renew(student_id: int):
        data = request.get_json(silent=True) or {}
        event = service.renew_package(
            student_id=student_id,
            months=data.get("package_months"),
            amount=data.get("amount"),
            payment_date=optional_iso_date(data.get("payment_date"), "payment_date"),
            notes=data.get("notes"),
        )
        return jsonify(event.to_dict())

    @app.route("/api/students/<int:student_id>/smart-renew", methods=["POST"], endpoint="api_student_smart_renew")
    def api_student_smart_renew(student_id: int):
        data = request.get_json(silent=True) or {}
        event = service.smart_renew(
            student_id=student_id,
            mode=str(data.get("mode") or ""),
            amount=data.get("amount"),
            months=data.get("package_months"),
            payment_date=optional_iso_date(data.get("payment_date"), "payment_date"),
            notes=data.get("notes"),
        )
        return jsonify({"mode": data.get("mode"), "payment": event.to_dict()})

    @app.route("/api/students/<int:student_id>/last-payment", methods=["GET"], endpoint="api_student_last_payment")
    def api_student_last_payment(student_id: int):
        payment = service.last_payment(student_id)
        return jsonify(payment.to_dict() if payment else None)

    @app.route("/api/students/<int:student_id>/payments", methods=["GET"], endpoint="api_student_payments")
    def api_student_payments(student_id: int):
        return jsonify([p.to_dict() for p in service.payment_history(student_id)])

    @app.route("/api/students/<int:student_id>/archive", methods=["POST"], endpoint="api_student_archive")
    def api_student_archive(student_id: int):
        data = request.get_json(silent=True) or {}
        student = service.archive_student(
            student_id=student_id,
            leave_date=require_iso_date(data.get("leave_date"), "leave_date"),
        )
        return jsonify(student.to_dict())
