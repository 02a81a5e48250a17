from __future__ import annotations

import io

from flask import Flask, g, request, send_file

from ..access import STAFF, STUDENT_ONLY, SUPERADMIN_ONLY, make_guards
from ..booking.qr import DOWNLOAD_NAME
from ..common.datetime_utils import coerce_date, format_date, to_appointment_date
from ..common.web import ok, request_data, request_list
from ..container import Container
from ..core.exceptions import NotFoundError, ValidationError
from ..tables.listing import APPOINTMENT_COLUMNS, search_terms, table_page
from .model import AppointmentDetails
from .report import XLSX_MIMETYPE
from .service import group_by_slot


def _day(value):
    try:
        return coerce_date(value)
    except ValueError:
        raise ValidationError("The selected date is invalid.", title="Invalid Date")


def register(app: Flask, container: Container) -> None:
    login_required, role_required = make_guards(container)
    service = container.appointment_service

    def _with_actions(details) -> dict:
        out = details.to_dict()
        out["actions"] = [
            s.value for s in service.available_actions(details.appointment, today=container.availability_service.today())
        ]
        return out

    # --- public queue -----------------------------------------------------

    @app.route("/queue", methods=["GET"], endpoint="queue")
    def queue():
        day = _day(request.args.get("date")) or container.availability_service.today()
        if container.live.mounted:
            live = (AppointmentDetails.from_row(r) for r in container.live.appointment_details())
            groups = group_by_slot(d for d in live if d.appointment.appointment_date == day)
        else:
            groups = service.queue(day)
        return ok(
            date=to_appointment_date(day),
            date_label=format_date(day),
            slots=[
                {"time": time, "appointments": [d.to_dict() for d in rows]}
                for time, rows in groups.items()
            ],
        )

    # --- student self-service ---------------------------------------------

    @app.route("/appointments", methods=["GET"], endpoint="my_appointments")
    @role_required(STUDENT_ONLY)
    def my_appointments():
        return ok(appointments=[a.to_dict() for a in service.history(g.account.user.id)])

    @app.route("/appointments/<int:appointment_id>", methods=["GET"], endpoint="my_appointment")
    @role_required(STUDENT_ONLY)
    def my_appointment(appointment_id: int):
        details = service.get_details(appointment_id)
        if details.appointment.student_id != g.account.user.id:
            raise NotFoundError("Appointment not found")
        return ok(appointment=details.to_dict())

    @app.route("/appointments/<int:appointment_id>", methods=["POST"], endpoint="edit_my_appointment")
    @role_required(STUDENT_ONLY)
    def edit_my_appointment(appointment_id: int):
        data = request_data()
        updated = service.edit_by_student(
            appointment_id,
            student=g.account.user,
            section_id=data.get("section_id"),
            reasons=request_list(data, "reasons"),
            note=data.get("note"),
            appointment_date=_day(data.get("appointment_date")),
            appointment_time=data.get("appointment_time", ""),
        )
        return ok("Appointment updated.", appointment=updated.to_dict())

    @app.route("/appointments/<int:appointment_id>/cancel", methods=["POST"], endpoint="cancel_my_appointment")
    @role_required(STUDENT_ONLY)
    def cancel_my_appointment(appointment_id: int):
        updated = service.cancel_by_student(appointment_id, student=g.account.user)
        return ok("Appointment cancelled.", appointment=updated.to_dict())

    @app.route("/appointments/<int:appointment_id>/qrcode.png", methods=["GET"], endpoint="my_appointment_qr")
    @login_required
    def my_appointment_qr(appointment_id: int):
        owner = g.account.user.id if g.account.user.is_student else None
        png = container.booking_service.qr_png(appointment_id, student_id=owner)
        return send_file(io.BytesIO(png), mimetype="image/png", as_attachment=True, download_name=DOWNLOAD_NAME)

    # --- staff: appointments list -----------------------------------------

    @app.route("/admin/appointment", methods=["GET"], endpoint="admin_appointments")
    @role_required(STAFF)
    def admin_appointments():
        day = _day(request.args.get("date")) or container.availability_service.today()
        rows = [d.to_dict() for d in service.list_on_date(day, status=request.args.get("status") or None)]
        listing = table_page(
            APPOINTMENT_COLUMNS,
            rows,
            search=search_terms(request.args.getlist("search")),
            sort=request.args.get("sort"),
            direction=request.args.get("direction"),
            page=request.args.get("page", 1, type=int),
            row_size=container.settings.row_size,
        )
        return ok(date=to_appointment_date(day), **listing)

    @app.route("/admin/appointment/<int:appointment_id>", methods=["GET"], endpoint="admin_appointment")
    @role_required(STAFF)
    def admin_appointment(appointment_id: int):
        return ok(appointment=_with_actions(service.get_details(appointment_id)))

    @app.route("/admin/appointment/<int:appointment_id>/status", methods=["POST"], endpoint="mark_status")
    @role_required(STAFF)
    def mark_status(appointment_id: int):
        data = request_data()
        updated = service.mark_status(
            appointment_id,
            status=data.get("status", ""),
            actor=g.account.user,
            message=data.get("message"),
            return_date=data.get("return_date"),
            return_time=data.get("return_time"),
        )
        return ok("Status updated.", appointment=updated.to_dict())

    @app.route("/admin/appointment/<int:appointment_id>/return-times", methods=["GET"], endpoint="return_times")
    @role_required(STAFF)
    def return_times(appointment_id: int):
        day = _day(request.args.get("date"))
        if day is None:
            raise ValidationError("Please select a date first.", title="Invalid Time")
        return ok(options=[o.to_dict() for o in service.return_options(appointment_id, day)])

    # --- staff: scan ------------------------------------------------------

    @app.route("/admin/scan", methods=["GET", "POST"], endpoint="admin_scan")
    @role_required(STAFF)
    def admin_scan():
        code = request.args.get("code") if request.method == "GET" else request_data().get("code")
        return ok(appointment=_with_actions(service.find_by_qrcode(code or "")))

    # --- report -----------------------------------------------------------

    def _report():
        return container.report_service.build(
            start=request.args.get("from"),
            end=request.args.get("to"),
            status=request.args.get("status") or None,
        )

    @app.route("/admin/report", methods=["GET"], endpoint="admin_report")
    @role_required(SUPERADMIN_ONLY)
    def admin_report():
        return ok(report=_report().to_dict())

    @app.route("/admin/report.xlsx", methods=["GET"], endpoint="admin_report_xlsx")
    @role_required(SUPERADMIN_ONLY)
    def admin_report_xlsx():
        report = _report()
        filename = f"appointments_{to_appointment_date(report.start)}_{to_appointment_date(report.end)}.xlsx"
        return send_file(
            io.BytesIO(report.to_xlsx()),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=filename,
        )
