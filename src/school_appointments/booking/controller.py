from __future__ import annotations

import io
import logging

from flask import Flask, g, request, send_file, session

from ..access import STUDENT_ONLY, make_guards
from ..common.datetime_utils import coerce_date, to_appointment_date
from ..common.web import ok, request_data, request_list
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .flow import BookingFlow
from .qr import DOWNLOAD_NAME

logger = logging.getLogger(__name__)

SESSION_KEY = "booking"


def _load() -> BookingFlow:
    return BookingFlow.from_dict(session.get(SESSION_KEY))


def _save(flow: BookingFlow) -> None:
    session[SESSION_KEY] = flow.to_dict()


def _day(value):
    try:
        return coerce_date(value)
    except ValueError:
        raise ValidationError("The selected date is invalid.", title="Invalid Date")


def register(app: Flask, container: Container) -> None:
    _, role_required = make_guards(container)

    def _state(flow: BookingFlow, message: str = "", status: int = 200):
        return ok(message, status=status, flow=flow.to_dict())

    def _own_flow() -> BookingFlow:
        flow = _load()
        # The session may have changed hands since the flow was started.
        if flow.account is not None and flow.account.id != g.account.user.id:
            flow.reset()
        return flow

    @app.route("/booking", methods=["GET"], endpoint="booking_state")
    def booking_state():
        flow = _load()
        return ok(
            flow=flow.to_dict(),
            reasons=[r.to_dict() for r in container.maintenance_service.list_reasons()],
            sections=[s.to_dict() for s in container.maintenance_service.list_sections()],
        )

    @app.route("/booking/account", methods=["POST"], endpoint="booking_account")
    def booking_account():
        flow = _load()
        account = container.auth_service.resolve(session.get("access_token"))
        if account is None:
            data = request_data()
            account = container.auth_service.login(data.get("email", ""), data.get("password", ""))
            session["access_token"] = account.access_token
        if account.role != Role.STUDENT:
            raise AuthorizationError("Only student accounts can book an appointment.")
        flow.set_account(account.user)
        _save(flow)
        return _state(flow, "Account verified.")

    @app.route("/booking/details", methods=["POST"], endpoint="booking_details")
    @role_required(STUDENT_ONLY)
    def booking_details():
        flow = _own_flow()
        data = request_data()
        flow.set_reasons(request_list(data, "reasons"))
        flow.set_section(data.get("section_id"))
        flow.set_note(data.get("note"))
        _save(flow)
        return _state(flow)

    @app.route("/booking/calendar", methods=["GET"], endpoint="booking_calendar")
    @role_required(STUDENT_ONLY)
    def booking_calendar():
        calendar = container.availability_service.calendar(student_id=g.account.user.id)
        return ok(
            min_date=to_appointment_date(calendar.min_date),
            max_date=to_appointment_date(calendar.max_date),
            selectable=[to_appointment_date(d) for d in calendar.selectable_days()],
            hints={to_appointment_date(d): hint for d, hint in calendar.hints().items()},
        )

    @app.route("/booking/times", methods=["GET"], endpoint="booking_times")
    @role_required(STUDENT_ONLY)
    def booking_times():
        day = _day(request.args.get("date"))
        if day is None:
            raise ValidationError("Please select a date first.", title="Invalid Time")
        calendar = container.availability_service.calendar(student_id=g.account.user.id)
        return ok(date=to_appointment_date(day), options=[o.to_dict() for o in calendar.time_options(day)])

    @app.route("/booking/date", methods=["POST"], endpoint="booking_date")
    @role_required(STUDENT_ONLY)
    def booking_date():
        flow = _own_flow()
        calendar = container.booking_service.calendar_for(flow)
        day = flow.select_date(_day(request_data().get("date")), calendar)
        _save(flow)
        return ok(flow=flow.to_dict(), options=[o.to_dict() for o in calendar.time_options(day)])

    @app.route("/booking/time", methods=["POST"], endpoint="booking_time")
    @role_required(STUDENT_ONLY)
    def booking_time():
        flow = _own_flow()
        flow.select_time(request_data().get("time", ""), container.booking_service.calendar_for(flow))
        _save(flow)
        return _state(flow)

    @app.route("/booking/next", methods=["POST"], endpoint="booking_next")
    def booking_next():
        flow = _load()
        flow.next()
        _save(flow)
        return _state(flow)

    @app.route("/booking/back", methods=["POST"], endpoint="booking_back")
    def booking_back():
        flow = _load()
        flow.back()
        _save(flow)
        return _state(flow)

    @app.route("/booking/reset", methods=["POST"], endpoint="booking_reset")
    def booking_reset():
        session.pop(SESSION_KEY, None)
        return _state(BookingFlow())

    @app.route("/booking/commit", methods=["POST"], endpoint="booking_commit")
    @role_required(STUDENT_ONLY)
    def booking_commit():
        flow = _own_flow()
        result = container.booking_service.commit(flow)
        _save(flow)

        if request.args.get("format") == "json":
            return ok("Appointment booked.", status=201, appointment=result.appointment.to_dict())

        response = send_file(
            io.BytesIO(result.png),
            mimetype="image/png",
            as_attachment=True,
            download_name=DOWNLOAD_NAME,
        )
        response.headers["X-Appointment-Code"] = result.appointment.qrcode
        response.status_code = 201
        return response
