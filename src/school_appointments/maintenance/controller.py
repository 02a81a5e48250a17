from __future__ import annotations

from flask import Flask

from ..access import SUPERADMIN_ONLY, make_guards
from ..common.web import ok, request_data
from ..container import Container
from ..core.constants import COURSES, YEAR_LEVELS


def register(app: Flask, container: Container) -> None:
    _, role_required = make_guards(container)

    # --- Maintenance: sections and reasons --------------------------------

    @app.route("/admin/maintenance", methods=["GET"], endpoint="admin_maintenance")
    @role_required(SUPERADMIN_ONLY)
    def admin_maintenance():
        return ok(
            sections=[s.to_dict() for s in container.maintenance_service.list_sections()],
            reasons=[r.to_dict() for r in container.maintenance_service.list_reasons()],
            courses=dict(COURSES),
            year_levels=list(YEAR_LEVELS),
        )

    @app.route("/admin/maintenance/sections", methods=["POST"], endpoint="add_section")
    @role_required(SUPERADMIN_ONLY)
    def add_section():
        data = request_data()
        section = container.maintenance_service.add_section(
            course=data.get("course", ""),
            year_level=data.get("year_level", ""),
            section=data.get("section", ""),
        )
        return ok("Section added.", status=201, section=section.to_dict())

    @app.route("/admin/maintenance/sections/<int:section_id>", methods=["POST"], endpoint="edit_section")
    @role_required(SUPERADMIN_ONLY)
    def edit_section(section_id: int):
        section = container.maintenance_service.edit_section(section_id, section=request_data().get("section", ""))
        return ok("Section updated.", section=section.to_dict())

    @app.route("/admin/maintenance/sections/<int:section_id>/delete", methods=["POST"], endpoint="delete_section")
    @role_required(SUPERADMIN_ONLY)
    def delete_section(section_id: int):
        container.maintenance_service.delete_section(section_id)
        return ok("Section deleted.")

    @app.route("/admin/maintenance/reasons", methods=["POST"], endpoint="add_reason")
    @role_required(SUPERADMIN_ONLY)
    def add_reason():
        reason = container.maintenance_service.add_reason(reason=request_data().get("reason", ""))
        return ok("Reason added.", status=201, reason=reason.to_dict())

    @app.route("/admin/maintenance/reasons/<int:reason_id>", methods=["POST"], endpoint="edit_reason")
    @role_required(SUPERADMIN_ONLY)
    def edit_reason(reason_id: int):
        reason = container.maintenance_service.edit_reason(reason_id, reason=request_data().get("reason", ""))
        return ok("Reason updated.", reason=reason.to_dict())

    @app.route("/admin/maintenance/reasons/<int:reason_id>/delete", methods=["POST"], endpoint="delete_reason")
    @role_required(SUPERADMIN_ONLY)
    def delete_reason(reason_id: int):
        container.maintenance_service.delete_reason(reason_id)
        return ok("Reason deleted.")

    # --- Settings: slot capacity and disabled dates -----------------------

    @app.route("/admin/settings", methods=["GET"], endpoint="admin_settings")
    @role_required(SUPERADMIN_ONLY)
    def admin_settings():
        return ok(
            times=[t.to_dict() for t in container.settings_service.list_times()],
            disabled_dates=[d.to_dict() for d in container.settings_service.list_disabled_dates()],
        )

    @app.route("/admin/settings/times/<int:time_id>", methods=["POST"], endpoint="update_time_max")
    @role_required(SUPERADMIN_ONLY)
    def update_time_max(time_id: int):
        slot = container.settings_service.update_time_max(time_id, max_count=request_data().get("max"))
        return ok("Time updated.", time=slot.to_dict())

    @app.route("/admin/settings/dates", methods=["POST"], endpoint="add_disabled_date")
    @role_required(SUPERADMIN_ONLY)
    def add_disabled_date():
        data = request_data()
        day = container.settings_service.add_disabled_date(day=data.get("date"), description=data.get("description"))
        return ok("Date disabled.", status=201, disabled_date=day.to_dict())

    @app.route("/admin/settings/dates/<int:date_id>", methods=["POST"], endpoint="edit_disabled_date")
    @role_required(SUPERADMIN_ONLY)
    def edit_disabled_date(date_id: int):
        data = request_data()
        day = container.settings_service.edit_disabled_date(
            date_id, day=data.get("date"), description=data.get("description")
        )
        return ok("Date updated.", disabled_date=day.to_dict())

    @app.route("/admin/settings/dates/<int:date_id>/delete", methods=["POST"], endpoint="delete_disabled_date")
    @role_required(SUPERADMIN_ONLY)
    def delete_disabled_date(date_id: int):
        container.settings_service.delete_disabled_date(date_id)
        return ok("Date removed.")
