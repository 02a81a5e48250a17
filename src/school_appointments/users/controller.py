from __future__ import annotations

import logging

from flask import Flask, g, request, session

from ..access import SUPERADMIN_ONLY, can_access_admin, capabilities, landing_route, make_guards
from ..common.web import ok, request_data
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..tables.listing import STUDENT_COLUMNS, USER_COLUMNS, search_terms, table_page

logger = logging.getLogger(__name__)


def _role(value) -> Role:
    try:
        return Role(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("Invalid account type.")


def _account_payload(account) -> dict:
    return {
        "user": account.user.to_dict(),
        "landing": landing_route(account.role),
        "capabilities": capabilities(account.role).to_dict(),
        "admin": can_access_admin(account.role),
    }


def register(app: Flask, container: Container) -> None:
    login_required, role_required = make_guards(container)

    def _listing(columns, users):
        return table_page(
            columns,
            [u.to_dict() for u in users],
            search=search_terms(request.args.getlist("search")),
            sort=request.args.get("sort"),
            direction=request.args.get("direction"),
            page=request.args.get("page", 1, type=int),
            row_size=container.settings.row_size,
        )

    # --- session ----------------------------------------------------------

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if request.method == "GET":
            account = container.auth_service.resolve(session.get("access_token"))
            if account is None:
                return ok(authenticated=False)
            return ok(authenticated=True, **_account_payload(account))

        data = request_data()
        account = container.auth_service.login(data.get("email", ""), data.get("password", ""))
        session["access_token"] = account.access_token
        return ok("Login successful.", authenticated=True, **_account_payload(account))

    @app.route("/logout", methods=["POST", "GET"], endpoint="logout")
    def logout():
        container.auth_service.logout(session.pop("access_token", None))
        session.clear()
        return ok("Logged out.")

    @app.route("/registration", methods=["POST"], endpoint="registration")
    def registration():
        data = request_data()
        user = container.auth_service.register(
            email=data.get("email", ""),
            password=data.get("password", ""),
            firstname=data.get("firstname", ""),
            lastname=data.get("lastname", ""),
            gender=data.get("gender"),
            address=data.get("address"),
            birthday=data.get("birthday"),
            student_id=data.get("student_id"),
        )
        return ok("Registration successful.", status=201, user=user.to_dict())

    @app.route("/forgot", methods=["POST"], endpoint="forgot")
    def forgot():
        data = request_data()
        container.auth_service.request_password_reset(
            data.get("email", ""), redirect_to=container.settings.password_reset_redirect
        )
        # Unknown emails answer the same way.
        return ok("Check your email for the password reset link.")

    @app.route("/forgot/reset", methods=["POST"], endpoint="forgot_reset")
    def forgot_reset():
        data = request_data()
        container.auth_service.reset_password(
            token=data.get("token", ""),
            password=data.get("password", ""),
            confirm_password=data.get("confirm_password", ""),
        )
        return ok("Password updated. Please login again.")

    @app.route("/account", methods=["GET", "POST"], endpoint="account")
    @login_required
    def account():
        if request.method == "GET":
            return ok(**_account_payload(g.account))
        data = request_data()
        updated = container.auth_service.update_account(
            g.account,
            firstname=data.get("firstname", ""),
            lastname=data.get("lastname", ""),
            gender=data.get("gender"),
            address=data.get("address"),
            birthday=data.get("birthday"),
            password=data.get("password") or None,
        )
        return ok("Account updated.", **_account_payload(updated))

    # --- Users (staff) ----------------------------------------------------

    @app.route("/admin/users", methods=["GET"], endpoint="admin_users")
    @role_required(SUPERADMIN_ONLY)
    def admin_users():
        return ok(**_listing(USER_COLUMNS, container.user_service.list_staff()))

    @app.route("/admin/users", methods=["POST"], endpoint="add_user")
    @role_required(SUPERADMIN_ONLY)
    def add_user():
        data = request_data()
        role = _role(data.get("role") or Role.ADMIN.value)
        if role == Role.STUDENT:
            raise ValidationError("Use the Students page to add students.")
        user = container.user_service.add_user(
            email=data.get("email", ""),
            firstname=data.get("firstname", ""),
            lastname=data.get("lastname", ""),
            role=role,
            password=data.get("password") or None,
        )
        return ok("User added.", status=201, user=user.to_dict())

    @app.route("/admin/users/<int:user_id>", methods=["POST"], endpoint="edit_user")
    @role_required(SUPERADMIN_ONLY)
    def edit_user(user_id: int):
        data = request_data()
        user = container.user_service.edit_user(
            user_id,
            firstname=data.get("firstname", ""),
            lastname=data.get("lastname", ""),
            role=_role(data["role"]) if data.get("role") else None,
        )
        return ok("User updated.", user=user.to_dict())

    @app.route("/admin/users/<int:user_id>/status", methods=["POST"], endpoint="toggle_user_status")
    @role_required(SUPERADMIN_ONLY)
    def toggle_user_status(user_id: int):
        if user_id == g.account.user.id:
            raise ValidationError("You cannot disable your own account.")
        user = container.user_service.toggle_status(user_id)
        return ok("Status updated.", user=user.to_dict())

    # --- Students ---------------------------------------------------------

    @app.route("/admin/students", methods=["GET"], endpoint="admin_students")
    @role_required(SUPERADMIN_ONLY)
    def admin_students():
        return ok(**_listing(STUDENT_COLUMNS, container.user_service.list_students()))

    @app.route("/admin/students", methods=["POST"], endpoint="add_student")
    @role_required(SUPERADMIN_ONLY)
    def add_student():
        data = request_data()
        user = container.user_service.add_user(
            email=data.get("email", ""),
            firstname=data.get("firstname", ""),
            lastname=data.get("lastname", ""),
            role=Role.STUDENT,
            password=data.get("password") or None,
            gender=data.get("gender"),
            address=data.get("address"),
            birthday=data.get("birthday"),
            student_id=data.get("student_id"),
        )
        return ok("Student added.", status=201, user=user.to_dict())

    @app.route("/admin/students/<int:user_id>", methods=["POST"], endpoint="edit_student")
    @role_required(SUPERADMIN_ONLY)
    def edit_student(user_id: int):
        data = request_data()
        user = container.user_service.edit_user(
            user_id,
            firstname=data.get("firstname", ""),
            lastname=data.get("lastname", ""),
            gender=data.get("gender"),
            address=data.get("address"),
            birthday=data.get("birthday"),
            student_id=data.get("student_id"),
        )
        return ok("Student updated.", user=user.to_dict())

    @app.route("/admin/students/<int:user_id>/status", methods=["POST"], endpoint="toggle_student_status")
    @role_required(SUPERADMIN_ONLY)
    def toggle_student_status(user_id: int):
        user = container.user_service.toggle_status(user_id)
        return ok("Status updated.", user=user.to_dict())

    @app.route("/admin/students/<int:user_id>/delete", methods=["POST"], endpoint="delete_student")
    @role_required(SUPERADMIN_ONLY)
    def delete_student(user_id: int):
        container.user_service.delete_student(user_id)
        logger.info("student user_id=%s deleted by user_id=%s", user_id, g.account.user.id)
        return ok("Student deleted.")
