from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.web import (
    admin_required,
    current_role,
    current_user_id,
    date_field,
    login_required,
    ok,
    payload,
)
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = payload()
        s_user = container.auth_service.authenticate(str(data.get("username") or ""), str(data.get("password") or ""))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)
        session["user_id"] = s_user.user_id
        session["name"] = s_user.full_name
        session["role"] = s_user.role.value
        app.logger.info("User %s logged in", s_user.user_id)
        return ok(s_user)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok()

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.user_service.get(current_user_id())
        return ok(
            {
                "user_id": user.user_id,
                "full_name": user.full_name,
                "username": user.username,
                "role": user.role,
                "hire_date": user.hire_date,
            }
        )

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @admin_required
    def users_list():
        users = container.user_service.list_employees(active_only=False)
        return ok(
            [
                {
                    "user_id": u.user_id,
                    "full_name": u.full_name,
                    "username": u.username,
                    "hire_date": u.hire_date,
                    "is_active": u.is_active,
                }
                for u in users
            ]
        )

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @admin_required
    def users_create():
        data = payload()
        try:
            role = Role(data.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Unknown role")
        user_id = container.user_service.create_account(
            current_role=current_role(),
            full_name=str(data.get("full_name") or ""),
            username=str(data.get("username") or ""),
            password=str(data.get("password") or ""),
            role=role,
            hire_date=date_field(data, "hire_date", required=False),
        )
        return ok({"user_id": user_id}, status=201)

    @app.route("/api/users/<int:user_id>/deactivate", methods=["POST"], endpoint="users_deactivate")
    @admin_required
    def users_deactivate(user_id: int):
        container.user_service.deactivate(current_role=current_role(), user_id=user_id)
        return ok()
