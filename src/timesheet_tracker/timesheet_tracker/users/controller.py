from __future__ import annotations

from typing import Any, Optional

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.exceptions import AuthenticationError, ValidationError
from ..web.guards import current_actor, start_session
from ..web.serializers import user_json


def _optional_bool(value: Any, field_name: str) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise ValidationError(f"{field_name} must be true or false")


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="index")
    def index():
        try:
            actor = current_actor()
        except AuthenticationError:
            return redirect(url_for("operatives_login"))
        if actor.is_admin_or_supervisor:
            return redirect(url_for("admin_dashboard"))
        return redirect(url_for("operatives_dashboard"))

    @app.route("/operatives/login", methods=["GET", "POST"], endpoint="operatives_login")
    def operatives_login():
        if request.method == "POST":
            try:
                s_user = container.auth_service.authenticate(
                    request.form.get("email", ""),
                    request.form.get("password", ""),
                )
                start_session(s_user)
                return redirect(url_for("index"))
            except AuthenticationError as e:
                flash(str(e), "danger")

        return render_template("operatives/login.html")

    @app.route("/operatives/logout", endpoint="operatives_logout")
    def operatives_logout():
        session.clear()
        flash("You have been signed out", "info")
        return redirect(url_for("operatives_login"))

    # ---------------------------------------------------------------- JSON auth

    @app.route("/api/auth/login", methods=["POST"], endpoint="api_login")
    def api_login():
        body = request.get_json(silent=True) or {}
        s_user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))
        start_session(s_user)
        return jsonify(
            {"id": s_user.user_id, "name": s_user.name, "email": s_user.email, "role": s_user.role.value}
        )

    @app.route("/api/auth/logout", methods=["POST"], endpoint="api_logout")
    def api_logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/session", methods=["GET"], endpoint="api_session")
    def api_session():
        actor = current_actor()
        return jsonify(
            {
                "id": actor.user_id,
                "name": actor.name,
                "email": session.get("email"),
                "role": actor.role.value,
                "assignedProjectIds": sorted(actor.assigned_project_ids),
            }
        )

    @app.route("/api/user/password", methods=["POST"], endpoint="api_change_password")
    def api_change_password():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        container.auth_service.change_password(
            actor,
            current_password=body.get("currentPassword", ""),
            new_password=body.get("newPassword", ""),
        )
        return jsonify({"message": "Password updated successfully"})

    # ------------------------------------------------------------- admin users

    @app.route("/api/admin/users", methods=["GET"], endpoint="api_admin_users")
    def api_admin_users():
        users = container.user_service.list_users(current_actor())
        return jsonify([user_json(u) for u in users])

    @app.route("/api/admin/users", methods=["POST"], endpoint="api_admin_create_user")
    def api_admin_create_user():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        user = container.user_service.create_account(
            actor,
            name=body.get("name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
            role=body.get("role"),
            hourly_rate=body.get("hourlyRate"),
        )
        return jsonify(user_json(user)), 201

    @app.route("/api/admin/users/<int:user_id>", methods=["PATCH"], endpoint="api_admin_update_user")
    def api_admin_update_user(user_id: int):
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        user = container.user_service.update_user(
            actor,
            user_id,
            is_active=_optional_bool(body.get("isActive"), "isActive"),
            hourly_rate=body.get("hourlyRate"),
        )
        return jsonify(user_json(user))

    @app.route("/api/admin/users/<int:user_id>", methods=["DELETE"], endpoint="api_admin_delete_user")
    def api_admin_delete_user(user_id: int):
        removed = container.user_service.delete_user(current_actor(), user_id)
        return jsonify({"success": True, "deletedTimesheets": removed})
