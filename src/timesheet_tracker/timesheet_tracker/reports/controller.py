from __future__ import annotations

from flask import Flask, jsonify, render_template, request

from ..container import Container
from ..web.guards import admin_required, current_actor, login_required
from ..web.serializers import calendar_json, presence_json, stats_json


def register(app: Flask, container: Container) -> None:
    @app.route("/operatives/dashboard", endpoint="operatives_dashboard")
    @login_required
    def operatives_dashboard():
        actor = current_actor()
        offset = request.args.get("monthOffset", 0, type=int)
        return render_template(
            "operatives/dashboard.html",
            actor=actor,
            calendar=container.report_service.own_calendar(actor, month_offset=offset),
            projects=container.project_service.list_active(actor),
            timesheets=container.timesheet_service.list_own(actor),
            month_offset=offset,
        )

    @app.route("/admin", endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        actor = current_actor()
        offset = request.args.get("monthOffset", 0, type=int)
        return render_template(
            "admin/dashboard.html",
            actor=actor,
            stats=container.report_service.dashboard_stats(actor),
            presence=container.report_service.presence_for_month(actor, month_offset=offset),
            pending=container.timesheet_service.list_all(actor, status="PENDING", limit=10),
            month_offset=offset,
        )

    @app.route("/api/presence", methods=["GET"], endpoint="api_own_presence")
    def api_own_presence():
        calendar = container.report_service.own_calendar(
            current_actor(),
            month_offset=request.args.get("monthOffset", 0, type=int),
        )
        return jsonify(calendar_json(calendar))

    @app.route("/api/admin/presence", methods=["GET"], endpoint="api_admin_presence")
    def api_admin_presence():
        presence = container.report_service.presence_for_month(
            current_actor(),
            month_offset=request.args.get("monthOffset", 0, type=int),
        )
        return jsonify(presence_json(presence))

    @app.route("/api/admin/stats", methods=["GET"], endpoint="api_admin_stats")
    def api_admin_stats():
        return jsonify(stats_json(container.report_service.dashboard_stats(current_actor())))
