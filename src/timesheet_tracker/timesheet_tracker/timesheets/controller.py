from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..web.guards import current_actor
from ..web.serializers import timesheet_json, weekly_json


def register(app: Flask, container: Container) -> None:
    # ------------------------------------------------------------- own entries

    @app.route("/api/timesheets", methods=["GET"], endpoint="api_own_timesheets")
    def api_own_timesheets():
        rows = container.timesheet_service.list_own(current_actor())
        return jsonify([timesheet_json(r) for r in rows])

    @app.route("/api/timesheets", methods=["POST"], endpoint="api_submit_timesheet")
    def api_submit_timesheet():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        row = container.timesheet_service.submit(
            actor,
            project_id=body.get("projectId"),
            work_date=body.get("date"),
            hours_worked=body.get("hoursWorked"),
            notes=body.get("notes"),
        )
        return jsonify(timesheet_json(row)), 201

    # ----------------------------------------------------------- admin surface

    @app.route("/api/admin/timesheets", methods=["GET"], endpoint="api_admin_timesheets")
    def api_admin_timesheets():
        rows = container.timesheet_service.list_all(current_actor(), status=request.args.get("status"))
        return jsonify([timesheet_json(r) for r in rows])

    @app.route("/api/admin/timesheets", methods=["POST"], endpoint="api_admin_create_timesheet")
    def api_admin_create_timesheet():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        row = container.timesheet_service.create_on_behalf(
            actor,
            user_id=body.get("userId"),
            project_id=body.get("projectId"),
            work_date=body.get("date"),
            hours_worked=body.get("hoursWorked"),
            notes=body.get("notes"),
        )
        return jsonify(timesheet_json(row)), 201

    @app.route("/api/admin/timesheets/<int:timesheet_id>", methods=["PATCH"], endpoint="api_admin_update_timesheet")
    def api_admin_update_timesheet(timesheet_id: int):
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        row = container.timesheet_service.update(
            actor,
            timesheet_id,
            status=body.get("status"),
            hours_worked=body.get("hoursWorked"),
        )
        return jsonify(timesheet_json(row))

    @app.route("/api/admin/timesheets/<int:timesheet_id>", methods=["DELETE"], endpoint="api_admin_delete_timesheet")
    def api_admin_delete_timesheet(timesheet_id: int):
        container.timesheet_service.delete(current_actor(), timesheet_id)
        return jsonify({"success": True})

    @app.route("/api/admin/timesheets/weekly", methods=["GET"], endpoint="api_weekly_grid")
    def api_weekly_grid():
        grid = container.report_service.weekly_grid(
            current_actor(),
            week_offset=request.args.get("weekOffset", 0, type=int),
        )
        return jsonify(weekly_json(grid))

    @app.route("/api/admin/timesheets/weekly", methods=["PUT"], endpoint="api_weekly_cell")
    def api_weekly_cell():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        row = container.timesheet_service.save_weekly_cell(
            actor,
            user_id=body.get("userId"),
            work_date=body.get("date"),
            hours=body.get("hours"),
        )
        return jsonify({"success": True, "timesheet": timesheet_json(row) if row else None})
