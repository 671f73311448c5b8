from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..web.guards import current_actor
from ..web.serializers import assignment_json


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/supervisor-projects", methods=["GET"], endpoint="api_assignments")
    def api_assignments():
        rows = container.assignment_service.list_assignments(current_actor())
        return jsonify([assignment_json(r) for r in rows])

    @app.route("/api/admin/supervisor-projects", methods=["POST"], endpoint="api_create_assignment")
    def api_create_assignment():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        row = container.assignment_service.assign(
            actor,
            user_id=body.get("userId"),
            project_id=body.get("projectId"),
        )
        return jsonify(assignment_json(row)), 201

    @app.route("/api/admin/supervisor-projects", methods=["DELETE"], endpoint="api_delete_assignment")
    def api_delete_assignment():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        # ids may come from the body or the query string
        container.assignment_service.unassign(
            actor,
            user_id=body.get("userId") or request.args.get("userId"),
            project_id=body.get("projectId") or request.args.get("projectId"),
        )
        return jsonify({"success": True})
