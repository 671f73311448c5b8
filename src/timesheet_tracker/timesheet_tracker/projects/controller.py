from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container
from ..core.exceptions import ValidationError
from ..web.guards import current_actor
from ..web.serializers import project_json
from .repository import UNCHANGED


def register(app: Flask, container: Container) -> None:
    @app.route("/api/projects", methods=["GET"], endpoint="api_projects")
    def api_projects():
        projects = container.project_service.list_active(current_actor())
        return jsonify([project_json(p) for p in projects])

    @app.route("/api/admin/projects", methods=["GET"], endpoint="api_admin_projects")
    def api_admin_projects():
        projects = container.project_service.list_projects(current_actor())
        return jsonify([project_json(p) for p in projects])

    @app.route("/api/admin/projects", methods=["POST"], endpoint="api_admin_create_project")
    def api_admin_create_project():
        actor = current_actor()
        body = request.get_json(silent=True) or {}
        project = container.project_service.create_project(
            actor,
            name=body.get("name", ""),
            location=body.get("location"),
        )
        return jsonify(project_json(project)), 201

    @app.route("/api/admin/projects/<int:project_id>", methods=["PATCH"], endpoint="api_admin_update_project")
    def api_admin_update_project(project_id: int):
        actor = current_actor()
        body = request.get_json(silent=True) or {}

        is_active = body.get("isActive")
        if is_active is not None and not isinstance(is_active, bool):
            raise ValidationError("isActive must be true or false")

        project = container.project_service.update_project(
            actor,
            project_id,
            name=body.get("name"),
            location=body["location"] if "location" in body else UNCHANGED,
            is_active=is_active,
        )
        return jsonify(project_json(project))
