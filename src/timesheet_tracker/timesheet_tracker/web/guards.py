"""Session helpers and page guards shared by the feature controllers."""

from __future__ import annotations

from functools import wraps

from flask import current_app, flash, g, redirect, session, url_for

from ..core.exceptions import AuthenticationError
from ..policy.model import Actor
from ..users.service import SessionUser

CONTAINER_KEY = "timesheet_tracker"


def get_container():
    return current_app.extensions[CONTAINER_KEY]


def start_session(user: SessionUser) -> None:
    session.clear()
    session.permanent = True
    session["user_id"] = user.user_id
    session["name"] = user.name
    session["email"] = user.email
    session["role"] = user.role.value


def current_actor() -> Actor:
    """Actor for this request, rebuilt from the store once per request.

    Raises AuthenticationError when there is no session or the account is
    gone or deactivated.
    """
    actor = g.get("actor")
    if actor is None:
        actor = get_container().auth_service.resolve_actor(session.get("user_id"))
        g.actor = actor
    return actor


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            current_actor()
        except AuthenticationError:
            session.clear()
            flash("Please sign in to continue", "warning")
            return redirect(url_for("operatives_login"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    """Admin and supervisor pages. Operatives are sent to their own dashboard."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            actor = current_actor()
        except AuthenticationError:
            session.clear()
            return redirect(url_for("operatives_login"))

        if not actor.is_admin_or_supervisor:
            return redirect(url_for("operatives_dashboard"))
        return view(*args, **kwargs)

    return wrapper
