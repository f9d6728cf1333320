from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..container import Container
from ..core.exceptions import AuthenticationError

logger = logging.getLogger(__name__)


def login_required_for(container: Container):
    """Decorator factory: HTML views go back to the login page, API views get 401."""

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if not container.session_manager(session).is_valid():
                if request.path.startswith("/api/"):
                    return jsonify({"success": False, "message": "Authentication required"}), 401
                flash("Please log in to continue.", "warning")
                return redirect(url_for("login"))
            return view(*args, **kwargs)

        return wrapper

    return login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        sessions = container.session_manager(session)
        if sessions.is_valid():
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")

            try:
                s = container.auth_service.login(sessions, username, password)
                session.permanent = True
                logger.info("User %s logged in", s.username)
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Login failed")
                if bool(app.config.get("DEBUG", False)):
                    flash(f"Unexpected error during login: {e}", "danger")
                else:
                    flash("Unexpected error during login", "danger")

        return render_template("login.html", program_name=container.program_name)

    @app.route("/logout", endpoint="logout")
    def logout():
        sessions = container.session_manager(session)
        current = sessions.current()
        if current:
            container.dashboard_states.discard(current.username)
        sessions.destroy()
        session.pop("last_submission", None)
        flash("You have been logged out.", "info")
        return redirect(url_for("login"))
