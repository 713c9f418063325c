from urllib.parse import urlparse
from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    session,
    url_for,
)
from flask_login import login_user, logout_user, current_user
from dao import user as user_dao

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


def _safe_next(target):
    # only same-site relative paths
    if not target:
        return None
    parts = urlparse(target)
    if parts.scheme or parts.netloc or not target.startswith("/"):
        return None
    return target


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "POST":
        session.pop("_flashes", None)

        username = request.form.get("username", "").strip()
        user = user_dao.authenticate(username, request.form.get("password", ""))

        if user is None:
            current_app.logger.warning("Failed login for %r", username)
            flash("Invalid username or password", "danger")
            return render_template("auth/login.html"), 401

        if not user.is_active:
            flash("This account is disabled", "warning")
            return render_template("auth/login.html"), 403

        login_user(user, remember=True)
        flash(f"Signed in as {user.full_name or user.username}", "success")
        return redirect(_safe_next(request.args.get("next")) or url_for("main.home"))

    return render_template("auth/login.html")


@auth_bp.route("/logout")
def logout():
    if current_user.is_authenticated:
        logout_user()
        session.pop("_flashes", None)
        flash("Signed out", "info")
    return redirect(url_for("auth.login"))
