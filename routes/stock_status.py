from flask import (
    Blueprint,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    url_for,
)
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError
from dao import stock_status as ss_dao
from db.models.user import UserRole
from utils.auth import roles_required
from utils.payload import json_object
from utils.periods import Period, period_from_params

stock_status_bp = Blueprint("stock_status_web", __name__)


def _classify_enabled() -> bool:
    return bool(current_app.config.get("STOCK_STATUS_CLASSIFY", True))


@stock_status_bp.route("/stock-status")
@login_required
def stock_status_page():
    q = request.args.get("q", "")
    try:
        period = period_from_params(request.args)
    except ValueError as e:
        flash(str(e), "warning")
        period = Period.current()

    rows = []
    try:
        rows = ss_dao.build_stock_status(
            period, search=q, classify_levels=_classify_enabled()
        )
    except SQLAlchemyError:
        current_app.logger.exception("Loading stock status %s failed", period)
        flash("Error fetching stock status.", "danger")

    return render_template(
        "status/stock_status.html",
        rows=rows,
        period=period,
        status_date=period.start.isoformat(),
        q=q,
        classify=_classify_enabled(),
    )


@stock_status_bp.route("/stock-status/update", methods=["POST"])
@login_required
@roles_required(UserRole.ADMIN, UserRole.STOREKEEPER)
def stock_status_update():
    q = request.form.get("q", "")
    try:
        period = period_from_params(request.form)
    except ValueError as e:
        flash(str(e), "warning")
        return redirect(url_for("stock_status_web.stock_status_page", q=q))

    try:
        result = ss_dao.save_stock_status(
            period,
            adjustments=_extract_field(request.form, "adjustment"),
            opening_balances=_extract_field(request.form, "opening_balance"),
            only=request.form.getlist("row") or None,
        )
    except ValueError as e:
        flash(str(e), "warning")
    except SQLAlchemyError:
        current_app.logger.exception("Updating stock status %s failed", period)
        flash("Error updating stock status.", "danger")
    else:
        if result.ok:
            flash("Stock status has been updated successfully.", "success")
        else:
            failed = ", ".join(f.label for f in result.failed)
            flash(
                f"Updated {len(result.updated)} rows; failed: {failed}. Retry to apply them.",
                "warning",
            )

    return redirect(
        url_for("stock_status_web.stock_status_page", period=period.key, q=q)
    )


@stock_status_bp.route("/stock-status/api")
@login_required
def stock_status_api():
    try:
        period = period_from_params(request.args)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    rows = ss_dao.build_stock_status(
        period, search=request.args.get("q"), classify_levels=_classify_enabled()
    )
    return jsonify({"period": period.key, "label": period.label, "rows": rows})


@stock_status_bp.route("/stock-status/api/preview", methods=["POST"])
@login_required
def stock_status_api_preview():
    try:
        data = json_object()
        period = period_from_params(data)
        rows = ss_dao.preview_stock_status(
            period,
            adjustments=data.get("adjustments"),
            opening_balances=data.get("opening_balances"),
            search=data.get("q"),
            classify_levels=_classify_enabled(),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"period": period.key, "rows": rows})


@stock_status_bp.route("/stock-status/api", methods=["POST"])
@login_required
@roles_required(UserRole.ADMIN, UserRole.STOREKEEPER)
def stock_status_api_update():
    try:
        data = json_object()
        period = period_from_params(data)
        result = ss_dao.save_stock_status(
            period,
            adjustments=data.get("adjustments"),
            opening_balances=data.get("opening_balances"),
            only=data.get("only"),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    payload = {"period": period.key, **result.to_dict()}
    # 207: some rows committed, some not
    return jsonify(payload), (200 if result.ok else 207)


def _extract_field(form, name: str) -> dict:
    """adjustment[12]=5 -> {12: "5"}; blank inputs are left out."""
    out = {}
    prefix = f"{name}["
    for key in form:
        if key.startswith(prefix) and key.endswith("]"):
            value = form.get(key)
            if value is None or value.strip() == "":
                continue
            out[key[len(prefix) : -1]] = value
    return out
