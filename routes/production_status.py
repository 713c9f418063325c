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
from dao import process as process_dao, production_status as ps_dao
from db.models.user import UserRole
from utils.auth import roles_required
from utils.payload import json_object
from utils.periods import Period, period_from_params

production_status_bp = Blueprint("production_status_web", __name__)


def _process_filter(value):
    """'all' / '' -> None, otherwise a process id."""
    if value in (None, "", "all"):
        return None
    try:
        process_id = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid process: {value!r}")
    if process_dao.get_process(process_id) is None:
        raise ValueError(f"Unknown process: {process_id}")
    return process_id


@production_status_bp.route("/production-status")
@login_required
def production_status_page():
    q = request.args.get("q", "")
    selected = request.args.get("process", "all")
    try:
        period = period_from_params(request.args)
        process_id = _process_filter(selected)
    except ValueError as e:
        flash(str(e), "warning")
        period, process_id, selected = Period.current(), None, "all"

    rows, processes = [], []
    try:
        processes = process_dao.list_processes()
        rows = ps_dao.build_production_status(period, process_id=process_id, search=q)
    except SQLAlchemyError:
        current_app.logger.exception("Loading production status %s failed", period)
        flash("Error fetching production status.", "danger")

    return render_template(
        "status/production_status.html",
        rows=rows,
        processes=processes,
        selected_process=selected,
        period=period,
        status_date=period.start.isoformat(),
        q=q,
    )


@production_status_bp.route("/production-status/update", methods=["POST"])
@login_required
@roles_required(UserRole.ADMIN, UserRole.PRODUCTION)
def production_status_update():
    q = request.form.get("q", "")
    selected = request.form.get("process", "all")
    try:
        period = period_from_params(request.form)
        result = ps_dao.save_production_status(
            period,
            entries=_extract_entries(request.form),
            process_id=_process_filter(selected),
            only=request.form.getlist("row") or None,
        )
    except ValueError as e:
        flash(str(e), "warning")
        return redirect(url_for("production_status_web.production_status_page", q=q))
    except SQLAlchemyError:
        current_app.logger.exception("Updating production status failed")
        flash("Error updating production status.", "danger")
        return redirect(url_for("production_status_web.production_status_page", q=q))

    if result.ok:
        flash("Production status has been updated successfully.", "success")
    else:
        failed = ", ".join(f.label for f in result.failed)
        flash(
            f"Updated {len(result.updated)} rows; failed: {failed}. Retry to apply them.",
            "warning",
        )
    return redirect(
        url_for(
            "production_status_web.production_status_page",
            period=period.key,
            process=selected,
            q=q,
        )
    )


@production_status_bp.route("/production-status/api")
@login_required
def production_status_api():
    try:
        period = period_from_params(request.args)
        process_id = _process_filter(request.args.get("process"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    rows = ps_dao.build_production_status(
        period, process_id=process_id, search=request.args.get("q")
    )
    return jsonify({"period": period.key, "label": period.label, "rows": rows})


@production_status_bp.route("/production-status/api", methods=["POST"])
@login_required
@roles_required(UserRole.ADMIN, UserRole.PRODUCTION)
def production_status_api_update():
    """
    Body: {"period": "2025-01", "process": 2,
           "entries": [{"raw_material_id": 1, "process_id": 2, "adjustment": 5}, ...]}
    """
    try:
        data = json_object()
        period = period_from_params(data)
        raw_entries = data.get("entries") or []
        if not isinstance(raw_entries, list):
            raise ValueError("'entries' must be a list of objects.")
        entries = {}
        for e in raw_entries:
            if not isinstance(e, dict):
                raise ValueError("Each entry must be an object.")
            key = ps_dao.parse_key((e.get("raw_material_id"), e.get("process_id")))
            entries[key] = {f: e[f] for f in ps_dao.EDITABLE_FIELDS if f in e}
        result = ps_dao.save_production_status(
            period,
            entries=entries,
            process_id=_process_filter(data.get("process")),
            only=data.get("only"),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    payload = {"period": period.key, **result.to_dict()}
    return jsonify(payload), (200 if result.ok else 207)


def _extract_entries(form) -> dict:
    """assigned[3:5]=10 -> {(3, 5): {"assigned": "10"}}"""
    entries = {}
    for key in form:
        if "[" not in key or not key.endswith("]"):
            continue
        field, raw_key = key[:-1].split("[", 1)
        if field not in ps_dao.EDITABLE_FIELDS:
            continue
        value = form.get(key)
        if value is None or value.strip() == "":
            continue
        entries.setdefault(ps_dao.parse_key(raw_key), {})[field] = value
    return entries
