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
from dao import material as material_dao, stock_purchase as purchase_dao
from db.models.user import UserRole
from utils.auth import roles_required
from utils.payload import json_object

purchase_bp = Blueprint("purchase_web", __name__)


def _to_dict(p) -> dict:
    return {
        "id": p.id,
        "vendor": p.vendor,
        "raw_material_id": p.raw_material_id,
        "raw_material": p.raw_material.name if p.raw_material else "",
        "quantity": float(p.quantity or 0),
        "date": p.date.isoformat(),
    }


@purchase_bp.route("/stock-purchases")
@login_required
def purchases_list():
    q = request.args.get("q", "")
    purchases, materials = [], []
    try:
        purchases = purchase_dao.list_purchases(q)
        materials = material_dao.list_materials()
    except SQLAlchemyError:
        current_app.logger.exception("Loading stock purchases failed")
        flash("Error fetching stock purchases.", "danger")
    return render_template(
        "purchase/purchases.html",
        purchases=purchases,
        materials=materials,
        q=q,
    )


@purchase_bp.route("/stock-purchases/add", methods=["POST"])
@login_required
@roles_required(UserRole.ADMIN, UserRole.STOREKEEPER)
def purchases_add():
    try:
        purchase_dao.create_purchase(
            vendor=request.form.get("vendor"),
            raw_material_id=request.form.get("raw_material_id"),
            quantity=request.form.get("quantity"),
            date=request.form.get("date"),
        )
        flash("Stock purchase added successfully", "success")
    except ValueError as e:
        flash(str(e), "warning")
    except SQLAlchemyError:
        current_app.logger.exception("Adding stock purchase failed")
        flash("Error adding stock purchase.", "danger")
    return redirect(url_for("purchase_web.purchases_list"))


@purchase_bp.route("/stock-purchases/api")
@login_required
def purchases_api_list():
    purchases = purchase_dao.list_purchases(request.args.get("q"))
    return jsonify([_to_dict(p) for p in purchases])


@purchase_bp.route("/stock-purchases/api", methods=["POST"])
@login_required
@roles_required(UserRole.ADMIN, UserRole.STOREKEEPER)
def purchases_api_add():
    try:
        data = json_object()
        p = purchase_dao.create_purchase(
            vendor=data.get("vendor"),
            raw_material_id=data.get("raw_material_id"),
            quantity=data.get("quantity"),
            date=data.get("date"),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(_to_dict(p)), 201
