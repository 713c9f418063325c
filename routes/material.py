from flask import Blueprint, render_template, request
from flask_login import login_required
from dao import material as material_dao
from utils.balance import classify

material_bp = Blueprint("material_web", __name__)


@material_bp.route("/materials")
@login_required
def materials_list():
    q = request.args.get("q", "")
    materials = material_dao.list_materials(q)
    levels = {m.id: classify(m.current_stock, m.min_stock).value for m in materials}
    return render_template(
        "material/materials.html", materials=materials, levels=levels, q=q
    )
