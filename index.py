# index.py
from collections import Counter
from flask import Blueprint, current_app, flash, render_template
from flask_login import login_required
from sqlalchemy.exc import SQLAlchemyError
from dao import stock_status as ss_dao
from utils.balance import StockLevel
from utils.periods import Period

main_bp = Blueprint("main", __name__)


@main_bp.app_context_processor
def inject_period():
    return {"current_period": Period.current()}


@main_bp.route("/")
@login_required
def home():
    period = Period.current()
    levels = Counter()
    try:
        rows = ss_dao.build_stock_status(period)
        levels.update(r["status"] for r in rows)
    except SQLAlchemyError:
        current_app.logger.exception("Loading dashboard for %s failed", period)
        flash("Error fetching stock status.", "danger")
    return render_template(
        "index.html",
        period=period,
        out_count=levels[StockLevel.OUT.value],
        low_count=levels[StockLevel.LOW.value],
        normal_count=levels[StockLevel.NORMAL.value],
    )
