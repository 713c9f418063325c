from configs import db
from datetime import datetime

Qty = db.Numeric(18, 3, asdecimal=False)


class StockStatus(db.Model):
    __tablename__ = "stock_status"
    __table_args__ = (
        db.UniqueConstraint(
            "raw_material_id", "year", "month", name="uq_stock_status_period"
        ),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    raw_material_id = db.Column(
        db.Integer, db.ForeignKey("raw_materials.id"), nullable=False, index=True
    )
    raw_material = db.relationship("RawMaterial")

    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)  # 1..12

    opening_balance = db.Column(Qty, default=0, nullable=False)
    # set when the user typed an opening balance instead of carrying it forward
    opening_manual = db.Column(db.Boolean, default=False, nullable=False)
    purchases = db.Column(Qty, default=0, nullable=False)
    utilized = db.Column(Qty, default=0, nullable=False)
    adjustment = db.Column(Qty, default=0, nullable=False)
    closing_balance = db.Column(Qty, default=0, nullable=False)
    min_level = db.Column(Qty, default=0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
