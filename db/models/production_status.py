from configs import db
from datetime import datetime

Qty = db.Numeric(18, 3, asdecimal=False)


class ProductionStatus(db.Model):
    __tablename__ = "production_status"
    __table_args__ = (
        db.UniqueConstraint(
            "raw_material_id",
            "process_id",
            "year",
            "month",
            name="uq_production_status_period",
        ),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    raw_material_id = db.Column(
        db.Integer, db.ForeignKey("raw_materials.id"), nullable=False, index=True
    )
    process_id = db.Column(
        db.Integer, db.ForeignKey("processes.id"), nullable=False, index=True
    )
    raw_material = db.relationship("RawMaterial")
    process = db.relationship("Process")

    year = db.Column(db.Integer, nullable=False)
    month = db.Column(db.Integer, nullable=False)

    opening_balance = db.Column(Qty, default=0, nullable=False)
    purchases = db.Column(Qty, default=0, nullable=False)
    assigned = db.Column(Qty, default=0, nullable=False)
    completed = db.Column(Qty, default=0, nullable=False)
    wastage = db.Column(Qty, default=0, nullable=False)
    pending = db.Column(Qty, default=0, nullable=False)  # display only, not subtracted
    adjustment = db.Column(Qty, default=0, nullable=False)
    closing_balance = db.Column(Qty, default=0, nullable=False)
    min_level = db.Column(Qty, default=0)

    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
