from configs import db
from datetime import datetime


class StockPurchase(db.Model):
    __tablename__ = "stock_purchases"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    vendor = db.Column(db.String(255), nullable=False)

    # matched by id, never by material name
    raw_material_id = db.Column(
        db.Integer, db.ForeignKey("raw_materials.id"), nullable=False, index=True
    )
    raw_material = db.relationship("RawMaterial", backref="purchases")

    quantity = db.Column(db.Numeric(18, 3, asdecimal=False), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
