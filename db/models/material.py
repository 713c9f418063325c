from configs import db


class RawMaterial(db.Model):
    __tablename__ = "raw_materials"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    category = db.Column(db.String(100), default="")
    unit = db.Column(db.String(32), default="")

    current_stock = db.Column(db.Numeric(18, 3, asdecimal=False), default=0)
    min_stock = db.Column(db.Numeric(18, 3, asdecimal=False), default=0)

    def __repr__(self):
        return f"<RawMaterial {self.id} {self.name}>"
