# seed.py
from datetime import date
from configs import db
from db.models.material import RawMaterial
from db.models.process import Process, ProcessType
from db.models.stock_purchase import StockPurchase
from app import app  # Flask app


# -------- Raw materials --------
def seed_materials():
    materials = [
        # name, category, unit, current_stock, min_stock
        ("Flour", "Main ingredient", "kg", 120, 50),
        ("Sugar", "Main ingredient", "kg", 80, 40),
        ("Eggs", "Main ingredient", "pcs", 600, 300),
        ("Cooking oil", "Secondary", "l", 30, 20),
        ("Lotus paste", "Filling", "kg", 15, 25),
        ("Gift box", "Packaging", "pcs", 0, 200),
    ]
    for name, category, unit, current_stock, min_stock in materials:
        m = RawMaterial.query.filter_by(name=name).first()
        if not m:
            db.session.add(
                RawMaterial(
                    name=name,
                    category=category,
                    unit=unit,
                    current_stock=current_stock,
                    min_stock=min_stock,
                )
            )
        else:
            m.category = category
            m.unit = unit
            m.min_stock = min_stock
    db.session.commit()
    print("✓ Raw materials seeded/updated")


# -------- Processes --------
def seed_processes():
    processes = [
        ("Mixing", ProcessType.PRE_PRODUCTION),
        ("Baking", ProcessType.PRODUCTION),
        ("Packing", ProcessType.PRODUCTION),
    ]
    for name, ptype in processes:
        p = Process.query.filter_by(name=name).first()
        if not p:
            db.session.add(Process(name=name, type=ptype))
        else:
            p.type = ptype
    db.session.commit()
    print("✓ Processes seeded/updated")


def get_material_id(name: str) -> int:
    m = RawMaterial.query.filter_by(name=name).first()
    if not m:
        raise RuntimeError(f"Raw material '{name}' missing. Run seed_materials() first.")
    return m.id


# -------- Purchases (current month) --------
def seed_purchases():
    today = date.today()
    purchases = [
        ("Binh An Flour Co.", "Flour", 100, 2),
        ("Bien Hoa Sugar", "Sugar", 50, 3),
        ("An Phu Farm", "Eggs", 360, 5),
        ("ABC Oils", "Cooking oil", 20, 8),
    ]
    if StockPurchase.query.first():
        print("• Purchases already present, skipped")
        return
    for vendor, material, qty, day in purchases:
        db.session.add(
            StockPurchase(
                vendor=vendor,
                raw_material_id=get_material_id(material),
                quantity=qty,
                date=date(today.year, today.month, day),
            )
        )
    db.session.commit()
    print("✓ Stock purchases seeded")


if __name__ == "__main__":
    with app.app_context():
        db.create_all()
        seed_materials()
        seed_processes()
        seed_purchases()
        print("✅ Seed data ready")
