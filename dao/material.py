from typing import Optional, List
from sqlalchemy import or_
from configs import db
from db.models.material import RawMaterial


def list_materials(search: str | None = None) -> List[RawMaterial]:
    q = RawMaterial.query
    s = (search or "").strip()
    if s:
        like = f"%{s}%"
        q = q.filter(or_(RawMaterial.name.ilike(like), RawMaterial.category.ilike(like)))
    return q.order_by(RawMaterial.name.asc(), RawMaterial.id.asc()).all()


def get_material(material_id: int) -> Optional[RawMaterial]:
    return db.session.get(RawMaterial, int(material_id))
