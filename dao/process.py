from typing import Optional, List
from configs import db
from db.models.process import Process


def list_processes() -> List[Process]:
    return Process.query.order_by(Process.name.asc()).all()


def get_process(process_id: int) -> Optional[Process]:
    return db.session.get(Process, int(process_id))
