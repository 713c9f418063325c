from configs import db
import enum


class ProcessType(enum.Enum):
    PRE_PRODUCTION = "PRE_PRODUCTION"
    PRODUCTION = "PRODUCTION"


class Process(db.Model):
    __tablename__ = "processes"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(120), unique=True, nullable=False)
    type = db.Column(
        db.Enum(ProcessType, name="processtype"),
        default=ProcessType.PRODUCTION,
        nullable=False,
    )

    def __repr__(self):
        return f"<Process {self.id} {self.name}>"
