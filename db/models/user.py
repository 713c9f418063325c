# db/models/user.py
import enum
from configs import db
from flask_login import UserMixin


class UserRole(enum.Enum):
    ADMIN = "ADMIN"
    STOREKEEPER = "STOREKEEPER"  # stock purchases / stock status
    PRODUCTION = "PRODUCTION"  # production status
    VIEWER = "VIEWER"


class User(db.Model, UserMixin):
    __tablename__ = "user_account"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    full_name = db.Column(db.String(120))
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.VIEWER, nullable=False)

    def get_id(self):
        return str(self.id)

    def has_role(self, *roles: UserRole):
        """True if the user holds one of the given roles."""
        return self.role in roles
