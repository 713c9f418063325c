# dao/user.py
import logging
from typing import Optional
from werkzeug.security import check_password_hash, generate_password_hash
from configs import db
from db.models.user import User, UserRole

logger = logging.getLogger(__name__)


def get_by_username(username: str) -> Optional[User]:
    return User.query.filter_by(username=(username or "").strip()).first()


def authenticate(username: str, password: str) -> Optional[User]:
    """User whose password matches, else None. Inactive users are still returned."""
    user = get_by_username(username)
    if not user or not check_password_hash(user.password_hash, password or ""):
        return None
    return user


def create_user(username, password, role=UserRole.VIEWER, full_name=None) -> User:
    username = (username or "").strip()
    if not username or not password:
        raise ValueError("Username and password are required.")
    if get_by_username(username):
        raise ValueError(f"User '{username}' already exists.")

    user = User(
        username=username,
        password_hash=generate_password_hash(password),
        full_name=full_name,
        role=role,
        is_active=True,
    )
    db.session.add(user)
    db.session.commit()
    logger.info("User %s created with role %s", username, role.value)
    return user
