from dao import user as user_dao
from db.models.user import UserRole
from app import app  # app context

DEFAULT_PASSWORD = "1"

USERS = [
    ("admin", "System Admin", UserRole.ADMIN),
    ("store1", "Storekeeper", UserRole.STOREKEEPER),
    ("prod1", "Production Lead", UserRole.PRODUCTION),
    ("viewer1", "Read Only", UserRole.VIEWER),
]

with app.app_context():
    for username, full_name, role in USERS:
        if user_dao.get_by_username(username):
            continue
        user_dao.create_user(username, DEFAULT_PASSWORD, role=role, full_name=full_name)

    print("✅ Seeded users with all defined roles")
