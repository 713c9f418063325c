import logging
from flask import Flask
from configs import db, login, Config, engine_options
from db.models.user import User, UserRole
from blueprint import blue_print
from admin.setup import init_admin
from utils.auth import can_edit


def create_app(overrides: dict | None = None) -> Flask:
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)
    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS",
        engine_options(
            app.config["SQLALCHEMY_DATABASE_URI"], app.config["DB_POOL_TIMEOUT"]
        ),
    )

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    db.init_app(app)
    login.init_app(app)
    login.login_view = "auth.login"

    @app.context_processor
    def inject_enums():
        return dict(UserRole=UserRole, can_edit=can_edit)

    init_admin(app)  # /manage
    blue_print(app)
    return app


@login.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
