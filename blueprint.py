from index import main_bp
from routes.auth import auth_bp
from routes.errors import errors_bp
from routes.material import material_bp
from routes.stock_purchase import purchase_bp
from routes.stock_status import stock_status_bp
from routes.production_status import production_status_bp


def blue_print(app):
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(errors_bp)
    app.register_blueprint(material_bp)
    app.register_blueprint(purchase_bp)
    app.register_blueprint(stock_status_bp)
    app.register_blueprint(production_status_bp)
