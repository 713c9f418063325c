# admin/setup.py
from flask import redirect, url_for, request, flash
from flask_login import current_user, logout_user
from flask_admin import Admin, AdminIndexView, expose
from flask_admin.contrib.sqla import ModelView
from flask_admin.menu import MenuLink
from flask_admin.theme import Bootstrap4Theme
from configs import db
from db.models.user import UserRole


class MyAdminIndex(AdminIndexView):
    @expose("/")
    def index(self):
        # not signed in -> login page, no flash
        if not current_user.is_authenticated:
            return redirect(url_for("auth.login", next=request.url))

        if not current_user.has_role(UserRole.ADMIN):
            flash("You do not have access to the admin area.", "danger")
            return redirect(url_for("auth.login"))

        return super().index()

    @expose("/logout")
    def admin_logout(self):
        if current_user.is_authenticated:
            logout_user()
            flash("Signed out", "success")
        return redirect(url_for("admin.index"))

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)

    def inaccessible_callback(self, name, **kwargs):
        if not current_user.is_authenticated:
            return redirect(url_for("auth.login", next=request.url))

        flash("You do not have access to the admin area.", "danger")
        return redirect(url_for("auth.login"))


class SecureModelView(ModelView):
    can_view_details = True
    can_export = True

    def is_accessible(self):
        return current_user.is_authenticated and current_user.has_role(UserRole.ADMIN)

    def inaccessible_callback(self, name, **kwargs):
        return redirect(url_for("auth.login", next=request.url))


class RawMaterialView(SecureModelView):
    column_searchable_list = ["name", "category"]
    column_filters = ["category", "unit"]
    column_default_sort = "name"
    column_list = ["id", "name", "category", "unit", "current_stock", "min_stock"]
    form_excluded_columns = ["purchases"]


class UserView(SecureModelView):
    column_exclude_list = ["password_hash"]
    column_searchable_list = ["username", "full_name"]


class StatusView(SecureModelView):
    """Period balances are written by the status pages; admin only reads them."""

    can_create = False
    can_edit = False
    can_delete = False
    column_filters = ["year", "month"]
    column_default_sort = [("year", True), ("month", True)]


def init_admin(app):

    admin = Admin(
        app,
        name="Stock Admin",
        theme=Bootstrap4Theme(),
        index_view=MyAdminIndex(url="/manage"),
        url="/manage",
    )
    # imported here to avoid circular imports
    from db.models.user import User
    from db.models.material import RawMaterial
    from db.models.process import Process
    from db.models.stock_purchase import StockPurchase
    from db.models.stock_status import StockStatus
    from db.models.production_status import ProductionStatus

    admin.add_view(
        UserView(
            User,
            db,
            category="System",
            endpoint="admin_user",
            name="Users",
        )
    )
    admin.add_view(
        RawMaterialView(
            RawMaterial,
            db,
            category="Master Data",
            endpoint="admin_raw_material",
            name="Raw Materials",
        )
    )
    admin.add_view(
        SecureModelView(
            Process,
            db,
            category="Master Data",
            endpoint="admin_process",
            name="Processes",
        )
    )
    admin.add_view(
        SecureModelView(
            StockPurchase,
            db,
            category="Purchases",
            endpoint="admin_stock_purchase",
            name="Stock Purchases",
        )
    )
    admin.add_view(
        StatusView(
            StockStatus,
            db,
            category="Status",
            endpoint="admin_stock_status",
            name="Stock Status",
        )
    )
    admin.add_view(
        StatusView(
            ProductionStatus,
            db,
            category="Status",
            endpoint="admin_production_status",
            name="Production Status",
        )
    )
    admin.add_link(
        MenuLink(
            name="Logout",
            category="System",
            endpoint="admin.admin_logout",
            icon_type="glyph",
            icon_value="glyphicon-log-out",
        )
    )

    return admin
