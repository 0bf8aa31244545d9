from .auth import auth_bp
from .rooms import rooms_bp
from .bookings import bookings_bp
from .users import users_bp
from .admin import admin_bp

def register_blueprints(app):
    app.register_blueprint(auth_bp)
    app.register_blueprint(rooms_bp)
    app.register_blueprint(bookings_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(admin_bp)
