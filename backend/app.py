from datetime import datetime, timezone

from flask import Flask, jsonify
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from models import db
from models.user_model import User
from accounts.routes import accounts_bp
from auth.routes import auth_bp
from bills.routes import bills_bp
from budgets.insights import InsightInputError, RecommendationRules
from budgets.routes import budgets_bp
from categories.routes import categories_bp
from categories.services import seed_default_categories
from dashboard.routes import dashboard_bp
from debts.routes import debts_bp
from goals.routes import goals_bp
from transactions.routes import transactions_bp
from config import Config

API_VERSION = "2.1.0"


def _register_jwt_handlers(jwt: JWTManager):

    @jwt.user_lookup_loader
    def _load_user(_jwt_header, jwt_data):
        return User.query.filter_by(id=int(jwt_data["sub"]), active=True).one_or_none()

    @jwt.user_lookup_error_loader
    def _user_gone(_jwt_header, _jwt_data):
        return jsonify({"error": "Invalid token - user not found"}), 401

    @jwt.unauthorized_loader
    def _missing_token(reason):
        return jsonify({"error": "Access token required"}), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return jsonify({"error": "Invalid token"}), 401

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_data):
        return jsonify({"error": "Token expired"}), 401


def _register_error_handlers(app: Flask):

    @app.errorhandler(InsightInputError)
    def _bad_insight_input(e):
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(SQLAlchemyError)
    def _db_error(e):
        db.session.rollback()
        app.logger.exception("Database error")
        return jsonify({"error": "Internal server error"}), 500

    @app.errorhandler(Exception)
    def _unhandled(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        db.session.rollback()
        app.logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    CORS(app, origins=app.config.get("CORS_ORIGINS", "*"))

    # malformed overrides abort startup
    app.extensions["recommendation_rules"] = RecommendationRules.from_mapping(
        app.config.get("RECOMMENDATION_RULES")
    )

    db.init_app(app)
    with app.app_context():
        db.create_all()
        seed_default_categories()

    jwt = JWTManager(app)
    _register_jwt_handlers(jwt)
    _register_error_handlers(app)

    app.register_blueprint(auth_bp)
    app.register_blueprint(transactions_bp)
    app.register_blueprint(budgets_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(accounts_bp)
    app.register_blueprint(bills_bp)
    app.register_blueprint(debts_bp)
    app.register_blueprint(goals_bp)
    app.register_blueprint(dashboard_bp)

    @app.route("/api/health")
    def health():
        return jsonify(
            {
                "status": "OK",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "version": API_VERSION,
                "features": sorted(bp for bp in app.blueprints),
            }
        )

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
