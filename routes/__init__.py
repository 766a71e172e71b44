"""routes 패키지 — Blueprint 중앙 등록"""


def register_blueprints(app):
    from routes.holiday import holiday_bp
    from routes.bank_hours import bank_hours_bp

    app.register_blueprint(holiday_bp)
    app.register_blueprint(bank_hours_bp)
