def register_blueprints(app):
    from farm.products.routes import products_bp
    from farm.ordering.routes import ordering_bp
    from farm.history import inventory_bp
    from farm.reports.routes import reports_bp
    from farm.fields.routes import fields_bp
    from farm.settings.routes import settings_bp
    from farm.auth.routes import auth_bp
    from farm.notifications.routes import notifications_bp
    from farm.imports.routes import imports_bp

    # Inventory
    app.register_blueprint(ordering_bp)
    app.register_blueprint(products_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(imports_bp)

    # Reference data and settings
    app.register_blueprint(fields_bp)
    app.register_blueprint(settings_bp)
    app.register_blueprint(notifications_bp)

    # Site password
    app.register_blueprint(auth_bp)
