# medicamp_api/router_config.py
"""
Router configuration for the MediCamp API
Centralized router management separated from main.py
"""


def setup_routers(app):
    """Configure all application routers"""
    from .src.auth.routes import router as auth_router
    from .src.users.routes import router as users_router
    from .src.camps.routes import router as camps_router
    from .src.registrations.routes import router as registrations_router
    from .src.payments.routes import router as payments_router
    from .src.analytics.routes import router as analytics_router

    # Authentication and users
    app.include_router(auth_router, tags=["Authentication"])
    app.include_router(users_router, tags=["Users"])

    # Camp catalog
    app.include_router(camps_router, tags=["Camps"])

    # Registration, payment and analytics flow
    app.include_router(registrations_router, tags=["Registrations"])
    app.include_router(payments_router, tags=["Payments"])
    app.include_router(analytics_router, tags=["Analytics"])

    return app
