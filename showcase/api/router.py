from fastapi import APIRouter

from showcase.api.routes import contacts, products, admin_auth, admin_contacts, email_config

api_router = APIRouter(prefix="/api")

# 🔓 Public routes
api_router.include_router(contacts.router)
api_router.include_router(products.router)
api_router.include_router(admin_auth.router)

# 🔒 Admin-only routes (each guarded by get_current_admin)
api_router.include_router(admin_contacts.router)
api_router.include_router(email_config.router)
