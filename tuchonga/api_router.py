from fastapi import APIRouter

from .features.auth.router import router as auth_router
from .features.admin.router import router as admin_router
from .features.users.router import router as users_router
from .features.businesses.router import router as businesses_router
from .features.categories.router import router as categories_router
from .features.products.router import router as products_router
from .features.services.router import router as services_router
from .features.reviews.router import router as reviews_router
from .features.comments.router import router as comments_router
from .features.quick_ratings.router import router as quick_ratings_router
from .features.favorites.router import router as favorites_router
from .features.analytics.router import router as analytics_router

api_router = APIRouter(prefix="/api")

api_router.include_router(auth_router)
api_router.include_router(admin_router)
api_router.include_router(users_router)
api_router.include_router(businesses_router)
api_router.include_router(categories_router)
api_router.include_router(products_router)
api_router.include_router(services_router)
api_router.include_router(reviews_router)
api_router.include_router(comments_router)
api_router.include_router(quick_ratings_router)
api_router.include_router(favorites_router)
api_router.include_router(analytics_router)


@api_router.get("", include_in_schema=False)
def api_info():
    return {
        "name": "TuChonga API",
        "resources": [
            "admin", "auth", "users", "businesses", "categories",
            "products", "services", "reviews", "comments", "quick-ratings",
            "favorites", "analytics",
        ],
    }
