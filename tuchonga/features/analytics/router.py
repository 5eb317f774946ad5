from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from tuchonga.core.database import get_db
from tuchonga.core.security.deps import require_admin
from tuchonga.models import ItemType
from . import schemas, service

# every dashboard figure is admin only
router = APIRouter(prefix="/analytics", tags=["analytics"], dependencies=[Depends(require_admin)])


@router.get("/overview", response_model=schemas.Overview)
def overview(db: Session = Depends(get_db)):
    return service.overview(db)


@router.get("/users", response_model=schemas.UserAnalyticsSummary)
def users(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    return service.user_analytics(db, days)


@router.get("/products", response_model=schemas.ItemAnalytics)
def products(db: Session = Depends(get_db)):
    return service.item_analytics(db, ItemType.PRODUCT)


@router.get("/services", response_model=schemas.ItemAnalytics)
def services(db: Session = Depends(get_db)):
    return service.item_analytics(db, ItemType.SERVICE)


@router.get("/products/trends", response_model=schemas.ItemTrends)
def product_trends(db: Session = Depends(get_db)):
    return service.item_trends(db, ItemType.PRODUCT)


@router.get("/services/trends", response_model=schemas.ItemTrends)
def service_trends(db: Session = Depends(get_db)):
    return service.item_trends(db, ItemType.SERVICE)


@router.get("/reviews", response_model=schemas.ReviewAnalytics)
def reviews(db: Session = Depends(get_db)):
    return service.review_analytics(db)


@router.get("/comments", response_model=schemas.CommentAnalytics)
def comments(db: Session = Depends(get_db)):
    return service.comment_analytics(db)


@router.get("/trends", response_model=schemas.Trend)
def trends(
    metric: schemas.TrendMetric = "users",
    days: int = Query(30, ge=1, le=365),
    db: Session = Depends(get_db),
):
    return service.trend(db, metric, days)
