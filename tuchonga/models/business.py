from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from tuchonga.core.database import Base


class Business(Base):
    __tablename__ = "businesses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    business_email = Column(String(255), nullable=True, unique=True)
    business_phone = Column(String(30), nullable=True)
    location = Column(String(255), nullable=True)
    logo = Column(String(500), nullable=True)
    poc_firstname = Column(String(60), nullable=True)
    poc_lastname = Column(String(60), nullable=True)
    poc_phone = Column(String(30), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    status = Column(Boolean, nullable=False, default=True)  # False = soft deleted
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    products = relationship("Product", back_populates="business")
    services = relationship("Service", back_populates="business")
