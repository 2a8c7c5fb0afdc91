"""SQLAlchemy ORM models for clients, contracts and the audit trail"""

from sqlalchemy import Column, String, Float, DateTime, Integer, ForeignKey, Text, JSON
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class Client(Base):
    """Financing customer"""

    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    credit_score = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    contracts = relationship("Contract", back_populates="client")


class Contract(Base):
    """Murabaha contract with the schedule captured at creation"""

    __tablename__ = "contracts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    client_name = Column(Text, nullable=False)
    asset_name = Column(Text, nullable=False)
    contract_date = Column(String(10), nullable=False)  # ISO date
    status = Column(String(16), nullable=False, default="DRAFT")
    stellar_hash = Column(Text, nullable=True)

    # Deal parameters (rate stored normalized)
    asset_price = Column(Float, nullable=False)
    annual_profit_rate = Column(Float, nullable=False)
    duration_months = Column(Integer, nullable=False)
    down_payment_percentage = Column(Float, nullable=False, default=0)
    security_deposit = Column(Float, nullable=False, default=0)

    # Summary
    total_down_payment = Column(Float, nullable=False)
    financed_amount = Column(Float, nullable=False)
    total_profit = Column(Float, nullable=False)
    total_cost = Column(Float, nullable=False)
    monthly_installment = Column(Float, nullable=False)
    schedule = Column("schedule_json", JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    client = relationship("Client", back_populates="contracts")


class AuditLog(Base):
    """Append-only record of user actions"""

    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    user_action = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)
