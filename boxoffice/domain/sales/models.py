from boxoffice.core.database import Base
from decimal import Decimal
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Identity, Text, ForeignKey, Numeric, Integer, TIMESTAMP, func, CheckConstraint


class Sale(Base):
    __tablename__ = "sales"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    concert_id: Mapped[int] = mapped_column(ForeignKey("concerts.id", ondelete="RESTRICT"), nullable=False, index=True)
    customer_name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    customer_email: Mapped[str | None] = mapped_column(Text, nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, server_default="0")
    sale_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)
    sold_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    purchases: Mapped[list["TicketPurchase"]] = relationship(back_populates="sale", lazy="selectin")

    __table_args__ = (
        CheckConstraint("total_amount >= 0", name="chk_sale_total_nonneg"),
    )


class TicketPurchase(Base):
    __tablename__ = "ticket_purchases"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    sale_id: Mapped[int] = mapped_column(ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    ticket_type_id: Mapped[int] = mapped_column(ForeignKey("ticket_types.id", ondelete="RESTRICT"),
                                                nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price_per_ticket: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    sale: Mapped["Sale"] = relationship(back_populates="purchases", lazy="select")
    ticket_type: Mapped["TicketType"] = relationship(lazy="selectin")
    tickets: Mapped[list["UniqueTicket"]] = relationship(
        back_populates="purchase",
        lazy="selectin",
        order_by="UniqueTicket.ticket_number"
    )

    __table_args__ = (
        CheckConstraint("quantity >= 1", name="chk_purchase_quantity_ge1"),
        CheckConstraint("price_per_ticket >= 0", name="chk_purchase_price_nonneg"),
        CheckConstraint("total_price >= 0", name="chk_purchase_total_nonneg"),
    )
