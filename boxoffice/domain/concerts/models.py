from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Identity, Text, Integer, ForeignKey, Numeric, Boolean, TIMESTAMP, CheckConstraint, Index, text
from boxoffice.core.database import Base
from decimal import Decimal
from datetime import datetime


class Concert(Base):
    __tablename__ = "concerts"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    concert_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False, index=True)
    venue_id: Mapped[int] = mapped_column(
        ForeignKey("venues.id", ondelete='RESTRICT'),
        nullable=False,
        index=True
    )
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    venue: Mapped['Venue'] = relationship(back_populates='concerts', lazy='selectin')
    ticket_types: Mapped[list['TicketType']] = relationship(
        back_populates='concert',
        lazy='selectin',
        order_by="TicketType.price.desc()"
    )


class TicketType(Base):
    __tablename__ = "ticket_types"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    concert_id: Mapped[int] = mapped_column(ForeignKey("concerts.id", ondelete='CASCADE'), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    # remaining inventory, decremented on every sale
    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("true"), default=True)

    concert: Mapped['Concert'] = relationship(back_populates='ticket_types', lazy='select')

    __table_args__ = (
        CheckConstraint("price >= 0", name="chk_ticket_type_price_nonneg"),
        CheckConstraint("total_quantity >= 0", name="chk_ticket_type_quantity_nonneg"),
        Index("ix_ticket_types_concert_active", "concert_id", "is_active"),
    )
