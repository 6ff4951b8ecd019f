from boxoffice.core.database import Base
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Identity, Text, ForeignKey, Integer, TIMESTAMP, CHAR, func, UniqueConstraint, CheckConstraint


class UniqueTicket(Base):
    __tablename__ = "unique_tickets"

    id: Mapped[str] = mapped_column(CHAR(12), primary_key=True)
    purchase_id: Mapped[int] = mapped_column(ForeignKey("ticket_purchases.id", ondelete="CASCADE"), nullable=False)
    ticket_number: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(), nullable=False)

    purchase: Mapped["TicketPurchase"] = relationship(back_populates="tickets", lazy="select")
    check_in: Mapped["CheckIn"] = relationship(back_populates="ticket", lazy="select", uselist=False)

    __table_args__ = (
        UniqueConstraint("purchase_id", "ticket_number", name="uq_unique_ticket_purchase_number"),
        CheckConstraint("ticket_number >= 1", name="chk_unique_ticket_number_ge1"),
        CheckConstraint("id ~ '^[A-Z0-9]{12}$'", name="chk_unique_ticket_id_format"),
    )


class CheckIn(Base):
    __tablename__ = "check_ins"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    ticket_id: Mapped[str] = mapped_column(ForeignKey("unique_tickets.id", ondelete="RESTRICT"),
                                           nullable=False, unique=True)
    checked_in_by: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    checked_in_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), server_default=func.now(),
                                                    nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    ticket: Mapped["UniqueTicket"] = relationship(back_populates="check_in", lazy="select")
