from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import Identity, Text, Integer, CheckConstraint
from boxoffice.core.database import Base


class Venue(Base):
    __tablename__ = "venues"

    id: Mapped[int] = mapped_column(Identity(always=True), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    capacity: Mapped[int | None] = mapped_column(Integer, nullable=True)

    concerts: Mapped[list['Concert']] = relationship(back_populates="venue", lazy='select')

    __table_args__ = (
        CheckConstraint("capacity IS NULL OR capacity > 0", name="chk_venue_capacity_gt0"),
    )
