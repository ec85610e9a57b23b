# backend/questroom/models/entities.py

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata

RESERVATION_STATUSES = ("pending", "approved", "declined", "deleted")

# Statuses that hold their time slot
ACTIVE_STATUSES = ("pending", "approved")


class Scenarios(Base):
    __tablename__ = 'scenarios'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    category = Column(Text)
    description = Column(Text)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    chapters = relationship('Chapters', back_populates='scenario')


class Chapters(Base):
    __tablename__ = 'chapters'

    id = Column(Integer, primary_key=True)
    scenario_id = Column(ForeignKey('scenarios.id', ondelete='RESTRICT'), nullable=False)
    name = Column(Text, nullable=False)
    min_player_number = Column(Integer, nullable=False, default=1)
    max_player_number = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    difficulty = Column(Integer, nullable=False)
    percentage_of_success = Column(Float)
    description = Column(Text)
    comment = Column(Text)
    place = Column(Text)
    image = Column(Text)
    video = Column(Text)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    scenario = relationship('Scenarios', back_populates='chapters')
    time_slots = relationship(
        'TimeSlots',
        back_populates='chapter',
        cascade='all, delete-orphan',
    )
    reservations = relationship('Reservations', back_populates='chapter')


class TimeSlots(Base):
    __tablename__ = 'time_slots'
    __table_args__ = (
        UniqueConstraint('chapter_id', 'date', 'start_time', name='uq_time_slots_chapter_start'),
        Index('ix_time_slots_chapter_date', 'chapter_id', 'date'),
    )

    id = Column(Integer, primary_key=True)
    chapter_id = Column(ForeignKey('chapters.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    is_disabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.current_timestamp())

    chapter = relationship('Chapters', back_populates='time_slots')
    reservations = relationship('Reservations', back_populates='time_slot')

    @property
    def is_booked(self) -> bool:
        """Held by a pending or approved reservation."""
        return any(r.status in ACTIVE_STATUSES for r in self.reservations)


class Reservations(Base):
    __tablename__ = 'reservations'
    __table_args__ = (
        Index('ix_reservations_status', 'status'),
        Index('ix_reservations_time_slot', 'time_slot_id'),
    )

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    people = Column(Integer, nullable=False)
    language = Column(Text, nullable=False, default='fr')

    scenario_id = Column(ForeignKey('scenarios.id', ondelete='SET NULL'))
    chapter_id = Column(ForeignKey('chapters.id', ondelete='SET NULL'))
    time_slot_id = Column(ForeignKey('time_slots.id', ondelete='SET NULL'))

    # Snapshot of the slot, kept after the slot row is cleared
    slot_start = Column(DateTime, nullable=False)
    slot_end = Column(DateTime, nullable=False)

    status = Column(Enum(*RESERVATION_STATUSES, name='reservation_status'), nullable=False, default='pending')

    price_per_person = Column(Float)
    total_price = Column(Float)
    currency = Column(Text)

    created_at = Column(DateTime, server_default=func.current_timestamp())
    updated_at = Column(DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp())

    scenario = relationship('Scenarios')
    chapter = relationship('Chapters', back_populates='reservations')
    time_slot = relationship('TimeSlots', back_populates='reservations')


class Prices(Base):
    __tablename__ = 'prices'

    id = Column(Integer, primary_key=True)
    players_count = Column(Integer, nullable=False)
    is_and_above = Column(Boolean, nullable=False, default=False)
    price_per_person = Column(Float, nullable=False)
    currency = Column(Text, nullable=False, default='TND')
    created_at = Column(DateTime, server_default=func.current_timestamp())
