from sqlalchemy import Column, Integer, String, Text

from app.db.base import Base


class StableEntry(Base):
    __tablename__ = "stable_map_entries"

    memory_id = Column(Integer, primary_key=True)
    key = Column(String(256), primary_key=True)
    value = Column(Text, nullable=False)
