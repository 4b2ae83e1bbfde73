from sqlalchemy import Column, Integer, String, BigInteger, DateTime, func
from .database import Base

class VoteDB(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    checkpoint_id = Column(String, nullable=False, index=True)
    level = Column(Integer, nullable=False)
    timestamp_ms = Column(BigInteger, nullable=False, index=True) # Client clock, trusted by aggregation
    origin_id = Column(String, nullable=True)
    direction = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now()) # Server clock, informational only

class DeviceStateDB(Base):
    __tablename__ = "device_state"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
