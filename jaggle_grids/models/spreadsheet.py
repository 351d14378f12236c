# Spreadsheet model

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from jaggle_grids.core.database import Base, utcnow
from jaggle_grids.models.user import User

class Spreadsheet(Base):
    __tablename__ = "spreadsheets"
    
    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    
    # Opaque payload produced by the client-side spreadsheet; stored verbatim
    data = Column(Text, nullable=False, default="")
    
    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    
    # Relationships
    owner = relationship(User, backref="spreadsheets")
