# app/models/role.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from app.db.base_class import Base


class Role(Base):
    __tablename__ = "roles"

    # Fixed ids seeded by init_db: 1 admin, 2 user, 3 organizer
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(50), nullable=False, unique=True)

    users = relationship("User", back_populates="role")
