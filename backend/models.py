from sqlalchemy import Column, Integer
from database import Base


class LongIdEntity(Base):
    """
    Base for entities identified by a numeric id.

    Concrete entities subclass this and declare __tablename__ and
    their own columns. The id is assigned by the database on flush.
    """
    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self):
        return f"<{type(self).__name__} id={self.id}>"
