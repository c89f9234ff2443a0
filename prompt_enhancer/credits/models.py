from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, declarative_base, mapped_column

from prompt_enhancer.constants import USERS_TABLE

Base = declarative_base()


class UserCredits(Base):
    __tablename__ = USERS_TABLE
    __table_args__ = (CheckConstraint("credits >= 0", name="credits_non_negative"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
