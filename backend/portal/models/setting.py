"""
Setting model - the global leaderboard visibility flag.

There is exactly one logical row, stored under the fixed key ``"global"``.
Because the key is the primary key, two concurrent creators cannot both
insert a row; the loser gets an integrity error and retries its update.
A missing row means the leaderboard is hidden.
"""

from sqlalchemy import Column, Boolean, String
from portal.database import Base

SETTING_KEY = "global"


class Setting(Base):
    """SQLAlchemy model for the settings table."""
    __tablename__ = "settings"

    key = Column(String(32), primary_key=True, default=SETTING_KEY,
                 doc="Fixed singleton key")
    leaderboard_visible = Column(Boolean, nullable=False, default=False,
                                 doc="Whether non-admins may see the leaderboard")

    def __repr__(self):
        return f"<Setting(key='{self.key}', leaderboard_visible={self.leaderboard_visible})>"
