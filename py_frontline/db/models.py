"""Database models for teams, rounds and region state."""

from sqlalchemy import BigInteger, Column, Float, ForeignKey, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class TeamRow(Base):
    """A faction players can join."""

    __tablename__ = "teams"

    id = Column(String(32), primary_key=True)  # Stable slug, e.g. "red"
    display_name = Column(String(100), nullable=False)
    color = Column(BigInteger, nullable=False)  # ARGB, map styling only
    max_size = Column(Integer, nullable=False, default=0)  # 0 = unlimited


class MembershipRow(Base):
    """One row per player; a player belongs to at most one team."""

    __tablename__ = "memberships"

    player_id = Column(String(36), primary_key=True)
    team_id = Column(
        String(32), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True
    )


class TeamSpawnRow(Base):
    """Spawn point of a team."""

    __tablename__ = "team_spawns"

    team_id = Column(String(32), ForeignKey("teams.id", ondelete="CASCADE"), primary_key=True)
    world = Column(String(100), nullable=False)
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    z = Column(Float, nullable=False)
    yaw = Column(Float, nullable=False)
    pitch = Column(Float, nullable=False)


class RegionClaimRow(Base):
    """Owner of a region at world-seed time, keyed by region corner."""

    __tablename__ = "region_claims"

    corner_x = Column(Integer, primary_key=True)
    corner_z = Column(Integer, primary_key=True)
    team_id = Column(String(32), ForeignKey("teams.id", ondelete="CASCADE"), nullable=False)


class RoundRow(Base):
    """A game round; region names are scoped to one."""

    __tablename__ = "rounds"

    round_id = Column(Integer, primary_key=True, autoincrement=True)
    start_time = Column(BigInteger, nullable=False)  # epoch millis
    end_time = Column(BigInteger)
    current_phase = Column(Integer, nullable=False, default=1)
    world_seed = Column(BigInteger, nullable=False)
    world_name = Column(String(100))
    status = Column(String(20), nullable=False, default="PENDING")  # PENDING, ACTIVE, COMPLETED
    winning_team = Column(String(32))


class RegionNameRow(Base):
    """Display name of a lettered grid cell for one round."""

    __tablename__ = "region_names"

    round_id = Column(
        Integer, ForeignKey("rounds.round_id", ondelete="CASCADE"), primary_key=True
    )
    region_id = Column(String(8), primary_key=True)  # "A1".."D4"
    region_name = Column(String(100), nullable=False)


class RegionStatusRow(Base):
    """Live ownership of a lettered grid cell for one round."""

    __tablename__ = "region_status"

    round_id = Column(
        Integer, ForeignKey("rounds.round_id", ondelete="CASCADE"), primary_key=True
    )
    region_id = Column(String(8), primary_key=True)
    owner_team = Column(String(32))  # None while neutral
    state = Column(String(20), nullable=False, default="NEUTRAL")
    owned_since = Column(BigInteger)
    times_captured = Column(Integer, nullable=False, default=0)
