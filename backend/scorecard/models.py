from sqlalchemy.orm import declared_attr
from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    JSON,
    Integer,
    Float,
    Boolean,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func
from .db import Base


def _json():
    return JSON().with_variant(JSONB, "postgresql")


class Course(Base):
    __tablename__ = "course"
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)


class CourseHole(Base):
    __tablename__ = "course_hole"
    id = Column(String, primary_key=True)
    course_id = Column(String, ForeignKey("course.id", ondelete="CASCADE"), nullable=False)
    hole_number = Column(Integer, nullable=False)
    par = Column(Integer, nullable=False, default=4)
    stroke_index = Column(Integer, nullable=True)
    white_distance = Column(Integer, nullable=True)
    yellow_distance = Column(Integer, nullable=True)
    blue_distance = Column(Integer, nullable=True)
    red_distance = Column(Integer, nullable=True)
    black_distance = Column(Integer, nullable=True)
    gold_distance = Column(Integer, nullable=True)
    orange_distance = Column(Integer, nullable=True)
    silver_distance = Column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "course_id", "hole_number", name="uq_course_hole_course_id_hole_number"
        ),
    )


class GameColumns:
    """Columns shared by every format's game table."""

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=True)
    course_name = Column(String, nullable=True)
    holes_played = Column(Integer, nullable=False, default=18)
    date_played = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    is_finished = Column(Boolean, nullable=False, default=False)

    @declared_attr
    def course_id(cls):
        return Column(String, ForeignKey("course.id"), nullable=True)


class HoleColumns:
    """Columns shared by every format's per-hole table."""

    __games_table__ = ""

    id = Column(String, primary_key=True)
    hole_number = Column(Integer, nullable=False)
    par = Column(Integer, nullable=False, default=4)
    stroke_index = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    @declared_attr
    def game_id(cls):
        return Column(
            String, ForeignKey(f"{cls.__games_table__}.id"), nullable=False, index=True
        )

    @declared_attr
    def __table_args__(cls):
        return (
            UniqueConstraint(
                "game_id",
                "hole_number",
                name=f"uq_{cls.__tablename__}_game_id_hole_number",
            ),
        )


class MatchPlayGame(GameColumns, Base):
    __tablename__ = "match_play_games"
    player_1 = Column(String, nullable=False)
    player_1_handicap = Column(Float, nullable=True)
    player_1_tee = Column(String, nullable=True)
    player_2 = Column(String, nullable=False)
    player_2_handicap = Column(Float, nullable=True)
    player_2_tee = Column(String, nullable=True)
    use_handicaps = Column(Boolean, nullable=False, default=False)
    match_status = Column(Integer, nullable=False, default=0)
    holes_remaining = Column(Integer, nullable=True)
    winner_player = Column(String, nullable=True)
    final_result = Column(String, nullable=True)


class MatchPlayHole(HoleColumns, Base):
    __tablename__ = "match_play_holes"
    __games_table__ = "match_play_games"
    player_1_gross_score = Column(Integer, nullable=True)
    player_1_net_score = Column(Integer, nullable=True)
    player_2_gross_score = Column(Integer, nullable=True)
    player_2_net_score = Column(Integer, nullable=True)
    player_1_mulligan = Column(Boolean, nullable=False, default=False)
    player_2_mulligan = Column(Boolean, nullable=False, default=False)
    hole_result = Column(Integer, nullable=False, default=0)
    match_status_after = Column(Integer, nullable=False, default=0)
    holes_remaining_after = Column(Integer, nullable=False, default=0)


class BestBallGame(GameColumns, Base):
    __tablename__ = "best_ball_games"
    team_a_name = Column(String, nullable=False, default="Team A")
    team_a_players = Column(_json(), nullable=False, default=list)
    team_b_name = Column(String, nullable=False, default="Team B")
    team_b_players = Column(_json(), nullable=False, default=list)
    use_handicaps = Column(Boolean, nullable=False, default=False)
    team_a_total = Column(Integer, nullable=False, default=0)
    team_b_total = Column(Integer, nullable=False, default=0)
    match_status = Column(Integer, nullable=False, default=0)
    holes_remaining = Column(Integer, nullable=True)
    winner_team = Column(String, nullable=True)  # "A" | "B" | "TIE"
    final_result = Column(String, nullable=True)


class BestBallHole(HoleColumns, Base):
    __tablename__ = "best_ball_holes"
    __games_table__ = "best_ball_games"
    team_a_scores = Column(_json(), nullable=False, default=list)
    team_b_scores = Column(_json(), nullable=False, default=list)
    team_a_best_gross = Column(Integer, nullable=True)
    team_a_best_net = Column(Integer, nullable=True)
    team_a_counting_player = Column(String, nullable=True)
    team_b_best_gross = Column(Integer, nullable=True)
    team_b_best_net = Column(Integer, nullable=True)
    team_b_counting_player = Column(String, nullable=True)
    team_a_running_total = Column(Integer, nullable=False, default=0)
    team_b_running_total = Column(Integer, nullable=False, default=0)
    hole_result = Column(Integer, nullable=False, default=0)
    match_status_after = Column(Integer, nullable=False, default=0)
    holes_remaining_after = Column(Integer, nullable=False, default=0)


class SkinsGame(GameColumns, Base):
    __tablename__ = "skins_games"
    players = Column(_json(), nullable=False, default=list)
    skin_value = Column(Float, nullable=False, default=1.0)
    carryover_enabled = Column(Boolean, nullable=False, default=True)
    use_handicaps = Column(Boolean, nullable=False, default=False)
    handicap_mode = Column(String, nullable=False, default="net")  # "gross" | "net"
    winner_player = Column(String, nullable=True)


class SkinsHole(HoleColumns, Base):
    __tablename__ = "skins_holes"
    __games_table__ = "skins_games"
    player_scores = Column(_json(), nullable=False, default=dict)
    skins_available = Column(Integer, nullable=False, default=1)
    winner_player = Column(String, nullable=True)
    is_carryover = Column(Boolean, nullable=False, default=False)


class CopenhagenGame(GameColumns, Base):
    __tablename__ = "copenhagen_games"
    player_1 = Column(String, nullable=False)
    player_2 = Column(String, nullable=False)
    player_3 = Column(String, nullable=False)
    player_1_handicap = Column(Float, nullable=True)
    player_2_handicap = Column(Float, nullable=True)
    player_3_handicap = Column(Float, nullable=True)
    use_handicaps = Column(Boolean, nullable=False, default=False)
    player_1_total_points = Column(Integer, nullable=False, default=0)
    player_2_total_points = Column(Integer, nullable=False, default=0)
    player_3_total_points = Column(Integer, nullable=False, default=0)
    winner_player = Column(String, nullable=True)


class CopenhagenHole(HoleColumns, Base):
    __tablename__ = "copenhagen_holes"
    __games_table__ = "copenhagen_games"
    player_1_gross_score = Column(Integer, nullable=True)
    player_2_gross_score = Column(Integer, nullable=True)
    player_3_gross_score = Column(Integer, nullable=True)
    player_1_net_score = Column(Integer, nullable=True)
    player_2_net_score = Column(Integer, nullable=True)
    player_3_net_score = Column(Integer, nullable=True)
    player_1_hole_points = Column(Integer, nullable=False, default=0)
    player_2_hole_points = Column(Integer, nullable=False, default=0)
    player_3_hole_points = Column(Integer, nullable=False, default=0)
    player_1_running_total = Column(Integer, nullable=False, default=0)
    player_2_running_total = Column(Integer, nullable=False, default=0)
    player_3_running_total = Column(Integer, nullable=False, default=0)
    is_sweep = Column(Boolean, nullable=False, default=False)
    sweep_winner = Column(Integer, nullable=True)


class UmbriagoGame(GameColumns, Base):
    __tablename__ = "umbriago_games"
    team_a_name = Column(String, nullable=False, default="Team A")
    team_b_name = Column(String, nullable=False, default="Team B")
    team_a_player_1 = Column(String, nullable=False)
    team_a_player_2 = Column(String, nullable=False)
    team_b_player_1 = Column(String, nullable=False)
    team_b_player_2 = Column(String, nullable=False)
    stake_per_point = Column(Float, nullable=False, default=0.0)
    payout_mode = Column(String, nullable=False, default="difference")
    team_a_total_points = Column(Integer, nullable=False, default=0)
    team_b_total_points = Column(Integer, nullable=False, default=0)
    rolls_per_team = Column(Integer, nullable=False, default=1)
    roll_history = Column(_json(), nullable=False, default=list)
    winning_team = Column(String, nullable=True)  # "A" | "B" | "TIE"
    final_payout = Column(Float, nullable=True)


class UmbriagoHole(HoleColumns, Base):
    __tablename__ = "umbriago_holes"
    __games_table__ = "umbriago_games"
    team_a_player_1_score = Column(Integer, nullable=True)
    team_a_player_2_score = Column(Integer, nullable=True)
    team_b_player_1_score = Column(Integer, nullable=True)
    team_b_player_2_score = Column(Integer, nullable=True)
    team_low_winner = Column(String, nullable=True)
    individual_low_winner = Column(String, nullable=True)
    closest_to_pin_winner = Column(String, nullable=True)
    birdie_eagle_winner = Column(String, nullable=True)
    team_a_birdies = Column(Integer, nullable=False, default=0)
    team_b_birdies = Column(Integer, nullable=False, default=0)
    multiplier = Column(Integer, nullable=False, default=1)
    double_called_by = Column(String, nullable=True)
    double_back_called = Column(Boolean, nullable=False, default=False)
    is_umbriago = Column(Boolean, nullable=False, default=False)
    team_a_hole_points = Column(Integer, nullable=False, default=0)
    team_b_hole_points = Column(Integer, nullable=False, default=0)
    team_a_running_total = Column(Integer, nullable=False, default=0)
    team_b_running_total = Column(Integer, nullable=False, default=0)


class WolfGame(GameColumns, Base):
    __tablename__ = "wolf_games"
    players = Column(_json(), nullable=False, default=list)  # tee-off order
    lone_wolf_win_points = Column(Integer, nullable=False, default=4)
    lone_wolf_loss_points = Column(Integer, nullable=False, default=1)
    team_win_points = Column(Integer, nullable=False, default=1)
    wolf_position = Column(String, nullable=False, default="last")  # "first" | "last"
    double_enabled = Column(Boolean, nullable=False, default=False)
    player_points = Column(_json(), nullable=False, default=list)
    winner_player = Column(String, nullable=True)


class WolfHole(HoleColumns, Base):
    __tablename__ = "wolf_holes"
    __games_table__ = "wolf_games"
    wolf_player = Column(Integer, nullable=False)  # 1-based player number
    wolf_choice = Column(String, nullable=True)  # "lone" | "partner"
    partner_player = Column(Integer, nullable=True)
    multiplier = Column(Integer, nullable=False, default=1)
    scores = Column(_json(), nullable=False, default=list)
    hole_points = Column(_json(), nullable=False, default=list)
    running_totals = Column(_json(), nullable=False, default=list)
    winning_side = Column(String, nullable=True)  # "wolf" | "opponents" | "tie"


class ScrambleGame(GameColumns, Base):
    __tablename__ = "scramble_games"
    teams = Column(_json(), nullable=False, default=list)
    use_handicaps = Column(Boolean, nullable=False, default=False)
    scoring_type = Column(String, nullable=False, default="gross")
    min_drives_per_player = Column(Integer, nullable=True)
    winning_team = Column(String, nullable=True)


class ScrambleHole(HoleColumns, Base):
    __tablename__ = "scramble_holes"
    __games_table__ = "scramble_games"
    team_scores = Column(_json(), nullable=False, default=dict)
