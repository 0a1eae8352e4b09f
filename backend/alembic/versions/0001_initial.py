from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

JSON = sa.JSON().with_variant(JSONB, "postgresql")

FORMATS = (
    "match_play",
    "best_ball",
    "skins",
    "copenhagen",
    "umbriago",
    "wolf",
    "scramble",
)


def _game_columns():
    return [
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("course_id", sa.String(), sa.ForeignKey("course.id"), nullable=True),
        sa.Column("course_name", sa.String(), nullable=True),
        sa.Column("holes_played", sa.Integer(), nullable=False, server_default="18"),
        sa.Column("date_played", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("is_finished", sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def _hole_columns(games_table):
    return [
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("game_id", sa.String(), sa.ForeignKey(f"{games_table}.id"), nullable=False),
        sa.Column("hole_number", sa.Integer(), nullable=False),
        sa.Column("par", sa.Integer(), nullable=False, server_default="4"),
        sa.Column("stroke_index", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def _create_hole_table(name, games_table, *columns):
    op.create_table(
        name,
        *_hole_columns(games_table),
        *columns,
        sa.UniqueConstraint("game_id", "hole_number", name=f"uq_{name}_game_id_hole_number"),
    )
    op.create_index(f"ix_{name}_game_id", name, ["game_id"])


def _int(name, default=None, nullable=None):
    if default is None:
        return sa.Column(name, sa.Integer(), nullable=True if nullable is None else nullable)
    return sa.Column(name, sa.Integer(), nullable=False, server_default=str(default))


def _bool(name):
    return sa.Column(name, sa.Boolean(), nullable=False, server_default=sa.false())


def upgrade():
    op.create_table(
        "course",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("name", sa.String(), nullable=False),
    )
    op.create_table(
        "course_hole",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column(
            "course_id",
            sa.String(),
            sa.ForeignKey("course.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("hole_number", sa.Integer(), nullable=False),
        sa.Column("par", sa.Integer(), nullable=False, server_default="4"),
        sa.Column("stroke_index", sa.Integer(), nullable=True),
        *[
            sa.Column(f"{tee}_distance", sa.Integer(), nullable=True)
            for tee in ("white", "yellow", "blue", "red", "black", "gold", "orange", "silver")
        ],
        sa.UniqueConstraint(
            "course_id", "hole_number", name="uq_course_hole_course_id_hole_number"
        ),
    )

    # match play
    op.create_table(
        "match_play_games",
        *_game_columns(),
        sa.Column("player_1", sa.String(), nullable=False),
        sa.Column("player_1_handicap", sa.Float(), nullable=True),
        sa.Column("player_1_tee", sa.String(), nullable=True),
        sa.Column("player_2", sa.String(), nullable=False),
        sa.Column("player_2_handicap", sa.Float(), nullable=True),
        sa.Column("player_2_tee", sa.String(), nullable=True),
        _bool("use_handicaps"),
        _int("match_status", 0),
        _int("holes_remaining"),
        sa.Column("winner_player", sa.String(), nullable=True),
        sa.Column("final_result", sa.String(), nullable=True),
    )
    _create_hole_table(
        "match_play_holes",
        "match_play_games",
        _int("player_1_gross_score"),
        _int("player_1_net_score"),
        _int("player_2_gross_score"),
        _int("player_2_net_score"),
        _bool("player_1_mulligan"),
        _bool("player_2_mulligan"),
        _int("hole_result", 0),
        _int("match_status_after", 0),
        _int("holes_remaining_after", 0),
    )

    # best ball
    op.create_table(
        "best_ball_games",
        *_game_columns(),
        sa.Column("team_a_name", sa.String(), nullable=False, server_default="Team A"),
        sa.Column("team_a_players", JSON, nullable=False),
        sa.Column("team_b_name", sa.String(), nullable=False, server_default="Team B"),
        sa.Column("team_b_players", JSON, nullable=False),
        _bool("use_handicaps"),
        _int("team_a_total", 0),
        _int("team_b_total", 0),
        _int("match_status", 0),
        _int("holes_remaining"),
        sa.Column("winner_team", sa.String(), nullable=True),
        sa.Column("final_result", sa.String(), nullable=True),
    )
    _create_hole_table(
        "best_ball_holes",
        "best_ball_games",
        sa.Column("team_a_scores", JSON, nullable=False),
        sa.Column("team_b_scores", JSON, nullable=False),
        _int("team_a_best_gross"),
        _int("team_a_best_net"),
        sa.Column("team_a_counting_player", sa.String(), nullable=True),
        _int("team_b_best_gross"),
        _int("team_b_best_net"),
        sa.Column("team_b_counting_player", sa.String(), nullable=True),
        _int("team_a_running_total", 0),
        _int("team_b_running_total", 0),
        _int("hole_result", 0),
        _int("match_status_after", 0),
        _int("holes_remaining_after", 0),
    )

    # skins
    op.create_table(
        "skins_games",
        *_game_columns(),
        sa.Column("players", JSON, nullable=False),
        sa.Column("skin_value", sa.Float(), nullable=False, server_default="1"),
        sa.Column("carryover_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        _bool("use_handicaps"),
        sa.Column("handicap_mode", sa.String(), nullable=False, server_default="net"),
        sa.Column("winner_player", sa.String(), nullable=True),
    )
    _create_hole_table(
        "skins_holes",
        "skins_games",
        sa.Column("player_scores", JSON, nullable=False),
        _int("skins_available", 1),
        sa.Column("winner_player", sa.String(), nullable=True),
        _bool("is_carryover"),
    )

    # copenhagen
    op.create_table(
        "copenhagen_games",
        *_game_columns(),
        *[sa.Column(f"player_{n}", sa.String(), nullable=False) for n in (1, 2, 3)],
        *[sa.Column(f"player_{n}_handicap", sa.Float(), nullable=True) for n in (1, 2, 3)],
        _bool("use_handicaps"),
        *[_int(f"player_{n}_total_points", 0) for n in (1, 2, 3)],
        sa.Column("winner_player", sa.String(), nullable=True),
    )
    _create_hole_table(
        "copenhagen_holes",
        "copenhagen_games",
        *[_int(f"player_{n}_gross_score") for n in (1, 2, 3)],
        *[_int(f"player_{n}_net_score") for n in (1, 2, 3)],
        *[_int(f"player_{n}_hole_points", 0) for n in (1, 2, 3)],
        *[_int(f"player_{n}_running_total", 0) for n in (1, 2, 3)],
        _bool("is_sweep"),
        _int("sweep_winner"),
    )

    # umbriago
    op.create_table(
        "umbriago_games",
        *_game_columns(),
        sa.Column("team_a_name", sa.String(), nullable=False, server_default="Team A"),
        sa.Column("team_b_name", sa.String(), nullable=False, server_default="Team B"),
        *[
            sa.Column(f"team_{team}_player_{n}", sa.String(), nullable=False)
            for team in ("a", "b")
            for n in (1, 2)
        ],
        sa.Column("stake_per_point", sa.Float(), nullable=False, server_default="0"),
        sa.Column("payout_mode", sa.String(), nullable=False, server_default="difference"),
        _int("team_a_total_points", 0),
        _int("team_b_total_points", 0),
        _int("rolls_per_team", 1),
        sa.Column("roll_history", JSON, nullable=False),
        sa.Column("winning_team", sa.String(), nullable=True),
        sa.Column("final_payout", sa.Float(), nullable=True),
    )
    _create_hole_table(
        "umbriago_holes",
        "umbriago_games",
        *[_int(f"team_{team}_player_{n}_score") for team in ("a", "b") for n in (1, 2)],
        sa.Column("team_low_winner", sa.String(), nullable=True),
        sa.Column("individual_low_winner", sa.String(), nullable=True),
        sa.Column("closest_to_pin_winner", sa.String(), nullable=True),
        sa.Column("birdie_eagle_winner", sa.String(), nullable=True),
        _int("team_a_birdies", 0),
        _int("team_b_birdies", 0),
        _int("multiplier", 1),
        sa.Column("double_called_by", sa.String(), nullable=True),
        _bool("double_back_called"),
        _bool("is_umbriago"),
        _int("team_a_hole_points", 0),
        _int("team_b_hole_points", 0),
        _int("team_a_running_total", 0),
        _int("team_b_running_total", 0),
    )

    # wolf
    op.create_table(
        "wolf_games",
        *_game_columns(),
        sa.Column("players", JSON, nullable=False),
        _int("lone_wolf_win_points", 4),
        _int("lone_wolf_loss_points", 1),
        _int("team_win_points", 1),
        sa.Column("wolf_position", sa.String(), nullable=False, server_default="last"),
        _bool("double_enabled"),
        sa.Column("player_points", JSON, nullable=False),
        sa.Column("winner_player", sa.String(), nullable=True),
    )
    _create_hole_table(
        "wolf_holes",
        "wolf_games",
        _int("wolf_player", nullable=False),
        sa.Column("wolf_choice", sa.String(), nullable=True),
        _int("partner_player"),
        _int("multiplier", 1),
        sa.Column("scores", JSON, nullable=False),
        sa.Column("hole_points", JSON, nullable=False),
        sa.Column("running_totals", JSON, nullable=False),
        sa.Column("winning_side", sa.String(), nullable=True),
    )

    # scramble
    op.create_table(
        "scramble_games",
        *_game_columns(),
        sa.Column("teams", JSON, nullable=False),
        _bool("use_handicaps"),
        sa.Column("scoring_type", sa.String(), nullable=False, server_default="gross"),
        _int("min_drives_per_player"),
        sa.Column("winning_team", sa.String(), nullable=True),
    )
    _create_hole_table(
        "scramble_holes",
        "scramble_games",
        sa.Column("team_scores", JSON, nullable=False),
    )


def downgrade():
    for fmt in reversed(FORMATS):
        op.drop_index(f"ix_{fmt}_holes_game_id", table_name=f"{fmt}_holes")
        op.drop_table(f"{fmt}_holes")
        op.drop_table(f"{fmt}_games")
    op.drop_table("course_hole")
    op.drop_table("course")
