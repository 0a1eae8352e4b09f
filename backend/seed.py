import asyncio
import os
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from scorecard.models import Course, CourseHole, MatchPlayGame, SkinsGame

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL environment variable is required")
if DATABASE_URL.startswith("postgresql://"):
    DATABASE_URL = DATABASE_URL.replace("postgresql://", "postgresql+asyncpg://", 1)

engine = create_async_engine(DATABASE_URL, echo=False, pool_pre_ping=True)
Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

COURSE_ID = "demo-links"

# (par, stroke index, white yards) for holes 1..18
DEMO_HOLES = [
    (4, 7, 385), (5, 13, 512), (3, 17, 164), (4, 1, 432), (4, 11, 371),
    (3, 15, 188), (5, 5, 540), (4, 9, 402), (4, 3, 418),
    (4, 8, 396), (3, 18, 152), (5, 12, 505), (4, 2, 441), (4, 14, 360),
    (3, 16, 175), (5, 6, 528), (4, 10, 389), (4, 4, 425),
]


async def main():
    async with Session() as s:
        if await s.get(Course, COURSE_ID) is None:
            s.add(Course(id=COURSE_ID, name="Demo Links"))
            await s.flush()

        have = {
            h.hole_number
            for h in (
                await s.execute(select(CourseHole).where(CourseHole.course_id == COURSE_ID))
            ).scalars().all()
        }
        for number, (par, stroke_index, white) in enumerate(DEMO_HOLES, start=1):
            if number not in have:
                s.add(
                    CourseHole(
                        id=f"{COURSE_ID}-{number}",
                        course_id=COURSE_ID,
                        hole_number=number,
                        par=par,
                        stroke_index=stroke_index,
                        white_distance=white,
                        yellow_distance=white - 20,
                        red_distance=white - 60,
                    )
                )
        await s.commit()

        if await s.get(MatchPlayGame, "demo-match") is None:
            s.add(
                MatchPlayGame(
                    id="demo-match",
                    course_id=COURSE_ID,
                    course_name="Demo Links",
                    holes_played=18,
                    player_1="Alex",
                    player_2="Sam",
                    holes_remaining=18,
                )
            )
        if await s.get(SkinsGame, "demo-skins") is None:
            s.add(
                SkinsGame(
                    id="demo-skins",
                    course_id=COURSE_ID,
                    course_name="Demo Links",
                    holes_played=9,
                    players=[
                        {"name": "Alex", "handicap": 8},
                        {"name": "Sam", "handicap": 14},
                        {"name": "Jo", "handicap": 3},
                    ],
                    skin_value=2.0,
                )
            )
        await s.commit()
    print("Seed complete.")


if __name__ == "__main__":
    asyncio.run(main())
