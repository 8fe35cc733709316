"""Seed a development database with users, articles and comments."""
import argparse
import asyncio
import logging
import random
import time

from blog.database import Base, async_session, engine
from blog.models import Article, Comment, User

logger = logging.getLogger("blog.seed")

TOPICS = ["python", "sqlalchemy", "fastapi", "postgresql", "redis", "testing",
          "alembic", "asyncio", "docker", "deployment"]


async def seed(users: int, articles: int, max_comments: int, reset: bool) -> None:
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        authors = [
            User(username=f"user_{i:03d}", email=f"user_{i:03d}@example.com")
            for i in range(users)
        ]
        session.add_all(authors)
        await session.flush()
        logger.info("Created %d users", len(authors))

        total_comments = 0
        for i in range(articles):
            topic = random.choice(TOPICS)
            article = Article(
                title=f"Notes on {topic} #{i}",
                body=f"Everything I learned about {topic} this week. " * 10,
                # Roughly one in ten articles predates the user reference.
                user_id=random.choice(authors).id if random.random() > 0.1 else None,
            )
            session.add(article)
            await session.flush()

            for _ in range(random.randint(0, max_comments)):
                session.add(Comment(
                    article_id=article.id,
                    commenter=random.choice(authors).username,
                    body=f"Thanks for writing about {topic}!",
                ))
                total_comments += 1

        await session.commit()

    logger.info(
        "Seeded %d users, %d articles, %d comments in %.1fs",
        users, articles, total_comments, time.perf_counter() - start,
    )


def main():
    parser = argparse.ArgumentParser(description="Seed the blog database")
    parser.add_argument("--users", type=int, default=10)
    parser.add_argument("--articles", type=int, default=50)
    parser.add_argument("--max-comments", type=int, default=4)
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(seed(args.users, args.articles, args.max_comments, args.reset))


if __name__ == "__main__":
    main()
