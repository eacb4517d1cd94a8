"""
Scalable database seeding with configurable quantities.

Usage:
    # Default (small dataset for quick dev)
    await seed_if_empty()

    # Large dataset
    await seed_if_empty(SeedConfig(user_count=2000))
"""
import random
from dataclasses import dataclass
from datetime import timedelta

import structlog
from sqlalchemy import select

from inkwell.core.database import AsyncSessionLocal
from inkwell.models import (
    Comment,
    Follow,
    Publication,
    PublicationMembership,
    PublicationRole,
    Star,
    Story,
    StoryAudience,
    Tag,
    User,
    utcnow,
)

logger = structlog.get_logger(__name__)


@dataclass
class SeedConfig:
    """Configuration for scalable seeding."""
    user_count: int = 8  # Default small for quick dev
    publication_count: int = 3
    stories_per_user: tuple[int, int] = (1, 4)  # min, max stories per user
    stars_per_story: tuple[int, int] = (0, 6)
    comments_per_story: tuple[int, int] = (0, 3)
    follows_per_user: tuple[int, int] = (0, 4)
    draft_ratio: float = 0.15
    batch_size: int = 1000  # Insert batch size for large datasets


# =============================================================================
# Seed Sample Data (templates for random generation)
# =============================================================================

FIRST_NAMES_SAMPLE = [
    "Ada", "Grace", "Alan", "Edsger", "Barbara", "Donald", "Margaret", "Dennis",
    "Frances", "Ken", "Radia", "Leslie", "Hedy", "John", "Katherine", "Niklaus",
]

LAST_NAMES_SAMPLE = [
    "Lovelace", "Hopper", "Turing", "Dijkstra", "Liskov", "Knuth", "Hamilton",
    "Ritchie", "Allen", "Thompson", "Perlman", "Lamport", "Lamarr", "Backus",
]

PUBLICATIONS_SAMPLE = [
    {"name": "the-daily-byte", "display_name": "The Daily Byte", "description": "Short reads on software"},
    {"name": "slow-science", "display_name": "Slow Science", "description": "Long-form research writing"},
    {"name": "field-notes", "display_name": "Field Notes", "description": "Stories from the road"},
    {"name": "open-kitchen", "display_name": "Open Kitchen", "description": "Recipes and the people behind them"},
    {"name": "night-shift", "display_name": "Night Shift", "description": "Essays written after midnight"},
]

TAGS_SAMPLE = [
    "programming", "python", "databases", "design", "science", "travel",
    "food", "culture", "startups", "writing", "music", "history",
]

STORY_TITLES_SAMPLE = [
    "What I Learned Rewriting Our Billing System",
    "A Field Guide to Indexes",
    "Notes From a Month Without Email",
    "The Case for Boring Technology",
    "Why Our Sourdough Failed Three Times",
    "Reading Old Papers for Fun",
    "How We Cut Our Build Time in Half",
    "Walking the Length of the River",
    "On Naming Things",
    "Everything I Know About Caching",
    "The Night the Pager Went Off",
    "Learning to Draw at Thirty",
]

STORY_PARAGRAPHS_SAMPLE = [
    "It started, as these things usually do, with a small change that nobody expected to matter.",
    "The first version worked well enough that we stopped looking at it for two years.",
    "Looking back, the warning signs were all there in the logs.",
    "There is a particular kind of quiet that settles over a team after an outage.",
    "Most of the advice I had read turned out to be right, just not for the reasons given.",
    "The numbers told one story and the people told another.",
    "By the third attempt I had stopped following the recipe and started paying attention.",
    "None of this is new; it just keeps needing to be rediscovered.",
]

COMMENTS_SAMPLE = [
    "Great read, thanks for sharing.",
    "We ran into exactly the same problem last year.",
    "I'm not sure I agree with the conclusion, but the analysis is solid.",
    "Bookmarked for later.",
    "Could you expand on the second part?",
    "This is the clearest explanation of this I've seen.",
]


# =============================================================================
# Seed Functions
# =============================================================================

def generate_users(count: int) -> list[dict]:
    """Generate random users with unique usernames and emails."""
    users = []
    for i in range(count):
        first_name = random.choice(FIRST_NAMES_SAMPLE)
        last_name = random.choice(LAST_NAMES_SAMPLE)
        username = f"{first_name}_{last_name}_{i}".lower()
        users.append({
            "username": username,
            "email": f"{username}@example.com",
            "first_name": first_name,
            "last_name": last_name,
            "bio": random.choice([None, f"Writes about {random.choice(TAGS_SAMPLE)}."]),
        })
    return users


def generate_stories(author_ids: list[int], tags: list[Tag], config: SeedConfig) -> list[dict]:
    """Generate random stories, mostly published in the past, some drafts."""
    now = utcnow()
    stories = []
    for author_id in author_ids:
        for _ in range(random.randint(*config.stories_per_user)):
            paragraphs = random.sample(STORY_PARAGRAPHS_SAMPLE, random.randint(2, 5))
            is_draft = random.random() < config.draft_ratio
            stories.append({
                "title": random.choice(STORY_TITLES_SAMPLE),
                "content": "\n\n".join(paragraphs),
                "summary": paragraphs[0],
                "author_id": author_id,
                "audience": StoryAudience.ALL,
                "published_at": None if is_draft else now - timedelta(days=random.randint(1, 365)),
                "tags": random.sample(tags, random.randint(0, 3)),
            })
    return stories


def generate_stars(story_ids: list[int], user_ids: list[int], config: SeedConfig) -> list[dict]:
    stars = []
    for story_id in story_ids:
        count = min(random.randint(*config.stars_per_story), len(user_ids))
        for user_id in random.sample(user_ids, count):
            stars.append({"user_id": user_id, "story_id": story_id})
    return stars


def generate_comments(story_ids: list[int], user_ids: list[int], config: SeedConfig) -> list[dict]:
    comments = []
    for story_id in story_ids:
        for _ in range(random.randint(*config.comments_per_story)):
            comments.append({
                "story_id": story_id,
                "author_id": random.choice(user_ids),
                "body": random.choice(COMMENTS_SAMPLE),
            })
    return comments


def generate_follows(user_ids: list[int], config: SeedConfig) -> list[dict]:
    follows = []
    for follower_id in user_ids:
        others = [user_id for user_id in user_ids if user_id != follower_id]
        count = min(random.randint(*config.follows_per_user), len(others))
        for user_id in random.sample(others, count):
            follows.append({"follower_id": follower_id, "user_id": user_id})
    return follows


async def _add_in_batches(session, model, rows: list[dict], batch_size: int) -> list:
    added = []
    for i in range(0, len(rows), batch_size):
        batch = [model(**row) for row in rows[i:i + batch_size]]
        session.add_all(batch)
        await session.flush()
        added.extend(batch)
    return added


async def seed_if_empty(config: SeedConfig | None = None) -> bool:
    """
    Seed database with data if empty.

    Args:
        config: Seeding configuration. Defaults to small dataset.

    Returns:
        True if seeding occurred, False if data already exists.
    """
    if config is None:
        config = SeedConfig()

    async with AsyncSessionLocal() as session:
        # Check if data exists
        result = await session.execute(select(User.id).limit(1))
        if result.scalar():
            return False  # Already seeded

        users = await _add_in_batches(session, User, generate_users(config.user_count), config.batch_size)
        user_ids = [u.id for u in users]

        tags = [Tag(title=title) for title in TAGS_SAMPLE]
        session.add_all(tags)

        # Each publication is owned by a random user and has a few writers
        publications = [Publication(**p) for p in PUBLICATIONS_SAMPLE[:config.publication_count]]
        session.add_all(publications)
        await session.flush()
        for publication in publications:
            members = random.sample(user_ids, min(3, len(user_ids)))
            for i, member_id in enumerate(members):
                role = PublicationRole.OWNER if i == 0 else PublicationRole.WRITER
                session.add(
                    PublicationMembership(publication_id=publication.id, member_id=member_id, role=role)
                )
        await session.flush()

        stories = await _add_in_batches(
            session, Story, generate_stories(user_ids, tags, config), config.batch_size
        )
        story_ids = [s.id for s in stories]

        star_data = generate_stars(story_ids, user_ids, config)
        await _add_in_batches(session, Star, star_data, config.batch_size)
        comment_data = generate_comments(story_ids, user_ids, config)
        await _add_in_batches(session, Comment, comment_data, config.batch_size)
        follow_data = generate_follows(user_ids, config)
        await _add_in_batches(session, Follow, follow_data, config.batch_size)

        await session.commit()

        logger.info(
            "database_seeded",
            users=len(users),
            publications=len(publications),
            stories=len(stories),
            stars=len(star_data),
            comments=len(comment_data),
            follows=len(follow_data),
        )
        return True


# =============================================================================
# CLI for manual seeding with custom config
# =============================================================================

if __name__ == "__main__":
    import asyncio
    import argparse
    import time

    from inkwell.core.database import engine
    from inkwell.core.logging import configure_logging
    from inkwell.models import Base

    parser = argparse.ArgumentParser(description="Seed database with sample data")
    parser.add_argument("--users", type=int, default=1000, help="Number of users to generate")
    parser.add_argument("--batch-size", type=int, default=1000, help="Batch size for inserts")
    cli_args, _ = parser.parse_known_args()

    config = SeedConfig(user_count=cli_args.users, batch_size=cli_args.batch_size)

    async def main():
        configure_logging()
        # Create tables first
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        logger.info("seeding_started", users=config.user_count)
        start = time.perf_counter()
        result = await seed_if_empty(config)
        elapsed = time.perf_counter() - start

        if result:
            logger.info("seeding_completed", seconds=round(elapsed, 2))
        else:
            logger.info("seeding_skipped", reason="database already seeded")

        await engine.dispose()

    asyncio.run(main())
