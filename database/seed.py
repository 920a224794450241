"""
Startup seeding: default staff accounts and question-bank reference data.

Both steps are idempotent. Accounts are created only when their username is
missing; reference data only when the technologies table is empty.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, settings as default_settings
from core.security import hash_password_async
from database.models.questions import ExperienceLevel, Question, QuestionType, Technology
from database.models.users import User, UserRole

logger = logging.getLogger(__name__)


EXPERIENCE_LEVELS = [
    ("beginner", "Entry-level knowledge, 0-2 years of experience"),
    ("intermediate", "Working knowledge, 2-5 years of experience"),
    ("advanced", "Expert knowledge, 5+ years of experience"),
]

TECHNOLOGIES = [
    ("React", "A JavaScript library for building user interfaces"),
    ("Angular", "A platform for building mobile and desktop web applications"),
    ("Vue", "A progressive framework for building user interfaces"),
    ("Node.js", "A JavaScript runtime built on Chrome's V8 JavaScript engine"),
    ("Python", "A programming language that lets you work quickly and integrate systems effectively"),
    (".NET", "A free, cross-platform, open source developer platform"),
]

QUESTION_TYPES = [
    ("algorithms", "Algorithm design and analysis"),
    ("database", "Database design and query optimization"),
    ("framework", "Framework-specific knowledge and concepts"),
    ("architecture", "Software architecture and design patterns"),
]

# (title, content, answer, technology, level, type, technical, problem solving, communication)
SAMPLE_QUESTIONS = [
    (
        "Explain React's Virtual DOM",
        "What is the Virtual DOM in React and how does it improve performance?",
        "An in-memory copy of the DOM. React diffs it against the previous "
        "render and applies only the changed parts (reconciliation).",
        "React", "intermediate", "framework", True, False, True,
    ),
    (
        "Compare Angular and React",
        "What are the main differences between Angular and React? When would "
        "you choose one over the other?",
        "Angular is a full framework with routing, forms and DI built in; React "
        "is a view library that leaves those choices to the team.",
        "Angular", "advanced", "framework", True, True, True,
    ),
    (
        "Explain Node.js Event Loop",
        "How does the Node.js event loop work? Why is it important for "
        "server-side applications?",
        "A single thread runs callbacks from an event queue while I/O is "
        "offloaded to the system, so many connections are served without threads.",
        "Node.js", "advanced", "architecture", True, True, False,
    ),
    (
        "Find duplicates in a list",
        "Given a list of integers, return the values that appear more than once.",
        "Track seen values in a set and collect repeats; O(n) time, O(n) space.",
        "Python", "beginner", "algorithms", True, True, False,
    ),
]


def default_accounts(config: Settings):
    return [
        ("admin", config.default_admin_password, UserRole.ADMIN, "Administrator"),
        ("hr_admin", config.default_hr_password, UserRole.HR, "HR Manager"),
        ("tech_interviewer", config.default_interviewer_password, UserRole.TECHNICAL_INTERVIEWER, "Technical Interviewer"),
        ("director", config.default_director_password, UserRole.DIRECTOR, "Director"),
    ]


async def seed_default_users(db: AsyncSession, config: Settings = default_settings) -> int:
    """Create any missing default account. Returns how many were created."""
    created = 0
    for username, password, role, name in default_accounts(config):
        existing = await db.execute(select(User.id).where(User.username == username))
        if existing.scalar_one_or_none() is not None:
            continue
        db.add(User(
            username=username,
            password=await hash_password_async(password),
            role=role,
            name=name,
            active=True,
        ))
        created += 1

    await db.commit()
    if created:
        logger.info(f"Seeded {created} default user account(s)")
    return created


async def seed_reference_data(db: AsyncSession) -> bool:
    """Insert lookups and sample questions into an empty bank."""
    count = (await db.execute(select(func.count(Technology.id)))).scalar_one()
    if count:
        logger.info("Reference data already present")
        return False

    levels = {name: ExperienceLevel(name=name, description=desc) for name, desc in EXPERIENCE_LEVELS}
    technologies = {name: Technology(name=name, description=desc) for name, desc in TECHNOLOGIES}
    types = {name: QuestionType(name=name, description=desc) for name, desc in QUESTION_TYPES}
    db.add_all([*levels.values(), *technologies.values(), *types.values()])
    await db.flush()

    for title, content, answer, tech, level, qtype, technical, problem_solving, communication in SAMPLE_QUESTIONS:
        db.add(Question(
            title=title,
            content=content,
            answer=answer,
            technology_id=technologies[tech].id,
            experience_level_id=levels[level].id,
            question_type_id=types[qtype].id,
            evaluates_technical=technical,
            evaluates_problem_solving=problem_solving,
            evaluates_communication=communication,
            is_custom=False,
        ))

    await db.commit()
    logger.info("Seeded question bank reference data")
    return True


async def run_seeders(db: AsyncSession, config: Settings = default_settings) -> None:
    if config.seed_default_users:
        await seed_default_users(db, config)
    if config.seed_reference_data:
        await seed_reference_data(db)
