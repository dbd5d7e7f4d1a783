"""Database engine setup and initialization."""

import logging
from pathlib import Path

import aiosqlite

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

# Studio setting keys
MAX_SESSIONS_PER_WEEK = "max_sessions_per_week"
MAX_MEMBER_SESSIONS_PER_WEEK = "max_member_sessions_per_week"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    settings = get_settings()
    if data_dir is None:
        data_dir = settings.data_dir
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / settings.db_filename


async def init_db(db_path: Path | None = None, settings: Settings | None = None) -> None:
    """Initialize the database schema and default studio settings."""
    if db_path is None:
        db_path = get_db_path()
    if settings is None:
        settings = get_settings()

    async with aiosqlite.connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS members (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                phone TEXT,
                status TEXT NOT NULL DEFAULT 'active',
                join_date TEXT,
                notes TEXT DEFAULT '',
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS member_subscriptions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                member_id INTEGER NOT NULL,
                plan_name_snapshot TEXT NOT NULL,
                total_sessions_snapshot INTEGER NOT NULL,
                total_amount_snapshot REAL NOT NULL,
                duration_days_snapshot INTEGER NOT NULL,
                start_date TEXT NOT NULL,
                end_date TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'active',
                used_sessions INTEGER NOT NULL DEFAULT 0,
                paid_amount REAL NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (member_id) REFERENCES members(id)
            )
        """)

        # Payment ledger: refunds are negative rows linked by refunded_payment_id
        await db.execute("""
            CREATE TABLE IF NOT EXISTS subscription_payments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                subscription_id INTEGER NOT NULL,
                member_id INTEGER NOT NULL,
                amount REAL NOT NULL,
                payment_method TEXT NOT NULL,
                payment_status TEXT NOT NULL DEFAULT 'completed',
                payment_date TEXT NOT NULL,
                receipt_number TEXT UNIQUE,
                reference_number TEXT,
                notes TEXT,
                refund_amount REAL NOT NULL DEFAULT 0,
                refund_date TEXT,
                refund_reason TEXT,
                is_refund INTEGER NOT NULL DEFAULT 0,
                refunded_payment_id INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (subscription_id) REFERENCES member_subscriptions(id),
                FOREIGN KEY (member_id) REFERENCES members(id),
                FOREIGN KEY (refunded_payment_id) REFERENCES subscription_payments(id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS trainers (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                trainer_code TEXT NOT NULL UNIQUE,
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                email TEXT NOT NULL,
                phone TEXT,
                date_of_birth TEXT,
                hourly_rate REAL,
                commission_rate REAL NOT NULL DEFAULT 0.15,
                years_experience INTEGER,
                certifications TEXT DEFAULT '[]',
                specializations TEXT DEFAULT '[]',
                languages TEXT DEFAULT '["English"]',
                max_clients_per_session INTEGER NOT NULL DEFAULT 1,
                is_accepting_new_clients INTEGER NOT NULL DEFAULT 1,
                emergency_contact TEXT,
                insurance_policy_number TEXT,
                background_check_date TEXT,
                cpr_certification_expires TEXT,
                notes TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS training_sessions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                trainer_id INTEGER,
                member_id INTEGER,
                scheduled_start TEXT NOT NULL,
                scheduled_end TEXT NOT NULL,
                session_type TEXT NOT NULL DEFAULT 'member',
                status TEXT NOT NULL DEFAULT 'scheduled',
                location TEXT,
                notes TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (trainer_id) REFERENCES trainers(id),
                FOREIGN KEY (member_id) REFERENCES members(id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS studio_settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_subscriptions_member
            ON member_subscriptions(member_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_payments_subscription
            ON subscription_payments(subscription_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_payments_member
            ON subscription_payments(member_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_payments_refunded
            ON subscription_payments(refunded_payment_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_sessions_start
            ON training_sessions(scheduled_start)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_sessions_member
            ON training_sessions(member_id)
        """)

        await db.commit()

        # Default limits; existing values are left alone
        for key, value in (
            (MAX_SESSIONS_PER_WEEK, settings.studio_weekly_limit),
            (MAX_MEMBER_SESSIONS_PER_WEEK, settings.member_weekly_limit),
        ):
            await db.execute(
                "INSERT OR IGNORE INTO studio_settings (key, value) VALUES (?, ?)",
                (key, str(value)),
            )
        await db.commit()

    logger.info("Database initialized at %s", db_path)
