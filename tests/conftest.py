"""Pytest configuration and shared fixtures"""

from collections.abc import Iterator
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from core.models import ForeignKeyFact, IndexFact, IndexField, RawColumn, TableMetadata


def _pk(*columns: str) -> IndexFact:
    return IndexFact(name="PRIMARY", unique=True, primary=True, fields=[IndexField(attribute=c) for c in columns])


def _unique(name: str, *columns: str) -> IndexFact:
    return IndexFact(name=name, unique=True, fields=[IndexField(attribute=c) for c in columns])


def _fk(column: str, table: str, key: str = "id") -> ForeignKeyFact:
    return ForeignKeyFact(column_name=column, referenced_table_name=table, referenced_column_name=key)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI config at a file that does not exist yet"""
    config_path = tmp_path / "schema-mapper.yaml"
    monkeypatch.setenv("SCHEMA_MAPPER_CONFIG", str(config_path))
    return config_path


@pytest.fixture
def blog_tables() -> dict[str, TableMetadata]:
    """Return raw metadata for a small blog schema"""
    return {
        "users": TableMetadata(
            raw_columns={
                "id": RawColumn(type="INT(11) UNSIGNED", nullable=False, primary_key=True, auto_increment=True),
                "email": RawColumn(type="VARCHAR(255)", nullable=False),
                "name": RawColumn(type="varchar(100)"),
                "created_at": RawColumn(type="DATETIME", nullable=False),
            },
            indexes=[_pk("id"), _unique("users_email_unique", "email")],
        ),
        "profiles": TableMetadata(
            raw_columns={
                "id": RawColumn(type="int", nullable=False, primary_key=True),
                "user_id": RawColumn(type="int", nullable=False),
                "bio": RawColumn(type="text"),
            },
            indexes=[_pk("id"), _unique("profiles_user_id_unique", "user_id")],
            foreign_keys=[_fk("user_id", "users")],
        ),
        "posts": TableMetadata(
            raw_columns={
                "id": RawColumn(type="int", nullable=False, primary_key=True),
                "user_id": RawColumn(type="int", nullable=False),
                "slug": RawColumn(type="varchar(120)", nullable=False),
                "title": RawColumn(type="varchar(200)", nullable=False),
                "status": RawColumn(type="enum('draft','published')", default="draft"),
            },
            indexes=[_pk("id"), _unique("posts_user_slug_unique", "user_id", "slug")],
            foreign_keys=[_fk("user_id", "users")],
        ),
        "tags": TableMetadata(
            raw_columns={
                "id": RawColumn(type="int", nullable=False, primary_key=True),
                "label": RawColumn(type="varchar(50)", nullable=False),
            },
            indexes=[_pk("id")],
        ),
        "user_tags": TableMetadata(
            raw_columns={
                "user_id": RawColumn(type="int", nullable=False, primary_key=True),
                "tag_id": RawColumn(type="int", nullable=False, primary_key=True),
            },
            indexes=[_pk("user_id", "tag_id")],
            foreign_keys=[_fk("user_id", "users"), _fk("tag_id", "tags")],
        ),
        "post_tags": TableMetadata(
            raw_columns={
                "id": RawColumn(type="int", nullable=False, primary_key=True),
                "post_id": RawColumn(type="int", nullable=False),
                "tag_id": RawColumn(type="int", nullable=False),
                "created_at": RawColumn(type="timestamp"),
                "updated_at": RawColumn(type="timestamp"),
            },
            indexes=[_pk("id")],
            foreign_keys=[_fk("post_id", "posts"), _fk("tag_id", "tags")],
        ),
        "audit_log": TableMetadata(
            raw_columns={
                "id": RawColumn(type="bigint", nullable=False, primary_key=True),
                "archived_user_id": RawColumn(type="int"),
            },
            indexes=[_pk("id")],
            foreign_keys=[_fk("archived_user_id", "archived_users")],
        ),
    }


@pytest.fixture
def sqlite_db(tmp_path: Path) -> Iterator[str]:
    """Create a temporary SQLite database with a blog schema"""
    db_path = tmp_path / "blog.db"
    connection_string = f"sqlite:///{db_path}"

    engine = create_engine(connection_string)
    with engine.connect() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE users (
                    id INTEGER PRIMARY KEY,
                    email VARCHAR(255) NOT NULL,
                    name VARCHAR(100),
                    created_at DATETIME NOT NULL
                )
                """
            )
        )
        conn.execute(text("CREATE UNIQUE INDEX ix_users_email ON users (email)"))
        conn.execute(
            text(
                """
                CREATE TABLE profiles (
                    id INTEGER PRIMARY KEY,
                    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    bio TEXT
                )
                """
            )
        )
        conn.execute(text("CREATE UNIQUE INDEX ix_profiles_user_id ON profiles (user_id)"))
        conn.execute(
            text(
                """
                CREATE TABLE posts (
                    id INTEGER PRIMARY KEY,
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    slug VARCHAR(120) NOT NULL,
                    title VARCHAR(200) NOT NULL,
                    price DECIMAL(10, 2)
                )
                """
            )
        )
        conn.execute(text("CREATE UNIQUE INDEX ix_posts_user_slug ON posts (user_id, slug)"))
        conn.execute(text("CREATE TABLE tags (id INTEGER PRIMARY KEY, label VARCHAR(50) NOT NULL)"))
        conn.execute(
            text(
                """
                CREATE TABLE user_tags (
                    user_id INTEGER NOT NULL REFERENCES users(id),
                    tag_id INTEGER NOT NULL REFERENCES tags(id),
                    PRIMARY KEY (user_id, tag_id)
                )
                """
            )
        )
        conn.execute(text("CREATE TABLE migrations (id INTEGER PRIMARY KEY, name TEXT)"))
        conn.commit()
    engine.dispose()

    yield connection_string

    db_path.unlink(missing_ok=True)
