"""Tests for database initialization."""
import pytest
from sqlalchemy import inspect, create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker
import os
import tempfile

import user_platform.user_platform.user_service.db as db_module
from user_platform.user_platform.user_service.db import init_db
from user_platform.user_platform.user_service.models import User


@pytest.fixture
def temp_engine(monkeypatch):
    """Point init_db at a fresh temporary SQLite file."""
    with tempfile.NamedTemporaryFile(delete=False, suffix='.db') as tmp:
        tmp_db_path = tmp.name

    test_engine = create_engine(f"sqlite:///{tmp_db_path}", connect_args={"check_same_thread": False})
    monkeypatch.setattr(db_module, "engine", test_engine)
    yield test_engine

    test_engine.dispose()
    if os.path.exists(tmp_db_path):
        os.unlink(tmp_db_path)


def test_init_db_creates_tables(temp_engine):
    """Test that init_db creates the users and access_tokens tables."""
    init_db()

    tables = inspect(temp_engine).get_table_names()
    assert 'users' in tables, "users table should be created"
    assert 'access_tokens' in tables, "access_tokens table should be created"


def test_users_table_columns(temp_engine):
    init_db()

    columns = {col['name']: col for col in inspect(temp_engine).get_columns('users')}
    for col_name in ['id', 'name', 'email', 'password', 'created_at', 'updated_at']:
        assert col_name in columns, f"Column {col_name} should exist in users table"

    assert columns['email']['nullable'] is False, "email should not be nullable"
    assert columns['password']['nullable'] is False, "password should not be nullable"


def test_access_tokens_table_columns(temp_engine):
    init_db()

    columns = {col['name']: col for col in inspect(temp_engine).get_columns('access_tokens')}
    for col_name in ['id', 'token', 'user_id', 'name', 'created_at', 'expires_at', 'revoked']:
        assert col_name in columns, f"Column {col_name} should exist in access_tokens table"

    assert columns['user_id']['nullable'] is False, "user_id should not be nullable"
    assert columns['expires_at']['nullable'] is True, "expires_at should be nullable"
    assert columns['expires_at']['type'].__class__.__name__ == 'DATETIME', "expires_at should be datetime"


def test_access_tokens_foreign_key(temp_engine):
    """Test that access_tokens has a foreign key to the users table."""
    init_db()

    foreign_keys = inspect(temp_engine).get_foreign_keys('access_tokens')
    user_fk = next((fk for fk in foreign_keys if fk['referred_table'] == 'users'), None)
    assert user_fk is not None, "Foreign key to users table should exist"
    assert 'user_id' in user_fk['constrained_columns'], "Foreign key should be on user_id column"


def test_unique_indexes(temp_engine):
    init_db()
    inspector = inspect(temp_engine)

    email_unique = [idx for idx in inspector.get_indexes('users') if idx['column_names'] == ['email']]
    assert email_unique and email_unique[0]['unique'], "users.email should carry a unique index"

    token_unique = [idx for idx in inspector.get_indexes('access_tokens') if idx['column_names'] == ['token']]
    assert token_unique and token_unique[0]['unique'], "access_tokens.token should carry a unique index"


def test_duplicate_email_rejected_by_store(temp_engine):
    init_db()
    Session = sessionmaker(bind=temp_engine)
    db = Session()
    try:
        db.add(User(name="A", email="same@example.com", password="x"))
        db.commit()
        db.add(User(name="B", email="same@example.com", password="y"))
        with pytest.raises(IntegrityError):
            db.commit()
        db.rollback()
        assert db.query(User).count() == 1
    finally:
        db.close()
