"""Tests for engine and session helpers."""

from ward_scheduler.domain.db import get_engine, get_session, init_database
from ward_scheduler.domain.models import Staff


def test_sessions_share_one_engine_per_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'ward.db'}"
    other = f"sqlite:///{tmp_path / 'other.db'}"

    first, second, third = get_session(url), get_session(url), get_session(other)
    try:
        assert first is not second
        assert first.get_bind() is second.get_bind() is get_engine(url)
        assert third.get_bind() is not first.get_bind()
    finally:
        for session in (first, second, third):
            session.close()


def test_init_database_tables_visible_to_sessions(tmp_path):
    url = f"sqlite:///{tmp_path / 'ward.db'}"
    init_database(url)

    session = get_session(url)
    try:
        session.add(Staff(staff_id=1, first_name="Anna", last_name="Rossi", role="NURSE"))
        session.commit()
        assert session.query(Staff).count() == 1
    finally:
        session.close()
