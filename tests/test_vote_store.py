from datetime import timedelta

import pytest

from julisha import db
from julisha.errors import DuplicateSignatureError
from julisha.models import Signature
from julisha.services import VoteStore
from julisha.utils import utcnow


def make_signature(n, county="Nairobi", ip_hash="f" * 64, vtype="id", **kwargs):
    return Signature(
        hashed_identifier=f"{n:064x}",
        verification_type=vtype,
        county=county,
        ip_hash=ip_hash,
        **kwargs,
    )


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield


class TestInsert:
    def test_returns_new_total(self, ctx):
        assert VoteStore.insert(make_signature(1)) == 1
        assert VoteStore.insert(make_signature(2)) == 2
        db.session.commit()
        assert VoteStore.count() == 2

    def test_duplicate_hash_rejected(self, ctx):
        VoteStore.insert(make_signature(1))
        db.session.commit()

        with pytest.raises(DuplicateSignatureError):
            VoteStore.insert(make_signature(1, county="Kisumu"))
        assert VoteStore.count() == 1

    def test_constraint_holds_without_exists_check(self, ctx):
        # Simulates two requests that both passed exists() before inserting
        assert not VoteStore.exists(f"{7:064x}")
        VoteStore.insert(make_signature(7))
        db.session.commit()
        with pytest.raises(DuplicateSignatureError):
            VoteStore.insert(make_signature(7))

    def test_created_at_set(self, ctx):
        VoteStore.insert(make_signature(1))
        db.session.commit()
        assert Signature.query.one().created_at is not None


class TestQueries:
    def test_exists(self, ctx):
        VoteStore.insert(make_signature(1))
        db.session.commit()
        assert VoteStore.exists(f"{1:064x}")
        assert not VoteStore.exists(f"{2:064x}")

    def test_count_empty(self, ctx):
        assert VoteStore.count() == 0

    def test_count_by_county_sorted_descending(self, ctx):
        for n, county in enumerate(["Kisumu", "Nairobi", "Nairobi", "Mombasa", "Nairobi", "Kisumu"]):
            VoteStore.insert(make_signature(n, county=county))
        db.session.commit()

        assert VoteStore.count_by_county() == [
            {"county": "Nairobi", "count": 3},
            {"county": "Kisumu", "count": 2},
            {"county": "Mombasa", "count": 1},
        ]

    def test_count_by_type(self, ctx):
        VoteStore.insert(make_signature(1, vtype="id"))
        VoteStore.insert(make_signature(2, vtype="phone"))
        VoteStore.insert(make_signature(3, vtype="phone"))
        db.session.commit()
        assert VoteStore.count_by_type() == {"id": 1, "phone": 2}

    def test_count_since_respects_window_and_ip(self, ctx):
        ip = "1" * 64
        now = utcnow()
        VoteStore.insert(make_signature(1, ip_hash=ip, created_at=now - timedelta(hours=1)))
        VoteStore.insert(make_signature(2, ip_hash=ip, created_at=now - timedelta(hours=25)))
        VoteStore.insert(make_signature(3, ip_hash="2" * 64, created_at=now))
        db.session.commit()

        assert VoteStore.count_since(ip, timedelta(hours=24)) == 1
        assert VoteStore.count_since(ip, timedelta(hours=48)) == 2

    def test_recent_newest_first_and_limited(self, ctx):
        now = utcnow()
        for n in range(5):
            VoteStore.insert(make_signature(n, created_at=now - timedelta(minutes=n)))
        db.session.commit()

        recent = VoteStore.recent(limit=3)
        assert [s.hashed_identifier for s in recent] == [f"{n:064x}" for n in range(3)]
