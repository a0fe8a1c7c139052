from datetime import timedelta

import pytest

from julisha import db
from julisha.errors import AlreadySignedError, InvalidOrExpiredCodeError
from julisha.models import Signature, VerificationCode
from julisha.services import VerificationCodeService
from julisha.utils import utcnow

PHONE_HASH = "a" * 64


@pytest.fixture
def service(app):
    with app.app_context():
        yield VerificationCodeService(ttl=timedelta(minutes=10))


class TestIssue:
    def test_code_is_four_digits(self, service):
        code, _ = service.issue(PHONE_HASH)
        assert len(code) == 4 and code.isdigit()
        assert 1000 <= int(code) <= 9999

    def test_persists_unused_code_with_ttl(self, service):
        before = utcnow()
        code, expires_at = service.issue(PHONE_HASH)

        record = VerificationCode.query.filter_by(phone_hash=PHONE_HASH).one()
        assert record.code == code
        assert record.used is False
        assert before + timedelta(minutes=10) <= expires_at <= utcnow() + timedelta(minutes=10)

    def test_generated_codes_stay_in_range(self):
        codes = {VerificationCodeService.generate_code() for _ in range(500)}
        assert all(1000 <= int(c) <= 9999 for c in codes)

    def test_refuses_already_signed_phone(self, service):
        db.session.add(Signature(
            hashed_identifier=PHONE_HASH, verification_type="phone",
            county="Nairobi", ip_hash="b" * 64,
        ))
        db.session.commit()

        with pytest.raises(AlreadySignedError):
            service.issue(PHONE_HASH)
        assert VerificationCode.query.count() == 0

    def test_older_codes_remain_valid(self, service):
        # Reissuing does not revoke earlier codes for the same phone
        first, _ = service.issue(PHONE_HASH)
        service.issue(PHONE_HASH)

        service.consume(PHONE_HASH, first)


class TestConsume:
    def test_marks_code_used(self, service):
        code, _ = service.issue(PHONE_HASH)
        service.consume(PHONE_HASH, code)
        db.session.commit()

        assert VerificationCode.query.filter_by(phone_hash=PHONE_HASH).one().used is True

    def test_code_is_single_use(self, service):
        code, _ = service.issue(PHONE_HASH)
        service.consume(PHONE_HASH, code)
        db.session.commit()

        with pytest.raises(InvalidOrExpiredCodeError):
            service.consume(PHONE_HASH, code)

    def test_wrong_code_rejected(self, service):
        code, _ = service.issue(PHONE_HASH)
        wrong = "1000" if code != "1000" else "1001"
        with pytest.raises(InvalidOrExpiredCodeError):
            service.consume(PHONE_HASH, wrong)

    def test_code_bound_to_phone(self, service):
        code, _ = service.issue(PHONE_HASH)
        with pytest.raises(InvalidOrExpiredCodeError):
            service.consume("c" * 64, code)

    def test_expired_code_rejected(self, service):
        code, _ = service.issue(PHONE_HASH)
        record = VerificationCode.query.filter_by(phone_hash=PHONE_HASH).one()
        record.expires_at = utcnow() - timedelta(seconds=1)
        db.session.commit()

        with pytest.raises(InvalidOrExpiredCodeError):
            service.consume(PHONE_HASH, code)

    def test_rollback_restores_code(self, service):
        code, _ = service.issue(PHONE_HASH)
        service.consume(PHONE_HASH, code)
        db.session.rollback()

        service.consume(PHONE_HASH, code)
