"""
Login flow tests: rate limiting, second factor, attempt recording.
"""
from datetime import timedelta

from sqlalchemy import delete

from nfclink.db.base import utcnow
from nfclink.models import AuditLog, LoginAttempt, TrustedDevice, TwoFactorAuth
from nfclink.security import totp
from nfclink.services.context import ClientInfo
from nfclink.services.login import (
    BadSecondFactor,
    NeedsSecondFactor,
    Success,
    apply_login_outcome,
    evaluate_login,
    gather_login_facts,
)
from tests.conftest import PASSWORD, invalid_totp

CLIENT = ClientInfo(ip_address="10.0.0.1", user_agent="pytest")


def login_body(email="test@example.com", password=PASSWORD, **extra):
    body = {"email": email, "password": password}
    body.update(extra)
    return body


# =============================================================================
# PASSWORD ONLY
# =============================================================================

class TestPasswordLogin:

    async def test_correct_password_without_2fa_succeeds(self, client, user, fetch):
        response = await client.post("/login", json=login_body())

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["twoFactorEnabled"] is False
        assert data["user"] == {"id": user.id, "name": "Test User", "email": "test@example.com"}

        attempts = await fetch(LoginAttempt)
        assert len(attempts) == 1
        assert attempts[0].success is True
        assert attempts[0].user_id == user.id

    async def test_response_never_contains_password_hash(self, client, user):
        response = await client.post("/login", json=login_body())
        assert "password_hash" not in response.text

    async def test_wrong_password_rejected_and_recorded(self, client, user, fetch):
        response = await client.post("/login", json=login_body(password="nope"))

        assert response.status_code == 401
        attempts = await fetch(LoginAttempt)
        assert len(attempts) == 1
        assert attempts[0].success is False
        assert attempts[0].user_id == user.id
        assert attempts[0].blocked is False

    async def test_unknown_email_recorded_without_user(self, client, user, fetch):
        response = await client.post("/login", json=login_body(email="ghost@example.com"))

        assert response.status_code == 401
        attempts = await fetch(LoginAttempt)
        assert len(attempts) == 1
        assert attempts[0].user_id is None
        assert attempts[0].email == "ghost@example.com"

    async def test_unknown_email_and_wrong_password_look_the_same(self, client, user):
        unknown = await client.post("/login", json=login_body(email="ghost@example.com"))
        wrong = await client.post("/login", json=login_body(password="nope"))

        assert unknown.status_code == wrong.status_code == 401
        assert unknown.json() == wrong.json()

    async def test_email_match_is_exact(self, client, user):
        response = await client.post("/login", json=login_body(email="TEST@example.com"))
        assert response.status_code == 401

    async def test_success_writes_login_audit_entry(self, client, user, fetch):
        await client.post("/login", json=login_body())

        entries = await fetch(AuditLog, AuditLog.action == "login")
        assert len(entries) == 1
        assert entries[0].user_id == user.id
        assert entries[0].details == {"method": "password"}

    async def test_missing_password_is_validation_error(self, client):
        response = await client.post("/login", json={"email": "test@example.com"})
        assert response.status_code == 422
        assert response.json()["error"] == "Invalid request"


# =============================================================================
# RATE LIMITING
# =============================================================================

class TestRateLimiting:

    async def test_seventh_attempt_blocked_even_with_correct_password(self, client, user, fetch):
        headers = {"X-Forwarded-For": "203.0.113.7"}
        for _ in range(6):
            response = await client.post("/login", json=login_body(password="wrong"), headers=headers)
            assert response.status_code == 401

        response = await client.post("/login", json=login_body(), headers=headers)

        assert response.status_code == 429
        data = response.json()
        assert data["rateLimited"] is True
        assert "error" in data

        blocked = await fetch(LoginAttempt, LoginAttempt.blocked == True)
        assert len(blocked) == 1
        assert blocked[0].success is False
        assert blocked[0].user_id is None

    async def test_five_failures_do_not_block(self, client, user):
        headers = {"X-Forwarded-For": "203.0.113.8"}
        for _ in range(5):
            await client.post("/login", json=login_body(password="wrong"), headers=headers)

        response = await client.post("/login", json=login_body(), headers=headers)
        assert response.status_code == 200

    async def test_limit_is_per_source_address(self, client, user):
        for _ in range(6):
            await client.post("/login", json=login_body(password="wrong"), headers={"X-Forwarded-For": "198.51.100.1"})

        response = await client.post("/login", json=login_body(), headers={"X-Forwarded-For": "198.51.100.2"})
        assert response.status_code == 200

    async def test_failures_outside_window_are_ignored(self, client, user, db):
        old = utcnow() - timedelta(minutes=11)
        for _ in range(10):
            db.add(LoginAttempt(email="test@example.com", ip_address="192.0.2.1", success=False, created_at=old))
        await db.commit()

        response = await client.post("/login", json=login_body(), headers={"X-Forwarded-For": "192.0.2.1"})
        assert response.status_code == 200

    async def test_first_forwarded_hop_is_the_source(self, client, user, fetch):
        await client.post("/login", json=login_body(), headers={"X-Forwarded-For": "192.0.2.9, 10.0.0.1"})

        attempts = await fetch(LoginAttempt)
        assert attempts[0].ip_address == "192.0.2.9"


# =============================================================================
# SECOND FACTOR
# =============================================================================

class TestSecondFactorLogin:

    async def test_2fa_without_code_requires_second_factor_and_records_nothing(
        self, client, user, enable_two_factor, fetch
    ):
        await enable_two_factor(user)

        response = await client.post("/login", json=login_body())

        assert response.status_code == 200
        data = response.json()
        assert data["requires2FA"] is True
        assert data["user"]["id"] == user.id
        assert "success" not in data
        assert await fetch(LoginAttempt) == []

    async def test_2fa_with_valid_code_records_one_success(self, client, user, enable_two_factor, fetch):
        record = await enable_two_factor(user)

        response = await client.post(
            "/login", json=login_body(otpToken=totp.get_current_totp(record.secret))
        )

        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["twoFactorEnabled"] is True

        attempts = await fetch(LoginAttempt)
        assert len(attempts) == 1
        assert attempts[0].success is True

    async def test_2fa_with_bad_code_is_flagged(self, client, user, enable_two_factor, fetch):
        record = await enable_two_factor(user)
        response = await client.post("/login", json=login_body(otpToken=invalid_totp(record.secret)))

        assert response.status_code == 401
        attempts = await fetch(LoginAttempt)
        assert len(attempts) == 1
        assert attempts[0].twofa_failed is True
        assert attempts[0].user_id == user.id

    async def test_wrong_password_checked_before_second_factor(self, client, user, enable_two_factor, fetch):
        record = await enable_two_factor(user)

        response = await client.post(
            "/login", json=login_body(password="nope", otpToken=totp.get_current_totp(record.secret))
        )

        assert response.status_code == 401
        attempts = await fetch(LoginAttempt)
        assert attempts[0].twofa_failed is False

    async def test_pending_enrollment_does_not_require_code(self, client, user, enable_two_factor, db):
        record = await enable_two_factor(user)
        record.is_enabled = False
        await db.commit()

        response = await client.post("/login", json=login_body())
        assert response.json()["success"] is True
        assert response.json()["twoFactorEnabled"] is False

    async def test_recovery_code_logs_in_once(self, client, user, enable_two_factor, fetch):
        await enable_two_factor(user, codes=["AAAAA-11111", "BBBBB-22222"])

        first = await client.post("/login", json=login_body(recoveryCode="AAAAA-11111"))
        second = await client.post("/login", json=login_body(recoveryCode="AAAAA-11111"))

        assert first.status_code == 200
        assert first.json()["success"] is True
        assert second.status_code == 401

        records = await fetch(TwoFactorAuth)
        assert records[0].recovery_codes == ["BBBBB-22222"]

    async def test_trusted_device_skips_second_factor(self, client, user, enable_two_factor, db, fetch):
        await enable_two_factor(user)
        before = utcnow() - timedelta(days=1)
        db.add(TrustedDevice(
            user_id=user.id,
            device_id="device-1",
            expires_at=utcnow() + timedelta(days=5),
            last_used_at=before,
        ))
        await db.commit()

        response = await client.post("/login", json=login_body(deviceId="device-1"))

        assert response.status_code == 200
        assert response.json()["success"] is True
        devices = await fetch(TrustedDevice)
        assert devices[0].last_used_at.replace(tzinfo=None) > before.replace(tzinfo=None)

    async def test_expired_trusted_device_still_requires_code(self, client, user, enable_two_factor, db):
        await enable_two_factor(user)
        db.add(TrustedDevice(
            user_id=user.id,
            device_id="device-old",
            expires_at=utcnow() - timedelta(minutes=1),
        ))
        await db.commit()

        response = await client.post("/login", json=login_body(deviceId="device-old"))
        assert response.json()["requires2FA"] is True

    async def test_device_of_another_user_is_not_trusted(self, client, user, create_user, enable_two_factor, db):
        other = await create_user(email="other@example.com")
        await enable_two_factor(user)
        db.add(TrustedDevice(
            user_id=other.id,
            device_id="device-2",
            expires_at=utcnow() + timedelta(days=5),
        ))
        await db.commit()

        response = await client.post("/login", json=login_body(deviceId="device-2"))
        assert response.json()["requires2FA"] is True


# =============================================================================
# STATE CHANGED BETWEEN CHECK AND WRITE
# =============================================================================

class TestLoginRaces:

    async def test_device_removed_after_check_requires_code(
        self, session_factory, user, enable_two_factor, db, fetch
    ):
        await enable_two_factor(user)
        db.add(TrustedDevice(
            user_id=user.id,
            device_id="device-1",
            expires_at=utcnow() + timedelta(days=5),
        ))
        await db.commit()

        async with session_factory() as session:
            facts = await gather_login_facts(session, user.email, CLIENT, "device-1")
            outcome = evaluate_login(facts, PASSWORD)

            await db.execute(delete(TrustedDevice))
            await db.commit()

            recorded = await apply_login_outcome(session, outcome, facts, user.email, CLIENT, "device-1")

        assert outcome.trusted_device is True
        assert isinstance(recorded, NeedsSecondFactor)
        assert await fetch(LoginAttempt) == []
        assert await fetch(AuditLog) == []

    async def test_recovery_code_spent_by_another_login_is_rejected(
        self, session_factory, user, enable_two_factor, db, fetch
    ):
        record = await enable_two_factor(user, codes=["AAAAA-11111", "BBBBB-22222"])

        async with session_factory() as session:
            facts = await gather_login_facts(session, user.email, CLIENT)
            outcome = evaluate_login(facts, PASSWORD, recovery_code="AAAAA-11111")

            record.recovery_codes = ["BBBBB-22222"]
            await db.commit()

            recorded = await apply_login_outcome(session, outcome, facts, user.email, CLIENT)

        assert isinstance(outcome, Success)
        assert isinstance(recorded, BadSecondFactor)
        attempts = await fetch(LoginAttempt)
        assert [(a.success, a.twofa_failed, a.user_id) for a in attempts] == [(False, True, user.id)]
        assert (await fetch(TwoFactorAuth))[0].recovery_codes == ["BBBBB-22222"]
        assert await fetch(AuditLog) == []
