"""Service-level tests for owner scoping, aggregates and cascades without HTTP."""
from datetime import date, time

import pytest

from mood_tracker.exceptions import AuthorizationError, NotFoundError, ValidationError
from mood_tracker.models.access_token import PersonalAccessToken
from mood_tracker.models.mood_entry import MoodEntry
from mood_tracker.models.user import User
from mood_tracker.schemas.mood_entry import MoodEntryUpdate
from mood_tracker.schemas.user import ProfileUpdate, RegisterRequest
from mood_tracker.services import mood_entry_service, token_service, user_service


def _user(db, email: str, tz: str = None) -> User:
    user = User(name=email.split("@")[0], email=email,
                password_hash=user_service.hash_password("password123"), timezone=tz)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _entry(db, user: User, level: int, on: date, at: time = None) -> MoodEntry:
    entry = MoodEntry(user_id=user.id, mood_level=level, entry_date=on, entry_time=at, activities=[])
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


class TestAggregates:

    def test_average_over_no_entries_is_zero(self, db):
        user = _user(db, "empty@example.com")
        avg = mood_entry_service.average_mood_level(db, user)
        assert avg == 0
        assert isinstance(avg, float)

    def test_average_over_full_scale(self, db):
        user = _user(db, "full@example.com")
        for level in (1, 2, 3, 4, 5):
            _entry(db, user, level, date(2025, 6, level))
        assert mood_entry_service.average_mood_level(db, user) == 3.0

    def test_summary_rounds_average(self, db):
        user = _user(db, "round@example.com")
        for level in (4, 4, 5):
            _entry(db, user, level, date(2025, 6, 1))
        summary = user_service.user_summary(db, user)
        assert summary["average_mood"] == 4.3
        assert summary["total_entries"] == 3

    def test_summary_rounds_half_away_from_zero(self, db):
        user = _user(db, "half@example.com")
        for level in (2, 2, 2, 3):
            _entry(db, user, level, date(2025, 6, 1))
        # 2.25 rounds up, not to the even 2.2
        assert user_service.user_summary(db, user)["average_mood"] == 2.3

    @pytest.mark.parametrize("value, expected", [(2.25, 2.3), (3.75, 3.8), (4.333, 4.3), (0.0, 0.0)])
    def test_round_half_up(self, value, expected):
        assert user_service.round_half_up(value) == expected

    def test_latest_entry_ties_go_to_highest_id(self, db):
        user = _user(db, "tie@example.com")
        _entry(db, user, 2, date(2025, 6, 1))
        last = _entry(db, user, 3, date(2025, 6, 1))
        assert mood_entry_service.latest_entry(db, user).id == last.id

    def test_latest_entry_none_without_entries(self, db):
        user = _user(db, "none@example.com")
        assert mood_entry_service.latest_entry(db, user) is None
        assert user_service.user_summary(db, user)["latest_mood"] is None

    def test_distribution_omits_absent_levels(self, db):
        user = _user(db, "dist@example.com")
        for level in (2, 2, 4):
            _entry(db, user, level, date(2025, 6, 1))
        stats = mood_entry_service.get_stats(db, user)
        assert set(stats["mood_distribution"]) == {2, 4}
        assert stats["mood_distribution"][2]["count"] == 2


class TestOwnership:

    def test_get_foreign_entry_raises_authorization_error(self, db):
        owner = _user(db, "owner@example.com")
        intruder = _user(db, "intruder@example.com")
        entry = _entry(db, owner, 3, date(2025, 6, 1))
        with pytest.raises(AuthorizationError):
            mood_entry_service.get_entry(db, intruder, entry.id)

    def test_missing_entry_raises_not_found(self, db):
        user = _user(db, "nf@example.com")
        with pytest.raises(NotFoundError):
            mood_entry_service.get_entry(db, user, 12345)

    def test_update_foreign_entry_leaves_it_untouched(self, db):
        owner = _user(db, "owner2@example.com")
        intruder = _user(db, "intruder2@example.com")
        entry = _entry(db, owner, 3, date(2025, 6, 1))
        with pytest.raises(AuthorizationError):
            mood_entry_service.update_entry(db, intruder, entry.id, MoodEntryUpdate(mood_level=1))
        db.refresh(entry)
        assert entry.mood_level == 3

    def test_delete_foreign_entry_keeps_it(self, db):
        owner = _user(db, "owner3@example.com")
        intruder = _user(db, "intruder3@example.com")
        entry = _entry(db, owner, 3, date(2025, 6, 1))
        with pytest.raises(AuthorizationError):
            mood_entry_service.delete_entry(db, intruder, entry.id)
        assert db.query(MoodEntry).filter(MoodEntry.id == entry.id).first() is not None

    def test_update_rejects_future_date(self, db):
        user = _user(db, "future@example.com")
        entry = _entry(db, user, 3, date(2025, 6, 1))
        with pytest.raises(ValidationError) as exc_info:
            mood_entry_service.update_entry(db, user, entry.id, MoodEntryUpdate(entry_date=date(2999, 1, 1)))
        assert "entry_date" in exc_info.value.errors

    def test_list_is_scoped_to_owner(self, db):
        alice = _user(db, "alice@example.com")
        bob = _user(db, "bob@example.com")
        _entry(db, alice, 1, date(2025, 6, 1))
        _entry(db, bob, 5, date(2025, 6, 1))
        page = mood_entry_service.list_entries(db, alice)
        assert page.total == 1
        assert [e.user_id for e in page.items] == [alice.id]
        assert page.last_page == 1


class TestEmailUniquenessAtCommit:
    """The unique index still yields a 422 when the pre-check misses a concurrent insert."""

    def test_register_conflict_becomes_validation_error(self, db, monkeypatch):
        _user(db, "race@example.com")
        monkeypatch.setattr(user_service, "_email_taken", lambda *args, **kwargs: False)
        data = RegisterRequest(name="Racer", email="race@example.com",
                               password="password123", password_confirmation="password123")

        with pytest.raises(ValidationError) as exc_info:
            user_service.register(db, data)
        assert exc_info.value.errors == {"email": [user_service.EMAIL_TAKEN_MESSAGE]}
        assert db.query(User).filter(User.email == "race@example.com").count() == 1

    def test_profile_conflict_becomes_validation_error(self, db, monkeypatch):
        _user(db, "first@example.com")
        second = _user(db, "second@example.com")
        monkeypatch.setattr(user_service, "_email_taken", lambda *args, **kwargs: False)

        with pytest.raises(ValidationError) as exc_info:
            user_service.update_profile(db, second, ProfileUpdate(email="first@example.com"))
        assert "email" in exc_info.value.errors
        db.refresh(second)
        assert second.email == "second@example.com"


class TestCascadeAndTokens:

    def test_deleting_user_removes_entries_and_tokens(self, db):
        user = _user(db, "gone@example.com")
        _entry(db, user, 3, date(2025, 6, 1))
        token_service.issue_token(db, user)
        user_id = user.id

        db.delete(user)
        db.commit()

        assert db.query(MoodEntry).filter(MoodEntry.user_id == user_id).count() == 0
        assert db.query(PersonalAccessToken).filter(PersonalAccessToken.user_id == user_id).count() == 0

    def test_token_round_trip_and_revocation(self, db):
        user = _user(db, "tok@example.com")
        plaintext = token_service.issue_token(db, user)

        stored = db.query(PersonalAccessToken).one()
        assert stored.token_hash != plaintext

        resolved = token_service.resolve_token(db, plaintext)
        assert resolved is not None and resolved.user_id == user.id
        assert resolved.last_used_at is not None

        token_service.revoke_token(db, resolved)
        assert token_service.resolve_token(db, plaintext) is None

    def test_revoke_all_tokens(self, db):
        user = _user(db, "all@example.com")
        other = _user(db, "other@example.com")
        tokens = [token_service.issue_token(db, user) for _ in range(3)]
        kept = token_service.issue_token(db, other)

        assert token_service.revoke_all_tokens(db, user) == 3
        assert all(token_service.resolve_token(db, t) is None for t in tokens)
        assert token_service.resolve_token(db, kept) is not None

    def test_password_hash_verifies(self):
        hashed = user_service.hash_password("s3cret-pass")
        assert user_service.verify_password("s3cret-pass", hashed)
        assert not user_service.verify_password("wrong-pass", hashed)
        assert not user_service.verify_password("anything", "not-a-bcrypt-hash")
