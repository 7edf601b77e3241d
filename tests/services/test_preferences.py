import unittest

from app.models.preferences import Preferences
from app.services.preferences import PreferencesService


class FakeQuery:
    def __init__(self, result=None):
        self._result = result

    def filter(self, *args, **kwargs):
        return self

    def first(self):
        return self._result


class FakeDB:
    def __init__(self, existing=None):
        # existing is the result that FakeQuery.first() should return
        self._existing = existing
        self.added = []
        self.commits = 0
        self.refreshed = []

    def query(self, model):
        return FakeQuery(self._existing)

    def add(self, obj):
        self.added.append(obj)

    def commit(self):
        self.commits += 1

    def refresh(self, obj):
        self.refreshed.append(obj)


class TestPreferencesService(unittest.TestCase):
    def test_upsert_creates_preferences(self):
        """Test that upserting creates missing preferences"""
        fake_db = FakeDB(existing=None)
        service = PreferencesService(fake_db)

        prefs = service.upsert_preferences(123, {
            "days_per_week": 4,
            "preferred_days": [1, 2, 4, 6],
            "available_equipment": ["dumbbell"],
        })

        self.assertIsInstance(prefs, Preferences)
        self.assertEqual(prefs.user_id, 123)
        self.assertEqual(prefs.days_per_week, 4)
        self.assertEqual(prefs.preferred_days, [1, 2, 4, 6])
        self.assertEqual(prefs.available_equipment, ["dumbbell"])
        self.assertIn(prefs, fake_db.added)
        self.assertEqual(fake_db.commits, 2)

    def test_upsert_updates_existing_and_keeps_other_fields(self):
        """Test that upserting keeps fields that are not given"""
        existing = Preferences(user_id=123, days_per_week=3, difficulty="beginner", focus_areas=["strength"])
        fake_db = FakeDB(existing=existing)
        service = PreferencesService(fake_db)

        prefs = service.upsert_preferences(123, {"difficulty": "advanced", "focus_areas": ["strength", "cardio"]})

        self.assertIs(prefs, existing)
        self.assertEqual(prefs.days_per_week, 3)
        self.assertEqual(prefs.difficulty, "advanced")
        self.assertEqual(prefs.focus_areas, ["strength", "cardio"])
        self.assertEqual(fake_db.commits, 1)

    def test_upsert_ignores_unknown_fields(self):
        """Test that unknown fields are ignored"""
        existing = Preferences(user_id=123)
        service = PreferencesService(FakeDB(existing=existing))

        prefs = service.upsert_preferences(123, {"playlist_url": True, "timezone": "Europe/Berlin"})

        self.assertFalse(hasattr(prefs, "playlist_url"))
        self.assertEqual(prefs.timezone, "Europe/Berlin")

    def test_get_preferences_returns_none_when_missing(self):
        """Test reading preferences that do not exist"""
        service = PreferencesService(FakeDB(existing=None))
        self.assertIsNone(service.get_preferences_by_user_id(5))


if __name__ == "__main__":
    unittest.main()
