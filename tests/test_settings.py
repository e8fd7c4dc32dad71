"""Tests for settings, subjects, topics and tax records."""

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.settings import AppSettings
from app.schemas.settings import UsnTaxRecord
from app.services import settings as settings_service


class TestInitializeSettings:
    """Tests for first-run defaults."""

    async def test_creates_defaults_once(self, db: AsyncSession):
        """Test defaults are inserted once and reused afterwards."""
        first = await settings_service.initialize_settings(db)
        await settings_service.update_settings(db, {"user_name": "Ольга"})
        second = await settings_service.initialize_settings(db)

        assert first.id == second.id
        assert second.user_name == "Ольга"
        result = await db.execute(select(AppSettings))
        assert len(result.scalars().all()) == 1

    async def test_default_values(self, app_settings: AppSettings):
        """Test the stored defaults."""
        assert app_settings.default_lesson_duration == 60
        assert app_settings.default_price == 1500
        assert app_settings.working_hours == {"start": "09:00", "end": "21:00"}
        assert [s["id"] for s in app_settings.subjects] == [
            "russian", "literature", "english", "spanish",
        ]
        assert "Грамматика" in app_settings.topics["english"]
        assert app_settings.tax_system == "patent"
        assert app_settings.tax_records == []


class TestSettingsAPI:
    """Tests for reading and patching settings."""

    async def test_get_creates_defaults(self, client: AsyncClient):
        """Test the first read returns defaults."""
        response = await client.get("/api/v1/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["theme"] == "light"
        assert len(data["subjects"]) == 4

    async def test_patch(self, client: AsyncClient):
        """Test partial update keeps other fields."""
        response = await client.patch(
            "/api/v1/settings",
            json={"default_price": 2000, "working_hours": {"start": "10:00", "end": "20:00"}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["default_price"] == 2000
        assert data["working_hours"] == {"start": "10:00", "end": "20:00"}
        assert data["default_lesson_duration"] == 60

    async def test_working_hours_order(self, client: AsyncClient):
        """Test end before start is rejected."""
        response = await client.patch(
            "/api/v1/settings",
            json={"working_hours": {"start": "20:00", "end": "10:00"}},
        )

        assert response.status_code == 422

    async def test_duplicate_subject_ids(self, client: AsyncClient):
        """Test subject ids must be unique."""
        subject = {"id": "math", "name": "Math", "color": "#ef4444"}

        response = await client.patch("/api/v1/settings", json={"subjects": [subject, subject]})

        assert response.status_code == 422

    async def test_unknown_tax_system(self, client: AsyncClient):
        """Test unknown regimes are rejected on input."""
        response = await client.patch("/api/v1/settings", json={"tax_system": "flat"})

        assert response.status_code == 422

    @pytest.mark.parametrize("field", ["default_price", "subjects", "working_hours", "tax_records"])
    async def test_null_required_field_rejected(self, client: AsyncClient, field: str):
        """Test an explicit null cannot clear a required setting."""
        response = await client.patch("/api/v1/settings", json={field: None})

        assert response.status_code == 422

        response = await client.get("/api/v1/settings")
        assert response.json()["default_price"] == 1500

    async def test_null_clears_user_name(self, client: AsyncClient):
        """Test the user name can be cleared."""
        await client.patch("/api/v1/settings", json={"user_name": "Ольга"})

        response = await client.patch("/api/v1/settings", json={"user_name": None})

        assert response.status_code == 200
        assert response.json()["user_name"] is None


class TestSubjects:
    """Tests for subject management."""

    async def test_add_subject(self, client: AsyncClient):
        """Test new subjects get an id and the first unused palette color."""
        response = await client.post("/api/v1/settings/subjects", json={"name": "Математика"})

        assert response.status_code == 201
        subject = response.json()["subjects"][-1]
        assert subject["id"].startswith("subject_")
        assert subject["name"] == "Математика"
        # Red and amber are taken by the defaults
        assert subject["color"] == "#22c55e"

    async def test_update_subject(self, client: AsyncClient):
        """Test renaming a subject keeps its color."""
        response = await client.patch(
            "/api/v1/settings/subjects/english", json={"name": "English"}
        )

        assert response.status_code == 200
        english = next(s for s in response.json()["subjects"] if s["id"] == "english")
        assert english == {"id": "english", "name": "English", "color": "#3b82f6"}

    async def test_update_unknown_subject(self, client: AsyncClient):
        """Test updating a missing subject is a 400."""
        response = await client.patch("/api/v1/settings/subjects/chess", json={"name": "X"})

        assert response.status_code == 400

    async def test_remove_subject(self, client: AsyncClient):
        """Test removing a subject."""
        response = await client.delete("/api/v1/settings/subjects/spanish")

        assert response.status_code == 200
        assert "spanish" not in [s["id"] for s in response.json()["subjects"]]


class TestTopics:
    """Tests for the topic dictionary."""

    async def test_add_topic(self, db: AsyncSession, app_settings: AppSettings):
        """Test a new topic is appended to its subject."""
        updated = await settings_service.add_topic(db, "english", "  Phrasal verbs ")

        assert updated.topics["english"][-1] == "Phrasal verbs"

    async def test_add_topic_new_subject(self, db: AsyncSession, app_settings: AppSettings):
        """Test topics can be stored for a subject without a list yet."""
        updated = await settings_service.add_topic(db, "chess", "Openings")

        assert updated.topics["chess"] == ["Openings"]

    async def test_duplicate_topic_ignored(self, db: AsyncSession, app_settings: AppSettings):
        """Test known topics are not added twice."""
        before = list(app_settings.topics["english"])

        updated = await settings_service.add_topic(db, "english", "Грамматика")

        assert updated.topics["english"] == before

    async def test_blank_topic_rejected(self, db: AsyncSession, app_settings: AppSettings):
        """Test empty topics raise."""
        with pytest.raises(ValidationError):
            await settings_service.add_topic(db, "english", "   ")

    async def test_filter_topics(self, client: AsyncClient):
        """Test autocomplete is case-insensitive."""
        response = await client.get("/api/v1/settings/topics/english", params={"q": "грам"})

        assert response.status_code == 200
        assert response.json() == ["Грамматика"]

    async def test_remove_topic(self, client: AsyncClient):
        """Test forgetting a topic."""
        response = await client.delete(
            "/api/v1/settings/topics/english", params={"topic": "IELTS"}
        )

        assert response.status_code == 200
        assert "IELTS" not in response.json()["topics"]["english"]


class TestTaxRecords:
    """Tests for tax record management."""

    async def test_prefilled_record(self, db: AsyncSession, app_settings: AppSettings):
        """Test a record without input uses the current year and defaults."""
        updated = await settings_service.add_tax_record(db, today=date(2026, 5, 1))

        assert updated.tax_records == [
            {"regime": "patent", "year": 2026, "patent_cost": 30000, "insurance_cost": 49500},
        ]

    async def test_next_free_year(self, db: AsyncSession, app_settings: AppSettings):
        """Test the next pre-filled record goes to the closest earlier free year."""
        await settings_service.add_tax_record(db, today=date(2026, 5, 1))
        updated = await settings_service.add_tax_record(db, today=date(2026, 5, 1))

        assert [r["year"] for r in updated.tax_records] == [2026, 2025]

    async def test_prefilled_usn_record(self, db: AsyncSession, app_settings: AppSettings):
        """Test the pre-filled record follows the selected regime."""
        await settings_service.update_settings(db, {"tax_system": "usn"})

        updated = await settings_service.add_tax_record(db, today=date(2026, 5, 1))

        assert updated.tax_records[0] == {
            "regime": "usn", "year": 2026, "tax_rate": 6, "insurance_cost": 49500,
        }

    async def test_duplicate_year(self, db: AsyncSession, app_settings: AppSettings):
        """Test only one record per year."""
        record = UsnTaxRecord(year=2025, tax_rate=6, insurance_cost=49500)
        await settings_service.add_tax_record(db, record)

        with pytest.raises(ValidationError):
            await settings_service.add_tax_record(db, record)

    async def test_tax_records_api(self, client: AsyncClient):
        """Test adding, replacing and deleting a record through the API."""
        response = await client.post(
            "/api/v1/settings/tax-records",
            json={"regime": "usn", "year": 2025, "tax_rate": 6, "insurance_cost": 49500},
        )
        assert response.status_code == 201

        response = await client.put(
            "/api/v1/settings/tax-records/2025",
            json={"regime": "usn", "year": 2025, "tax_rate": 15, "insurance_cost": 49500},
        )
        assert response.status_code == 200
        assert response.json()["tax_records"][0]["tax_rate"] == 15

        response = await client.put(
            "/api/v1/settings/tax-records/2024",
            json={"regime": "usn", "year": 2025, "tax_rate": 15, "insurance_cost": 0},
        )
        assert response.status_code == 400

        response = await client.delete("/api/v1/settings/tax-records/2025")
        assert response.status_code == 200
        assert response.json()["tax_records"] == []

    async def test_update_missing_year(self, client: AsyncClient):
        """Test replacing a record that does not exist is a 400."""
        response = await client.put(
            "/api/v1/settings/tax-records/2020",
            json={"regime": "patent", "year": 2020, "patent_cost": 1, "insurance_cost": 1},
        )

        assert response.status_code == 400
