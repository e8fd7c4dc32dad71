"""Tests for students API."""

from datetime import date

from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.lesson import Lesson
from app.models.student import Student
from tests.conftest import add_lesson


class TestListStudents:
    """Tests for listing students."""

    async def test_list_all_students(self, client: AsyncClient, db: AsyncSession):
        """Test all students are returned in insertion order."""
        db.add_all([Student(name="Alice"), Student(name="Bob")])
        await db.commit()

        response = await client.get("/api/v1/students")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [s["name"] for s in data["items"]] == ["Alice", "Bob"]

    async def test_list_empty(self, client: AsyncClient):
        """Test empty store returns an empty list."""
        response = await client.get("/api/v1/students")

        assert response.status_code == 200
        assert response.json() == {"items": [], "total": 0}

    async def test_search_is_case_insensitive(
        self, client: AsyncClient, db: AsyncSession, student: Student
    ):
        """Test searching by a lowercase fragment of a Cyrillic name."""
        db.add(Student(name="Борис"))
        await db.commit()

        response = await client.get("/api/v1/students", params={"search": "анна"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["items"][0]["name"] == "Анна Петрова"


class TestCreateStudent:
    """Tests for creating students."""

    async def test_create_student(self, client: AsyncClient):
        """Test creating a student returns the stored record with an id."""
        response = await client.post(
            "/api/v1/students",
            json={
                "name": "Мария",
                "subjects": ["russian", "literature"],
                "level": "Подготовка к ЕГЭ",
                "default_price": 1800,
                "color": "#EF4444",
            },
        )

        assert response.status_code == 201
        data = response.json()
        assert data["id"] > 0
        assert data["name"] == "Мария"
        assert data["subjects"] == ["russian", "literature"]
        assert data["level"] == "Подготовка к ЕГЭ"
        assert data["color"] == "#ef4444"
        assert data["goals"] == ""
        assert data["created_at"]

    async def test_ids_are_unique(self, client: AsyncClient):
        """Test every created student gets its own id."""
        first = await client.post("/api/v1/students", json={"name": "A"})
        second = await client.post("/api/v1/students", json={"name": "B"})

        assert first.json()["id"] != second.json()["id"]

    async def test_blank_optional_fields_are_missing(self, client: AsyncClient):
        """Test empty form fields are stored as null."""
        response = await client.post(
            "/api/v1/students",
            json={"name": "Олег", "phone": "", "email": " ", "level": ""},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["phone"] is None
        assert data["email"] is None
        assert data["level"] is None

    async def test_name_required(self, client: AsyncClient):
        """Test missing name is rejected."""
        response = await client.post("/api/v1/students", json={"phone": "+7900"})

        assert response.status_code == 422

    async def test_invalid_color(self, client: AsyncClient):
        """Test malformed color is rejected."""
        response = await client.post(
            "/api/v1/students", json={"name": "Олег", "color": "blue"}
        )

        assert response.status_code == 422


class TestGetStudent:
    """Tests for getting a single student."""

    async def test_get_student(self, client: AsyncClient, student: Student):
        """Test getting a student by ID."""
        response = await client.get(f"/api/v1/students/{student.id}")

        assert response.status_code == 200
        assert response.json()["email"] == "anna@example.com"

    async def test_get_student_not_found(self, client: AsyncClient):
        """Test missing student returns 404."""
        response = await client.get("/api/v1/students/999")

        assert response.status_code == 404

    async def test_lesson_history_newest_first(
        self, client: AsyncClient, db: AsyncSession, student: Student
    ):
        """Test a student's lessons are listed newest first."""
        await add_lesson(db, student.id, date=date(2026, 1, 5))
        await add_lesson(db, student.id, date=date(2026, 2, 5))
        await add_lesson(db, student.id + 100, date=date(2026, 3, 5))

        response = await client.get(f"/api/v1/students/{student.id}/lessons")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [l["date"] for l in data["items"]] == ["2026-02-05", "2026-01-05"]


class TestUpdateStudent:
    """Tests for updating students."""

    async def test_partial_update(self, client: AsyncClient, student: Student):
        """Test only given fields change."""
        response = await client.patch(
            f"/api/v1/students/{student.id}",
            json={"goals": "IELTS 7.0", "default_price": 2500},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["goals"] == "IELTS 7.0"
        assert data["default_price"] == 2500
        assert data["name"] == "Анна Петрова"
        assert data["subjects"] == ["english"]

    async def test_update_not_found(self, client: AsyncClient):
        """Test updating a missing student returns 404."""
        response = await client.patch("/api/v1/students/999", json={"name": "X"})

        assert response.status_code == 404

    async def test_null_name_rejected(self, client: AsyncClient, student: Student):
        """Test an explicit null cannot clear a required field."""
        response = await client.patch(f"/api/v1/students/{student.id}", json={"name": None})

        assert response.status_code == 422

        response = await client.get(f"/api/v1/students/{student.id}")
        assert response.json()["name"] == "Анна Петрова"

    async def test_null_clears_optional_field(self, client: AsyncClient, student: Student):
        """Test nullable fields can still be cleared."""
        response = await client.patch(
            f"/api/v1/students/{student.id}", json={"phone": None, "default_price": None}
        )

        assert response.status_code == 200
        assert response.json()["phone"] is None
        assert response.json()["default_price"] is None


class TestDeleteStudent:
    """Tests for deleting students."""

    async def test_delete_keeps_lessons(
        self, client: AsyncClient, db: AsyncSession, student: Student
    ):
        """Test deleting a student leaves their lessons in place."""
        lesson = await add_lesson(db, student.id)

        response = await client.delete(f"/api/v1/students/{student.id}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/students/{student.id}")
        assert response.status_code == 404

        result = await db.execute(select(Lesson).where(Lesson.id == lesson.id))
        assert result.scalar_one().student_id == student.id

    async def test_delete_not_found(self, client: AsyncClient):
        """Test deleting a missing student returns 404."""
        response = await client.delete("/api/v1/students/999")

        assert response.status_code == 404


class TestSuggestColor:
    """Tests for the new-student color suggestion."""

    async def test_first_unused_color(
        self, client: AsyncClient, db: AsyncSession, student: Student
    ):
        """Test the first palette color not taken by another student."""
        db.add(Student(name="Red", color="#ef4444"))
        await db.commit()

        response = await client.get("/api/v1/students/suggest-color")

        assert response.status_code == 200
        data = response.json()
        assert data["color"] == "#f97316"
        assert set(data["used_colors"]) == {"#ef4444", "#3b82f6"}

    async def test_excludes_student_being_edited(
        self, client: AsyncClient, db: AsyncSession
    ):
        """Test the edited student's own color counts as free."""
        red = Student(name="Red", color="#ef4444")
        db.add(red)
        await db.commit()

        response = await client.get(
            "/api/v1/students/suggest-color", params={"exclude_id": red.id}
        )

        assert response.json()["color"] == "#ef4444"
