"""CLI commands for management tasks."""

import asyncio
import sys
from pathlib import Path

from app.core.database import async_session_maker, init_db
from app.core.exceptions import TutorSchedulerError
from app.core.logging import setup_logging
from app.services import backup as backup_service
from app.services.settings import initialize_settings


async def init() -> None:
    """Create tables and the default settings record."""
    await init_db()
    async with async_session_maker() as db:
        app_settings = await initialize_settings(db)

    print("✓ Database initialized")
    print(f"  Subjects: {len(app_settings.subjects)}")


async def export_backup(path: str | None) -> None:
    """Write a backup file; the default name carries today's date."""
    await init_db()
    async with async_session_maker() as db:
        document = await backup_service.export_data(db)

    target = Path(path or backup_service.backup_filename())
    target.write_text(backup_service.export_json(document), encoding="utf-8")

    data = document["data"]
    print(f"✓ Backup written to {target}")
    print(f"  Students: {len(data['students'])}")
    print(f"  Lessons: {len(data['lessons'])}")


async def import_backup(path: str) -> None:
    """Replace all data with the contents of a backup file."""
    source = Path(path)
    if not source.exists():
        print(f"Error: File {path} not found!")
        sys.exit(1)

    await init_db()
    async with async_session_maker() as db:
        result = await backup_service.import_data(db, source.read_text(encoding="utf-8"))

    print(f"✓ {result.message}")


async def reset() -> None:
    """Delete every record."""
    await init_db()
    async with async_session_maker() as db:
        result = await backup_service.reset_data(db)

    print(f"✓ {result.message}")


def main() -> None:
    """CLI entry point."""
    if len(sys.argv) < 2:
        print("Usage: python -m app.cli <command>")
        print("Commands:")
        print("  init")
        print("  export [file]")
        print("  import <file>")
        print("  reset --yes")
        sys.exit(1)

    setup_logging()
    command = sys.argv[1]

    try:
        if command == "init":
            asyncio.run(init())
        elif command == "export":
            asyncio.run(export_backup(sys.argv[2] if len(sys.argv) > 2 else None))
        elif command == "import":
            if len(sys.argv) != 3:
                print("Usage: python -m app.cli import <file>")
                sys.exit(1)
            asyncio.run(import_backup(sys.argv[2]))
        elif command == "reset":
            if sys.argv[2:] != ["--yes"]:
                print("This deletes all students, lessons and settings.")
                print("Usage: python -m app.cli reset --yes")
                sys.exit(1)
            asyncio.run(reset())
        else:
            print(f"Unknown command: {command}")
            sys.exit(1)
    except TutorSchedulerError as exc:
        print(f"Error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
