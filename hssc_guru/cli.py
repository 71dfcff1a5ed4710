import argparse
import logging
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from hssc_guru.logging_setup import setup_console_logging
from hssc_guru.utils import read_json_file

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="HSSC Guru administration")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create database tables")

    load = sub.add_parser("load-test", help="Load a mock test from a JSON file")
    load.add_argument("file", type=Path, help="Path to the test JSON file")
    load.add_argument("--slug", type=str, default=None, help="Override the test slug")

    serve = sub.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", type=str, default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser.parse_args(argv)


def load_test_file(path: Path, slug: str | None = None) -> str:
    """Create a test from a JSON file and return its slug.

    Expected shape: {"slug", "name", "duration_minutes", "description",
    "questions": [{"text", "options", "correct_index", "explanation"}]}
    """
    from hssc_guru.database import SessionLocal, init_db
    from hssc_guru.services.test_service import create_test, get_test_by_slug

    payload = read_json_file(path, None)
    if not isinstance(payload, dict):
        raise SystemExit(f"{path} does not contain a test object")
    questions = payload.get("questions")
    if not isinstance(questions, list) or not questions:
        raise SystemExit(f"{path} has no questions")

    slug = slug or payload.get("slug") or path.stem
    init_db()
    db = SessionLocal()
    try:
        if get_test_by_slug(db, slug) is not None:
            raise SystemExit(f"Test {slug} already exists; pass --slug to load it under another name")
        test = create_test(
            db,
            slug=slug,
            name=payload.get("name") or slug,
            questions=questions,
            duration_minutes=payload.get("duration_minutes"),
            description=payload.get("description"),
        )
    except ValueError as e:
        db.rollback()
        raise SystemExit(f"Invalid test file {path}: {e}")
    except SQLAlchemyError as e:
        db.rollback()
        logger.debug("load-test failed", exc_info=True)
        raise SystemExit(f"Could not save test {slug}: {e.__class__.__name__}")
    finally:
        db.close()
    logger.info(f"Loaded test {slug} with {len(questions)} questions")
    return test.slug


def main(argv: list[str] | None = None) -> None:
    setup_console_logging()
    args = parse_args(argv)

    if args.command == "init-db":
        from hssc_guru.database import init_db

        init_db()
        print("Database initialized")
    elif args.command == "load-test":
        slug = load_test_file(args.file, args.slug)
        print(f"Saved test {slug}")
    elif args.command == "serve":
        import uvicorn

        from hssc_guru.app import app

        uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
