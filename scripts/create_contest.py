import argparse
import json
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pydantic import ValidationError

from app.db.base_class import Base
from app.db.session import SessionLocal, engine
from app.schemas.contest import ContestCreate
from app.services import contest_service


def create_contests(json_file_path: str):
    print(f"--- Starting contest import from '{json_file_path}' ---")

    try:
        with open(json_file_path, mode='r', encoding='utf-8') as f:
            payload = json.load(f)
    except FileNotFoundError:
        print(f"ERROR: The file '{json_file_path}' was not found.")
        return
    except json.JSONDecodeError as e:
        print(f"ERROR: '{json_file_path}' is not valid JSON: {e}")
        return

    entries = payload if isinstance(payload, list) else [payload]

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    created_count = 0
    error_count = 0

    try:
        for position, entry in enumerate(entries):
            try:
                contest_in = ContestCreate.model_validate(entry)
            except ValidationError as e:
                print(f"WARNING: Skipping entry #{position}: {e.error_count()} validation error(s).")
                for error in e.errors():
                    print(f"    {'.'.join(str(p) for p in error['loc'])}: {error['msg']}")
                error_count += 1
                continue

            try:
                created = contest_service.create_contest(db, contest_in)
                print(f"SUCCESS: Created contest '{contest_in.name}' with id {created.id}.")
                created_count += 1
            except Exception as e:
                print(f"ERROR: Could not create contest '{contest_in.name}'. Reason: {e}")
                db.rollback()
                error_count += 1
    finally:
        db.close()

    print("\n--- Import Summary ---")
    print(f"Contests Created:  {created_count}")
    print(f"Entries with Errors: {error_count}")
    print("----------------------")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Create contests from a JSON file holding one contest object or a list of them, "
                    "each with 'name', 'timeLimitMinutes' and 'questions'."
    )
    parser.add_argument(
        "json_file",
        help="Path to the JSON file describing the contest(s)."
    )

    args = parser.parse_args()
    create_contests(args.json_file)
