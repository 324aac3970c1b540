"""
Point the app at a throwaway SQLite database before any test module imports it,
then build the schema from the ORM metadata. Runs before any test module loads.
"""
import os
import tempfile

_db_dir = tempfile.mkdtemp(prefix="liftlog-tests-")
os.environ["DB_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ.setdefault("BCRYPT_ROUNDS", "4")  # fast hashing for tests
os.environ.setdefault("ENV", "test")

from app.db import Base, engine  # noqa: E402
from app import models  # noqa: E402,F401  # registers every table

Base.metadata.create_all(engine)
