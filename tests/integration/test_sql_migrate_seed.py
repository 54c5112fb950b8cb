import sys
import tempfile
from pathlib import Path
import unittest

from sqlalchemy import create_engine, text

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from chronicles.infrastructure.db.inmemory import seed_content
from chronicles.infrastructure.db.sql import migrate


class MigrateSeedTests(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.database_url = f"sqlite:///{Path(self.tmp.name) / 'chronicles.db'}"

    def _count(self, table: str) -> int:
        engine = create_engine(self.database_url, future=True)
        try:
            with engine.connect() as conn:
                return int(conn.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar())
        finally:
            engine.dispose()

    def test_migrate_creates_schema_and_seeds_catalogue(self) -> None:
        statements, seeded = migrate.migrate(self.database_url)

        self.assertEqual(len(migrate.schema_statements("sqlite")), statements)
        self.assertEqual(sum(len(plan.rows) for plan in migrate.build_seed_plan()), seeded)
        self.assertEqual(len(seed_content.default_enemies()), self._count("enemy"))
        self.assertEqual(len(seed_content.default_storybooks()), self._count("storybook"))

    def test_second_run_does_not_duplicate_content(self) -> None:
        migrate.migrate(self.database_url)
        _, seeded = migrate.migrate(self.database_url)

        self.assertEqual(0, seeded)
        self.assertEqual(len(seed_content.default_events()), self._count("random_event"))

    def test_no_seed_creates_empty_tables(self) -> None:
        _, seeded = migrate.migrate(self.database_url, seed=False)

        self.assertEqual(0, seeded)
        self.assertEqual(0, self._count("skill"))

    def test_dialects_render_their_primary_keys(self) -> None:
        self.assertIn("AUTO_INCREMENT", migrate.schema_statements("mysql")[0])
        self.assertIn("AUTOINCREMENT", migrate.schema_statements("sqlite")[0])


if __name__ == "__main__":
    unittest.main()
