"""Maintenance scripts: user bootstrap, account maintenance and sample-service seeding."""

import unittest
from collections import Counter
from types import ModuleType
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from catalog.core.database import create_db_engine, create_session_factory
from catalog.core.errors import InternalError
from catalog.core.roles import Role
from catalog.models import Base, Service, User
from catalog.scripts import change_password as change_password_script
from catalog.scripts import create_user as create_user_script
from catalog.scripts import deactivate_user as deactivate_user_script
from catalog.scripts.create_user import create_user
from catalog.scripts.seed_services import SAMPLE_SERVICES, clean_services, seed_services
from tests.helpers import add_service, add_user, make_session, make_settings


class TestCreateUserScript(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()

    def tearDown(self) -> None:
        self.db.close()

    def test_creates_superadmin(self) -> None:
        user = create_user(self.db, "Root@Catalog.io", "Secret1", "Super Administrator", Role.SUPERADMIN)
        self.assertEqual(user.email, "root@catalog.io")
        self.assertEqual(user.role, Role.SUPERADMIN)
        self.assertTrue(user.verify_password("Secret1"))

    def test_rejects_existing_email_and_bad_input(self) -> None:
        create_user(self.db, "root@catalog.io", "Secret1", "Root", Role.SUPERADMIN)
        with self.assertRaises(ValueError):
            create_user(self.db, "ROOT@catalog.io", "Secret1", "Root", Role.SUPERADMIN)
        with self.assertRaises(ValueError):
            create_user(self.db, "x@catalog.io", "Secret1", "R", Role.ADMIN)
        with self.assertRaises(ValueError):
            create_user(self.db, "y@catalog.io", "123", "Yan", Role.ADMIN)
        self.assertEqual(self.db.query(User).count(), 1)

    def test_rejects_malformed_email(self) -> None:
        for email in ("not-an-email", "root@", "root@catalog"):
            with self.assertRaises(ValueError):
                create_user(self.db, email, "Secret1", "Root", Role.SUPERADMIN)
        self.assertEqual(self.db.query(User).count(), 0)


class ScriptMainTestCase(unittest.TestCase):
    """Runs a script's main() against a shared in-memory database."""

    def setUp(self) -> None:
        self.settings = make_settings()
        self.engine = create_db_engine(self.settings)
        Base.metadata.create_all(self.engine)
        self.db = create_session_factory(self.engine)()

    def tearDown(self) -> None:
        self.db.close()

    def run_main(self, module: ModuleType, *argv: str) -> int:
        with patch.object(module, "load_dotenv"), patch.object(
            module, "get_settings", return_value=self.settings
        ), patch.object(module, "create_db_engine", return_value=self.engine):
            return module.main(list(argv))

    def reload(self, email: str) -> User:
        self.db.expire_all()
        return self.db.query(User).filter(User.email == email).one()


class TestCreateUserMain(ScriptMainTestCase):
    def test_creates_user(self) -> None:
        self.assertEqual(self.run_main(create_user_script, "root@catalog.io", "Secret1"), 0)
        self.assertEqual(self.reload("root@catalog.io").role, Role.SUPERADMIN)

    def test_bad_input_exits_1(self) -> None:
        self.assertEqual(self.run_main(create_user_script, "not-an-email", "Secret1"), 1)
        self.assertEqual(self.db.query(User).count(), 0)

    def test_database_error_exits_1(self) -> None:
        failure = OperationalError("INSERT INTO users", {}, Exception("database is locked"))
        with patch.object(create_user_script, "create_user", side_effect=failure):
            self.assertEqual(self.run_main(create_user_script, "root@catalog.io", "Secret1"), 1)


class TestDeactivateUserMain(ScriptMainTestCase):
    def test_deactivates(self) -> None:
        add_user(self.db, "ada@catalog.io", role=Role.ADMIN)
        self.assertEqual(self.run_main(deactivate_user_script, "ada@catalog.io"), 0)
        self.assertFalse(self.reload("ada@catalog.io").active)

    def test_unknown_user_exits_1(self) -> None:
        self.assertEqual(self.run_main(deactivate_user_script, "nobody@catalog.io"), 1)

    def test_store_failure_exits_1(self) -> None:
        add_user(self.db, "ada@catalog.io", role=Role.ADMIN)
        failure = InternalError(details="connection lost")
        with patch.object(deactivate_user_script, "deactivate_user", side_effect=failure):
            self.assertEqual(self.run_main(deactivate_user_script, "ada@catalog.io"), 1)


class TestChangePasswordMain(ScriptMainTestCase):
    def test_changes_password(self) -> None:
        add_user(self.db, "ada@catalog.io", role=Role.ADMIN)
        self.assertEqual(self.run_main(change_password_script, "ada@catalog.io", "NewSecret2"), 0)
        user = self.reload("ada@catalog.io")
        self.assertTrue(user.verify_password("NewSecret2"))
        self.assertFalse(user.verify_password("Secret1"))

    def test_short_password_exits_1(self) -> None:
        add_user(self.db, "ada@catalog.io", role=Role.ADMIN)
        self.assertEqual(self.run_main(change_password_script, "ada@catalog.io", "123"), 1)
        self.assertTrue(self.reload("ada@catalog.io").verify_password("Secret1"))

    def test_unknown_user_exits_1(self) -> None:
        self.assertEqual(self.run_main(change_password_script, "nobody@catalog.io", "NewSecret2"), 1)


class TestSeedServices(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()

    def tearDown(self) -> None:
        self.db.close()

    def test_round_robin_over_active_managers(self) -> None:
        root = add_user(self.db, "root@catalog.io", role=Role.SUPERADMIN)
        ada = add_user(self.db, "ada@catalog.io", role=Role.ADMIN)
        add_user(self.db, "old@catalog.io", role=Role.ADMIN, active=False)
        add_user(self.db, "carl@catalog.io", role=Role.CLIENT)

        created = seed_services(self.db)
        self.assertEqual(created, len(SAMPLE_SERVICES))
        owners = Counter(s.owner_id for s in self.db.query(Service).all())
        self.assertEqual(set(owners), {root.id, ada.id})
        self.assertEqual(owners[root.id], 8)
        self.assertEqual(owners[ada.id], 7)

    def test_skips_when_services_exist_unless_forced(self) -> None:
        ada = add_user(self.db, "ada@catalog.io", role=Role.ADMIN)
        add_service(self.db, ada)
        self.assertEqual(seed_services(self.db), 0)
        self.assertEqual(self.db.query(Service).count(), 1)
        self.assertEqual(seed_services(self.db, force=True), len(SAMPLE_SERVICES))
        self.assertEqual(self.db.query(Service).count(), len(SAMPLE_SERVICES) + 1)

    def test_no_owner_available(self) -> None:
        add_user(self.db, "carl@catalog.io", role=Role.CLIENT)
        self.assertEqual(seed_services(self.db), 0)
        self.assertEqual(self.db.query(Service).count(), 0)

    def test_clean(self) -> None:
        ada = add_user(self.db, "ada@catalog.io", role=Role.ADMIN)
        add_service(self.db, ada, name="One")
        add_service(self.db, ada, name="Two")
        self.assertEqual(clean_services(self.db), 2)
        self.assertEqual(self.db.query(Service).count(), 0)


if __name__ == "__main__":
    unittest.main()
