"""Seed command tests."""

from virtuebox import config
from virtuebox import seed_admin as seed_module
from virtuebox.utils.user_manager import UserManager


def test_seed_is_idempotent(database):
    assert seed_module.seed_admin(database, "Super Admin", "Admin@VirtueBox.com", "Admin@123")
    assert not seed_module.seed_admin(database, "Someone", "admin@virtuebox.com", "other")

    session = database.session()
    try:
        user = UserManager(session).authenticate("admin@virtuebox.com", "Admin@123")
        assert user.role == "ADMIN"
        assert user.name == "Super Admin"
    finally:
        session.close()


def test_main_uses_database_url(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DATABASE_URL", f"sqlite:///{tmp_path / 'seed.db'}")
    argv = ["--email", "root@example.com", "--password", "pw-123", "--name", "Root"]
    assert seed_module.main(argv) == 0
    # Second run finds the admin and still succeeds
    assert seed_module.main(argv) == 0


def test_main_without_database_url(monkeypatch):
    monkeypatch.setattr(config, "DATABASE_URL", None)
    assert seed_module.main([]) == 1
