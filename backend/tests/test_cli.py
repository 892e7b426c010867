"""CLI command tests (flask system/users/tokens)."""

from plantmarket.models import Role, User


class TestSystemInit:
    def test_creates_default_admin_once(self, app, db_session):
        runner = app.test_cli_runner()

        first = runner.invoke(args=["system", "init"])
        assert first.exit_code == 0
        assert "Created admin: admin@plantmarket.local" in first.output

        second = runner.invoke(args=["system", "init"])
        assert second.exit_code == 0
        assert "already exists" in second.output

        db_session.expire_all()
        assert db_session.query(User).filter_by(role=Role.ADMIN).count() == 1


class TestUsersCommands:
    def test_create_admin(self, app, db_session):
        runner = app.test_cli_runner()
        result = runner.invoke(args=[
            "users", "create-admin", "--name", "Ops", "--email", "ops@example.com", "--password", "secret1",
        ])
        assert result.exit_code == 0
        assert "PASS Created admin: ops@example.com" in result.output

        again = runner.invoke(args=[
            "users", "create-admin", "--name", "Ops", "--email", "ops@example.com", "--password", "secret1",
        ])
        assert "FAIL" in again.output

    def test_list_filters_by_role(self, app, customer, seller):
        result = app.test_cli_runner().invoke(args=["users", "list", "--role", "seller"])
        assert result.exit_code == 0
        assert "seller@example.com" in result.output
        assert "customer@example.com" not in result.output


class TestTokensCommands:
    def test_cleanup_reports_count(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["tokens", "cleanup"])
        assert result.exit_code == 0
        assert "Deleted 0 expired token revocations" in result.output
