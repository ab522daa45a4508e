from unittest.mock import patch

import pytest

from app.db import CONSTRAINTS, DatabaseManager
from app.utils.singleton import SingletonMeta


@pytest.mark.unit
class TestDatabaseManager:
    @pytest.fixture(autouse=True)
    def graph_database(self, monkeypatch):
        monkeypatch.setenv("NEO4J_URI", "bolt://localhost:7687")
        monkeypatch.setenv("NEO4J_DATABASE", "hoots")
        SingletonMeta._instances.pop(DatabaseManager, None)
        with patch("app.db.GraphDatabase") as mock_graph_database:
            yield mock_graph_database
        SingletonMeta._instances.pop(DatabaseManager, None)

    def test_is_singleton(self):
        assert DatabaseManager() is DatabaseManager()

    def test_verifies_connectivity_on_creation(self, graph_database):
        DatabaseManager()

        test_driver = graph_database.driver.return_value.__enter__.return_value
        test_driver.verify_connectivity.assert_called_once()

    def test_driver_is_reused(self, graph_database):
        manager = DatabaseManager()

        assert manager.driver is manager.driver
        assert manager.database == "hoots"

    def test_ensure_constraints(self, graph_database):
        # Arrange
        manager = DatabaseManager()
        session = manager.driver.session.return_value.__enter__.return_value

        # Act
        manager.ensure_constraints()

        # Assert
        statements = [call.args[0] for call in session.run.call_args_list]
        assert statements == list(CONSTRAINTS)
        manager.driver.session.assert_called_with(database="hoots")

    def test_close_releases_driver(self, graph_database):
        manager = DatabaseManager()
        driver = manager.driver

        manager.close()

        driver.close.assert_called_once()
        assert manager._driver is None
