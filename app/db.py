from os import environ

import structlog
from neo4j import Driver, GraphDatabase

from app.utils.singleton import SingletonMeta

logger = structlog.get_logger()

CONSTRAINTS = (
    "CREATE CONSTRAINT hoot_id_unique IF NOT EXISTS "
    "FOR (hoot:Hoot) REQUIRE hoot.hoot_id IS UNIQUE",
    "CREATE CONSTRAINT comment_id_unique IF NOT EXISTS "
    "FOR (comment:Comment) REQUIRE comment.comment_id IS UNIQUE",
    "CREATE CONSTRAINT user_id_unique IF NOT EXISTS "
    "FOR (user:User) REQUIRE user.user_id IS UNIQUE",
)


class DatabaseManager(metaclass=SingletonMeta):
    """Singleton manager for Neo4j database connections.

    This class manages the lifecycle of the Neo4j driver used by the hoot
    store and the identity lookups, ensuring only one driver is active.

    Attributes:
        _driver: The Neo4j driver instance
        _uri: URI of the Neo4j database
        _auth: Tuple of username and password for authentication
        _database: Name of the Neo4j database to connect to
    """

    def __init__(self) -> None:
        """Initialize the database manager.

        Raises:
            neo4j.exceptions.ServiceUnavailable: If database is not reachable
            neo4j.exceptions.AuthError: If credentials are invalid
        """
        self._driver: Driver | None = None
        self._uri: str = environ.get("NEO4J_URI", "")
        self._auth: tuple[str, str] = (
            environ.get("NEO4J_USER", ""),
            environ.get("NEO4J_PASSWORD", ""),
        )
        self._database: str = environ.get("NEO4J_DATABASE", "")
        self._verify_connectivity()

    def _verify_connectivity(self) -> None:
        with GraphDatabase.driver(self._uri, auth=self._auth) as test_driver:
            test_driver.verify_connectivity()
        logger.info("Neo4j connectivity verified", uri=self._uri)

    @property
    def driver(self) -> Driver:
        """Get or create the Neo4j driver instance.

        Returns:
            The Neo4j driver instance that can be used for database operations
        """
        if not self._driver:
            self._driver = GraphDatabase.driver(
                self._uri,
                auth=self._auth,
                max_connection_pool_size=10,
                connection_timeout=30,
            )
        return self._driver

    @property
    def database(self) -> str:
        return self._database

    def ensure_constraints(self) -> None:
        """Create the uniqueness constraints the hoot graph relies on.

        Safe to call on every startup; existing constraints are left alone.
        """
        with self.driver.session(database=self.database) as session:
            for statement in CONSTRAINTS:
                session.run(statement).consume()
        logger.info("Neo4j constraints ensured", count=len(CONSTRAINTS))

    def close(self) -> None:
        """Close the database connection.

        If no connection exists, this is a no-op.
        """
        if self._driver:
            self._driver.close()
            self._driver = None
