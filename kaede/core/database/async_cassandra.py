"""Cassandra connection and schema bootstrap (cassandra-asyncio-driver).

The session returned here exposes ``aexecute()``; every store query goes
through it. Keyspace and tables are created on startup if missing.
"""

import structlog
from cassandra.auth import PlainTextAuthProvider
from cassandra.policies import DCAwareRoundRobinPolicy, TokenAwarePolicy
from cassandra_asyncio.cluster import Cluster

from kaede.comments.models import COMMENTS_TABLES_CQL
from kaede.config.settings import Settings
from kaede.posts.models import POSTS_TABLES_CQL


logger = structlog.get_logger(__name__)

SCHEMA_CQL = [*POSTS_TABLES_CQL, *COMMENTS_TABLES_CQL]


class AsyncCassandraConnection:
    """Process-wide cluster and session."""

    _cluster: Cluster | None = None
    _session = None  # cassandra_asyncio session

    @classmethod
    def connect(cls, settings: Settings):
        """Connect to the cluster, reusing an open session.

        Raises:
            ConnectionError: If no contact point can be reached.
        """
        if cls._session is not None:
            return cls._session

        auth_provider = None
        if settings.cassandra_username and settings.cassandra_password:
            auth_provider = PlainTextAuthProvider(
                username=settings.cassandra_username,
                password=settings.cassandra_password,
            )

        cluster = Cluster(
            contact_points=settings.cassandra_hosts,
            port=settings.cassandra_port,
            auth_provider=auth_provider,
            protocol_version=settings.cassandra_protocol_version,
            load_balancing_policy=TokenAwarePolicy(DCAwareRoundRobinPolicy()),
            connect_timeout=settings.cassandra_connect_timeout,
        )
        try:
            session = cluster.connect()
        except Exception as e:
            cluster.shutdown()
            logger.error(
                "cassandra_connection_failed",
                hosts=settings.cassandra_hosts,
                error=str(e),
            )
            raise ConnectionError(f"Failed to connect to Cassandra: {e}") from e

        session.default_timeout = settings.cassandra_request_timeout
        cls._cluster, cls._session = cluster, session
        logger.info(
            "cassandra_connected",
            hosts=settings.cassandra_hosts,
            port=settings.cassandra_port,
        )
        return session

    @classmethod
    def disconnect(cls) -> None:
        """Shut the session and cluster down."""
        if cls._session is not None:
            cls._session.shutdown()
        if cls._cluster is not None:
            cls._cluster.shutdown()
            logger.info("cassandra_disconnected")
        cls._cluster, cls._session = None, None

    @classmethod
    def is_connected(cls) -> bool:
        """Check if a live session is open."""
        return cls._session is not None and not cls._session.is_shutdown


def keyspace_cql(keyspace: str, replication_factor: int, production: bool) -> str:
    """Build the CREATE KEYSPACE statement.

    Production clusters use NetworkTopologyStrategy on ``datacenter1``.
    """
    if production:
        replication = (
            f"{{'class': 'NetworkTopologyStrategy', "
            f"'datacenter1': {replication_factor}}}"
        )
    else:
        replication = (
            f"{{'class': 'SimpleStrategy', "
            f"'replication_factor': {replication_factor}}}"
        )
    return (
        f"CREATE KEYSPACE IF NOT EXISTS {keyspace} "
        f"WITH replication = {replication} AND durable_writes = true"
    )


async def init_async_cassandra(settings: Settings):
    """Connect and make sure keyspace and tables exist.

    Returns:
        Session with ``aexecute()`` support, bound to the keyspace.
    """
    keyspace = settings.cassandra_keyspace
    session = AsyncCassandraConnection.connect(settings)

    await session.aexecute(
        keyspace_cql(
            keyspace,
            settings.cassandra_replication_factor,
            production=settings.is_production,
        )
    )
    session.set_keyspace(keyspace)

    for table_cql in SCHEMA_CQL:
        await session.aexecute(table_cql.format(keyspace=keyspace))

    logger.info("cassandra_schema_ready", keyspace=keyspace, tables=len(SCHEMA_CQL))
    return session


async def shutdown_async_cassandra() -> None:
    """Close the Cassandra connection."""
    AsyncCassandraConnection.disconnect()
