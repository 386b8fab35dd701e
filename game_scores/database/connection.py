import asyncpg
import asyncio
from ..config import database
from ..logger import get_logger

logger = get_logger()

class DatabaseConnection:
    def __init__(self, config=database):
        self.config = config
        self.pool = None
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def initialize(self):
        """Open the connection pool and provision tables"""
        if self._initialized:
            return

        async with self._init_lock:
            if self._initialized:  # Double check after acquiring lock
                return

            try:
                self.pool = await asyncpg.create_pool(
                    host=self.config.HOST,
                    port=self.config.PORT,
                    database=self.config.DB,
                    user=self.config.USER,
                    password=self.config.PASSWORD.get_secret_value(),
                    min_size=self.config.MIN_POOL_SIZE,
                    max_size=self.config.MAX_POOL_SIZE,
                    command_timeout=self.config.COMMAND_TIMEOUT,
                    max_inactive_connection_lifetime=300.0,
                    setup=self._setup_connection
                )

                async with self.pool.acquire() as conn:
                    await self.create_tables(conn)

                self._initialized = True
                logger.info("Database connection initialized successfully")
            except Exception as e:
                logger.error(f"Failed to initialize database connection: {e}")
                await self.close()
                raise

    @staticmethod
    async def create_tables(conn):
        """Create the games and game_scores tables if they don't exist"""
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS games (
                title VARCHAR(200) PRIMARY KEY,
                added_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                times_played INTEGER NOT NULL DEFAULT 0
            )
        ''')
        await conn.execute('''
            CREATE TABLE IF NOT EXISTS game_scores (
                id VARCHAR(64) PRIMARY KEY,
                game_title VARCHAR(200) NOT NULL,
                player_id VARCHAR(200) NOT NULL,
                player_username VARCHAR(200) NOT NULL,
                score NUMERIC NOT NULL,
                created_at TIMESTAMPTZ NOT NULL
            )
        ''')
        await conn.execute('''
            CREATE INDEX IF NOT EXISTS idx_game_scores_game_score
            ON game_scores(game_title, score DESC)
        ''')
        await conn.execute('''
            CREATE INDEX IF NOT EXISTS idx_game_scores_player_score
            ON game_scores(player_id, score DESC)
        ''')

    async def _setup_connection(self, connection):
        """Setup connection with proper settings"""
        await connection.execute('SET statement_timeout = 30000')
        await connection.execute('SET idle_in_transaction_session_timeout = 30000')
        await connection.execute('SET lock_timeout = 10000')

    async def close(self):
        """Close database connections"""
        if self.pool:
            await self.pool.close()
            self.pool = None
        self._initialized = False

    def acquire(self):
        """Acquire a pooled connection, for use with ``async with``"""
        if not self._initialized:
            raise RuntimeError("Database connection not initialized")
        return self.pool.acquire()
