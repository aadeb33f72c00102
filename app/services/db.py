import motor.motor_asyncio
from pymongo import ASCENDING, DESCENDING

from app.utils import config
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

CANDIDATES_COLLECTION = "candidates"
USERS_COLLECTION = "users"

logger.info(f"Initializing MongoDB connection to database: {config.DB_NAME}")

# Initialize client
try:
    client = motor.motor_asyncio.AsyncIOMotorClient(config.MONGO_DETAILS)
    db = client[config.DB_NAME]
    logger.info("MongoDB client initialized successfully")
except Exception as e:
    logger.error(f"Failed to initialize MongoDB client: {e}")
    raise

# Collections
candidates_coll = db[CANDIDATES_COLLECTION]
users_coll = db[USERS_COLLECTION]


async def _ensure_index(coll, keys, **kwargs):
    name = ", ".join(k for k, _ in keys)
    try:
        await coll.create_index(keys, **kwargs)
        logger.debug(f"Created index on {coll.name}.({name})")
    except Exception as e:
        if "already exists" in str(e).lower():
            logger.debug(f"Index on {coll.name}.({name}) already exists")
        else:
            logger.warning(f"Could not create index on {coll.name}.({name}): {e}")


async def init_indexes():
    """Index initialization for collections."""
    logger.info("Starting database index initialization")

    await _ensure_index(candidates_coll, [("candidate_id", ASCENDING)], unique=True)

    # Duplicate lookups hit these
    await _ensure_index(candidates_coll, [("email", ASCENDING)])
    await _ensure_index(candidates_coll, [("phone", ASCENDING)])
    await _ensure_index(candidates_coll, [("fingerprint", ASCENDING)])

    # Role-scoped listing
    await _ensure_index(candidates_coll, [("recruiter_id", ASCENDING), ("created_at", DESCENDING)])

    await _ensure_index(users_coll, [("user_id", ASCENDING)], unique=True)

    logger.info("Database index initialization completed")
