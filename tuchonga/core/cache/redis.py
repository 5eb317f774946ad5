import redis

from tuchonga.core.config import REDIS_HOST, REDIS_PORT, REDIS_DB

# connections are opened lazily on the first command
redis_client = redis.Redis(
    host=REDIS_HOST,
    port=REDIS_PORT,
    db=REDIS_DB,
    decode_responses=True,
)
