"""MongoDB adapters and collection names."""

USERS_COLLECTION_NAME = 'users'
DEPOSITS_COLLECTION_NAME = 'deposits'
