DEFAULT_DATABASE_NAME = 'example-db'
USERS_COLLECTION_NAME = 'users'
