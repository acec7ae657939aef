# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_database_url,
    reset_vault_state,
)
from clients.postgres_client import PostgresClient
