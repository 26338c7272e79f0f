from storefront.db.database import ConnectionProvider


class StoreError(Exception):
    """Any data-access failure, collapsed into one error type for the API layer"""


class StoreBase:
    """Shared plumbing for the SQL-backed stores"""

    def __init__(self, provider: ConnectionProvider):
        self.provider = provider
