import logging

from services.table_range import TableSchema
from utils.settings import USER_TAB

logger = logging.getLogger(__name__)

USER_SCHEMA = TableSchema(['username', 'password'])


class CredentialStore:
    """Username/password rows kept in the ``User`` tab (plaintext, first match wins)"""

    def __init__(self, table, tab_locks, tab=USER_TAB):
        self.table = table
        self.locks = tab_locks
        self.tab = tab

    def list_users(self):
        data = self.table.read_rows(self.tab, width=USER_SCHEMA.width, header=False,
                                    columns=USER_SCHEMA.width)
        return data.rows

    def update_user(self, current_username, current_password, new_username, new_password):
        """Replace the first row matching the current credentials.

        Returns the number of rows changed. Nothing is written when no row
        matches.
        """
        with self.locks.hold(self.tab):
            rows = self.list_users()
            for position, row in enumerate(rows):
                user = USER_SCHEMA.decode(row)
                if user['username'] == current_username and user['password'] == current_password:
                    rows[position] = USER_SCHEMA.encode({'username': new_username, 'password': new_password})
                    break
            else:
                logger.warning("No user row matched the supplied credentials")
                return 0

            self.table.replace_range(self.tab, rows, USER_SCHEMA.width)
        logger.info("Updated credentials for user row %d", position + 2)
        return 1
