import logging

from utils.errors import NotFoundError

logger = logging.getLogger(__name__)


class SheetLifecycleManager:
    """Create and delete tabs; deletion resolves the title to the tab's numeric id"""

    def __init__(self, store, tab_locks):
        self.store = store
        self.locks = tab_locks

    def list_tabs(self):
        return self.store.get_metadata().unwrap()

    def tab_id(self, title):
        for tab in self.list_tabs():
            if tab['title'] == title:
                return tab['id']
        raise NotFoundError(f"Sheet {title!r} not found.")

    def create_tab(self, title):
        with self.locks.hold(title):
            self.store.batch_update([{'addSheet': {'properties': {'title': title}}}]).unwrap()
        logger.info("Created sheet %s", title)

    def delete_tab(self, title):
        with self.locks.hold(title):
            sheet_id = self.tab_id(title)
            self.store.batch_update([{'deleteSheet': {'sheetId': sheet_id}}]).unwrap()
        logger.info("Deleted sheet %s (id %s)", title, sheet_id)
