"""Create the attendance tab for every class and the User tab.

Run with:

    python scripts/bootstrap_sheets.py

This script is idempotent: existing tabs are left untouched, missing tabs
are created and given their header row.
"""
import sys
from pathlib import Path

# When this script is executed as `python scripts/bootstrap_sheets.py` the
# interpreter's sys.path[0] is the `scripts/` directory, so `app` (at the
# project root) isn't importable. Add the project root to sys.path.
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

from app import app
from services import get_services
from services.attendance import STUDENT_SCHEMA
from services.credentials import USER_SCHEMA
from utils.settings import CLASSES, USER_TAB


def bootstrap(services):
    existing = {tab['title'] for tab in services.sheets.list_tabs()}
    wanted = [(name, STUDENT_SCHEMA.fields) for name in CLASSES] + [(USER_TAB, USER_SCHEMA.fields)]

    created = []
    for title, headers in wanted:
        if title in existing:
            continue
        services.sheets.create_tab(title)
        services.table.write_header(title, list(headers))
        created.append(title)
    return created, sorted(existing)


if __name__ == '__main__':
    with app.app_context():
        created, existing = bootstrap(get_services())
    print('Created tabs:', created)
    print('Existing tabs:', existing)
