import pytest

from services.sheet_lifecycle import SheetLifecycleManager
from utils.errors import NotFoundError, RemoteServiceError
from utils.locks import KeyedLock


def test_create_then_delete_tab(sheets):
    manager = SheetLifecycleManager(sheets, KeyedLock())
    manager.create_tab('Class7')
    assert 'Class7' in [tab['title'] for tab in manager.list_tabs()]

    manager.delete_tab('Class7')
    assert 'Class7' not in sheets.tabs


def test_delete_resolves_numeric_id(sheets):
    manager = SheetLifecycleManager(sheets, KeyedLock())
    sheet_id = sheets.ids['Class1']
    manager.delete_tab('Class1')
    assert ('batch', 'batchUpdate') in sheets.calls
    assert sheet_id not in sheets.ids.values()


def test_delete_unknown_tab_is_not_found(sheets):
    manager = SheetLifecycleManager(sheets, KeyedLock())
    with pytest.raises(NotFoundError) as excinfo:
        manager.delete_tab('Class9')
    assert excinfo.value.message == "Sheet 'Class9' not found."
    assert not any(kind == 'batch' for kind, _ in sheets.calls)


def test_create_existing_tab_is_remote_failure(sheets):
    with pytest.raises(RemoteServiceError):
        SheetLifecycleManager(sheets, KeyedLock()).create_tab('Class1')


def test_bootstrap_creates_missing_tabs_once(services, sheets):
    from scripts.bootstrap_sheets import bootstrap

    created, existing = bootstrap(services)
    assert 'Class1' in existing and 'User' in existing
    assert 'Class1' not in created
    assert 'LKG' in created
    assert sheets.rows('LKG') == [['RollNumber', 'StudentName', 'ParentEmail', 'Section']]

    created_again, _ = bootstrap(services)
    assert created_again == []
