import json
import logging

import pytest

from expense_tracker.budget_storage import FORMAT_VERSION, BudgetStorage


def test_missing_file_loads_empty(tmp_path):
    assert BudgetStorage(tmp_path / 'budgets.json').load() == {}


def test_save_writes_versioned_document(tmp_path):
    path = tmp_path / 'nested' / 'budgets.json'
    storage = BudgetStorage(path)

    storage.save({'Food': 250, 'Housing': 1200.5})

    document = json.loads(path.read_text(encoding='utf-8'))
    assert document['version'] == FORMAT_VERSION
    assert document['budgets'] == {'Food': 250.0, 'Housing': 1200.5}
    assert 'saved_at' in document
    assert storage.load() == {'Food': 250.0, 'Housing': 1200.5}


@pytest.mark.parametrize(
    'content',
    [
        b'{not json',
        b'\xff\xfe\x00garbage',
        b'[1, 2, 3]',
        b'{"version": 99, "budgets": {"Food": 10}}',
    ],
)
def test_unreadable_documents_load_empty(tmp_path, caplog, content):
    path = tmp_path / 'budgets.json'
    path.write_bytes(content)

    with caplog.at_level(logging.WARNING, logger='expense_tracker.budget_storage'):
        assert BudgetStorage(path).load() == {}
    assert str(path) in caplog.text


def test_invalid_entries_are_skipped(tmp_path):
    path = tmp_path / 'budgets.json'
    path.write_text(
        json.dumps({
            'version': FORMAT_VERSION,
            'budgets': {'Food': 100, 'Bad': 'lots', 'Negative': -5, 'Zero': 0, 'Null': None},
        }),
        encoding='utf-8',
    )

    assert BudgetStorage(path).load() == {'Food': 100.0, 'Zero': 0.0}


def test_save_failure_raises_os_error(tmp_path):
    blocked = tmp_path / 'budgets.json'
    blocked.mkdir()

    with pytest.raises(OSError, match='Failed to save budgets'):
        BudgetStorage(blocked).save({'Food': 1})
