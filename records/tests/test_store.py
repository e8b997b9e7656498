from unittest import mock

import pytest
from django.test import override_settings

from records.collections import DEPARTMENTS, PATIENTS, ROOMS, UnknownCollection
from records.models import RecordSlot
from records.storage import CacheKeyValueStore, DatabaseKeyValueStore, MemoryKeyValueStore, load_backend
from records.services.submissions import submit
from records.store import RecordStore, get_store, reset_store


def test_new_store_lists_empty_collections(memory_store):
    assert memory_store.list(DEPARTMENTS) == []
    assert memory_store.count(PATIENTS) == 0


def test_append_is_most_recent_first(memory_store):
    memory_store.append(DEPARTMENTS, {'dept_name': 'R0'})
    memory_store.append(DEPARTMENTS, {'dept_name': 'R1'})
    memory_store.append(DEPARTMENTS, {'dept_name': 'R2'})
    assert [d['dept_name'] for d in memory_store.list(DEPARTMENTS)] == ['R2', 'R1', 'R0']


def test_append_persists_whole_collection_under_storage_key():
    kv = MemoryKeyValueStore()
    store = RecordStore(kv)
    store.append(ROOMS, {'room_no': '101'})
    store.append(ROOMS, {'room_no': '102'})
    assert kv.get('hm_rooms') == [{'room_no': '102'}, {'room_no': '101'}]


def test_store_loads_existing_slots():
    kv = MemoryKeyValueStore({'hm_departments': [{'dept_name': 'Cardiology'}]})
    assert RecordStore(kv).list(DEPARTMENTS) == [{'dept_name': 'Cardiology'}]


def test_corrupt_slot_loads_as_empty(caplog):
    kv = MemoryKeyValueStore({'hm_patients': {'not': 'a list'}})
    store = RecordStore(kv)
    assert store.list(PATIENTS) == []
    assert 'not a list' in caplog.text


def test_malformed_entries_are_dropped():
    kv = MemoryKeyValueStore({'hm_patients': [{'patient_id': 'PT1'}, 'junk', 3]})
    assert RecordStore(kv).list(PATIENTS) == [{'patient_id': 'PT1'}]


def test_list_returns_copies(memory_store):
    memory_store.append(DEPARTMENTS, {'dept_name': 'Cardiology'})
    listed = memory_store.list(DEPARTMENTS)
    listed[0]['dept_name'] = 'changed'
    listed.append({'dept_name': 'extra'})
    assert memory_store.list(DEPARTMENTS) == [{'dept_name': 'Cardiology'}]


def test_appended_record_is_copied(memory_store):
    record = {'dept_name': 'Cardiology'}
    memory_store.append(DEPARTMENTS, record)
    record['dept_name'] = 'changed'
    assert memory_store.list(DEPARTMENTS)[0]['dept_name'] == 'Cardiology'


def test_snapshot_is_read_only(memory_store):
    memory_store.append(DEPARTMENTS, {'dept_name': 'Cardiology'})
    snap = memory_store.snapshot()
    assert snap[DEPARTMENTS][0]['dept_name'] == 'Cardiology'
    assert snap[PATIENTS] == ()
    with pytest.raises(TypeError):
        snap[DEPARTMENTS][0]['dept_name'] = 'x'
    with pytest.raises(TypeError):
        snap[DEPARTMENTS] = ()


def test_unknown_collection(memory_store):
    with pytest.raises(UnknownCollection):
        memory_store.list('wards')
    with pytest.raises(KeyError):
        memory_store.append('wards', {})


def test_failed_write_leaves_collection_unchanged():
    class BrokenStore(MemoryKeyValueStore):
        broken = False

        def set(self, key, value):
            if self.broken:
                raise OSError('disk full')
            super().set(key, value)

    kv = BrokenStore({'hm_departments': [{'dept_name': 'A'}]})
    store = RecordStore(kv)
    assert store.list(DEPARTMENTS) == [{'dept_name': 'A'}]
    kv.broken = True
    with pytest.raises(OSError):
        store.append(DEPARTMENTS, {'dept_name': 'B'})
    assert store.list(DEPARTMENTS) == [{'dept_name': 'A'}]
    assert kv.get('hm_departments') == [{'dept_name': 'A'}]


def test_memory_backend_round_trips_through_json():
    kv = MemoryKeyValueStore()
    value = [{'a': '1'}]
    kv.set('k', value)
    value[0]['a'] = '2'
    assert kv.get('k') == [{'a': '1'}]
    assert kv.raw('k') == '[{"a": "1"}]'
    assert kv.get('missing') is None


def test_cache_backend():
    kv = CacheKeyValueStore()
    kv.set('hm_rooms', [{'room_no': '101'}])
    assert kv.get('hm_rooms') == [{'room_no': '101'}]
    assert RecordStore(kv).list(ROOMS) == [{'room_no': '101'}]


@pytest.mark.django_db
def test_database_backend_writes_slot_rows():
    store = RecordStore(DatabaseKeyValueStore())
    store.append(DEPARTMENTS, {'dept_name': 'Cardiology'})
    store.append(DEPARTMENTS, {'dept_name': 'Neurology'})
    slot = RecordSlot.objects.get(key='hm_departments')
    assert [d['dept_name'] for d in slot.value] == ['Neurology', 'Cardiology']
    # A fresh store reloads from the database.
    assert RecordStore(DatabaseKeyValueStore()).list(DEPARTMENTS) == slot.value


def test_load_backend_from_settings():
    with override_settings(RECORDS_STORAGE_BACKEND='records.storage.MemoryKeyValueStore'):
        assert isinstance(load_backend(), MemoryKeyValueStore)
        reset_store()
        assert isinstance(get_store().kv, MemoryKeyValueStore)
        assert get_store() is get_store()


def test_cache_backend_is_read_through():
    first = RecordStore(CacheKeyValueStore(prefix='read-through:'))
    second = RecordStore(CacheKeyValueStore(prefix='read-through:'))
    assert first.list(ROOMS) == second.list(ROOMS) == []
    first.append(ROOMS, {'room_no': '101'})
    second.append(ROOMS, {'room_no': '102'})
    assert first.list(ROOMS) == [{'room_no': '102'}, {'room_no': '101'}]


@pytest.mark.django_db
@mock.patch('records.services.submissions.announce_append')
def test_database_stores_in_two_workers_share_slots(announce):
    worker_a, worker_b = RecordStore(DatabaseKeyValueStore()), RecordStore(DatabaseKeyValueStore())
    assert worker_a.list(DEPARTMENTS) == worker_b.list(DEPARTMENTS) == []

    assert submit(DEPARTMENTS, {'dept_name': 'Cardiology'}, store=worker_a).ok
    duplicate = submit(DEPARTMENTS, {'dept_name': 'Cardiology'}, store=worker_b)
    assert not duplicate.ok
    assert duplicate.flash.text == 'Department already exists.'
    assert submit(DEPARTMENTS, {'dept_name': 'Neurology'}, store=worker_b).ok

    persisted = RecordSlot.objects.get(key='hm_departments').value
    assert persisted == [{'dept_name': 'Neurology'}, {'dept_name': 'Cardiology'}]
    assert worker_a.list(DEPARTMENTS) == persisted


@pytest.mark.django_db
def test_database_transaction_rolls_back_with_the_store():
    store = RecordStore(DatabaseKeyValueStore())
    store.append(DEPARTMENTS, {'dept_name': 'Cardiology'})
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.append(DEPARTMENTS, {'dept_name': 'Neurology'})
            raise RuntimeError('abort')
    assert store.list(DEPARTMENTS) == [{'dept_name': 'Cardiology'}]
    assert RecordSlot.objects.get(key='hm_departments').value == [{'dept_name': 'Cardiology'}]
