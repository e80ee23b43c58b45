import pytest

from conftest import MemoryStorage
from models import EditSession, Filter, Task
from store import TaskStore


def texts(tasks):
    return [t.text for t in tasks]


def test_initialize_with_nothing_stored(store):
    assert store.tasks == ()
    assert store.remaining_count == 0
    assert store.filter is Filter.ALL
    assert store.search == ''
    assert store.editing is None


def test_initialize_rehydrates_stored_tasks():
    stored = [Task(id='a', text='one', completed=True, created_at=1),
              Task(id='b', text='two', created_at=2)]
    s = TaskStore(MemoryStorage(stored))
    s.initialize()
    assert list(s.tasks) == stored
    assert s.remaining_count == 1


def test_add_prepends_and_saves(store, memory_storage):
    task = store.add("  buy milk  ")
    assert task is not None
    first = store.tasks[0]
    assert first.text == "buy milk"
    assert first.completed is False
    assert first.created_at > 0
    assert memory_storage.saves[-1] == [first]


@pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
def test_add_blank_is_noop(store, memory_storage, raw):
    store.add("keep")
    saves = len(memory_storage.saves)
    version = store.version
    assert store.add(raw) is None
    assert texts(store.tasks) == ["keep"]
    assert store.remaining_count == 1
    assert len(memory_storage.saves) == saves
    assert store.version == version


def test_ids_stay_unique(store):
    for i in range(50):
        store.add(f"task {i}")
        if i % 7 == 0:
            store.remove(store.tasks[-1].id)
        ids = [t.id for t in store.tasks]
        assert len(ids) == len(set(ids))


def test_removed_ids_are_not_reused(store):
    gone = store.add("gone")
    store.remove(gone.id)
    fresh = [store.add(f"x{i}") for i in range(20)]
    assert gone.id not in {t.id for t in fresh}


def test_toggle_twice_restores(store):
    task = store.add("a")
    store.toggle(task.id)
    assert store.get(task.id).completed is True
    store.toggle(task.id)
    assert store.get(task.id).completed is False


def test_toggle_unknown_id_changes_nothing(store):
    store.add("a")
    before = store.tasks
    store.toggle("missing")
    assert store.tasks == before


def test_remove_unknown_id_changes_nothing(store):
    store.add("a")
    before = store.tasks
    store.remove("missing")
    assert store.tasks == before


def test_toggle_all_is_collective(store):
    store.add("a")
    store.add("b")
    store.toggle_all()
    assert all(t.completed for t in store.tasks)
    store.toggle_all()
    assert not any(t.completed for t in store.tasks)


def test_toggle_all_with_mixed_state_completes_everything(store):
    a = store.add("a")
    store.add("b")
    store.toggle(a.id)
    store.toggle_all()
    assert all(t.completed for t in store.tasks)


def test_toggle_all_on_empty_collection(store):
    store.toggle_all()
    assert store.tasks == ()


def test_clear_completed(store, memory_storage):
    a = store.add("a")
    store.add("b")
    store.toggle(a.id)
    store.clear_completed()
    assert texts(store.tasks) == ["b"]
    assert store.visible_tasks(Filter.COMPLETED, "") == []
    assert memory_storage.saves[-1] == list(store.tasks)


def test_reset(store, memory_storage):
    store.add("a")
    store.begin_edit(store.tasks[0].id)
    store.reset()
    assert store.tasks == ()
    assert store.editing is None
    assert memory_storage.saves[-1] == []


def test_begin_edit_seeds_draft(store):
    task = store.add("draft me")
    store.begin_edit(task.id)
    assert store.editing == EditSession(task_id=task.id, draft="draft me")


def test_begin_edit_replaces_previous_session(store):
    a = store.add("a")
    b = store.add("b")
    store.begin_edit(a.id)
    store.update_draft("changed")
    store.begin_edit(b.id)
    assert store.editing == EditSession(task_id=b.id, draft="b")
    assert store.get(a.id).text == "a"


def test_begin_edit_unknown_id_keeps_session(store):
    a = store.add("a")
    store.begin_edit(a.id)
    store.begin_edit("missing")
    assert store.editing.task_id == a.id


def test_save_edit_replaces_text(store, memory_storage):
    task = store.add("old")
    store.begin_edit(task.id)
    store.save_edit(task.id, "  new  ")
    assert store.get(task.id).text == "new"
    assert store.editing is None
    assert memory_storage.saves[-1][0].text == "new"


def test_save_edit_uses_session_draft(store):
    task = store.add("old")
    store.begin_edit(task.id)
    store.update_draft("from draft")
    store.save_edit(task.id)
    assert store.get(task.id).text == "from draft"


def test_save_edit_ignores_draft_of_another_task(store):
    a = store.add("a")
    b = store.add("b")
    store.begin_edit(a.id)
    store.update_draft("draft for a")
    store.save_edit(b.id)
    assert store.get(b.id).text == "b"
    assert store.get(a.id).text == "a"
    assert store.editing == EditSession(task_id=a.id, draft="draft for a")
    store.save_edit(a.id)
    assert store.get(a.id).text == "draft for a"


def test_save_edit_without_session_is_noop(store, memory_storage):
    task = store.add("a")
    saves = len(memory_storage.saves)
    store.save_edit(task.id)
    assert store.get(task.id).text == "a"
    assert len(memory_storage.saves) == saves


@pytest.mark.parametrize("draft", ["", "   "])
def test_save_edit_blank_cancels(store, memory_storage, draft):
    task = store.add("keep me")
    store.begin_edit(task.id)
    saves = len(memory_storage.saves)
    store.save_edit(task.id, draft)
    assert store.get(task.id).text == "keep me"
    assert store.editing is None
    assert len(memory_storage.saves) == saves


def test_cancel_edit_does_not_write(store, memory_storage):
    task = store.add("a")
    store.begin_edit(task.id)
    store.update_draft("zzz")
    saves = len(memory_storage.saves)
    store.cancel_edit()
    assert store.editing is None
    assert store.get(task.id).text == "a"
    assert len(memory_storage.saves) == saves


def test_update_draft_without_session_is_noop(store):
    store.update_draft("nothing")
    assert store.editing is None


def test_removing_edited_task_ends_session(store):
    a = store.add("a")
    store.begin_edit(a.id)
    store.remove(a.id)
    assert store.editing is None


def test_clear_completed_ends_session_of_cleared_task(store):
    a = store.add("a")
    b = store.add("b")
    store.toggle(a.id)
    store.begin_edit(a.id)
    store.clear_completed()
    assert store.editing is None
    store.begin_edit(b.id)
    store.clear_completed()
    assert store.editing.task_id == b.id


def test_visible_tasks_filters(store):
    a = store.add("a")
    store.add("b")
    store.toggle(a.id)
    assert all(not t.completed for t in store.visible_tasks("active", ""))
    assert all(t.completed for t in store.visible_tasks("completed", ""))
    assert store.visible_tasks("all", "") == list(store.tasks)


def test_visible_tasks_search_is_case_insensitive(store):
    store.add("Buy MILK")
    store.add("walk dog")
    assert texts(store.visible_tasks(Filter.ALL, "milk")) == ["Buy MILK"]
    assert texts(store.visible_tasks(Filter.ALL, "   ")) == ["walk dog", "Buy MILK"]


def test_visible_tasks_combines_filter_and_search(store):
    a = store.add("milk a")
    store.add("milk b")
    store.toggle(a.id)
    assert texts(store.visible_tasks(Filter.ACTIVE, "MILK")) == ["milk b"]


def test_visible_tasks_defaults_to_view_state(store):
    a = store.add("apple")
    store.add("banana")
    store.toggle(a.id)
    store.set_filter("completed")
    assert texts(store.visible_tasks()) == ["apple"]
    store.set_filter(Filter.ALL)
    store.set_search("BAN")
    assert texts(store.visible_tasks()) == ["banana"]


def test_visible_tasks_does_not_mutate(store):
    a = store.add("a")
    store.toggle(a.id)
    store.visible_tasks(Filter.ACTIVE, "zzz")
    assert len(store.tasks) == 1


def test_set_filter_rejects_unknown_value(store):
    with pytest.raises(ValueError):
        store.set_filter("someday")


def test_view_state_changes_are_not_saved(store, memory_storage):
    saves = len(memory_storage.saves)
    store.set_filter(Filter.ACTIVE)
    store.set_search("x")
    assert len(memory_storage.saves) == saves


def test_subscribers_notified_and_unsubscribed(store):
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append(store.version))
    store.add("a")
    store.set_search("a")
    assert len(calls) == 2
    assert calls[0] < calls[1]
    unsubscribe()
    store.add("b")
    assert len(calls) == 2


def test_save_failure_keeps_memory_state():
    class BrokenStorage(MemoryStorage):
        def save(self, tasks):
            return False

    s = TaskStore(BrokenStorage())
    s.initialize()
    s.add("still here")
    assert texts(s.tasks) == ["still here"]


def test_store_without_storage():
    s = TaskStore()
    s.initialize()
    s.add("a")
    assert s.remaining_count == 1


def test_end_to_end_scenario(store):
    a = store.add("a")
    b = store.add("b")
    assert texts(store.tasks) == ["b", "a"]
    store.toggle(a.id)
    assert store.remaining_count == 1
    store.remove(b.id)
    assert texts(store.tasks) == ["a"]
    assert store.remaining_count == 0
