import sys
import os
import json
import re

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kvwiki.config import WikiConfig
from kvwiki.core.keys import Keys
from kvwiki.core.models import Page
from kvwiki.errors import InvalidKeyError, KeyLengthError, StorageError
from kvwiki.services.session import EditorSession
from kvwiki.storage import MemoryStore, PageRepository


class FailingStore(MemoryStore):
    def set(self, key, value):
        raise StorageError("store is down")


def make_session(store=None, **config):
    notices = []
    repo = PageRepository(store if store is not None else MemoryStore())
    session = EditorSession(repo, config=WikiConfig(**config), on_notice=notices.append)
    return session, notices


def test_load_new_page_starts_in_edit_mode():
    session, notices = make_session()
    result = session.load("index.html?p=Home")
    assert result.ok
    assert session.keys == Keys("", "home")
    assert session.page == Page()
    assert session.edit_mode is True
    assert notices == []


def test_load_existing_page_shows_preview():
    store = MemoryStore({"5310okvvikihome": json.dumps({"title": "Home", "content": "hi"})})
    session, _ = make_session(store)
    session.load("index.html?p=home")
    assert session.page.title == "Home"
    assert session.edit_mode is False
    assert session.address() == "index.html?p=home"


def test_save_expands_and_stores():
    session, _ = make_session()
    session.load("index.html?p=home")
    result = session.save("", "new [page](?)")

    assert result.ok
    assert session.page.title == "Untitled Page"
    assert re.fullmatch(r"new \[page\]\([0-9a-f]{8}\)", session.page.content)
    stored = json.loads(session.repo.store.data["5310okvvikihome"])
    assert stored["content"] == session.page.content
    assert session.backup == session.page
    assert session.backup is not session.page


def test_save_failure_sends_notice():
    session, notices = make_session(FailingStore())
    session.load("index.html?p=home")
    result = session.save("T", "text")
    assert not result.ok
    assert isinstance(result.error, StorageError)
    assert [n.level for n in notices] == ["error"]
    assert "store is down" in notices[0].message
    assert notices[0].timeout_ms == 3000


def test_save_without_page_is_noop():
    session, notices = make_session()
    result = session.save("T", "text")
    assert result.ok
    assert result.page is None
    assert session.repo.store.data == {}


def test_load_invalid_key():
    session, notices = make_session()
    result = session.load("index.html?p=%3F%21")
    assert isinstance(result.error, InvalidKeyError)
    assert session.page is None
    assert notices[0].level == "error"


def test_load_key_too_long():
    notices = []
    session = EditorSession(
        PageRepository(MemoryStore(), prefix="x" * 127),
        on_notice=notices.append,
    )
    result = session.load("index.html?p=ab")
    assert isinstance(result.error, KeyLengthError)
    assert notices and notices[0].level == "error"


def test_demo_mode_resets_index():
    session, _ = make_session(demo_mode=True)
    session.load("index.html")
    assert "kvwiki" in session.page.content
    assert session.page.title == "kvwiki"
    assert session.edit_mode is False
    assert "5310okvviki" in session.repo.store.data


def test_demo_mode_leaves_other_pages():
    session, _ = make_session(demo_mode=True)
    session.load("index.html?p=other")
    assert session.page == Page()


def test_delete_and_restore():
    session, notices = make_session()
    session.load("index.html?p=home")
    session.save("Home", "content")

    result = session.delete()
    assert result.ok
    assert session.page is None
    assert session.repo.store.data == {}
    assert notices[-1].level == "info"

    result = session.restore_backup()
    assert result.ok
    assert session.page == Page(title="Home", content="content")
    assert json.loads(session.repo.store.data["5310okvvikihome"])["title"] == "Home"


def test_restore_without_backup():
    session, _ = make_session()
    session.load("index.html?p=home")
    result = session.restore_backup()
    assert result.ok
    assert result.page is None


def test_render_rewrites_shorthand():
    session, _ = make_session()
    session.load("index.html?p=home")
    session.save("Home", "[next](next_page)")
    assert 'href="index.html?p=next_page"' in session.render()


def test_render_without_page():
    session, _ = make_session()
    assert session.render() is None


def test_render_help_keeps_examples():
    session, _ = make_session()
    html = session.render_help()
    assert "[text](page)" in html


def test_open_keys_normalizes():
    session, _ = make_session()
    assert session.open_keys(Keys("NB", "My Page")) == "index.html?p=my_page"


def test_edit_mode_toggle():
    session, _ = make_session()
    assert session.set_edit_mode() is True
    assert session.set_edit_mode() is False
    assert session.set_edit_mode(True) is True
    assert session.set_edit_mode(True) is True


def test_undo_delete_after_moving_on_restores_deleted_page():
    session, _ = make_session()
    session.load("index.html?p=a")
    session.save("A", "page a")
    session.load("index.html?p=b")
    session.save("B", "page b")
    session.delete()

    session.load("index.html?p=a")
    result = session.restore_backup()

    assert result.ok
    assert result.keys == Keys("", "b")
    data = session.repo.store.data
    assert json.loads(data["5310okvvikia"])["content"] == "page a"
    assert json.loads(data["5310okvvikib"])["content"] == "page b"
    assert session.keys == Keys("", "b")
    assert session.page.content == "page b"


def test_backup_of_saved_page_stays_with_its_keys():
    session, _ = make_session()
    session.load("index.html?p=b")
    session.save("B", "page b")
    session.load("index.html?p=c")
    session.save("C", "page c")
    session.load("index.html?p=a")
    session.restore_backup()

    data = session.repo.store.data
    assert "5310okvvikia" not in data
    assert json.loads(data["5310okvvikic"])["content"] == "page c"


def test_load_keys_keeps_notebook():
    session, _ = make_session()
    result = session.load_keys(Keys("Notes", "Today"))
    assert result.keys == Keys("notes", "today")
    assert session.repo.storage_key(session.keys) == "5310okvvikinotestoday"
