import sys
import os

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kvwiki.core.keys import Keys
from kvwiki.core.urls import KeyCodec
from kvwiki.errors import InvalidKeyError


codec = KeyCodec()


def test_page_url():
    assert codec.page_url("Home") == "index.html?p=home"
    assert codec.page_url("My Page") == "index.html?p=my_page"


def test_empty_page_key_is_index():
    assert codec.page_url("") == "index.html?"
    assert codec.keys_url(Keys()) == "index.html?"


def test_notebook_key_is_dropped():
    assert codec.keys_url(Keys("nb", "pg")) == "index.html?p=pg"
    assert codec.page_url("pg", "Notebook") == codec.page_url("pg")


def test_invalid_notebook_key_still_fails():
    with pytest.raises(InvalidKeyError):
        codec.page_url("ok", "?!")
    with pytest.raises(InvalidKeyError):
        codec.page_url("?!")


def test_decode_both_params():
    assert codec.decode("index.html?n=nb&p=pg") == Keys("nb", "pg")
    assert codec.decode("http://host/index.html?p=pg&n=nb#top") == Keys("nb", "pg")


def test_decode_missing_params():
    assert codec.decode("index.html") == Keys()
    assert codec.decode("index.html?p=only") == Keys("", "only")
    assert codec.decode(None) == Keys()
    assert codec.decode("") == Keys()


def test_decode_does_not_normalize():
    assert codec.decode("index.html?p=Some+Page") == Keys("", "Some Page")


def test_decode_garbage_does_not_raise():
    assert codec.decode("%%%?p=%zz&n=") == Keys("", "%zz")
    assert codec.decode("?&&==&p") == Keys()


def test_plus_survives_round_trip():
    url = codec.page_url("a+b")
    assert url == "index.html?p=a%2Bb"
    assert codec.decode(url).page_key == "a+b"


def test_round_trip_loses_notebook():
    url = codec.keys_url(Keys("Notebook", "My Page"))
    decoded = codec.decode(url)
    assert decoded == Keys("", "my_page")
    assert codec.keys_url(decoded) == url


def test_custom_params():
    custom = KeyCodec(domain="wiki", notebook_param="book", page_param="page")
    assert custom.page_url("x") == "wiki?page=x"
    assert custom.decode("wiki?book=b&page=x") == Keys("b", "x")
    # 'p' is only a substring of 'page' here
    assert custom.decode("wiki?p=x") == Keys()
