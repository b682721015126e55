"""
Tests for the AI prep cache
"""
import json

import pytest

from cvstudio.services.cache import PrepCache, prep_cache_key


@pytest.fixture
def cache_path(tmp_path):
    return str(tmp_path / 'cache' / 'prep.json')


class TestKeys:
    def test_language_case_insensitive(self):
        assert prep_cache_key('cv-1', 'EN') == prep_cache_key('cv-1', 'en')

    def test_distinct_per_document_and_variant(self):
        assert prep_cache_key('cv-1', 'en') != prep_cache_key('cv-2', 'en')
        assert prep_cache_key('cv-1', 'en') != prep_cache_key('cv-1', 'en', variant='short')


class TestPrepCache:
    """Entries persist until cleared or the profile changes"""

    def test_put_and_get(self, cache_path):
        cache = PrepCache(cache_path)
        cache.put_prep('cv-1', 'en', {'tips': ['a']})

        assert cache.get_prep('cv-1', 'EN') == {'tips': ['a']}
        assert cache.get_prep('cv-1', 'de') is None
        assert len(cache) == 1
        assert prep_cache_key('cv-1', 'en') in cache

    def test_survives_reload(self, cache_path):
        PrepCache(cache_path).put_prep('cv-1', 'en', 'insight')
        assert PrepCache(cache_path).get_prep('cv-1', 'en') == 'insight'

    def test_file_format(self, cache_path):
        cache = PrepCache(cache_path)
        cache.bind_profile('user-1')
        cache.put('k', 1)

        with open(cache_path, encoding='utf-8') as f:
            assert json.load(f) == {'profile': 'user-1', 'entries': {'k': 1}}

    def test_clear(self, cache_path):
        cache = PrepCache(cache_path)
        cache.put('k', 1)
        cache.clear()

        assert len(cache) == 0
        assert len(PrepCache(cache_path)) == 0

    def test_first_profile_on_empty_cache_is_not_a_change(self, cache_path):
        cache = PrepCache(cache_path)
        assert cache.bind_profile('user-1') is False
        assert cache.profile_id == 'user-1'

    def test_same_profile_keeps_entries(self, cache_path):
        cache = PrepCache(cache_path)
        cache.bind_profile('user-1')
        cache.put('k', 1)

        assert PrepCache(cache_path).bind_profile('user-1') is False
        assert PrepCache(cache_path).get('k') == 1

    def test_profile_change_clears(self, cache_path):
        cache = PrepCache(cache_path)
        cache.bind_profile('user-1')
        cache.put('k', 1)

        reloaded = PrepCache(cache_path)
        assert reloaded.bind_profile('user-2') is True
        assert reloaded.get('k') is None
        assert PrepCache(cache_path).profile_id == 'user-2'

    def test_entries_without_profile_cleared_on_bind(self, cache_path):
        cache = PrepCache(cache_path)
        cache.put('k', 1)
        assert cache.bind_profile('user-1') is True
        assert len(cache) == 0

    def test_corrupt_file_ignored(self, tmp_path):
        path = tmp_path / 'prep.json'
        path.write_text('{not json', encoding='utf-8')

        cache = PrepCache(str(path))

        assert len(cache) == 0
        cache.put('k', 1)
        assert PrepCache(str(path)).get('k') == 1
