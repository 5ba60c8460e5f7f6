"""
Tests for the service lifecycle: readiness gate, idempotent loading and import failures.
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from imdb_engine.config import Settings
from imdb_engine.exceptions import ImportFailure, InvalidInput
from imdb_engine.service import ImdbDataService

from conftest import SOURCES, write_tsv


def _titles(titles):
    return [t.tconst for t in titles]


def test_invalid_input_before_load(source_paths):
    service = ImdbDataService(source_paths=source_paths)

    with pytest.raises(InvalidInput):
        service.get_best_titles_by_year_for_genre('Drama', -1, 10)
    with pytest.raises(InvalidInput):
        service.get_titles_with_same_director_and_writer(-1, 10)
    with pytest.raises(InvalidInput):
        service.get_titles_with_both_actors_page('nm0000001', 'nm0000002', -1, 10)
    with pytest.raises(InvalidInput):
        service.get_person_by_id(' ')


def test_queries_refused_before_load(source_paths):
    service = ImdbDataService(source_paths=source_paths)

    assert service.is_ready is False
    with pytest.raises(ImportFailure, match='not loaded'):
        service.get_person_by_id('nm0000001')
    with pytest.raises(ImportFailure):
        service.get_total_titles_with_same_director_and_writer()


def test_load_and_link(service):
    assert service.is_ready is True
    assert service.stats() == {
        'titles': 13,
        'people': 7,
        'principals': 9,
        'crews': 7,
        'ratings': 10,
    }
    assert service.titles_loaded == 13
    assert service.ratings_loaded == 10
    assert service.get_person_by_id('nm0000003').primary_name == 'Ann Director'


def test_load_is_idempotent(service):
    dataset = service.dataset
    assert service.load_and_link() is dataset
    assert service.stats()['titles'] == 13
    assert len(service.dataset.principals_by_title['tt0000001']) == 4


def test_concurrent_load_runs_once(source_paths):
    service = ImdbDataService(source_paths=source_paths)
    with ThreadPoolExecutor(max_workers=4) as pool:
        results = list(pool.map(lambda _: service.load_and_link(), range(4)))

    assert all(r is service.dataset for r in results)
    assert service.principals_loaded == 9
    assert sum(len(v) for v in service.dataset.principals_by_person.values()) == 9


def test_failed_load_refuses_queries(tmp_path, source_paths):
    paths = dict(source_paths)
    paths['ratings'] = tmp_path / 'missing.tsv'
    service = ImdbDataService(source_paths=paths)

    with pytest.raises(ImportFailure) as first:
        service.load_and_link()
    assert service.is_ready is False
    assert service.failure is first.value

    with pytest.raises(ImportFailure) as again:
        service.get_person_by_id('nm0000001')
    assert again.value is first.value

    with pytest.raises(ImportFailure):
        service.load_and_link()


def test_malformed_source_is_import_failure(tmp_path, source_paths):
    name, header, _ = SOURCES['principals']
    paths = dict(source_paths)
    paths['principals'] = write_tsv(tmp_path / ('bad-' + name), header, [['tt0000001', 'first', 'nm0000001', 'actor', '\\N', '\\N']])

    service = ImdbDataService(source_paths=paths)
    with pytest.raises(ImportFailure, match='principals'):
        service.load_and_link()


def test_settings_paths_and_caps(tmp_path, source_paths):
    settings = Settings(data_dir=str(tmp_path), titles_cap=2)
    service = ImdbDataService(settings=settings)
    service.load_and_link()

    assert service.titles_loaded == 2
    assert service.people_loaded == 7


def test_two_fresh_loads_are_identical(source_paths):
    first = ImdbDataService(source_paths=source_paths)
    second = ImdbDataService(source_paths=source_paths)
    first.load_and_link()
    second.load_and_link()

    assert first.stats() == second.stats()
    assert _titles(first.get_titles_with_same_director_and_writer(0, 50)) == \
        _titles(second.get_titles_with_same_director_and_writer(0, 50))
    assert _titles(first.get_titles_with_both_actors_page('nm0000001', 'nm0000002', 0, 50)) == \
        _titles(second.get_titles_with_both_actors_page('nm0000001', 'nm0000002', 0, 50))

    first_groups = first.get_best_titles_by_year_for_genre('Drama', 0, 50)
    second_groups = second.get_best_titles_by_year_for_genre('Drama', 0, 50)
    assert first_groups == second_groups
