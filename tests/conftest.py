"""
Shared fixtures: a small IMDb-shaped dataset written to a temporary directory.

Layout of the sample data (checked by the tests):
- 13 titles (plus one short row that is skipped); Drama years 1990, 1991, 2000
- 7 people; nm0000001 is dead, nm0000006 shares the name "Lauren Bacall" with nm0000002
- 9 principals, one of them for the unknown title tt9999999
- 7 crew rows; Alpha, Foxtrot and alpha have a living director who also wrote them
- 10 applied ratings (the rating for tt9999999 is dropped)
"""

from pathlib import Path
from typing import Dict, List

import pytest

from imdb_engine.service import ImdbDataService

N = '\\N'

TITLES_HEADER = ['tconst', 'titleType', 'primaryTitle', 'originalTitle', 'isAdult',
    'startYear', 'endYear', 'runtimeMinutes', 'genres']
TITLES = [
    ['tt0000001', 'movie', 'Alpha', 'Alpha', '0', '1990', N, '100', 'Drama,Comedy'],
    ['tt0000002', 'movie', 'Beta', 'Beta', '0', '1990', N, '90', 'Drama'],
    ['tt0000003', 'movie', 'Gamma', 'Gamma', '0', '1991', N, N, 'Drama'],
    ['tt0000004', 'movie', 'Delta', 'Delta', '1', N, N, N, 'Drama'],
    ['tt0000005', 'movie', 'Echo', 'Echo', '0', '1992', N, '95', 'Comedy'],
    ['tt0000006', 'tvSeries', 'Foxtrot', 'Foxtrot', '0', '2000', '2005', '30', 'Drama,Crime'],
    ['tt0000007', 'movie', 'alpha', 'alpha', '0', '1995', N, '80', N],
    ['tt0000008', 'movie', 'Hotel', 'Hotel', '0', '1990', N, N, 'Drama'],
    ['tt0000009', 'movie', 'India', 'India', '0', '1990', N, N, 'Drama'],
    ['tt0000010', 'movie', 'Juliet', 'Juliet', '0', '1990', N, N, 'Drama'],
    ['tt0000011', 'movie', 'Kilo', 'Kilo', '0', '1990', N, N, 'Drama'],
    ['tt0000012', 'movie', 'Lima', 'Lima', '0', '1990', N, N, 'Drama'],
    ['tt0000013', 'movie', 'Mike', 'Mike', '0', '2001', N, N, 'Drama'],
    ['tt0000099', 'movie', 'Short row'],
]

PEOPLE_HEADER = ['nconst', 'primaryName', 'birthYear', 'deathYear', 'primaryProfession', 'knownForTitles']
PEOPLE = [
    ['nm0000001', 'Fred Astaire', '1899', '1987', 'actor,soundtrack', 'tt0000005'],
    ['nm0000002', 'Lauren Bacall', '1924', N, 'actress', 'tt0000005,tt0000001'],
    ['nm0000003', 'Ann Director', '1950', N, 'director,writer', 'tt0000001'],
    ['nm0000004', 'Dead Director', '1900', '1980', 'director,writer', N],
    ['nm0000005', 'Will Writer', '1960', N, 'writer', N],
    ['nm0000006', 'Lauren Bacall', '1980', N, 'actress', 'tt9999999'],
    ['nm0000007', 'Solo Actor', '1970', N, 'actor', N],
]

PRINCIPALS_HEADER = ['tconst', 'ordering', 'nconst', 'category', 'job', 'characters']
PRINCIPALS = [
    ['tt0000001', '1', 'nm0000002', 'actress', N, '["Anna"]'],
    ['tt0000001', '2', 'nm0000007', 'actor', N, N],
    ['tt0000001', '3', 'nm0000003', 'director', N, N],
    ['tt0000001', '4', 'nm0000999', 'actor', N, N],
    ['tt0000002', '1', 'nm0000003', 'director', N, N],
    ['tt0000006', '1', 'nm0000001', 'actor', N, N],
    ['tt0000006', '2', 'nm0000002', 'actress', N, N],
    ['tt0000006', '3', 'nm0000007', 'self', N, N],
    ['tt9999999', '1', 'nm0000007', 'actor', N, N],
]

CREW_HEADER = ['tconst', 'directors', 'writers']
CREWS = [
    ['tt0000001', 'nm0000003', 'nm0000003,nm0000005'],
    ['tt0000002', 'nm0000004', 'nm0000004'],
    ['tt0000003', 'nm0000003', N],
    ['tt0000006', 'nm0000005,nm0000003', 'nm0000003'],
    ['tt0000007', 'nm0000003', 'nm0000003'],
    ['tt0000005', 'nm0000888', 'nm0000888'],
    ['tt9999999', 'nm0000003', 'nm0000003'],
]

RATINGS_HEADER = ['tconst', 'averageRating', 'numVotes']
RATINGS = [
    ['tt0000001', '8.0', '100'],
    ['tt0000002', '8.0', '200'],
    ['tt0000003', '6.5', '40'],
    ['tt0000004', '7.0', '10'],
    ['tt0000006', '8.8', '1000'],
    ['tt0000008', '7.0', '50'],
    ['tt0000009', '9.0', '10'],
    ['tt0000010', '6.0', '5'],
    ['tt0000011', '5.0', '1'],
    ['tt0000012', '7.5', '30'],
    ['tt9999999', '9.9', '99999'],
]

SOURCES = {
    'titles': ('title.basics.tsv', TITLES_HEADER, TITLES),
    'people': ('name.basics.tsv', PEOPLE_HEADER, PEOPLE),
    'principals': ('title.principals.tsv', PRINCIPALS_HEADER, PRINCIPALS),
    'crews': ('title.crew.tsv', CREW_HEADER, CREWS),
    'ratings': ('title.ratings.tsv', RATINGS_HEADER, RATINGS),
}


def tsv_lines(header: List[str], rows: List[List[str]]) -> List[str]:
    """Render a header and rows as TSV lines (with newlines)."""
    return ['\t'.join(row) + '\n' for row in [header] + rows]


def write_tsv(path: Path, header: List[str], rows: List[List[str]]) -> Path:
    path.write_text(''.join(tsv_lines(header, rows)), encoding='utf-8')
    return path


@pytest.fixture
def source_paths(tmp_path) -> Dict[str, Path]:
    """The five sample sources written to tmp_path."""
    return {
        source: write_tsv(tmp_path / name, header, rows)
        for source, (name, header, rows) in SOURCES.items()
    }


@pytest.fixture
def service(source_paths) -> ImdbDataService:
    """A service that has loaded and linked the sample dataset."""
    svc = ImdbDataService(source_paths=source_paths)
    svc.load_and_link()
    return svc


@pytest.fixture
def engine(service):
    return service.engine
