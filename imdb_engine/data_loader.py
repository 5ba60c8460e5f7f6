"""
Data loading module.
Parses the five IMDb TSV sources (titles, people, principals, crew, ratings) into in-memory maps.
"""

# Standard libs for gzip decoding, context managers, typing, and paths
import gzip  # transparent .gz sources
import re  # strict numeric field formats
from contextlib import contextmanager  # scoped file handles
from dataclasses import dataclass, field  # container for the raw maps
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Union  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our record classes and the import error
from .models import Crew, Person, Principal, Rating, Title  # parsed records
from .exceptions import ImportFailure  # fatal load error

# Console logging
from loguru import logger  # console logger

# Order in which sources must be loaded (ratings need titles to exist)
SOURCE_ORDER = ("titles", "people", "principals", "crews", "ratings")

# Principal categories that count as acting credits
ACTING_CATEGORIES = frozenset({"actor", "actress"})

# Accepted numeric formats (ASCII digits only, no padding or digit separators)
INT_PATTERN = re.compile(r'[+-]?[0-9]+')
FLOAT_PATTERN = re.compile(r'[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?')


@dataclass
class ImdbDataset:
	"""
	Raw maps produced by the loader, plus one counter per source.
	The linker enriches the Title objects held here exactly once.
	"""
	titles: Dict[str, Title] = field(default_factory=dict)  # tconst -> Title
	people: Dict[str, Person] = field(default_factory=dict)  # nconst -> Person
	principals_by_title: Dict[str, List[Principal]] = field(default_factory=dict)  # tconst -> principals in file order
	principals_by_person: Dict[str, List[Principal]] = field(default_factory=dict)  # nconst -> principals in file order
	crews: Dict[str, Crew] = field(default_factory=dict)  # tconst -> Crew
	ratings: Dict[str, Rating] = field(default_factory=dict)  # tconst -> Rating (only for known titles)
	people_by_name: Dict[str, Person] = field(default_factory=dict)  # lowercased name -> first Person, built by the linker
	titles_loaded: int = 0
	people_loaded: int = 0
	principals_loaded: int = 0
	crews_loaded: int = 0
	ratings_loaded: int = 0
	linked: bool = False  # set once the linker has run

	def counters(self) -> Dict[str, int]:
		"""Rows successfully parsed per source."""
		return {
			'titles': self.titles_loaded,
			'people': self.people_loaded,
			'principals': self.principals_loaded,
			'crews': self.crews_loaded,
			'ratings': self.ratings_loaded,
		}


@contextmanager
def open_source(path: Union[str, Path]) -> Iterator[Iterable[str]]:
	"""
	Open a TSV source for line-by-line reading as UTF-8 text.
	Files ending in .gz are decompressed on the fly.
	"""
	path = Path(path)  # normalize path

	# Validate the file presence early to give clear error messages
	if not path.exists():
		logger.error(f"[Loader] Source file not found: {path}")
		raise ImportFailure(f"Source file not found: {path}")

	try:
		if path.suffix == '.gz':
			handle = gzip.open(path, 'rt', encoding='utf-8')  # gzipped source
		else:
			handle = open(path, 'r', encoding='utf-8')  # plain TSV
	except OSError as e:
		logger.error(f"[Loader] Cannot open source {path}: {e}")
		raise ImportFailure(f"Cannot open source {path}: {e}") from e

	with handle:
		yield handle


class DataLoader:
	"""
	Loads the IMDb TSV sources into an ImdbDataset.
	Rows with too few columns are skipped; malformed numbers abort the whole load.
	"""

	NULL = '\\N'  # null sentinel used by every IMDb source
	SEPARATOR = ','  # separator of multi-value fields

	# Minimum number of tab-separated columns per source
	MIN_FIELDS = {
		'titles': 9,
		'people': 6,
		'principals': 6,
		'crews': 3,
		'ratings': 3,
	}

	# Maximum number of parsed rows per source
	DEFAULT_CAPS = {
		'titles': 100_000,
		'people': 100_000,
		'principals': 500_000,
		'crews': 100_000,
		'ratings': 100_000,
	}

	def __init__(self, caps: Optional[Dict[str, int]] = None, dataset: Optional[ImdbDataset] = None):
		"""Initialize the loader with optional per-source cap overrides."""
		self.caps = {**self.DEFAULT_CAPS, **(caps or {})}  # merged caps
		self.dataset = dataset if dataset is not None else ImdbDataset()  # maps being filled

	def load_all(self, paths: Dict[str, Union[str, Path]]) -> ImdbDataset:
		"""
		Load every source from disk in dependency order.
		`paths` maps each name in SOURCE_ORDER to a file path.
		"""
		for source in SOURCE_ORDER:  # titles first, ratings last
			if source not in paths:
				raise ImportFailure(f"No path configured for source '{source}'")
			logger.info(f"[Loader] Loading {source} from {paths[source]}...")
			with open_source(paths[source]) as lines:
				getattr(self, f'load_{source}')(lines)

		counts = self.dataset.counters()  # summary for the log line
		logger.info(
			f"[Loader] Data loaded: {counts['titles']} titles, {counts['people']} people, "
			f"{counts['principals']} principals, {counts['crews']} crews, {counts['ratings']} ratings"
		)
		return self.dataset

	def load_titles(self, lines: Iterable[Union[str, bytes]]) -> int:
		"""Parse the title basics source into `titles`."""
		self.dataset.titles_loaded = self._load_source('titles', lines, self._add_title)
		return self.dataset.titles_loaded

	def load_people(self, lines: Iterable[Union[str, bytes]]) -> int:
		"""Parse the name basics source into `people`."""
		self.dataset.people_loaded = self._load_source('people', lines, self._add_person)
		return self.dataset.people_loaded

	def load_principals(self, lines: Iterable[Union[str, bytes]]) -> int:
		"""Parse the principals source into both principal indexes."""
		self.dataset.principals_loaded = self._load_source('principals', lines, self._add_principal)
		return self.dataset.principals_loaded

	def load_crews(self, lines: Iterable[Union[str, bytes]]) -> int:
		"""Parse the crew source into `crews`."""
		self.dataset.crews_loaded = self._load_source('crews', lines, self._add_crew)
		return self.dataset.crews_loaded

	def load_ratings(self, lines: Iterable[Union[str, bytes]]) -> int:
		"""Parse the ratings source and apply each rating to its title."""
		self.dataset.ratings_loaded = self._load_source('ratings', lines, self._add_rating)
		return self.dataset.ratings_loaded

	def _load_source(self, source: str, lines: Iterable[Union[str, bytes]], add_row: Callable[[List[str]], bool]) -> int:
		"""
		Shared read loop: skip the header, guard the column count, stop at the cap.
		`add_row` returns False when it deliberately drops a row (not counted).
		"""
		cap = self.caps[source]  # row limit for this source
		min_fields = self.MIN_FIELDS[source]  # column guard
		loaded = 0  # successfully parsed rows

		rows = iter(lines)
		next(rows, None)  # discard header

		for line_num, line in enumerate(rows, 2):  # header is line 1
			if isinstance(line, bytes):  # byte streams are decoded here
				line = line.decode('utf-8')
			fields = line.rstrip('\r\n').split('\t')
			if len(fields) < min_fields:  # short or blank row
				continue
			try:
				added = add_row(fields)
			except ValueError as e:
				logger.error(f"[Loader] Malformed {source} row at line {line_num}: {e}")
				raise ImportFailure(f"Malformed {source} row at line {line_num}: {e}") from e
			if not added:
				continue
			loaded += 1
			if loaded >= cap:
				logger.info(f"[Loader] Reached {source} cap of {cap} rows")
				break

		logger.debug(f"[Loader] Parsed {loaded} {source} rows")
		return loaded

	def _add_title(self, fields: List[str]) -> bool:
		title = Title(
			tconst=fields[0],
			title_type=fields[1],
			primary_title=fields[2],
			original_title=fields[3],
			is_adult=fields[4] == '1',
			start_year=self._optional_int(fields[5]),
			end_year=self._optional_int(fields[6]),
			runtime_minutes=self._optional_int(fields[7]),
			genres=set(self._split_multi(fields[8])),
		)
		self.dataset.titles[title.tconst] = title
		return True

	def _add_person(self, fields: List[str]) -> bool:
		person = Person(
			nconst=fields[0],
			primary_name=fields[1],
			birth_year=self._optional_int(fields[2]),
			death_year=self._optional_int(fields[3]),
			primary_professions=self._split_multi(fields[4]),
			known_for_titles=self._split_multi(fields[5]),
		)
		self.dataset.people[person.nconst] = person
		return True

	def _add_principal(self, fields: List[str]) -> bool:
		# Rows for titles outside the loaded set are kept; they just never get linked
		principal = Principal(
			tconst=fields[0],
			ordering=self._parse_int(fields[1]),
			nconst=fields[2],
			category=fields[3],
			job=self._optional_str(fields[4]),
			characters=self._optional_str(fields[5]),
		)
		self.dataset.principals_by_title.setdefault(principal.tconst, []).append(principal)
		self.dataset.principals_by_person.setdefault(principal.nconst, []).append(principal)
		return True

	def _add_crew(self, fields: List[str]) -> bool:
		crew = Crew(
			tconst=fields[0],
			directors=self._split_multi(fields[1]),
			writers=self._split_multi(fields[2]),
		)
		self.dataset.crews[crew.tconst] = crew
		return True

	def _add_rating(self, fields: List[str]) -> bool:
		title = self.dataset.titles.get(fields[0])
		if title is None:  # ratings only apply to loaded titles
			return False

		rating = Rating(
			tconst=fields[0],
			average_rating=self._parse_float(fields[1]),
			num_votes=self._parse_int(fields[2]),
		)
		self.dataset.ratings[rating.tconst] = rating

		# Apply the rating onto the title as it is loaded
		title.rating = rating.average_rating
		title.num_votes = rating.num_votes
		return True

	def _optional_int(self, value: str) -> Optional[int]:
		"""Convert a numeric field, mapping the null sentinel to None."""
		if value == self.NULL:
			return None
		return self._parse_int(value)

	@staticmethod
	def _parse_int(value: str) -> int:
		"""Parse a plain ASCII integer; anything else raises ValueError and aborts the load."""
		if not INT_PATTERN.fullmatch(value):
			raise ValueError(f"invalid integer: {value!r}")
		return int(value)

	@staticmethod
	def _parse_float(value: str) -> float:
		if not FLOAT_PATTERN.fullmatch(value):
			raise ValueError(f"invalid number: {value!r}")
		return float(value)

	def _optional_str(self, value: str) -> Optional[str]:
		return None if value == self.NULL else value

	def _split_multi(self, value: str) -> List[str]:
		"""
		Split a comma-separated field into a list of clean strings.
		The null sentinel yields an empty list.
		"""
		if value == self.NULL:  # missing field
			return []  # treat as empty list
		return [item.strip() for item in value.split(self.SEPARATOR) if item.strip()]  # split/trim
