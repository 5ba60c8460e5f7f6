"""
Query engine module.
Read-only queries over the linked dataset: person lookup, director/writer identity,
actor co-occurrence and per-genre yearly rankings.
"""

from typing import Callable, Dict, List, Optional, Set  # type annotations for clarity

# Import project modules for data structures and helpers
from .data_loader import ACTING_CATEGORIES, ImdbDataset  # raw maps and acting categories
from .exceptions import InvalidInput, NotFound  # query errors
from .models import BestTitlesByYear, Person, Title, TitleSummary  # records and projections
from .pagination import get_page, validate_pagination_params  # skip/take helpers

# Import loguru for console logging
from loguru import logger  # simple structured logger

# Number of titles kept per year in genre rankings
TOP_TITLES_PER_YEAR = 5


def _title_order(title: Title):
	"""Ascending primary title, identifier as tie-break."""
	return (title.primary_title, title.tconst)


def _has_alive_director_writer(title: Title) -> bool:
	"""True if some living director of the title is also one of its writers."""
	directors = title.directors
	writers = title.writers
	if not directors or not writers:  # None or empty
		return False
	return any(director.is_alive and director in writers for director in directors)


class QueryEngine:
	"""
	Executes queries against a fully linked ImdbDataset.
	Every method validates its arguments first, then calls `ready_check` (if given)
	before reading any data. Nothing here mutates the dataset.
	"""

	def __init__(self, dataset: ImdbDataset, ready_check: Optional[Callable[[], None]] = None):
		self.dataset = dataset  # linked maps
		self._ready_check = ready_check  # raises if the data may not be read yet

	def _ensure_ready(self):
		if self._ready_check is not None:
			self._ready_check()

	@staticmethod
	def _require_key(value: Optional[str], name: str) -> None:
		"""Reject None, empty and whitespace-only keys."""
		if value is None or not value.strip():
			raise InvalidInput(f"{name} parameter cannot be null or empty")

	# ------------------------------------------------------------------
	# People
	# ------------------------------------------------------------------

	def find_person_by_id(self, person_id: str) -> Person:
		"""Return the person with the given nconst."""
		self._require_key(person_id, 'personId')
		self._ensure_ready()

		person = self.dataset.people.get(person_id)
		if person is None:
			raise NotFound('Person', 'id', person_id)
		return person

	# ------------------------------------------------------------------
	# Same director and writer
	# ------------------------------------------------------------------

	def titles_with_same_director_and_writer(self, page: int, size: int) -> List[Title]:
		"""
		Titles where a living director is also credited as writer, sorted by primary title.
		An empty page is a valid result.
		"""
		validate_pagination_params(page, size)
		self._ensure_ready()

		matches = sorted(
			(title for title in self.dataset.titles.values() if _has_alive_director_writer(title)),
			key=_title_order,
		)
		logger.debug(f"[Engine] Same director/writer: {len(matches)} titles, page={page} size={size}")
		return get_page(matches, page, size)

	def count_titles_with_same_director_and_writer(self) -> int:
		self._ensure_ready()
		return sum(1 for title in self.dataset.titles.values() if _has_alive_director_writer(title))

	# ------------------------------------------------------------------
	# Both actors
	# ------------------------------------------------------------------

	def titles_with_both_actors(self, actor_id1: str, actor_id2: str) -> List[Title]:
		"""
		Titles shared by two actors given by nconst, sorted by primary title.
		Unlike the paginated variant, an empty intersection raises NotFound.
		"""
		self._require_key(actor_id1, 'actor1')
		self._require_key(actor_id2, 'actor2')
		self._ensure_ready()

		actor1 = self.dataset.people.get(actor_id1)
		actor2 = self.dataset.people.get(actor_id2)
		if actor1 is None:
			raise NotFound('Actor', 'id', actor_id1)
		if actor2 is None:
			raise NotFound('Actor', 'id', actor_id2)

		result = self._common_titles(actor1, actor2)
		if not result:
			raise NotFound(
				'Title', 'actors', f"{actor_id1},{actor_id2}",
				message=(
					f"No titles found where both actors {actor1.primary_name} "
					f"and {actor2.primary_name} played together"
				),
			)
		return result

	def titles_with_both_actors_page(self, actor_key1: str, actor_key2: str, page: int, size: int) -> List[Title]:
		"""
		Titles shared by two actors given by nconst or name, one page at a time.
		An empty intersection yields an empty page.
		"""
		self._require_key(actor_key1, 'actor1')
		self._require_key(actor_key2, 'actor2')
		validate_pagination_params(page, size)
		self._ensure_ready()

		actor1, actor2 = self._resolve_actor_pair(actor_key1, actor_key2)
		return get_page(self._common_titles(actor1, actor2), page, size)

	def count_titles_with_both_actors(self, actor_key1: str, actor_key2: str) -> int:
		"""Number of titles shared by two actors given by nconst or name."""
		self._require_key(actor_key1, 'actor1')
		self._require_key(actor_key2, 'actor2')
		self._ensure_ready()

		actor1, actor2 = self._resolve_actor_pair(actor_key1, actor_key2)
		return len(self._common_titles(actor1, actor2))

	def find_actor(self, key: str) -> Optional[Person]:
		"""Look up a person by exact nconst, then by case-insensitive primary name."""
		person = self.dataset.people.get(key)
		if person is not None:
			return person
		return self.dataset.people_by_name.get(key.lower())

	def _resolve_actor_pair(self, actor_key1: str, actor_key2: str):
		actor1 = self.find_actor(actor_key1)
		actor2 = self.find_actor(actor_key2)
		if actor1 is None:
			raise NotFound('Actor', 'id/name', actor_key1)
		if actor2 is None:
			raise NotFound('Actor', 'id/name', actor_key2)
		return actor1, actor2

	def _actor_title_ids(self, person: Person) -> Set[str]:
		"""Known-for titles plus every title with an acting credit for the person."""
		title_ids = set(person.known_for_titles)
		for principal in self.dataset.principals_by_person.get(person.nconst, []):
			if principal.category in ACTING_CATEGORIES:
				title_ids.add(principal.tconst)
		return title_ids

	def _common_titles(self, actor1: Person, actor2: Person) -> List[Title]:
		common = self._actor_title_ids(actor1) & self._actor_title_ids(actor2)
		titles = [self.dataset.titles[tconst] for tconst in common if tconst in self.dataset.titles]
		logger.debug(
			f"[Engine] Both actors | {actor1.nconst} & {actor2.nconst} | shared ids={len(common)} | titles={len(titles)}"
		)
		return sorted(titles, key=_title_order)

	# ------------------------------------------------------------------
	# Best titles by year for a genre
	# ------------------------------------------------------------------

	def best_titles_by_year_for_genre(self, genre: str, page: int, size: int) -> List[BestTitlesByYear]:
		"""
		Top rated titles of a genre grouped by start year (ascending).
		Within a year: rating desc, then votes desc, at most five titles.
		Pagination applies to the year groups.
		"""
		self._require_key(genre, 'genre')
		validate_pagination_params(page, size)
		self._ensure_ready()

		by_year = self._eligible_by_year(genre)
		if not by_year:
			raise NotFound('Title', 'genre', genre, message=f"No titles found for genre: {genre}")

		groups = []
		for year in sorted(by_year):
			ranked = sorted(by_year[year], key=lambda t: (-t.rating, -t.num_votes))  # stable for full ties
			groups.append(BestTitlesByYear(
				year=year,
				best_titles=[
					TitleSummary(
						tconst=t.tconst,
						primary_title=t.primary_title,
						start_year=t.start_year,
						rating=t.rating,
						num_votes=t.num_votes,
					)
					for t in ranked[:TOP_TITLES_PER_YEAR]
				],
			))

		logger.debug(f"[Engine] Genre '{genre}': {len(groups)} years, page={page} size={size}")
		return get_page(groups, page, size)

	def count_years_for_genre(self, genre: str) -> int:
		"""Number of distinct start years with at least one eligible title in the genre."""
		self._require_key(genre, 'genre')
		self._ensure_ready()
		return len(self._eligible_by_year(genre))

	def _eligible_by_year(self, genre: str) -> Dict[int, List[Title]]:
		"""Rated, voted, dated titles carrying the exact genre label, grouped by start year."""
		by_year: Dict[int, List[Title]] = {}
		for title in self.dataset.titles.values():
			if genre not in title.genres:
				continue
			if title.rating is None or title.num_votes is None or title.start_year is None:
				continue
			by_year.setdefault(title.start_year, []).append(title)
		return by_year
