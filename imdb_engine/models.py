"""
Data models for the IMDb dataset engine.
Defines the records parsed from the TSV sources and the projections returned by queries.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Import typing helpers for precise and self-documenting types
from typing import List, Optional, Set  # lists, sets and optional values


@dataclass(frozen=True, eq=False)
class Person:
	"""
	A person from the names source.
	Compared by identity: the loader creates exactly one Person per nconst.
	"""
	nconst: str  # unique identifier (e.g., "nm0000001")
	primary_name: str  # name the person is most often credited under
	birth_year: Optional[int] = None  # absent when the source holds \N
	death_year: Optional[int] = None  # absent while the person is alive
	primary_professions: List[str] = field(default_factory=list)  # e.g., ["actor", "writer"]
	known_for_titles: List[str] = field(default_factory=list)  # tconsts the person is known for

	@property
	def is_alive(self) -> bool:
		"""True iff no death year is recorded."""
		return self.death_year is None


@dataclass
class Title:
	"""
	A film or TV title.
	Rating fields are filled in by the ratings source and the people lists by the linker.
	"""
	tconst: str  # unique identifier (e.g., "tt0000001")
	title_type: str  # movie, short, tvSeries, ...
	primary_title: str  # title in its most popular form
	original_title: str  # title in the original language
	is_adult: bool  # adult flag from the source ("1")
	start_year: Optional[int] = None  # release year (or series start)
	end_year: Optional[int] = None  # series end year
	runtime_minutes: Optional[int] = None  # runtime if known
	genres: Set[str] = field(default_factory=set)  # unique genre labels
	rating: Optional[float] = None  # average rating, set when the rating row is loaded
	num_votes: Optional[int] = None  # vote count, set with the rating
	directors: Optional[List[Person]] = None  # resolved by the linker
	writers: Optional[List[Person]] = None  # resolved by the linker
	actors: Optional[List[Person]] = None  # resolved by the linker; stays None without principal rows


@dataclass(frozen=True)
class Principal:
	"""One credited role of a person on a title, keyed by (tconst, ordering)."""
	tconst: str
	ordering: int
	nconst: str
	category: str  # actor, actress, director, writer, ...
	job: Optional[str] = None
	characters: Optional[str] = None


@dataclass(frozen=True)
class Crew:
	"""Raw director/writer identifiers of a title before linking."""
	tconst: str
	directors: List[str] = field(default_factory=list)
	writers: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Rating:
	tconst: str
	average_rating: float
	num_votes: int


@dataclass(frozen=True)
class TitleSummary:
	"""Lightweight projection of a title used in per-year rankings."""
	tconst: str
	primary_title: str
	start_year: int
	rating: float
	num_votes: int


@dataclass(frozen=True)
class BestTitlesByYear:
	"""Top rated titles of one year for a genre."""
	year: int
	best_titles: List[TitleSummary]
