"""
Service module.
Owns the dataset lifecycle (load once, link once) and gates every query on readiness.
"""

import threading  # load lock and readiness event
import time  # measure load duration
from pathlib import Path  # source paths
from typing import Dict, List, Optional, Union  # type annotations

# Import project modules for loading, linking and querying
from .config import Settings, get_settings  # dataset location and caps
from .data_loader import DataLoader, ImdbDataset  # TSV ingestion
from .exceptions import ImportFailure  # fatal load error
from .linker import link_dataset  # one-shot enrichment
from .models import BestTitlesByYear, Person, Title  # result types
from .query_engine import QueryEngine  # read-only queries

# Import loguru for console logging
from loguru import logger  # simple structured logger


class ImdbDataService:
	"""
	High-level API over the IMDb dataset.
	`load_and_link()` must complete before queries read data; until then every query
	(after validating its arguments) raises ImportFailure.
	"""

	def __init__(
		self,
		settings: Optional[Settings] = None,  # defaults to environment-based settings
		source_paths: Optional[Dict[str, Union[str, Path]]] = None,  # overrides settings.source_paths
		caps: Optional[Dict[str, int]] = None,  # overrides settings.load_caps
	):
		self.settings = settings or get_settings()
		self.source_paths = source_paths or self.settings.source_paths
		self.caps = caps or self.settings.load_caps

		self.dataset = ImdbDataset()  # empty until loaded
		self.engine = QueryEngine(self.dataset, ready_check=self._ensure_ready)
		self.load_seconds = 0.0  # how long the last successful load took

		self._load_lock = threading.Lock()  # one loader at a time
		self._ready = threading.Event()  # set once linking finished
		self._failure: Optional[ImportFailure] = None  # remembered load error

	@property
	def is_ready(self) -> bool:
		return self._ready.is_set()

	@property
	def failure(self) -> Optional[ImportFailure]:
		return self._failure

	def load_and_link(self) -> ImdbDataset:
		"""
		Load the five sources and link them, exactly once.
		Later calls return the loaded dataset; a failed load raises the same ImportFailure again.
		"""
		with self._load_lock:
			if self._ready.is_set():
				logger.debug("[Service] Dataset already loaded")
				return self.dataset
			if self._failure is not None:
				raise self._failure

			start = time.time()  # start timer
			logger.info("[Service] Loading and linking IMDb dataset...")
			try:
				DataLoader(caps=self.caps, dataset=self.dataset).load_all(self.source_paths)
				link_dataset(self.dataset)
			except ImportFailure as e:
				self._failure = e
				logger.error(f"[Service] Dataset import failed: {e}")
				raise
			except (OSError, ValueError) as e:  # read/decode errors outside row parsing
				self._failure = ImportFailure(f"Failed to load IMDb data: {e}")
				logger.error(f"[Service] Dataset import failed: {e}")
				raise self._failure from e

			self.load_seconds = time.time() - start
			self._ready.set()  # publish the linked graph to readers
			logger.info(f"[Service] Dataset ready in {self.load_seconds:.2f}s")
			return self.dataset

	def _ensure_ready(self):
		"""Raise unless the dataset is fully loaded and linked."""
		if self._ready.is_set():
			return
		if self._failure is not None:
			raise self._failure
		raise ImportFailure("Dataset is not loaded")

	# Counters

	def stats(self) -> Dict[str, int]:
		"""Rows parsed per source (all zero before loading)."""
		return self.dataset.counters()

	@property
	def titles_loaded(self) -> int:
		return self.dataset.titles_loaded

	@property
	def people_loaded(self) -> int:
		return self.dataset.people_loaded

	@property
	def principals_loaded(self) -> int:
		return self.dataset.principals_loaded

	@property
	def crews_loaded(self) -> int:
		return self.dataset.crews_loaded

	@property
	def ratings_loaded(self) -> int:
		return self.dataset.ratings_loaded

	# Queries (see QueryEngine for the contracts)

	def get_person_by_id(self, person_id: str) -> Person:
		return self.engine.find_person_by_id(person_id)

	def get_titles_with_same_director_and_writer(self, page: int, size: int) -> List[Title]:
		return self.engine.titles_with_same_director_and_writer(page, size)

	def get_total_titles_with_same_director_and_writer(self) -> int:
		return self.engine.count_titles_with_same_director_and_writer()

	def get_titles_with_both_actors(self, actor_id1: str, actor_id2: str) -> List[Title]:
		return self.engine.titles_with_both_actors(actor_id1, actor_id2)

	def get_titles_with_both_actors_page(self, actor_key1: str, actor_key2: str, page: int, size: int) -> List[Title]:
		return self.engine.titles_with_both_actors_page(actor_key1, actor_key2, page, size)

	def get_total_titles_with_both_actors(self, actor_key1: str, actor_key2: str) -> int:
		return self.engine.count_titles_with_both_actors(actor_key1, actor_key2)

	def get_best_titles_by_year_for_genre(self, genre: str, page: int, size: int) -> List[BestTitlesByYear]:
		return self.engine.best_titles_by_year_for_genre(genre, page, size)

	def get_total_years_for_genre(self, genre: str) -> int:
		return self.engine.count_years_for_genre(genre)
