"""
Relationship linking module.
Resolves crew and principal identifiers into Person lists on every Title, once, after loading.
"""

from typing import Dict, Iterable, List

from loguru import logger

from .data_loader import ACTING_CATEGORIES, ImdbDataset
from .models import Person


def link_dataset(dataset: ImdbDataset) -> ImdbDataset:
	"""
	Populate directors, writers and actors on each title and build the name index.

	- Titles with a crew row get the resolved directors/writers; titles without one get empty lists.
	- Titles with principal rows get the resolved actors (possibly empty); titles without any keep actors=None.
	- Identifiers with no matching Person are dropped.
	"""
	if dataset.linked:
		logger.debug("[Linker] Dataset already linked, skipping")
		return dataset

	people = dataset.people
	with_crew = 0
	with_actors = 0

	for tconst, title in dataset.titles.items():
		crew = dataset.crews.get(tconst)
		if crew is not None:
			title.directors = _resolve(crew.directors, people)
			title.writers = _resolve(crew.writers, people)
			with_crew += 1
		else:
			title.directors = []
			title.writers = []

		principals = dataset.principals_by_title.get(tconst)
		if principals is not None:
			title.actors = _resolve(
				(p.nconst for p in principals if p.category in ACTING_CATEGORIES),
				people,
			)
			with_actors += 1

	# First person in source order wins for duplicate names
	for person in people.values():
		dataset.people_by_name.setdefault(person.primary_name.lower(), person)

	dataset.linked = True
	logger.info(
		f"[Linker] Linked {len(dataset.titles)} titles | with crew: {with_crew} | with principals: {with_actors} "
		f"| distinct names: {len(dataset.people_by_name)}"
	)
	return dataset


def _resolve(nconsts: Iterable[str], people: Dict[str, Person]) -> List[Person]:
	"""Map identifiers to Person objects, keeping order and dropping unknown ids."""
	return [people[nconst] for nconst in nconsts if nconst in people]
