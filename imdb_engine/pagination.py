"""
Pagination helpers shared by the query engine and the API.
"""

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

from .exceptions import InvalidInput

T = TypeVar('T')


def validate_pagination_params(page: int, size: int) -> None:
	"""Reject negative pages and non-positive page sizes."""
	if page < 0 or size <= 0:
		raise InvalidInput("Page must be >= 0 and size must be > 0")


def get_page(items: Sequence[T], page: int, size: int) -> List[T]:
	"""Skip page*size items, then take size items."""
	validate_pagination_params(page, size)
	start = page * size
	return list(items[start:start + size])


@dataclass
class PagedResponse(Generic[T]):
	"""One page of results together with the totals needed to navigate the rest."""
	items: List[T]
	current_page: int
	total_items: int
	total_pages: int

	@classmethod
	def of(cls, items: List[T], page: int, size: int, total: int) -> 'PagedResponse[T]':
		return cls(
			items=items,
			current_page=page,
			total_items=total,
			total_pages=math.ceil(total / size),
		)
