"""
Error classes raised by the dataset engine.
The API layer maps them to HTTP status codes (400, 404 and 500).
"""

from typing import Optional


class ImdbError(Exception):
	"""Base class for every error raised by the engine."""

	def __init__(self, message: str):
		super().__init__(message)
		self.message = message  # kept for error responses


class InvalidInput(ImdbError):
	"""A caller-supplied argument violates a precondition (blank key, bad page, ...)."""


class NotFound(ImdbError):
	"""
	A lookup key has no matching record, or a composed query found nothing.
	Built either from (resource, field, value) or from a free-form message.
	"""

	def __init__(
		self,
		resource: Optional[str] = None,
		field: Optional[str] = None,
		value: Optional[str] = None,
		message: Optional[str] = None,
	):
		self.resource = resource  # e.g., "Person", "Actor"
		self.field = field  # e.g., "id", "id/name", "genre"
		self.value = value  # the key that was looked up
		if message is None:
			message = f"{resource} not found with {field}: '{value}'"
		super().__init__(message)


class ImportFailure(ImdbError):
	"""
	The dataset could not be loaded (missing file, malformed numeric field).
	The original error is chained as __cause__.
	"""
