"""
Process-wide counter of served requests.
"""

import threading


class RequestCounter:
	"""Monotonically increasing counter, safe to bump from any thread."""

	def __init__(self):
		self._count = 0
		self._lock = threading.Lock()

	def increment(self) -> int:
		"""Add one and return the new value."""
		with self._lock:
			self._count += 1
			return self._count

	@property
	def count(self) -> int:
		with self._lock:
			return self._count
