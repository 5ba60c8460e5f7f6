"""
Configuration for the IMDb dataset engine.

Values come from environment variables prefixed with IMDB_ (or a .env file),
e.g. IMDB_DATA_DIR=/srv/imdb IMDB_TITLES_CAP=5000.
"""

import sys
from functools import lru_cache
from pathlib import Path
from typing import Dict

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).parent.parent


def get_project_root() -> Path:
	"""Get project root directory."""
	return _PROJECT_ROOT


class Settings(BaseSettings):
	"""Dataset location, per-source file names, load caps and logging.

	Attributes:
		data_dir: Directory holding the five TSV sources (relative to the project root if not absolute).
		titles_file: File name of the title basics source (.gz is read transparently).
		titles_cap: Maximum rows parsed from the title source.
		log_level: Minimum level of the loguru console sink.
	"""

	model_config = SettingsConfigDict(
		env_prefix="IMDB_",
		env_file=".env",
		env_file_encoding="utf-8",
		extra="ignore",
	)

	data_dir: str = Field(default="data/imdb")

	titles_file: str = Field(default="title.basics.tsv")
	people_file: str = Field(default="name.basics.tsv")
	principals_file: str = Field(default="title.principals.tsv")
	crew_file: str = Field(default="title.crew.tsv")
	ratings_file: str = Field(default="title.ratings.tsv")

	titles_cap: int = Field(default=100_000, gt=0)
	people_cap: int = Field(default=100_000, gt=0)
	principals_cap: int = Field(default=500_000, gt=0)
	crews_cap: int = Field(default=100_000, gt=0)
	ratings_cap: int = Field(default=100_000, gt=0)

	log_level: str = Field(default="INFO")

	@property
	def data_path(self) -> Path:
		"""Dataset directory as an absolute path."""
		path = Path(self.data_dir)
		return path if path.is_absolute() else _PROJECT_ROOT / path

	@property
	def source_paths(self) -> Dict[str, Path]:
		"""Path of every source, keyed by source name, in load order."""
		return {
			"titles": self.data_path / self.titles_file,
			"people": self.data_path / self.people_file,
			"principals": self.data_path / self.principals_file,
			"crews": self.data_path / self.crew_file,
			"ratings": self.data_path / self.ratings_file,
		}

	@property
	def load_caps(self) -> Dict[str, int]:
		"""Row cap of every source, keyed by source name."""
		return {
			"titles": self.titles_cap,
			"people": self.people_cap,
			"principals": self.principals_cap,
			"crews": self.crews_cap,
			"ratings": self.ratings_cap,
		}


@lru_cache
def get_settings() -> Settings:
	"""Return the process-wide settings instance."""
	return Settings()


def configure_logging(level: str = "INFO") -> None:
	"""Send loguru output to stderr at the given level."""
	logger.remove()
	logger.add(sys.stderr, level=level.upper())
