"""
Load the IMDb dataset and report what was loaded.

This script:
1) Reads settings (IMDB_* environment variables or .env)
2) Loads the five TSV sources and links them
3) Logs per-source counters
4) Runs a few sample queries

Usage:
    python -m scripts.dataset_stats [genre]

Handy for checking a dataset directory before starting the API.
"""

import sys  # optional genre argument

from loguru import logger  # console logging

from imdb_engine.config import configure_logging, get_settings  # env-based settings
from imdb_engine.exceptions import ImportFailure, NotFound  # expected failures
from imdb_engine.service import ImdbDataService  # load + query facade


def main(genre: str = 'Drama') -> int:
	settings = get_settings()
	configure_logging(settings.log_level)

	logger.info("=" * 60)
	logger.info("IMDb Dataset Stats")
	logger.info("=" * 60)

	# 1) Load and link
	logger.info(f"[1/3] Loading dataset from {settings.data_path}...")
	service = ImdbDataService(settings=settings)
	try:
		service.load_and_link()
	except ImportFailure as e:
		logger.error(f"Import failed: {e}")
		return 1
	logger.info(f"[OK] Loaded in {service.load_seconds:.2f}s")

	# 2) Counters
	logger.info("[2/3] Rows per source:")
	for source, count in service.stats().items():
		logger.info(f"  {source:<11} {count}")

	# 3) Sample queries
	logger.info("[3/3] Sample queries:")
	total = service.get_total_titles_with_same_director_and_writer()
	logger.info(f"  Titles with a living director who also wrote them: {total}")
	for title in service.get_titles_with_same_director_and_writer(0, 5):
		logger.info(f"    {title.primary_title} ({title.start_year})")

	try:
		years = service.get_best_titles_by_year_for_genre(genre, 0, 3)
	except NotFound as e:
		logger.info(f"  {e}")
	else:
		logger.info(f"  {genre}: {service.get_total_years_for_genre(genre)} ranked years, first {len(years)}:")
		for group in years:
			best = ', '.join(f"{t.primary_title} ({t.rating})" for t in group.best_titles)
			logger.info(f"    {group.year}: {best}")

	logger.info("=" * 60)
	return 0


if __name__ == '__main__':
	sys.exit(main(*sys.argv[1:2]))
