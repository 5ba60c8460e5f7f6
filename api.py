"""
FastAPI server exposing the IMDb dataset queries.
Endpoints (under /api/imdb):
- GET /titles/same-director-writer?page=0&size=10: titles whose living director also wrote them
- GET /titles/both-actors?actor_id1=...&actor_id2=...: titles shared by two actors (by id)
- GET /titles/both-actors-by-names?actor_name1=...&actor_name2=...&page=0&size=10: same, by id or name, paginated
- GET /titles/best-by-genre?genre=...&page=0&size=10: top five titles per year for a genre
- GET /person/{id}: one person
- GET /stats/request-count: number of requests served
Plus GET /health for readiness checks.

Startup loads and links the TSV dataset configured through IMDB_* environment variables.
"""

# Import standard libraries for timestamps and typing
from datetime import datetime  # error response timestamps
from typing import Generic, List, Optional, TypeVar  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for response models
from fastapi import FastAPI, Query, Request  # FastAPI primitives
from fastapi.exceptions import RequestValidationError  # bad or missing query parameters
from fastapi.responses import JSONResponse  # error payloads
from pydantic import BaseModel  # response schema definitions

# Import our internal modules for loading and querying
from imdb_engine.config import configure_logging, get_settings  # env-based settings
from imdb_engine.exceptions import ImdbError, ImportFailure, InvalidInput, NotFound  # error taxonomy
from imdb_engine.models import BestTitlesByYear, Person, Title  # core records
from imdb_engine.pagination import PagedResponse, validate_pagination_params  # page envelope and checks
from imdb_engine.request_counter import RequestCounter  # served requests
from imdb_engine.service import ImdbDataService  # dataset lifecycle + queries

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata (shown in /docs)
app = FastAPI(
	title="IMDb Dataset API",
	description="Read-only queries over the IMDb title, name, principal, crew and rating datasets.",
	version="1.0.0",
)

# Globals that hold the service instance and the request counter
SERVICE: Optional[ImdbDataService] = None  # will point to the loaded service
REQUEST_COUNTER = RequestCounter()  # process-wide, never reset

T = TypeVar('T')


# Pydantic model that describes a person in responses
class PersonOut(BaseModel):
	nconst: str
	primary_name: str
	birth_year: Optional[int] = None
	death_year: Optional[int] = None
	primary_professions: List[str]
	known_for_titles: List[str]
	is_alive: bool


# Pydantic model that describes a title in responses
class TitleOut(BaseModel):
	tconst: str
	title_type: str
	primary_title: str
	original_title: str
	is_adult: bool
	start_year: Optional[int] = None
	end_year: Optional[int] = None
	runtime_minutes: Optional[int] = None
	genres: List[str]  # sorted for stable output
	rating: Optional[float] = None
	num_votes: Optional[int] = None
	directors: Optional[List[PersonOut]] = None
	writers: Optional[List[PersonOut]] = None
	actors: Optional[List[PersonOut]] = None  # null when the title has no principal rows


class TitleSummaryOut(BaseModel):
	tconst: str
	primary_title: str
	start_year: int
	rating: float
	num_votes: int


class BestTitlesByYearOut(BaseModel):
	year: int
	best_titles: List[TitleSummaryOut]


# Paged envelope shared by every paginated endpoint
class PagedResponseOut(BaseModel, Generic[T]):
	items: List[T]
	current_page: int
	total_items: int
	total_pages: int


class ErrorResponse(BaseModel):
	status_code: int
	message: str
	path: str
	timestamp: datetime


class RequestCountOut(BaseModel):
	count: int


# Converters from core records to response schemas

def person_out(person: Person) -> PersonOut:
	return PersonOut(
		nconst=person.nconst,
		primary_name=person.primary_name,
		birth_year=person.birth_year,
		death_year=person.death_year,
		primary_professions=list(person.primary_professions),
		known_for_titles=list(person.known_for_titles),
		is_alive=person.is_alive,
	)


def _people_out(people: Optional[List[Person]]) -> Optional[List[PersonOut]]:
	return None if people is None else [person_out(p) for p in people]


def title_out(title: Title) -> TitleOut:
	return TitleOut(
		tconst=title.tconst,
		title_type=title.title_type,
		primary_title=title.primary_title,
		original_title=title.original_title,
		is_adult=title.is_adult,
		start_year=title.start_year,
		end_year=title.end_year,
		runtime_minutes=title.runtime_minutes,
		genres=sorted(title.genres),
		rating=title.rating,
		num_votes=title.num_votes,
		directors=_people_out(title.directors),
		writers=_people_out(title.writers),
		actors=_people_out(title.actors),
	)


def best_titles_out(group: BestTitlesByYear) -> BestTitlesByYearOut:
	return BestTitlesByYearOut(
		year=group.year,
		best_titles=[TitleSummaryOut(**vars(s)) for s in group.best_titles],
	)


def paged_out(items: list, page: int, size: int, total: int) -> PagedResponseOut:
	paged = PagedResponse.of(items, page, size, total)  # computes total pages
	return PagedResponseOut(
		items=paged.items,
		current_page=paged.current_page,
		total_items=paged.total_items,
		total_pages=paged.total_pages,
	)


def get_service() -> ImdbDataService:
	"""Return the loaded service; queries are refused until startup created it."""
	if SERVICE is None:
		raise ImportFailure("Dataset is not loaded")
	return SERVICE


# Error handlers that turn the error taxonomy into HTTP responses

def _error_response(status_code: int, message: str, request: Request) -> JSONResponse:
	body = ErrorResponse(
		status_code=status_code,
		message=message,
		path=request.url.path,
		timestamp=datetime.now(),
	)
	return JSONResponse(status_code=status_code, content=body.model_dump(mode='json'))


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
	logger.info(f"[API] {request.url.path} -> 404: {exc.message}")
	return _error_response(404, exc.message, request)


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
	logger.warning(f"[API] {request.url.path} -> 400: {exc.message}")
	return _error_response(400, exc.message, request)


@app.exception_handler(ImportFailure)
async def import_failure_handler(request: Request, exc: ImportFailure):
	logger.error(f"[API] {request.url.path} -> 500: {exc.message}")
	return _error_response(500, exc.message, request)


@app.exception_handler(ImdbError)
async def imdb_error_handler(request: Request, exc: ImdbError):
	logger.error(f"[API] {request.url.path} -> 500: {exc.message}")
	return _error_response(500, exc.message, request)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
	# Missing parameters and type mismatches are client errors
	errors = exc.errors()
	if errors:
		first = errors[0]
		name = first.get('loc', ['', 'parameter'])[-1]
		if first.get('type') == 'missing':
			message = f"{name} parameter is required"
		else:
			message = f"{name}: {first.get('msg')}"
	else:
		message = "Invalid request"
	logger.warning(f"[API] {request.url.path} -> 400: {message}")
	return _error_response(400, message, request)


# FastAPI startup hook to load the dataset once
@app.on_event("startup")
async def startup_event():
	"""Load and link the dataset; a failed import leaves the API answering 500."""
	global SERVICE  # refer to module-level global

	settings = get_settings()
	configure_logging(settings.log_level)
	logger.info(f"[API] Startup: loading dataset from {settings.data_path}...")

	SERVICE = ImdbDataService(settings=settings)
	try:
		SERVICE.load_and_link()
	except ImportFailure as e:
		logger.error(f"[API] Dataset import failed, queries will be refused: {e}")
		return

	logger.info(f"[API] Startup complete in {SERVICE.load_seconds:.2f}s. Counters: {SERVICE.stats()}")


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",
		"dataset_ready": SERVICE is not None and SERVICE.is_ready,
		"load_seconds": round(SERVICE.load_seconds, 2) if SERVICE else 0.0,
		"counters": SERVICE.stats() if SERVICE else {},
	}


@app.get("/api/imdb/titles/same-director-writer", response_model=PagedResponseOut[TitleOut])
def titles_with_same_director_and_writer(page: int = 0, size: int = 10):
	"""Titles in which a living director is also credited as writer."""
	REQUEST_COUNTER.increment()
	validate_pagination_params(page, size)  # checked before the readiness gate
	service = get_service()

	titles = service.get_titles_with_same_director_and_writer(page, size)
	total = service.get_total_titles_with_same_director_and_writer()
	logger.debug(f"[API] same-director-writer page={page} size={size} -> {len(titles)}/{total}")
	return paged_out([title_out(t) for t in titles], page, size, total)


@app.get("/api/imdb/titles/both-actors", response_model=List[TitleOut])
def titles_with_both_actors(
	actor_id1: str = Query(..., description="nconst of the first actor"),
	actor_id2: str = Query(..., description="nconst of the second actor"),
):
	"""Titles shared by two actors; 404 when they never played together."""
	REQUEST_COUNTER.increment()
	if actor_id1 == actor_id2:
		raise InvalidInput("actor1 and actor2 must be different")

	titles = get_service().get_titles_with_both_actors(actor_id1, actor_id2)
	return [title_out(t) for t in titles]


@app.get("/api/imdb/titles/both-actors-by-names", response_model=PagedResponseOut[TitleOut])
def titles_with_both_actors_by_names(
	actor_name1: str = Query(..., description="Name or nconst of the first actor"),
	actor_name2: str = Query(..., description="Name or nconst of the second actor"),
	page: int = 0,
	size: int = 10,
):
	"""Paginated titles shared by two actors given by name (or id)."""
	REQUEST_COUNTER.increment()
	validate_pagination_params(page, size)
	service = get_service()

	titles = service.get_titles_with_both_actors_page(actor_name1, actor_name2, page, size)
	total = service.get_total_titles_with_both_actors(actor_name1, actor_name2)
	return paged_out([title_out(t) for t in titles], page, size, total)


@app.get("/api/imdb/titles/best-by-genre", response_model=PagedResponseOut[BestTitlesByYearOut])
def best_titles_by_genre(
	genre: str = Query(..., description="Exact genre label, e.g. Drama"),
	page: int = 0,
	size: int = 10,
):
	"""Top five titles per year for a genre; pages are groups of years."""
	REQUEST_COUNTER.increment()
	validate_pagination_params(page, size)
	service = get_service()

	groups = service.get_best_titles_by_year_for_genre(genre, page, size)
	total = service.get_total_years_for_genre(genre)
	return paged_out([best_titles_out(g) for g in groups], page, size, total)


@app.get("/api/imdb/person/{person_id}", response_model=PersonOut)
def person_by_id(person_id: str):
	REQUEST_COUNTER.increment()
	return person_out(get_service().get_person_by_id(person_id))


@app.get("/api/imdb/stats/request-count", response_model=RequestCountOut)
def request_count():
	"""Number of API requests served so far, this one included."""
	return RequestCountOut(count=REQUEST_COUNTER.increment())
