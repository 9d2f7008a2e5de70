# Copyright (c) 2025 Marcus Dillavou <line72@line72.net>
# Part of the Genreshelf Project
# Released under the AGPLv3 or later

# In-memory store for genres.
#
# Everything lives in a single ordered dict keyed by id. Nothing is
# persisted; a new store always starts from the seed genres.

from dataclasses import replace as clone
from datetime import datetime
from typing import Callable, Optional, List
import logging

from .errors import BadRequest, GenreConflict, GenreNotFound, GenreValidationError
from .records.genre import BulkDeleteResult, Genre, GenrePatch, default_image_for, utcnow
from .records.list_options import ListOptions, SortField, SortOrder

MIN_NAME_LENGTH = 2
MIN_DESCRIPTION_LENGTH = 5

SEED_GENRES = [
    (1, "Action", "Fast-paced, stunt-heavy films", "/images/action.jpg"),
    (2, "Comedy", "Funny films to make you laugh", "/images/comedy.jpg"),
    (3, "Drama", "Emotion-driven storytelling", "/images/drama.jpg"),
    (4, "Sci-Fi", "Futuristic concepts and tech", "/images/scifi.jpg"),
]


def validate_fields(name: str, description: str) -> list[str]:
    """Return every rule that `name` and `description` break (already trimmed)."""
    errors = []
    if len(name) < MIN_NAME_LENGTH:
        errors.append(f"Name must be at least {MIN_NAME_LENGTH} characters long")
    if len(description) < MIN_DESCRIPTION_LENGTH:
        errors.append(
            f"Description must be at least {MIN_DESCRIPTION_LENGTH} characters long"
        )
    return errors


def _sort_key(sort: SortField):
    if sort == SortField.ID:
        return lambda g: g.id
    if sort == SortField.NAME:
        return lambda g: g.name.lower()
    if sort == SortField.DESCRIPTION:
        return lambda g: g.description.lower()
    if sort == SortField.IMAGE:
        return lambda g: g.image.lower()
    if sort == SortField.CREATED_AT:
        return lambda g: g.created_at
    if sort == SortField.UPDATED_AT:
        return lambda g: g.updated_at
    raise ValueError(f"Unsupported sort field {sort}")


class GenreStore:
    """
    Owns the collection of genres for the life of the process.

    Records handed out are copies, so the only way to change what is
    stored is through the methods below.
    """

    def __init__(self, seed: bool = True, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self._genres: dict[int, Genre] = {}
        self._next_id = 1

        if seed:
            self._load_seed()

    def _load_seed(self):
        now = self.clock()
        for genre_id, name, description, image in SEED_GENRES:
            self._genres[genre_id] = Genre(
                id=genre_id,
                name=name,
                description=description,
                image=image,
                created_at=now,
                updated_at=now,
            )
        self._next_id = max(self._genres) + 1

    # ----------------------
    # Lookups
    # ----------------------

    def count(self) -> int:
        return len(self._genres)

    def list(self, options: Optional[ListOptions] = None) -> List[Genre]:
        """List genres, optionally filtered by `options.search` and sorted."""
        options = options or ListOptions()
        genres = list(self._genres.values())

        if options.search:
            needle = options.search.lower()
            genres = [
                g
                for g in genres
                if needle in g.name.lower() or needle in g.description.lower()
            ]

        if options.sort is not None:
            genres.sort(
                key=_sort_key(options.sort),
                reverse=options.order == SortOrder.DESC,
            )

        return [clone(g) for g in genres]

    def get(self, genre_id: int) -> Genre:
        return clone(self._find(genre_id))

    def _find(self, genre_id: int) -> Genre:
        genre = self._genres.get(genre_id)
        if genre is None:
            raise GenreNotFound(genre_id)
        return genre

    def _check_unique(self, name: str, ignore_id: Optional[int] = None):
        lowered = name.lower()
        for g in self._genres.values():
            if g.id != ignore_id and g.name.lower() == lowered:
                raise GenreConflict(name)

    # ----------------------
    # Mutations
    # ----------------------

    def create(self, name: str, description: str, image: Optional[str] = None) -> Genre:
        """Create a new genre and return it."""
        name = name.strip()
        description = description.strip()

        errors = validate_fields(name, description)
        if errors:
            raise GenreValidationError(errors)
        self._check_unique(name)

        now = self.clock()
        genre = Genre(
            id=self._next_id,
            name=name,
            description=description,
            image=image if image else default_image_for(name),
            created_at=now,
            updated_at=now,
        )
        self._genres[genre.id] = genre
        self._next_id += 1

        logging.getLogger(__name__).info(f"Created genre {genre.id} ({genre.name})")
        return clone(genre)

    def replace(
        self, genre_id: int, name: str, description: str, image: Optional[str] = None
    ) -> Genre:
        """Overwrite every editable field of an existing genre."""
        genre = self._find(genre_id)

        name = name.strip()
        description = description.strip()

        errors = validate_fields(name, description)
        if errors:
            raise GenreValidationError(errors)
        self._check_unique(name, ignore_id=genre_id)

        genre.name = name
        genre.description = description
        if image:
            genre.image = image
        genre.updated_at = self._touch(genre)

        logging.getLogger(__name__).info(f"Replaced genre {genre_id}")
        return clone(genre)

    def patch(self, genre_id: int, changes: GenrePatch) -> Genre:
        """Merge the fields present in `changes` into an existing genre."""
        genre = self._find(genre_id)

        if changes.is_empty():
            logging.getLogger(__name__).debug(
                f"Empty patch for genre {genre_id}, only refreshing updated_at"
            )

        name = changes.name.strip() if changes.name is not None else None
        description = (
            changes.description.strip() if changes.description is not None else None
        )

        if name is not None or description is not None:
            errors = validate_fields(
                name if name is not None else genre.name,
                description if description is not None else genre.description,
            )
            if errors:
                raise GenreValidationError(errors)

        if name is not None:
            self._check_unique(name, ignore_id=genre_id)
            genre.name = name
        if description is not None:
            genre.description = description
        if changes.image is not None:
            genre.image = changes.image
        genre.updated_at = self._touch(genre)

        logging.getLogger(__name__).info(f"Patched genre {genre_id}")
        return clone(genre)

    def _touch(self, genre: Genre) -> datetime:
        # updated_at may never fall behind created_at, even with a skewed clock
        return max(self.clock(), genre.created_at)

    def delete(self, genre_id: int) -> Genre:
        genre = self._find(genre_id)
        del self._genres[genre_id]

        logging.getLogger(__name__).info(f"Deleted genre {genre_id}")
        return genre

    def bulk_delete(self, ids) -> BulkDeleteResult:
        """
        Delete every genre in `ids`.

        Identifiers that don't match a genre are reported back in
        `not_found` exactly as they were given.
        """
        if not isinstance(ids, list) or len(ids) == 0:
            raise BadRequest("ids must be a non-empty array")

        result = BulkDeleteResult()
        for ident in ids:
            genre_id = coerce_id(ident)
            genre = self._genres.pop(genre_id, None) if genre_id is not None else None
            if genre is None:
                result.not_found.append(ident)
            else:
                result.deleted.append(genre)

        logging.getLogger(__name__).info(
            f"Bulk deleted {len(result.deleted)} genres, {len(result.not_found)} not found"
        )
        return result


def coerce_id(ident) -> Optional[int]:
    """Turn a path segment or JSON value into a genre id, or None if it can't be one."""
    if isinstance(ident, bool):
        return None
    if isinstance(ident, int):
        return ident
    if isinstance(ident, float) and ident.is_integer():
        return int(ident)
    if isinstance(ident, str) and ident.isdecimal():
        return int(ident)
    return None
