# Copyright (c) 2025 Marcus Dillavou <line72@line72.net>
# Part of the Genreshelf Project
# Released under the AGPLv3 or later

from .genrestore import GenreStore
from .records.genre import Genre, GenrePatch, BulkDeleteResult
from .records.list_options import ListOptions, SortField, SortOrder
from . import errors
