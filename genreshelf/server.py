# Copyright (c) 2025 Marcus Dillavou <line72@line72.net>
# Part of the Genreshelf Project
# Released under the AGPLv3 or later

# Web Server for the genreshelf project
#
# This provides a RESTful API for listing, searching, creating,
# updating and deleting movie genres, plus a ping endpoint.

from aiohttp import web
import asyncio

import argparse
import logging
import os
import time
import traceback

from pydantic import BaseModel, ValidationError
from typing import Optional

from .errors import BadRequest, GenreError, GenreNotFound
from .genrestore import GenreStore, coerce_id
from .records.genre import GenrePatch
from .records.list_options import ListOptions, SortField, SortOrder
from . import utils

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,HEAD,PUT,PATCH,POST,DELETE",
    "Access-Control-Allow-Headers": "Content-Type",
}


routes = web.RouteTableDef()


class GenreParams(BaseModel):
    name: str = ""
    description: str = ""
    image: Optional[str] = None


class PatchGenreParams(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class ListGenresParams(BaseModel):
    search: Optional[str] = None
    sort: Optional[SortField] = None
    order: SortOrder = SortOrder.ASC


def parse_params(model, data: dict):
    return model(**{k: v for k, v in data.items() if k in model.model_fields})


async def read_json(request) -> dict:
    if not request.body_exists:
        return {}

    try:
        data = await request.json()
    except ValueError:
        # JSONDecodeError or UnicodeDecodeError
        raise BadRequest("Invalid JSON body")

    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def get_genre_id(request) -> int:
    genre_id = coerce_id(request.match_info["genre_id"])
    if genre_id is None:
        raise GenreNotFound(request.match_info["genre_id"])
    return genre_id


def genre_error_response(e: GenreError):
    logger = logging.getLogger(__name__)
    logger.warning(f"{type(e).__name__}: {e.message}")
    return web.json_response(e.to_dict(), status=e.status)


def params_error_response(e: ValidationError):
    return web.json_response(
        {
            "success": False,
            "message": "Validation failed",
            "errors": e.errors(include_url=False),
        },
        status=400,
    )


def internal_error_response(request, where: str, e: Exception):
    logger = logging.getLogger(__name__)
    logger.error(f"Error in {where}: {str(e)}\n{traceback.format_exc()}")

    body = {"success": False, "message": "Internal server error"}
    if request.app["environment"] != "production":
        body["error"] = str(e)
    return web.json_response(body, status=500)


@web.middleware
async def cors_middleware(request, handler):
    # Only the API is cross-origin
    if not request.path.startswith("/api"):
        return await handler(request)

    if request.method == "OPTIONS":
        response = web.Response(status=204)
    else:
        response = await handler(request)

    response.headers.update(CORS_HEADERS)
    return response


@web.middleware
async def error_middleware(request, handler):
    if not request.path.startswith("/api"):
        return await handler(request)

    try:
        return await handler(request)
    except (web.HTTPNotFound, web.HTTPMethodNotAllowed):
        return web.json_response(
            {
                "success": False,
                "message": "API endpoint not found",
                "path": request.path,
            },
            status=404,
        )
    except web.HTTPException:
        raise
    except Exception as e:
        return internal_error_response(request, request.path, e)


@routes.get("/api/ping")
async def ping(request):
    return web.json_response(
        {
            "ok": True,
            "time": int(time.time() * 1000),
            "uptime": time.monotonic() - request.app["started_at"],
            "environment": request.app["environment"],
        }
    )


@routes.get("/api/genres")
async def list_genres(request):
    try:
        query = {k: v for k, v in request.query.items() if v != ""}
        if "order" in query:
            query["order"] = query["order"].lower()

        try:
            params = parse_params(ListGenresParams, query)
        except ValidationError as e:
            return params_error_response(e)

        genres = request.app["genre_store"].list(
            ListOptions(search=params.search, sort=params.sort, order=params.order)
        )

        return web.json_response(
            {
                "success": True,
                "data": [g.to_dict() for g in genres],
                "total": len(genres),
                "message": "Genres retrieved successfully",
            }
        )
    except GenreError as e:
        return genre_error_response(e)
    except Exception as e:
        return internal_error_response(request, "list_genres", e)


@routes.get("/api/genres/{genre_id}")
async def get_genre(request):
    try:
        genre = request.app["genre_store"].get(get_genre_id(request))

        return web.json_response(
            {
                "success": True,
                "data": genre.to_dict(),
                "message": "Genre retrieved successfully",
            }
        )
    except GenreError as e:
        return genre_error_response(e)
    except Exception as e:
        return internal_error_response(request, "get_genre", e)


@routes.post("/api/genres")
async def create_genre(request):
    try:
        data = await read_json(request)

        try:
            params = parse_params(GenreParams, data)
        except ValidationError as e:
            return params_error_response(e)

        genre = request.app["genre_store"].create(
            params.name, params.description, params.image
        )

        return web.json_response(
            {
                "success": True,
                "data": genre.to_dict(),
                "message": "Genre created successfully",
            },
            status=201,
        )
    except GenreError as e:
        return genre_error_response(e)
    except web.HTTPException:
        raise
    except Exception as e:
        return internal_error_response(request, "create_genre", e)


@routes.put("/api/genres/{genre_id}")
async def replace_genre(request):
    try:
        genre_store = request.app["genre_store"]
        genre_id = get_genre_id(request)

        # 404 takes priority over a bad body
        genre_store.get(genre_id)

        data = await read_json(request)

        try:
            params = parse_params(GenreParams, data)
        except ValidationError as e:
            return params_error_response(e)

        genre = genre_store.replace(
            genre_id, params.name, params.description, params.image
        )

        return web.json_response(
            {
                "success": True,
                "data": genre.to_dict(),
                "message": "Genre updated successfully",
            }
        )
    except GenreError as e:
        return genre_error_response(e)
    except web.HTTPException:
        raise
    except Exception as e:
        return internal_error_response(request, "replace_genre", e)


@routes.patch("/api/genres/{genre_id}")
async def patch_genre(request):
    try:
        genre_store = request.app["genre_store"]
        genre_id = get_genre_id(request)

        genre_store.get(genre_id)

        data = await read_json(request)

        try:
            params = parse_params(PatchGenreParams, data)
        except ValidationError as e:
            return params_error_response(e)

        genre = genre_store.patch(
            genre_id,
            GenrePatch(
                name=params.name, description=params.description, image=params.image
            ),
        )

        return web.json_response(
            {
                "success": True,
                "data": genre.to_dict(),
                "message": "Genre partially updated successfully",
            }
        )
    except GenreError as e:
        return genre_error_response(e)
    except web.HTTPException:
        raise
    except Exception as e:
        return internal_error_response(request, "patch_genre", e)


@routes.delete("/api/genres/{genre_id}")
async def delete_genre(request):
    try:
        genre = request.app["genre_store"].delete(get_genre_id(request))

        return web.json_response(
            {
                "success": True,
                "data": genre.to_dict(),
                "message": "Genre deleted successfully",
            }
        )
    except GenreError as e:
        return genre_error_response(e)
    except Exception as e:
        return internal_error_response(request, "delete_genre", e)


@routes.delete("/api/genres")
async def bulk_delete_genres(request):
    try:
        data = await read_json(request)

        result = request.app["genre_store"].bulk_delete(data.get("ids"))

        return web.json_response(
            {
                "success": True,
                "data": {
                    "deleted": [g.to_dict() for g in result.deleted],
                    "deletedCount": len(result.deleted),
                    "notFound": result.not_found,
                },
                "message": f"{len(result.deleted)} genre(s) deleted successfully",
            }
        )
    except GenreError as e:
        return genre_error_response(e)
    except web.HTTPException:
        raise
    except Exception as e:
        return internal_error_response(request, "bulk_delete_genres", e)


def make_app(genre_store, environment=utils.DEFAULT_ENVIRONMENT, images_path=None):
    """Build the web application around an existing store."""
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app.add_routes(routes)

    # Serve genre artwork from /images
    if images_path is not None:
        if os.path.isdir(images_path):
            app.router.add_static("/images", images_path)
        else:
            logger = logging.getLogger(__name__)
            logger.warning(f"Image directory {images_path} not found, not serving /images")

    app["genre_store"] = genre_store
    app["environment"] = environment
    app["started_at"] = time.monotonic()

    return app


async def go(port, environment, images_path):
    logger = logging.getLogger(__name__)

    app = make_app(GenreStore(), environment, images_path)

    runner = web.AppRunner(app)
    await runner.setup()

    site = web.TCPSite(runner, "0.0.0.0", port)
    await site.start()
    logger.info(f"Genreshelf server running on http://localhost:{port} ({environment})")
    await asyncio.Future()


def main():
    parser = argparse.ArgumentParser(description="Genreshelf Web Server")
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=utils.port_from_env(),
        help="Port to run the web server on (defaults to $PORT or 4000)",
    )
    parser.add_argument(
        "-e",
        "--environment",
        default=utils.environment_from_env(),
        help="Environment name reported by /api/ping (defaults to $GENRESHELF_ENV)",
    )
    parser.add_argument(
        "-i",
        "--images-path",
        default=str(utils.default_images_path()),
        dest="images_path",
        help="Directory served under /images",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging"
    )

    args = parser.parse_args()

    # set up the logger
    log_level = logging.DEBUG if args.verbose else logging.INFO

    logging.basicConfig(
        level=log_level,  # Set minimum level to show
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler()],  # Console output
    )

    asyncio.run(go(args.port, args.environment, args.images_path))


if __name__ == "__main__":
    main()
