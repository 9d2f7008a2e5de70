#!/usr/bin/env python3
#
# Walk through every endpoint of a running genreshelf server
# and print what comes back.
#
# This assumes you are running the server on
#  a host some where (or locally)

import argparse
import json
from urllib.parse import urljoin
import requests


def api_request(host, method, endpoint, body=None):
    url = urljoin(host, f"/api{endpoint}")

    try:
        r = requests.request(method, url, json=body)
    except requests.RequestException as e:
        print(f"Error calling {endpoint}: {e}")
        return None

    print(f"\n{method} {endpoint}")
    print(f"Status: {r.status_code}")
    try:
        data = r.json()
    except ValueError:
        print(f"Response: {r.text}")
        return None

    print(f"Response: {json.dumps(data, indent=2)}")
    return data


def section(title):
    print("\n" + "=" * 50)
    print(title)
    print("=" * 50)


def go(host):
    print(f"Make sure your server is running at {host}!")

    section("TEST 1: Health Check")
    api_request(host, "GET", "/ping")

    section("TEST 2: Get All Genres")
    initial = api_request(host, "GET", "/genres")

    section("TEST 3: Get Single Genre")
    if initial and initial.get("data"):
        api_request(host, "GET", f"/genres/{initial['data'][0]['id']}")

    section("TEST 4: Create New Genre")
    created = api_request(
        host,
        "POST",
        "/genres",
        {
            "name": "Horror",
            "description": "Scary and suspenseful films that thrill audiences",
            "image": "/images/horror.jpg",
        },
    )
    created_id = (created or {}).get("data", {}).get("id")

    section("TEST 5: Update Genre (Full Update)")
    if created_id:
        api_request(
            host,
            "PUT",
            f"/genres/{created_id}",
            {
                "name": "Horror",
                "description": "Spine-chilling films designed to frighten and create suspense",
                "image": "/images/horror-updated.jpg",
            },
        )

    section("TEST 6: Partial Update Genre (PATCH)")
    if created_id:
        api_request(
            host,
            "PATCH",
            f"/genres/{created_id}",
            {"description": "Movies that make you sleep with the lights on"},
        )

    section("TEST 7: Search Genres")
    api_request(host, "GET", "/genres?search=action")

    section("TEST 8: Sort Genres")
    api_request(host, "GET", "/genres?sort=name&order=desc")

    section("TEST 9: Create Another Genre")
    another = api_request(
        host,
        "POST",
        "/genres",
        {"name": "Romance", "description": "Love stories and romantic comedies"},
    )
    another_id = (another or {}).get("data", {}).get("id")

    section("TEST 10: Bulk Delete Genres")
    if created_id and another_id:
        api_request(host, "DELETE", "/genres", {"ids": [created_id, another_id]})

    section("TEST 11: Error Handling - Get Non-existent Genre")
    api_request(host, "GET", "/genres/999")

    section("TEST 12: Error Handling - Invalid Data")
    api_request(host, "POST", "/genres", {"name": "", "description": "Test"})

    section("TEST 13: Final State - Get All Genres")
    api_request(host, "GET", "/genres")

    section("API walk-through completed")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Exercise the genreshelf API")
    parser.add_argument(
        "--host",
        default="http://localhost:4000",
        dest="host",
        help="Host of the genreshelf server to exercise",
    )
    args = parser.parse_args()

    go(args.host)
