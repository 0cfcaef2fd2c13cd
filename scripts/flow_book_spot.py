#!/usr/bin/env python3
"""
Booking admission flow script.

This script only orchestrates API calls. All rules live in the backend.

Usage:
    python scripts/flow_book_spot.py --spot-id 1 --start 2026-04-01 --end 2026-04-04
    python scripts/flow_book_spot.py --spot-id 1 --start 2026-04-01 --end 2026-04-04 --credential demo-lition

Flow:
    1. Login as guest
    2. List the spot's bookings
    3. Request a booking
    4. Repeat the same request (expected to be refused as a conflict)
    5. List the spot's bookings again
"""

import argparse
import json
import sys

import httpx

BASE_URL = "http://localhost:8000"


def login(client: httpx.Client, credential: str, password: str) -> str:
    """Login and return an access token."""
    response = client.post(
        "/api/auth/login",
        json={"credential": credential, "password": password},
    )
    if response.status_code != 200:
        print(f"ERROR: Login failed for {credential}: {response.status_code}")
        print(response.text)
        sys.exit(1)

    return response.json()["access_token"]


def print_step(step: int, title: str):
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("=" * 60)


def print_response(response: httpx.Response) -> bool:
    body = response.json() if response.text else {}
    print(f"Status: {response.status_code}")
    print(json.dumps(body, indent=2))
    return response.status_code < 400


def main():
    parser = argparse.ArgumentParser(description="Book a spot and check conflict handling")
    parser.add_argument("--spot-id", type=int, required=True, help="Spot id")
    parser.add_argument("--start", required=True, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", required=True, help="End date (YYYY-MM-DD)")
    parser.add_argument("--credential", default="demo@example.com", help="Email or username")
    parser.add_argument("--password", default="password123")
    parser.add_argument("--base-url", default=BASE_URL)
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url, timeout=10.0) as client:
        print_step(1, "Login as guest")
        token = login(client, args.credential, args.password)
        client.headers["Authorization"] = f"Bearer {token}"
        print(f"Logged in as {args.credential}")

        bookings_url = f"/api/spots/{args.spot_id}/bookings"
        payload = {"startDate": args.start, "endDate": args.end}

        print_step(2, "Current bookings")
        if not print_response(client.get(bookings_url)):
            sys.exit(1)

        print_step(3, "Request booking")
        if not print_response(client.post(bookings_url, json=payload)):
            sys.exit(1)

        print_step(4, "Repeat the same request")
        response = client.post(bookings_url, json=payload)
        print_response(response)
        if response.status_code != 403:
            print("ERROR: expected the duplicate request to be refused")
            sys.exit(1)

        print_step(5, "Bookings after admission")
        print_response(client.get(bookings_url))

    print("\nFlow complete")


if __name__ == "__main__":
    main()
