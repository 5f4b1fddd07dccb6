#!/usr/bin/env python3
"""Diagnostic script to check that a deployed dispatch backend answers."""

import json
import os
import sys
from urllib.parse import urljoin

import requests

DEFAULT_BACKEND_URL = "http://localhost:8000"

ENDPOINTS = (
    ("/", "Root Endpoint"),
    ("/api/health", "Health Endpoint"),
    ("/api/health/database", "Database Health Endpoint"),
    ("/docs", "API Documentation"),
)


def check_endpoint(base_url, path, description):
    """Request one endpoint and print what came back."""
    url = urljoin(base_url, path)
    print(f"\n{'='*60}")
    print(f"Checking: {description}")
    print(f"URL: {url}")
    print(f"{'='*60}")

    try:
        response = requests.get(url, timeout=10)
    except requests.exceptions.Timeout:
        print("❌ TIMEOUT: Request took longer than 10 seconds")
        return False, None
    except requests.exceptions.ConnectionError as e:
        print(f"❌ CONNECTION ERROR: {e}")
        return False, None

    print(f"✅ Status Code: {response.status_code}")
    content_type = response.headers.get("content-type", "")
    if "application/json" in content_type:
        print("✅ Response Body (JSON):")
        print(json.dumps(response.json(), indent=2, ensure_ascii=False))
    else:
        print("✅ Response Body (Text):")
        print(response.text[:500])
    return response.ok, response.status_code


def main():
    base_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("DISPATCH_BACKEND_URL", DEFAULT_BACKEND_URL)
    print("🔍 Dispatch Backend Diagnostic")
    print(f"Target URL: {base_url}")

    results = [(description, *check_endpoint(base_url, path, description)) for path, description in ENDPOINTS]

    print(f"\n{'='*60}")
    print("SUMMARY")
    print(f"{'='*60}")
    for description, success, status in results:
        print(f"{description:<28} {'✅' if success else '❌'} - Status: {status}")

    if not any(success for _, success, _ in results):
        print("\n❌ ALL CHECKS FAILED - Backend is not accessible")
        print("\nPossible issues:")
        print("1. Backend is not running or crashed")
        print("2. Wrong URL or port")
        print("3. Firewall blocking access")
        sys.exit(1)
    if results[1][1]:
        print("\n✅ Backend is accessible and responding!")
    else:
        print("\n⚠️  Partial connectivity - some endpoints work, others don't")


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n\n⚠️  Check interrupted by user")
        sys.exit(1)
