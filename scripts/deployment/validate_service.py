#!/usr/bin/env python3
"""
Smoke test a running HTML link shortener.

Shortens a small template against the live service, follows one short link
and checks the error responses.

Usage:
    python validate_service.py --url http://localhost:9200
"""

import argparse
import sys
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import requests

TEMPLATE = """<!DOCTYPE html>
<html><body>
<a href="https://example.com/promo/{stamp}">Shop</a>
<img src="https://example.com/banner/{stamp}.png" alt="">
<a href="https://example.com/promo/{stamp}">Shop again</a>
<a href="mailto:help@example.com">Help</a>
</body></html>
"""


class ServiceValidator:
    """Runs checks against a live service and records the outcome of each."""

    def __init__(self, base_url: str = "http://localhost:9200", path_prefix: str = "/r"):
        self.base_url = base_url.rstrip("/")
        self.path_prefix = "/" + path_prefix.strip("/") if path_prefix.strip("/") else ""
        self.session = requests.Session()
        self.test_results: List[Tuple[str, bool]] = []

    def print_header(self, text: str):
        print(f"\n{'=' * 60}")
        print(f"  {text}")
        print(f"{'=' * 60}\n")

    def print_test(self, name: str, passed: bool, details: str = ""):
        status = "PASS" if passed else "FAIL"
        self.test_results.append((name, passed))
        print(f"[{status}] {name}")
        if details:
            print(f"       {details}")

    def test_health_check(self) -> bool:
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=5)
            if response.status_code != 200:
                self.print_test("Health Check", False, f"Status: {response.status_code}")
                return False

            data = response.json()
            is_healthy = data.get("status") == "healthy" and data.get("database") == "healthy"
            self.print_test(
                "Health Check",
                is_healthy,
                f"DB: {data.get('database')}, Cache: {data.get('cache', 'N/A')}",
            )
            return is_healthy
        except requests.RequestException as e:
            self.print_test("Health Check", False, f"Error: {e}")
            return False

    def test_shorten(self, html: str) -> Optional[Dict[str, Any]]:
        """Shorten a template and check every replacement landed in the output."""
        try:
            response = self.session.post(
                f"{self.base_url}/api/shorten",
                json={"html_content": html},
                timeout=10,
            )
            if response.status_code != 200:
                self.print_test("Shorten Template", False, f"Status: {response.status_code}")
                return None

            data = response.json()
            replacements = data.get("replacements", [])
            rewritten = data.get("modified_html", "")
            passed = len(replacements) == 2 and all(
                r["short_url"] in rewritten and f'"{r["original_url"]}"' not in rewritten
                for r in replacements
            )
            self.print_test(
                "Shorten Template",
                passed,
                f"Stats: {data.get('stats')}",
            )
            return data if passed else None
        except requests.RequestException as e:
            self.print_test("Shorten Template", False, f"Error: {e}")
            return None

    def test_shorten_is_stable(self, html: str, first: Dict[str, Any]) -> bool:
        try:
            response = self.session.post(
                f"{self.base_url}/api/shorten",
                json={"html_content": html},
                timeout=10,
            )
            same = response.status_code == 200 and response.json().get("modified_html") == first["modified_html"]
            self.print_test("Stable Short Codes", same, f"Status: {response.status_code}")
            return same
        except requests.RequestException as e:
            self.print_test("Stable Short Codes", False, f"Error: {e}")
            return False

    def test_redirect(self, short_code: str, original_url: str) -> bool:
        try:
            response = self.session.get(
                f"{self.base_url}{self.path_prefix}/{short_code}",
                allow_redirects=False,
                timeout=5,
            )
            location = response.headers.get("Location", "")
            passed = response.status_code == 301 and location == original_url
            self.print_test(
                "Short Link Redirect",
                passed,
                f"Status: {response.status_code}, Location: {location[:50] or 'none'}",
            )
            return passed
        except requests.RequestException as e:
            self.print_test("Short Link Redirect", False, f"Error: {e}")
            return False

    def test_expect_status(self, name: str, method: str, path: str, expected: int, **kwargs) -> bool:
        try:
            response = self.session.request(method, f"{self.base_url}{path}", timeout=5, **kwargs)
            passed = response.status_code == expected
            self.print_test(name, passed, f"Status: {response.status_code} (expected {expected})")
            return passed
        except requests.RequestException as e:
            self.print_test(name, False, f"Error: {e}")
            return False

    def run_all_tests(self) -> bool:
        self.print_header("HTML Link Shortener Validation")
        print(f"Testing service at: {self.base_url}")
        print(f"Timestamp: {datetime.now().isoformat()}\n")

        if not self.test_health_check():
            print("\nHealth check failed. Service may not be running.")
            print(f"   Make sure the service is accessible at {self.base_url}")
            return False

        print()

        html = TEMPLATE.format(stamp=int(time.time()))
        result = self.test_shorten(html)
        if result:
            self.test_shorten_is_stable(html, result)
            first = result["replacements"][0]
            self.test_redirect(first["short_code"], first["original_url"])
            self.test_expect_status("URL Info", "GET", f"/api/urls/{first['short_code']}", 200)

        print()

        self.test_expect_status("Empty Template Rejection", "POST", "/api/shorten", 422, json={"html_content": ""})
        self.test_expect_status("Unknown Code", "GET", f"{self.path_prefix}/nonexistent999", 404, allow_redirects=False)
        self.test_expect_status("Stats Endpoint", "GET", "/api/stats", 200)

        self.print_summary()
        return all(passed for _, passed in self.test_results)

    def print_summary(self):
        total = len(self.test_results)
        passed = sum(1 for _, p in self.test_results if p)
        failed = total - passed

        self.print_header("Test Summary")
        print(f"Total Tests:  {total}")
        print(f"Passed:       {passed}")
        print(f"Failed:       {failed}")
        print(f"Success Rate: {(passed / total * 100):.1f}%")

        if failed:
            print("\nFailed tests:")
            for name, ok in self.test_results:
                if not ok:
                    print(f"   - {name}")

        print()


def main():
    parser = argparse.ArgumentParser(description="Validate a running HTML link shortener")
    parser.add_argument(
        "--url",
        default="http://localhost:9200",
        help="Base URL of the service (default: http://localhost:9200)",
    )
    parser.add_argument("--path-prefix", default="/r", help="Redirect path prefix (default: /r)")

    args = parser.parse_args()

    validator = ServiceValidator(args.url, args.path_prefix)

    try:
        success = validator.run_all_tests()
        sys.exit(0 if success else 1)
    except KeyboardInterrupt:
        print("\n\nValidation interrupted by user")
        sys.exit(2)


if __name__ == "__main__":
    main()
