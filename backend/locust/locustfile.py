"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags duplicate   # Same user hammering one booking
  locust -f locustfile.py --tags browse      # Public listing throughput
  locust -f locustfile.py --tags edge        # Bad input
  locust -f locustfile.py                    # All tests

Each host user signs up, creates and publishes one experience on start;
guests sign up as role "user".
"""

import random
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag

PASSWORD = "loadtest123"
LOCATIONS = ["Lisbon", "Porto", "Kyoto", "Oaxaca", "Reykjavik"]

# Shared state
EXPERIENCE_IDS = []


def random_email(prefix: str) -> str:
    return f"{prefix}_{random.randint(100000, 999999)}@load.test"


def signup_and_login(client, role: str) -> dict:
    email = random_email(role)
    client.post("/auth/signup", json={"email": email, "password": PASSWORD, "role": role})
    resp = client.post("/auth/login", json={"email": email, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['token']}"}


class HostUser(HttpUser):
    """Keeps the catalogue populated with published experiences."""
    wait_time = between(2, 5)
    weight = 1

    def on_start(self):
        self.headers = signup_and_login(self.client, "host")

    @tag("browse", "duplicate")
    @task
    def create_and_publish(self):
        if not self.headers:
            return
        start = datetime.now(timezone.utc) + timedelta(days=random.randint(1, 90))
        resp = self.client.post("/experiences", json={
            "title": f"Experience {random.randint(1, 10000)}",
            "description": "Load test listing",
            "location": random.choice(LOCATIONS),
            "price": random.randint(0, 20000),
            "start_time": start.isoformat(),
        }, headers=self.headers)
        if resp.status_code != 201:
            return
        experience_id = resp.json()["id"]
        publish = self.client.patch(
            f"/experiences/{experience_id}/publish",
            headers=self.headers,
            name="/experiences/{id}/publish",
        )
        if publish.status_code == 200:
            EXPERIENCE_IDS.append(experience_id)


class DuplicateBookingUser(HttpUser):
    """
    Same guest books the same experience repeatedly.

    Run: locust -f locustfile.py --tags duplicate -u 50 -r 25 --run-time 30s

    After test, verify:
      SELECT experience_id, user_id, COUNT(*) FROM bookings
      WHERE status = 'confirmed' GROUP BY 1, 2 HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)
    weight = 3

    def on_start(self):
        self.headers = signup_and_login(self.client, "user")

    @tag("duplicate")
    @task
    def book_same_experience(self):
        if not EXPERIENCE_IDS or not self.headers:
            return
        with self.client.post(
            f"/experiences/{EXPERIENCE_IDS[0]}/book",
            json={"seats": 1},
            headers=self.headers,
            name="/experiences/{id}/book [same]",
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 400 and resp.json()["error"]["code"] == "DUPLICATE_BOOKING":
                resp.success()  # Expected after the first booking
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class BrowsingUser(HttpUser):
    """Anonymous traffic on the public listing; every read hits the database."""
    wait_time = between(0.1, 0.5)
    weight = 6

    @tag("browse")
    @task(10)
    def list_experiences(self):
        self.client.get(
            "/experiences",
            params={"page": random.randint(1, 5), "limit": 20},
            name="/experiences",
        )

    @tag("browse")
    @task(4)
    def filter_by_location(self):
        self.client.get(
            "/experiences",
            params={"location": random.choice(LOCATIONS).lower(), "sort": "desc"},
            name="/experiences?location",
        )

    @tag("browse")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    Bad input handling.

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    The API should answer every request with the standard error body.
    """
    wait_time = between(0.5, 1.5)
    weight = 1

    def on_start(self):
        self.headers = signup_and_login(self.client, "user")

    def _expect(self, resp, status_code: int, code: str):
        if resp.status_code == status_code and resp.json()["error"]["code"] == code:
            resp.success()
        else:
            resp.failure(f"Expected {status_code} {code}, got {resp.status_code}")

    @tag("edge")
    @task
    def missing_experience(self):
        with self.client.post("/experiences/999999/book", json={"seats": 1},
                              headers=self.headers, name="/experiences/{id}/book [missing]",
                              catch_response=True) as resp:
            self._expect(resp, 404, "NOT_FOUND")

    @tag("edge")
    @task
    def zero_seats(self):
        with self.client.post("/experiences/1/book", json={"seats": 0},
                              headers=self.headers, name="/experiences/{id}/book [zero]",
                              catch_response=True) as resp:
            self._expect(resp, 400, "VALIDATION_ERROR")

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/experiences/1/book", data="not json at all",
                              headers={**self.headers, "Content-Type": "application/json"},
                              name="/experiences/{id}/book [garbage]",
                              catch_response=True) as resp:
            self._expect(resp, 400, "VALIDATION_ERROR")

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/experiences/1/book", json={"seats": 1},
                              name="/experiences/{id}/book [anon]",
                              catch_response=True) as resp:
            self._expect(resp, 401, "UNAUTHORIZED")

    @tag("edge")
    @task
    def self_assigned_admin(self):
        with self.client.post("/auth/signup", json={
            "email": random_email("admin"), "password": PASSWORD, "role": "admin",
        }, name="/auth/signup [admin]", catch_response=True) as resp:
            self._expect(resp, 400, "INVALID_ROLE")
