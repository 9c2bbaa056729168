"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags last-spot    # Race for a small event
  locust -f locustfile.py --tags throughput   # Test listing cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

Seed categories first (python -m eventbook.seed) so events can be created.
"""

import random
import string
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

# Shared state
EVENT_IDS = []
CATEGORY_IDS = []
RACE_EVENT_ID = None
RACE_CAPACITY = 10

PASSWORD = "loadtest123"


def random_email():
    return f"load_{random.randint(10000, 99999)}_{random.randint(0, 999)}@test.com"


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def event_payload(title, capacity, price=0.0):
    return {
        "title": title,
        "description": "Load test event",
        "date": (date.today() + timedelta(days=random.randint(1, 90))).isoformat(),
        "time": "19:00",
        "location": "Load Test Venue",
        "capacity": capacity,
        "price": price,
        "category_id": random.choice(CATEGORY_IDS),
    }


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"SETUP: first signed-in user creates a {RACE_CAPACITY}-spot race event")
    print("=" * 60)


class SignedInUser(HttpUser):
    abstract = True

    def on_start(self):
        email = random_email()
        self.client.post("/api/v1/auth/register", json={
            "email": email,
            "username": random_username(),
            "password": PASSWORD,
        })
        resp = self.client.post("/api/v1/auth/login", json={
            "email": email,
            "password": PASSWORD,
        })
        if resp.status_code == 200:
            self.headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
        else:
            self.headers = {}

        if not CATEGORY_IDS:
            resp = self.client.get("/api/v1/categories/")
            if resp.status_code == 200:
                CATEGORY_IDS.extend(c["id"] for c in resp.json())


class LastSpotUser(SignedInUser):
    """
    TEST 1: Many users -> 10 spots

    Run: locust -f locustfile.py --tags last-spot -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM bookings WHERE event_id = X AND status = 'CONFIRMED';
    Should equal capacity - remaining_spots, and never exceed 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        super().on_start()
        if RACE_EVENT_ID or not self.headers or not CATEGORY_IDS:
            return
        resp = self.client.post(
            "/api/v1/events/",
            json=event_payload("Last Spot Race", RACE_CAPACITY),
            headers=self.headers,
        )
        if resp.status_code == 201:
            globals()["RACE_EVENT_ID"] = resp.json()["id"]
            print(f"\nCreated event {RACE_EVENT_ID} with {RACE_CAPACITY} spots\n")

    @tag("last-spot")
    @task
    def book_last_spots(self):
        """Everyone fights for the same spots."""
        if not RACE_EVENT_ID or not self.headers:
            return

        with self.client.post(
            "/api/v1/bookings/",
            json={"event_id": RACE_EVENT_ID},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: sold out or already booked
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare avg response time, requests/sec and P95/P99 latency.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events_cached(self):
        page = random.randint(1, 5)
        self.client.get(
            f"/api/v1/events/?page={page}&page_size=20",
            name="/api/v1/events/ [cached]",
        )

    @tag("throughput", "read")
    @task(5)
    def filter_events(self):
        price = random.choice(["all", "free", "paid"])
        sort_by = random.choice(["date", "price"])
        self.client.get(
            f"/api/v1/events/?price={price}&sort_by={sort_by}&upcoming_only=true",
            name="/api/v1/events/ [filtered]",
        )

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(SignedInUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_event_id(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"event_id": 999999},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def negative_capacity(self):
        if not CATEGORY_IDS:
            return
        payload = event_payload("Broken", -5)
        with self.client.post(
            "/api/v1/events/", json=payload, headers=self.headers, catch_response=True
        ) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def unknown_category(self):
        if not CATEGORY_IDS:
            return
        payload = {**event_payload("Orphan", 10), "category_id": 999999}
        with self.client.post(
            "/api/v1/events/", json=payload, headers=self.headers, catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_auth(self):
        if not EVENT_IDS:
            return
        with self.client.post(
            "/api/v1/bookings/",
            json={"event_id": random.choice(EVENT_IDS)},
            catch_response=True,
        ) as resp:
            self._expect(resp, [401])


class RealisticUser(SignedInUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing, some bookings and cancellations, rare creates.
    """
    wait_time = between(1, 3)

    def on_start(self):
        super().on_start()
        self.booking_ids = []

    @task(50)
    def browse_events(self):
        resp = self.client.get("/api/v1/events/?page=1&page_size=20")
        if resp.status_code == 200:
            for event in resp.json().get("events", []):
                if event["id"] not in EVENT_IDS:
                    EVENT_IDS.append(event["id"])

    @task(10)
    def browse_category(self):
        if CATEGORY_IDS:
            self.client.get(
                f"/api/v1/events/?category_id={random.choice(CATEGORY_IDS)}",
                name="/api/v1/events/?category_id",
            )

    @task(20)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @task(10)
    def book_spot(self):
        if EVENT_IDS and self.headers:
            with self.client.post(
                "/api/v1/bookings/",
                json={"event_id": random.choice(EVENT_IDS)},
                headers=self.headers,
                catch_response=True,
            ) as resp:
                if resp.status_code == 201:
                    self.booking_ids.append(resp.json()["id"])
                    resp.success()
                elif resp.status_code == 409:
                    resp.success()

    @task(2)
    def cancel_booking(self):
        if self.booking_ids:
            booking_id = self.booking_ids.pop()
            self.client.delete(
                f"/api/v1/bookings/{booking_id}",
                headers=self.headers,
                name="/api/v1/bookings/{id}",
            )

    @task(3)
    def create_event(self):
        if self.headers and CATEGORY_IDS:
            resp = self.client.post(
                "/api/v1/events/",
                json=event_payload(
                    f"Event {random.randint(1, 10000)}",
                    random.randint(10, 500),
                    random.choice([0.0, 15.0, 40.0]),
                ),
                headers=self.headers,
            )
            if resp.status_code == 201:
                EVENT_IDS.append(resp.json()["id"])
