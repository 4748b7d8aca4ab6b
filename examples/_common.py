"""
Shared helpers for LabHub examples.

Handles the health check and account setup (register + login) so each
example can focus on its specific workflow.
"""

import sys
import uuid

import httpx

BASE = "http://localhost:5000/api"


def check_backend() -> None:
    """Verify the backend is reachable and its database is up."""
    try:
        resp = httpx.get(f"{BASE}/health", timeout=5)
    except httpx.ConnectError:
        print(f"ERROR: Backend not reachable at {BASE}")
        print("Start it with:  labhub serve")
        sys.exit(1)

    if resp.status_code != 200:
        print(f"ERROR: Health check returned {resp.status_code}")
        sys.exit(1)

    health = resp.json()
    print("Backend health:")
    print(f"  Database: {'✓' if health['database'] == 'ok' else '✗'}")

    if health["status"] != "healthy":
        print(f"\nERROR: Database problem: {health['database']}")
        sys.exit(1)


def register_and_login(name: str, role: str = "PhD Student") -> tuple[dict, str]:
    """Register a fresh account and login, returning (user, token).

    Uses a unique email per run so examples are repeatable.
    """
    run_id = uuid.uuid4().hex[:8]
    email = f"{name.lower().replace(' ', '.')}-{run_id}@lab.example.edu"
    password = "demo-password-123"

    resp = httpx.post(
        f"{BASE}/users/register",
        json={"name": name, "email": email, "password": password, "role": role},
        timeout=10,
    )
    if resp.status_code != 201:
        print(f"ERROR: Registration failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    resp = httpx.post(
        f"{BASE}/users/login",
        json={"email": email, "password": password},
        timeout=10,
    )
    if resp.status_code != 200:
        print(f"ERROR: Login failed: {resp.status_code} {resp.text}")
        sys.exit(1)

    body = resp.json()
    return body["user"], body["token"]


def client_for(token: str) -> httpx.Client:
    """An httpx Client that sends the bearer token on every request."""
    return httpx.Client(
        base_url=BASE,
        timeout=10,
        headers={"Authorization": f"Bearer {token}"},
    )
