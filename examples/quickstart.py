#!/usr/bin/env python3
"""
LabHub Quickstart — a lab member's first publication, end to end.

Registers a PI and a student → promotes the PI (CLI) → PI adds the
student to the roster → student posts a publication → public listings.
Run with: python examples/quickstart.py

Requires: pip install httpx
Backend must be running: http://localhost:5000
"""

import subprocess
import sys

import httpx

from _common import BASE, check_backend, client_for, register_and_login


def main():
    check_backend()

    # ── Accounts ──────────────────────────────────────────────────
    print("\n1. Registering a PI and a student...")
    pi, pi_token = register_and_login("Grace Hopper", role="Principal Investigator")
    student, student_token = register_and_login("Alan Turing")
    print(f"   PI:      {pi['email']}")
    print(f"   Student: {student['email']}")

    # ── Promote (no HTTP route sets the admin flag) ───────────────
    print("\n2. Promoting the PI to admin via the CLI...")
    result = subprocess.run(["labhub", "promote", pi["email"]], capture_output=True, text=True)
    if result.returncode != 0:
        print(f"   Promotion failed: {result.stderr.strip()}")
        sys.exit(1)

    admin = client_for(pi_token)
    member = client_for(student_token)

    resp = admin.get("/isAdmin")
    print(f"   {resp.json()['message']}")

    # ── Roster ────────────────────────────────────────────────────
    print("\n3. Adding the student to the team...")
    resp = admin.post("/team", json={"userId": student["id"]})
    assert resp.status_code == 201, f"Failed: {resp.text}"
    print(f"   Roster row: {resp.json()['id'][:8]}...")

    # ── Publication ───────────────────────────────────────────────
    print("\n4. Student posts a publication...")
    resp = member.post("/publications", json={
        "title": "On Computable Numbers",
        "authors": [student["id"]],
        "additionalAuthors": ["A. Church"],
        "summary": "Demo publication created by the quickstart.",
        "year": 1936,
    })
    assert resp.status_code == 201, f"Failed: {resp.text}"
    pub = resp.json()
    print(f"   Publication: {pub['title']} ({pub['id'][:8]}...)")

    resp = member.patch(f"/publications/{pub['id']}", json={"doi": "10.1112/plms/s2-42.1.230"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   DOI set: {resp.json()['doi']}")

    # ── Public views ──────────────────────────────────────────────
    print("\n5. Public listings...")
    recent = httpx.get(f"{BASE}/publications").json()
    print(f"   Recent publications: {len(recent)}")
    profile = httpx.get(f"{BASE}/team/{student['id']}").json()
    print(f"   {profile['teamMember']['name']}: {len(profile['publications'])} publication(s)")

    print("\nDone.")


if __name__ == "__main__":
    main()
