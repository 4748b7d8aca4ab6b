"""Site-content API tests — address, role, about, technology, tutorial, notes.

Learn: Every collection shares one contract (admin create, public list,
admin typed patch), so the contract is exercised once per collection
with parametrize, and the upload-carrying collections get their own
multipart tests.
"""

import uuid

import pytest

COLLECTIONS = [
    ("address", {"room": "B12", "department": "CS", "postalCode": "02139"}, {"city": "Cambridge"}),
    ("role", {"roleName": "Postdoc"}, {"roleName": "Research Scientist"}),
    ("about", {"text": "We study graphs."}, {"text": "We study hypergraphs."}),
    ("technology", {"name": "GraphLib", "downloadLink": "https://x.example"}, {"description": "Fast"}),
    ("tutorial", {"name": "Intro", "tutorialLink": "https://t.example"}, {"name": "Intro v2"}),
    ("notes", {"name": "Lecture 1", "noteLink": "https://n.example"}, {"description": "Slides"}),
]


@pytest.mark.asyncio
@pytest.mark.parametrize("path, create, patch", COLLECTIONS)
async def test_admin_create_list_patch(client, make_user, path, create, patch):
    _, admin_h = await make_user(admin=True)

    r = await client.post(f"/api/{path}", json=create, headers=admin_h)
    assert r.status_code == 201, r.text
    item = r.json()
    for key, value in create.items():
        assert item[key] == value

    r = await client.get(f"/api/{path}")
    assert r.status_code == 200
    assert [i["id"] for i in r.json()] == [item["id"]]

    r = await client.patch(f"/api/{path}/{item['id']}", json=patch, headers=admin_h)
    assert r.status_code == 200, r.text
    updated = r.json()
    for key, value in {**create, **patch}.items():
        assert updated[key] == value


@pytest.mark.asyncio
@pytest.mark.parametrize("path, create, patch", COLLECTIONS)
async def test_writes_are_admin_only(client, make_user, path, create, patch):
    _, admin_h = await make_user(admin=True)
    _, member_h = await make_user(team=True)

    r = await client.post(f"/api/{path}", json=create, headers=member_h)
    assert r.status_code == 403
    r = await client.post(f"/api/{path}", json=create)
    assert r.status_code == 401

    item = (await client.post(f"/api/{path}", json=create, headers=admin_h)).json()
    r = await client.patch(f"/api/{path}/{item['id']}", json=patch, headers=member_h)
    assert r.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize("path", [c[0] for c in COLLECTIONS])
async def test_patch_unknown_id_404(client, make_user, path):
    _, admin_h = await make_user(admin=True)
    r = await client.patch(f"/api/{path}/{uuid.uuid4()}", json={}, headers=admin_h)
    assert r.status_code == 404
    assert r.json()["detail"].endswith("not found")


@pytest.mark.asyncio
async def test_patch_rejects_unknown_fields(client, make_user):
    _, admin_h = await make_user(admin=True)
    item = (await client.post("/api/role", json={"roleName": "PI"}, headers=admin_h)).json()
    r = await client.patch(f"/api/role/{item['id']}", json={"colour": "red"}, headers=admin_h)
    assert r.status_code == 422


@pytest.mark.asyncio
async def test_list_is_empty_initially(client):
    r = await client.get("/api/technology")
    assert r.status_code == 200
    assert r.json() == []


# ═══════════════════════════════════════════════════════════
# Icon uploads
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "path, field, attr, prefix",
    [
        ("technology", "icon", "icon", "tech-icons"),
        ("tutorial", "newIcon", "newIcon", "tutorial-icons"),
        ("notes", "newIcon", "newIcon", "note-icons"),
    ],
)
async def test_create_with_icon_upload(client, make_user, blob_store, path, field, attr, prefix):
    _, admin_h = await make_user(admin=True)
    r = await client.post(
        f"/api/{path}",
        data={"name": "With Icon", "description": "has an icon"},
        files={field: ("logo.svg", b"<svg/>", "image/svg+xml")},
        headers=admin_h,
    )
    assert r.status_code == 201, r.text
    item = r.json()
    assert item["name"] == "With Icon"
    assert f"/uploads/{prefix}/" in item[attr]
    key = item[attr].split("/uploads/", 1)[1]
    assert (blob_store.root / key).read_bytes() == b"<svg/>"


@pytest.mark.asyncio
async def test_create_without_icon_leaves_it_empty(client, make_user):
    _, admin_h = await make_user(admin=True)
    r = await client.post("/api/technology", data={"name": "No Icon"}, headers=admin_h)
    assert r.status_code == 201
    assert r.json()["icon"] is None


@pytest.mark.asyncio
async def test_icon_can_be_patched_as_url(client, make_user):
    _, admin_h = await make_user(admin=True)
    item = (await client.post("/api/tutorial", json={"name": "T"}, headers=admin_h)).json()
    r = await client.patch(
        f"/api/tutorial/{item['id']}",
        json={"newIcon": "https://cdn.example/icon.png"},
        headers=admin_h,
    )
    assert r.status_code == 200
    assert r.json()["newIcon"] == "https://cdn.example/icon.png"
