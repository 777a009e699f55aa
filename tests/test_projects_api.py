"""Tests for the project and project image endpoints."""

import cloudinary.exceptions
import cloudinary.uploader
import pytest
from sqlalchemy import func, select

from studio.models import ProjectImage


async def _create_project(client, auth_headers, name, **fields) -> dict:
    response = await client.post("/api/cms/projects", json={"name": name, **fields}, headers=auth_headers)
    assert response.status_code == 201
    return response.json()


async def _upload_image(client, auth_headers, project_id, title, png_bytes, **data):
    return await client.post(
        f"/api/cms/projects/{project_id}/images",
        data={"title": title, **data},
        files={"file": (f"{title}.png", png_bytes, "image/png")},
        headers=auth_headers,
    )


class TestProjectCrud:
    async def test_requires_authentication(self, client):
        response = await client.get("/api/cms/projects")

        assert response.status_code == 401
        assert response.json()["error"] == "Missing token"

    async def test_create_appends_to_end(self, client, auth_headers):
        first = await _create_project(client, auth_headers, "Lakeside Retreat", location="Dallas, TX")
        second = await _create_project(client, auth_headers, "  Uptown Loft  ")

        assert first["display_order"] == 1
        assert first["location"] == "Dallas, TX"
        assert first["images"] == []
        assert second["display_order"] == 2
        assert second["name"] == "Uptown Loft"

    async def test_blank_name_rejected(self, client, auth_headers):
        response = await client.post("/api/cms/projects", json={"name": "   "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_public_list_in_display_order(self, client, auth_headers):
        a = await _create_project(client, auth_headers, "A")
        b = await _create_project(client, auth_headers, "B")
        await client.post(f"/api/cms/projects/{b['id']}/move", json={"direction": "up"}, headers=auth_headers)

        response = await client.get("/api/projects")

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [b["id"], a["id"]]

    async def test_partial_update_keeps_other_fields(self, client, auth_headers):
        project = await _create_project(
            client, auth_headers, "Ranch House", description="Open plan", location="Austin"
        )

        response = await client.put(
            f"/api/cms/projects/{project['id']}",
            json={"location": "Fort Worth"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Ranch House"
        assert body["description"] == "Open plan"
        assert body["location"] == "Fort Worth"
        assert body["display_order"] == project["display_order"]

    async def test_update_can_clear_description(self, client, auth_headers):
        project = await _create_project(client, auth_headers, "Ranch House", description="Open plan")

        response = await client.put(
            f"/api/cms/projects/{project['id']}",
            json={"description": None},
            headers=auth_headers,
        )

        assert response.json()["description"] is None

    async def test_missing_project_returns_404(self, client, auth_headers):
        for response in (
            await client.get("/api/projects/999"),
            await client.get("/api/cms/projects/999", headers=auth_headers),
            await client.put("/api/cms/projects/999", json={"name": "X"}, headers=auth_headers),
            await client.delete("/api/cms/projects/999", headers=auth_headers),
        ):
            assert response.status_code == 404
            assert response.json()["code"] == "NOT_FOUND"

    async def test_delete_cascades_only_own_images(
        self, client, auth_headers, png_bytes, fake_cloudinary, db_session
    ):
        doomed = await _create_project(client, auth_headers, "Doomed")
        kept = await _create_project(client, auth_headers, "Kept")
        for title in ("one", "two"):
            await _upload_image(client, auth_headers, doomed["id"], title, png_bytes)
        survivor = (await _upload_image(client, auth_headers, kept["id"], "three", png_bytes)).json()

        response = await client.delete(f"/api/cms/projects/{doomed['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Project deleted successfully", "project_id": doomed["id"]}
        result = await db_session.execute(select(ProjectImage.id))
        assert list(result.scalars().all()) == [survivor["id"]]
        assert (await client.get(f"/api/projects/{doomed['id']}")).status_code == 404


class TestProjectOrdering:
    async def test_move_endpoint(self, client, auth_headers):
        a = await _create_project(client, auth_headers, "A")
        b = await _create_project(client, auth_headers, "B")

        response = await client.post(
            f"/api/cms/projects/{a['id']}/move", json={"direction": "down"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {
            "message": "Project moved successfully",
            "id": a["id"],
            "display_order": 2,
            "swapped_with_id": b["id"],
            "swapped_with_display_order": 1,
        }

    async def test_move_past_end_is_conflict(self, client, auth_headers):
        a = await _create_project(client, auth_headers, "A")

        response = await client.post(
            f"/api/cms/projects/{a['id']}/move", json={"direction": "UP"}, headers=auth_headers
        )

        assert response.status_code == 409
        assert response.json()["code"] == "NO_ADJACENT_ENTITY"

    async def test_invalid_direction(self, client, auth_headers):
        a = await _create_project(client, auth_headers, "A")

        response = await client.post(
            f"/api/cms/projects/{a['id']}/move", json={"direction": "left"}, headers=auth_headers
        )

        assert response.status_code == 400

    async def test_reorder(self, client, auth_headers):
        a = await _create_project(client, auth_headers, "A")
        b = await _create_project(client, auth_headers, "B")
        c = await _create_project(client, auth_headers, "C")

        response = await client.put(
            "/api/cms/projects/reorder", json={"ids": [c["id"], a["id"]]}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["ids"] == [c["id"], a["id"], b["id"]]
        listed = (await client.get("/api/projects")).json()
        assert [(p["id"], p["display_order"]) for p in listed] == [(c["id"], 1), (a["id"], 2), (b["id"], 3)]

    async def test_reorder_rejects_duplicates(self, client, auth_headers):
        a = await _create_project(client, auth_headers, "A")

        response = await client.put(
            "/api/cms/projects/reorder", json={"ids": [a["id"], a["id"]]}, headers=auth_headers
        )

        assert response.status_code == 400


class TestProjectImages:
    async def test_upload_appends_and_uses_cloudinary_url(
        self, client, auth_headers, png_bytes, fake_cloudinary
    ):
        project = await _create_project(client, auth_headers, "Lakeside")

        first = await _upload_image(client, auth_headers, project["id"], "Living Room", png_bytes)
        second = await _upload_image(
            client, auth_headers, project["id"], "Kitchen", png_bytes, description="  Marble island "
        )

        assert first.status_code == 201
        assert first.json()["display_order"] == 1
        assert second.json()["display_order"] == 2
        assert second.json()["description"] == "Marble island"
        assert [u["folder"] for u in fake_cloudinary] == ["project-images", "project-images"]
        assert fake_cloudinary[0]["public_id"].endswith("-Living-Room")
        assert first.json()["image_url"].startswith("https://res.cloudinary.com/")

        images = (await client.get(f"/api/projects/{project['id']}")).json()["images"]
        assert [i["title"] for i in images] == ["Living Room", "Kitchen"]

    async def test_non_image_rejected_without_row(
        self, client, auth_headers, fake_cloudinary, db_session
    ):
        project = await _create_project(client, auth_headers, "Lakeside")

        response = await client.post(
            f"/api/cms/projects/{project['id']}/images",
            data={"title": "Notes"},
            files={"file": ("notes.txt", b"not an image", "text/plain")},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"
        assert fake_cloudinary == []
        assert (await db_session.execute(select(func.count(ProjectImage.id)))).scalar() == 0

    async def test_upload_failure_writes_nothing(
        self, client, auth_headers, png_bytes, monkeypatch, db_session
    ):
        project = await _create_project(client, auth_headers, "Lakeside")

        def broken_upload(*args, **kwargs):
            raise cloudinary.exceptions.Error("Invalid API key")

        monkeypatch.setattr(cloudinary.uploader, "upload", broken_upload)

        response = await _upload_image(client, auth_headers, project["id"], "Hall", png_bytes)

        assert response.status_code == 502
        assert response.json()["code"] == "UPLOAD_FAILURE"
        assert (await db_session.execute(select(func.count(ProjectImage.id)))).scalar() == 0

    async def test_upload_to_missing_project(self, client, auth_headers, png_bytes, fake_cloudinary):
        response = await _upload_image(client, auth_headers, 404, "Hall", png_bytes)

        assert response.status_code == 404
        assert fake_cloudinary == []

    async def test_update_metadata_and_replace_file(
        self, client, auth_headers, png_bytes, fake_cloudinary
    ):
        project = await _create_project(client, auth_headers, "Lakeside")
        image = (await _upload_image(client, auth_headers, project["id"], "Hall", png_bytes)).json()

        renamed = await client.put(
            f"/api/cms/project-images/{image['id']}",
            data={"title": "Entry Hall"},
            headers=auth_headers,
        )
        assert renamed.status_code == 200
        assert renamed.json()["title"] == "Entry Hall"
        assert renamed.json()["image_url"] == image["image_url"]
        assert len(fake_cloudinary) == 1

        replaced = await client.put(
            f"/api/cms/project-images/{image['id']}",
            files={"file": ("entry hall 2.png", png_bytes, "image/png")},
            headers=auth_headers,
        )
        assert replaced.status_code == 200
        assert replaced.json()["title"] == "Entry Hall"
        assert len(fake_cloudinary) == 2
        assert fake_cloudinary[1]["public_id"].endswith("-entry-hall-2")

    async def test_move_and_delete_image(self, client, auth_headers, png_bytes, fake_cloudinary):
        project = await _create_project(client, auth_headers, "Lakeside")
        first = (await _upload_image(client, auth_headers, project["id"], "one", png_bytes)).json()
        second = (await _upload_image(client, auth_headers, project["id"], "two", png_bytes)).json()

        moved = await client.post(
            f"/api/cms/project-images/{second['id']}/move",
            json={"direction": "backward"},
            headers=auth_headers,
        )
        assert moved.status_code == 200
        assert moved.json()["message"] == "Image moved successfully"

        listed = (await client.get(f"/api/cms/projects/{project['id']}/images", headers=auth_headers)).json()
        assert [i["id"] for i in listed] == [second["id"], first["id"]]

        deleted = await client.delete(f"/api/cms/project-images/{first['id']}", headers=auth_headers)
        assert deleted.json() == {"message": "Image deleted successfully", "image_id": first["id"]}
        assert (await client.get(f"/api/cms/project-images/{first['id']}", headers=auth_headers)).status_code == 404

    async def test_reorder_images(self, client, auth_headers, png_bytes, fake_cloudinary):
        project = await _create_project(client, auth_headers, "Lakeside")
        ids = [
            (await _upload_image(client, auth_headers, project["id"], title, png_bytes)).json()["id"]
            for title in ("one", "two", "three")
        ]

        response = await client.put(
            f"/api/cms/projects/{project['id']}/images/reorder",
            json={"ids": [ids[2], ids[1], ids[0]]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["ids"] == [ids[2], ids[1], ids[0]]


@pytest.mark.parametrize("path", ["/api/cms/project-images/1", "/api/cms/projects/1/images"])
async def test_image_routes_require_token(client, path):
    response = await client.get(path)

    assert response.status_code == 401
