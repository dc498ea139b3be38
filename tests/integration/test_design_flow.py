"""End-to-end design flow through the API and the real MJML engine."""

import base64

import pytest

from mailblocks.domain.services.editor_adapter import from_editor_data, to_editor_data

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
async def test_preview_renders_html(client):
    response = await client.post(
        "/api/v1/preview",
        json={
            "mjml": "<mjml><mj-body><mj-section><mj-column>"
            "<mj-text>Hello preview</mj-text>"
            "</mj-column></mj-section></mj-body></mjml>"
        },
    )

    assert response.status_code == 200
    assert "Hello preview" in response.json()["html"]


@pytest.mark.asyncio
async def test_editor_round_trip_to_published_html(client, welcome_template):
    # Upload the hero image the way the editor's image field does
    pixel = base64.b64encode(b"GIF89a\x01\x00\x01\x00\x00\x00\x00;").decode()
    upload = await client.post(
        "/api/v1/uploads/images",
        json={"name": "hero.gif", "type": "image/gif", "data": f"data:image/gif;base64,{pixel}"},
    )
    assert upload.status_code == 201
    image_url = upload.json()["url"]

    editor = to_editor_data(welcome_template)
    editor["zones"]["block-2:children"][0]["props"]["src"] = image_url

    created = await client.post("/api/v1/designs", json={"editor": editor})
    assert created.status_code == 201
    design = created.json()

    assert design["json"] == from_editor_data(editor)
    assert design["json"]["content"][2]["children"][0]["props"]["src"] == image_url
    assert "Welcome aboard, {{first_name}}!" in design["html"]
    assert image_url in design["html"]

    loaded = await client.get(f"/api/v1/designs/{design['id']}/editor")
    assert loaded.json() == editor


@pytest.mark.asyncio
async def test_compile_then_preview_matches_saved_html(client, welcome_template):
    compiled = await client.post("/api/v1/templates/compile", json=welcome_template)
    preview = await client.post("/api/v1/preview", json={"mjml": compiled.json()["mjml"]})
    created = await client.post("/api/v1/designs", json={"json": welcome_template})

    assert preview.json()["html"] == created.json()["html"]
    assert created.json()["mjml"] == compiled.json()["mjml"]
