"""Tests for the preview endpoint."""

import pytest

from mailblocks.infrastructure.services.mjml import MjmlDiagnostic, RenderResult


@pytest.mark.asyncio
async def test_preview(client, renderer):
    response = await client.post("/api/v1/preview", json={"mjml": "<mjml></mjml>"})

    assert response.status_code == 200
    assert response.json() == {"html": "<html>rendered</html>", "errors": []}
    renderer.render_async.assert_awaited_once_with("<mjml></mjml>")


@pytest.mark.asyncio
async def test_preview_failure_returns_diagnostics(client, renderer):
    renderer.render_async.return_value = RenderResult(
        html="",
        errors=[
            MjmlDiagnostic(
                line=0,
                message="Malformed MJML",
                tag_name="mjml",
                formatted_message="MJML compilation error: Malformed MJML",
            )
        ],
    )

    response = await client.post("/api/v1/preview", json={"mjml": "<mjml>"})

    assert response.status_code == 200
    assert response.json() == {
        "html": "",
        "errors": [
            {
                "line": 0,
                "message": "Malformed MJML",
                "tagName": "mjml",
                "formattedMessage": "MJML compilation error: Malformed MJML",
            }
        ],
    }


@pytest.mark.asyncio
async def test_preview_requires_markup(client):
    response = await client.post("/api/v1/preview", json={"mjml": ""})
    assert response.status_code == 422
