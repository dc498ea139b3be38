from types import SimpleNamespace
from unittest.mock import patch

import pytest

from mailblocks.infrastructure.services.mjml import (
    MjmlDiagnostic,
    MjmlRenderer,
    RenderResult,
)

ENGINE = "mailblocks.infrastructure.services.mjml.html_renderer.mjml_to_html"
MARKUP = "<mjml><mj-body></mj-body></mjml>"


def _engine_result(html="<html></html>", errors=None):
    return SimpleNamespace(html=html, errors=errors or [])


class TestMjmlRenderer:

    def test_render_success(self):
        with patch(ENGINE, return_value=_engine_result()) as engine:
            result = MjmlRenderer().render(MARKUP)

        assert result == RenderResult(html="<html></html>", errors=[])
        assert result.ok
        assert engine.call_args.args[0].read() == MARKUP

    def test_engine_exception_becomes_diagnostic(self):
        with patch(ENGINE, side_effect=RuntimeError("Malformed MJML")):
            result = MjmlRenderer().render("<mjml>")

        assert result.html == ""
        assert not result.ok
        assert result.errors == [
            MjmlDiagnostic(
                line=0,
                message="Malformed MJML",
                tag_name="mjml",
                formatted_message="MJML compilation error: Malformed MJML",
            )
        ]

    def test_engine_exception_without_message(self):
        with patch(ENGINE, side_effect=ValueError()):
            result = MjmlRenderer().render(MARKUP)

        assert result.errors[0].message == "Unknown error"

    def test_soft_keeps_html_and_diagnostics(self):
        raw = {"line": 3, "message": "Attribute foo is illegal", "tagName": "mj-text"}
        with patch(ENGINE, return_value=_engine_result(errors=[raw])):
            result = MjmlRenderer("soft").render(MARKUP)

        assert result.html == "<html></html>"
        assert result.errors == [
            MjmlDiagnostic(
                line=3,
                message="Attribute foo is illegal",
                tag_name="mj-text",
                formatted_message="Attribute foo is illegal",
            )
        ]

    def test_strict_withholds_html(self):
        with patch(ENGINE, return_value=_engine_result(errors=["bad attribute"])):
            result = MjmlRenderer("strict").render(MARKUP)

        assert result.html == ""
        assert result.errors[0].message == "bad attribute"
        assert result.errors[0].tag_name == "mjml"

    def test_strict_without_errors(self):
        with patch(ENGINE, return_value=_engine_result()):
            result = MjmlRenderer("strict").render(MARKUP)

        assert result.ok

    def test_skip_drops_diagnostics(self):
        with patch(ENGINE, return_value=_engine_result(errors=["bad attribute"])):
            result = MjmlRenderer("skip").render(MARKUP)

        assert result.html == "<html></html>"
        assert result.errors == []

    def test_to_dict_uses_camel_case(self):
        result = RenderResult(
            html="",
            errors=[MjmlDiagnostic(1, "m", "mj-text", "line 1: m")],
        )
        assert result.to_dict() == {
            "html": "",
            "errors": [
                {"line": 1, "message": "m", "tagName": "mj-text", "formattedMessage": "line 1: m"}
            ],
        }

    @pytest.mark.asyncio
    async def test_render_async(self):
        with patch(ENGINE, return_value=_engine_result(html="<p>async</p>")):
            result = await MjmlRenderer().render_async(MARKUP)

        assert result.html == "<p>async</p>"
