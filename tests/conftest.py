"""Pytest configuration for all tests."""

import copy
from typing import Any, Callable

import pytest

_BASE_TEMPLATE: dict[str, Any] = {
    "version": "1.0",
    "metadata": {"subject": "Welcome to Acme", "preheader": "Thanks for signing up"},
    "settings": {
        "backgroundColor": "#ffffff",
        "contentWidth": 600,
        "fontFamily": "Arial, Helvetica, sans-serif",
    },
    "content": [],
}


@pytest.fixture
def make_template() -> Callable[..., dict[str, Any]]:
    """Build a valid template dict with the given blocks as content."""

    def _make(*blocks: dict[str, Any], **settings: Any) -> dict[str, Any]:
        template = copy.deepcopy(_BASE_TEMPLATE)
        template["content"] = [copy.deepcopy(block) for block in blocks]
        template["settings"].update(settings)
        return template

    return _make


@pytest.fixture
def welcome_template(make_template) -> dict[str, Any]:
    """A realistic template using every block type."""
    return make_template(
        {
            "type": "EmailHeader",
            "props": {
                "logoUrl": "https://cdn.acme.test/logo.png",
                "logoAlt": "Acme",
                "logoWidth": 120,
                "backgroundColor": "#ffffff",
                "align": "center",
                "padding": "md",
            },
        },
        {
            "type": "EmailText",
            "props": {
                "content": "<p>Welcome aboard, {{first_name}}!</p>",
                "fontSize": 16,
                "fontFamily": "Georgia, serif",
                "color": "#333333",
                "align": "left",
                "lineHeight": "1.5",
                "padding": "md",
            },
        },
        {
            "type": "EmailColumns",
            "props": {"columns": 2, "gap": "md", "verticalAlign": "top", "stackOnMobile": True},
            "children": [
                {
                    "type": "EmailImage",
                    "props": {
                        "src": "https://cdn.acme.test/hero.jpg",
                        "alt": "Product shot",
                        "width": "full",
                        "align": "center",
                        "padding": "sm",
                    },
                },
                {
                    "type": "EmailButton",
                    "props": {
                        "text": "Get started",
                        "href": "https://acme.test/start",
                        "backgroundColor": "#007bff",
                        "textColor": "#ffffff",
                        "fontSize": 16,
                        "borderRadius": 4,
                        "align": "center",
                        "fullWidth": False,
                        "padding": "md",
                    },
                },
            ],
        },
        {"type": "EmailSpacer", "props": {"height": 20}},
        {
            "type": "EmailDivider",
            "props": {"color": "#e0e0e0", "width": 1, "style": "solid", "padding": "md"},
        },
        {
            "type": "EmailSocial",
            "props": {
                "networks": [
                    {"type": "facebook", "url": "https://facebook.com/acme"},
                    {"type": "linkedin", "url": "https://linkedin.com/company/acme"},
                ],
                "iconSize": 32,
                "align": "center",
                "iconStyle": "color",
            },
        },
        {
            "type": "EmailFooter",
            "props": {
                "companyName": "Acme Inc.",
                "address": "1 Main St\nSpringfield",
                "showUnsubscribe": True,
                "unsubscribeText": "Unsubscribe",
                "backgroundColor": "#f4f4f4",
                "textColor": "#666666",
            },
        },
    )
