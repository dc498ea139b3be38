import copy

from mailblocks.domain.entities import EmailTemplate
from mailblocks.domain.services.editor_adapter import (
    SETTINGS_DEFAULTS,
    from_editor_data,
    to_editor_data,
)
from mailblocks.domain.services.template_validator import validate_template


class TestToEditorData:

    def test_shape(self, make_template):
        data = to_editor_data(make_template({"type": "EmailSpacer", "props": {"height": 30}}))

        assert data == {
            "content": [{"type": "EmailSpacer", "props": {"height": 30, "id": "block-0"}}],
            "root": {
                "props": {
                    "backgroundColor": "#ffffff",
                    "contentWidth": 600,
                    "fontFamily": "Arial, Helvetica, sans-serif",
                    "subject": "Welcome to Acme",
                    "preheader": "Thanks for signing up",
                }
            },
            "zones": {},
        }

    def test_ids_follow_position(self, welcome_template):
        data = to_editor_data(welcome_template)
        assert [node["props"]["id"] for node in data["content"]] == [
            f"block-{i}" for i in range(7)
        ]

    def test_columns_children_go_to_zone(self, welcome_template):
        data = to_editor_data(welcome_template)
        columns = data["content"][2]

        assert "children" not in columns
        zone = data["zones"]["block-2:children"]
        assert [node["type"] for node in zone] == ["EmailImage", "EmailButton"]
        assert [node["props"]["id"] for node in zone] == ["block-2-0", "block-2-1"]

    def test_social_is_flattened(self, welcome_template):
        props = to_editor_data(welcome_template)["content"][5]["props"]

        assert "networks" not in props
        assert props["facebookUrl"] == "https://facebook.com/acme"
        assert props["linkedinUrl"] == "https://linkedin.com/company/acme"
        assert props["twitterUrl"] == ""
        assert props["instagramUrl"] == ""
        assert props["youtubeUrl"] == ""

    def test_accepts_entity(self, welcome_template):
        entity = EmailTemplate.from_dict(welcome_template)
        assert to_editor_data(entity) == to_editor_data(welcome_template)

    def test_does_not_mutate_input(self, welcome_template):
        snapshot = copy.deepcopy(welcome_template)
        data = to_editor_data(welcome_template)
        data["content"][0]["props"]["logoWidth"] = 999
        data["root"]["props"]["subject"] = "changed"

        assert welcome_template == snapshot

    def test_non_object_template_is_empty(self):
        for template in (None, [], "x", 42):
            assert to_editor_data(template) == {
                "content": [],
                "root": {"props": {}},
                "zones": {},
            }

    def test_malformed_blocks_are_skipped(self):
        data = to_editor_data(
            {
                "settings": "bad",
                "content": [
                    "x",
                    None,
                    {"type": "EmailText", "props": ["bad"]},
                    {
                        "type": "EmailColumns",
                        "props": {"columns": 2},
                        "children": ["x", {"type": "EmailSpacer"}],
                    },
                    {"type": "EmailSocial", "props": {"networks": 5}},
                ],
            }
        )

        ids = [node["props"]["id"] for node in data["content"]]
        assert ids == ["block-2", "block-3", "block-4"]
        assert data["content"][0]["props"] == {"id": "block-2"}
        assert data["zones"] == {
            "block-3:children": [{"type": "EmailSpacer", "props": {"id": "block-3-1"}}]
        }
        assert data["content"][2]["props"]["facebookUrl"] == ""
        assert data["root"] == {"props": {}}


class TestFromEditorData:

    def test_round_trip(self, welcome_template):
        assert from_editor_data(to_editor_data(welcome_template)) == welcome_template

    def test_round_trip_stays_valid(self, welcome_template):
        assert validate_template(from_editor_data(to_editor_data(welcome_template))).valid

    def test_ids_are_stripped(self, welcome_template):
        template = from_editor_data(to_editor_data(welcome_template))
        assert all("id" not in block["props"] for block in template["content"])
        assert all("id" not in child["props"] for child in template["content"][2]["children"])

    def test_empty_editor_data(self):
        assert from_editor_data({}) == {
            "version": "1.0",
            "metadata": {"subject": "", "preheader": ""},
            "settings": dict(SETTINGS_DEFAULTS),
            "content": [],
        }

    def test_root_props_split(self):
        template = from_editor_data(
            {
                "content": [],
                "root": {
                    "props": {
                        "subject": "Hello",
                        "contentWidth": 500,
                        "backgroundColor": None,
                        "title": "legacy",
                    }
                },
            }
        )

        assert template["metadata"] == {"subject": "Hello", "preheader": ""}
        assert template["settings"] == {
            "backgroundColor": "#ffffff",
            "contentWidth": 500,
            "fontFamily": "Arial, Helvetica, sans-serif",
            "title": "legacy",
        }

    def test_missing_zone_gives_empty_children(self):
        template = from_editor_data(
            {"content": [{"type": "EmailColumns", "props": {"id": "block-0", "columns": 2}}]}
        )
        assert template["content"] == [
            {"type": "EmailColumns", "props": {"columns": 2}, "children": []}
        ]

    def test_flat_social_fields_are_nested(self):
        template = from_editor_data(
            {
                "content": [
                    {
                        "type": "EmailSocial",
                        "props": {
                            "id": "block-0",
                            "youtubeUrl": "https://youtube.com/acme",
                            "facebookUrl": "https://facebook.com/acme",
                            "twitterUrl": "",
                        },
                    }
                ]
            }
        )

        assert template["content"][0]["props"] == {
            "networks": [
                {"type": "facebook", "url": "https://facebook.com/acme"},
                {"type": "youtube", "url": "https://youtube.com/acme"},
            ]
        }

    def test_does_not_mutate_input(self, welcome_template):
        data = to_editor_data(welcome_template)
        snapshot = copy.deepcopy(data)
        from_editor_data(data)
        assert data == snapshot

    def test_malformed_editor_data_is_tolerated(self):
        template = from_editor_data(
            {
                "root": "bad",
                "zones": ["bad"],
                "content": ["x", {"type": "EmailColumns", "props": {"id": "block-1", "columns": 2}}],
            }
        )

        assert template["settings"] == SETTINGS_DEFAULTS
        assert template["content"] == [
            {"type": "EmailColumns", "props": {"columns": 2}, "children": []}
        ]
