"""Conversion between persisted templates and the visual editor's data format.

The editor works on a flat node list where every node carries a synthetic,
position-derived ``id``, root-level props that mix metadata and settings, and
a ``zones`` mapping holding the nodes dropped inside a columns block
(keyed ``"<parent id>:children"``). Social networks are edited as one flat
``<network>Url`` field per network.

Both directions are pure and never mutate their input. Columns children
round-trip: they are written to and read back from ``zones``.
"""

import copy
from typing import Any

from mailblocks.domain.constraints import DEFAULT_FONT_FAMILY, MAX_WIDTH, SOCIAL_NETWORKS
from mailblocks.domain.entities.blocks import BlockType
from mailblocks.domain.entities.email_template import TEMPLATE_VERSION, EmailTemplate

METADATA_FIELDS = frozenset({"subject", "preheader"})

SETTINGS_DEFAULTS: dict[str, Any] = {
    "backgroundColor": "#ffffff",
    "contentWidth": MAX_WIDTH,
    "fontFamily": DEFAULT_FONT_FAMILY,
}

CHILDREN_ZONE = "children"


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _zone_key(node_id: str) -> str:
    return f"{node_id}:{CHILDREN_ZONE}"


def _flatten_social(props: dict[str, Any]) -> dict[str, Any]:
    networks = _as_list(props.pop("networks", None))
    urls = {
        network.get("type"): network.get("url") or ""
        for network in networks
        if isinstance(network, dict)
    }
    for name in SOCIAL_NETWORKS:
        props[f"{name}Url"] = urls.get(name, props.get(f"{name}Url", ""))
    return props


def _nest_social(props: dict[str, Any]) -> dict[str, Any]:
    if "networks" in props:
        return props
    props["networks"] = [
        {"type": name, "url": props.pop(f"{name}Url")}
        for name in SOCIAL_NETWORKS
        if props.get(f"{name}Url")
    ]
    for name in SOCIAL_NETWORKS:
        props.pop(f"{name}Url", None)
    return props


def _block_to_node(block: dict[str, Any], node_id: str, zones: dict[str, list]) -> dict[str, Any]:
    props = copy.deepcopy(_as_dict(block.get("props")))
    if block.get("type") == BlockType.SOCIAL.value:
        props = _flatten_social(props)
    props["id"] = node_id

    if block.get("type") == BlockType.COLUMNS.value:
        zones[_zone_key(node_id)] = [
            _block_to_node(child, f"{node_id}-{i}", zones)
            for i, child in enumerate(_as_list(block.get("children")))
            if isinstance(child, dict)
        ]

    return {"type": block.get("type"), "props": props}


def _node_to_block(node: dict[str, Any], zones: dict[str, Any]) -> dict[str, Any]:
    props = copy.deepcopy(_as_dict(node.get("props")))
    node_id = props.pop("id", None)
    node_type = node.get("type")
    if node_type == BlockType.SOCIAL.value:
        props = _nest_social(props)

    block: dict[str, Any] = {"type": node_type, "props": props}
    if node_type == BlockType.COLUMNS.value:
        zone = zones.get(_zone_key(node_id)) if node_id else None
        block["children"] = [
            _node_to_block(child, zones) for child in _as_list(zone) if isinstance(child, dict)
        ]
    return block


def to_editor_data(template: dict[str, Any] | EmailTemplate) -> dict[str, Any]:
    """Convert a template to editor data.

    Args:
        template: A template, as an entity or in its persisted JSON shape.

    Returns:
        dict: ``{"content": [...], "root": {"props": {...}}, "zones": {...}}``
        where top-level nodes get ids ``block-<i>`` and nested nodes
        ``block-<i>-<j>``. Malformed parts (a non-object template, block or
        props) are skipped so unvalidated drafts still open in the editor.
    """
    if isinstance(template, EmailTemplate):
        template = template.to_dict()
    template = _as_dict(template)

    zones: dict[str, list] = {}
    content = [
        _block_to_node(block, f"block-{i}", zones)
        for i, block in enumerate(_as_list(template.get("content")))
        if isinstance(block, dict)
    ]
    root_props = {
        **_as_dict(template.get("settings")),
        **_as_dict(template.get("metadata")),
    }
    return {"content": content, "root": {"props": copy.deepcopy(root_props)}, "zones": zones}


def from_editor_data(data: dict[str, Any]) -> dict[str, Any]:
    """Convert editor data back to the persisted template shape.

    Synthetic ids are stripped. Root props are split by a fixed allowlist:
    ``subject`` and ``preheader`` go to metadata, everything else to
    settings, with defaults for missing settings.

    Args:
        data: Editor data as produced by the editor (or ``to_editor_data``).

    Returns:
        dict: A template in its persisted JSON shape. The result is not
        validated.
    """
    data = _as_dict(data)
    root_props = _as_dict(_as_dict(data.get("root")).get("props"))
    zones = _as_dict(data.get("zones"))

    settings = dict(SETTINGS_DEFAULTS)
    settings.update(
        {
            key: copy.deepcopy(value)
            for key, value in root_props.items()
            if key not in METADATA_FIELDS and value is not None
        }
    )

    return {
        "version": TEMPLATE_VERSION,
        "metadata": {
            "subject": root_props.get("subject") or "",
            "preheader": root_props.get("preheader") or "",
        },
        "settings": settings,
        "content": [
            _node_to_block(node, zones)
            for node in _as_list(data.get("content"))
            if isinstance(node, dict)
        ],
    }
