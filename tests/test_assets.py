from __future__ import annotations

from newsdesk.assets import build_asset_index, normalize_asset_url
from newsdesk.content import AssetRecord


def test_build_asset_index_extracts_fields() -> None:
    record = AssetRecord.model_validate(
        {
            "sys": {"id": "a1"},
            "fields": {
                "title": "Cover",
                "description": "Cover art",
                "file": {
                    "url": "//images.ctfassets.net/x/cover.png",
                    "details": {"image": {"width": 640, "height": 480}},
                },
            },
        }
    )

    index = build_asset_index([record])

    asset = index["a1"]
    assert asset.url == "https://images.ctfassets.net/x/cover.png"
    assert asset.title == "Cover"
    assert asset.description == "Cover art"
    assert (asset.width, asset.height) == (640, 480)
    assert asset.has_dimensions


def test_build_asset_index_tolerates_partial_records() -> None:
    records = [
        AssetRecord.model_validate({"sys": {"id": "bare"}}),
        AssetRecord.model_validate({"sys": {"id": "no-file"}, "fields": {"title": "T"}}),
        AssetRecord.model_validate(
            {
                "sys": {"id": "one-dimension"},
                "fields": {"file": {"url": "https://cdn.example.com/a.jpg", "details": {"image": {"width": 10}}}},
            }
        ),
        AssetRecord.model_validate(
            {
                "sys": {"id": "zero"},
                "fields": {"file": {"url": "//x/y.jpg", "details": {"image": {"width": 0, "height": 20}}}},
            }
        ),
    ]

    index = build_asset_index(records)

    assert index["bare"].url == ""
    assert index["bare"].title == ""
    assert index["bare"].description == ""
    assert index["no-file"].title == "T"
    assert index["one-dimension"].url == "https://cdn.example.com/a.jpg"
    assert index["one-dimension"].width is None and index["one-dimension"].height is None
    assert index["zero"].width is None and index["zero"].height is None


def test_normalize_asset_url() -> None:
    assert normalize_asset_url("//host/path.jpg") == "https://host/path.jpg"
    assert normalize_asset_url("http://host/path.jpg") == "http://host/path.jpg"
    assert normalize_asset_url(None) == ""
