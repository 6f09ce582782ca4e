"""LocationViewのテスト"""
import math
from typing import Any

import pytest

from mapsco_geocoding.features.geocoding.domain.models import (
    BoundingBox,
    Coordinates,
    LocationView,
)
from mapsco_geocoding.shared.exceptions.errors import DecodeError


def test_coordinates(white_house: dict[str, Any]) -> None:
    """文字列の緯度・経度をfloatとして返す"""
    view = LocationView(white_house)

    assert view.latitude == 38.8976633
    assert view.longitude == -77.0365739
    assert view.coordinates() == Coordinates(latitude=38.8976633, longitude=-77.0365739)
    assert view.coordinates().to_tuple() == (38.8976633, -77.0365739)


def test_missing_coordinates_disable_map_urls() -> None:
    """lat/lonが無ければ座標も地図URLもNone"""
    view = LocationView({"display_name": "Somewhere"})

    assert view.latitude is None
    assert view.longitude is None
    assert view.coordinates() is None
    assert view.google_maps_url() is None
    assert view.apple_maps_url() is None
    assert view.bing_maps_url() is None
    assert view.openstreetmap_url() is None
    assert view.map_urls() == {"google": None, "apple": None, "bing": None, "osm": None}


def test_partial_coordinates() -> None:
    """片方だけでは座標にならない"""
    view = LocationView({"lat": "10.5"})

    assert view.latitude == 10.5
    assert view.coordinates() is None


def test_non_numeric_latitude_raises_on_access() -> None:
    """数値でない緯度はアクセス時にDecodeError"""
    view = LocationView({"lat": "north", "lon": "1.0"})

    assert view.longitude == 1.0
    with pytest.raises(DecodeError):
        _ = view.latitude


def test_map_urls(white_house: dict[str, Any]) -> None:
    """地図サービスのURL"""
    view = LocationView(white_house)

    assert view.google_maps_url() == (
        "https://www.google.com/maps/search/?api=1&query=38.8976633,-77.0365739"
    )
    assert view.apple_maps_url() == "https://maps.apple.com/?q=38.8976633,-77.0365739"
    assert view.bing_maps_url() == "https://www.bing.com/maps?cp=38.8976633~-77.0365739"
    assert view.openstreetmap_url() == (
        "https://www.openstreetmap.org/?mlat=38.8976633&mlon=-77.0365739&zoom=12"
    )
    assert view.map_urls()["osm"] == view.openstreetmap_url()


def test_scalar_fields(white_house: dict[str, Any]) -> None:
    """単純なフィールド"""
    view = LocationView(white_house)

    assert view.display_name.startswith("White House")
    assert view.place_id == 331374757
    assert view.osm_type == "way"
    assert view.osm_id == 238241022
    assert view.location_class == "office"
    assert view.location_type == "government"
    assert view.importance == 0.6863
    assert view.license.startswith("Data © OpenStreetMap")


def test_jsonv2_category_is_used_as_class() -> None:
    """jsonv2形式のcategoryをclassとして扱う"""
    view = LocationView({"category": "amenity", "type": "cafe"})

    assert view.location_class == "amenity"
    assert view.location_type == "cafe"


def test_empty_payload_returns_none_everywhere() -> None:
    """空のペイロードでも例外にならない"""
    view = LocationView({})

    assert view.display_name is None
    assert view.place_id is None
    assert view.osm_id is None
    assert view.importance is None
    assert view.license is None
    assert view.bounding_box() is None
    assert view.has_bounding_box() is False
    assert view.bounding_box_dimensions() is None
    assert view.bounding_box_radius() is None
    assert view.address() is None
    assert view.city() is None
    assert view.country_code() is None


def test_bounding_box(white_house: dict[str, Any]) -> None:
    """[min_lat, max_lat, min_lon, max_lon] の順で解釈する"""
    view = LocationView(white_house)

    assert view.has_bounding_box() is True
    assert view.bounding_box() == BoundingBox(
        min_lat=38.8974908,
        max_lat=38.897911,
        min_lon=-77.0368537,
        max_lon=-77.0362519,
    )
    assert view.bounding_box().to_dict() == {
        "min_lat": 38.8974908,
        "max_lat": 38.897911,
        "min_lon": -77.0368537,
        "max_lon": -77.0362519,
    }


def test_bounding_box_geometry(white_house: dict[str, Any]) -> None:
    """寸法と半径は有限かつ非負"""
    view = LocationView(white_house)

    dimensions = view.bounding_box_dimensions()
    radius = view.bounding_box_radius()

    assert set(dimensions) == {"width_km", "height_km"}
    for value in (dimensions["width_km"], dimensions["height_km"], radius):
        assert math.isfinite(value)
        assert value >= 0

    assert dimensions["height_km"] == pytest.approx(0.0467, rel=1e-2)
    assert dimensions["width_km"] == pytest.approx(0.0521, rel=1e-2)
    assert radius == pytest.approx(0.035, rel=1e-2)


def test_bounding_box_geometry_at_equator() -> None:
    """赤道付近の2度四方"""
    view = LocationView({"boundingbox": ["-1", "1", "-1", "1"]})

    dimensions = view.bounding_box_dimensions()

    assert dimensions["height_km"] == pytest.approx(222.39, rel=1e-3)
    assert dimensions["width_km"] == pytest.approx(222.39, rel=1e-3)
    assert view.bounding_box_radius() == pytest.approx(157.25, rel=1e-3)


def test_inverted_bounding_box_dimensions_are_magnitudes() -> None:
    """min/maxが逆転していても寸法は非負"""
    view = LocationView({"boundingbox": ["1", "-1", "1", "-1"]})

    dimensions = view.bounding_box_dimensions()

    assert dimensions["width_km"] > 0
    assert dimensions["height_km"] > 0


@pytest.mark.parametrize(
    "boundingbox",
    [
        ["1", "2", "3"],
        ["1", "2", "3", "4", "5"],
        "1,2,3,4",
        None,
    ],
)
def test_invalid_bounding_box(boundingbox: Any) -> None:
    """4要素の配列でなければバウンディングボックスなし"""
    view = LocationView({"boundingbox": boundingbox})

    assert view.has_bounding_box() is False
    assert view.bounding_box() is None
    assert view.bounding_box_dimensions() is None
    assert view.bounding_box_radius() is None


def test_address_reconstructed_from_display_name(white_house: dict[str, Any]) -> None:
    """addressが無い場合はdisplay_nameから推定する"""
    view = LocationView(white_house)

    address = view.address()

    assert address["country"] == "United States"
    assert address["postcode"] == "20500"
    assert address["state"] == "District of Columbia"
    assert address["city"] == "Washington"
    assert address["road"] == "White House, 1600, Pennsylvania Avenue Northwest, Ward 2"
    assert view.street() == address["road"]
    assert view.house_number() is None


def test_address_reconstruction_with_few_segments() -> None:
    """セグメントが少なければ部分的な住所になる"""
    view = LocationView({"display_name": "Paris, France"})

    assert view.address() == {"country": "France", "postcode": "Paris"}


def test_address_from_payload() -> None:
    """addressがあればそのまま返す"""
    address = {
        "house_number": "1600",
        "road": "Pennsylvania Avenue Northwest",
        "borough": "Ward 2",
        "city": "Washington",
        "state": "District of Columbia",
        "postcode": "20500",
        "country": "United States",
        "country_code": "us",
    }
    view = LocationView({"display_name": "ignored, value", "address": address})

    assert view.address() == address
    assert view.house_number() == "1600"
    assert view.street() == "Pennsylvania Avenue Northwest"
    assert view.city() == "Washington"
    assert view.state() == "District of Columbia"
    assert view.postcode() == "20500"
    assert view.country() == "United States"
    assert view.country_code() == "US"
    assert view.borough() == "Ward 2"
    assert view.address_component("suburb") is None


def test_view_does_not_share_state_with_payload(white_house: dict[str, Any]) -> None:
    """元の辞書を変更してもビューは変わらない"""
    view = LocationView(white_house)

    white_house["lat"] = "0"
    white_house["boundingbox"][0] = "0"

    assert view.latitude == 38.8976633
    assert view.bounding_box().min_lat == 38.8974908


def test_raw_data_is_read_only(white_house: dict[str, Any]) -> None:
    """raw_dataは変更できない"""
    view = LocationView(white_house)

    assert view.raw_data == white_house
    with pytest.raises(TypeError):
        view.raw_data["lat"] = "0"  # type: ignore[index]


def test_raw_data_nested_values_are_detached() -> None:
    """raw_data経由で入れ子の値を書き換えてもビューは変わらない"""
    view = LocationView({"address": {"city": "A"}, "boundingbox": ["1", "2", "3", "4"]})

    view.raw_data["address"]["city"] = "B"
    view.raw_data["boundingbox"][0] = "0"

    assert view.city() == "A"
    assert view.bounding_box().min_lat == 1.0
    assert view.raw_data["address"] == {"city": "A"}


def test_country_code_accepts_non_string_values() -> None:
    """文字列以外の国コードも文字列化して大文字で返す"""
    assert LocationView({"address": {"country_code": 81}}).country_code() == "81"
    assert LocationView({"address": {"country_code": "jp"}}).country_code() == "JP"


def test_equality(white_house: dict[str, Any]) -> None:
    """同じペイロードなら等価"""
    assert LocationView(white_house) == LocationView(dict(white_house))
    assert LocationView(white_house) != LocationView({})


def test_non_mapping_payload_is_rejected() -> None:
    """JSONオブジェクト以外はDecodeError"""
    with pytest.raises(DecodeError):
        LocationView([{"lat": "1"}])  # type: ignore[arg-type]
