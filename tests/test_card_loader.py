import asyncio
import json
import logging

import pytest
from aiohttp import web
from aiohttp import test_utils

from birdcards.exceptions import DataFetchFailure
from birdcards.models import SessionStatus
from birdcards.services import CardLoader, apply_progress, build_cards
from birdcards.session import DeckSession

from conftest import make_card


MANIFEST = ["Common_Blackbird.mp3", "Song_Thrush.mp3", "Dodo.mp3"]
MAPPING = {
    "Common_Blackbird.mp3": {"displayName": "Common Blackbird", "image": "Common_Blackbird.jpg"},
    "Song_Thrush.mp3": {"displayName": "Song Thrush", "image": None},
}


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def load(manifest_url, mapping_url):
    async def run():
        async with CardLoader(manifest_url=manifest_url, mapping_url=mapping_url) as loader:
            return await loader.load()
    return asyncio.run(run())


@pytest.fixture
def sources(tmp_path):
    return (
        write_json(tmp_path / "manifest.json", MANIFEST),
        write_json(tmp_path / "bird_mapping.json", MAPPING),
    )


# =============================================================================
# BUILD CARDS
# =============================================================================

def test_build_cards_skips_unmapped_entries(caplog):
    with caplog.at_level(logging.WARNING, logger="birdcards"):
        cards = build_cards(MANIFEST, MAPPING, audio_dir="/audio/", image_dir="/img/")

    assert [card.id for card in cards] == ["Common_Blackbird.mp3", "Song_Thrush.mp3"]
    assert "Dodo.mp3" in caplog.text


def test_build_cards_locators():
    blackbird, thrush = build_cards(MANIFEST, MAPPING, audio_dir="/audio/", image_dir="/img/")
    assert blackbird.audio_ref == "/audio/Common_Blackbird.mp3"
    assert blackbird.image_ref == "/img/Common_Blackbird.jpg"
    assert thrush.image_ref is None
    assert not blackbird.learned and not blackbird.starred


def test_build_cards_derives_image_when_mapping_has_none():
    cards = build_cards(
        ["Eurasian_Wren.mp3", "Black_Redstart.mp3"],
        {
            "Eurasian_Wren.mp3": {"displayName": "Eurasian Wren"},
            "Black_Redstart.mp3": {"displayName": "Black Redstart", "image": None},
        },
        image_dir="/bird_images/",
    )
    assert cards[0].image_ref == "/bird_images/Eurasian_Wren.jpg"
    assert cards[1].image_ref is None


def test_build_cards_dedupes_preserving_first():
    cards = build_cards(["Song_Thrush.mp3", "Song_Thrush.mp3"], MAPPING)
    assert len(cards) == 1


def test_build_cards_falls_back_to_unknown_name():
    cards = build_cards(["Wren.mp3"], {"Wren.mp3": {"displayName": "  ", "image": None}})
    assert cards[0].display_name == "Unknown Bird"


def test_apply_progress_defaults_missing_entries():
    cards = [make_card("Song Thrush"), make_card("Eurasian Wren")]
    merged = apply_progress(cards, {"Song_Thrush.mp3": {"learned": True, "starred": True}})
    assert merged[0].learned and merged[0].starred
    assert not merged[1].learned and not merged[1].starred


# =============================================================================
# LOCAL SOURCES
# =============================================================================

def test_load_local_files(sources):
    cards = load(*sources)
    assert [card.display_name for card in cards] == ["Common Blackbird", "Song Thrush"]


def test_missing_file_explains_what_to_check(tmp_path, sources):
    with pytest.raises(DataFetchFailure) as excinfo:
        load(str(tmp_path / "nope.json"), sources[1])
    message = str(excinfo.value)
    assert "404" in message
    assert "Ensure" in message


def test_invalid_json(tmp_path, sources):
    bad = tmp_path / "manifest.json"
    bad.write_text("[not json", encoding="utf-8")
    with pytest.raises(DataFetchFailure) as excinfo:
        load(str(bad), sources[1])
    assert "valid JSON" in str(excinfo.value)


def test_non_utf8_file_is_blocking_error_state(tmp_path, sources):
    bad = tmp_path / "manifest.json"
    bad.write_bytes(b'["Wren\xff.mp3"]')
    deck = DeckSession()

    async def run():
        async with CardLoader(manifest_url=str(bad), mapping_url=sources[1]) as loader:
            return await deck.load(loader)

    assert asyncio.run(run()) is SessionStatus.ERROR
    assert "Invalid encoding" in deck.error
    assert "UTF-8" in deck.error
    assert deck.collection == ()


def test_manifest_must_be_array_of_strings(tmp_path, sources):
    manifest = write_json(tmp_path / "m.json", ["ok.mp3", 3])
    with pytest.raises(DataFetchFailure, match="Invalid manifest format"):
        load(manifest, sources[1])


def test_mapping_must_be_object(tmp_path, sources):
    mapping = write_json(tmp_path / "map.json", [MAPPING])
    with pytest.raises(DataFetchFailure, match="Invalid mapping format"):
        load(sources[0], mapping)


# =============================================================================
# REMOTE SOURCES
# =============================================================================

def _app():
    async def manifest(request):
        return web.json_response(MANIFEST)

    async def mapping(request):
        return web.json_response(MAPPING)

    async def bad_encoding(request):
        return web.Response(body=b'["Wren\xff.mp3"]', content_type="application/json", charset="utf-8")

    app = web.Application()
    app.router.add_get("/audio/manifest.json", manifest)
    app.router.add_get("/data/bird_mapping.json", mapping)
    app.router.add_get("/audio/bad_encoding.json", bad_encoding)
    return app


def test_load_over_http():
    async def run():
        async with test_utils.TestServer(_app()) as server:
            async with CardLoader(
                manifest_url=str(server.make_url("/audio/manifest.json")),
                mapping_url=str(server.make_url("/data/bird_mapping.json")),
            ) as loader:
                return await loader.load()

    cards = asyncio.run(run())
    assert [card.id for card in cards] == ["Common_Blackbird.mp3", "Song_Thrush.mp3"]


def test_http_error_status_is_fetch_failure():
    async def run():
        async with test_utils.TestServer(_app()) as server:
            async with CardLoader(
                manifest_url=str(server.make_url("/audio/missing.json")),
                mapping_url=str(server.make_url("/data/bird_mapping.json")),
            ) as loader:
                return await loader.load()

    with pytest.raises(DataFetchFailure) as excinfo:
        asyncio.run(run())
    assert "status: 404" in str(excinfo.value)


def test_http_body_with_bad_encoding_is_fetch_failure():
    async def run():
        async with test_utils.TestServer(_app()) as server:
            async with CardLoader(
                manifest_url=str(server.make_url("/audio/bad_encoding.json")),
                mapping_url=str(server.make_url("/data/bird_mapping.json")),
            ) as loader:
                return await loader.load()

    with pytest.raises(DataFetchFailure) as excinfo:
        asyncio.run(run())
    assert "Invalid encoding" in str(excinfo.value)
