import logging
import random

from birdcards.models import FilterMode
from birdcards.utils import MediaPathGenerator, setup_logger
from birdcards.utils.helpers import shuffled

from conftest import make_card


def test_shuffled_is_a_new_permutation():
    items = list(range(50))
    result = shuffled(items, random.Random(4))
    assert sorted(result) == items
    assert result is not items
    assert items == list(range(50))


def test_shuffled_is_reproducible_with_seed():
    assert shuffled("abcdef", random.Random(8)) == shuffled("abcdef", random.Random(8))


def test_shuffled_small_inputs():
    assert shuffled([]) == []
    assert shuffled([1]) == [1]


def test_shuffled_reaches_every_ordering():
    rng = random.Random(0)
    seen = {tuple(shuffled([1, 2, 3], rng)) for _ in range(500)}
    assert len(seen) == 6


def test_filter_predicates():
    plain = make_card("Song Thrush")
    learned = make_card("Eurasian Wren", learned=True)
    starred = make_card("Black Redstart", starred=True)

    assert all(FilterMode.ALL.matches(c) for c in (plain, learned, starred))
    assert [c for c in (plain, learned, starred) if FilterMode.UNLEARNED.matches(c)] == [plain, starred]
    assert [c for c in (plain, learned, starred) if FilterMode.LEARNED.matches(c)] == [learned]
    assert [c for c in (plain, learned, starred) if FilterMode.STARRED.matches(c)] == [starred]


def test_card_flags():
    card = make_card("Song Thrush", learned=True)
    assert card.flags() == {"learned": True, "starred": False}


def test_media_paths():
    assert MediaPathGenerator.audio_src("Wren.mp3", "/audio/") == "/audio/Wren.mp3"
    assert MediaPathGenerator.image_src(None, "/img/") is None
    assert MediaPathGenerator.image_src("Wren.png", "/img/") == "/img/Wren.png"


def test_image_from_audio():
    assert MediaPathGenerator.image_from_audio("Common_Blackbird.mp3", "/bird_images/") == \
        "/bird_images/Common_Blackbird.jpg"
    assert MediaPathGenerator.image_from_audio("noext", "/img/") == "/img/noext.jpg"
    assert MediaPathGenerator.image_from_audio("", "/img/") is None


def test_wikipedia_search_url():
    url = MediaPathGenerator.wikipedia_search_url("Common Blackbird")
    assert url == "https://en.wikipedia.org/w/index.php?search=Common+Blackbird"


def test_setup_logger_with_file(tmp_path):
    logger = setup_logger("birdcards.test_setup", level="debug", log_dir=str(tmp_path))
    try:
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logger.debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / "birdcards.log").read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_setup_logger_is_idempotent():
    logger = setup_logger("birdcards.test_idem", log_dir="")
    logger = setup_logger("birdcards.test_idem", log_dir="")
    assert len(logger.handlers) == 1
    logger.handlers.clear()
