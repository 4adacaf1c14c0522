import pytest
from loguru import logger

from magneturi.config import TestConfig
from magneturi.magnet import Magnet


BIG_BUCK_BUNNY = "magnet:?xt=urn:btih:dd8255ecdc7ca55fb0bbf81323d87062db1f6d1c&dn=Big+Buck+Bunny&tr=udp%3A%2F%2Fexplodie.org%3A6969&tr=udp%3A%2F%2Ftracker.coppersurfer.tk%3A6969&tr=udp%3A%2F%2Ftracker.empire-js.us%3A1337&tr=udp%3A%2F%2Ftracker.leechers-paradise.org%3A6969&tr=udp%3A%2F%2Ftracker.opentrackr.org%3A1337&tr=wss%3A%2F%2Ftracker.btorrent.xyz&tr=wss%3A%2F%2Ftracker.fastcast.nz&tr=wss%3A%2F%2Ftracker.openwebtorrent.com&ws=https%3A%2F%2Fwebtorrent.io%2Ftorrents%2F&xs=https%3A%2F%2Fwebtorrent.io%2Ftorrents%2Fbig-buck-bunny.torrent"


@pytest.fixture(scope="session", autouse=True)
def debug_log():
    logger.enable("magneturi")
    sink_id = logger.add(TestConfig.LOG_PATH, level=TestConfig.LOG_LEVEL, filter="magneturi")
    yield TestConfig.LOG_PATH
    logger.remove(sink_id)
    logger.disable("magneturi")


@pytest.fixture
def big_buck_bunny():
    return BIG_BUCK_BUNNY


@pytest.fixture
def full_magnet():
    return Magnet(
        exact_topics=["urn:btih:A"],
        display_name="n",
        exact_length=100,
        trackers=["http://t/a"],
        acceptable_sources=["http://s/f"],
        exact_source=["http://x/f"],
        keyword_topic=["a", "b"],
        manifest_topic="urn:mt",
        extra={"x.k": ["v"]},
    )
