import aiohttp
import pytest
from datetime import date
from domain.exceptions import ExternalServiceError
from utils import external_metadata
from utils.external_metadata import SongDetail, fetch_song_details

class FakeResponse:
    def __init__(self, status: int, payload=None, error: Exception = None):
        self.status = status
        self._payload = payload
        self._error = error

    async def json(self, content_type=None):
        if self._error:
            raise self._error
        return self._payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return False

class FakeClientSession:
    """aiohttp.ClientSession の最小限の代替 (GET のみ)"""
    def __init__(self, response: FakeResponse = None, error: Exception = None):
        self.response = response
        self.error = error
        self.requests = []

    def __call__(self, *args, **kwargs):
        return self

    def get(self, url, params=None):
        self.requests.append((url, params))
        if self.error:
            raise self.error
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        return False

@pytest.fixture
def fake_http(mocker):
    def _install(response: FakeResponse = None, error: Exception = None) -> FakeClientSession:
        fake = FakeClientSession(response, error)
        mocker.patch.object(external_metadata.aiohttp, "ClientSession", fake)
        return fake
    return _install

@pytest.mark.asyncio
async def test_fetch_song_details_success(fake_http, mocker):
    mocker.patch.object(external_metadata.settings, "MUSIC_INFO_API_URL", "http://music-api:8080/")
    fake = fake_http(FakeResponse(200, {
        "releaseDate": "16.07.2006",
        "text": "Ooh baby\n\nYou caught me",
        "link": "https://www.youtube.com/watch?v=Xsp3_a-PMTw",
    }))

    detail = await fetch_song_details("Muse", "Supermassive Black Hole")

    assert detail.release_date == date(2006, 7, 16)
    assert detail.text == "Ooh baby\n\nYou caught me"
    assert fake.requests == [
        ("http://music-api:8080/info", {"group": "Muse", "song": "Supermassive Black Hole"})
    ]

@pytest.mark.asyncio
async def test_fetch_song_details_non_200(fake_http):
    fake_http(FakeResponse(404, {"error": "not found"}))
    with pytest.raises(ExternalServiceError):
        await fetch_song_details("Muse", "Unknown")

@pytest.mark.asyncio
async def test_fetch_song_details_unreachable(fake_http):
    fake_http(error=aiohttp.ClientConnectionError("connection refused"))
    with pytest.raises(ExternalServiceError) as exc:
        await fetch_song_details("Muse", "Hysteria")
    assert exc.value.message == "Failed to call external API"

@pytest.mark.asyncio
async def test_fetch_song_details_malformed_json(fake_http):
    fake_http(FakeResponse(200, error=ValueError("Expecting value")))
    with pytest.raises(ExternalServiceError):
        await fetch_song_details("Muse", "Hysteria")

@pytest.mark.asyncio
async def test_fetch_song_details_unparseable_date(fake_http):
    fake_http(FakeResponse(200, {"releaseDate": "sometime in 2006", "text": "", "link": ""}))
    with pytest.raises(ExternalServiceError):
        await fetch_song_details("Muse", "Hysteria")

@pytest.mark.asyncio
async def test_fetch_song_details_non_object_payload(fake_http):
    fake_http(FakeResponse(200, ["not", "an", "object"]))
    with pytest.raises(ExternalServiceError):
        await fetch_song_details("Muse", "Hysteria")

def test_song_detail_defaults():
    detail = SongDetail.model_validate({})
    assert detail.release_date is None
    assert detail.text == ""
    assert detail.link == ""
