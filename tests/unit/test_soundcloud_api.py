"""Unit tests for the SoundCloud API client and stream resolution"""

from unittest.mock import call

import aiohttp
import pytest
from aioresponses import aioresponses

from nerdland_episodes.fetchers.soundcloud_api import SoundCloudAPI
from nerdland_episodes.fetchers.stream_resolver import StreamResolver
from nerdland_episodes.models import Track

from tests.conftest import (
    API, CLIENT_ID, api_url, create_track_payload, create_transcodings, page, with_query
)


class TestPagination:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_follows_next_href_in_order(self):
        next_href = f"{API}/users/42/tracks?offset=2024-01-01&limit=200&linked_partitioning=1"
        with aioresponses() as m:
            m.get(api_url("/users/42/tracks"), payload=page(
                [create_track_payload(3), create_track_payload(2)], next_href=next_href
            ))
            m.get(api_url("/users/42/tracks"), payload=page([create_track_payload(1)]))

            async with SoundCloudAPI() as api:
                tracks = await api.fetch_all_tracks(42, CLIENT_ID)

            assert [t.id for t in tracks] == [3, 2, 1]
            first_url = [url for (_, url) in m.requests][0]
            assert first_url.query['client_id'] == CLIENT_ID
            assert first_url.query['limit'] == '200'

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_sleeps_between_pages_only(self, mocker, monkeypatch):
        monkeypatch.setattr('nerdland_episodes.config.PAGE_DELAY_SECONDS', 0.25)
        sleep = mocker.patch('nerdland_episodes.fetchers.soundcloud_api.asyncio.sleep')
        with aioresponses() as m:
            m.get(api_url("/users/42/tracks"), payload=page([create_track_payload(2)], next_href=f"{API}/users/42/tracks?offset=x"))
            m.get(api_url("/users/42/tracks"), payload=page([create_track_payload(1)]))

            async with SoundCloudAPI() as api:
                await api.fetch_all_tracks(42, CLIENT_ID)

        assert sleep.await_args_list.count(call(0.25)) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_page_error_propagates(self):
        with aioresponses() as m:
            m.get(api_url("/users/42/tracks"), payload=page([create_track_payload(2)], next_href=f"{API}/users/42/tracks?offset=x"))
            m.get(api_url("/users/42/tracks"), status=500)

            async with SoundCloudAPI() as api:
                with pytest.raises(aiohttp.ClientResponseError):
                    await api.fetch_all_tracks(42, CLIENT_ID)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_empty_collection(self):
        with aioresponses() as m:
            m.get(api_url("/users/42/tracks"), payload={'collection': []})

            async with SoundCloudAPI() as api:
                assert await api.fetch_all_tracks(42, CLIENT_ID) == []


class TestTrackDetails:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_returns_detailed_track(self):
        with aioresponses() as m:
            m.get(api_url("/tracks/7"), payload=create_track_payload(7, title="Detailed"))

            async with SoundCloudAPI() as api:
                track = await api.get_track_details(7, CLIENT_ID)

        assert track.title == "Detailed"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error_becomes_none(self):
        with aioresponses() as m:
            m.get(api_url("/tracks/7"), status=404)

            async with SoundCloudAPI() as api:
                assert await api.get_track_details(7, CLIENT_ID) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connection_error_becomes_none(self):
        with aioresponses() as m:
            m.get(api_url("/tracks/7"), exception=aiohttp.ClientConnectionError("reset"))

            async with SoundCloudAPI() as api:
                assert await api.get_track_details(7, CLIENT_ID) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_json_body_becomes_none(self):
        with aioresponses() as m:
            m.get(api_url("/tracks/7"), status=200, body="<html>maintenance</html>")

            async with SoundCloudAPI() as api:
                assert await api.get_track_details(7, CLIENT_ID) is None


class TestSession:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_no_timeout_by_default(self):
        async with SoundCloudAPI() as api:
            session = await api._get_session()
            assert session.timeout.total is None
            assert session.headers['User-Agent'].startswith("Mozilla/5.0")


class TestStreamResolver:

    STREAM_URL = f"{API}/tracks/1/streams"

    def make_track(self, **kwargs) -> Track:
        return Track.from_api(create_track_payload(1, **kwargs))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_direct_stream_wins_and_transcodings_untouched(self):
        track = self.make_track(stream_url=self.STREAM_URL, media=create_transcodings("progressive"))
        with aioresponses() as m:
            m.get(api_url("/tracks/1/streams"), payload={'url': 'https://cf-media.sndcdn.com/direct.mp3'})

            async with SoundCloudAPI() as api:
                url = await StreamResolver(api).get_stream_url(track, CLIENT_ID)

            assert url == 'https://cf-media.sndcdn.com/direct.mp3'
            assert len(m.requests) == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_first_working_progressive_transcoding(self):
        track = self.make_track(media=create_transcodings("hls", "progressive", "progressive"))
        _, broken, good = [t.url for t in track.transcodings]
        with aioresponses() as m:
            m.get(with_query(broken), status=403)
            m.get(with_query(good), payload={'url': 'https://cf-media.sndcdn.com/progressive.mp3'})

            async with SoundCloudAPI() as api:
                url = await StreamResolver(api).get_stream_url(track, CLIENT_ID)

            assert url == 'https://cf-media.sndcdn.com/progressive.mp3'
            assert len(m.requests) == 2

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stream_without_url_falls_through(self):
        track = self.make_track(stream_url=self.STREAM_URL, media=create_transcodings("progressive"))
        with aioresponses() as m:
            m.get(api_url("/tracks/1/streams"), payload={})
            m.get(with_query(track.transcodings[0].url), payload={'url': 'https://cf-media.sndcdn.com/t.mp3'})

            async with SoundCloudAPI() as api:
                assert await StreamResolver(api).get_stream_url(track, CLIENT_ID) == 'https://cf-media.sndcdn.com/t.mp3'

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_download_url_synthesized_without_request(self):
        track = self.make_track(downloadable=True, download_url=f"{API}/tracks/1/download")
        with aioresponses() as m:
            async with SoundCloudAPI() as api:
                url = await StreamResolver(api).get_stream_url(track, CLIENT_ID)

            assert url == f"{API}/tracks/1/download?client_id={CLIENT_ID}"
            assert len(m.requests) == 0

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_nothing_resolvable(self):
        track = self.make_track(media=create_transcodings("hls"))
        async with SoundCloudAPI() as api:
            assert await StreamResolver(api).get_stream_url(track, CLIENT_ID) is None

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_stream_error_becomes_none(self):
        track = self.make_track(stream_url=self.STREAM_URL)
        with aioresponses() as m:
            m.get(api_url("/tracks/1/streams"), status=500)

            async with SoundCloudAPI() as api:
                assert await StreamResolver(api).get_stream_url(track, CLIENT_ID) is None
