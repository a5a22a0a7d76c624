"""
Unit tests for services.geocoder and services.mailer.
HTTP and SMTP are mocked.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from devcamper.config import Settings
from devcamper.services.geocoder import GeocodingService, parse_mapquest_response
from devcamper.services.mailer import MailService

MAPQUEST_PAYLOAD = {
    "results": [
        {
            "locations": [
                {
                    "street": "233 Bay State Rd",
                    "adminArea5": "Boston",
                    "adminArea3": "MA",
                    "postalCode": "02215",
                    "adminArea1": "US",
                    "latLng": {"lat": 42.350846, "lng": -71.104028},
                }
            ]
        }
    ]
}


class TestMapquestParsing:

    def test_parse_location(self):
        [result] = parse_mapquest_response(MAPQUEST_PAYLOAD)
        assert result.latitude == 42.350846
        assert result.longitude == -71.104028
        assert result.city == "Boston"
        assert result.state_code == "MA"
        assert result.zipcode == "02215"
        assert result.country_code == "US"
        assert result.formatted_address == "233 Bay State Rd, Boston, MA 02215, US"

    def test_locations_without_coordinates_are_skipped(self):
        payload = {"results": [{"locations": [{"adminArea5": "Nowhere"}]}]}
        assert parse_mapquest_response(payload) == []

    def test_empty_payload(self):
        assert parse_mapquest_response({}) == []


class TestGeocodingService:

    def test_is_available_depends_on_api_key(self):
        assert GeocodingService(Settings(geocoder_api_key="k")).is_available() is True
        assert GeocodingService(Settings(geocoder_api_key=None)).is_available() is False

    @pytest.mark.asyncio
    async def test_geocode_without_key_raises(self):
        service = GeocodingService(Settings(geocoder_api_key=None))
        with pytest.raises(RuntimeError):
            await service.geocode("02215")

    @pytest.mark.asyncio
    async def test_geocode_calls_api(self):
        settings = Settings(geocoder_api_key="test-key", geocoder_url="https://geo.example.com/address")

        with patch("httpx.AsyncClient") as mock_client_class:
            mock_response = MagicMock()
            mock_response.json.return_value = MAPQUEST_PAYLOAD
            mock_response.raise_for_status = MagicMock()

            mock_client = AsyncMock()
            mock_client.__aenter__.return_value.get = AsyncMock(return_value=mock_response)
            mock_client_class.return_value = mock_client

            results = await GeocodingService(settings).geocode("02215")

        assert results[0].city == "Boston"
        get = mock_client.__aenter__.return_value.get
        get.assert_awaited_once()
        args, kwargs = get.call_args
        assert args[0] == "https://geo.example.com/address"
        assert kwargs["params"]["key"] == "test-key"
        assert kwargs["params"]["location"] == "02215"


class TestMailService:

    def _settings(self, **overrides):
        values = dict(
            email_host="smtp.example.com",
            email_port=587,
            email_username="mailer",
            email_password="pw",
            from_name="DevCamper",
            from_email="noreply@devcamper.io",
        )
        values.update(overrides)
        return Settings(**values)

    def test_build_message_headers(self):
        message = MailService(self._settings()).build_message("a@b.com", "Hello", "body text")
        assert message["From"] == "DevCamper <noreply@devcamper.io>"
        assert message["To"] == "a@b.com"
        assert message["Subject"] == "Hello"
        assert "body text" in message.get_content()

    @pytest.mark.asyncio
    async def test_send_uses_smtp_settings(self):
        with patch("devcamper.services.mailer.aiosmtplib.send", new_callable=AsyncMock) as mock_send:
            await MailService(self._settings()).send("a@b.com", "Hello", "body")

        mock_send.assert_awaited_once()
        kwargs = mock_send.call_args.kwargs
        assert kwargs["hostname"] == "smtp.example.com"
        assert kwargs["port"] == 587
        assert kwargs["username"] == "mailer"
        assert kwargs["use_tls"] is False

    @pytest.mark.asyncio
    async def test_send_without_host_raises(self):
        service = MailService(self._settings(email_host=None))
        assert service.is_available() is False
        with pytest.raises(RuntimeError):
            await service.send("a@b.com", "Hello", "body")
