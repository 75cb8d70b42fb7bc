"""Tests for EstimateRequester (instruction + schema → one Gemini call → EstimationResult)."""
from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backend.services.estimate.constants import ERROR_MESSAGE
from backend.services.estimate.requester import EstimateRequester, EstimateUnavailableError
from backend.services.estimate.types import EstimationResult


def _client_returning(text):
    client = MagicMock()
    response = MagicMock()
    response.text = text
    client.aio.models.generate_content = AsyncMock(return_value=response)
    return client


class TestRequestConstruction:
    @pytest.mark.asyncio
    async def test_single_call_with_model_and_instruction(self, sample_params, mock_genai_client):
        requester = EstimateRequester(model="gemini-test-model", client=mock_genai_client)
        await requester.request_estimate(sample_params)

        call = mock_genai_client.aio.models.generate_content
        call.assert_awaited_once()
        kwargs = call.await_args.kwargs
        assert kwargs["model"] == "gemini-test-model"
        assert "영상 길이: 60초" in kwargs["contents"]
        assert kwargs["config"].response_mime_type == "application/json"
        assert kwargs["config"].response_schema is not None

    @pytest.mark.asyncio
    async def test_currency_flows_into_instruction(self, sample_params, mock_genai_client):
        requester = EstimateRequester(currency="USD", client=mock_genai_client)
        await requester.request_estimate(sample_params)
        kwargs = mock_genai_client.aio.models.generate_content.await_args.kwargs
        assert "USD" in kwargs["contents"]


class TestSuccessfulResponse:
    @pytest.mark.asyncio
    async def test_fields_copied_exactly(self, sample_params, mock_genai_client, sample_payload):
        result = await EstimateRequester(client=mock_genai_client).request_estimate(sample_params)

        assert isinstance(result, EstimationResult)
        assert result.total_cost == sample_payload["totalCost"]
        assert result.currency == "KRW"
        assert result.timeline_days == 7
        assert result.ai_savings == 400000
        assert result.analysis == sample_payload["analysis"]
        assert len(result.breakdown) == 1
        assert result.breakdown[0].category == "기획"
        assert result.breakdown[0].amount == 500000
        assert result.breakdown[0].description == "콘셉트 및 스토리보드"

    @pytest.mark.asyncio
    async def test_fractional_values_not_rounded(self, sample_params, sample_payload):
        sample_payload["totalCost"] = 1234567.89
        sample_payload["timelineDays"] = 3.5
        client = _client_returning(json.dumps(sample_payload))
        result = await EstimateRequester(client=client).request_estimate(sample_params)
        assert result.total_cost == 1234567.89
        assert result.timeline_days == 3.5

    @pytest.mark.asyncio
    async def test_integer_values_stay_integers(self, sample_params, mock_genai_client, sample_payload):
        result = await EstimateRequester(client=mock_genai_client).request_estimate(sample_params)
        dumped = result.model_dump_json(by_alias=True)
        assert json.loads(dumped) == sample_payload
        assert '"totalCost":3200000,' in dumped
        assert isinstance(result.breakdown[0].amount, int)

    @pytest.mark.asyncio
    async def test_repeat_calls_parse_independently(self, sample_params, mock_genai_client):
        requester = EstimateRequester(client=mock_genai_client)
        first = await requester.request_estimate(sample_params)
        second = await requester.request_estimate(sample_params)

        assert first == second
        assert first is not second
        assert mock_genai_client.aio.models.generate_content.await_count == 2

    @pytest.mark.asyncio
    async def test_result_serializes_to_wire_names(self, sample_params, mock_genai_client, sample_payload):
        result = await EstimateRequester(client=mock_genai_client).request_estimate(sample_params)
        dumped = result.model_dump(by_alias=True)
        assert set(dumped) == set(sample_payload)


class TestFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", [
        "totalCost", "currency", "breakdown", "timelineDays", "aiSavings", "analysis",
    ])
    async def test_missing_required_field(self, sample_params, sample_payload, missing):
        del sample_payload[missing]
        client = _client_returning(json.dumps(sample_payload))
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    async def test_breakdown_item_missing_description(self, sample_params, sample_payload):
        del sample_payload["breakdown"][0]["description"]
        client = _client_returning(json.dumps(sample_payload))
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    async def test_non_json_payload(self, sample_params):
        client = _client_returning("죄송합니다, 견적을 계산할 수 없습니다.")
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    async def test_wrong_type(self, sample_params, sample_payload):
        sample_payload["totalCost"] = "a lot"
        client = _client_returning(json.dumps(sample_payload))
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("field,value", [
        ("totalCost", "3200000"),
        ("timelineDays", "7"),
        ("aiSavings", True),
        ("totalCost", False),
    ])
    async def test_numeric_field_not_coerced(self, sample_params, sample_payload, field, value):
        sample_payload[field] = value
        client = _client_returning(json.dumps(sample_payload))
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    async def test_string_amount_in_breakdown(self, sample_params, sample_payload):
        sample_payload["breakdown"][0]["amount"] = "500000"
        client = _client_returning(json.dumps(sample_payload))
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    async def test_negative_amount(self, sample_params, sample_payload):
        sample_payload["aiSavings"] = -1
        client = _client_returning(json.dumps(sample_payload))
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    async def test_empty_response(self, sample_params):
        client = _client_returning(None)
        with pytest.raises(EstimateUnavailableError):
            await EstimateRequester(client=client).request_estimate(sample_params)

    @pytest.mark.asyncio
    async def test_transport_failure(self, sample_params):
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock(side_effect=ConnectionError("reset"))
        with pytest.raises(EstimateUnavailableError) as excinfo:
            await EstimateRequester(client=client).request_estimate(sample_params)
        assert isinstance(excinfo.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_error_carries_generic_message(self, sample_params):
        client = _client_returning("{}")
        with pytest.raises(EstimateUnavailableError) as excinfo:
            await EstimateRequester(client=client).request_estimate(sample_params)
        assert str(excinfo.value) == ERROR_MESSAGE

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_without_client(self, sample_params):
        requester = EstimateRequester(api_key=None)
        with patch("backend.services.estimate.requester.genai.Client") as client_cls:
            with pytest.raises(EstimateUnavailableError):
                await requester.request_estimate(sample_params)
        client_cls.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_is_logged(self, sample_params):
        client = _client_returning("not json")
        with patch("backend.services.estimate.requester.logger") as mock_logger:
            with pytest.raises(EstimateUnavailableError):
                await EstimateRequester(client=client).request_estimate(sample_params)
        mock_logger.warning.assert_called_once()


class TestFromConfig:
    def test_reads_model_currency_and_key(self, sample_settings, monkeypatch):
        from backend.services.shared.config import Config

        monkeypatch.setenv("VISIONARY_TEST_KEY", "secret")
        requester = EstimateRequester.from_config(Config(str(sample_settings)))
        assert requester.model == "gemini-test-model"
        assert requester.currency == "KRW"
        assert requester._api_key == "secret"

    def test_client_built_lazily_from_key(self):
        requester = EstimateRequester(api_key="secret")
        with patch("backend.services.estimate.requester.genai.Client") as client_cls:
            requester._get_client()
            requester._get_client()
        client_cls.assert_called_once_with(api_key="secret")
