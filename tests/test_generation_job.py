"""Tests for GenerationJob."""

import pytest

from contentforge.core.generation_job import GenerationJob
from contentforge.exceptions import ValidationError


def _payload(**overrides):
    payload = {
        "batch_id": "batch_abc",
        "current_index": 0,
        "total_count": 3,
        "post_type": "post",
        "post_status": "draft",
        "content_type": "technology",
        "ai_prompt": "",
        "editor_type": "block",
        "user_id": 1,
    }
    payload.update(overrides)
    return payload


class TestGenerationJob:
    """Tests for GenerationJob."""

    def test_defaults(self):
        job = GenerationJob(batch_id="b", current_index=0, total_count=1, content_type="general")

        assert job.post_type == "post"
        assert job.post_status == "draft"
        assert job.ai_prompt == ""
        assert job.editor_type == "block"
        assert job.user_id == 0
        assert job.product_options == {}

    def test_payload_round_trip(self):
        job = GenerationJob.from_payload(_payload())
        assert job.to_payload() == _payload()

    def test_product_options_only_when_set(self):
        job = GenerationJob.from_payload(_payload(product_options={"price": "9.99"}))

        assert job.product_options == {"price": "9.99"}
        assert job.to_payload()["product_options"] == {"price": "9.99"}
        assert "product_options" not in GenerationJob.from_payload(_payload()).to_payload()

    def test_accepts_wrapped_payload(self):
        job = GenerationJob.from_payload([_payload(current_index=2)])
        assert job.current_index == 2

    def test_missing_key(self):
        payload = _payload()
        del payload["user_id"]

        with pytest.raises(ValidationError, match="user_id"):
            GenerationJob.from_payload(payload)

    def test_not_a_mapping(self):
        with pytest.raises(ValidationError):
            GenerationJob.from_payload("batch_abc")
        with pytest.raises(ValidationError):
            GenerationJob.from_payload([])

    def test_next(self):
        job = GenerationJob.from_payload(_payload(product_options={"sku": "A"}))
        following = job.next()

        assert following.current_index == 1
        assert following.batch_id == job.batch_id
        assert following.product_options == {"sku": "A"}
        assert following.product_options is not job.product_options
        assert job.current_index == 0

    def test_has_next(self):
        assert GenerationJob.from_payload(_payload(current_index=1)).has_next
        assert not GenerationJob.from_payload(_payload(current_index=2)).has_next
