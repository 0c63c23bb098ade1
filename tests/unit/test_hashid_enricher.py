from __future__ import annotations

import pytest

from eventkey.core.errors import ConfigurationError
from eventkey.core.settings import HashIdSettings
from eventkey.metrics.metrics import MetricsCollector
from eventkey.plugins.enrichers import BaseEnricher, enrich_parallel
from eventkey.plugins.enrichers.hashid import PLUGIN_METADATA, HashIdEnricher
from eventkey.plugins.utils import get_plugin_name
from eventkey.testing import validate_enricher


async def test_enrich_sets_target_on_copy() -> None:
    enricher = HashIdEnricher(add_timestamp_prefix=False)
    event = {"message": "testmessage"}
    out = await enricher.enrich(event)
    assert out == {"message": "testmessage", "hashid": "Fpbg8CbSbOQ81JSd3HmPFk"}
    assert event == {"message": "testmessage"}


async def test_config_model_and_kwargs_merge() -> None:
    base = HashIdSettings(key="hashid", add_timestamp_prefix=False)
    enricher = HashIdEnricher(config=base, method="SHA1")
    assert enricher.config.method == "SHA1"
    # The key survives the merge
    out = await enricher.enrich({"message": "testmessage"})
    assert out["hashid"] == "sOoRSauukymQT3a8q4C8FZyDncw"


async def test_config_mapping() -> None:
    enricher = HashIdEnricher(
        config={"timestamp_prefix": False, "hash_bytes_used": 12, "target": "id"}
    )
    out = await enricher.enrich({"message": "testmessage"})
    assert out["id"] == "qSqS_gZ8GqZGA8d2"


def test_unknown_method_raises_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="Unknown digest"):
        HashIdEnricher(method="SHA999")


def test_invalid_options_raise_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="Invalid hashid configuration"):
        HashIdEnricher(source=[])


def test_protocol_and_metadata() -> None:
    enricher = HashIdEnricher()
    assert validate_enricher(enricher).valid
    assert get_plugin_name(enricher) == PLUGIN_METADATA["name"] == "hashid"


@pytest.mark.security
def test_repr_redacts_key() -> None:
    enricher = HashIdEnricher(key="$ecre&-key")
    assert "$ecre&-key" not in repr(enricher)


async def test_metrics_counted() -> None:
    metrics = MetricsCollector()
    enricher = HashIdEnricher(metrics=metrics)
    await enricher.enrich({"message": "a"})
    await enricher.enrich({"message": "b"})
    assert (await metrics.snapshot()).ids_generated == 2


class _AddField(BaseEnricher):
    name = "add_field"

    def __init__(self, key: str, value: str) -> None:
        self.key = key
        self.value = value

    async def enrich(self, event: dict) -> dict:
        event[self.key] = self.value
        return event


class _Failing(BaseEnricher):
    name = "failing"

    async def enrich(self, event: dict) -> dict:
        raise RuntimeError("enrich boom")


async def test_enrich_parallel_merges_results() -> None:
    base = {"message": "testmessage"}
    enrichers = [
        _AddField("env", "prod"),
        HashIdEnricher(add_timestamp_prefix=False),
    ]
    out = await enrich_parallel(base, enrichers, concurrency=2)
    assert out == {
        "message": "testmessage",
        "env": "prod",
        "hashid": "Fpbg8CbSbOQ81JSd3HmPFk",
    }
    assert base == {"message": "testmessage"}


async def test_enrich_parallel_contains_failures(
    captured_diagnostics: list[dict],
) -> None:
    metrics = MetricsCollector()
    out = await enrich_parallel(
        {"message": "m"},
        [_Failing(), _AddField("a", "1")],
        metrics=metrics,
    )
    assert out == {"message": "m", "a": "1"}
    assert (await metrics.snapshot()).plugin_errors == 1
    assert any(
        p["component"] == "enricher" and p["enricher"] == "failing"
        for p in captured_diagnostics
    )
