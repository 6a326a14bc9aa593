"""Tests for audit record assembly and triples."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from provtrail.builder import RecordBuilder, owning_resource_path, validate_uri
from provtrail.errors import MalformedUriError
from provtrail.vocabulary import (
    INTERNAL_EVENT,
    PREMIS_AGENT,
    PREMIS_EVENT,
    PREMIS_OBJECT,
    PREMIS_TIME,
    PREMIS_TYPE,
    PROV_EVENT,
    RDF_TYPE,
    XSD_DATETIME,
    XSD_STRING,
    AuditCategory,
)

RECORD_PATH = "/audit/27/c6/05/e4/27c605e4-98c6-4240-86be-f1bb1971d694"


@pytest.fixture
def builder() -> RecordBuilder:
    return RecordBuilder()


class TestBuild:
    def test_fields(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(), AuditCategory.OBJECT_ADDED, RECORD_PATH)
        assert record.record_path == RECORD_PATH
        assert record.record_uri == "http://localhost:8080/rest" + RECORD_PATH
        assert record.occurred_at == "2015-04-10T14:30:36Z"
        assert record.types == (INTERNAL_EVENT, PREMIS_EVENT, PROV_EVENT)
        assert record.category is AuditCategory.OBJECT_ADDED
        assert record.related_resource == "http://localhost:8080/rest/non/audit/container/path"

    def test_agents_in_order(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(agent_label="curl/8.0"), None, RECORD_PATH)
        assert record.agents == ("bypassAdmin", "curl/8.0")

    def test_absent_label_omitted(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(agent_label=None), None, RECORD_PATH)
        assert record.agents == ("bypassAdmin",)

    def test_no_category(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(), None, RECORD_PATH)
        assert record.category is None
        assert "category" not in record.to_dict()

    def test_trailing_separator_stripped_from_base(self, builder, signal_factory) -> None:
        signal = signal_factory(base_location="http://localhost:8080/rest/", resource_path="/obj1")
        record = builder.build(signal, None, RECORD_PATH)
        assert record.record_uri == "http://localhost:8080/rest" + RECORD_PATH
        assert record.related_resource == "http://localhost:8080/rest/obj1"

    def test_content_stream_collapsed(self, builder, signal_factory) -> None:
        signal = signal_factory(resource_path="/obj1/file/jcr:content")
        record = builder.build(signal, AuditCategory.CONTENT_MODIFIED, RECORD_PATH)
        assert record.related_resource == "http://localhost:8080/rest/obj1/file"

    def test_custom_content_suffix(self, signal_factory) -> None:
        builder = RecordBuilder(content_suffix="fcr:content")
        signal = signal_factory(resource_path="/obj1/fcr:content")
        assert builder.build(signal, None, RECORD_PATH).related_resource.endswith("/obj1")

    def test_missing_base_location_keeps_relative_uris(self, builder, signal_factory, caplog) -> None:
        signal = signal_factory(base_location="", resource_path="/obj1")
        with caplog.at_level(logging.WARNING, logger="provtrail.builder"):
            record = builder.build(signal, AuditCategory.CONTENT_ADDED, RECORD_PATH)
        assert record.related_resource == "/obj1"
        assert record.record_uri == RECORD_PATH
        assert "No base location" in caplog.text
        assert "Omitting related resource" not in caplog.text

    def test_base_location_present_logs_nothing(self, builder, signal_factory, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="provtrail.builder"):
            builder.build(signal_factory(), None, RECORD_PATH)
        assert caplog.records == []

    def test_timestamp_converted_to_utc(self, builder, signal_factory) -> None:
        ts = datetime(2015, 4, 10, 16, 30, 36, 999000, tzinfo=timezone(timedelta(hours=2)))
        record = builder.build(signal_factory(timestamp=ts), None, RECORD_PATH)
        assert record.occurred_at == "2015-04-10T14:30:36Z"


class TestMalformedRelatedResource:
    def test_link_omitted_record_still_built(self, builder, signal_factory, caplog) -> None:
        signal = signal_factory(resource_path="/has space/obj")
        with caplog.at_level(logging.WARNING, logger="provtrail.builder"):
            record = builder.build(signal, AuditCategory.OBJECT_ADDED, RECORD_PATH)
        assert record.related_resource is None
        assert record.category is AuditCategory.OBJECT_ADDED
        assert "Omitting related resource" in caplog.text

    def test_related_resource_uri_raises(self, builder, signal_factory) -> None:
        with pytest.raises(MalformedUriError):
            builder.related_resource_uri(signal_factory(resource_path="/a{b}"))


class TestValidateUri:
    @pytest.mark.parametrize(
        "uri",
        [
            "http://localhost:8080/rest/obj1",
            "https://example.org/a%20b",
            "urn:uuid:27c605e4-98c6-4240-86be-f1bb1971d694",
            "http://localhost:8080/rest/obj1/jcr:content",
            "/relative/path",
            "/obj1/file",
        ],
    )
    def test_valid(self, uri: str) -> None:
        assert validate_uri(uri) == uri

    @pytest.mark.parametrize(
        "uri",
        [
            "",
            "/has space",
            "http://localhost/has space",
            "http://localhost/a|b",
            "http://localhost/100%",
            "http://localhost:notaport/x",
            "http://[::1/x",
        ],
    )
    def test_invalid(self, uri: str) -> None:
        with pytest.raises(MalformedUriError):
            validate_uri(uri)


class TestOwningResource:
    def test_plain_path_unchanged(self) -> None:
        assert owning_resource_path("/obj1") == "/obj1"

    def test_suffix_only_at_end(self) -> None:
        assert owning_resource_path("/jcr:content/obj1") == "/jcr:content/obj1"


class TestTriples:
    def test_full_record(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(), AuditCategory.OBJECT_ADDED, RECORD_PATH)
        triples = {(t.predicate, t.object, t.datatype) for t in record.to_triples()}
        assert (RDF_TYPE, INTERNAL_EVENT, None) in triples
        assert (RDF_TYPE, PREMIS_EVENT, None) in triples
        assert (RDF_TYPE, PROV_EVENT, None) in triples
        assert (PREMIS_TIME, "2015-04-10T14:30:36Z", XSD_DATETIME) in triples
        assert (PREMIS_AGENT, "bypassAdmin", XSD_STRING) in triples
        assert (PREMIS_TYPE, AuditCategory.OBJECT_ADDED.uri, None) in triples
        assert (PREMIS_OBJECT, "http://localhost:8080/rest/non/audit/container/path", None) in triples
        assert all(t.subject == record.record_uri for t in record.to_triples())

    def test_optional_triples_omitted(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(resource_path="/has space"), None, RECORD_PATH)
        predicates = [t.predicate for t in record.to_triples()]
        assert PREMIS_TYPE not in predicates
        assert PREMIS_OBJECT not in predicates
        assert predicates.count(RDF_TYPE) == 3


class TestImmutability:
    def test_record_frozen(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(), None, RECORD_PATH)
        with pytest.raises(AttributeError):
            record.category = AuditCategory.OBJECT_ADDED  # type: ignore[misc]

    def test_triples_do_not_alias_record(self, builder, signal_factory) -> None:
        record = builder.build(signal_factory(), None, RECORD_PATH)
        record.to_triples().clear()
        assert len(record.to_triples()) > 0
