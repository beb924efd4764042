"""Tests for ErrorAggregator enrichment and batching."""

import pytest

from querystash.contracts.errors import BuildPanicError
from querystash.contracts.jobs import ExecutionResult, GraphQLErrorInfo, QueryJob, SourceLocation
from querystash.core.code_frame import UNAVAILABLE
from querystash.engine.error_aggregator import NO_PLUGIN, ErrorAggregator
from tests.conftest import RecordingReporter

PAGE_QUERY = "query PostBySlug($slug: String!) {\n  markdownRemark(slug: { eq: $slug }) {\n    titel\n  }\n}"


def _page_job(**overrides: object) -> QueryJob:
    fields: dict[str, object] = {
        "id": "/blog/hello",
        "query": PAGE_QUERY,
        "component_path": "src/templates/post.js",
        "is_page": True,
        "context": {"path": "/blog/hello", "context": {"slug": "hello"}, "slug": "hello"},
        "plugin_creator_id": "Plugin gatsby-plugin-blog",
    }
    fields.update(overrides)
    return QueryJob(**fields)  # type: ignore[arg-type]


def _result(*errors: GraphQLErrorInfo) -> ExecutionResult:
    return ExecutionResult(errors=errors)


class TestEnrichment:
    def test_page_error_gets_full_context(self) -> None:
        aggregator = ErrorAggregator(RecordingReporter())
        error = GraphQLErrorInfo('Cannot query field "titel" on type "MarkdownRemark".', (SourceLocation(3, 5),))

        enriched = aggregator.enrich(_page_job(), error)

        assert enriched is not None
        context = enriched["context"]
        assert context["filePath"] == "src/templates/post.js"
        assert context["urlPath"] == "/blog/hello"
        assert context["slug"] == "hello"
        assert context["plugin"] == "Plugin gatsby-plugin-blog"
        assert "> 3 |     titel" in context["codeFrame"]

    def test_missing_location_gives_unavailable_frame(self) -> None:
        enriched = ErrorAggregator(RecordingReporter()).enrich(_page_job(), GraphQLErrorInfo("boom"))

        assert enriched is not None
        assert enriched["context"]["codeFrame"] == UNAVAILABLE

    def test_out_of_range_location_gives_unavailable_frame(self) -> None:
        error = GraphQLErrorInfo("boom", (SourceLocation(40, 1),))
        enriched = ErrorAggregator(RecordingReporter()).enrich(_page_job(), error)

        assert enriched is not None
        assert enriched["context"]["codeFrame"] == UNAVAILABLE

    def test_missing_plugin_defaults_to_none_sentinel(self) -> None:
        enriched = ErrorAggregator(RecordingReporter()).enrich(_page_job(plugin_creator_id=None), GraphQLErrorInfo("boom"))

        assert enriched is not None
        assert enriched["context"]["plugin"] == NO_PLUGIN == "none"

    def test_non_page_error_has_no_url_path(self) -> None:
        job = QueryJob(id="sq-1", query="{ site { x } }", component_path="src/components/seo.js", hash="abc")

        enriched = ErrorAggregator(RecordingReporter()).enrich(job, GraphQLErrorInfo("boom"))

        assert enriched is not None
        assert "urlPath" not in enriched["context"]
        assert enriched["context"]["filePath"] == "src/components/seo.js"

    def test_user_context_cannot_mask_diagnostics(self) -> None:
        job = _page_job(context={"path": "/p", "context": {"filePath": "spoofed", "plugin": "spoofed"}})

        enriched = ErrorAggregator(RecordingReporter()).enrich(job, GraphQLErrorInfo("boom"))

        assert enriched is not None
        assert enriched["context"]["filePath"] == "src/templates/post.js"
        assert enriched["context"]["plugin"] == "Plugin gatsby-plugin-blog"

    def test_empty_message_is_dropped(self) -> None:
        aggregator = ErrorAggregator(RecordingReporter(fatal=False))

        collected = aggregator.collect(_page_job(), _result(GraphQLErrorInfo(""), GraphQLErrorInfo("real")))

        assert [error["text"] for error in collected] == ["real"]


class TestReporting:
    def test_two_errors_reported_in_one_batch(self) -> None:
        reporter = RecordingReporter()
        aggregator = ErrorAggregator(reporter)

        with pytest.raises(BuildPanicError) as exc_info:
            aggregator.report(_page_job(), _result(GraphQLErrorInfo("first"), GraphQLErrorInfo("second")))

        assert len(reporter.panics) == 1
        assert [error["text"] for error in reporter.panics[0]] == ["first", "second"]
        assert exc_info.value.errors == reporter.panics[0]
