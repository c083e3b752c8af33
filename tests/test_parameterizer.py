"""Unit tests for the Jinja2 template parameterizer."""

import io

import pytest

from notifier.dispatch.exceptions import TemplateRenderError
from notifier.dispatch.parameterizer import TemplateParameterizer, build_template_context
from notifier.domain.models import Param

EVENT_METADATA = '{\n  "comment": "How does this look?"\n}'
RESOURCE_METADATA = '{\n  "title": "Article title"\n}'
LINK_METADATA = '[{"rel": "submission-review", "href": "https://ui.example.org/s/abc123"}]'

BODY_TEMPLATE = (
    "Dear {{ to }},\n"
    "\n"
    'A submission titled "{{ resource_metadata.title }}" has been prepared on your behalf '
    "by {{ from }}"
    '{% if event_metadata.comment %} with comment "{{ event_metadata.comment }}"{% endif %}.\n'
    "\n"
    "{% for link in link_metadata %}rel: {{ link.rel }}\nhref: {{ link.href }}\n{% endfor %}"
)


@pytest.fixture
def parameterizer():
    return TemplateParameterizer()


@pytest.fixture
def params():
    return {
        Param.TO: "authorized-submitter@example.org",
        Param.FROM: "preparer@example.org",
        Param.RESOURCE_METADATA: RESOURCE_METADATA,
        Param.EVENT_METADATA: EVENT_METADATA,
        Param.LINKS: LINK_METADATA,
    }


class TestRender:
    """Rendering template text."""

    def test_simple_placeholder(self, parameterizer):
        assert parameterizer.render("Hi {{to}}", {Param.TO: "bob"}) == "Hi bob"

    def test_full_body(self, parameterizer, params):
        text = parameterizer.render(BODY_TEMPLATE, params)

        assert text.startswith("Dear authorized-submitter@example.org,\n")
        assert 'titled "Article title"' in text
        assert 'with comment "How does this look?"' in text
        assert "rel: submission-review\nhref: https://ui.example.org/s/abc123\n" in text

    def test_whole_json_value_renders_verbatim(self, parameterizer, params):
        text = parameterizer.render(
            "{{ resource_metadata }}|{{ link_metadata }}|{{ resource_metadata.title }}", params
        )

        assert text == f"{RESOURCE_METADATA}|{LINK_METADATA}|Article title"

    def test_unresolved_placeholders_render_empty(self, parameterizer):
        text = parameterizer.render("[{{ cc }}][{{ resource_metadata.title.missing }}]", {})

        assert text == "[][]"

    def test_no_html_escaping(self, parameterizer):
        text = parameterizer.render("{{ from }}", {Param.FROM: "Jane <jane@example.org>"})

        assert text == "Jane <jane@example.org>"

    def test_trailing_newline_kept(self, parameterizer):
        assert parameterizer.render("Hi {{ to }}\n", {Param.TO: "bob"}) == "Hi bob\n"

    def test_syntax_error_raises_render_error(self, parameterizer):
        with pytest.raises(TemplateRenderError) as exc_info:
            parameterizer.render("{% if %}", {})

        assert exc_info.value.__cause__ is not None


class TestRenderStream:
    """Rendering templates read from streams."""

    def test_reads_utf8(self, parameterizer):
        stream = io.BytesIO("Grüße {{ to }}".encode("utf-8"))

        assert parameterizer.render_stream(stream, {Param.TO: "bob"}) == "Grüße bob"
        assert stream.closed

    def test_invalid_utf8_raises_render_error(self, parameterizer):
        with pytest.raises(TemplateRenderError, match="Failed to read template"):
            parameterizer.render_stream(io.BytesIO(b"\xff\xfe\xfa"), {})


class TestBuildTemplateContext:
    """Binding parameters to template names."""

    def test_names_are_lowercase_param_values(self, params):
        context = build_template_context(params)

        assert set(context) == {"to", "from", "resource_metadata", "event_metadata", "link_metadata"}

    def test_json_values_are_decoded(self, params):
        context = build_template_context(params)

        assert context["resource_metadata"] == {"title": "Article title"}
        assert context["link_metadata"][0]["rel"] == "submission-review"
        assert str(context["resource_metadata"]) == RESOURCE_METADATA
        assert str(context["link_metadata"]) == LINK_METADATA

    def test_plain_and_broken_json_stay_strings(self):
        context = build_template_context(
            {Param.TO: "bob", Param.RESOURCE_METADATA: "{not json"}
        )

        assert context == {"to": "bob", "resource_metadata": "{not json"}
