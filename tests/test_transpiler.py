"""
Line transpiler tests

Tests the full pipeline: source text -> LineLexer -> ScopedSelectorGenerator
-> (html, css), including ordering, determinism and failure semantics.
"""

import re

import pytest

from tailmark import transpile
from tailmark.config import AppSettings
from tailmark.lib.lexer import MalformedLine
from tailmark.lib.registry import UtilityClassRegistry, UnknownUtilityClass
from tailmark.lib.transpiler import LineTranspiler
from tailmark.models.transpiler import TranspileResult


ID = r"tm-[0-9a-f]+-[0-9a-f]{8}"


@pytest.fixture
def registry():
    return UtilityClassRegistry({
        "font-semibold": "font-weight: 600;",
        "2rem": "font-size: 2rem;",
        "text-red-500": "color: #EF4444;",
        "italic": "font-style: italic;",
    })


@pytest.fixture
def transpiler(registry):
    return LineTranspiler(registry)


def identifiers_mask(text: str) -> str:
    """Replace generated identifiers with a fixed token"""
    return re.sub(ID, "ID", text)


class TestReferenceExample:
    """The canonical heading example"""

    def test_single_line(self, transpiler):
        """Heading with inline utilities yields one element and one rule"""
        result = transpiler.transpile("# Heading 1 font-semibold 2rem text-red-500")

        assert len(result.rules) == 1
        ident = result.rules[0].identifier
        assert re.fullmatch(ID, ident)
        assert result.html == f'<h1 class="{ident}">Heading 1</h1>'
        assert result.css == f".{ident} {{font-weight: 600;font-size: 2rem;color: #EF4444;}}"

    def test_two_line_layout_with_markers(self, transpiler):
        """Marker classes follow the scoped id; the id marker becomes an attribute"""
        source = (
            "\n"
            "# Heading 1 .{main-heading nav} #{main-heading}\n"
            "    font-semibold 2rem text-red-500\n"
            "    "
        )
        result = transpiler.transpile(source)

        ident = result.rules[0].identifier
        assert result.html == (
            f'<h1 class="{ident} main-heading nav" id="main-heading">Heading 1</h1>'
        )
        assert result.css == f".{ident} {{font-weight: 600;font-size: 2rem;color: #EF4444;}}"

    def test_module_level_transpile_uses_default_table(self):
        """transpile() without a registry uses the packaged utilities"""
        result = transpile("# Heading 1 font-semibold 2rem text-red-500")
        assert identifiers_mask(result.html) == '<h1 class="ID">Heading 1</h1>'
        assert identifiers_mask(result.css) == ".ID {font-weight: 600;font-size: 2rem;color: #EF4444;}"


class TestOutputShape:
    """Test aggregation of elements and rules"""

    def test_empty_document(self, transpiler):
        """Empty source yields empty html and css"""
        assert transpiler.transpile("") == TranspileResult(html="", css="")
        assert transpiler.transpile([]) == TranspileResult(html="", css="")

    def test_only_noise(self, transpiler):
        """Unrecognized lines produce nothing"""
        result = transpiler.transpile("plain text\n    indented\n#nospace")
        assert result.html == ""
        assert result.css == ""

    def test_heading_levels(self, transpiler):
        """Each level maps to its own tag"""
        result = transpiler.transpile("# A\n## B\n### C\n#### D\n##### E\n###### F")
        assert identifiers_mask(result.html) == (
            '<h1 class="ID">A</h1><h2 class="ID">B</h2><h3 class="ID">C</h3>'
            '<h4 class="ID">D</h4><h5 class="ID">E</h5><h6 class="ID">F</h6>'
        )

    def test_heading_without_utilities_gets_empty_rule(self, transpiler):
        """Empty specs still produce a scoped rule with an empty body"""
        result = transpiler.transpile("# Plain")
        assert identifiers_mask(result.css) == ".ID {}"

    def test_order_preserved(self, transpiler):
        """Elements and rules follow source order, one-to-one"""
        source = "# First italic\n# Second 2rem\n# Third font-semibold"
        result = transpiler.transpile(source)

        texts = re.findall(r">([^<]+)</h1>", result.html)
        assert texts == ["First", "Second", "Third"]

        assert [rule.declarations for rule in result.rules] == [
            "font-style: italic;",
            "font-size: 2rem;",
            "font-weight: 600;",
        ]
        html_ids = re.findall(r'class="([^"]+)"', result.html)
        css_ids = re.findall(r"\.(" + ID + r") \{", result.css)
        assert html_ids == css_ids == [rule.identifier for rule in result.rules]

    def test_no_separators_and_no_merging(self, transpiler):
        """Identical rules are emitted separately and back to back"""
        result = transpiler.transpile("# A italic\n# B italic")
        assert identifiers_mask(result.css) == ".ID {font-style: italic;}.ID {font-style: italic;}"
        assert "\n" not in result.html

    def test_result_is_frozen(self, transpiler):
        """TranspileResult cannot be modified once returned"""
        result = transpiler.transpile("# A")
        with pytest.raises(AttributeError):
            result.html = "changed"


class TestDeterminism:
    """Repeated runs differ only in identifiers"""

    def test_same_shape_new_identifiers(self, transpiler):
        """Two runs share structure and bodies but never identifiers"""
        source = "# One font-semibold 2rem\n## Two\n    text-red-500 italic\n# Three"
        first = transpiler.transpile(source)
        second = transpiler.transpile(source)

        assert identifiers_mask(first.html) == identifiers_mask(second.html)
        assert identifiers_mask(first.css) == identifiers_mask(second.css)
        assert [r.declarations for r in first.rules] == [r.declarations for r in second.rules]

        first_ids = {r.identifier for r in first.rules}
        second_ids = {r.identifier for r in second.rules}
        assert len(first_ids) == 3
        assert first_ids.isdisjoint(second_ids)


class TestFailures:
    """Test fail-fast behavior"""

    def test_unknown_class_aborts(self, transpiler):
        """Unknown utilities abort the whole call with the name and line"""
        source = "# Fine italic\n# Broken font-semibold text-blue-500\n# Never reached"
        with pytest.raises(UnknownUtilityClass) as excinfo:
            transpiler.transpile(source)

        assert excinfo.value.name == "text-blue-500"
        assert excinfo.value.lineNumber == 2
        assert "line 2" in str(excinfo.value)

    def test_unknown_class_on_continuation_line(self, transpiler):
        """Continuation lines are resolved strictly"""
        with pytest.raises(UnknownUtilityClass) as excinfo:
            transpiler.transpile("# Title\n    italic bogus")
        assert excinfo.value.name == "bogus"
        assert excinfo.value.lineNumber == 2

    def test_unknown_class_line_is_where_the_name_is(self, transpiler):
        """The reported line is the continuation line holding the bad name"""
        with pytest.raises(UnknownUtilityClass) as excinfo:
            transpiler.transpile("# Title\n\n# Bad\n    font-semibold\n    bogus")
        assert excinfo.value.name == "bogus"
        assert excinfo.value.lineNumber == 5

    def test_mistyped_inline_utility_raises(self, transpiler):
        """A mistyped inline class is rejected, not folded into the text"""
        with pytest.raises(UnknownUtilityClass) as excinfo:
            transpiler.transpile("# Heading 1 text-red-600 font-semibold")
        assert excinfo.value.name == "text-red-600"
        assert excinfo.value.lineNumber == 1

    def test_mistyped_trailing_utility_raises(self, transpiler):
        """A lone mistyped class does not become heading text"""
        with pytest.raises(UnknownUtilityClass):
            transpiler.transpile("# Heading text-red-600")

    def test_separator_keeps_utility_names_as_text(self, transpiler):
        """Text before | renders verbatim even if it names utilities"""
        result = transpiler.transpile("# Set text-red-600 here | italic")
        assert identifiers_mask(result.html) == '<h1 class="ID">Set text-red-600 here</h1>'
        assert identifiers_mask(result.css) == ".ID {font-style: italic;}"

    def test_malformed_line_raises_by_default(self, transpiler):
        """A bare token is reported, not silently emitted"""
        with pytest.raises(MalformedLine):
            transpiler.transpile("# Fine\n#")

    def test_malformed_line_skip_policy(self, registry):
        """With the skip policy the malformed line is dropped"""
        settings = AppSettings(malformed_policy="skip")
        result = LineTranspiler(registry, settings=settings).transpile("# Fine\n#\n# Also")
        assert re.findall(r">([^<]+)</h1>", result.html) == ["Fine", "Also"]


class TestEscaping:
    """Test HTML escaping of element text and attributes"""

    def test_text_escaped(self, transpiler):
        """Markup characters in text are escaped"""
        result = transpiler.transpile("# <b>Fish</b> & \"Chips\"")
        assert identifiers_mask(result.html) == (
            '<h1 class="ID">&lt;b&gt;Fish&lt;/b&gt; &amp; &quot;Chips&quot;</h1>'
        )

    def test_escaping_disabled(self, registry):
        """escape_html=False passes text through verbatim"""
        settings = AppSettings(escape_html=False)
        result = LineTranspiler(registry, settings=settings).transpile("# <em>Raw</em>")
        assert identifiers_mask(result.html) == '<h1 class="ID"><em>Raw</em></h1>'

    def test_id_attribute_escaped(self, transpiler):
        """Marker values are escaped as attributes"""
        result = transpiler.transpile('# Title #{a"b}')
        assert 'id="a&quot;b"' in result.html
