"""Tests for built-in property translators."""

from datetime import date
from xml.etree import ElementTree as ET

import pytest
from hypothesis import given, strategies as st

from uisync.app import (
    Alignment,
    Border,
    ComponentFactory,
    FillImage,
    FillImageBorder,
    Font,
    ImageReference,
    Insets,
)
from uisync.core import DecodeError, InvalidBorderError, InvalidFillImageBorderError, Settings
from uisync.serial import TreeSerializer, create_registry


def decode(serializer, xml: str, client=None):
    """Decode the value of a single property element."""
    return serializer.loader(client=client).decode_value(ET.fromstring(xml))


def plain_serializer() -> TreeSerializer:
    """Serializer for property tests, which cannot share function-scoped fixtures."""
    return TreeSerializer(create_registry(), ComponentFactory(), Settings())


def round_trip(serializer, value):
    """Encode a value as property 'v' and decode it again."""
    elements = serializer.writer().property_elements("v", value)
    assert len(elements) == 1
    return serializer.loader().decode_value(elements[0])


# ============================================================================
# Scalars
# ============================================================================

@pytest.mark.unit
def test_scalar_decoding(serializer):
    """Typed scalars decode to their native types."""
    assert decode(serializer, '<p n="a" t="b">true</p>') is True
    assert decode(serializer, '<p n="a" t="b">yes</p>') is False
    assert decode(serializer, '<p n="a" t="i">42</p>') == 42
    assert decode(serializer, '<p n="a" t="f">2.5</p>') == 2.5
    assert decode(serializer, '<p n="a" t="s">text</p>') == "text"
    assert decode(serializer, '<p n="a" t="0">ignored</p>') is None


@pytest.mark.unit
def test_untyped_property_is_string(serializer):
    """Without a type tag the text content is the value."""
    assert decode(serializer, '<p n="a">42</p>') == "42"
    assert decode(serializer, '<p n="a"/>') == ""


@pytest.mark.unit
def test_malformed_integer_is_fatal(serializer):
    """A typed integer that does not parse has no safe default."""
    with pytest.raises(DecodeError):
        decode(serializer, '<p n="a" t="i">twelve</p>')


# ============================================================================
# Date
# ============================================================================

@pytest.mark.unit
def test_date_decoding(serializer):
    """YYYY.MM.DD decodes to a date."""
    assert decode(serializer, '<p n="a" t="d">2024.03.09</p>') == date(2024, 3, 9)


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "March 9", "2024-03", "2024.13.40"])
def test_unparseable_date_is_none(serializer, text):
    """Unparseable or impossible dates decode to None, not an error."""
    assert decode(serializer, f'<p n="a" t="d">{text}</p>') is None


@pytest.mark.unit
def test_date_encoding_is_zero_padded(serializer):
    """Single-digit months and days are padded so they decode again."""
    element = serializer.writer().property_elements("a", date(2024, 1, 5))[0]
    assert element.get("t") == "d"
    assert element.text == "2024.01.05"


# ============================================================================
# Alignment
# ============================================================================

@pytest.mark.unit
def test_alignment_both_axes(serializer):
    """Both axes decode to an Alignment; vertical center maps to middle."""
    value = decode(serializer, '<p n="a" t="AL"><a h="left" v="center"/></p>')
    assert value == Alignment(horizontal="left", vertical="middle")


@pytest.mark.unit
def test_alignment_single_axis_is_bare(serializer):
    """A single axis decodes to its bare value."""
    assert decode(serializer, '<p n="a" t="AL"><a h="trailing"/></p>') == "trailing"
    assert decode(serializer, '<p n="a" t="Alignment"><a v="center"/></p>') == "middle"
    assert decode(serializer, '<p n="a" t="AL"><a h="diagonal"/></p>') is None


@pytest.mark.unit
def test_alignment_model_requires_both_axes():
    """A single-axis alignment is a bare string, never a model."""
    with pytest.raises(ValueError):
        Alignment(horizontal="left")


# ============================================================================
# Border
# ============================================================================

@pytest.mark.unit
def test_border_shorthand(serializer):
    """The v attribute is the whole border."""
    assert decode(serializer, '<p n="a" t="BO" v="1px solid #000000"/>') == "1px solid #000000"


@pytest.mark.unit
def test_border_four_sides(serializer):
    """Four sides decode in top, right, bottom, left order."""
    value = decode(serializer, '<p n="a" t="BO"><b t="1px" r="2px" b="3px" l="4px"/></p>')
    assert value == Border(top="1px", right="2px", bottom="3px", left="4px")


@pytest.mark.unit
def test_border_sides_stop_at_first_gap(serializer):
    """Sides after a missing one are not read."""
    value = decode(serializer, '<p n="a" t="BO"><b t="1px" r="2px" l="4px"/></p>')
    assert value == Border(top="1px", right="2px")


@pytest.mark.unit
def test_border_without_top_is_fatal(serializer):
    """Right without top is an invalid multi-sided border."""
    with pytest.raises(InvalidBorderError):
        decode(serializer, '<p n="a" t="BO"><b r="2px"/></p>')


@pytest.mark.unit
def test_border_model_rejects_gaps():
    """A constructed border must be contiguous from top."""
    with pytest.raises(ValueError):
        Border(top="1px", bottom="3px")


# ============================================================================
# Font
# ============================================================================

@pytest.mark.unit
def test_font_single_typeface(serializer):
    """One typeface is a bare name; flags follow attribute presence."""
    value = decode(serializer, '<p n="a" t="F"><f sz="10pt" bo="1" un="1"><tf n="Verdana"/></f></p>')
    assert value == Font(typeface="Verdana", size="10pt", bold=True, underline=True)


@pytest.mark.unit
def test_font_fallback_chain(serializer):
    """Several typefaces form an ordered tuple."""
    value = decode(
        serializer, '<p n="a" t="Font"><f it="1"><tf n="Verdana"/><tf n="Arial"/><tf n="sans-serif"/></f></p>'
    )
    assert value.typeface == ("Verdana", "Arial", "sans-serif")
    assert value.italic is True
    assert value.size is None


@pytest.mark.unit
def test_font_chain_is_normalized():
    """Chains of one or zero typefaces take the form they decode to."""
    assert Font(typeface=("Arial",)).typeface == "Arial"
    assert Font(typeface=()).typeface is None
    assert Font(typeface=("Arial",), size="") == Font(typeface="Arial")


# ============================================================================
# Fill images
# ============================================================================

@pytest.mark.unit
def test_fill_image_bare_url(serializer, client):
    """A fill image without repeat or position is its decompressed URL."""
    assert decode(serializer, '<p n="a" t="FI"><fi u="~bg.png"/></p>', client) == "/static/images/bg.png"


@pytest.mark.unit
def test_fill_image_with_repeat(serializer):
    """Repeat or position yields a FillImage."""
    value = decode(serializer, '<p n="a" t="FI"><fi u="bg.png" r="x" y="10px"/></p>')
    assert value == FillImage(url="bg.png", repeat="x", y="10px")


@pytest.mark.unit
def test_fill_image_model_is_never_bare():
    """A fill image with only a URL is the URL string itself."""
    with pytest.raises(ValueError):
        FillImage(url="bg.png")
    with pytest.raises(ValueError):
        FillImage(url="bg.png", repeat="", x="")


FIB_EIGHT = (
    '<p n="a" t="FIB"><fib ci="4px" bi="" bc="#ff0000">'
    '<fi u="tl.png"/><fi u="t.png"/><fi u="tr.png"/><fi u="l.png"/>'
    '<fi u="r.png"/><null-fi/><fi u="b.png"/><fi u="br.png"/>'
    '</fib></p>'
)


@pytest.mark.unit
def test_fill_image_border_eight_images(serializer):
    """Eight images fill the segments in order; null-fi leaves a gap."""
    value = decode(serializer, FIB_EIGHT)
    assert isinstance(value, FillImageBorder)
    assert value.content_insets == "4px"
    assert value.border_insets is None
    assert value.color == "#ff0000"
    assert value.top_left == "tl.png"
    assert value.bottom_left is None
    assert value.bottom_right == "br.png"


@pytest.mark.unit
def test_fill_image_border_no_images(serializer):
    """Zero images is valid."""
    value = decode(serializer, '<p n="a" t="FIB"><fib bc="#000000"/></p>')
    assert value.images() == [None] * 8


@pytest.mark.unit
@pytest.mark.parametrize("count", range(1, 8))
def test_fill_image_border_partial_count_is_fatal(serializer, count):
    """Any count between one and seven is invalid."""
    images = "".join('<fi u="x.png"/>' for _ in range(count))
    with pytest.raises(InvalidFillImageBorderError):
        decode(serializer, f'<p n="a" t="FIB"><fib>{images}</fib></p>')


@pytest.mark.unit
def test_fill_image_border_round_trip(serializer):
    """An encoded eight-image border decodes to an equal value."""
    value = decode(serializer, FIB_EIGHT)
    assert round_trip(serializer, value) == value


# ============================================================================
# Image reference and insets
# ============================================================================

@pytest.mark.unit
def test_image_reference(serializer):
    """Dimensions turn a bare URL into an ImageReference."""
    assert decode(serializer, '<p n="a" t="I">logo.png</p>') == "logo.png"
    assert decode(serializer, '<p n="a" t="I" w="32px">logo.png</p>') == ImageReference(
        url="logo.png", width="32px"
    )


@pytest.mark.unit
def test_image_reference_model_needs_dimensions():
    with pytest.raises(ValueError):
        ImageReference(url="logo.png")
    with pytest.raises(ValueError):
        ImageReference(url="logo.png", width="", height="")


@pytest.mark.unit
@pytest.mark.parametrize(
    "text,expected",
    [
        ("5px", Insets(top="5px", right="5px", bottom="5px", left="5px")),
        ("1px 2px", Insets(top="1px", right="2px", bottom="1px", left="2px")),
        ("1px 2px 3px", Insets(top="1px", right="2px", bottom="3px", left="2px")),
        ("1px 2px 3px 4px", Insets(top="1px", right="2px", bottom="3px", left="4px")),
    ],
)
def test_insets_shorthand(serializer, text, expected):
    """Insets follow CSS shorthand expansion."""
    assert decode(serializer, f'<p n="a" t="N">{text}</p>') == expected


@pytest.mark.unit
def test_insets_invalid(serializer):
    """Five extents cannot be insets."""
    with pytest.raises(DecodeError):
        decode(serializer, '<p n="a" t="Insets">1px 2px 3px 4px 5px</p>')


# ============================================================================
# Map and layout data
# ============================================================================

@pytest.mark.unit
def test_map_decoding(serializer):
    """Nested properties fill a fresh dict, indexed entries as lists."""
    value = decode(
        serializer,
        '<p n="a" t="m"><p n="width" t="i">10</p><p n="tags" x="1">b</p><p n="label">x</p></p>',
    )
    assert value == {"width": 10, "tags": [None, "b"], "label": "x"}


@pytest.mark.unit
def test_map_entry_without_name_is_fatal(serializer):
    """Every map entry must carry its own name."""
    with pytest.raises(DecodeError):
        decode(serializer, '<p n="a" t="m"><p m="select">x</p></p>')


@pytest.mark.unit
def test_layout_data(serializer):
    """Layout data decodes like a map."""
    value = decode(serializer, '<p n="layoutData" t="L"><p n="alignment" t="AL"><a h="right"/></p></p>')
    assert value == {"alignment": "right"}


# ============================================================================
# Round trips
# ============================================================================

sides = st.sampled_from(["1px solid #000000", "2px dashed #ff0000", "0px none #ffffff"])
extents = st.sampled_from(["0px", "5px", "1em", "10%"])
typefaces = st.sampled_from(["Verdana", "Arial", "Helvetica", "sans-serif"])


@st.composite
def borders(draw):
    count = draw(st.integers(min_value=1, max_value=4))
    names = ["top", "right", "bottom", "left"][:count]
    return Border(**{name: draw(sides) for name in names})


@st.composite
def fonts(draw):
    typeface = draw(st.none() | typefaces | st.lists(typefaces, max_size=3).map(tuple))
    return Font(
        typeface=typeface,
        size=draw(st.none() | st.sampled_from(["", "8pt", "10pt", "14px"])),
        bold=draw(st.booleans()),
        italic=draw(st.booleans()),
        underline=draw(st.booleans()),
        overline=draw(st.booleans()),
        line_through=draw(st.booleans()),
    )


alignments = st.builds(
    Alignment,
    horizontal=st.sampled_from(["leading", "trailing", "left", "center", "right"]),
    vertical=st.sampled_from(["top", "middle", "bottom"]),
)

insets = st.builds(Insets, top=extents, right=extents, bottom=extents, left=extents)

map_values = st.one_of(
    st.booleans(),
    st.integers(min_value=-(2**31), max_value=2**31),
    st.floats(allow_nan=False),
    st.text(alphabet=st.characters(blacklist_categories=("Cs", "Cc"))),
    st.dates(min_value=date(1000, 1, 1)),
)

maps = st.dictionaries(st.text(alphabet="abcdefghij", min_size=1, max_size=8), map_values, max_size=6)


@given(st.dates(min_value=date(1000, 1, 1)))
def test_date_round_trip(value):
    """Property test: dates survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value


@given(borders())
def test_border_round_trip(value):
    """Property test: multi-sided borders survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value


@given(fonts())
def test_font_round_trip(value):
    """Property test: fonts survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value


@given(alignments)
def test_alignment_round_trip(value):
    """Property test: two-axis alignments survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value


@given(insets)
def test_insets_round_trip(value):
    """Property test: insets survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value


@given(maps)
def test_map_round_trip(value):
    """Property test: maps of scalars and dates survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value


urls = st.sampled_from(["bg.png", "/static/images/ok.png", "http://example.com/a.gif"])
optional_extents = st.none() | st.just("") | extents


@st.composite
def fill_images(draw):
    """Fill images with any subset of fields; a bare one is its URL."""
    url = draw(urls)
    fields = {"repeat": draw(st.none() | st.sampled_from(["", "x", "y", "no-repeat"])),
              "x": draw(optional_extents), "y": draw(optional_extents)}
    if not any(fields.values()):
        return url
    return FillImage(url=url, **fields)


@st.composite
def image_references(draw):
    url = draw(urls)
    width, height = draw(optional_extents), draw(optional_extents)
    if not width and not height:
        return url
    return ImageReference(url=url, width=width, height=height)


@given(fill_images())
def test_fill_image_round_trip(value):
    """Property test: fill images and bare URLs survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value


@given(image_references())
def test_image_reference_round_trip(value):
    """Property test: image references and bare URLs survive encode then decode."""
    assert round_trip(plain_serializer(), value) == value
