import pytest

from confidence_agent.aggregator import combine_site_extractions
from confidence_agent.manifest import analyze_llms_txt
from confidence_agent.models import Understanding, UnderstandingConfidence


@pytest.fixture
def site(build_page):
    return combine_site_extractions([build_page("<h1>Acme</h1>", head="<title>Acme Payroll</title>")])


@pytest.fixture
def understanding():
    return Understanding(
        one_liner="Acme runs payroll for startups.",
        category="Payroll Software",
        audience="Startups",
        confidence=UnderstandingConfidence(score=80, level="High", reason="Clear site"),
    )


def _padded(text: str, length: int) -> str:
    return text + "a" * (length - len(text))


def test_absent_manifest_is_neutral(site, understanding):
    for value in (None, ""):
        result = analyze_llms_txt(value, site, understanding)
        assert result.present is False
        assert result.aligned is None
        assert result.modifier == 0
        assert result.notes == ["No llms.txt found (neutral)"]


def test_fully_aligned_manifest(site, understanding):
    text = _padded("# Acme\n\n> Payroll software for startups.\n\n", 1800)

    result = analyze_llms_txt(text, site, understanding)

    assert result.present is True
    assert result.aligned is True
    assert result.modifier == 5
    assert result.notes == [
        "llms.txt found",
        "Product name matches",
        "Category aligns",
        "Well-structured format",
        "No marketing fluff detected",
        "Alignment bonus: +5%",
    ]


def test_three_of_four_rounds_half_up(site, understanding):
    text = "# Acme\n\n> Tools for startups.\n"
    result = analyze_llms_txt(text, site, understanding)
    assert result.modifier == 5
    assert "Category aligns" not in result.notes


def test_two_of_four_is_still_aligned(site, understanding):
    result = analyze_llms_txt("# Globex\n\nTools for teams.\n", site, understanding)
    assert result.aligned is True
    assert result.modifier == 4


def test_misaligned_manifest(site, understanding):
    text = _padded("Globex is a revolutionary, world-class suite. ", 6000)

    result = analyze_llms_txt(text, site, understanding)

    assert result.aligned is False
    assert result.modifier == -5
    assert "llms.txt may be too verbose" in result.notes
    assert "Contains marketing language (reduces trust)" in result.notes
    assert result.notes[-1] == "Misalignment penalty: -5%"


def test_missing_context_fails_name_and_category():
    site = combine_site_extractions([])
    result = analyze_llms_txt("plain text without headings, best-in-class", site, None)
    assert result.aligned is False
    assert result.modifier == -5


@pytest.mark.parametrize(
    "text",
    [
        "# Acme",
        "Acme payroll",
        "# Globex",
        "revolutionary",
        "# Acme Payroll cutting-edge",
        "x" * 2500,
        "# " + "x" * 2500,
    ],
)
def test_modifier_bounds(site, understanding, text):
    result = analyze_llms_txt(text, site, understanding)
    assert result.modifier in (-5, 3, 4, 5)
    assert result.aligned is (result.modifier > 0)
