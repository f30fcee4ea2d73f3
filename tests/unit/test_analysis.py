"""Tests for static analysis of generated code."""

from returns.pipeline import is_successful

from uibuilder.schema import analyze_generated_code, validate_generated_code


def test_generated_code_scores_clean(generator, sample_plan):
    code = generator.generate(sample_plan).code
    report = analyze_generated_code(code, sample_plan)

    assert report.score == 100
    assert [f.code for f in report.findings] == ["clean"]
    assert report.findings[0].level == "info"
    assert not report.has_errors


def test_metrics_count_lines_imports_and_tags(generator, sample_plan):
    code = generator.generate(sample_plan).code
    metrics = analyze_generated_code(code, sample_plan).metrics

    assert metrics.line_count == len(code.split("\n"))
    assert metrics.import_count == 1
    assert metrics.jsx_count >= sample_plan.node_count()


def test_raw_html_scores_at_most_fifty(sample_plan):
    """Raw HTML injection fails validation and costs half the score."""
    code = (
        'import { Navbar, Card, Input, Button, Chart } from "@/components/ui";\n'
        '<Navbar /><Card /><Input /><Button /><Chart />\n'
        '<div dangerouslySetInnerHTML={{ __html: "<b>x</b>" }} />\n'
    )

    assert not is_successful(validate_generated_code(code))

    report = analyze_generated_code(code, sample_plan)
    assert report.score <= 50
    assert any(f.level == "error" and f.code == "dangerous-html" for f in report.findings)


def test_penalties_accumulate_and_floor_at_zero(sample_plan):
    code = (
        '<Widget style={{ color: "red" }} className={`x-${y}`} '
        'dangerouslySetInnerHTML={{ __html: "" }} />\n'
    )
    report = analyze_generated_code(code, sample_plan)

    codes = [f.code for f in report.findings]
    assert codes == ["dangerous-html", "inline-style", "dynamic-class", "illegal-component", "missing-component"]
    assert report.score == 0


def test_missing_component_is_a_warning(sample_plan):
    code = 'import { Navbar } from "@/components/ui";\n<Navbar {...{}} />\n'
    report = analyze_generated_code(code, sample_plan)

    assert report.score == 85
    finding = report.findings[0]
    assert finding.level == "warning"
    assert "Card" in finding.message and "Chart" in finding.message


def test_report_serializes_camel_case(generator, sample_plan):
    report = analyze_generated_code(generator.generate(sample_plan).code, sample_plan)
    data = report.to_dict()
    assert set(data["metrics"]) == {"lineCount", "jsxCount", "importCount"}
