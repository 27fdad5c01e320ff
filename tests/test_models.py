import time
from datetime import datetime, timedelta

import pytest

from snulinks_smoke.exceptions import CheckError, LocatorTimeoutError, SetupError
from snulinks_smoke.models import (
    By,
    CheckResult,
    EvidenceArtifact,
    EvidenceTag,
    Locator,
    Outcome,
    Report,
    ReportOutcome,
    Timed,
    XPathWithSubstringLocator,
    xpath_contains,
)


@pytest.mark.parametrize(
    "locator,expected",
    [
        (Locator(search_method=By.CSS_SELECTOR, search_value="#hi"), 'css selector whose value is "#hi"'),
        (XPathWithSubstringLocator(tag="p", displayed_substring="hi"), 'tag[p] containing the string "hi"'),
        (Locator(search_method=By.TAG_NAME), "tag name"),
    ],
)
def test_locator_description(locator, expected):
    assert locator.description == expected


def test_locator_payload():
    locator = Locator(search_method=By.LINK_TEXT, search_value="Academic Research")
    assert locator.payload == ("link text", "Academic Research")


def test_xpath_locator_payload_is_case_insensitive():
    locator = XPathWithSubstringLocator(tag="a", displayed_substring="University ERP")
    by, value = locator.payload
    assert by == "xpath"
    assert value.startswith("//a[contains(translate(.")
    assert '"university erp"' in value


def test_locator_is_immutable():
    locator = Locator(search_method=By.ID, search_value="footer")
    with pytest.raises(Exception):
        locator.search_value = "header"


def test_incorrect_xpath_contains():
    with pytest.raises(ValueError):
        xpath_contains("//a", '"')


@pytest.mark.parametrize(
    "color, expected",
    [
        (None, EvidenceTag.none),
        ("green", EvidenceTag.PASS),
        ("GREEN", EvidenceTag.PASS),
        ("Green", EvidenceTag.PASS),
        ("red", EvidenceTag.FAIL),
        ("blue", EvidenceTag.FAIL),
        ("", EvidenceTag.FAIL),
    ],
)
def test_evidence_tag_for_color(color, expected):
    assert EvidenceTag.for_color(color) is expected


@pytest.mark.parametrize(
    "outcome, color, captures",
    [
        (Outcome.passed, "green", True),
        (Outcome.failed_assertion, "red", True),
        (Outcome.failed_error, "red", True),
        (Outcome.failed_timeout, None, True),
        (Outcome.failed_setup, None, False),
    ],
)
def test_outcome_evidence_policy(outcome, color, captures):
    assert outcome.highlight_color == color
    assert outcome.captures_evidence is captures


def test_passed_result_does_not_raise():
    CheckResult(test_name="test_home_page_title", outcome=Outcome.passed).raise_for_outcome()


@pytest.mark.parametrize(
    "outcome, error",
    [
        (Outcome.failed_assertion, AssertionError),
        (Outcome.failed_timeout, LocatorTimeoutError),
        (Outcome.failed_error, CheckError),
        (Outcome.failed_setup, SetupError),
    ],
)
def test_failed_result_raises(outcome, error):
    result = CheckResult(test_name="test_home_page_title", outcome=outcome, message="it broke")
    with pytest.raises(error) as excinfo:
        result.raise_for_outcome()
    assert "it broke" in str(excinfo.value)


def test_test_id_from_parametrized_name():
    result = CheckResult(test_name="test_link[University ERP]", outcome=Outcome.passed)
    assert result.test_id == "test_link-University-ERP"


def test_element_is_not_serialized():
    result = CheckResult(test_name="test_a_thing", outcome=Outcome.passed, element=object())
    assert "element" not in result.model_dump()


def test_artifact_filename():
    artifact = EvidenceArtifact(
        path="target/screenshots/test_a_PASS_20250101_120000.png",
        test_name="test_a",
        tag=EvidenceTag.PASS,
        timestamp=datetime(2025, 1, 1, 12),
    )
    assert artifact.filename == "test_a_PASS_20250101_120000.png"


def test_report_failures():
    report = Report(
        title="Smoke",
        results=[
            CheckResult(test_name="a", outcome=Outcome.passed),
            CheckResult(test_name="b", outcome=Outcome.failed_timeout),
            CheckResult(test_name="c", outcome=Outcome.failed_assertion),
        ],
    )
    assert report.outcome == ReportOutcome.never_started
    assert report.num_failures == 2
    assert [r.test_name for r in report.failures] == ["b", "c"]


def test_report_json_round_trip_keeps_artifacts():
    artifact = EvidenceArtifact(
        path="shots/b_20250101_120000.png", test_name="b", timestamp=datetime(2025, 1, 1, 12)
    )
    report = Report(
        title="Smoke", results=[CheckResult(test_name="b", outcome=Outcome.failed_timeout, artifact=artifact)]
    )
    loaded = Report.model_validate_json(report.model_dump_json())
    assert loaded.results[0].artifact == artifact
    assert loaded.results[0].outcome is Outcome.failed_timeout


def test_timed_duration():
    timed = Timed()
    time.sleep(1.2)
    assert timed.duration == "1s"


def test_timed_long_duration():
    timed = Timed()
    timed.start_time = timed.start_time - timedelta(minutes=2)
    assert timed.duration == "2m 0s"


def test_timed_context():
    with Timed() as timer:
        pass
    assert timer.end_time >= timer.start_time
    assert "duration" in timer.model_dump()
