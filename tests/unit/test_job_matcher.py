import pytest

from skillbridge_assistant.config import MatcherConfig
from skillbridge_assistant.errors import JobStoreError
from skillbridge_assistant.jobs.matcher import JobMatcher, extract_search_term
from skillbridge_assistant.jobs.store import SAMPLE_JOBS, InMemoryJobStore
from skillbridge_assistant.types import JobRecord


def _job(job_id: int | None, title: str, company: str = "Acme", requirements: str = "SQL") -> JobRecord:
    return JobRecord(
        id=job_id, title=title, company=company, location="Remoto", requirements=requirements
    )


class _FixedStore:
    def __init__(self, by_title: list[JobRecord], by_company: list[JobRecord]) -> None:
        self.by_title = by_title
        self.by_company = by_company
        self.terms: list[str] = []

    def find_by_title_contains_ignore_case(self, term: str) -> list[JobRecord]:
        self.terms.append(term)
        return list(self.by_title)

    def find_by_company_contains_ignore_case(self, term: str) -> list[JobRecord]:
        self.terms.append(term)
        return list(self.by_company)


class _BrokenStore:
    def find_by_title_contains_ignore_case(self, term: str) -> list[JobRecord]:
        raise JobStoreError("database offline")

    def find_by_company_contains_ignore_case(self, term: str) -> list[JobRecord]:
        raise JobStoreError("database offline")


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("vagas de java", "java"),
        ("Me mostre vagas para Pleno!", "pleno"),
        ("procuro vaga desenvolvedor", "desenvolvedor"),
        ("fale sobre a Tech Solutions", "tech solutions"),
        ("procuro algo, por favor!", "algo"),
    ],
)
def test_extract_search_term(text: str, expected: str) -> None:
    assert extract_search_term(text) == expected


def test_blank_term_issues_no_query() -> None:
    store = _FixedStore([_job(1, "Dev")], [])

    assert JobMatcher(store).search("?!") == []
    assert store.terms == []


def test_scenario_java_search_returns_single_match() -> None:
    matcher = JobMatcher(InMemoryJobStore(list(SAMPLE_JOBS)))

    matches = matcher.search("vagas de java")

    assert [match.title for match in matches] == ["Desenvolvedor Java Pleno"]
    assert matches[0].company == "Tech Solutions"


def test_merge_keeps_title_hits_first_and_dedupes() -> None:
    a, b, c = _job(1, "Java A"), _job(2, "Java B"), _job(3, "Other")
    store = _FixedStore(by_title=[a, b], by_company=[b, c, _job(None, "No id")])

    first = JobMatcher(store).search("vagas de java")
    second = JobMatcher(store).search("vagas de java")

    assert [match.id for match in first] == [1, 2, 3]
    assert [match.id for match in second] == [1, 2, 3]
    assert store.terms == ["java"] * 4


def test_search_caps_match_count() -> None:
    records = [_job(i, f"Java {i}") for i in range(1, 9)]
    matcher = JobMatcher(_FixedStore(records, records))

    assert len(matcher.search("vagas de java")) == 5
    assert len(JobMatcher(_FixedStore(records, []), MatcherConfig(max_matches=2)).search("java")) == 2


def test_requirements_truncated_with_ellipsis() -> None:
    long_requirements = "x" * 450
    store = _FixedStore([_job(1, "Java", requirements=long_requirements)], [])

    match = JobMatcher(store).search("vagas de java")[0]

    assert match.requirements == "x" * 400 + "..."


def test_short_requirements_untouched() -> None:
    store = _FixedStore([_job(1, "Java", requirements="x" * 400)], [])

    assert JobMatcher(store).search("vagas de java")[0].requirements == "x" * 400


def test_store_failure_propagates() -> None:
    with pytest.raises(JobStoreError):
        JobMatcher(_BrokenStore()).search("vagas de java")
