"""Unit tests for content and report models."""

import datetime as dt
from pathlib import Path

import pytest

from folio.models import Collection, Document, Issue, LoadError, Severity, ValidationReport


def make_document(**overrides: object) -> Document:
    """Build a complete document with optional field overrides."""
    metadata = {
        "id": "1",
        "title": "A Title",
        "summary": "A summary.",
        "date": "March 15, 2024",
        "category": "Frontend",
        "readTime": "8 min read",
        "image": "images/a.png",
        "slug": "a-title",
    }
    metadata.update({k: str(v) for k, v in overrides.items()})
    return Document.from_metadata(metadata, body="Body.", source=Path("posts.md"), line=1)


class TestDocument:
    """Tests for Document."""

    def test_from_metadata_maps_fields(self) -> None:
        doc = make_document()

        assert doc.id == 1
        assert doc.raw_id == "1"
        assert doc.read_time == "8 min read"
        assert doc.slug == "a-title"
        assert doc.extra == {}

    def test_non_integer_id(self) -> None:
        doc = make_document(id="one")

        assert doc.id is None
        assert doc.raw_id == "one"

    @pytest.mark.parametrize("raw", ["-1", "1.0", "0x1", ""])
    def test_id_must_be_plain_digits(self, raw: str) -> None:
        assert make_document(id=raw).id is None

    def test_missing_fields_are_empty(self) -> None:
        doc = Document.from_metadata({"title": "Only a title"})

        assert doc.id is None
        assert doc.slug == ""
        assert doc.summary == ""

    def test_unknown_keys_kept_as_extra(self) -> None:
        doc = make_document(author="Jane", tags="react")

        assert doc.extra == {"author": "Jane", "tags": "react"}

    def test_metadata_uses_disk_key_names(self) -> None:
        header = make_document(author="Jane").metadata()

        assert list(header)[:8] == [
            "id",
            "title",
            "summary",
            "date",
            "category",
            "readTime",
            "image",
            "slug",
        ]
        assert header["readTime"] == "8 min read"
        assert header["author"] == "Jane"

    def test_parsed_date(self) -> None:
        assert make_document().parsed_date() == dt.date(2024, 3, 15)
        assert make_document(date="2024-03-15").parsed_date() == dt.date(2024, 3, 15)
        assert make_document(date="Mar 15, 2024").parsed_date() == dt.date(2024, 3, 15)
        assert make_document(date="sometime").parsed_date() is None

    def test_parsed_date_with_custom_formats(self) -> None:
        doc = make_document(date="15/03/2024")

        assert doc.parsed_date() is None
        assert doc.parsed_date(["%d/%m/%Y"]) == dt.date(2024, 3, 15)

    def test_document_is_immutable(self) -> None:
        doc = make_document()

        with pytest.raises(AttributeError):
            doc.title = "Changed"  # type: ignore[misc]

    def test_document_is_hashable(self) -> None:
        first = make_document(author="Jane")
        same = make_document(author="Jane")
        other = make_document(author="Joe")

        assert hash(first) == hash(same)
        assert first == same
        assert first != other
        assert len({first, same, other}) == 2

    def test_location(self) -> None:
        assert make_document().location == "posts.md:1"
        assert Document(id=1).location == "<string>:1"

    def test_to_dict(self) -> None:
        data = make_document().to_dict()

        assert data["id"] == 1
        assert data["readTime"] == "8 min read"
        assert data["source"] == "posts.md"
        assert "body" not in data
        assert make_document().to_dict(include_body=True)["body"] == "Body."


class TestCollection:
    """Tests for Collection."""

    @pytest.fixture
    def collection(self) -> Collection:
        return Collection(
            [
                make_document(id=1, slug="first", category="Frontend"),
                make_document(id=2, slug="second", category="Backend"),
                make_document(id=2, slug="third", category="frontend"),
            ]
        )

    def test_len_and_iter(self, collection: Collection) -> None:
        assert len(collection) == 3
        assert [d.slug for d in collection] == ["first", "second", "third"]

    def test_by_slug(self, collection: Collection) -> None:
        assert collection.by_slug("second").id == 2
        assert collection.by_slug("missing") is None

    def test_by_id_returns_first_match(self, collection: Collection) -> None:
        assert collection.by_id(2).slug == "second"
        assert collection.by_id(99) is None

    def test_categories(self, collection: Collection) -> None:
        assert collection.categories() == ["Backend", "Frontend", "frontend"]

    def test_filter_by_category_is_case_insensitive(self, collection: Collection) -> None:
        filtered = collection.filter("FRONTEND")

        assert [d.slug for d in filtered] == ["first", "third"]
        assert len(collection.filter(None)) == 3

    def test_filter_keeps_files_and_load_errors(self, collection: Collection) -> None:
        collection.files = [Path("posts.md"), Path("bad.md")]
        collection.load_errors = [LoadError(Path("bad.md"), "never closed", 1)]

        filtered = collection.filter("backend")

        assert [d.slug for d in filtered] == ["second"]
        assert filtered.files == [Path("posts.md"), Path("bad.md")]
        assert filtered.load_errors == collection.load_errors
        assert filtered.files is not collection.files

    def test_sources(self) -> None:
        collection = Collection(
            [
                Document(id=1, source=Path("b.md")),
                Document(id=2, source=Path("a.md")),
                Document(id=3, source=Path("b.md")),
                Document(id=4),
            ]
        )

        assert collection.sources() == [Path("b.md"), Path("a.md")]


class TestValidationReport:
    """Tests for ValidationReport."""

    def _issue(self, severity: Severity, rule: str = "unique-slug") -> Issue:
        return Issue(rule=rule, severity=severity, message="problem", source=Path("p.md"), line=3)

    def test_empty_report_succeeds(self) -> None:
        report = ValidationReport()

        assert report.success
        assert report.exit_code() == 0

    def test_warnings_only(self) -> None:
        report = ValidationReport(issues=[self._issue(Severity.WARNING)])

        assert report.success
        assert report.exit_code() == 2
        assert report.exit_code(fail_on_warning=True) == 1

    def test_errors(self) -> None:
        report = ValidationReport(
            issues=[self._issue(Severity.WARNING), self._issue(Severity.ERROR)]
        )

        assert not report.success
        assert len(report.errors) == 1
        assert len(report.warnings) == 1
        assert report.exit_code() == 1

    def test_by_rule(self) -> None:
        report = ValidationReport(
            issues=[
                self._issue(Severity.ERROR, "unique-id"),
                self._issue(Severity.ERROR, "unique-slug"),
            ]
        )

        assert [i.rule for i in report.by_rule("unique-id")] == ["unique-id"]

    def test_to_dict(self) -> None:
        report = ValidationReport(
            issues=[self._issue(Severity.ERROR)],
            documents_checked=4,
            files_checked=2,
            rules=["unique-slug"],
        )

        data = report.to_dict()

        assert data["success"] is False
        assert data["error_count"] == 1
        assert data["documents_checked"] == 4
        assert data["issues"][0] == {
            "rule": "unique-slug",
            "severity": "error",
            "message": "problem",
            "source": "p.md",
            "line": 3,
            "slug": None,
            "id": None,
        }

    def test_issue_location(self) -> None:
        assert self._issue(Severity.ERROR).location == "p.md:3"
        assert Issue("parse", Severity.ERROR, "x", source=Path("p.md")).location == "p.md"
        assert Issue("parse", Severity.ERROR, "x").location == "<unknown>"

    def test_severity_parse(self) -> None:
        assert Severity.parse("ERROR") is Severity.ERROR
        assert Severity.parse(Severity.WARNING) is Severity.WARNING
        with pytest.raises(ValueError):
            Severity.parse("fatal")
