"""Built-in content checks.

| Rule id           | Scope      | Default  |
|-------------------|------------|----------|
| required-fields   | document   | error    |
| id-format         | document   | error    |
| unique-id         | collection | error    |
| slug-format       | document   | error    |
| unique-slug       | collection | error    |
| fenced-code       | document   | error    |
| date-format       | document   | warning  |
| image-path        | document   | warning  |
| read-time         | document   | warning  |
| unknown-fields    | document   | warning  |
"""

import re
from collections.abc import Callable, Hashable, Iterator
from pathlib import PurePosixPath, PureWindowsPath

from folio.checks.base import CollectionCheck, DocumentCheck
from folio.markdown import estimate_read_time, parse_read_time, unterminated_fences
from folio.models.document import Collection, Document
from folio.models.report import Issue, Severity

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


class RequiredFieldsCheck(DocumentCheck):
    rule = "required-fields"
    description = "Every required metadata field is present and non-empty"

    def check_document(self, document: Document) -> Iterator[Issue]:
        header = document.metadata()
        for name in self.config.required_fields:
            if not header.get(name, "").strip():
                yield self.issue(document, f"Required field '{name}' is missing or empty")


class IdFormatCheck(DocumentCheck):
    rule = "id-format"
    description = "The id is a base-10 integer"

    def check_document(self, document: Document) -> Iterator[Issue]:
        # Empty ids are reported by required-fields
        if document.raw_id.strip() and document.id is None:
            yield self.issue(
                document,
                f"id must be a base-10 integer, got {document.raw_id!r}",
            )


def _duplicates(
    check: CollectionCheck,
    collection: Collection,
    key: Callable[[Document], Hashable | None],
    label: str,
) -> Iterator[Issue]:
    """Report every document whose key was already used by an earlier one."""
    first_seen: dict[Hashable, Document] = {}
    for document in collection:
        value = key(document)
        if value is None:
            continue
        if value in first_seen:
            original = first_seen[value]
            yield check.issue(
                document,
                f"Duplicate {label} {value!r} (first used at {original.location})",
            )
        else:
            first_seen[value] = document


class UniqueIdCheck(CollectionCheck):
    rule = "unique-id"
    description = "id values are pairwise distinct across the collection"

    def check_collection(self, collection: Collection) -> Iterator[Issue]:
        yield from _duplicates(self, collection, lambda d: d.id, "id")


class SlugFormatCheck(DocumentCheck):
    rule = "slug-format"
    description = "The slug contains only URL-safe characters"

    def check_document(self, document: Document) -> Iterator[Issue]:
        slug = document.slug
        if slug and not re.fullmatch(self.config.slug_pattern, slug):
            yield self.issue(
                document,
                f"Slug {slug!r} is not URL-safe (expected to match {self.config.slug_pattern})",
            )


class UniqueSlugCheck(CollectionCheck):
    rule = "unique-slug"
    description = "slug values are pairwise distinct across the collection"

    def check_collection(self, collection: Collection) -> Iterator[Issue]:
        yield from _duplicates(self, collection, lambda d: d.slug or None, "slug")


class FencedCodeCheck(DocumentCheck):
    rule = "fenced-code"
    description = "Every opening code fence has a matching closing fence"

    def check_document(self, document: Document) -> Iterator[Issue]:
        for fence in unterminated_fences(document.body):
            line = None
            if document.body_line is not None:
                line = document.body_line + fence.start_line - 1
            language = f" ({fence.language})" if fence.language else ""
            yield self.issue(
                document,
                f"Unterminated fenced code block{language} opened with "
                f"{fence.char * fence.length}",
                line=line,
            )


class DateFormatCheck(DocumentCheck):
    rule = "date-format"
    description = "The date parses with one of the accepted formats"
    default_severity = Severity.WARNING

    def check_document(self, document: Document) -> Iterator[Issue]:
        if document.date.strip() and document.parsed_date(self.config.date_formats) is None:
            yield self.issue(
                document,
                f"Unrecognised date {document.date!r} "
                f"(accepted formats: {', '.join(self.config.date_formats)})",
            )


class ImagePathCheck(DocumentCheck):
    rule = "image-path"
    description = "The image is a relative path (and exists under assets_dir when set)"
    default_severity = Severity.WARNING

    def check_document(self, document: Document) -> Iterator[Issue]:
        image = document.image.strip()
        if not image:
            return

        problem = self._path_problem(image)
        if problem:
            yield self.issue(document, f"Image {image!r} {problem}")
            return

        if self.config.assets_dir is not None:
            assets = self.base_dir / self.config.assets_dir
            if not (assets / image).exists():
                yield self.issue(document, f"Image {image!r} not found under {assets}")

    @staticmethod
    def _path_problem(image: str) -> str | None:
        if image.startswith("//"):
            return "must be a relative path, not a URL"
        # Windows drive letters look like a one-letter scheme
        if _SCHEME_RE.match(image) and not PureWindowsPath(image).drive:
            return "must be a relative path, not a URL"
        if PurePosixPath(image).is_absolute() or PureWindowsPath(image).is_absolute():
            return "must be a relative path, not absolute"
        if ".." in PurePosixPath(image.replace("\\", "/")).parts:
            return "must not contain '..' segments"
        return None


class ReadTimeCheck(DocumentCheck):
    rule = "read-time"
    description = "The read time parses (and matches the body length when a tolerance is set)"
    default_severity = Severity.WARNING

    def check_document(self, document: Document) -> Iterator[Issue]:
        if not document.read_time.strip():
            return

        stated = parse_read_time(document.read_time)
        if stated is None:
            yield self.issue(document, f"Unrecognised read time {document.read_time!r}")
            return

        tolerance = self.config.read_time_tolerance
        if tolerance is None:
            return

        estimated = estimate_read_time(document.body, self.config.words_per_minute)
        if abs(stated - estimated) > tolerance:
            yield self.issue(
                document,
                f"Read time {document.read_time!r} differs from the estimate of "
                f"{estimated} min by more than {tolerance} min",
            )


class UnknownFieldsCheck(DocumentCheck):
    rule = "unknown-fields"
    description = "The metadata block contains only known fields"
    default_severity = Severity.WARNING

    def check_document(self, document: Document) -> Iterator[Issue]:
        for key in document.extra:
            yield self.issue(document, f"Unknown metadata field {key!r}")


BUILTIN_CHECKS = [
    RequiredFieldsCheck,
    IdFormatCheck,
    UniqueIdCheck,
    SlugFormatCheck,
    UniqueSlugCheck,
    FencedCodeCheck,
    DateFormatCheck,
    ImagePathCheck,
    ReadTimeCheck,
    UnknownFieldsCheck,
]
