import json
from typing import Any, Dict
from .exceptions import InvariantViolation

# Versions are stored in a 32-bit signed integer column
MAX_VERSION_NUMBER = 2**31 - 1


def parse_document(content: Any) -> Dict[str, Any]:
    """
    Accept a JSON string (or an already decoded dict) and return the
    document after checking it is structurally well-formed.
    """
    if isinstance(content, (str, bytes)):
        try:
            content = json.loads(content)
        except ValueError as exc:
            raise InvariantViolation(f"Document is not valid JSON: {exc}") from exc

    assert_document(content)
    return content


def assert_document(document):
    if not isinstance(document, dict):
        raise InvariantViolation("Document must be a JSON object.")

    if not isinstance(document.get("page"), dict):
        raise InvariantViolation("Document must contain a 'page' object.")

    sections = document.get("sections")
    if not isinstance(sections, list):
        raise InvariantViolation("Document must contain a 'sections' list.")

    for index, section in enumerate(sections):
        if not isinstance(section, dict):
            raise InvariantViolation(f"Section {index} must be an object.")
        if not isinstance(section.get("kind"), str) or not section["kind"]:
            raise InvariantViolation(f"Section {index} is missing its 'kind'.")


def is_version_number(version) -> bool:
    # bool is an int subclass
    return (
        isinstance(version, int)
        and not isinstance(version, bool)
        and 1 <= version <= MAX_VERSION_NUMBER
    )


def assert_version_number(version):
    if not is_version_number(version):
        raise InvariantViolation(
            f"Version number must be an integer between 1 and {MAX_VERSION_NUMBER}, got {version!r}"
        )
