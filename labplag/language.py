"""
Source language frontends.

Discovery and report assembly only need a few capabilities of a language:
its display name, the default valid file suffixes and whether submission
files are shown through alternate view files.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class LanguageFrontend:
    """Capabilities of a supported source language."""
    identifier: str  # Key used on the command line and in config files
    name: str  # Display name written to the overview
    suffixes: tuple[str, ...]
    minimum_token_match: int
    view_file_suffix: str | None = None  # e.g. ".emfatic" for EMF models

    @property
    def uses_view_files(self) -> bool:
        """True if the report shows a view file instead of the raw source."""
        return self.view_file_suffix is not None


JAVA = LanguageFrontend(
    identifier="java",
    name="Javac based AST plugin",
    suffixes=(".java", ".JAVA"),
    minimum_token_match=9,
)

PYTHON = LanguageFrontend(
    identifier="python3",
    name="Python3 Parser",
    suffixes=(".py",),
    minimum_token_match=12,
)

CPP = LanguageFrontend(
    identifier="cpp",
    name="C/C++ Scanner [basic markup]",
    suffixes=(
        ".cpp", ".CPP", ".cxx", ".CXX", ".c++", ".C++", ".c", ".C",
        ".cc", ".CC", ".h", ".H", ".hpp", ".HPP", ".hh", ".HH",
    ),
    minimum_token_match=12,
)

CSHARP = LanguageFrontend(
    identifier="csharp",
    name="C# 6 Parser",
    suffixes=(".cs", ".CS"),
    minimum_token_match=8,
)

SCHEME = LanguageFrontend(
    identifier="scheme",
    name="Scheme R4RS Parser [basic markup]",
    suffixes=(".scm", ".SCM", ".ss", ".SS"),
    minimum_token_match=13,
)

TEXT = LanguageFrontend(
    identifier="text",
    name="Text Parser (naive)",
    suffixes=(".txt", ".asc", ".TXT", ".ASC"),
    minimum_token_match=9,
)

EMF = LanguageFrontend(
    identifier="emf",
    name="emf metamodel",
    suffixes=(".ecore",),
    minimum_token_match=6,
    view_file_suffix=".emfatic",
)

LANGUAGES: dict[str, LanguageFrontend] = {
    language.identifier: language
    for language in (JAVA, PYTHON, CPP, CSHARP, SCHEME, TEXT, EMF)
}

DEFAULT_LANGUAGE = JAVA.identifier


def get_language(identifier: str) -> LanguageFrontend:
    """
    Look up a language frontend by its identifier.

    Args:
        identifier: Language key, case-insensitive (e.g. "java", "cpp")

    Returns:
        The matching LanguageFrontend

    Raises:
        ValueError: If no frontend is registered under that identifier

    Examples:
        >>> get_language("JAVA").name
        'Javac based AST plugin'
    """
    try:
        return LANGUAGES[identifier.lower()]
    except KeyError:
        known = ", ".join(sorted(LANGUAGES))
        raise ValueError(f"Unknown language '{identifier}'. Known languages: {known}") from None
