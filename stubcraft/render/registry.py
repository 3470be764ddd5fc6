"""
Named template registry.

A ``TemplateRegistry`` is an immutable set of named Jinja2 templates
("slots"). Every constructor starts from an empty set, so loading a custom
set never inherits anything from the bundled defaults or from a previously
loaded registry: a partial custom set must declare every slot it uses.

Four sources are supported:
- the bundled default set (``from_defaults``),
- explicit in-memory texts (``from_data``),
- every file of a directory (``from_directory``),
- a named alternate set from the bundled catalog (``from_name``).

A text names its slot on its first line with a ``{# slot: <name> #}``
comment. Files without the declaration are named after the file, up to the
first dot (``function.j2`` defines ``function``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from enum import Enum
from importlib.resources import files
from importlib.resources.abc import Traversable
from pathlib import Path

from jinja2 import DictLoader, Environment, StrictUndefined, Template
from jinja2.exceptions import TemplateSyntaxError

from ..ports.render_error import TemplateExecutionError, TemplateSourceError
from .helpers import TEMPLATE_FILTERS, TEMPLATE_GLOBALS

logger = logging.getLogger(__name__)

RESOURCE_PACKAGE = "stubcraft.render"
DEFAULTS_DIR = "templates"
CATALOG_DIR = "catalog"
# Upper bound on the entries read from one catalog set per load.
MAX_CATALOG_ENTRIES = 7

_SLOT_DECLARATION = re.compile(r"\A[ \t]*\{#-?\s*slot:\s*([\w.-]+)\s*-?#\}[ \t]*\r?\n?")
_SET_NAME = re.compile(r"\A[\w-]+\Z")


class TemplateSlot(str, Enum):
    """Independently overridable units of generation."""

    HEADER = "header"
    FUNCTION = "function"
    CALL = "call"
    INLINE = "inline"
    INPUTS = "inputs"
    MESSAGE = "message"
    RESULTS = "results"


DEFAULT_REQUIRED_SLOTS = (TemplateSlot.HEADER, TemplateSlot.FUNCTION)

TemplateText = str | bytes


def split_slot_declaration(text: str) -> tuple[str | None, str]:
    """Return the declared slot name of ``text`` and the text without the declaration."""
    match = _SLOT_DECLARATION.match(text)
    if match is None:
        return None, text
    return match.group(1), text[match.end() :]


def _decode(text: TemplateText, source: str) -> str:
    if isinstance(text, str):
        return text
    try:
        return text.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TemplateSourceError(f"Template is not valid UTF-8: {e}", source=source) from e


def _slot_from_file_name(file_name: str) -> str:
    return file_name.split(".", 1)[0]


def _create_environment(sources: Mapping[str, str]) -> Environment:
    env = Environment(
        loader=DictLoader(dict(sources)),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters.update(TEMPLATE_FILTERS)
    env.globals.update(TEMPLATE_GLOBALS)
    return env


class TemplateRegistry:
    """An immutable, compiled set of named templates."""

    def __init__(
        self,
        sources: Mapping[str, str],
        *,
        origin: str = "data",
        required: Iterable[TemplateSlot | str] = (),
    ) -> None:
        """
        Compile ``sources`` into a registry.

        Args:
            sources: Slot name to template text.
            origin: Description of where the texts came from, used in errors.
            required: Slots that must be present.

        Raises:
            TemplateSourceError: If a text does not compile or a required slot is missing.
        """
        self.origin = origin
        self._sources = dict(sources)
        self._env = _create_environment(self._sources)
        self._templates: dict[str, Template] = {}

        for name in sorted(self._sources):
            try:
                self._templates[name] = self._env.get_template(name)
            except TemplateSyntaxError as e:
                error_msg = f"Failed to parse template '{name}' at line {e.lineno}: {e.message}"
                logger.error(error_msg)
                raise TemplateSourceError(error_msg, source=origin) from e

        missing = []
        for slot in required:
            try:
                name = TemplateSlot(slot).value
            except ValueError:
                raise TemplateSourceError(f"Unknown slot {slot!r}", source=origin) from None
            if name not in self._templates:
                missing.append(name)
        if missing:
            error_msg = f"Missing required templates: {', '.join(missing)}"
            logger.error(error_msg)
            raise TemplateSourceError(error_msg, source=origin)

        logger.debug(
            f"Loaded {len(self._templates)} templates from {origin}: "
            f"{', '.join(sorted(self._templates))}"
        )

    # ------------------------
    # Constructors
    # ------------------------
    @classmethod
    def from_defaults(cls) -> TemplateRegistry:
        """Load the bundled default template set."""
        root = files(RESOURCE_PACKAGE) / DEFAULTS_DIR
        sources = cls._read_entries(sorted(root.iterdir(), key=lambda e: e.name), "defaults")
        return cls(sources, origin="defaults", required=DEFAULT_REQUIRED_SLOTS)

    @classmethod
    def from_data(
        cls,
        texts: Iterable[TemplateText] | Mapping[str, TemplateText],
        *,
        required: Iterable[TemplateSlot | str] = (),
    ) -> TemplateRegistry:
        """
        Load templates from raw texts.

        A mapping gives slot names explicitly; otherwise every text must start
        with a slot declaration.
        """
        sources: dict[str, str] = {}
        if isinstance(texts, Mapping):
            for name, text in texts.items():
                declared, body = split_slot_declaration(_decode(text, name))
                sources[declared or name] = body
        else:
            for position, text in enumerate(texts):
                declared, body = split_slot_declaration(_decode(text, f"text #{position}"))
                if declared is None:
                    raise TemplateSourceError(
                        "Template text does not declare a slot name",
                        source=f"text #{position}",
                    )
                if declared in sources:
                    logger.debug(f"Template '{declared}' redefined by text #{position}")
                sources[declared] = body
        return cls(sources, origin="data", required=required)

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        *,
        required: Iterable[TemplateSlot | str] = (),
    ) -> TemplateRegistry:
        """Load every regular file of ``directory``, in file name order."""
        directory = Path(directory)
        try:
            entries = sorted(
                (entry for entry in directory.iterdir() if entry.is_file()),
                key=lambda entry: entry.name,
            )
        except OSError as e:
            error_msg = f"Failed to read template directory {directory}: {e}"
            logger.error(error_msg)
            raise TemplateSourceError(error_msg, source=str(directory)) from e

        sources = cls._read_entries(entries, str(directory))
        logger.info(f"Loaded custom templates from {directory}")
        return cls(sources, origin=str(directory), required=required)

    @classmethod
    def from_name(
        cls,
        name: str,
        *,
        required: Iterable[TemplateSlot | str] = (),
    ) -> TemplateRegistry:
        """Load the alternate set ``name`` from the bundled catalog."""
        if not _SET_NAME.match(name):
            raise TemplateSourceError(f"Invalid template set name: {name!r}", source=name)

        root = files(RESOURCE_PACKAGE) / CATALOG_DIR / name
        if not root.is_dir():
            raise TemplateSourceError(f"Unknown template set: {name}", source=name)

        entries = sorted(root.iterdir(), key=lambda e: e.name)[:MAX_CATALOG_ENTRIES]
        if not entries:
            raise TemplateSourceError(f"Template set {name} is empty", source=name)

        sources = cls._read_entries(entries, name)
        logger.info(f"Loaded template set {name}")
        return cls(sources, origin=f"catalog:{name}", required=required)

    @staticmethod
    def available_sets() -> list[str]:
        """Names of the alternate sets shipped in the catalog."""
        root = files(RESOURCE_PACKAGE) / CATALOG_DIR
        return sorted(entry.name for entry in root.iterdir() if entry.is_dir())

    @staticmethod
    def _read_entries(entries: Iterable[Path | Traversable], origin: str) -> dict[str, str]:
        sources: dict[str, str] = {}
        for entry in entries:
            try:
                text = entry.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                error_msg = f"Failed to read template {entry.name}: {e}"
                logger.error(error_msg)
                raise TemplateSourceError(error_msg, source=origin) from e

            declared, body = split_slot_declaration(text)
            sources[declared or _slot_from_file_name(entry.name)] = body
        return sources

    # ------------------------
    # Lookup
    # ------------------------
    @property
    def names(self) -> list[str]:
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        if isinstance(name, TemplateSlot):
            name = name.value
        return name in self._templates

    def missing_slots(self, slots: Iterable[TemplateSlot] = tuple(TemplateSlot)) -> list[TemplateSlot]:
        return [slot for slot in slots if slot.value not in self._templates]

    def get(self, name: TemplateSlot | str) -> Template:
        """
        Return the compiled template for ``name``.

        Raises:
            TemplateExecutionError: If the registry has no such template.
        """
        key = TemplateSlot(name).value if isinstance(name, TemplateSlot) else name
        try:
            return self._templates[key]
        except KeyError:
            raise TemplateExecutionError(
                f"No template named '{key}' in {self.origin}", template=key
            ) from None
