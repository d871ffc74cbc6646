"""
Qt Linguist ``.ts`` codec, importer and exporter.

A ``.ts`` file is one serialization of translatable units for one target
locale. Each ``<context>`` is a standard, each ``<message>`` a unit:

    ==========================  ==========================================
    ``.ts``                     unit
    ==========================  ==========================================
    ``<context><name>``         standard name
    ``<source>``                canonical source text
    ``<comment>``               ``"<kind label> <code>"``, e.g.
                                ``"Name of symbol 104.2"``
    ``<translation>``           translated text, state from ``type``:
                                none + text → translated,
                                ``unfinished`` → unfinished,
                                ``obsolete`` / ``vanished`` → obsolete
    ==========================  ==========================================

Manifesto:
    One malformed message must not block loading an entire standard. The
    importer records each bad message in a :class:`Quarantine` (stage,
    reason code, detail, raw fields, position) and carries on.

    Exporting an imported document and importing it again yields the same
    units in the same states.

Architecture:
    ::

        .ts text ──parse_ts()──▶ TsDocument ──import_document()──▶ LocalizationStore
                                     │                                │
                                     └──merge_translations()──────────┤
                                                                      │
        .ts text ◀──write_ts()── TsDocument ◀──export_document()──────┘

Tags:
    localization, qt-linguist, xml, import, export, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any
from xml.etree import ElementTree

from symcat.catalog.codes import SymbolCode, parse
from symcat.core.errors import CatalogError, ImportFormatError, StaleTranslationKeyError
from symcat.core.logging import LogContext, get_logger
from symcat.core.quarantine import Quarantine
from symcat.core.settings import get_settings

from .store import LocalizationStore
from .units import EntryKind, TranslatableUnit, Translation, UnitState

logger = get_logger(__name__)

TS_VERSION = "2.1"

_COMMENT_RE = re.compile(r"^(Color|Name of symbol|Description of symbol)\s+(\S+)$")

_OBSOLETE_TYPES = frozenset({"obsolete", "vanished"})
_KNOWN_TYPES = _OBSOLETE_TYPES | {"unfinished"}


# =============================================================================
# DOCUMENT MODEL
# =============================================================================


@dataclass
class TsMessage:
    source: str | None
    comment: str | None = None
    translation: str = ""
    translation_type: str | None = None
    numerus: bool = False

    @property
    def is_obsolete(self) -> bool:
        return self.translation_type in _OBSOLETE_TYPES

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TsContext:
    name: str
    messages: list[TsMessage] = field(default_factory=list)


@dataclass
class TsDocument:
    language: str | None = None
    source_language: str | None = None
    version: str = TS_VERSION
    contexts: list[TsContext] = field(default_factory=list)

    def context(self, name: str) -> TsContext | None:
        return next((c for c in self.contexts if c.name == name), None)

    def messages(self):
        """Yield ``(context, index, message)`` in document order."""
        for ctx in self.contexts:
            for index, message in enumerate(ctx.messages):
                yield ctx, index, message

    def __len__(self) -> int:
        return sum(len(c.messages) for c in self.contexts)


def parse_comment(comment: str | None) -> tuple[EntryKind, SymbolCode]:
    """
    Split a message comment into entry kind and code.

    Raises:
        ImportFormatError: the comment does not name a known entry kind
        MalformedCodeError: the code part does not parse

    Examples:
        >>> parse_comment("Description of symbol 104.2")
        (<EntryKind.SYMBOL_DESCRIPTION: 'Description of symbol'>, SymbolCode(segments=(104, 2)))
    """
    match = _COMMENT_RE.match((comment or "").strip())
    if not match:
        raise ImportFormatError(f"Unrecognised message comment {comment!r}")
    return EntryKind(match.group(1)), parse(match.group(2))


# =============================================================================
# CODEC
# =============================================================================


def parse_ts(text: str | bytes) -> TsDocument:
    """
    Parse ``.ts`` XML into a :class:`TsDocument`.

    Messages are kept as found; interpreting them is the importer's job.

    Raises:
        ImportFormatError: not well-formed XML, or the root is not ``<TS>``
    """
    try:
        root = ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        raise ImportFormatError(f"Not a well-formed .ts document: {e}", cause=e) from e
    if root.tag != "TS":
        raise ImportFormatError(f"Expected <TS> root element, found <{root.tag}>")

    doc = TsDocument(
        language=root.get("language"),
        source_language=root.get("sourcelanguage"),
        version=root.get("version", TS_VERSION),
    )
    for ctx_el in root.findall("context"):
        ctx = TsContext(name=(ctx_el.findtext("name") or "").strip())
        for msg_el in ctx_el.findall("message"):
            translation_el = msg_el.find("translation")
            ctx.messages.append(
                TsMessage(
                    source=msg_el.findtext("source"),
                    comment=msg_el.findtext("comment"),
                    translation=(translation_el.text or "") if translation_el is not None else "",
                    translation_type=translation_el.get("type") if translation_el is not None else None,
                    numerus=msg_el.get("numerus") == "yes",
                )
            )
        doc.contexts.append(ctx)
    return doc


def read_ts(path: str | Path) -> TsDocument:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImportFormatError(f"Cannot read {path}: {e}", cause=e).with_context(source_locator=str(path)) from e
    return parse_ts(data)


def write_ts(doc: TsDocument) -> str:
    """Serialize a document in the layout Qt Linguist writes."""
    attrs = {"version": doc.version}
    if doc.language:
        attrs["language"] = doc.language
    if doc.source_language:
        attrs["sourcelanguage"] = doc.source_language
    root = ElementTree.Element("TS", attrs)

    for ctx in doc.contexts:
        ctx_el = ElementTree.SubElement(root, "context")
        ElementTree.SubElement(ctx_el, "name").text = ctx.name
        for message in ctx.messages:
            msg_el = ElementTree.SubElement(ctx_el, "message")
            ElementTree.SubElement(msg_el, "source").text = message.source or ""
            if message.comment:
                ElementTree.SubElement(msg_el, "comment").text = message.comment
            translation_el = ElementTree.SubElement(msg_el, "translation")
            if message.translation_type:
                translation_el.set("type", message.translation_type)
            if message.translation:
                translation_el.text = message.translation

    ElementTree.indent(root, space="    ")
    # a raw CR in text would come back as LF from any XML parser
    body = ElementTree.tostring(root, encoding="unicode").replace("\r", "&#13;")
    return f'<?xml version="1.0" encoding="utf-8"?>\n<!DOCTYPE TS>\n{body}\n'


def save_ts(doc: TsDocument, path: str | Path) -> Path:
    path = Path(path)
    path.write_text(write_ts(doc), encoding="utf-8")
    return path


# =============================================================================
# IMPORT / MERGE
# =============================================================================


@dataclass
class ImportReport:
    """Outcome of importing or merging one document."""

    locale: str
    source_locator: str | None = None
    imported: int = 0
    skipped: int = 0
    standards: list[str] = field(default_factory=list)
    quarantine: Quarantine = field(default_factory=Quarantine)

    @property
    def ok(self) -> bool:
        return self.quarantine.count == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "locale": self.locale,
            "source_locator": self.source_locator,
            "imported": self.imported,
            "skipped": self.skipped,
            "quarantined": self.quarantine.count,
            "standards": list(self.standards),
            "reasons": self.quarantine.by_reason(),
            "entries": [e.to_dict() for e in self.quarantine],
        }


def _message_key(ctx: TsContext, message: TsMessage) -> tuple[EntryKind, SymbolCode]:
    if not ctx.name:
        raise ImportFormatError("Context without a <name>")
    if message.source is None:
        raise ImportFormatError("Message without a <source>")
    if message.numerus:
        raise ImportFormatError("Plural (numerus) messages are not supported")
    if message.translation_type is not None and message.translation_type not in _KNOWN_TYPES:
        raise ImportFormatError(f"Unknown translation type {message.translation_type!r}")
    return parse_comment(message.comment)


def _translation_of(message: TsMessage) -> Translation | None:
    if not message.translation:
        return None
    if message.translation_type == "unfinished":
        return Translation(message.translation, finished=False)
    return Translation(message.translation, finished=True)


def _locale_for(doc: TsDocument, locale: str | None) -> str:
    """The locale a document's translations belong to.

    A declared ``language`` wins; ``locale`` only labels documents that
    declare none, and must agree with the declaration otherwise.
    """
    if locale and doc.language and locale != doc.language:
        raise ImportFormatError(
            f"Document declares language {doc.language!r}, not {locale!r}"
        ).with_context(locale=locale)
    return doc.language or locale or get_settings().default_locale


def import_document(
    doc: TsDocument,
    store: LocalizationStore | None = None,
    *,
    locale: str | None = None,
    source_locator: str | None = None,
) -> tuple[LocalizationStore, ImportReport]:
    """
    Load every message of a document as a translatable unit.

    Bad messages are quarantined; the rest are imported. Returns the store
    (a new one unless given) and the import report.

    Translations are filed under the document's declared ``language``;
    ``locale`` labels documents that declare none.

    Raises:
        ImportFormatError: ``locale`` contradicts the declared language
    """
    store = store if store is not None else LocalizationStore()
    locale = _locale_for(doc, locale)
    report = ImportReport(locale=locale, source_locator=source_locator, quarantine=Quarantine(source_locator))

    with LogContext(locale=locale, source=source_locator):
        for ctx, index, message in doc.messages():
            position = f"{ctx.name}#{index}"
            try:
                kind, code = _message_key(ctx, message)
                translation = _translation_of(message)
                store.restore(
                    ctx.name,
                    kind,
                    code,
                    message.source,
                    obsolete=message.is_obsolete,
                    translations={locale: translation} if translation is not None else None,
                )
            except CatalogError as e:
                report.quarantine.reject("IMPORT", e, raw_data=message.to_dict(), position=position)
                continue
            report.imported += 1
            if ctx.name not in report.standards:
                report.standards.append(ctx.name)

        logger.info("ts_import_completed", imported=report.imported, quarantined=report.quarantine.count)
    return store, report


def merge_translations(
    store: LocalizationStore,
    doc: TsDocument,
    *,
    locale: str | None = None,
    source_locator: str | None = None,
) -> ImportReport:
    """
    Apply a document's translations to units already in the store.

    Only current messages with translated text are applied. A message whose
    key has no current unit with the same source text is quarantined as
    ``StaleTranslationKey`` (typically a renumbered or reworded symbol).
    """
    locale = _locale_for(doc, locale)
    report = ImportReport(locale=locale, source_locator=source_locator, quarantine=Quarantine(source_locator))

    for ctx, index, message in doc.messages():
        if message.is_obsolete or not message.translation:
            report.skipped += 1
            continue
        position = f"{ctx.name}#{index}"
        try:
            kind, code = _message_key(ctx, message)
            current = store.current(ctx.name, kind, code)
            if current is None or current.source != message.source:
                raise StaleTranslationKeyError(ctx.name, kind.value, code).with_context(locale=locale)
            store.set_translation(
                ctx.name,
                kind,
                code,
                locale,
                message.translation,
                finished=message.translation_type != "unfinished",
            )
        except CatalogError as e:
            report.quarantine.reject("MERGE", e, raw_data=message.to_dict(), position=position)
            continue
        report.imported += 1
        if ctx.name not in report.standards:
            report.standards.append(ctx.name)

    logger.info(
        "ts_merge_completed",
        locale=locale,
        source=source_locator,
        merged=report.imported,
        skipped=report.skipped,
        quarantined=report.quarantine.count,
    )
    return report


# =============================================================================
# EXPORT
# =============================================================================


def _message_for(unit: TranslatableUnit, locale: str) -> TsMessage:
    state = unit.state(locale)
    if state == UnitState.TRANSLATED:
        translation_type = None
    else:
        translation_type = state.value
    return TsMessage(
        source=unit.source,
        comment=unit.comment,
        translation=unit.translation(locale) or "",
        translation_type=translation_type,
    )


def export_document(
    store: LocalizationStore,
    locale: str,
    *,
    standards: list[str] | None = None,
    source_language: str | None = "en",
) -> TsDocument:
    """Build a ``.ts`` document for one locale, obsolete history included."""
    doc = TsDocument(language=locale, source_language=source_language)
    for name in standards if standards is not None else store.standards():
        doc.contexts.append(
            TsContext(name=name, messages=[_message_for(u, locale) for u in store.units(name)])
        )
    return doc
