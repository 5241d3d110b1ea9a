from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Iterator, List, Optional, Union
from xml.parsers import expat

from real_income.domain.errors import EmptyResultError, ExtractionError
from real_income.domain.sdmx.models import (
    CODELIST,
    OBSERVATIONS,
    ExtractionMode,
    Item,
    Observation,
)

logger = logging.getLogger(__name__)

Record = Union[Item, Observation]

# Tamanho de cada pedaço entregue ao parser; os registros saem a cada pedaço.
CHUNK_SIZE = 64 * 1024

_UTF8_BOM = b"\xef\xbb\xbf"
_RE_XML_DECL = re.compile(rb"^\s*<\?xml[^>]*\?>")
_RE_DECL_ENCODING = re.compile(rb"""encoding\s*=\s*["']([A-Za-z0-9._-]+)["']""")

# Raiz sintética: o payload pode ter vários elementos de topo (ex.: só <Obs/> soltos).
_WRAP_OPEN = "<_records>"
_WRAP_CLOSE = "</_records>"


# ----------------------------
# Namespace-safe helpers
# ----------------------------

def localname(name: str) -> str:
    """
    Remove qualquer namespace antes do nome local:
      "str:Code"         -> "Code"   (prefixo cru, como o expat entrega)
      "{http://...}Code" -> "Code"   (forma Clark)
    """
    if "}" in name:
        name = name.rsplit("}", 1)[-1]
    return name.rsplit(":", 1)[-1]


def find_attr(attrib: Dict[str, str], local: str) -> Optional[str]:
    """Valor do atributo cujo localname é `local` (se houver mais de um, vale o último)."""
    value = None
    for key, v in attrib.items():
        if localname(key) == local:
            value = v
    return value


# ----------------------------
# Máquina de estados (single pass)
# ----------------------------

class _CodelistState:
    """
    <str:Code id="POL"><com:Name xml:lang="en">Poland</com:Name></str:Code>

    Regra do Name: captura se for lang="en" OU se ainda não há nome para o Code.
    Um "en" posterior sobrescreve; um não-"en" posterior é ignorado.
    """

    def __init__(self, emit: Callable[[Record], None]):
        self.emit = emit
        self.in_code = False
        self.current_id: Optional[str] = None
        self.current_name: Optional[str] = None
        self.capture_name_text = False
        self.name_text: List[str] = []

    def on_start(self, tag: str, attrib: Dict[str, str]) -> None:
        name = localname(tag)
        if name == "Code":
            self.in_code = True
            self.current_id = find_attr(attrib, "id")
            self.current_name = None
        elif self.in_code and name == "Name":
            lang = find_attr(attrib, "lang")
            is_en = lang is not None and lang.strip().lower() == "en"
            self.capture_name_text = is_en or self.current_name is None
            self.name_text = []

    def on_text(self, data: str) -> None:
        if self.capture_name_text:
            self.name_text.append(data)

    def on_end(self, tag: str) -> None:
        name = localname(tag)
        if name == "Name":
            if self.in_code and self.capture_name_text:
                text = "".join(self.name_text).strip()
                if text:
                    self.current_name = text
            self.capture_name_text = False
            self.name_text = []
            return

        if name == "Code" and self.in_code:
            if self.current_id:
                self.emit(Item(code=self.current_id, name=self.current_name or self.current_id))
            else:
                logger.debug("Code sem atributo id descartado")
            self.in_code = False
            self.current_id = None
            self.current_name = None


class _ObservationState:
    """<Obs TIME_PERIOD="2020-M01" OBS_VALUE="100.0"/>; parcial ou <= 0 é descartado."""

    def __init__(self, emit: Callable[[Record], None]):
        self.emit = emit

    def on_start(self, tag: str, attrib: Dict[str, str]) -> None:
        # <Obs .../> e <Obs ...>...</Obs> disparam o mesmo start com os atributos prontos
        if localname(tag) != "Obs":
            return

        period: Optional[str] = None
        value: Optional[float] = None
        for key, raw in attrib.items():
            k = localname(key)
            if k == "TIME_PERIOD":
                period = raw
            elif k == "OBS_VALUE":
                try:
                    value = float(raw)
                except ValueError as exc:
                    raise ExtractionError(f"OBS_VALUE not numeric: {raw!r}") from exc

        if period is None or value is None or not value > 0:
            logger.debug("Obs descartada: TIME_PERIOD=%s OBS_VALUE=%s", period, value)
            return
        self.emit(Observation(period_token=period, value=value))

    def on_text(self, data: str) -> None:
        pass

    def on_end(self, tag: str) -> None:
        pass


def _document_text(payload: bytes, mode: ExtractionMode) -> str:
    """Decodifica o payload e tira a declaração XML (não pode ficar dentro da raiz sintética)."""
    body = payload[len(_UTF8_BOM):] if payload.startswith(_UTF8_BOM) else payload
    encoding = "utf-8"
    decl = _RE_XML_DECL.match(body)
    if decl:
        enc = _RE_DECL_ENCODING.search(decl.group(0))
        if enc:
            encoding = enc.group(1).decode("ascii")
        body = body[decl.end():]
    try:
        return body.decode(encoding)
    except (LookupError, UnicodeDecodeError) as exc:
        raise ExtractionError(f"Invalid SDMX XML ({mode}): cannot decode as {encoding}") from exc


def iter_records(payload: bytes, mode: ExtractionMode) -> Iterator[Record]:
    """
    Streaming: percorre o XML uma única vez e emite Item (codelist) ou Observation.

    Nomes são comparados pelo localname cru (sem resolver URI de namespace), então
    prefixos não declarados são aceitos, assim como vários elementos de topo.
    Reiniciável do zero (chame de novo com o mesmo payload), não retomável no meio.
    XML malformado vira ExtractionError.
    """
    if mode not in (CODELIST, OBSERVATIONS):
        raise ValueError(f"modo de extração inválido: {mode!r}")

    pending: List[Record] = []
    state = _CodelistState(pending.append) if mode == CODELIST else _ObservationState(pending.append)

    # sem namespace_separator: o expat não resolve namespaces e entrega "str:Code"
    parser = expat.ParserCreate()
    parser.buffer_text = True
    parser.StartElementHandler = state.on_start
    parser.EndElementHandler = state.on_end
    parser.CharacterDataHandler = state.on_text

    text = _document_text(payload, mode)
    try:
        parser.Parse(_WRAP_OPEN, False)
        for i in range(0, len(text), CHUNK_SIZE):
            parser.Parse(text[i:i + CHUNK_SIZE], False)
            yield from pending
            pending.clear()
        parser.Parse(_WRAP_CLOSE, True)
    except expat.ExpatError as exc:
        raise ExtractionError(
            f"Invalid SDMX XML ({mode}): {expat.ErrorString(exc.code)} "
            f"(line {exc.lineno}, column {exc.offset})"
        ) from exc
    yield from pending


def extract_records(payload: bytes, mode: ExtractionMode) -> List[Record]:
    return list(iter_records(payload, mode))


# ----------------------------
# Pontos de chamada (mensagens específicas por modo)
# ----------------------------

def extract_codelist_items(payload: bytes) -> List[Item]:
    items = [r for r in extract_records(payload, CODELIST) if isinstance(r, Item)]
    if not items:
        raise EmptyResultError("Parsed 0 country codes from SDMX Central codelist")
    return items


def extract_observations(payload: bytes) -> List[Observation]:
    obs = [r for r in extract_records(payload, OBSERVATIONS) if isinstance(r, Observation)]
    if not obs:
        raise EmptyResultError("No observations found in SDMX XML response")
    return obs


def dedupe_items(items: List[Item]) -> List[Item]:
    """Primeira ocorrência de cada código vence (as seguintes costumam ser re-declarações sem tradução)."""
    seen = set()
    out: List[Item] = []
    for it in items:
        if it.code in seen:
            continue
        seen.add(it.code)
        out.append(it)
    return out


def sort_items_by_name(items: List[Item]) -> List[Item]:
    return sorted(items, key=lambda it: it.name.lower())
