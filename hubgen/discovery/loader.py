"""
Declaration Loader — Load and dump declaration documents as YAML.

Document shape:

    declarations:
      - name: IChatHubServerToClient
        methods:
          - name: UserJoined
            params: [{name: user, type: str}]
            returns: Awaitable[None]
      - name: IChatHubClientToServer
        methods:
          - name: SendMessage
            params: [{name: message, type: str}]
      - name: IChatHubContract
        markers:
          hub_client:
            uri: /chat
            push: IChatHubServerToClient
            invoke: IChatHubClientToServer
    fakes: [ChatHubContractClient]

Declaration markers are a mapping (only ``hub_client``); method markers
are a list (only ``invoke``). Anything else is rejected.
"""

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from hubgen.core.errors import DeclarationError
from hubgen.ir.enums import MarkerKind, ReturnKind
from hubgen.ir.schema import (
    Declaration,
    DeclarationDocument,
    HubClientMarker,
    MethodSignature,
    Parameter,
    ReturnType,
)

DECLARATION_MARKERS = {MarkerKind.HUB_CLIENT.value}
# Spelling of the invoke_method marker in documents
INVOKE_MARKER = "invoke"
METHOD_MARKERS = {INVOKE_MARKER}


def load_document(path: Union[str, Path]) -> DeclarationDocument:
    """
    Load a declaration document from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        DeclarationError: If the document is malformed
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Declaration document not found: {path}")

    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise DeclarationError(f"{path}: invalid YAML: {e}") from e

    return parse_document(data)


def load_document_from_string(text: str) -> DeclarationDocument:
    """Parse a declaration document from YAML text."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DeclarationError(f"invalid YAML: {e}") from e
    return parse_document(data)


def parse_document(data: Optional[dict]) -> DeclarationDocument:
    """Parse a declaration document from a dictionary."""
    if data is None:
        return DeclarationDocument()
    if not isinstance(data, dict):
        raise DeclarationError("Document root must be a mapping")

    unknown = set(data) - {"declarations", "fakes"}
    if unknown:
        raise DeclarationError(f"Unknown top-level keys: {', '.join(sorted(unknown))}")

    declarations = []
    seen: set[str] = set()
    for decl_data in data.get("declarations") or []:
        decl = parse_declaration(decl_data)
        if decl.name in seen:
            raise DeclarationError(f"Duplicate declaration: {decl.name}")
        seen.add(decl.name)
        declarations.append(decl)

    fakes = data.get("fakes") or []
    if not isinstance(fakes, list) or not all(isinstance(f, str) for f in fakes):
        raise DeclarationError("'fakes' must be a list of binding names")

    return DeclarationDocument(declarations=tuple(declarations), fakes=tuple(fakes))


def parse_declaration(data: Any) -> Declaration:
    """Parse a single declaration entry."""
    if not isinstance(data, dict) or "name" not in data:
        raise DeclarationError(f"Declaration must be a mapping with a name: {data!r}")

    name = data["name"]
    markers = data.get("markers") or {}
    if not isinstance(markers, dict):
        raise DeclarationError(f"{name}: declaration markers must be a mapping")

    unknown = set(markers) - DECLARATION_MARKERS
    if unknown:
        raise DeclarationError(f"{name}: unknown marker(s): {', '.join(sorted(unknown))}")

    hub_client = None
    if MarkerKind.HUB_CLIENT.value in markers:
        hub_client = _parse_hub_client(name, markers[MarkerKind.HUB_CLIENT.value])

    extends = data.get("extends") or []
    if isinstance(extends, str):
        extends = [extends]

    try:
        return Declaration(
            name=name,
            methods=tuple(parse_method(name, m) for m in data.get("methods") or []),
            extends=tuple(extends),
            hub_client=hub_client,
        )
    except ValidationError as e:
        raise DeclarationError(f"{name}: {e}") from e


def _parse_hub_client(name: str, data: Any) -> HubClientMarker:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise DeclarationError(f"{name}: hub_client marker must be a mapping")
    try:
        return HubClientMarker(
            uri=data.get("uri") or "",
            name=data.get("name"),
            push=data.get("push"),
            invoke=data.get("invoke"),
        )
    except ValidationError as e:
        raise DeclarationError(f"{name}: invalid hub_client marker: {e}") from e


def parse_method(owner: str, data: Any) -> MethodSignature:
    """Parse a single method entry."""
    if not isinstance(data, dict) or "name" not in data:
        raise DeclarationError(f"{owner}: method must be a mapping with a name: {data!r}")

    markers = data.get("markers") or []
    unknown = set(markers) - METHOD_MARKERS
    if unknown:
        raise DeclarationError(
            f"{owner}.{data['name']}: unknown method marker(s): {', '.join(sorted(unknown))}"
        )

    params = []
    for param in data.get("params") or []:
        if not isinstance(param, dict) or "name" not in param or "type" not in param:
            raise DeclarationError(
                f"{owner}.{data['name']}: parameter needs name and type: {param!r}"
            )
        params.append(Parameter(name=param["name"], type=str(param["type"])))

    returns = data.get("returns")
    return MethodSignature(
        name=data["name"],
        parameters=tuple(params),
        returns=ReturnType.unit_async() if returns is None else ReturnType.parse(str(returns)),
        owner=owner,
        invoke=INVOKE_MARKER in markers,
    )


# =============================================================================
# Dump
# =============================================================================

def _dump_method(method: MethodSignature) -> dict:
    data: dict[str, Any] = {"name": method.name}
    if method.parameters:
        data["params"] = [{"name": p.name, "type": p.type} for p in method.parameters]
    if method.returns.kind != ReturnKind.UNIT_ASYNC:
        data["returns"] = str(method.returns)
    if method.invoke:
        data["markers"] = [INVOKE_MARKER]
    return data


def _dump_declaration(decl: Declaration) -> dict:
    data: dict[str, Any] = {"name": decl.name}
    if decl.extends:
        data["extends"] = list(decl.extends)
    if decl.methods:
        data["methods"] = [_dump_method(m) for m in decl.methods]
    if decl.hub_client is not None:
        marker = decl.hub_client.model_dump(exclude_none=True)
        data["markers"] = {MarkerKind.HUB_CLIENT.value: marker}
    return data


def dump_document(
    document: DeclarationDocument,
    path: Optional[Union[str, Path]] = None,
) -> str:
    """
    Serialize a declaration document back to YAML.

    Writes to path when given; always returns the YAML text.
    """
    data: dict[str, Any] = {
        "declarations": [_dump_declaration(d) for d in document.declarations],
    }
    if document.fakes:
        data["fakes"] = list(document.fakes)

    text = yaml.safe_dump(data, sort_keys=False, default_flow_style=False)
    if path is not None:
        Path(path).write_text(text)
    return text
