"""Loading of Wavefront OBJ geometry into flat, indexed triangle meshes."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from .mtl import Material, MaterialFileReader, parse_float

MaterialReader = Callable[[str], "tuple[list[Material], dict[str, int]]"]

_DIGITS = "0123456789"
_C_SPACE = " \t\n\v\f\r"
_TRIPLE_STOP = "/ \t\r"


class ObjLoadError(RuntimeError):
    """Raised when an OBJ file cannot be opened or refers to missing data."""


@dataclass(frozen=True)
class VertexIndex:
    """Zero-based position, texture-coordinate and normal indices; -1 means absent."""

    v_idx: int = -1
    vt_idx: int = -1
    vn_idx: int = -1


@dataclass
class MeshData:
    """Flattened vertex attributes with triangle indices and per-triangle materials."""

    positions: list[float] = field(default_factory=list)
    normals: list[float] = field(default_factory=list)
    texcoords: list[float] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    material_ids: list[int] = field(default_factory=list)


@dataclass
class Shape:
    """A named group of triangles sharing one material."""

    name: str = ""
    mesh: MeshData = field(default_factory=MeshData)


def fix_index(idx: int, n: int) -> int:
    """Make a one-based OBJ index zero-based; negative indices count back from ``n``."""
    if idx > 0:
        return idx - 1
    if idx == 0:
        return 0
    return n + idx


def _atoi(text: str) -> int:
    text = text.lstrip(_C_SPACE)
    negative = text[:1] == "-"
    if text[:1] in ("+", "-"):
        text = text[1:]
    end = 0
    while end < len(text) and text[end] in _DIGITS:
        end += 1
    value = int(text[:end]) if end else 0
    return -value if negative else value


def _span_until(text: str, stops: str) -> int:
    for position, char in enumerate(text):
        if char in stops:
            return position
    return len(text)


def _skip_field(text: str) -> str:
    return text[_span_until(text, _TRIPLE_STOP):]


def parse_triple(
    token: str, vsize: int, vnsize: int, vtsize: int
) -> tuple[VertexIndex, str]:
    """Parse one face vertex (``i``, ``i/j``, ``i//k`` or ``i/j/k``).

    Returns the zero-based indices and the text that follows the vertex.
    """
    rest = token
    v_idx = fix_index(_atoi(rest), vsize)
    rest = _skip_field(rest)
    if not rest.startswith("/"):
        return VertexIndex(v_idx), rest
    rest = rest[1:]

    if rest.startswith("/"):
        rest = rest[1:]
        vn_idx = fix_index(_atoi(rest), vnsize)
        return VertexIndex(v_idx, -1, vn_idx), _skip_field(rest)

    vt_idx = fix_index(_atoi(rest), vtsize)
    rest = _skip_field(rest)
    if not rest.startswith("/"):
        return VertexIndex(v_idx, vt_idx), rest

    rest = rest[1:]
    vn_idx = fix_index(_atoi(rest), vnsize)
    return VertexIndex(v_idx, vt_idx, vn_idx), _skip_field(rest)


def _is_directive(text: str, keyword: str) -> bool:
    size = len(keyword)
    return text.startswith(keyword) and len(text) > size and text[size] in " \t"


def _first_word(text: str) -> str:
    words = text.split()
    return words[0] if words else ""


def _clean_lines(stream: Iterable[str]) -> Iterable[str]:
    for raw in stream:
        line = raw.split("\0", 1)[0]
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        yield line


class _ObjParser:
    def __init__(self, material_reader: MaterialReader) -> None:
        self.read_materials = material_reader
        self.v: list[float] = []
        self.vn: list[float] = []
        self.vt: list[float] = []
        self.faces: list[list[VertexIndex]] = []
        self.name = ""
        self.material = -1
        self.material_map: dict[str, int] = {}
        self.materials: list[Material] = []
        self.shapes: list[Shape] = []

    def _vertex(self, cache: dict[VertexIndex, int], mesh: MeshData, vi: VertexIndex) -> int:
        cached = cache.get(vi)
        if cached is not None:
            return cached

        if not 0 <= vi.v_idx < len(self.v) // 3:
            raise ObjLoadError(f"Face refers to missing vertex position {vi.v_idx + 1}")
        mesh.positions.extend(self.v[3 * vi.v_idx : 3 * vi.v_idx + 3])

        if vi.vn_idx >= 0:
            if vi.vn_idx >= len(self.vn) // 3:
                raise ObjLoadError(f"Face refers to missing normal {vi.vn_idx + 1}")
            mesh.normals.extend(self.vn[3 * vi.vn_idx : 3 * vi.vn_idx + 3])

        if vi.vt_idx >= 0:
            if vi.vt_idx >= len(self.vt) // 2:
                raise ObjLoadError(
                    f"Face refers to missing texture coordinate {vi.vt_idx + 1}"
                )
            mesh.texcoords.extend(self.vt[2 * vi.vt_idx : 2 * vi.vt_idx + 2])

        index = len(mesh.positions) // 3 - 1
        cache[vi] = index
        return index

    def flush(self) -> None:
        """Turn the pending faces into a shape, fanning polygons into triangles."""
        if not self.faces:
            return
        shape = Shape(name=self.name)
        cache: dict[VertexIndex, int] = {}
        for face in self.faces:
            if len(face) < 3:
                continue
            first = face[0]
            for previous, current in zip(face[1:], face[2:]):
                shape.mesh.indices.extend(
                    self._vertex(cache, shape.mesh, vi) for vi in (first, previous, current)
                )
                shape.mesh.material_ids.append(self.material)
        self.shapes.append(shape)
        self.faces = []

    def _face(self, directive: str) -> None:
        rest = directive[2:].lstrip(" \t")
        face: list[VertexIndex] = []
        while rest and rest[0] not in "\r\n":
            vi, rest = parse_triple(
                rest, len(self.v) // 3, len(self.vn) // 3, len(self.vt) // 2
            )
            face.append(vi)
            rest = rest.lstrip(" \t\r")
        self.faces.append(face)

    def _group(self, directive: str) -> None:
        self.flush()
        names: list[str] = []
        rest = directive
        while rest and rest[0] not in "\r\n":
            rest = rest.lstrip(" \t")
            end = _span_until(rest, " \t\r")
            names.append(rest[:end])
            rest = rest[end:].lstrip(" \t\r")
        self.name = names[1] if len(names) > 1 else ""

    def _material_library(self, directive: str) -> None:
        loaded, loaded_map = self.read_materials(_first_word(directive[7:]))
        offset = len(self.materials)
        for name, index in loaded_map.items():
            self.material_map.setdefault(name, index + offset)
        self.materials.extend(loaded)

    def feed(self, line: str) -> None:
        directive = line.lstrip(" \t")
        if not directive or directive.startswith("#"):
            return

        if _is_directive(directive, "v"):
            rest = directive[2:]
            for _ in range(3):
                value, rest = parse_float(rest)
                self.v.append(value)
        elif _is_directive(directive, "vn"):
            rest = directive[3:]
            for _ in range(3):
                value, rest = parse_float(rest)
                self.vn.append(value)
        elif _is_directive(directive, "vt"):
            rest = directive[3:]
            for _ in range(2):
                value, rest = parse_float(rest)
                self.vt.append(value)
        elif _is_directive(directive, "f"):
            self._face(directive)
        elif _is_directive(directive, "usemtl"):
            self.flush()
            self.material = self.material_map.get(_first_word(directive[7:]), -1)
        elif _is_directive(directive, "mtllib"):
            self._material_library(directive)
        elif _is_directive(directive, "g"):
            self._group(directive)
        elif _is_directive(directive, "o"):
            self.flush()
            self.name = _first_word(directive[2:])


def load_obj_stream(
    stream: Iterable[str], material_reader: Optional[MaterialReader] = None
) -> tuple[list[Shape], list[Material]]:
    """Parse OBJ text lines into shapes and the materials their libraries define.

    ``material_reader`` is called with each ``mtllib`` name and returns the
    materials of that library with a map from name to index.
    """
    parser = _ObjParser(material_reader if material_reader is not None else MaterialFileReader())
    for line in _clean_lines(stream):
        parser.feed(line)
    parser.flush()
    return parser.shapes, parser.materials


def load_obj(
    path: str | os.PathLike, mtl_basepath: Optional[str] = None
) -> tuple[list[Shape], list[Material]]:
    """Load an OBJ file; material libraries are looked up under ``mtl_basepath``."""
    reader = MaterialFileReader(mtl_basepath or "")
    try:
        stream = open(path, encoding="utf-8", errors="replace", newline="\n")
    except OSError as error:
        raise ObjLoadError(f"Cannot open file [{os.fspath(path)}]") from error
    with stream:
        return load_obj_stream(stream, reader)